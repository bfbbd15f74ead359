"""
tenant_gateway.tenancy.models

Tenant domain model.

Responsibilities:
- Define the resolved tenant type (`Tenant`) placed on the request context.
"""

from __future__ import annotations

from dataclasses import dataclass

from tenant_gateway.db.models import Site


@dataclass(frozen=True, slots=True)
class Tenant:
    """
    A resolved site. A non-zero `parent` makes it a child site.
    """

    id: int
    code: str
    cname: str | None = None
    parent: int | None = None
    public: bool = False
    admin: bool = False

    @classmethod
    def from_row(cls, row: Site) -> Tenant:
        return cls(
            id=row.id,
            code=row.code,
            cname=row.cname,
            parent=row.parent,
            public=row.public,
            admin=row.admin,
        )

    @property
    def is_child(self) -> bool:
        return bool(self.parent)

    def is_admin(self) -> bool:
        return self.admin


# --- Module Notes -----------------------------------------------------------
# Frozen so authorization filters can read it without being able to change it.
