"""
tenant_gateway.auth.models

Auth domain models.

Responsibilities:
- Define the authenticated identity type (`Principal`) placed on the request context.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from tenant_gateway.db.models import User


@dataclass(frozen=True, slots=True)
class Principal:
    """
    Caller identity. An id of 0 means "not signed in".
    """

    id: int
    site_id: int
    email: str = ""
    api_token: str | None = field(default=None, repr=False)

    @classmethod
    def from_row(cls, row: User) -> Principal:
        return cls(id=row.id, site_id=row.site_id, email=row.email, api_token=row.api_token)

    @property
    def is_authenticated(self) -> bool:
        return self.id > 0


# --- Module Notes -----------------------------------------------------------
# `api_token` is kept out of repr so principals can be logged safely.
