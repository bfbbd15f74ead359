"""
tenant_gateway.db.models

Persistence schema for tenants and their users.

Responsibilities:
- Define ORM models:
  - Site: a tenant, addressed by host name, optionally a child of another site
  - User: an identity belonging to exactly one site
"""

from __future__ import annotations

import enum
from datetime import datetime

from sqlalchemy import Enum, ForeignKey, String
from sqlalchemy.orm import Mapped, mapped_column

from tenant_gateway.db.base import Base


def _utcnow() -> datetime:
    # Persist naive UTC timestamps for simplicity; production systems may use tz-aware types.
    return datetime.utcnow()


class SiteState(enum.StrEnum):
    # Enum values are stored in DB; treat as stable API contract.
    active = "a"
    deleted = "d"


class Site(Base):
    __tablename__ = "sites"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    # NULL or 0 means a root site.
    parent: Mapped[int | None] = mapped_column(ForeignKey("sites.id"), nullable=True, index=True)

    code: Mapped[str] = mapped_column(String(64), nullable=False, unique=True)
    cname: Mapped[str | None] = mapped_column(String(255), nullable=True, unique=True)

    public: Mapped[bool] = mapped_column(nullable=False, default=False)
    admin: Mapped[bool] = mapped_column(nullable=False, default=False)

    state: Mapped[SiteState] = mapped_column(
        Enum(SiteState, values_callable=lambda e: [m.value for m in e]),
        nullable=False,
        default=SiteState.active,
        index=True,
    )

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


class User(Base):
    __tablename__ = "users"

    id: Mapped[int] = mapped_column(primary_key=True, autoincrement=True)
    site_id: Mapped[int] = mapped_column(ForeignKey("sites.id"), nullable=False, index=True)

    email: Mapped[str] = mapped_column(String(255), nullable=False)
    api_token: Mapped[str | None] = mapped_column(String(64), nullable=True, unique=True)

    created_at: Mapped[datetime] = mapped_column(nullable=False, default=_utcnow)


# --- Module Notes -----------------------------------------------------------
# Rows are converted into frozen records (`tenancy.models.Tenant`,
# `auth.models.Principal`) before they reach the request context.
