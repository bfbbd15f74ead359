"""
tenant_gateway.db.base

Declarative base shared by the `sites` and `users` tables.
"""

from __future__ import annotations

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    pass
