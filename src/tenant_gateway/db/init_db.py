"""
tenant_gateway.db.init_db

Creates the `sites` and `users` tables when the app starts in dev or test.
"""

from __future__ import annotations

from sqlalchemy.ext.asyncio import AsyncEngine

from tenant_gateway.db import models  # noqa: F401  # registers Site/User on Base.metadata
from tenant_gateway.db.base import Base


async def init_db(engine: AsyncEngine) -> None:
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)


# --- Module Notes -----------------------------------------------------------
# Called from the lifespan in `api.app` unless `env` is prod; the tests also call
# it directly to seed prod-mode apps.
