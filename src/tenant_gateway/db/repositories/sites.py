"""
tenant_gateway.db.repositories.sites

Repository for `Site` entities.

Responsibilities:
- Find the active site serving a host name.
- List all active sites regardless of host (used by the dev fallback).
- Count active sites for the readiness probe.
"""

from __future__ import annotations

from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_gateway.db.models import Site, SiteState


class SiteRepo:
    def __init__(self, session: AsyncSession, *, domain: str = "") -> None:
        self._session = session
        self._domain = domain

    async def by_host(self, host: str) -> Site | None:
        match = Site.cname == host
        # "<code>.<domain>" addresses the site by its code.
        suffix = f".{self._domain}" if self._domain else ""
        if suffix and host.endswith(suffix) and len(host) > len(suffix):
            match = or_(match, Site.code == host[: -len(suffix)])

        stmt = select(Site).where(match, Site.state == SiteState.active).limit(1)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def unscoped_list(self) -> list[Site]:
        stmt = select(Site).where(Site.state == SiteState.active).order_by(Site.id)
        return list((await self._session.execute(stmt)).scalars().all())

    async def count_active(self) -> int:
        stmt = select(func.count()).select_from(Site).where(Site.state == SiteState.active)
        return (await self._session.execute(stmt)).scalar_one()


# --- Module Notes -----------------------------------------------------------
# "Unscoped" means not filtered by the current site; deleted sites are still excluded.
