from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_gateway.db.models import User


class UserRepo:
    def __init__(self, session: AsyncSession) -> None:
        self._session = session

    async def get_for_site(self, user_id: int, site_id: int) -> User | None:
        stmt = select(User).where(User.id == user_id, User.site_id == site_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()

    async def by_token_and_site(self, token: str, site_id: int) -> User | None:
        stmt = select(User).where(User.api_token == token, User.site_id == site_id)
        return (await self._session.execute(stmt)).scalar_one_or_none()
