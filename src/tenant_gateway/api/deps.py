"""
tenant_gateway.api.deps

FastAPI dependency wiring for the API layer.

Responsibilities:
- Provide request-scoped DB sessions opened on the request's store handle.
"""

from __future__ import annotations

from collections.abc import AsyncIterator

from fastapi import Depends
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_gateway.context import RequestContext, get_request_context


async def db_session(
    ctx: RequestContext = Depends(get_request_context),
) -> AsyncIterator[AsyncSession]:
    # Opened on ctx.store so the explain decorator applies when it is active.
    async with ctx.store.session() as session:
        yield session


# --- Module Notes -----------------------------------------------------------
# Settings are read from the request context (`ctx.settings`) rather than the
# cached global, so tests can run apps with different settings side by side.
