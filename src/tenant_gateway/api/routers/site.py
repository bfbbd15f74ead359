"""
tenant_gateway.api.routers.site

Site-scoped pages, each guarded by a different filter chain.

Responsibilities:
- Show how routes compose authorization filters with `require(...)`.
- Return a small JSON summary of who is asking, for which site.
"""

from __future__ import annotations

from typing import Any

from fastapi import APIRouter, Depends

from tenant_gateway.auth.deps import require
from tenant_gateway.auth.filters import (
    admin_only,
    key_auth,
    logged_in,
    logged_in_or_public,
    no_sub_sites,
)
from tenant_gateway.context import RequestContext

router = APIRouter(tags=["site"])


def _summary(ctx: RequestContext) -> dict[str, Any]:
    return {
        "site": ctx.site.code if ctx.site is not None else None,
        "user": ctx.user.id if ctx.user is not None else None,
    }


@router.get("/")
async def dashboard(ctx: RequestContext = Depends(require(logged_in_or_public))) -> dict[str, Any]:
    return _summary(ctx)


@router.get("/settings")
async def site_settings(ctx: RequestContext = Depends(require(logged_in))) -> dict[str, Any]:
    return _summary(ctx)


@router.get("/sites")
async def sub_sites(
    ctx: RequestContext = Depends(require(logged_in, no_sub_sites)),
) -> dict[str, Any]:
    return _summary(ctx)


@router.get("/admin")
async def admin(ctx: RequestContext = Depends(require(logged_in, admin_only))) -> dict[str, Any]:
    return _summary(ctx)


@router.get("/api/v0/me")
async def api_me(ctx: RequestContext = Depends(require(key_auth))) -> dict[str, Any]:
    return _summary(ctx)


# --- Module Notes -----------------------------------------------------------
# Real page rendering lives elsewhere; these handlers only exist so the filter
# chains are reachable over HTTP.
