"""
tenant_gateway.api.routers.health

Probes for the load balancer in front of the gateway.

Responsibilities:
- `/healthz`: the process is up, whatever host it is addressed as.
- `/readyz`: the site table tenants are resolved from can be queried.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_gateway.api.deps import db_session
from tenant_gateway.db.repositories.sites import SiteRepo
from tenant_gateway.observability.logging import get_logger

log = get_logger(__name__)

router = APIRouter()


@router.get("/healthz")
async def healthz() -> dict[str, str]:
    return {"status": "ok"}


@router.get("/readyz")
async def readyz(session: AsyncSession = Depends(db_session)) -> JSONResponse:
    try:
        sites = await SiteRepo(session).count_active()
    except SQLAlchemyError:
        # Without the site table every tenant request would answer 500.
        log.warning("readiness_check_failed", exc_info=True)
        return JSONResponse({"status": "unavailable"}, status_code=503)
    return JSONResponse({"status": "ready", "sites": sites})


# --- Module Notes -----------------------------------------------------------
# Both paths are in `Settings.site_exempt_paths`: a fresh deployment with no sites
# is still live and ready.
