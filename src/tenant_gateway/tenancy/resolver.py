"""
tenant_gateway.tenancy.resolver

Host name to tenant resolution.

Responsibilities:
- Find the site serving the request's host.
- Outside production, fall back to the only site when exactly one exists.
- Classify failures as `SiteNotFound` (caller error) or `InternalLookupError`.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from tenant_gateway.db.models import Site
from tenant_gateway.db.repositories.sites import SiteRepo
from tenant_gateway.errors import InternalLookupError, SiteNotFound
from tenant_gateway.observability.logging import get_logger
from tenant_gateway.tenancy.models import Tenant

log = get_logger(__name__)


async def resolve_site(
    session: AsyncSession,
    host: str,
    *,
    prod: bool,
    domain: str = "",
) -> Tenant:
    repo = SiteRepo(session, domain=domain)

    row: Site | None = None
    failure: SQLAlchemyError | None = None
    try:
        row = await repo.by_host(host)
    except SQLAlchemyError as e:
        failure = e

    # Special case so "http://localhost:8081" works: there is no need to match
    # the host on dev when there is just one site.
    if not prod:
        if failure is not None:
            # Backends like PostgreSQL refuse further queries in an aborted transaction.
            await session.rollback()
        only = await _only_site(repo)
        if only is not None:
            return Tenant.from_row(only)

    if failure is not None:
        log.error("site_lookup_failed", host=host, exc_info=failure)
        raise InternalLookupError(str(failure)) from failure
    if row is None:
        raise SiteNotFound(host)
    return Tenant.from_row(row)


async def _only_site(repo: SiteRepo) -> Site | None:
    try:
        sites = await repo.unscoped_list()
    except SQLAlchemyError:
        # The host-based outcome still stands; this only disables the fallback.
        log.warning("single_site_fallback_failed", exc_info=True)
        return None
    return sites[0] if len(sites) == 1 else None


# --- Module Notes -----------------------------------------------------------
# The fallback is a local development convenience only: it never runs when
# `Settings.prod` is set, and session cookies are still checked against the site
# it returns.
