"""
tests.test_resolver

Host-based tenant resolution and the single-site development fallback.
"""

from __future__ import annotations

import contextlib
from collections.abc import AsyncIterator
from typing import Any

import pytest
from sqlalchemy.exc import OperationalError

from tenant_gateway.db.init_db import init_db
from tenant_gateway.db.models import Site, SiteState
from tenant_gateway.db.repositories.sites import SiteRepo
from tenant_gateway.db.store import PooledStore
from tenant_gateway.errors import InternalLookupError, SiteNotFound
from tenant_gateway.settings import Settings
from tenant_gateway.tenancy.resolver import resolve_site


@contextlib.asynccontextmanager
async def _store(settings: Settings, *rows: Any, tables: bool = True) -> AsyncIterator[PooledStore]:
    store = PooledStore.from_settings(settings)
    try:
        if tables:
            await init_db(store.engine)
        if rows:
            async with store.session() as session:
                session.add_all(rows)
                await session.commit()
        yield store
    finally:
        await store.close()


@pytest.mark.asyncio
async def test_exact_cname_match(settings) -> None:
    rows = (Site(id=1, code="acme", cname="stats.acme.com"), Site(id=2, code="other"))
    async with _store(settings, *rows) as store, store.session() as session:
        site = await resolve_site(session, "stats.acme.com", prod=True)

    assert site.id == 1
    assert site.code == "acme"


@pytest.mark.asyncio
async def test_code_subdomain_match(settings) -> None:
    rows = (Site(id=1, code="acme"), Site(id=2, code="other"))
    async with _store(settings, *rows) as store, store.session() as session:
        site = await resolve_site(session, "other.example.net", prod=True, domain="example.net")

    assert site.id == 2


@pytest.mark.asyncio
async def test_unknown_host_in_prod_names_the_host(settings) -> None:
    async with _store(settings, Site(id=1, code="acme", cname="acme.com")) as store:
        async with store.session() as session:
            with pytest.raises(SiteNotFound) as exc_info:
                await resolve_site(session, "evil.example:8081", prod=True)

    assert exc_info.value.status_code == 400
    assert exc_info.value.host == "evil.example:8081"
    assert "evil.example:8081" in exc_info.value.detail


@pytest.mark.asyncio
async def test_dev_falls_back_to_the_only_site(settings) -> None:
    async with _store(settings, Site(id=7, code="solo", cname="solo.com")) as store:
        async with store.session() as session:
            site = await resolve_site(session, "localhost:8081", prod=False)

    assert site.id == 7


@pytest.mark.asyncio
async def test_dev_without_single_site_still_fails(settings) -> None:
    rows = (Site(id=1, code="a", cname="a.com"), Site(id=2, code="b", cname="b.com"))
    async with _store(settings, *rows) as store, store.session() as session:
        with pytest.raises(SiteNotFound):
            await resolve_site(session, "localhost", prod=False)


@pytest.mark.asyncio
async def test_deleted_sites_are_ignored(settings) -> None:
    rows = (
        Site(id=1, code="gone", cname="gone.com", state=SiteState.deleted),
        Site(id=2, code="live", cname="live.com"),
    )
    async with _store(settings, *rows) as store:
        async with store.session() as session:
            with pytest.raises(SiteNotFound):
                await resolve_site(session, "gone.com", prod=True)
        # One active site left, so dev resolves any host to it.
        async with store.session() as session:
            site = await resolve_site(session, "gone.com", prod=False)

    assert site.id == 2


@pytest.mark.asyncio
async def test_child_site_keeps_parent_reference(settings) -> None:
    rows = (Site(id=1, code="root", cname="root.com"), Site(id=2, code="kid", cname="kid.com", parent=1))
    async with _store(settings, *rows) as store, store.session() as session:
        site = await resolve_site(session, "kid.com", prod=True)

    assert site.parent == 1
    assert site.is_child


@pytest.mark.parametrize("prod", [True, False])
@pytest.mark.asyncio
async def test_lookup_failure_is_internal(settings, prod: bool) -> None:
    # No tables: every query fails at the database level.
    async with _store(settings, tables=False) as store, store.session() as session:
        with pytest.raises(InternalLookupError) as exc_info:
            await resolve_site(session, "acme.com", prod=prod)

    assert exc_info.value.status_code == 500
    assert exc_info.value.public_detail == "Internal Server Error"


@pytest.mark.asyncio
async def test_dev_fallback_rolls_back_the_failed_lookup(settings, monkeypatch) -> None:
    async def broken_by_host(self, host: str) -> Site | None:
        raise OperationalError("SELECT sites", {}, Exception("connection reset"))

    monkeypatch.setattr(SiteRepo, "by_host", broken_by_host)

    async with _store(settings, Site(id=7, code="solo", cname="solo.com")) as store:
        async with store.session() as session:
            rollbacks: list[bool] = []
            real_rollback = session.rollback

            async def rollback() -> None:
                rollbacks.append(True)
                await real_rollback()

            monkeypatch.setattr(session, "rollback", rollback)
            site = await resolve_site(session, "solo.com", prod=False)

    assert site.id == 7
    assert rollbacks == [True]
