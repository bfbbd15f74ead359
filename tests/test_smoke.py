"""
tests.test_smoke

Minimal smoke tests to validate the service can boot and serve core endpoints.

Responsibilities:
- Ensure the app starts and the probes answer for any host, with or without sites.
"""

from __future__ import annotations

import pytest

from tenant_gateway.db.models import Site


@pytest.mark.asyncio
async def test_health_endpoints_need_no_site(make_app, serve) -> None:
    app = make_app(env="prod")

    async with serve(app) as client:
        r = await client.get("/healthz", headers={"Host": "nowhere.example"})
        assert r.status_code == 200
        assert r.json()["status"] == "ok"

        r = await client.get("/readyz", headers={"Host": "nowhere.example"})
        assert r.status_code == 200
        assert r.json() == {"status": "ready", "sites": 0}


@pytest.mark.asyncio
async def test_readyz_reports_missing_site_table(make_app, serve) -> None:
    app = make_app(env="prod")

    async with serve(app, Site(id=1, code="acme", cname="acme.com")) as client:
        r = await client.get("/readyz")
        assert r.json() == {"status": "ready", "sites": 1}

        async with app.state.store.engine.begin() as conn:
            await conn.exec_driver_sql("DROP TABLE users")
            await conn.exec_driver_sql("DROP TABLE sites")
        r = await client.get("/readyz")

    assert r.status_code == 503
    assert r.json() == {"status": "unavailable"}


@pytest.mark.asyncio
async def test_request_id_is_echoed(make_app, serve) -> None:
    app = make_app()

    async with serve(app, Site(id=1, code="acme", cname="test", public=True)) as client:
        r = await client.get("/", headers={"x-request-id": "req-123"})
        assert r.status_code == 200
        assert r.headers["x-request-id"] == "req-123"
        assert r.json() == {"site": "acme", "user": None}


# --- Module Notes -----------------------------------------------------------
# Pipeline behaviour is covered in test_pipeline.py; this file only checks booting.
