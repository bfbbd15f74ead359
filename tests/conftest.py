"""
tests.conftest

Shared fixtures.

Responsibilities:
- Settings pointing at a throwaway SQLite file per test.
- An app factory and a `serve` helper that runs the lifespan, seeds rows and
  hands back an httpx client bound to the app.
"""

from __future__ import annotations

import contextlib
import io
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import Any

import httpx
import pytest
from fastapi import FastAPI

from tenant_gateway.api.app import create_app
from tenant_gateway.clock import ProcessClock
from tenant_gateway.db.init_db import init_db
from tenant_gateway.scheduler import LastPersisted
from tenant_gateway.settings import Settings


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(env="test", database_url=f"sqlite+aiosqlite:///{tmp_path / 'gateway.db'}")


@pytest.fixture
def explain_sink() -> io.StringIO:
    return io.StringIO()


@pytest.fixture
def make_app(settings: Settings, explain_sink: io.StringIO) -> Callable[..., FastAPI]:
    def _make(
        *,
        clock: ProcessClock | None = None,
        last_persisted: LastPersisted | None = None,
        persist_job: Callable[[], Awaitable[None]] | None = None,
        **overrides: Any,
    ) -> FastAPI:
        return create_app(
            settings=settings.model_copy(update=overrides),
            clock=clock,
            last_persisted=last_persisted,
            persist_job=persist_job,
            explain_sink=explain_sink,
        )

    return _make


@pytest.fixture
def serve():
    @contextlib.asynccontextmanager
    async def _serve(app: FastAPI, *rows: Any) -> AsyncIterator[httpx.AsyncClient]:
        # httpx ASGITransport does not manage lifespan automatically; do it explicitly.
        async with app.router.lifespan_context(app):
            store = app.state.store
            # Prod settings skip table creation on startup.
            await init_db(store.engine)
            if rows:
                async with store.session() as session:
                    session.add_all(rows)
                    await session.commit()

            transport = httpx.ASGITransport(app=app)
            async with httpx.AsyncClient(transport=transport, base_url="http://test") as client:
                yield client

    return _serve


# --- Module Notes -----------------------------------------------------------
# Rows are ORM instances built inside each test; they are inserted in one commit
# so parents must precede children in the argument list.
