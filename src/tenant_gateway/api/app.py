"""
tenant_gateway.api.app

FastAPI app factory for the tenant gateway.

Responsibilities:
- Build the FastAPI application and register routers/middleware.
- Own the process-wide resources: pooled store, start time, persistence marker.
- Translate `GatewayError` into HTTP responses.
"""

from __future__ import annotations

import asyncio
import contextlib
from collections.abc import AsyncIterator, Awaitable, Callable
from typing import TextIO

from fastapi import FastAPI, Request
from starlette.responses import Response

from tenant_gateway.api.middleware import RequestContextMiddleware
from tenant_gateway.api.routers.dev_auth import router as dev_auth_router
from tenant_gateway.api.routers.health import router as health_router
from tenant_gateway.api.routers.site import router as site_router
from tenant_gateway.clock import ProcessClock
from tenant_gateway.db.init_db import init_db
from tenant_gateway.db.store import PooledStore
from tenant_gateway.errors import GatewayError, render_error
from tenant_gateway.observability.logging import configure_logging, get_logger
from tenant_gateway.observability.middleware import LogContextMiddleware
from tenant_gateway.scheduler import LastPersisted, run_periodic
from tenant_gateway.settings import Settings

log = get_logger(__name__)


def create_app(
    *,
    settings: Settings,
    store: PooledStore | None = None,
    clock: ProcessClock | None = None,
    last_persisted: LastPersisted | None = None,
    persist_job: Callable[[], Awaitable[None]] | None = None,
    explain_sink: TextIO | None = None,
) -> FastAPI:
    # Configure structured logging once at process startup (before app serves requests).
    configure_logging(service_name=settings.service_name, level=settings.log_level, json=settings.prod)

    # Captured once; uptime on the status probe is measured from here.
    clock = clock or ProcessClock.capture()
    store = store or PooledStore.from_settings(settings)
    last_persisted = last_persisted or LastPersisted()

    @contextlib.asynccontextmanager
    async def lifespan(_: FastAPI) -> AsyncIterator[None]:
        log.info("startup", env=settings.env)
        if settings.env in ("dev", "test"):
            # Dev/test convenience: create tables automatically.
            await init_db(store.engine)

        persist_task: asyncio.Task[None] | None = None
        if persist_job is not None:
            persist_task = asyncio.create_task(
                run_periodic(persist_job, last_persisted, interval=settings.persist_interval_s)
            )
        try:
            yield
        finally:
            if persist_task is not None:
                persist_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await persist_task
            await store.close()
            log.info("shutdown")

    app = FastAPI(
        title="Tenant Gateway",
        version=settings.version,
        docs_url="/docs",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.store = store
    app.state.last_persisted = last_persisted

    async def _gateway_error(_: Request, exc: GatewayError) -> Response:
        return render_error(exc, flash_cookie=settings.flash_cookie)

    app.add_exception_handler(GatewayError, _gateway_error)  # type: ignore[arg-type]

    # Last added runs first: log context wraps the request pipeline.
    app.add_middleware(
        RequestContextMiddleware,
        store=store,
        settings=settings,
        clock=clock,
        last_persisted=last_persisted,
        explain_sink=explain_sink,
    )
    app.add_middleware(LogContextMiddleware)

    app.include_router(health_router, tags=["health"])
    app.include_router(dev_auth_router)
    app.include_router(site_router)

    return app


# --- Module Notes -----------------------------------------------------------
# This file is intentionally small: app composition stays here; request policy
# lives in the middleware, tenancy and auth packages.
