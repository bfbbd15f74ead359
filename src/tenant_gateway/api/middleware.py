"""
tenant_gateway.api.middleware

Request pipeline middleware.

Responsibilities:
- Answer the status probe before anything else runs.
- Put every other request under its path-dependent deadline.
- Build the `RequestContext`: store handle (optionally explained) and tenant.
- Abort with 400/500 when the tenant can't be resolved.
"""

from __future__ import annotations

import sys
from collections.abc import Callable
from typing import TextIO

from starlette.requests import HTTPConnection
from starlette.types import ASGIApp, Receive, Scope, Send

from tenant_gateway.clock import ProcessClock
from tenant_gateway.context import RequestContext, bind_context
from tenant_gateway.db.store import ExplainableStore
from tenant_gateway.errors import GatewayError, InternalLookupError, render_error
from tenant_gateway.observability.logging import bind_request_fields, get_logger
from tenant_gateway.scheduler import LastPersisted
from tenant_gateway.settings import Settings
from tenant_gateway.status import status_response
from tenant_gateway.tenancy.resolver import resolve_site
from tenant_gateway.timeout import TimeoutGuard

log = get_logger(__name__)


class RequestContextMiddleware:
    """
    Pure ASGI middleware: it needs to see whether a response was started, which
    `BaseHTTPMiddleware` hides.
    """

    def __init__(
        self,
        app: ASGIApp,
        *,
        store: ExplainableStore,
        settings: Settings,
        clock: ProcessClock,
        last_persisted: LastPersisted,
        load_site: Callable[[str], bool] | None = None,
        explain_sink: TextIO | None = None,
    ) -> None:
        self.app = app
        self.store = store
        self.settings = settings
        self.clock = clock
        self.last_persisted = last_persisted
        self.guard = TimeoutGuard.from_settings(settings)
        self.load_site = load_site or self._default_load_site
        self.explain_sink = explain_sink

    def _default_load_site(self, path: str) -> bool:
        return not path.startswith(self.settings.site_exempt_paths)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        if scope["path"] == self.settings.status_path:
            resp = status_response(
                clock=self.clock,
                version=self.settings.version,
                last_persisted=self.last_persisted,
            )
            await resp(scope, receive, send)
            return

        async def handler(deadline: float, guarded_send: Send) -> None:
            await self._dispatch(scope, receive, guarded_send, deadline)

        await self.guard.run(scope, send, handler)

    async def _dispatch(self, scope: Scope, receive: Receive, send: Send, deadline: float) -> None:
        conn = HTTPConnection(scope)
        ctx = RequestContext(store=self.store, settings=self.settings, deadline=deadline)

        if not self.settings.prod:
            selector = conn.cookies.get(self.settings.explain_cookie)
            if selector is not None:
                # Fresh decorator for this request only; the shared store is untouched.
                ctx.store = self.store.explain(self.explain_sink or sys.stdout, filter=selector)

        bind_context(scope, ctx)

        if self.load_site(scope["path"]):
            host = conn.headers.get("host", "")
            try:
                async with ctx.store.session() as session:
                    ctx.site = await resolve_site(
                        session, host, prod=self.settings.prod, domain=self.settings.domain
                    )
            except GatewayError as e:
                await render_error(e, flash_cookie=self.settings.flash_cookie)(scope, receive, send)
                return
            except Exception:
                log.error("site_lookup_failed", host=host, exc_info=True)
                await render_error(InternalLookupError())(scope, receive, send)
                return
            bind_request_fields(site_id=ctx.site.id)

        await self.app(scope, receive, send)


# --- Module Notes -----------------------------------------------------------
# Order matters: status probe, deadline, store, explain, site. Authorization runs
# later, per route, through `auth.deps.require`.
