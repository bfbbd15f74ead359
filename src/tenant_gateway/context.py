"""
tenant_gateway.context

Request-scoped execution context.

Responsibilities:
- Define `RequestContext`: store handle, deadline, tenant and principal for one request.
- Attach it to / read it from the ASGI scope.
"""

from __future__ import annotations

from dataclasses import dataclass

from fastapi import Request
from starlette.types import Scope

from tenant_gateway.auth.models import Principal
from tenant_gateway.db.store import Store
from tenant_gateway.settings import Settings
from tenant_gateway.tenancy.models import Tenant


@dataclass(slots=True)
class RequestContext:
    """
    Created by `api.middleware.RequestContextMiddleware` for every request and
    dropped when the request ends. Never shared between requests.
    """

    # The pooled store, or a per-request explain decorator around it.
    store: Store
    settings: Settings
    # Absolute deadline on the event loop clock.
    deadline: float
    site: Tenant | None = None
    user: Principal | None = None
    # Raw bearer credential, if the request carried one.
    credential: str | None = None


def bind_context(scope: Scope, ctx: RequestContext) -> None:
    # Starlette exposes scope["state"] as `request.state`.
    scope.setdefault("state", {})["ctx"] = ctx


def get_request_context(request: Request) -> RequestContext:
    ctx = getattr(request.state, "ctx", None)
    if ctx is None:
        raise RuntimeError("RequestContextMiddleware is not installed")
    return ctx


# --- Module Notes -----------------------------------------------------------
# Route dependencies reach the context through `get_request_context`; see
# `api.deps` and `auth.deps`.
