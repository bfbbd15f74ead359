"""
tenant_gateway.auth.deps

FastAPI dependency functions for authentication and authorization.

Responsibilities:
- Load the caller's principal and bearer credential onto the request context.
- Run authorization filters via a reusable dependency factory (`require`).
"""

from __future__ import annotations

import inspect

from fastapi import Depends, Request
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer

from tenant_gateway.auth.filters import AuthFilter
from tenant_gateway.auth.lookup import principal_from_session
from tenant_gateway.context import RequestContext, get_request_context

_bearer = HTTPBearer(auto_error=False)


async def current_context(
    request: Request,
    creds: HTTPAuthorizationCredentials | None = Depends(_bearer),
) -> RequestContext:
    ctx = get_request_context(request)
    if creds is not None and creds.credentials:
        ctx.credential = creds.credentials

    if ctx.user is None:
        token = request.cookies.get(ctx.settings.session_cookie)
        if token:
            ctx.user = await principal_from_session(ctx, token)
    return ctx


def require(*filters: AuthFilter):
    """
    Dependency that runs `filters` in order and aborts on the first rejection.
    """

    async def _dep(ctx: RequestContext = Depends(current_context)) -> RequestContext:
        for check in filters:
            decision = check(ctx)
            if inspect.isawaitable(decision):
                decision = await decision
            if decision is not None:
                raise decision
        return ctx

    return _dep


# --- Module Notes -----------------------------------------------------------
# Rejections are `errors.GatewayError` instances; the exception handler registered
# in `api.app.create_app` turns them into redirects or error responses.
