"""
tenant_gateway.auth.filters

Authorization filters.

Responsibilities:
- Provide independent predicates over the request context.
- Each returns None to let the request through, or the error to abort with.

Filters know nothing about each other; `auth.deps.require` runs them in the
order they are listed on a route.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable

from tenant_gateway.auth.lookup import principal_from_api_token
from tenant_gateway.context import RequestContext
from tenant_gateway.errors import Forbidden, GatewayError, NotFoundOrNotAdmin, Unauthenticated
from tenant_gateway.observability.logging import get_logger

log = get_logger(__name__)

# None lets the request through; an error aborts it.
AuthDecision = GatewayError | None
AuthFilter = Callable[[RequestContext], AuthDecision | Awaitable[AuthDecision]]


def _redirect(ctx: RequestContext) -> Unauthenticated:
    return Unauthenticated(ctx.settings.signin_path, flash="Need to log in")


def _signed_in(ctx: RequestContext) -> bool:
    return ctx.user is not None and ctx.user.is_authenticated


def logged_in(ctx: RequestContext) -> AuthDecision:
    if _signed_in(ctx):
        return None
    return _redirect(ctx)


def logged_in_or_public(ctx: RequestContext) -> AuthDecision:
    if _signed_in(ctx) or (ctx.site is not None and ctx.site.public):
        return None
    return _redirect(ctx)


def no_sub_sites(ctx: RequestContext) -> AuthDecision:
    if ctx.site is None or not ctx.site.is_child:
        return None
    log.error("no_sub_sites", site_id=ctx.site.id, parent=ctx.site.parent)
    return Forbidden("child sites can't access this")


def admin_only(ctx: RequestContext) -> AuthDecision:
    if ctx.site is not None and ctx.site.is_admin():
        return None
    # 404 rather than 403: don't reveal that the page exists.
    return NotFoundOrNotAdmin()


async def key_auth(ctx: RequestContext) -> AuthDecision:
    try:
        ctx.user = await principal_from_api_token(ctx, ctx.credential or "")
    except GatewayError as e:
        return e
    return None


# --- Module Notes -----------------------------------------------------------
# `key_auth` is the only filter with a side effect: it places the principal it
# resolved on the (request-private) context.
