"""
tenant_gateway.auth.lookup

User lookup for the two credential kinds a request can carry.

Responsibilities:
- Resolve a signed session cookie into a `Principal` of the current site.
- Resolve an API token into a `Principal` of the current site.
"""

from __future__ import annotations

from sqlalchemy.exc import SQLAlchemyError

from tenant_gateway.auth.jwt import SessionConfig, SessionTokenError, decode_session_token
from tenant_gateway.auth.models import Principal
from tenant_gateway.context import RequestContext
from tenant_gateway.db.repositories.users import UserRepo
from tenant_gateway.errors import InternalLookupError, InvalidToken
from tenant_gateway.observability.logging import get_logger

log = get_logger(__name__)


async def principal_from_session(ctx: RequestContext, token: str) -> Principal | None:
    """
    Returns None for anything that is not a valid session of this site; an
    anonymous request is not an error.
    """

    if ctx.site is None:
        return None
    try:
        claims = decode_session_token(cfg=SessionConfig.from_settings(ctx.settings), token=token)
    except SessionTokenError as e:
        log.info("session_rejected", reason=str(e))
        return None
    if claims.site_id != ctx.site.id:
        log.info("session_rejected", reason="site mismatch", token_site=claims.site_id)
        return None

    try:
        async with ctx.store.session() as session:
            row = await UserRepo(session).get_for_site(claims.user_id, ctx.site.id)
    except SQLAlchemyError as e:
        log.error("user_lookup_failed", exc_info=e)
        raise InternalLookupError(str(e)) from e
    return Principal.from_row(row) if row is not None else None


async def principal_from_api_token(ctx: RequestContext, token: str) -> Principal:
    if not token:
        raise InvalidToken("missing API token")
    if ctx.site is None:
        raise InvalidToken("invalid API token")

    try:
        async with ctx.store.session() as session:
            row = await UserRepo(session).by_token_and_site(token, ctx.site.id)
    except SQLAlchemyError as e:
        log.error("user_lookup_failed", exc_info=e)
        raise InternalLookupError(str(e)) from e
    if row is None:
        raise InvalidToken("invalid API token")
    return Principal.from_row(row)


# --- Module Notes -----------------------------------------------------------
# Both lookups open their own short session on the request's store handle, so the
# explain decorator covers them when it is active.
