from __future__ import annotations

from datetime import timedelta

from fastapi import APIRouter, Depends, HTTPException, Response
from pydantic import BaseModel, Field
from sqlalchemy.ext.asyncio import AsyncSession
from starlette.status import HTTP_404_NOT_FOUND

from tenant_gateway.api.deps import db_session
from tenant_gateway.auth.jwt import SessionConfig, issue_session_token
from tenant_gateway.context import RequestContext, get_request_context
from tenant_gateway.db.repositories.users import UserRepo

router = APIRouter(prefix="/v1/dev", tags=["dev"])


class DevSessionRequest(BaseModel):
    user_id: int = Field(ge=1)


class DevSessionResponse(BaseModel):
    user_id: int
    site_id: int


@router.post("/session", response_model=DevSessionResponse)
async def start_dev_session(
    body: DevSessionRequest,
    response: Response,
    ctx: RequestContext = Depends(get_request_context),
    session: AsyncSession = Depends(db_session),
) -> DevSessionResponse:
    settings = ctx.settings
    if settings.prod or ctx.site is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    user = await UserRepo(session).get_for_site(body.user_id, ctx.site.id)
    if user is None:
        raise HTTPException(status_code=HTTP_404_NOT_FOUND, detail="Not found")

    token = issue_session_token(
        cfg=SessionConfig.from_settings(settings),
        user_id=user.id,
        site_id=ctx.site.id,
        ttl=timedelta(minutes=settings.session_ttl_minutes),
    )
    response.set_cookie(settings.session_cookie, token, httponly=True, samesite="lax")
    return DevSessionResponse(user_id=user.id, site_id=ctx.site.id)
