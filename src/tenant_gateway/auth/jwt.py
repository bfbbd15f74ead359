"""
tenant_gateway.auth.jwt

Session token issuing and validation helpers.

Responsibilities:
- Issue signed session tokens binding a user id to a site id.
- Decode and validate session tokens with strict claim requirements.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
from typing import Any

import jwt
from jwt import InvalidTokenError

from tenant_gateway.settings import Settings


@dataclass(frozen=True, slots=True)
class SessionConfig:
    # Algorithm/issuer are enforced during decoding.
    alg: str
    issuer: str
    secret: str

    @classmethod
    def from_settings(cls, settings: Settings) -> SessionConfig:
        return cls(
            alg=settings.session_alg,
            issuer=settings.session_issuer,
            secret=settings.session_secret,
        )


@dataclass(frozen=True, slots=True)
class SessionClaims:
    user_id: int
    site_id: int


class SessionTokenError(Exception):
    pass


def issue_session_token(
    *,
    cfg: SessionConfig,
    user_id: int,
    site_id: int,
    ttl: timedelta = timedelta(days=30),
) -> str:
    now = datetime.now(tz=UTC)
    payload: dict[str, Any] = {
        "iss": cfg.issuer,
        "sub": str(user_id),
        "site": site_id,
        "iat": int(now.timestamp()),
        "exp": int((now + ttl).timestamp()),
    }
    return jwt.encode(payload, cfg.secret, algorithm=cfg.alg)


def decode_session_token(*, cfg: SessionConfig, token: str) -> SessionClaims:
    try:
        payload = jwt.decode(
            token,
            cfg.secret,
            algorithms=[cfg.alg],
            issuer=cfg.issuer,
            options={"require": ["exp", "iat", "iss", "sub", "site"]},
        )
    except InvalidTokenError as e:
        raise SessionTokenError(str(e)) from e

    try:
        return SessionClaims(user_id=int(payload["sub"]), site_id=int(payload["site"]))
    except (TypeError, ValueError) as e:
        raise SessionTokenError(f"malformed claims: {e}") from e


# --- Module Notes -----------------------------------------------------------
# Token issuing is used by `api/routers/dev_auth.py`; decoding by `auth/deps.py`.
