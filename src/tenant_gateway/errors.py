"""
tenant_gateway.errors

Error taxonomy for the request pipeline.

Responsibilities:
- Define one exception type per abort outcome, each carrying its HTTP status.
- Translate those exceptions into HTTP responses at the boundary.
"""

from __future__ import annotations

from http import HTTPStatus

from starlette.responses import JSONResponse, RedirectResponse, Response


class GatewayError(Exception):
    """
    Base class for errors that end a request with a specific HTTP status.
    """

    status_code: int = 500

    def __init__(self, detail: str = "") -> None:
        super().__init__(detail)
        self.detail = detail

    @property
    def public_detail(self) -> str:
        # Empty details fall back to the status phrase ("Not Found", ...).
        return self.detail or HTTPStatus(self.status_code).phrase


class SiteNotFound(GatewayError):
    status_code = 400

    def __init__(self, host: str) -> None:
        super().__init__(f"no site at this domain ({host!r})")
        self.host = host


class InternalLookupError(GatewayError):
    status_code = 500

    @property
    def public_detail(self) -> str:
        # Logged server-side; the caller only sees the status phrase.
        return HTTPStatus(self.status_code).phrase


class Unauthenticated(GatewayError):
    status_code = 303

    def __init__(self, location: str, flash: str = "Need to log in") -> None:
        super().__init__(flash)
        self.location = location
        self.flash = flash


class InvalidToken(GatewayError):
    status_code = 401


class Forbidden(GatewayError):
    status_code = 403


class NotFoundOrNotAdmin(GatewayError):
    status_code = 404


class DeadlineExceeded(GatewayError):
    status_code = 504

    def __init__(self, detail: str = "Server timed out") -> None:
        super().__init__(detail)


class SerializationError(GatewayError):
    status_code = 500


def render_error(err: GatewayError, *, flash_cookie: str = "flash") -> Response:
    if isinstance(err, Unauthenticated):
        resp = RedirectResponse(err.location, status_code=err.status_code)
        # Flash messages live for a single page view.
        resp.set_cookie(flash_cookie, err.flash, max_age=30, httponly=True, samesite="lax")
        return resp
    return JSONResponse({"detail": err.public_detail}, status_code=err.status_code)


# --- Module Notes -----------------------------------------------------------
# The JSON error shape matches FastAPI's `HTTPException` rendering so clients see a
# single error format regardless of which layer aborted the request.
