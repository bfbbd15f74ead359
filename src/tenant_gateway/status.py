"""
tenant_gateway.status

Unauthenticated status probe.

Responsibilities:
- Report uptime, build version and the last persistence cycle as flat JSON.
- Stay independent of tenant resolution, deadlines and the store.
"""

from __future__ import annotations

import json

from starlette.responses import PlainTextResponse, Response

from tenant_gateway.clock import ProcessClock, format_duration, format_rfc3339_nano
from tenant_gateway.errors import SerializationError
from tenant_gateway.scheduler import LastPersisted


def status_response(*, clock: ProcessClock, version: str, last_persisted: LastPersisted) -> Response:
    try:
        body = json.dumps(
            {
                "uptime": format_duration(clock.uptime()),
                "version": version,
                "last_persisted_at": format_rfc3339_nano(last_persisted.get()),
            }
        )
    except (TypeError, ValueError) as e:
        err = SerializationError(str(e))
        return PlainTextResponse(err.detail, status_code=err.status_code)

    return Response(body, status_code=200, media_type="application/json")


# --- Module Notes -----------------------------------------------------------
# Called directly from `api.middleware.RequestContextMiddleware` before any other
# processing so the probe stays cheap; it is not a FastAPI route.
