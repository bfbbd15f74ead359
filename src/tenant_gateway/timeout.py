"""
tenant_gateway.timeout

Per-request deadlines chosen by path.

Responsibilities:
- Pick a deadline budget for a request path.
- Run the downstream handler under that deadline.
- Answer 504 when the deadline expired before anything was written.
"""

from __future__ import annotations

import asyncio
from collections.abc import Awaitable, Callable

from starlette.responses import PlainTextResponse
from starlette.types import Message, Scope, Send

from tenant_gateway.errors import DeadlineExceeded
from tenant_gateway.observability.logging import get_logger
from tenant_gateway.settings import Settings

log = get_logger(__name__)

# Receives the absolute deadline (event loop clock) and the tracking `send`.
GuardedHandler = Callable[[float, Send], Awaitable[None]]


class TimeoutGuard:
    def __init__(self, *, admin: float = 120.0, root: float = 11.0, default: float = 3.0) -> None:
        self.admin = admin
        self.root = root
        self.default = default

    @classmethod
    def from_settings(cls, settings: Settings) -> TimeoutGuard:
        return cls(
            admin=settings.timeout_admin_s,
            root=settings.timeout_root_s,
            default=settings.timeout_default_s,
        )

    def budget(self, path: str) -> float:
        if path.startswith("/admin"):
            return self.admin
        if path == "/":
            return self.root
        return self.default

    async def run(self, scope: Scope, send: Send, handler: GuardedHandler) -> None:
        budget = self.budget(scope["path"])
        status = 0

        async def tracking_send(message: Message) -> None:
            nonlocal status
            if message["type"] == "http.response.start":
                status = message["status"]
            await send(message)

        deadline = asyncio.timeout(budget)
        try:
            async with deadline:
                await handler(deadline.when() or 0.0, tracking_send)
        except TimeoutError:
            # Only our own deadline is translated; anything else propagates.
            if not deadline.expired():
                raise

        if not deadline.expired():
            return
        if status:
            log.warning("deadline_exceeded_after_response", budget_s=budget, status=status)
            return

        log.warning("deadline_exceeded", budget_s=budget)
        err = DeadlineExceeded()
        resp = PlainTextResponse(err.detail, status_code=err.status_code)
        await resp(scope, _no_receive, send)


async def _no_receive() -> Message:
    return {"type": "http.disconnect"}


# --- Module Notes -----------------------------------------------------------
# `asyncio.timeout` cancels whatever the handler is awaiting when the deadline
# fires, including in-flight store queries, and always releases the timer when the
# `async with` block exits.
