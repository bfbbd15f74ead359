"""
tests.test_timeout

Deadline selection and the 504 written by `TimeoutGuard`.

Responsibilities:
- Exercise the guard directly against raw ASGI handlers.
- Check the guard end-to-end through the app with a tiny budget.
"""

from __future__ import annotations

import asyncio
from typing import Any

import pytest
from fastapi import Request

from tenant_gateway.context import get_request_context
from tenant_gateway.db.models import Site
from tenant_gateway.timeout import TimeoutGuard


def _scope(path: str) -> dict[str, Any]:
    return {"type": "http", "path": path, "method": "GET", "headers": []}


class _Recorder:
    def __init__(self) -> None:
        self.messages: list[dict[str, Any]] = []

    async def __call__(self, message: dict[str, Any]) -> None:
        self.messages.append(message)

    @property
    def statuses(self) -> list[int]:
        return [m["status"] for m in self.messages if m["type"] == "http.response.start"]

    @property
    def body(self) -> bytes:
        return b"".join(m.get("body", b"") for m in self.messages if m["type"] == "http.response.body")


@pytest.mark.parametrize(
    ("path", "budget"),
    [
        ("/admin", 120),
        ("/admin/anything", 120),
        ("/", 11),
        ("/settings", 3),
        ("/api/v0/me", 3),
        ("/x/admin", 3),
    ],
)
def test_budget_by_path(path: str, budget: float) -> None:
    assert TimeoutGuard().budget(path) == budget


@pytest.mark.asyncio
async def test_fast_handler_never_gets_504() -> None:
    send = _Recorder()

    async def handler(deadline: float, guarded_send) -> None:
        assert deadline > asyncio.get_running_loop().time()
        await guarded_send({"type": "http.response.start", "status": 200, "headers": []})
        await guarded_send({"type": "http.response.body", "body": b"ok"})

    await TimeoutGuard(default=0.05).run(_scope("/page"), send, handler)

    assert send.statuses == [200]
    assert send.body == b"ok"


@pytest.mark.asyncio
async def test_silent_handler_past_deadline_gets_504() -> None:
    send = _Recorder()

    async def handler(deadline: float, guarded_send) -> None:
        await asyncio.sleep(5)

    await TimeoutGuard(default=0.02).run(_scope("/page"), send, handler)

    assert send.statuses == [504]
    assert send.body == b"Server timed out"


@pytest.mark.asyncio
async def test_committed_response_is_not_overwritten() -> None:
    send = _Recorder()

    async def handler(deadline: float, guarded_send) -> None:
        await guarded_send({"type": "http.response.start", "status": 200, "headers": []})
        await asyncio.sleep(5)

    await TimeoutGuard(default=0.02).run(_scope("/page"), send, handler)

    assert send.statuses == [200]
    assert send.body == b""


@pytest.mark.asyncio
async def test_handler_swallowing_cancellation_still_gets_504() -> None:
    send = _Recorder()

    async def handler(deadline: float, guarded_send) -> None:
        try:
            await asyncio.sleep(5)
        except asyncio.CancelledError:
            pass

    await TimeoutGuard(default=0.02).run(_scope("/page"), send, handler)

    assert send.statuses == [504]


@pytest.mark.asyncio
async def test_foreign_timeout_error_propagates() -> None:
    async def handler(deadline: float, guarded_send) -> None:
        raise TimeoutError("upstream")

    with pytest.raises(TimeoutError, match="upstream"):
        await TimeoutGuard(default=5).run(_scope("/page"), _Recorder(), handler)


@pytest.mark.asyncio
async def test_slow_route_times_out_through_app(make_app, serve) -> None:
    app = make_app(timeout_default_s=0.2)

    async def slow() -> dict[str, str]:
        await asyncio.sleep(5)
        return {"status": "late"}

    app.add_api_route("/slow", slow)

    async with serve(app, Site(id=1, code="acme", cname="test")) as client:
        r = await client.get("/slow")
        assert r.status_code == 504
        assert r.text == "Server timed out"

        # Other paths keep their own budgets.
        r = await client.get("/healthz")
        assert r.status_code == 200


@pytest.mark.asyncio
async def test_route_sees_its_deadline(make_app, serve) -> None:
    app = make_app(timeout_default_s=3)

    async def left(request: Request) -> dict[str, float]:
        ctx = get_request_context(request)
        return {"left": ctx.deadline - asyncio.get_running_loop().time()}

    app.add_api_route("/left", left)

    async with serve(app, Site(id=1, code="acme", cname="test")) as client:
        r = await client.get("/left")

    assert r.status_code == 200
    assert 0 < r.json()["left"] <= 3
