"""
tenant_gateway.scheduler

Background persistence cycle and its "last persisted" marker.

Responsibilities:
- Track when the last background persistence cycle succeeded (`LastPersisted`).
- Run a persistence job periodically and update the marker on success.
"""

from __future__ import annotations

import asyncio
import threading
from collections.abc import Awaitable, Callable
from datetime import UTC, datetime

from tenant_gateway.clock import utcnow
from tenant_gateway.observability.logging import get_logger

log = get_logger(__name__)

# Reported until the first cycle completes.
ZERO_TIME = datetime(1, 1, 1, tzinfo=UTC)


class LastPersisted:
    def __init__(self, initial: datetime = ZERO_TIME) -> None:
        self._lock = threading.Lock()
        self._value = initial

    def get(self) -> datetime:
        with self._lock:
            return self._value

    def set(self, value: datetime) -> None:
        with self._lock:
            self._value = value


async def run_periodic(
    job: Callable[[], Awaitable[None]],
    marker: LastPersisted,
    *,
    interval: float,
    now: Callable[[], datetime] = utcnow,
) -> None:
    """
    Run `job` every `interval` seconds until cancelled.

    A failing cycle is logged and leaves the marker untouched; the next cycle
    runs on schedule.
    """

    while True:
        await asyncio.sleep(interval)
        try:
            await job()
        except Exception:
            log.exception("persist_cycle_failed")
            continue
        marker.set(now())


# --- Module Notes -----------------------------------------------------------
# The loop is started from the app lifespan (see `api.app.create_app`) only when a
# persistence job is supplied; the status probe reads the marker either way.
