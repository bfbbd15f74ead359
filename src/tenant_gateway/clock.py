"""
tenant_gateway.clock

Process start time and the time formats exposed by the status probe.

Responsibilities:
- Capture the process start timestamp exactly once (`ProcessClock.capture`).
- Format durations and timestamps the way the status probe reports them.
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta


def utcnow() -> datetime:
    return datetime.now(tz=UTC)


@dataclass(frozen=True, slots=True)
class ProcessClock:
    """
    Immutable process start time plus the clock used to measure uptime.
    """

    started: datetime
    now: Callable[[], datetime] = utcnow

    @classmethod
    def capture(cls, now: Callable[[], datetime] = utcnow) -> ProcessClock:
        return cls(started=now(), now=now)

    def uptime(self) -> timedelta:
        return self.now() - self.started


def format_duration(d: timedelta) -> str:
    """
    Render a duration as e.g. "1h2m3.5s", "250ms" or "0s".
    """

    us = (d.days * 86_400 + d.seconds) * 1_000_000 + d.microseconds
    if us == 0:
        return "0s"

    sign = "-" if us < 0 else ""
    us = abs(us)
    if us < 1_000:
        return f"{sign}{us}µs"
    if us < 1_000_000:
        return f"{sign}{_decimal(us, 1_000)}ms"

    hours, rem = divmod(us, 3_600_000_000)
    minutes, rem = divmod(rem, 60_000_000)
    out = sign
    if hours:
        out += f"{hours}h"
    if hours or minutes:
        out += f"{minutes}m"
    return f"{out}{_decimal(rem, 1_000_000)}s"


def _decimal(value: int, unit: int) -> str:
    whole, frac = divmod(value, unit)
    if not frac:
        return str(whole)
    width = len(str(unit)) - 1
    return f"{whole}.{frac:0{width}d}".rstrip("0")


def format_rfc3339_nano(ts: datetime) -> str:
    """
    RFC 3339 with a trimmed fractional second; naive values are taken as UTC.
    """

    if ts.tzinfo is None:
        ts = ts.replace(tzinfo=UTC)

    # strftime("%Y") does not zero-pad years below 1000 on every platform.
    out = (
        f"{ts.year:04d}-{ts.month:02d}-{ts.day:02d}"
        f"T{ts.hour:02d}:{ts.minute:02d}:{ts.second:02d}"
    )
    if ts.microsecond:
        out += f".{ts.microsecond:06d}".rstrip("0")

    offset = ts.utcoffset()
    if not offset:
        return out + "Z"
    sign = "+" if offset >= timedelta(0) else "-"
    minutes = abs(int(offset.total_seconds())) // 60
    return f"{out}{sign}{minutes // 60:02d}:{minutes % 60:02d}"


# --- Module Notes -----------------------------------------------------------
# The start time is captured in `api.app.create_app` and handed to the request
# middleware; nothing in this module holds global state.
