"""Request id and timing helpers for relay requests."""

from __future__ import annotations

import time
import uuid

REQUEST_ID_HEADER = "X-Request-ID"


def new_request_id() -> str:
    """Create a UUID4 request identifier."""

    return str(uuid.uuid4())


def resolve_request_id(incoming: str | None) -> str:
    """Reuse a caller-supplied request id, or mint a new one."""

    if incoming and incoming.strip():
        return incoming.strip()
    return new_request_id()


def start_timer() -> float:
    """Start a monotonic timer."""

    return time.perf_counter()


def elapsed_ms(start_time: float) -> int:
    """Return elapsed milliseconds from `start_time`."""

    return int((time.perf_counter() - start_time) * 1000)
