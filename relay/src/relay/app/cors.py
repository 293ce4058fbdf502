"""CORS preflight gating for the relay routes."""

from __future__ import annotations

from dataclasses import dataclass

from starlette.responses import Response

PREFLIGHT_HEADERS: dict[str, str] = {
    "Access-Control-Allow-Headers": "Content-Type",
    "Access-Control-Allow-Methods": "POST",
    "Access-Control-Max-Age": "86400",
}

# Actual POST replies are open to any origin, unlike the gated preflight.
SIMPLE_RESPONSE_HEADERS: dict[str, str] = {"Access-Control-Allow-Origin": "*"}


@dataclass(frozen=True)
class CorsDecision:
    """Outcome of checking one preflight origin against the allow-list."""

    origin: str
    allowed_origin: str | None

    @property
    def headers(self) -> dict[str, str]:
        headers = dict(PREFLIGHT_HEADERS)
        if self.allowed_origin is not None:
            headers["Access-Control-Allow-Origin"] = self.allowed_origin
        return headers


def decide_preflight(origin: str | None, allow_list: str) -> CorsDecision | None:
    """Match `origin` exactly against the comma-separated `allow_list`.

    Returns None when the request carries no Origin header.
    """

    if origin is None:
        return None

    for entry in allow_list.split(","):
        if origin == entry:
            return CorsDecision(origin=origin, allowed_origin=origin)
    return CorsDecision(origin=origin, allowed_origin=None)


def preflight_response(origin: str | None, allow_list: str) -> Response:
    """Render the preflight reply for one request."""

    decision = decide_preflight(origin, allow_list)
    if decision is None:
        return Response(status_code=200)
    return Response(status_code=204, headers=decision.headers)
