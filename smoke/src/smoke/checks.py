"""Deterministic contract checks for relay replies."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any

REPLY_FIELDS = {
    "generate": "generated_text",
    "answer": "answer",
    "headline": "generated_text",
    "summarize": "summary_text",
}

BAD_REQUEST_BODY = "Bad request"


def check_status(status_code: int, expected_status: int) -> list[str]:
    """Check the HTTP status against the case expectation."""

    if status_code != expected_status:
        return [f"expected HTTP {expected_status} but got {status_code}"]
    return []


def check_reply_field(route: str, reply: Any) -> list[str]:
    """Check that a success reply is exactly one non-empty string field."""

    field = REPLY_FIELDS[route]
    if not isinstance(reply, dict):
        return ["reply JSON must be an object"]

    errors: list[str] = []
    value = reply.get(field)
    if field not in reply:
        errors.append(f"reply missing key '{field}'")
    elif not isinstance(value, str):
        errors.append(f"reply.{field} must be a string")
    elif not value.strip():
        errors.append(f"reply.{field} must not be empty")

    extra = sorted(set(reply) - {field})
    if extra:
        errors.append(f"reply has unexpected keys {extra}")
    return errors


def check_cors_header(headers: Mapping[str, str]) -> list[str]:
    """Check the open-origin header carried by successful replies."""

    value = headers.get("access-control-allow-origin")
    if value != "*":
        return [f"expected Access-Control-Allow-Origin '*' but got {value!r}"]
    return []


def check_bad_request_body(body: str) -> list[str]:
    """Check the fixed client-error body."""

    if body != BAD_REQUEST_BODY:
        return [f"expected body {BAD_REQUEST_BODY!r} for HTTP 400 but got {body[:80]!r}"]
    return []


CHECK_NAMES = ("status", "reply", "cors", "body")


def run_all_checks(
    route: str,
    *,
    status_code: int,
    expected_status: int,
    headers: Mapping[str, str],
    body: str,
    reply: Any = None,
) -> dict[str, list[str]]:
    """Run the checks that apply to one reply, grouped by check name.

    Only checks with errors appear in the result. A status mismatch skips the
    remaining checks.
    """

    failures: dict[str, list[str]] = {}
    status_errors = check_status(status_code, expected_status)
    if status_errors:
        failures["status"] = status_errors
        return failures

    if status_code == 200:
        failures["reply"] = check_reply_field(route, reply)
        failures["cors"] = check_cors_header(headers)
    elif status_code == 400:
        failures["body"] = check_bad_request_body(body)
    return {name: errors for name, errors in failures.items() if errors}
