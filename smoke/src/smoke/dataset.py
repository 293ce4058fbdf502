"""Dataset loading utilities for the relay smoke harness."""

from __future__ import annotations

import json
from dataclasses import dataclass
from pathlib import Path
from typing import Any

RELAY_ROUTES = ("generate", "answer", "headline", "summarize")


@dataclass(frozen=True)
class SmokeCase:
    """One smoke case from JSONL."""

    case_id: str
    route: str
    request: Any
    expected_status: int


def _read_json_line(raw_line: str, line_no: int, data_path: Path) -> dict[str, Any]:
    try:
        payload = json.loads(raw_line)
    except json.JSONDecodeError as exc:
        raise ValueError(
            f"{data_path}:{line_no} is not valid JSON: {exc.msg}"
        ) from exc
    if not isinstance(payload, dict):
        raise ValueError(f"{data_path}:{line_no} must be a JSON object")
    return payload


def _build_case(payload: dict[str, Any], line_no: int, data_path: Path) -> SmokeCase:
    route = payload.get("route")
    if isinstance(route, str):
        route = route.strip().lstrip("/")
    if route not in RELAY_ROUTES:
        raise ValueError(
            f"{data_path}:{line_no} route must be one of: {', '.join(RELAY_ROUTES)}"
        )

    if "request" not in payload:
        raise ValueError(f"{data_path}:{line_no} must include field 'request'")

    expected_status = payload.get("expected_status", 200)
    if isinstance(expected_status, bool) or not isinstance(expected_status, int):
        raise ValueError(f"{data_path}:{line_no} expected_status must be an integer")

    case_id = payload.get("case_id")
    if case_id is None:
        case_id = f"line-{line_no}"
    if not isinstance(case_id, str) or not case_id.strip():
        raise ValueError(f"{data_path}:{line_no} case_id must be a non-empty string")

    return SmokeCase(
        case_id=case_id.strip(),
        route=route,
        request=payload["request"],
        expected_status=expected_status,
    )


def load_cases(data_path: Path) -> list[SmokeCase]:
    """Load JSONL cases from disk."""

    if not data_path.exists():
        raise ValueError(f"Dataset file not found: {data_path}")

    cases: list[SmokeCase] = []
    with data_path.open("r", encoding="utf-8") as handle:
        for line_no, raw_line in enumerate(handle, start=1):
            stripped = raw_line.strip()
            if not stripped:
                continue
            payload = _read_json_line(stripped, line_no=line_no, data_path=data_path)
            cases.append(_build_case(payload, line_no=line_no, data_path=data_path))

    if not cases:
        raise ValueError(f"Dataset is empty: {data_path}")

    return cases
