"""CLI runner for the relay smoke harness."""

from __future__ import annotations

import argparse
from collections import Counter
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import httpx

from smoke.checks import CHECK_NAMES, run_all_checks
from smoke.dataset import RELAY_ROUTES, SmokeCase, load_cases


@dataclass(frozen=True)
class CaseResult:
    """Outcome of one case, with failures grouped by check name."""

    case_id: str
    route: str
    status_code: int
    failures: dict[str, list[str]] = field(default_factory=dict)

    @property
    def passed(self) -> bool:
        return not self.failures


class RelayUnavailableError(RuntimeError):
    """Raised when the relay cannot be reached."""


def build_client(
    base_url: str,
    *,
    timeout: float,
    retries: int,
    transport: httpx.BaseTransport | None = None,
) -> httpx.Client:
    """Client bound to the relay; connection retries are left to the transport."""

    return httpx.Client(
        base_url=base_url.rstrip("/"),
        timeout=timeout,
        transport=transport or httpx.HTTPTransport(retries=retries),
    )


def evaluate_case(client: httpx.Client, case: SmokeCase) -> CaseResult:
    """POST one case to its relay route and check the reply contract."""

    try:
        response = client.post(f"/{case.route}", json=case.request)
    except httpx.RequestError as exc:
        raise RelayUnavailableError(f"{exc.__class__.__name__}: {exc}") from exc

    reply: Any = None
    if response.status_code == 200:
        try:
            reply = response.json()
        except ValueError as exc:
            return CaseResult(
                case_id=case.case_id,
                route=case.route,
                status_code=response.status_code,
                failures={"reply": [f"response is not valid JSON: {exc}"]},
            )

    failures = run_all_checks(
        case.route,
        status_code=response.status_code,
        expected_status=case.expected_status,
        headers=response.headers,
        body=response.text,
        reply=reply,
    )
    return CaseResult(
        case_id=case.case_id,
        route=case.route,
        status_code=response.status_code,
        failures=failures,
    )


def _print_result(result: CaseResult) -> None:
    label = "PASS" if result.passed else "FAIL"
    print(f"[{label}] {result.case_id} /{result.route} -> HTTP {result.status_code}")
    for name in CHECK_NAMES:
        for error in result.failures.get(name, []):
            print(f"  {name}: {error}")


def _print_summary(results: list[CaseResult]) -> None:
    for route in RELAY_ROUTES:
        route_results = [result for result in results if result.route == route]
        if not route_results:
            continue
        passed = sum(result.passed for result in route_results)
        print(f"  /{route}: {passed}/{len(route_results)} passed")

    failed_checks = Counter(name for result in results for name in result.failures)
    if failed_checks:
        breakdown = " ".join(f"{name}={failed_checks[name]}" for name in CHECK_NAMES if failed_checks[name])
        print(f"  failing checks: {breakdown}")

    failures = sum(not result.passed for result in results)
    print(f"Summary: total={len(results)} passed={len(results) - failures} failed={failures}")


def _parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Run deterministic smoke checks against a running inference relay."
    )
    parser.add_argument(
        "--base-url",
        default="http://127.0.0.1:8787",
        help="Base URL for the relay (default: %(default)s)",
    )
    parser.add_argument(
        "--data",
        type=Path,
        required=True,
        help="Path to JSONL smoke dataset.",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=30.0,
        help="Request timeout in seconds; upstream models can be slow (default: %(default)s).",
    )
    parser.add_argument(
        "--retries",
        type=int,
        default=0,
        help="Connection retries per request (default: %(default)s).",
    )
    return parser.parse_args(argv)


def main(
    argv: list[str] | None = None,
    *,
    transport: httpx.BaseTransport | None = None,
) -> int:
    """CLI entrypoint: 0 when every case passes, 1 on failures, 2 on dataset or connectivity errors."""

    args = _parse_args(argv)
    try:
        cases = load_cases(args.data)
    except ValueError as exc:
        print(f"[ERROR] Invalid dataset: {exc}")
        return 2

    print(f"Running {len(cases)} smoke case(s) against {args.base_url}")

    results: list[CaseResult] = []
    with build_client(
        args.base_url, timeout=args.timeout, retries=args.retries, transport=transport
    ) as client:
        for case in cases:
            try:
                result = evaluate_case(client, case)
            except RelayUnavailableError as exc:
                print(f"[ERROR] Relay unavailable at {args.base_url}/{case.route}: {exc}")
                return 2
            _print_result(result)
            results.append(result)

    _print_summary(results)
    return 0 if all(result.passed for result in results) else 1


if __name__ == "__main__":
    raise SystemExit(main())
