from __future__ import annotations

import sys
from pathlib import Path

import pytest

# Ensure `smoke/src` is importable when tests are run from repo root.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from smoke.dataset import load_cases  # noqa: E402

_BUNDLED_CASES = Path(__file__).resolve().parents[1] / "cases" / "relay_smoke.jsonl"


def test_load_cases_parses_jsonl(tmp_path: Path) -> None:
    data = (
        '{"case_id":"c1","route":"/generate","request":{"message":"hi"}}\n'
        "\n"
        '{"route":"answer","request":{"question":"q"},"expected_status":400}\n'
    )
    data_path = tmp_path / "cases.jsonl"
    data_path.write_text(data, encoding="utf-8")

    cases = load_cases(data_path)
    assert len(cases) == 2
    assert cases[0].case_id == "c1"
    assert cases[0].route == "generate"
    assert cases[0].expected_status == 200
    assert cases[0].request == {"message": "hi"}
    assert cases[1].case_id == "line-3"
    assert cases[1].expected_status == 400


@pytest.mark.parametrize(
    ("line", "match"),
    [
        ('{"route":"translate","request":{}}', "route must be one of"),
        ('{"route":"generate"}', "request"),
        ('{"route":"generate","request":{},"expected_status":"200"}', "expected_status"),
        ('{"route":"generate","request":{},"case_id":"  "}', "case_id"),
        ('["generate"]', "JSON object"),
        ("{not json", "not valid JSON"),
    ],
)
def test_load_cases_rejects_invalid_lines(tmp_path: Path, line: str, match: str) -> None:
    data_path = tmp_path / "cases.jsonl"
    data_path.write_text(line + "\n", encoding="utf-8")

    with pytest.raises(ValueError, match=match):
        load_cases(data_path)


def test_load_cases_rejects_empty_and_missing(tmp_path: Path) -> None:
    empty = tmp_path / "empty.jsonl"
    empty.write_text("\n\n", encoding="utf-8")

    with pytest.raises(ValueError, match="empty"):
        load_cases(empty)
    with pytest.raises(ValueError, match="not found"):
        load_cases(tmp_path / "missing.jsonl")


def test_bundled_cases_load() -> None:
    cases = load_cases(_BUNDLED_CASES)
    assert {case.route for case in cases} == {"generate", "answer", "headline", "summarize"}
