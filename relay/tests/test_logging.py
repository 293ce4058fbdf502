from __future__ import annotations

import json
import logging
import sys
from collections.abc import Callable
from io import StringIO
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure `relay/src` is importable when tests are run from repo root.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from relay.app.logging import _JsonFormatter, get_logger, setup_logging  # noqa: E402
from stubs import RecordingUpstream  # noqa: E402

ClientFactory = Callable[[RecordingUpstream], TestClient]


def test_json_formatter_produces_json() -> None:
    logger = get_logger("relay.test.json")
    stream = StringIO()
    handler = logging.StreamHandler(stream)
    handler.setFormatter(_JsonFormatter())
    logger.addHandler(handler)
    logger.setLevel(logging.INFO)
    try:
        logger.info("upstream model=%s", "org/model")
    finally:
        logger.removeHandler(handler)

    parsed = json.loads(stream.getvalue().strip())
    assert parsed == {"level": "INFO", "logger": "relay.test.json", "msg": "upstream model=org/model"}


def test_setup_logging_installs_single_json_handler() -> None:
    root = logging.getLogger()
    saved_handlers = list(root.handlers)
    saved_level = root.level
    try:
        setup_logging("DEBUG")
        setup_logging("DEBUG")
        json_handlers = [h for h in root.handlers if isinstance(h.formatter, _JsonFormatter)]
        assert len(json_handlers) == 1
        assert root.level == logging.DEBUG
    finally:
        root.handlers[:] = saved_handlers
        root.setLevel(saved_level)


def test_access_log_line_per_request(
    make_client: ClientFactory, caplog: pytest.LogCaptureFixture
) -> None:
    client = make_client(RecordingUpstream())
    with caplog.at_level(logging.INFO, logger="relay.access"):
        client.get("/worker-version", headers={"X-Request-ID": "req-log"})

    messages = [record.getMessage() for record in caplog.records if record.name == "relay.access"]
    assert len(messages) == 1
    assert "path=/worker-version" in messages[0]
    assert "method=GET" in messages[0]
    assert "status=200" in messages[0]
    assert "request_id=req-log" in messages[0]
