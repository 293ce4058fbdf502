from __future__ import annotations

import sys
from collections.abc import Callable
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

# Ensure `relay/src` is importable when tests are run from repo root.
sys.path.insert(0, str(Path(__file__).resolve().parents[1] / "src"))

from relay.app.config import RelayConfig  # noqa: E402
from relay.app.main import create_app  # noqa: E402
from relay.app.upstream import UpstreamInvoker  # noqa: E402
from stubs import ALLOWED_ORIGINS, TEST_TOKEN, UPSTREAM_BASE_URL, RecordingUpstream  # noqa: E402


@pytest.fixture()
def relay_config() -> RelayConfig:
    return RelayConfig(
        cors_origin=ALLOWED_ORIGINS,
        hf_token=TEST_TOKEN,
        version="test-1.2.3",
        upstream_base_url=UPSTREAM_BASE_URL,
    )


@pytest.fixture()
def make_client(relay_config: RelayConfig) -> Callable[[RecordingUpstream], TestClient]:
    """Build a TestClient whose upstream calls go to `upstream`."""

    def _make(upstream: RecordingUpstream) -> TestClient:
        invoker = UpstreamInvoker(client=upstream.client(), base_url=UPSTREAM_BASE_URL)
        return TestClient(create_app(relay_config, invoker=invoker))

    return _make
