"""Process-wide relay configuration loaded from environment variables."""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass, field

from relay.app.errors import ConfigurationError

RELAY_VERSION = "0.1.0"
DEFAULT_UPSTREAM_BASE_URL = "https://api-inference.huggingface.co/models"
DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8787


def _required_env(environ: Mapping[str, str], name: str) -> str:
    value = environ.get(name)
    if value is None or not value.strip():
        raise ConfigurationError(f"{name} must be set to a non-empty value.")
    return value


def _parse_port_env(value: str | None, *, default: int) -> int:
    """Parse a TCP port from an environment string."""

    if value is None or not value.strip():
        return default
    try:
        port = int(value.strip())
    except ValueError as exc:
        raise ConfigurationError(f"RELAY_PORT must be an integer, got {value!r}.") from exc
    if not 0 < port < 65536:
        raise ConfigurationError(f"RELAY_PORT out of range: {port}.")
    return port


@dataclass(frozen=True)
class RelayConfig:
    """Read-only settings shared by every request handler."""

    cors_origin: str
    hf_token: str = field(repr=False)
    version: str = RELAY_VERSION
    upstream_base_url: str = DEFAULT_UPSTREAM_BASE_URL
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    log_level: str = "INFO"

    @property
    def allowed_origins(self) -> list[str]:
        """Preflight allow-list entries, split verbatim on commas."""

        return self.cors_origin.split(",")


def load_config(environ: Mapping[str, str] | None = None) -> RelayConfig:
    """Build the relay config, failing fast on missing required values."""

    env = os.environ if environ is None else environ

    return RelayConfig(
        cors_origin=_required_env(env, "CORS_ORIGIN"),
        hf_token=_required_env(env, "HF_TOKEN"),
        version=env.get("WORKER_VERSION") or RELAY_VERSION,
        upstream_base_url=(env.get("HF_API_BASE") or DEFAULT_UPSTREAM_BASE_URL).rstrip("/"),
        host=env.get("RELAY_HOST") or DEFAULT_HOST,
        port=_parse_port_env(env.get("RELAY_PORT"), default=DEFAULT_PORT),
        log_level=(env.get("RELAY_LOG_LEVEL") or "INFO").strip().upper(),
    )
