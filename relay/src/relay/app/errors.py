"""Error taxonomy for the inference relay."""

from __future__ import annotations


class RelayError(RuntimeError):
    """Base class for relay failures."""


class ClientInputError(RelayError):
    """Inbound body is missing a required field or has the wrong shape."""


class UpstreamError(RelayError):
    """Upstream provider call failed or returned an unexpected shape."""

    def __init__(self, message: str, *, status_code: int | None = None) -> None:
        super().__init__(message)
        self.status_code = status_code


class ConfigurationError(RelayError):
    """Required configuration is missing or invalid."""
