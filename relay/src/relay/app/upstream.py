"""Single-call client for the upstream text-inference provider."""

from __future__ import annotations

from typing import Any

import httpx

from relay.app.config import DEFAULT_UPSTREAM_BASE_URL
from relay.app.errors import UpstreamError


def _post_json(
    client: httpx.Client,
    *,
    url: str,
    payload: dict[str, Any],
    token: str,
) -> Any:
    response = client.post(
        url,
        json=payload,
        headers={"Authorization": f"Bearer {token}"},
    )
    response.raise_for_status()
    return response.json()


class UpstreamInvoker:
    """Perform exactly one authorized POST per call and decode the JSON reply.

    No retries are attempted and the transport's default timeout applies. An
    injected client is reused across calls and closed by its owner; otherwise
    a short-lived client is opened for each call.
    """

    def __init__(
        self,
        *,
        client: httpx.Client | None = None,
        base_url: str = DEFAULT_UPSTREAM_BASE_URL,
    ) -> None:
        self._client = client
        self._base_url = base_url.rstrip("/")

    def url_for(self, model: str) -> str:
        return f"{self._base_url}/{model}"

    def invoke(self, model: str, payload: dict[str, Any], *, token: str) -> Any:
        """POST `payload` to `model` and return the decoded JSON body."""

        url = self.url_for(model)
        owns_client = self._client is None
        http_client = self._client or httpx.Client()

        try:
            return _post_json(http_client, url=url, payload=payload, token=token)
        except httpx.HTTPStatusError as exc:
            status = exc.response.status_code
            raise UpstreamError(
                f"upstream {model} returned HTTP {status}", status_code=status
            ) from exc
        except httpx.HTTPError as exc:
            raise UpstreamError(
                f"upstream {model} unreachable: {exc.__class__.__name__}"
            ) from exc
        except ValueError as exc:
            raise UpstreamError(f"upstream {model} returned a non-JSON body") from exc
        finally:
            if owns_client:
                http_client.close()
