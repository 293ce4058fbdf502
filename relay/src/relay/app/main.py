"""FastAPI application entrypoint for the inference relay."""

from __future__ import annotations

from collections.abc import Awaitable, Callable

import uvicorn
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse, PlainTextResponse, Response
from starlette.concurrency import run_in_threadpool

from relay.app.adapters import ADAPTERS, EndpointAdapter
from relay.app.config import RELAY_VERSION, RelayConfig, load_config
from relay.app.cors import SIMPLE_RESPONSE_HEADERS, preflight_response
from relay.app.errors import ClientInputError, UpstreamError
from relay.app.logging import get_logger, setup_logging
from relay.app.middleware import AccessLogMiddleware
from relay.app.upstream import UpstreamInvoker

_LOG = get_logger(__name__)

ROOT_GREETING = "Hello from Workers!"


def _bad_request(_request: Request, _exc: Exception) -> Response:
    return PlainTextResponse("Bad request", status_code=400)


def _bad_gateway(request: Request, exc: Exception) -> Response:
    _LOG.warning("upstream failure on %s: %s", request.url.path, exc)
    return PlainTextResponse("Bad gateway", status_code=502)


def _adapter_endpoint(
    adapter: EndpointAdapter,
    *,
    config: RelayConfig,
    invoker: UpstreamInvoker,
) -> Callable[[Request], Awaitable[Response]]:
    """Build the POST handler for `adapter`.

    The body is parsed as JSON regardless of Content-Type, so browser simple
    requests sent as text/plain are accepted.
    """

    async def endpoint(request: Request) -> Response:
        payload = adapter.parse_body(await request.body())
        body = await run_in_threadpool(adapter.handle, payload, invoker=invoker, config=config)
        return JSONResponse(content=body, headers=SIMPLE_RESPONSE_HEADERS)

    return endpoint


def create_app(
    config: RelayConfig | None = None,
    *,
    invoker: UpstreamInvoker | None = None,
) -> FastAPI:
    """Create the relay app; configuration is loaded from the environment if omitted."""

    active_config = config or load_config()
    active_invoker = invoker or UpstreamInvoker(base_url=active_config.upstream_base_url)

    if "*" not in active_config.allowed_origins:
        # Preflight is origin-gated but successful POST replies allow any origin.
        _LOG.warning(
            "CORS preflight restricted to %s; POST replies still send Access-Control-Allow-Origin: *",
            active_config.cors_origin,
        )

    app = FastAPI(title="Inference Relay", version=RELAY_VERSION)
    app.add_middleware(AccessLogMiddleware)
    app.add_exception_handler(ClientInputError, _bad_request)
    app.add_exception_handler(UpstreamError, _bad_gateway)

    @app.get("/", response_class=PlainTextResponse)
    def root() -> str:
        """Root greeting."""

        return ROOT_GREETING

    @app.get("/worker-version", response_class=PlainTextResponse)
    def worker_version() -> str:
        """Configured version string."""

        return active_config.version

    def preflight(request: Request) -> Response:
        return preflight_response(request.headers.get("Origin"), active_config.cors_origin)

    for adapter in ADAPTERS.values():
        app.add_api_route(adapter.path, preflight, methods=["OPTIONS"], include_in_schema=False)
        app.add_api_route(
            adapter.path,
            _adapter_endpoint(adapter, config=active_config, invoker=active_invoker),
            methods=["POST"],
            response_model=adapter.response_model,
            name=adapter.name,
        )

    return app


def serve() -> None:
    """Console entrypoint: load config, configure logging and run uvicorn."""

    config = load_config()
    setup_logging(config.log_level)
    uvicorn.run(create_app(config), host=config.host, port=config.port, log_config=None)


if __name__ == "__main__":
    serve()
