"""FastAPI application factory."""

from contextlib import asynccontextmanager

import httpx
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from api.handlers import handle_relay
from core.config import Config
from core.exceptions import ConfigurationError, RelayError
from core.protocols import RequestLogger
from services.relay_service import RelayService


def create_app(
    config: Config,
    logger: RequestLogger,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    """Create and configure the FastAPI application.

    ``transport`` replaces the network transport of the shared client (tests).
    """
    if not config.proxy.path.startswith("/"):
        raise ConfigurationError(f"proxy.path must start with '/': {config.proxy.path!r}")

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        limits = httpx.Limits(
            max_connections=config.limits.max_connections,
            max_keepalive_connections=config.limits.max_keepalive_connections,
        )
        client = httpx.AsyncClient(
            timeout=config.relay.timeout,
            limits=limits,
            follow_redirects=config.relay.follow_redirects,
            transport=transport,
        )
        # Only caller-supplied headers reach the target (no httpx user-agent etc.)
        client.headers.clear()
        app.state.relay_service = RelayService.from_config(config, logger, client)
        try:
            yield
        finally:
            await client.aclose()

    app = FastAPI(title="HTTP Relay", version="0.1.0", lifespan=lifespan)

    @app.exception_handler(RelayError)
    async def relay_error_handler(request: Request, exc: RelayError) -> JSONResponse:
        logger.log_error(config.relay.mode.value, exc.status_code, exc.message)
        return JSONResponse({"error": exc.message}, status_code=exc.status_code)

    @app.post(config.proxy.path)
    async def relay(request: Request):
        return await handle_relay(request, config)

    return app
