"""FastAPI route handlers."""

import json
from json import JSONDecodeError
from typing import Any

from fastapi import Request, Response

from core.config import Config
from core.exceptions import InvalidJSON, RequestTooLarge
from ui.log_utils import write_incoming_log

MAX_BODY_SIZE = 50 * 1024 * 1024  # 50MB


async def _parse_json_body(request: Request, config: Config) -> Any:
    """Parse request body as JSON or raise a RelayError."""
    raw_body = await request.body()
    if len(raw_body) > MAX_BODY_SIZE:
        raise RequestTooLarge("Request body too large")

    text_body = raw_body.decode("utf-8", errors="replace")
    try:
        body = json.loads(text_body)
    except (JSONDecodeError, ValueError) as e:
        if config.proxy.debug:
            write_incoming_log(request.method, request.url.path, dict(request.headers), text_body)
        raise InvalidJSON(f"Invalid JSON: {e}") from e

    if config.proxy.debug:
        write_incoming_log(request.method, request.url.path, dict(request.headers), body)
    return body


async def handle_relay(request: Request, config: Config) -> Response:
    """Handle the relay endpoint: decode the payload and run the relay."""
    body = await _parse_json_body(request, config)
    relay_service = request.app.state.relay_service
    return await relay_service.relay(body)
