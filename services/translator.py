"""Translate target responses into caller-facing replies."""

from typing import AsyncIterator

import httpx
from fastapi import Response
from fastapi.responses import JSONResponse, StreamingResponse
from starlette.background import BackgroundTask

from core.exceptions import BodyDecodeError, TransportError
from core.headers import ENCODED_BODY_HEADERS, forwardable_response_headers
from core.protocols import RequestLogger
from core.request_types import RelayOutcome
from services.transport import describe_error

DEFAULT_CHARSET = "utf-8"


class PassthroughTranslator:
    """Forward the target's status, headers and body as the response itself."""

    def __init__(self, logger: RequestLogger, route: str = "passthrough") -> None:
        self._logger = logger
        self._route = route

    async def translate(self, response: httpx.Response) -> Response:
        """Stream the raw body through; the upstream response closes afterwards."""
        relayed = StreamingResponse(
            self._relay_body(response),
            status_code=response.status_code,
            background=BackgroundTask(self._cleanup_streaming, response),
        )
        for key, value in forwardable_response_headers(response.headers.multi_items()):
            relayed.headers.append(key, value)
        return relayed

    async def _relay_body(self, response: httpx.Response) -> AsyncIterator[bytes]:
        """Yield the body as received, content-encoding untouched.

        The status line is already sent when a read fails, so the failure is
        logged and re-raised to abort the outer response.
        """
        try:
            if response.is_stream_consumed:
                # In-memory response, body already loaded
                yield response.content
                return
            async for chunk in response.aiter_raw():
                yield chunk
        except httpx.HTTPError as e:
            error = TransportError(f"Failed to read response body: {describe_error(e)}")
            self._logger.log_error(self._route, error.status_code, error.message)
            raise error from e
        finally:
            await response.aclose()

    async def _cleanup_streaming(self, response: httpx.Response) -> None:
        """Clean up streaming resources."""
        await response.aclose()


class EnvelopeTranslator:
    """Capture the target response and wrap it in a JSON envelope.

    The outer status is always 200; the target's own status travels in the
    envelope's ``status`` field.
    """

    async def translate(self, response: httpx.Response) -> Response:
        outcome = await self.capture(response)
        return JSONResponse(outcome.model_dump(by_alias=True))

    async def capture(self, response: httpx.Response) -> RelayOutcome:
        """Read, decode and flatten the target response."""
        try:
            content = await response.aread()
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to read response body: {describe_error(e)}") from e
        finally:
            await response.aclose()

        return RelayOutcome(
            status_code=response.status_code,
            body=decode_body(content, response.charset_encoding),
            headers=flatten_headers(response.headers.raw),
        )


def decode_body(content: bytes, charset: str | None) -> str:
    """Decode with the declared charset; unknown charsets fall back to UTF-8."""
    try:
        return content.decode(charset or DEFAULT_CHARSET)
    except LookupError:
        return decode_body(content, DEFAULT_CHARSET)
    except UnicodeDecodeError as e:
        raise BodyDecodeError(f"Failed to decode response body: {e.reason}") from e


def flatten_headers(raw_headers: list[tuple[bytes, bytes]]) -> dict[str, str]:
    """Keep the first value per lower-cased name.

    The body beside these headers is already decoded, so content-encoding and
    content-length are left out.

    Values that are not visible ASCII collapse to an empty string instead of
    failing the response.
    """
    flattened: dict[str, str] = {}
    for raw_name, raw_value in raw_headers:
        name = raw_name.decode("latin-1").lower()
        if name in flattened or name in ENCODED_BODY_HEADERS:
            continue
        flattened[name] = _header_text(raw_value)
    return flattened


def _header_text(raw_value: bytes) -> str:
    if all(byte == 0x09 or 0x20 <= byte < 0x7F for byte in raw_value):
        return raw_value.decode("ascii")
    return ""
