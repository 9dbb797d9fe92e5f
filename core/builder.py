"""Build transport-level requests from validated intents."""

import json
from typing import Any

import httpx

from core.exceptions import BodySerializationError
from core.headers import HeaderEncoder
from core.request_types import BodyMode, RequestIntent


class RequestBuilder:
    """Turn a RequestIntent into an httpx.Request bound to the shared client."""

    def __init__(
        self,
        client: httpx.AsyncClient,
        body_mode: BodyMode,
        header_encoder: HeaderEncoder | None = None,
    ) -> None:
        self._client = client
        self._body_mode = body_mode
        self._headers = header_encoder or HeaderEncoder()

    def build(self, intent: RequestIntent) -> httpx.Request:
        """Build the outbound request; header and body problems raise 400-class errors."""
        headers = self._headers.encode(intent.headers)
        content = self.serialize_body(intent.body)
        return self._client.build_request(
            intent.method,
            intent.target_url,
            headers=headers,
            content=content,
        )

    def serialize_body(self, body: Any) -> bytes:
        if body is None:
            return b""
        try:
            if self._body_mode is BodyMode.RAW:
                return body.encode("utf-8")
            return json.dumps(body, allow_nan=False).encode("utf-8")
        except (TypeError, ValueError) as e:
            # UnicodeEncodeError (lone surrogates) is a ValueError
            raise BodySerializationError(f"Cannot serialize body: {e}") from e
