"""Parse the inbound relay payload into a RequestIntent."""

from typing import Any

import httpx

from core.exceptions import (
    InvalidBody,
    InvalidHeader,
    InvalidMethod,
    InvalidPayload,
    InvalidUrl,
    MissingField,
)
from core.request_types import SUPPORTED_METHODS, BodyMode, RequestIntent

ALLOWED_SCHEMES = ("http", "https")


def parse_intent(payload: Any, body_mode: BodyMode) -> RequestIntent:
    """Validate a decoded JSON payload and build the intent it describes.

    Raises a ValidationError subclass on the first problem found; the raw
    payload is never used past this point.
    """
    if not isinstance(payload, dict):
        raise InvalidPayload("Request body must be a JSON object")

    return RequestIntent(
        target_url=_parse_url(payload.get("url")),
        method=_parse_method(payload.get("method")),
        headers=_parse_headers(payload.get("headers")),
        body=_parse_body(payload.get("body"), body_mode),
    )


def _parse_url(value: Any) -> str:
    if value is None:
        raise MissingField("url")
    if not isinstance(value, str):
        raise InvalidUrl("url must be a string")
    try:
        url = httpx.URL(value)
    except httpx.InvalidURL as e:
        raise InvalidUrl(f"Invalid URL format: {e}") from e
    if url.scheme not in ALLOWED_SCHEMES or not url.host:
        raise InvalidUrl(f"Invalid URL format: {value!r}")
    return value


def _parse_method(value: Any) -> str:
    if value is None:
        raise MissingField("method")
    if not isinstance(value, str):
        raise InvalidMethod("method must be a string")
    method = value.upper()
    if method not in SUPPORTED_METHODS:
        raise InvalidMethod(f"Unsupported HTTP method: {value}")
    return method


def _parse_headers(value: Any) -> dict[str, str]:
    """Return a copy of the header mapping; any non-string value is fatal."""
    if value is None:
        return {}
    if not isinstance(value, dict):
        raise InvalidHeader("headers must be an object of string values")

    headers: dict[str, str] = {}
    for name, header_value in value.items():
        if not isinstance(header_value, str):
            raise InvalidHeader(f"Header {name!r} must have a string value")
        headers[name] = header_value
    return headers


def _parse_body(value: Any, body_mode: BodyMode) -> Any:
    if value is None:
        return None
    if body_mode is BodyMode.RAW and not isinstance(value, str):
        raise InvalidBody("body must be a string")
    return value
