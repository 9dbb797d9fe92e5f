"""Header encoding for outbound requests and filtering for relayed responses."""

import re

from core.exceptions import InvalidHeaderEncoding

# RFC 7230 token
_HEADER_NAME_RE = re.compile(rb"^[!#$%&'*+\-.^_`|~0-9A-Za-z]+$")
# Control characters other than HTAB
_FORBIDDEN_VALUE_RE = re.compile(rb"[\x00-\x08\x0a-\x1f\x7f]")

# Hop-by-hop headers that should NOT be forwarded (RFC 2616)
HOP_BY_HOP_HEADERS = frozenset(
    {
        "connection",
        "keep-alive",
        "proxy-authenticate",
        "proxy-authorization",
        "te",
        "trailer",
        "trailers",
        "transfer-encoding",
        "upgrade",
    }
)

# Describe the wire encoding of a body; stale once the body is decoded
ENCODED_BODY_HEADERS = frozenset({"content-length", "content-encoding"})


class HeaderEncoder:
    """Encode caller-supplied headers into wire-valid bytes."""

    def encode(self, headers: dict[str, str]) -> list[tuple[bytes, bytes]]:
        """Encode every header; the first invalid entry fails the request."""
        return [self.encode_one(name, value) for name, value in headers.items()]

    def encode_one(self, name: str, value: str) -> tuple[bytes, bytes]:
        try:
            raw_name = name.encode("ascii")
        except UnicodeEncodeError as e:
            raise InvalidHeaderEncoding(f"Invalid header name: {name!r}", name) from e
        if not _HEADER_NAME_RE.match(raw_name):
            raise InvalidHeaderEncoding(f"Invalid header name: {name!r}", name)

        try:
            raw_value = value.strip(" \t").encode("latin-1")
        except UnicodeEncodeError as e:
            raise InvalidHeaderEncoding(f"Invalid value for header {name!r}", name) from e
        if _FORBIDDEN_VALUE_RE.search(raw_value):
            raise InvalidHeaderEncoding(f"Invalid value for header {name!r}", name)

        return raw_name, raw_value


def forwardable_response_headers(headers: list[tuple[str, str]]) -> list[tuple[str, str]]:
    """Drop hop-by-hop headers and content-length; the server re-frames the body."""
    return [
        (key, value)
        for key, value in headers
        if key.lower() not in HOP_BY_HOP_HEADERS and key.lower() != "content-length"
    ]
