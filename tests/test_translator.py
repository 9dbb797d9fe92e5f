import json

import httpx
import pytest

from core.exceptions import BodyDecodeError, TransportError
from services.translator import (
    EnvelopeTranslator,
    PassthroughTranslator,
    decode_body,
    flatten_headers,
)


def test_decode_body_uses_declared_charset():
    assert decode_body("déjà".encode("latin-1"), "latin-1") == "déjà"


def test_decode_body_defaults_to_utf8():
    assert decode_body("déjà".encode("utf-8"), None) == "déjà"


def test_decode_body_unknown_charset_falls_back_to_utf8():
    assert decode_body(b"plain", "no-such-charset") == "plain"


def test_decode_body_invalid_bytes():
    with pytest.raises(BodyDecodeError) as exc_info:
        decode_body(b"\xff\xfe\xfa", "utf-8")
    assert exc_info.value.status_code == 500


def test_flatten_headers_first_value_wins():
    raw = [
        (b"Set-Cookie", b"a=1"),
        (b"set-cookie", b"b=2"),
        (b"Content-Type", b"text/plain"),
    ]
    assert flatten_headers(raw) == {"set-cookie": "a=1", "content-type": "text/plain"}


def test_flatten_headers_undecodable_value_becomes_empty():
    raw = [(b"X-Latin", b"caf\xe9"), (b"X-Tab", b"a\tb")]
    assert flatten_headers(raw) == {"x-latin": "", "x-tab": "a\tb"}


def test_flatten_headers_drops_body_encoding():
    raw = [
        (b"Content-Encoding", b"gzip"),
        (b"Content-Length", b"31"),
        (b"Content-Type", b"text/plain"),
    ]
    assert flatten_headers(raw) == {"content-type": "text/plain"}


@pytest.mark.asyncio
async def test_envelope_capture():
    response = httpx.Response(
        404,
        headers={"content-type": "text/plain; charset=utf-8", "x-test": "abc"},
        content=b"not found",
    )
    outcome = await EnvelopeTranslator().capture(response)

    assert outcome.status_code == 404
    assert outcome.body == "not found"
    assert outcome.headers["x-test"] == "abc"
    assert outcome.headers["content-type"] == "text/plain; charset=utf-8"
    assert response.is_closed


@pytest.mark.asyncio
async def test_envelope_translate_is_outer_200():
    response = httpx.Response(503, content=b"down")
    relayed = await EnvelopeTranslator().translate(response)

    assert relayed.status_code == 200
    payload = json.loads(relayed.body)
    assert payload["status"] == 503
    assert payload["body"] == "down"
    assert set(payload) == {"status", "body", "headers"}


@pytest.mark.asyncio
async def test_envelope_read_failure_is_transport_error():
    class BrokenStream(httpx.AsyncByteStream):
        async def __aiter__(self):
            yield b"partial"
            raise httpx.ReadError("connection reset")

    response = httpx.Response(200, stream=BrokenStream())
    with pytest.raises(TransportError) as exc_info:
        await EnvelopeTranslator().capture(response)
    assert "Failed to read response body" in exc_info.value.message


@pytest.mark.asyncio
async def test_passthrough_forwards_status_and_headers(logger):
    response = httpx.Response(
        418,
        headers=[
            ("content-type", "application/json"),
            ("set-cookie", "a=1"),
            ("set-cookie", "b=2"),
            ("connection", "close"),
        ],
        content=b'{"teapot": true}',
    )
    relayed = await PassthroughTranslator(logger).translate(response)

    assert relayed.status_code == 418
    assert relayed.headers["content-type"] == "application/json"
    assert relayed.headers.getlist("set-cookie") == ["a=1", "b=2"]
    assert "connection" not in relayed.headers

    chunks = [chunk async for chunk in relayed.body_iterator]
    assert b"".join(chunks) == b'{"teapot": true}'


@pytest.mark.asyncio
async def test_passthrough_keeps_encoded_body_untouched(logger):
    response = httpx.Response(
        200,
        headers={"content-encoding": "gzip", "content-length": "4"},
        stream=httpx.ByteStream(b"\x1f\x8b\x08\x00"),
    )
    relayed = await PassthroughTranslator(logger).translate(response)

    assert relayed.headers["content-encoding"] == "gzip"
    assert "content-length" not in relayed.headers
    chunks = [chunk async for chunk in relayed.body_iterator]
    assert b"".join(chunks) == b"\x1f\x8b\x08\x00"
    assert response.is_closed


@pytest.mark.asyncio
async def test_passthrough_read_failure_is_logged_transport_error(logger):
    class BrokenStream(httpx.AsyncByteStream):
        async def __aiter__(self):
            yield b"partial"
            raise httpx.ReadError("connection reset")

    response = httpx.Response(200, stream=BrokenStream())
    relayed = await PassthroughTranslator(logger).translate(response)

    received = []
    with pytest.raises(TransportError) as exc_info:
        async for chunk in relayed.body_iterator:
            received.append(chunk)

    assert received == [b"partial"]
    assert "connection reset" in exc_info.value.message
    assert logger.errors == [("passthrough", 500, exc_info.value.message)]
    assert response.is_closed
