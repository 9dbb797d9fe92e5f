import sys
from pathlib import Path

import httpx
import pytest

_REPO_ROOT = Path(__file__).resolve().parents[1]
if str(_REPO_ROOT) not in sys.path:
    sys.path.insert(0, str(_REPO_ROOT))

from core.config import Config, ProxySettings, RelayMode, RelaySettings  # noqa: E402


class RecordingLogger:
    """RequestLogger that keeps every call in memory."""

    def __init__(self):
        self.relays: list[tuple[str, str, str, dict[str, str]]] = []
        self.outcomes: list[tuple[str, str, str, int]] = []
        self.errors: list[tuple[str, int, str]] = []

    def log_relay(self, relay_id, method, url, headers):
        self.relays.append((relay_id, method, url, headers))

    def log_outcome(self, relay_id, method, url, status):
        self.outcomes.append((relay_id, method, url, status))

    def log_error(self, route, status, message):
        self.errors.append((route, status, message))


class EchoTarget:
    """Mock target echoing X-Test and the request body; records every call."""

    def __init__(self):
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        headers = {"content-type": "text/plain; charset=utf-8"}
        if "x-test" in request.headers:
            headers["x-test"] = request.headers["x-test"]
        return httpx.Response(200, headers=headers, stream=httpx.ByteStream(request.content))


@pytest.fixture
def logger():
    return RecordingLogger()


@pytest.fixture
def echo_target():
    return EchoTarget()


@pytest.fixture
def enveloped_config():
    return Config(proxy=ProxySettings(debug=False))


@pytest.fixture
def passthrough_config():
    return Config(
        proxy=ProxySettings(debug=False),
        relay=RelaySettings(mode=RelayMode.PASSTHROUGH),
    )
