"""Send outbound requests on the shared HTTP client."""

import httpx

from core.exceptions import TransportError, TransportTimeout


class TransportExecutor:
    """Execute built requests; network failures become TransportError."""

    def __init__(self, client: httpx.AsyncClient) -> None:
        self._client = client

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        """Send the request and return the response (body unread when streaming)."""
        try:
            return await self._client.send(request, stream=stream)
        except httpx.TimeoutException as e:
            raise TransportTimeout(f"Upstream timeout: {describe_error(e)}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"Failed to send request: {describe_error(e)}") from e


def describe_error(error: Exception) -> str:
    """Return the error text, falling back to the class name for empty messages."""
    return str(error) or type(error).__name__
