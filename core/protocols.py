"""Shared protocol definitions."""

from typing import Protocol


class RequestLogger(Protocol):
    """Protocol for request logging (Dashboard)."""

    def log_relay(
        self,
        relay_id: str,
        method: str,
        url: str,
        headers: dict[str, str],
    ) -> None: ...
    def log_outcome(self, relay_id: str, method: str, url: str, status: int) -> None: ...
    def log_error(self, route: str, status: int, message: str) -> None: ...
