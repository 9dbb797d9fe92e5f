"""Shared request data types."""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")


class BodyMode(str, Enum):
    """How the caller-supplied body is turned into bytes."""

    JSON = "json"  # any JSON value, re-serialized
    RAW = "raw"  # string sent verbatim


@dataclass(frozen=True)
class RequestIntent:
    """Validated description of one outbound call."""

    target_url: str
    method: str
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None


class RelayOutcome(BaseModel):
    """Captured target response, serialized as the enveloped reply."""

    model_config = ConfigDict(frozen=True)

    status_code: int = Field(serialization_alias="status")
    body: str
    headers: dict[str, str] = Field(default_factory=dict)
