"""Configuration models and loading."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field, ValidationError

CONFIG_DIR = Path.home() / ".config" / "http-relay"
CONFIG_FILE = CONFIG_DIR / "config.json"


class RelayMode(str, Enum):
    """How the target's response is returned to the caller."""

    PASSTHROUGH = "passthrough"
    ENVELOPED = "enveloped"


class ProxySettings(BaseModel):
    host: str = "127.0.0.1"
    port: int = 8080
    path: str = "/proxy"
    debug: bool = True


class RelaySettings(BaseModel):
    mode: RelayMode = RelayMode.ENVELOPED
    follow_redirects: bool = True
    # None disables the outbound timeout
    timeout: float | None = None


class LimitsSettings(BaseModel):
    max_connections: int = 100
    max_keepalive_connections: int = 20
    keep_alive_timeout: int = 5


class Config(BaseModel):
    proxy: ProxySettings = Field(default_factory=ProxySettings)
    relay: RelaySettings = Field(default_factory=RelaySettings)
    limits: LimitsSettings = Field(default_factory=LimitsSettings)


def load_config(config_file: Path = CONFIG_FILE) -> Config:
    """Load configuration from JSON file, creating default if needed."""
    if not config_file.exists():
        config_file.parent.mkdir(parents=True, exist_ok=True)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default

    try:
        data = json.loads(config_file.read_text())
        return Config.model_validate(data)
    except (json.JSONDecodeError, ValidationError):
        # Backup corrupted config and recreate default
        backup = config_file.with_suffix(".json.bak")
        config_file.rename(backup)
        default = Config()
        config_file.write_text(default.model_dump_json(indent=2))
        return default
