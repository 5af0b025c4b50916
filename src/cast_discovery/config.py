"""Configuration management for cast discovery."""

import json
from enum import Enum
from pathlib import Path

from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .discovery.services import DiscoverService


class IPVersionChoice(str, Enum):
    AUTO = "auto" # Let zeroconf pick from the host's interfaces
    ALL = "all"
    V4 = "v4"
    V6 = "v6"

class DiscoveryConfig(BaseModel): # Nested under Config (BaseSettings)
    """Configuration for mDNS device discovery."""

    service: DiscoverService = Field(default=DiscoverService.GOOGLE_CAST, description="Well-known service to discover.")
    timeout_ms: int = Field(default=2000, ge=100, le=60000, description="Upper bound on a single discovery poll, in milliseconds.")
    request_timeout_ms: int = Field(default=3000, ge=100, le=30000, description="Timeout for resolving a single advertised service, in milliseconds.")
    ip_version: IPVersionChoice = Field(default=IPVersionChoice.AUTO, description="Address families to listen on ('auto', 'all', 'v4', 'v6').")


class LoggingConfig(BaseModel):
    """Configuration for logging."""

    level: str = Field(default="INFO", description="Log level")
    format: str = Field(default="json", description="Log format ('json' or 'console')")


class Config(BaseSettings):
    """Main configuration. Loads from environment variables prefixed with CAST_DISCOVERY_."""

    model_config = SettingsConfigDict(
        env_prefix='CAST_DISCOVERY_',
        env_nested_delimiter='__', # e.g., CAST_DISCOVERY_DISCOVERY__TIMEOUT_MS
        extra='ignore',
        env_file='.env',
        env_file_encoding='utf-8'
    )

    discovery: DiscoveryConfig = Field(default_factory=DiscoveryConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    @classmethod
    def from_file(cls, file_path: Path) -> "Config":
        """Load settings from a JSON document, ignoring CAST_DISCOVERY_* variables."""
        document = json.loads(Path(file_path).read_text(encoding="utf-8"))
        return cls.model_validate(document)
