"""Configuration models using Pydantic."""

from typing import Literal

from pydantic import BaseModel, Field, field_validator

from servicebox.host import DEFAULT_MAX_BODY_BYTES
from servicebox.validator import DEFAULT_EXTENSION_KEYWORDS

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR"]


class ConfigError(Exception):
    """Configuration error."""


class ServerConfig(BaseModel):
    """Configuration for the HTTP binding."""

    host: str = "127.0.0.1"
    port: int = Field(default=8080, ge=0, le=65535)
    # Endpoint accepting batch POSTs (and serving metadata on GET)
    path: str = "/"

    @field_validator("path")
    @classmethod
    def _absolute_path(cls, value: str) -> str:
        if not value.startswith("/"):
            raise ValueError("path must start with '/'")
        return value


class ProtocolConfig(BaseModel):
    """Limits applied while parsing batches."""

    max_body_bytes: int = Field(default=DEFAULT_MAX_BODY_BYTES, gt=0)


class SchemaConfig(BaseModel):
    """Configuration for the shared schema compiler.

    Extension keywords are tolerated inside method and event schemas
    instead of being treated as unknown.
    """

    extension_keywords: list[str] = Field(
        default_factory=lambda: list(DEFAULT_EXTENSION_KEYWORDS)
    )
    check_formats: bool = True


class LoggingConfig(BaseModel):
    level: LogLevel = "INFO"
    log_to_file: bool = False
    redact: bool = True


class ServiceBoxConfig(BaseModel):
    """Root configuration model."""

    server: ServerConfig = Field(default_factory=ServerConfig)
    protocol: ProtocolConfig = Field(default_factory=ProtocolConfig)
    schema_: SchemaConfig = Field(default_factory=SchemaConfig, alias="schema")
    logging: LoggingConfig = Field(default_factory=LoggingConfig)

    model_config = {"populate_by_name": True}
