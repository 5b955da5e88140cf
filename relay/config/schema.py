"""Pydantic v2 configuration schema with strict validation."""

from enum import StrEnum

from pydantic import BaseModel, Field, field_validator


class LogLevel(StrEnum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


class UpstreamConfig(BaseModel):
    model_config = {"extra": "forbid"}

    api_host: str = ""
    location_id: str = ""
    city: str = "朝阳区"
    forecast_days: int = Field(default=3, ge=1, le=30)
    timeout_seconds: float = Field(default=10.0, gt=0.0)
    max_retries: int = Field(default=2, ge=0)
    retry_base_delay: float = Field(default=1.0, ge=0.0)


class AuthConfig(BaseModel):
    model_config = {"extra": "forbid"}

    kid: str = ""
    sub: str = ""
    private_key_path: str = ""
    ttl_hours: int = Field(default=12, ge=1)
    backdate_seconds: int = Field(default=30, ge=0)


class CacheConfig(BaseModel):
    model_config = {"extra": "forbid"}

    path: str = "yesterday.json"


class ServerConfig(BaseModel):
    model_config = {"extra": "forbid"}

    host: str = "0.0.0.0"
    port: int = Field(default=3456, ge=1, le=65535)


class RelayConfig(BaseModel):
    model_config = {"extra": "forbid"}

    upstream: UpstreamConfig = UpstreamConfig()
    auth: AuthConfig = AuthConfig()
    cache: CacheConfig = CacheConfig()
    server: ServerConfig = ServerConfig()
    log_level: LogLevel = LogLevel.INFO

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_log_level(cls, value):
        return value.upper() if isinstance(value, str) else value
