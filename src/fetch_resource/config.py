"""
Configuration models and validation for fetch-resource.
"""
from dataclasses import dataclass
from typing import Any, Dict, Optional, Union

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator

from .env import env_flag, env_or, env_seconds
from .types import HttpMethod

# Constants
DEFAULT_TIMEOUT_CONNECT = 5.0
DEFAULT_TIMEOUT_READ = 30.0
DEFAULT_TIMEOUT_WRITE = 10.0
DEFAULT_METHOD = "GET"

ENV_BASE_URL = "FETCH_RESOURCE_BASE_URL"
ENV_TIMEOUT = "FETCH_RESOURCE_TIMEOUT"
ENV_FOLLOW_REDIRECTS = "FETCH_RESOURCE_FOLLOW_REDIRECTS"


def _validate_base_url(v: str) -> str:
    if not v.startswith(("http://", "https://")):
        raise ValueError("base_url must start with http:// or https://")
    return v.rstrip("/")


def _validate_interval(v: Optional[int]) -> Optional[int]:
    # 0 disables the timer
    if not v:
        return None
    if v < 0:
        raise ValueError("interval must be a positive number of milliseconds")
    return v


class RequestInput(BaseModel):
    """
    Structured caller input for one resource request.

    Every field is optional; a missing or empty url means "no request".
    camelCase names (address, bearerToken, refreshIntervalMs, resetDelayMs)
    are accepted alongside the snake_case ones.
    """
    model_config = ConfigDict(extra="forbid")

    url: Optional[str] = Field(default=None, validation_alias=AliasChoices("url", "address"))
    method: str = DEFAULT_METHOD
    headers: Dict[str, str] = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    bearer_token: Optional[str] = Field(
        default=None, validation_alias=AliasChoices("bearer_token", "bearerToken")
    )
    refresh_interval_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("refresh_interval_ms", "refreshIntervalMs")
    )
    reset_delay_ms: Optional[int] = Field(
        default=None, validation_alias=AliasChoices("reset_delay_ms", "resetDelayMs")
    )

    @field_validator("headers", "params", mode="before")
    @classmethod
    def empty_mapping(cls, v: Any) -> Any:
        return {} if v is None else v

    @field_validator("method")
    @classmethod
    def upper_method(cls, v: str) -> str:
        return (v or DEFAULT_METHOD).upper()

    @field_validator("refresh_interval_ms", "reset_delay_ms")
    @classmethod
    def positive_interval(cls, v: Optional[int]) -> Optional[int]:
        return _validate_interval(v)


class RequestDescriptor(BaseModel):
    """
    Canonical, immutable description of one HTTP request.

    Two descriptors are equal when all their fields are equal.
    """
    model_config = ConfigDict(frozen=True)

    url: str
    method: HttpMethod = DEFAULT_METHOD
    headers: Dict[str, str] = Field(default_factory=dict)
    params: Dict[str, Any] = Field(default_factory=dict)
    body: Any = None
    refresh_interval_ms: Optional[int] = None
    reset_delay_ms: Optional[int] = None

    @field_validator("url")
    @classmethod
    def non_empty_url(cls, v: str) -> str:
        if not v or not v.strip():
            raise ValueError("url must not be empty")
        return v

    @field_validator("method", mode="before")
    @classmethod
    def upper_method(cls, v: Any) -> Any:
        return v.upper() if isinstance(v, str) else v

    @field_validator("refresh_interval_ms", "reset_delay_ms")
    @classmethod
    def positive_interval(cls, v: Optional[int]) -> Optional[int]:
        return _validate_interval(v)


class TimeoutConfig(BaseModel):
    """Timeout configuration."""
    connect: float = DEFAULT_TIMEOUT_CONNECT
    read: float = DEFAULT_TIMEOUT_READ
    write: float = DEFAULT_TIMEOUT_WRITE
    pool: Optional[float] = None


class TransportConfig(BaseModel):
    """Configuration for the default httpx transport."""
    model_config = {"arbitrary_types_allowed": True}

    base_url: Optional[str] = None
    headers: Dict[str, str] = Field(default_factory=dict)
    timeout: Optional[Union[float, TimeoutConfig]] = None
    follow_redirects: Optional[bool] = None

    # Optional pre-configured client (httpx)
    httpx_client: Any = None

    @field_validator("base_url")
    @classmethod
    def validate_url(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        return _validate_base_url(v)


def normalize_timeout(timeout: Optional[Union[float, TimeoutConfig]]) -> TimeoutConfig:
    """Normalize timeout to TimeoutConfig object."""
    if timeout is None:
        return TimeoutConfig()
    if isinstance(timeout, (int, float)):
        return TimeoutConfig(connect=float(timeout), read=float(timeout), write=float(timeout))
    return timeout


@dataclass
class ResolvedConfig:
    """Fully resolved transport configuration ready for usage."""
    base_url: Optional[str]
    headers: Dict[str, str]
    timeout: TimeoutConfig
    follow_redirects: bool


def resolve_transport_config(config: Optional[TransportConfig] = None) -> ResolvedConfig:
    """Apply environment overrides and defaults to a transport config."""
    config = config or TransportConfig()

    base_url = env_or(config.base_url, ENV_BASE_URL)
    if base_url:
        base_url = _validate_base_url(base_url)

    timeout: Optional[Union[float, TimeoutConfig]] = config.timeout
    if timeout is None:
        timeout = env_seconds(None, ENV_TIMEOUT)

    return ResolvedConfig(
        base_url=base_url or None,
        headers=dict(config.headers),
        timeout=normalize_timeout(timeout),
        follow_redirects=env_flag(config.follow_redirects, ENV_FOLLOW_REDIRECTS, True),
    )
