"""
Environment fallbacks for transport settings.

An explicit value always wins; otherwise the named environment variable is
used, then the default.
"""
import os
from typing import Optional, TypeVar

T = TypeVar("T")

TRUTHY = ("true", "1", "yes", "on")


def env_or(value: Optional[T], env_key: str, default: Optional[T] = None) -> Optional[T]:
    """Return value, else the raw env var, else default."""
    if value is not None:
        return value
    raw = os.getenv(env_key)
    if raw is None or raw == "":
        return default
    return raw  # type: ignore[return-value]


def env_flag(value: Optional[bool], env_key: str, default: bool) -> bool:
    """Boolean setting; env strings like "on" or "0" are understood."""
    if value is not None:
        return value
    raw = os.getenv(env_key)
    if raw is None or raw == "":
        return default
    return raw.strip().lower() in TRUTHY


def env_seconds(value: Optional[float], env_key: str) -> Optional[float]:
    """Timeout in seconds; an unparseable env value is ignored."""
    if value is not None:
        return value
    raw = os.getenv(env_key)
    if not raw:
        return None
    try:
        return float(raw)
    except ValueError:
        return None
