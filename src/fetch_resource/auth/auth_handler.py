"""
Auth handler utilities for fetch_resource.
"""
import logging
from typing import Dict, Optional

logger = logging.getLogger(__name__)
LOG_PREFIX = "[AUTH]"

AUTHORIZATION_HEADER = "Authorization"


def _mask_value(val: Optional[str]) -> str:
    """Mask sensitive value for logging, showing first 10 chars."""
    if not val:
        return "<empty>"
    if len(val) <= 10:
        return "*" * len(val)
    return val[:10] + "*" * (len(val) - 10)


class BearerAuthHandler:
    """Bearer token auth handler."""

    def __init__(self, token: Optional[str] = None):
        self._token = token

    def get_header(self) -> Optional[Dict[str, str]]:
        """Get bearer auth header, or None without a token."""
        if not self._token:
            return None
        header = {AUTHORIZATION_HEADER: f"Bearer {self._token}"}
        logger.debug(
            f"{LOG_PREFIX} BearerAuthHandler.get_header: token={_mask_value(self._token)} -> "
            f"Authorization={_mask_value(header[AUTHORIZATION_HEADER])}"
        )
        return header


def merge_auth_headers(
    auth_headers: Optional[Dict[str, str]],
    headers: Dict[str, str],
) -> Dict[str, str]:
    """
    Merge caller headers on top of auth headers.

    Caller headers win; names are compared case-insensitively so a caller's
    "authorization" replaces an injected "Authorization".
    """
    merged: Dict[str, str] = {}
    caller_names = {name.lower() for name in headers}
    for name, value in (auth_headers or {}).items():
        if name.lower() in caller_names:
            logger.debug(f"{LOG_PREFIX} merge_auth_headers: caller header '{name}' takes precedence")
            continue
        merged[name] = value
    merged.update(headers)
    return merged
