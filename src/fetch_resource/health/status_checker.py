"""
Response Status Checker.

Classifies a completed response as success or failure. Successful
responses resolve with their parsed body; failures raise HTTPStatusError
with a human-readable message pulled from the body when possible.
"""
import json
import logging
from typing import Any, Tuple, Union

import httpx

from ..errors import HTTPStatusError
from ..types import FetchResponse

logger = logging.getLogger(__name__)

LOG_PREFIX = "[StatusChecker]"

# Body fields consulted for an error message, in order.
MESSAGE_FIELDS = ("message", "exceptionMessage")


def _parse_json(text: str) -> Tuple[bool, Any]:
    """Return (parsed, value); value is None when the body is not JSON."""
    try:
        return True, json.loads(text)
    except (json.JSONDecodeError, TypeError):
        return False, None


def _error_message(body: Any, status: int, status_text: str) -> str:
    if isinstance(body, dict):
        for name in MESSAGE_FIELDS:
            value = body.get(name)
            if value:
                return str(value)
    if status_text:
        return status_text
    return f"Request failed with status {status}"


async def _as_fetch_response(response: Union[FetchResponse, httpx.Response]) -> FetchResponse:
    if isinstance(response, httpx.Response):
        await response.aread()
        return FetchResponse.from_httpx(response)
    return response


async def check_response_status(response: Union[FetchResponse, httpx.Response]) -> Any:
    """
    Resolve with the parsed body of a 2xx response, raise HTTPStatusError otherwise.

    A 2xx body that isn't JSON is returned as raw text.
    """
    response = await _as_fetch_response(response)

    parsed, body = _parse_json(response.text)

    if response.ok:
        return body if parsed else response.text

    message = _error_message(body, response.status, response.status_text)
    logger.debug(
        f"{LOG_PREFIX} {response.status} {response.status_text} from {response.url or '<unknown>'}: {message}"
    )
    raise HTTPStatusError(
        message,
        status=response.status,
        status_text=response.status_text,
        json_body=body if parsed else None,
    )
