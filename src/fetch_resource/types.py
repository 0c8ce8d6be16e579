"""
Core type definitions for fetch-resource.
"""
import json
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, Literal, Protocol

import httpx

# HTTP Methods
HttpMethod = Literal["GET", "POST", "PUT", "PATCH", "DELETE", "HEAD", "OPTIONS"]


@dataclass
class FetchResponse:
    """Standardized response object handed from a transport to the status checker."""
    status: int
    status_text: str
    headers: Dict[str, str] = field(default_factory=dict)
    url: str = ""
    text: str = ""  # Raw body, decoded

    @property
    def ok(self) -> bool:
        """Check if status code is 2xx."""
        return 200 <= self.status < 300

    def json(self) -> Any:
        """Parse the body as JSON. Raises ValueError on malformed bodies."""
        return json.loads(self.text)

    @classmethod
    def from_httpx(cls, response: httpx.Response) -> "FetchResponse":
        """Build from an already-read httpx response."""
        try:
            url = str(response.url)
        except RuntimeError:
            # Response built without a request
            url = ""
        return cls(
            status=response.status_code,
            status_text=response.reason_phrase,
            headers=dict(response.headers),
            url=url,
            text=response.text,
        )


class Transport(Protocol):
    """
    Transport capability: issue one request, resolve with a response.

    Raise on network-level failures; never raise for HTTP status codes.
    """
    def __call__(self, descriptor: Any) -> Awaitable[FetchResponse]: ...


class TimerHandle(Protocol):
    """Handle returned by a scheduler. cancel() must be idempotent."""
    def cancel(self) -> None: ...


class Scheduler(Protocol):
    """
    Delayed-callback scheduler. asyncio event loops satisfy this protocol.
    """
    def call_later(self, delay: float, callback: Callable[..., Any], *args: Any) -> TimerHandle: ...
