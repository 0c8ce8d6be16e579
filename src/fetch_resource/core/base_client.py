"""
Default transport implementation based on httpx.
"""
import json
import logging
from typing import Any, Optional

import httpx

from ..config import RequestDescriptor, ResolvedConfig, TransportConfig, resolve_transport_config
from ..errors import TransportError
from ..types import FetchResponse

logger = logging.getLogger(__name__)

# Constants
LOG_PREFIX = "[HttpxTransport]"

def _format_body(body: Any) -> str:
    """
    Format body for logging safeguards against binary data.
    """
    if body is None:
        return "<empty>"
    if isinstance(body, (bytes, bytearray)):
        return f"<binary data: {len(body)} bytes>"
    if isinstance(body, str):
        try:
            if body.strip().startswith(("{", "[")):
                 return json.dumps(json.loads(body), indent=2)
        except json.JSONDecodeError:
            pass
        if len(body) > 5000:
             return body[:5000] + "... (truncated)"
        return body
    if isinstance(body, (dict, list)):
        return json.dumps(body, indent=2)
    return str(body)

class HttpxTransport:
    """
    Transport capability wrapping httpx.AsyncClient.

    Calling the transport with a RequestDescriptor issues the request and
    resolves with a FetchResponse whatever the status code. Network-level
    failures raise TransportError.
    """
    def __init__(self, config: Optional[TransportConfig] = None):
        config = config or TransportConfig()
        self._config: ResolvedConfig = resolve_transport_config(config)
        self._client: Optional[httpx.AsyncClient] = config.httpx_client

        # Flag to track if we own the client (created it)
        self._own_client = self._client is None

    async def connect(self) -> None:
        """Initialize the client if needed."""
        if self._client:
            return

        timeout = httpx.Timeout(
            connect=self._config.timeout.connect,
            read=self._config.timeout.read,
            write=self._config.timeout.write,
            pool=self._config.timeout.pool
        )

        self._client = httpx.AsyncClient(
            base_url=self._config.base_url or "",
            timeout=timeout,
            headers=self._config.headers,
            follow_redirects=self._config.follow_redirects,
        )

    async def close(self) -> None:
        """Close the client if we own it."""
        if self._own_client and self._client:
            await self._client.aclose()
            self._client = None

    async def __aenter__(self) -> "HttpxTransport":
        await self.connect()
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb) -> None:
        await self.close()

    async def __call__(self, descriptor: RequestDescriptor) -> FetchResponse:
        """Execute a request."""
        if not self._client:
            await self.connect()

        assert self._client is not None

        headers = dict(descriptor.headers)
        body = descriptor.body
        content = None
        json_body = None
        if isinstance(body, (str, bytes, bytearray)):
            content = body
        elif body is not None:
            json_body = body

        logger.debug(f"{LOG_PREFIX} Request: {descriptor.method} {descriptor.url}")
        if body is not None:
            logger.debug(f"{LOG_PREFIX} Request body: {_format_body(body)}")

        try:
            response = await self._client.request(
                method=descriptor.method,
                url=descriptor.url,
                headers=headers,
                params=descriptor.params or None,
                content=content,
                json=json_body,
            )
        except httpx.RequestError as e:
            logger.error(f"{LOG_PREFIX} Request failed: {descriptor.method} {descriptor.url}: {e}")
            raise TransportError.from_exception(e) from e

        logger.debug(f"{LOG_PREFIX} Response: {response.status_code} {descriptor.method} {descriptor.url}")
        return FetchResponse.from_httpx(response)
