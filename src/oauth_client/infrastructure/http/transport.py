"""HTTP transport for provider calls.

The engine only needs "send a request, get status + headers + body back".
HttpxTransport is the default implementation; anything with the same
``send`` coroutine can be plugged in instead (tests use AsyncMock).
"""

import logging
from dataclasses import dataclass, field
from typing import Mapping, Optional, Protocol, Union

import httpx

from oauth_client.exceptions import TransportError, TransportTimeoutError

logger = logging.getLogger(__name__)

Body = Union[str, bytes, None]


@dataclass(frozen=True)
class HttpResponse:
    """Raw provider response

    Attributes:
        status_code: HTTP status
        headers: Response headers
        body: Decoded response text
    """
    status_code: int
    headers: Mapping[str, str] = field(default_factory=dict)
    body: str = ""

    def header(self, name: str) -> Optional[str]:
        """Case-insensitive header lookup"""
        wanted = name.lower()
        for key, value in self.headers.items():
            if key.lower() == wanted:
                return value
        return None

    @property
    def content_type(self) -> str:
        return (self.header("content-type") or "").lower()


class Transport(Protocol):
    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> HttpResponse:
        ...


class HttpxTransport:
    """httpx-backed transport.

    A fresh AsyncClient is opened per call unless one is injected, in which
    case the caller owns its lifecycle (connection pooling, shutdown).
    """

    SUPPORTED_METHODS = ("GET", "POST", "DELETE")

    def __init__(
        self,
        timeout: float = 30.0,
        verify: bool = True,
        client: Optional[httpx.AsyncClient] = None,
    ):
        self.timeout = timeout
        self.verify = verify
        self._client = client

    async def send(
        self,
        method: str,
        url: str,
        headers: Optional[Mapping[str, str]] = None,
        body: Body = None,
    ) -> HttpResponse:
        method = method.upper()
        if method not in self.SUPPORTED_METHODS:
            raise ValueError(f"Unsupported HTTP method: {method}")

        try:
            if self._client is not None:
                response = await self._client.request(
                    method, url, headers=headers, content=body, timeout=self.timeout
                )
            else:
                async with httpx.AsyncClient(timeout=self.timeout, verify=self.verify) as client:
                    response = await client.request(method, url, headers=headers, content=body)
        except httpx.TimeoutException as e:
            logger.error(f"{method} {url} timed out after {self.timeout}s")
            raise TransportTimeoutError(f"Request to {url} timed out", url=url) from e
        except httpx.HTTPError as e:
            logger.error(f"{method} {url} failed: {e}")
            raise TransportError(f"Request to {url} failed: {e}", url=url) from e

        logger.debug(f"{method} {url} -> {response.status_code}")
        return HttpResponse(
            status_code=response.status_code,
            headers=dict(response.headers),
            body=response.text,
        )
