"""Concrete implementation of the Transport interface using httpx.

Performs exactly one HTTP request per call and raises on any non-2xx
response; retrying is left to the RetryExecutor driving it.
"""

import logging
from typing import Any, Dict, Optional

import httpx

from resilient import __version__
from resilient.domain.interfaces.transport import Transport
from resilient.domain.models.common import QueryParams, TargetUrl

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 30.0


class HttpxTransport(Transport):
    """httpx implementation of the Transport interface."""

    def __init__(
        self,
        base_url: str = "",
        timeout: float = DEFAULT_TIMEOUT_SECONDS,
        headers: Optional[Dict[str, str]] = None,
        client: Optional[httpx.AsyncClient] = None,
    ):
        """Initializes the transport.

        Args:
            base_url: Base URL every request URL is resolved against.
            timeout: Per-request timeout in seconds.
            headers: Extra default headers.
            client: Preconfigured client to use instead of creating one
                (e.g. one built on httpx.MockTransport in tests).
        """
        self.base_url = base_url.rstrip("/") if base_url else ""
        self.timeout = timeout
        self._owns_client = client is None
        self.client = client or httpx.AsyncClient(
            base_url=self.base_url,
            timeout=httpx.Timeout(timeout),
            headers=self._get_default_headers(headers),
        )

    def _get_default_headers(self, extra: Optional[Dict[str, str]]) -> Dict[str, str]:
        headers = {
            "Accept": "application/json",
            "User-Agent": f"resilient-client/{__version__}",
        }
        if extra:
            headers.update(extra)
        return headers

    async def __aenter__(self) -> "HttpxTransport":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Closes the underlying client if this transport created it."""
        if self._owns_client:
            await self.client.aclose()

    @staticmethod
    def _decode(response: httpx.Response) -> Any:
        """Returns the JSON body, the text body if it is not JSON, or None if empty."""
        if not response.content:
            return None
        try:
            return response.json()
        except ValueError:
            return response.text

    async def _send(
        self,
        method: str,
        url: TargetUrl,
        body: Any = None,
        query_params: Optional[QueryParams] = None,
    ) -> httpx.Response:
        logger.debug(f"{method} {url} params={query_params}")
        request_kwargs: Dict[str, Any] = {"params": query_params}
        if body is not None:
            if isinstance(body, (str, bytes)):
                request_kwargs["content"] = body
            else:
                request_kwargs["json"] = body
        response = await self.client.request(method, url, **request_kwargs)
        logger.debug(f"{method} {url} -> {response.status_code}")
        # Non-2xx raises httpx.HTTPStatusError, which the executor treats as a failed attempt
        response.raise_for_status()
        return response

    async def get(self, url: TargetUrl, query_params: Optional[QueryParams] = None) -> Any:
        response = await self._send("GET", url, query_params=query_params)
        return self._decode(response)

    async def post(self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        response = await self._send("POST", url, body, query_params)
        return self._decode(response)

    async def put(self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        response = await self._send("PUT", url, body, query_params)
        return self._decode(response)

    async def patch(self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None) -> Any:
        response = await self._send("PATCH", url, body, query_params)
        return self._decode(response)

    async def delete(self, url: TargetUrl, query_params: Optional[QueryParams] = None) -> None:
        await self._send("DELETE", url, query_params=query_params)
