"""Interface for request transports.

Defines the contract the client facade issues single attempts through.
A transport performs exactly one request per call and must raise for any
non-2xx-equivalent outcome; it never retries on its own.
"""

import abc
from typing import Any, Optional

from ..models.common import QueryParams, TargetUrl


class Transport(abc.ABC):
    """Abstract Base Class for a verb-shaped request transport."""

    @abc.abstractmethod
    async def get(self, url: TargetUrl, query_params: Optional[QueryParams] = None) -> Any:
        """Fetches the resource at `url`.

        Args:
            url: Target URL, relative to the transport's base URL.
            query_params: Query parameters to pass with the request.

        Returns:
            The decoded response body.

        Raises:
            Exception: If the request fails or the response is not a success.
        """
        pass

    @abc.abstractmethod
    async def post(
        self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None
    ) -> Any:
        """Creates a resource at `url` with `body` as payload."""
        pass

    @abc.abstractmethod
    async def put(
        self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None
    ) -> Any:
        """Replaces the resource at `url` with `body`."""
        pass

    @abc.abstractmethod
    async def patch(
        self, url: TargetUrl, body: Any = None, query_params: Optional[QueryParams] = None
    ) -> Any:
        """Partially updates the resource at `url` with `body`."""
        pass

    @abc.abstractmethod
    async def delete(self, url: TargetUrl, query_params: Optional[QueryParams] = None) -> None:
        """Removes the resource at `url`."""
        pass
