"""Async HTTP client used by the interactive search session."""
import httpx
from typing import Any, Optional
import logging

from booksearch.models import Filters, build_search_params

logger = logging.getLogger(__name__)


class CatalogRequestError(Exception):
    """A catalog request failed in transport or returned a non-200 status."""

    def __init__(self, path: str, message: str, status_code: Optional[int] = None):
        super().__init__(f"{path}: {message}")
        self.path = path
        self.status_code = status_code


class AsyncCatalogClient:
    """Async client for the catalog backend's filter, suggest and search endpoints."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: Optional[float] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None
    ):
        """
        Initialize async client.

        Args:
            base_url: Backend base URL
            timeout: Request timeout in seconds (None waits indefinitely)
            transport: Optional transport override
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

        # Create async HTTP client
        self.client = httpx.AsyncClient(
            base_url=self.base_url,
            timeout=timeout,
            transport=transport
        )

    async def get_filters(self) -> Any:
        """Fetch the filter vocabulary JSON."""
        return await self._get("/filters/")

    async def suggest(self, query: str) -> Any:
        """Fetch autocomplete suggestions JSON for a partial query."""
        return await self._get("/suggest/", {"q": query})

    async def search(self, query: str, filters: Filters) -> Any:
        """
        Run a search.

        Args:
            query: Free-text query
            filters: Facet selection, encoded by build_search_params

        Returns:
            Search response JSON
        """
        return await self._get("/search/", build_search_params(query, filters))

    async def _get(self, path: str, params: Optional[dict] = None) -> Any:
        """
        Issue one GET request.

        Raises:
            CatalogRequestError: on transport failure, non-200 status or
                a body that is not JSON
        """
        try:
            logger.info(f"Async request: {path} {params or ''}")
            response = await self.client.get(path, params=params)
        except httpx.HTTPError as e:
            logger.warning(f"Async request failed: {path}: {e}")
            raise CatalogRequestError(path, str(e)) from e

        if response.status_code != 200:
            logger.warning(f"Status {response.status_code} for {path}")
            raise CatalogRequestError(
                path, f"unexpected status {response.status_code}", response.status_code
            )

        try:
            return response.json()
        except ValueError as e:
            raise CatalogRequestError(path, "response is not valid JSON") from e

    async def close(self):
        """Close the HTTP client."""
        await self.client.aclose()

    async def __aenter__(self):
        """Async context manager entry."""
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        """Async context manager exit."""
        await self.close()
