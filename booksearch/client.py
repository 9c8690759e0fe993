"""Blocking HTTP client for one-shot catalog lookups, with resilience patterns."""
import time
import random
import requests
from typing import Optional, Dict, Any
import logging

from booksearch.models import Filters, build_search_params

logger = logging.getLogger(__name__)


def is_transient_status(status_code: int) -> bool:
    """True for statuses worth retrying: rate limiting and server errors."""
    return status_code == 429 or status_code >= 500


class CatalogClient:
    """Client for the catalog backend with timeouts, retries, and backoff."""

    def __init__(
        self,
        base_url: str = "http://localhost:8000",
        timeout: int = 10,
        max_retries: int = 3,
        base_backoff: float = 1.0
    ):
        """
        Initialize catalog client.

        Args:
            base_url: Backend base URL
            timeout: Request timeout in seconds
            max_retries: Maximum number of retry attempts
            base_backoff: Base delay for exponential backoff
        """
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.max_retries = max_retries
        self.base_backoff = base_backoff

        # Create session for connection pooling
        self.session = requests.Session()

    def get_filters(self) -> Optional[Dict[str, Any]]:
        """Fetch the filter vocabulary, or None if all retries failed."""
        return self._make_request_with_retry(f"{self.base_url}/filters/", {})

    def suggest(self, query: str) -> Optional[Dict[str, Any]]:
        """Fetch suggestions for a partial query, or None if all retries failed."""
        return self._make_request_with_retry(f"{self.base_url}/suggest/", {"q": query})

    def search(self, query: str, filters: Optional[Filters] = None) -> Optional[Dict[str, Any]]:
        """
        Search for books.

        Args:
            query: Search query string (may be empty)
            filters: Facet selection

        Returns:
            API response JSON or None if all retries failed
        """
        params = build_search_params(query, filters or Filters())
        return self._make_request_with_retry(f"{self.base_url}/search/", params)

    def _make_request_with_retry(
        self,
        url: str,
        params: Dict[str, Any]
    ) -> Optional[Dict[str, Any]]:
        """
        GET a catalog endpoint, retrying only transient failures.

        Rate limiting, server errors, timeouts and dropped connections are
        retried with backoff. Any other non-200 status is final.

        Args:
            url: Request URL
            params: Query parameters

        Returns:
            Response JSON or None if the request failed
        """
        for attempt in range(self.max_retries):
            try:
                logger.info(f"Request attempt {attempt + 1}/{self.max_retries}: {url}")
                response = self.session.get(url, params=params, timeout=self.timeout)
            except requests.exceptions.Timeout:
                reason = "timeout"
            except requests.exceptions.ConnectionError as e:
                reason = f"connection error: {e}"
            else:
                if response.status_code == 200:
                    return self._decode(url, response)
                if not is_transient_status(response.status_code):
                    logger.error(f"Catalog returned {response.status_code} for {url}, not retrying")
                    return None
                reason = f"status {response.status_code}"

            logger.warning(f"Attempt {attempt + 1} for {url} failed: {reason}")
            if attempt < self.max_retries - 1:
                self._backoff(attempt)

        logger.error(f"All {self.max_retries} attempts failed")
        return None

    def _decode(self, url: str, response) -> Optional[Dict[str, Any]]:
        """Response JSON, or None if the body is not JSON."""
        try:
            return response.json()
        except ValueError as e:
            logger.error(f"Invalid JSON from {url}: {e}")
            return None

    def _backoff(self, attempt: int):
        """
        Sleep with exponential backoff and jitter.

        Args:
            attempt: Current attempt number (0-indexed)
        """
        delay = self.base_backoff * (2 ** attempt)
        jitter = random.uniform(0, delay)
        total_delay = delay + jitter

        logger.info(f"Backing off for {total_delay:.2f} seconds")
        time.sleep(total_delay)

    def close(self):
        """Close the session."""
        self.session.close()

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()
