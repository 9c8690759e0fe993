"""Search lifecycle: filters, loading flag and result set."""
import logging
from typing import Callable, Optional, Tuple

from booksearch.async_client import AsyncCatalogClient, CatalogRequestError
from booksearch.epoch import RequestEpoch
from booksearch.facets import FilterFacetStore
from booksearch.models import Book, Filters, Notification, SearchState
from booksearch.notify import Notifier, log_notification
from booksearch.parse import parse_search_response

logger = logging.getLogger(__name__)


class SearchOrchestrator:
    """
    Runs searches for the current query and filters.

    Only the most recently issued search may resolve the loading flag or
    replace the results. Both are published as a single SearchState value.
    """

    def __init__(
        self,
        client: AsyncCatalogClient,
        query_provider: Callable[[], str],
        facets: Optional[FilterFacetStore] = None,
        notifier: Notifier = log_notification
    ):
        """
        Args:
            client: Catalog client
            query_provider: Returns the current query at search time
            facets: Vocabulary used to validate category/author selections
            notifier: Receives the destructive notification on failure
        """
        self.client = client
        self.query_provider = query_provider
        self.facets = facets
        self.notifier = notifier
        self.epoch = RequestEpoch("search")

        self._filters = Filters()
        self._state = SearchState()

    @property
    def filters(self) -> Filters:
        return self._filters

    @property
    def state(self) -> SearchState:
        return self._state

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def results(self) -> Tuple[Book, ...]:
        return self._state.results

    async def search(self) -> None:
        """Search with the query and filters as they are right now."""
        query = self.query_provider()
        filters = self._filters
        token = self.epoch.advance()

        self._state = SearchState(loading=True, results=self._state.results)
        logger.info(f"Search #{token}: q={query!r} filters={filters}")

        try:
            response = await self.client.search(query, filters)
            books = parse_search_response(response)
        except (CatalogRequestError, ValueError) as e:
            if not self.epoch.is_current(token):
                logger.debug(f"Dropping stale search failure #{token}")
                return
            logger.error(f"Search #{token} failed: {e}")
            self._state = SearchState(loading=False, results=())
            self.notifier(Notification.destructive(
                "Search failed", "An error occurred while searching. Please try again."
            ))
            return

        if not self.epoch.is_current(token):
            logger.debug(f"Dropping stale search result #{token}")
            return

        self._state = SearchState(loading=False, results=tuple(books))
        logger.info(f"Search #{token} found {len(books)} books")

    def set_filter(self, field_name: str, value) -> Filters:
        """
        Stage a filter selection without searching.

        Raises:
            ValueError: if a category/author is not in the loaded vocabulary
        """
        if field_name in ("category", "author") and self.facets is not None:
            if not self.facets.allows(field_name, value):
                raise ValueError(f"{value!r} is not a known {field_name}")

        self._filters = self._filters.with_value(field_name, value)
        return self._filters

    def clear_filter(self, field_name: str) -> Filters:
        """Drop one filter without searching."""
        self._filters = self._filters.with_value(field_name, "")
        return self._filters

    async def apply_filters(self) -> None:
        await self.search()

    async def reset_filters(self) -> None:
        """Clear every filter field and search once."""
        self._filters = Filters()
        await self.search()
