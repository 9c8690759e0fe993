"""One search screen: facets, suggestions, search and dismissal wired together."""
import asyncio
import logging
from typing import Any, Optional

from booksearch.async_client import AsyncCatalogClient
from booksearch.config import Config
from booksearch.dismissal import DismissalWatcher, PointerEventHub, SuggestionRegion
from booksearch.facets import FilterFacetStore
from booksearch.models import Filters, SessionSnapshot
from booksearch.notify import Notifier, log_notification
from booksearch.search import SearchOrchestrator
from booksearch.suggestions import SuggestionController

logger = logging.getLogger(__name__)


class BookSearchSession:
    """
    In-memory state of one search screen.

    The dismissal listener is attached while suggestions are visible and
    always detached by close().
    """

    def __init__(
        self,
        client: AsyncCatalogClient,
        notifier: Notifier = log_notification,
        hub: Optional[PointerEventHub] = None
    ):
        self.client = client
        self.hub = hub or PointerEventHub()

        self.facets = FilterFacetStore(client, notifier)
        self.orchestrator = SearchOrchestrator(
            client,
            query_provider=lambda: self.suggestions.query,
            facets=self.facets,
            notifier=notifier
        )
        self.suggestions = SuggestionController(
            client,
            on_select=self.orchestrator.search,
            on_visibility_change=self._on_suggestions_visibility
        )
        self.region = SuggestionRegion()
        self.watcher = DismissalWatcher(self.hub, self.region, self.suggestions.hide_suggestions)

    @classmethod
    def from_config(cls, config: Config, notifier: Notifier = log_notification) -> "BookSearchSession":
        client = AsyncCatalogClient(config.api_url, timeout=config.SESSION_TIMEOUT)
        return cls(client, notifier)

    def _on_suggestions_visibility(self, visible: bool):
        if visible:
            self.region.update(self.suggestions.suggestions)
            self.watcher.attach()
        else:
            self.region.update(())
            self.watcher.detach()

    async def start(self) -> None:
        """Load the filter vocabulary and run the initial search."""
        await asyncio.gather(self.facets.load(), self.orchestrator.search())

    async def type(self, text: str) -> None:
        await self.suggestions.on_query_change(text)

    async def submit(self) -> None:
        """Enter key or search button."""
        self.suggestions.hide_suggestions()
        await self.orchestrator.search()

    async def select_suggestion(self, text: str) -> None:
        await self.suggestions.select_suggestion(text)

    def clear_query(self) -> None:
        self.suggestions.clear_query()

    def set_filter(self, field_name: str, value) -> Filters:
        return self.orchestrator.set_filter(field_name, value)

    def clear_filter(self, field_name: str) -> Filters:
        return self.orchestrator.clear_filter(field_name)

    async def apply_filters(self) -> None:
        await self.orchestrator.apply_filters()

    async def reset_filters(self) -> None:
        await self.orchestrator.reset_filters()

    def pointer_down(self, target: Any) -> None:
        self.hub.pointer_down(target)

    def snapshot(self) -> SessionSnapshot:
        state = self.orchestrator.state
        return SessionSnapshot(
            query=self.suggestions.query,
            suggestions=self.suggestions.suggestions,
            suggestions_visible=self.suggestions.visible,
            filters=self.orchestrator.filters,
            loading=state.loading,
            results=state.results,
            vocabulary=self.facets.vocabulary,
        )

    async def close(self):
        try:
            self.watcher.detach()
        finally:
            await self.client.close()

    async def __aenter__(self):
        return self

    async def __aexit__(self, exc_type, exc_val, exc_tb):
        await self.close()
