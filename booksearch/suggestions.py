"""Query text and live autocomplete suggestions."""
import logging
from typing import Awaitable, Callable, Optional, Tuple

from booksearch.async_client import AsyncCatalogClient, CatalogRequestError
from booksearch.epoch import RequestEpoch
from booksearch.parse import parse_suggestions

logger = logging.getLogger(__name__)

# Queries shorter than this (after trimming) never hit /suggest/
MIN_SUGGEST_LENGTH = 2


class SuggestionController:
    """
    Owns the query string and the suggestion list.

    Every suggestion request is tagged with an epoch; only the response of
    the most recently issued request may change the list.
    """

    def __init__(
        self,
        client: AsyncCatalogClient,
        on_select: Optional[Callable[[], Awaitable[None]]] = None,
        on_visibility_change: Optional[Callable[[bool], None]] = None
    ):
        """
        Args:
            client: Catalog client
            on_select: Search trigger run after a suggestion is picked
            on_visibility_change: Called with the visibility after every list update
        """
        self.client = client
        self.on_select = on_select
        self.on_visibility_change = on_visibility_change
        self.epoch = RequestEpoch("suggest")

        self._query = ""
        self._suggestions: Tuple[str, ...] = ()
        self._visible = False

    @property
    def query(self) -> str:
        return self._query

    @property
    def suggestions(self) -> Tuple[str, ...]:
        return self._suggestions

    @property
    def visible(self) -> bool:
        return self._visible

    def _show(self, suggestions):
        self._suggestions = tuple(suggestions)
        self._set_visible(bool(self._suggestions))

    def _set_visible(self, visible: bool):
        self._visible = visible
        if self.on_visibility_change:
            self.on_visibility_change(visible)

    async def on_query_change(self, text: str) -> None:
        """
        Handle a keystroke.

        The query is updated before the first await. Short queries clear
        the list locally; longer ones fetch suggestions.
        """
        self._query = text

        if len(text.strip()) < MIN_SUGGEST_LENGTH:
            self.hide_suggestions()
            return

        token = self.epoch.advance()

        try:
            response = await self.client.suggest(text)
            suggestions = parse_suggestions(response)
        except (CatalogRequestError, ValueError) as e:
            if not self.epoch.is_current(token):
                logger.debug(f"Dropping stale suggestion failure #{token}")
                return
            # Suggestions are a convenience; fail silently
            logger.info(f"Suggestions unavailable for {text!r}: {e}")
            self._show(())
            return

        if not self.epoch.is_current(token):
            logger.debug(f"Dropping stale suggestions #{token} for {text!r}")
            return

        self._show(suggestions)

    def hide_suggestions(self) -> None:
        """Clear and hide the list; responses still in flight become stale."""
        self.epoch.invalidate()
        self._suggestions = ()
        self._set_visible(False)

    def clear_query(self) -> None:
        self._query = ""
        self.hide_suggestions()

    async def select_suggestion(self, text: str) -> None:
        """Take a suggestion as the query and search for it right away."""
        self._query = text
        self.hide_suggestions()

        if self.on_select:
            await self.on_select()
