"""Filter vocabulary loaded once per session."""
import logging
from typing import List, Tuple

from booksearch.async_client import AsyncCatalogClient, CatalogRequestError
from booksearch.models import FacetVocabulary, Notification, PublishedFilter
from booksearch.notify import Notifier, log_notification
from booksearch.parse import parse_facets

logger = logging.getLogger(__name__)


class FilterFacetStore:
    """Holds the selectable categories and authors."""

    def __init__(self, client: AsyncCatalogClient, notifier: Notifier = log_notification):
        self.client = client
        self.notifier = notifier
        self._vocabulary = FacetVocabulary()
        self._loaded = False

    @property
    def vocabulary(self) -> FacetVocabulary:
        return self._vocabulary

    @property
    def loaded(self) -> bool:
        return self._loaded

    async def load(self) -> FacetVocabulary:
        """
        Load the vocabulary from /filters/.

        Once a load succeeds the store is read-only and later calls return
        the held vocabulary. A failure leaves it empty and raises a
        destructive notification; nothing retries automatically.

        Returns:
            The current vocabulary (empty after a failure)
        """
        if self._loaded:
            return self._vocabulary

        try:
            vocabulary = parse_facets(await self.client.get_filters())
        except (CatalogRequestError, ValueError) as e:
            logger.error(f"Failed to load filters: {e}")
            self.notifier(Notification.destructive(
                "Error", "Failed to load filters. Please try again."
            ))
            return self._vocabulary

        self._vocabulary = vocabulary
        self._loaded = True
        logger.info(
            f"Loaded {len(vocabulary.categories)} categories and "
            f"{len(vocabulary.authors)} authors"
        )
        return vocabulary

    def options(self, field_name: str) -> List[Tuple[str, str]]:
        """
        Selectable (value, label) pairs for one filter field.

        Every field starts with the implicit ("", "All") entry.
        """
        if field_name == "published":
            return [(p.value, p.label) for p in PublishedFilter]

        values = self._vocabulary.values_for(field_name)
        return [("", "All")] + [(value, value) for value in values]

    def allows(self, field_name: str, value: str) -> bool:
        """True if value may be selected for a category/author field."""
        return not value or value in self._vocabulary.values_for(field_name)
