"""Data models for the book search client."""
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Dict, Tuple


@dataclass(frozen=True)
class Book:
    """Catalog document as returned by the search backend."""
    id: str
    title: str
    author: str
    category: str
    published: bool

    @property
    def status_str(self) -> str:
        """Human readable publication status."""
        return "Published" if self.published else "Unpublished"


class PublishedFilter(Enum):
    """Publication status constraint."""
    UNSET = ""
    TRUE = "true"
    FALSE = "false"

    @classmethod
    def parse(cls, value) -> "PublishedFilter":
        """Accept an enum member, a bool, None, or the "true"/"false"/"" strings."""
        if isinstance(value, cls):
            return value
        if value is None:
            return cls.UNSET
        if isinstance(value, bool):
            return cls.TRUE if value else cls.FALSE
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            raise ValueError(f"Invalid published filter: {value!r}")

    @property
    def label(self) -> str:
        return PUBLISHED_LABELS[self]


PUBLISHED_LABELS = {
    PublishedFilter.UNSET: "All",
    PublishedFilter.TRUE: "Published",
    PublishedFilter.FALSE: "Unpublished",
}


@dataclass(frozen=True)
class Filters:
    """Facet selection; empty category/author means no constraint."""
    category: str = ""
    author: str = ""
    published: PublishedFilter = PublishedFilter.UNSET

    def with_value(self, field_name: str, value) -> "Filters":
        """Return a copy with one field replaced."""
        if field_name == "published":
            return replace(self, published=PublishedFilter.parse(value))
        if field_name not in ("category", "author"):
            raise ValueError(f"Unknown filter field: {field_name!r}")
        return replace(self, **{field_name: value or ""})

    def is_empty(self) -> bool:
        return (
            not self.category
            and not self.author
            and self.published is PublishedFilter.UNSET
        )


def build_search_params(query: str, filters: Filters) -> Dict[str, str]:
    """
    Encode a search request as query parameters.

    Empty fields are left out entirely rather than sent as empty strings,
    and the publication status is sent as the literal "true" or "false".

    Args:
        query: Free-text query
        filters: Current facet selection

    Returns:
        Ordered parameter mapping
    """
    params: Dict[str, str] = {}

    if query:
        params["q"] = query
    if filters.category:
        params["category"] = filters.category
    if filters.author:
        params["author"] = filters.author
    if filters.published is not PublishedFilter.UNSET:
        params["published"] = filters.published.value

    return params


@dataclass(frozen=True)
class FacetVocabulary:
    """Selectable filter values loaded from the backend."""
    categories: Tuple[str, ...] = ()
    authors: Tuple[str, ...] = ()

    def values_for(self, field_name: str) -> Tuple[str, ...]:
        if field_name == "category":
            return self.categories
        if field_name == "author":
            return self.authors
        raise ValueError(f"No vocabulary for filter field: {field_name!r}")


@dataclass(frozen=True)
class Notification:
    """User-facing message handed to the notification layer."""
    title: str
    description: str
    variant: str = "default"

    @classmethod
    def destructive(cls, title: str, description: str) -> "Notification":
        return cls(title=title, description=description, variant="destructive")


@dataclass(frozen=True)
class SearchState:
    """Loading flag and result set, always published together."""
    loading: bool = False
    results: Tuple[Book, ...] = ()


@dataclass(frozen=True)
class SessionSnapshot:
    """Everything the presentation layer renders at one instant."""
    query: str
    suggestions: Tuple[str, ...]
    suggestions_visible: bool
    filters: Filters
    loading: bool
    results: Tuple[Book, ...]
    vocabulary: FacetVocabulary = field(default_factory=FacetVocabulary)

    @property
    def active_filters(self) -> Dict[str, str]:
        """Badge text per applied filter field."""
        badges = {}
        if self.filters.category:
            badges["category"] = f"Category: {self.filters.category}"
        if self.filters.author:
            badges["author"] = f"Author: {self.filters.author}"
        if self.filters.published is not PublishedFilter.UNSET:
            badges["published"] = self.filters.published.label
        return badges

