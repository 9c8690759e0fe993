"""Parse and normalize catalog backend responses."""
import logging
from typing import Dict, Any, List, Optional, Tuple

from booksearch.models import Book, FacetVocabulary

logger = logging.getLogger(__name__)


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() == "true"
    return bool(value)


def _first_value(value: Any) -> Any:
    # Search indexes may return multi-valued fields as lists
    if isinstance(value, list):
        return value[0] if value else None
    return value


def _first(value: Any, default: str = "") -> str:
    value = _first_value(value)
    return default if value is None else str(value)


def _list_field(payload: Dict[str, Any], key: str) -> List[Any]:
    """
    Read an array field, treating a missing or null value as empty.

    Raises:
        ValueError: if the field is present but not an array
    """
    value = payload.get(key)
    if value is None:
        return []
    if not isinstance(value, list):
        raise ValueError(f"Expected '{key}' to be a list, got {type(value).__name__}")
    return value


def parse_book(doc: Dict[str, Any]) -> Optional[Book]:
    """
    Parse a single document from a search response.

    Args:
        doc: Single entry of response.docs

    Returns:
        Book object or None if parsing fails
    """
    try:
        book_id = _first(doc.get("id"))
        if not book_id:
            return None

        return Book(
            id=book_id,
            title=_first(doc.get("title"), "Unknown Title"),
            author=_first(doc.get("author"), "Unknown"),
            category=_first(doc.get("category")),
            published=_as_bool(_first_value(doc.get("published"))),
        )
    except (AttributeError, TypeError) as e:
        # Log but don't crash - one bad document must not hide the rest
        logger.warning(f"Failed to parse book: {e}")
        return None


def parse_search_response(response_json: Any) -> List[Book]:
    """
    Parse a full search response.

    Args:
        response_json: Complete response JSON ({"response": {"docs": [...]}})

    Returns:
        List of Book objects (empty if no docs found)

    Raises:
        ValueError: if docs is present but not a list
    """
    if not isinstance(response_json, dict):
        return []

    response = response_json.get("response")
    if not isinstance(response, dict):
        return []

    books = []

    for doc in _list_field(response, "docs"):
        book = parse_book(doc)
        if book:
            books.append(book)

    return books


def parse_suggestions(response_json: Any) -> List[str]:
    """Extract the suggestion strings; anything but an array means no suggestions."""
    if not isinstance(response_json, dict):
        return []
    suggestions = response_json.get("suggestions")
    if not isinstance(suggestions, list):
        return []
    return [str(s) for s in suggestions if s is not None]


def _unique(values: List[Any]) -> Tuple[str, ...]:
    seen = set()
    unique_values = []

    for value in values:
        if value is None:
            continue
        value = str(value)
        if value and value not in seen:
            seen.add(value)
            unique_values.append(value)

    return tuple(unique_values)


def parse_facets(response_json: Any) -> FacetVocabulary:
    """
    Parse the filter vocabulary.

    Args:
        response_json: {"categories": [...], "authors": [...]}

    Returns:
        FacetVocabulary in backend order with duplicates removed

    Raises:
        ValueError: if the response or either field has the wrong shape
    """
    if not isinstance(response_json, dict):
        raise ValueError("Filter response is not a JSON object")

    return FacetVocabulary(
        categories=_unique(_list_field(response_json, "categories")),
        authors=_unique(_list_field(response_json, "authors")),
    )
