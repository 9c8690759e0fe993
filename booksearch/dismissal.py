"""Close the suggestion region when the user points somewhere else."""
import logging
from typing import Any, Callable, Iterable, List, Tuple

logger = logging.getLogger(__name__)

PointerListener = Callable[[Any], None]


class PointerEventHub:
    """Document-wide pointer-down dispatcher."""

    def __init__(self):
        self._listeners: List[PointerListener] = []

    def add_listener(self, listener: PointerListener) -> None:
        """
        Subscribe to pointer-down events.

        Args:
            listener: Called with the event target
        """
        self._listeners.append(listener)

    def remove_listener(self, listener: PointerListener) -> None:
        """Unsubscribe; removing an unknown listener is a no-op."""
        if listener in self._listeners:
            self._listeners.remove(listener)

    @property
    def listener_count(self) -> int:
        return len(self._listeners)

    def pointer_down(self, target: Any) -> None:
        """
        Deliver a pointer-down to every listener.

        Args:
            target: Element the pointer went down on
        """
        for listener in list(self._listeners):
            listener(target)


class SuggestionEntry:
    """One rendered row of the suggestion dropdown."""

    def __init__(self, text: str):
        self.text = text

    def __repr__(self):
        return f"SuggestionEntry({self.text!r})"


class SuggestionRegion:
    """
    Boundary of the suggestion dropdown: the container plus its rows.

    Membership is by identity, so a result card that happens to carry the
    same text as a suggestion is still outside the region.
    """

    def __init__(self, texts: Iterable[str] = ()):
        self._entries: Tuple[SuggestionEntry, ...] = ()
        self.update(texts)

    @property
    def entries(self) -> Tuple[SuggestionEntry, ...]:
        return self._entries

    def update(self, texts: Iterable[str]) -> None:
        """
        Re-render the rows for a new suggestion list.

        Args:
            texts: Suggestion strings in display order
        """
        self._entries = tuple(SuggestionEntry(text) for text in texts)

    def contains(self, target: Any) -> bool:
        """
        Check whether a pointer target lies inside the region.

        Args:
            target: Element the pointer went down on

        Returns:
            True for the region itself or one of its current rows
        """
        return target is self or any(target is entry for entry in self._entries)


class DismissalWatcher:
    """
    Pointer-down listener scoped to the lifetime of the suggestion region.

    Use as a context manager, or pair attach() with detach() in a finally
    block; detach() is idempotent.
    """

    def __init__(
        self,
        hub: PointerEventHub,
        region: SuggestionRegion,
        on_dismiss: Callable[[], None]
    ):
        """
        Args:
            hub: Document-wide pointer events
            region: Boundary that does not dismiss
            on_dismiss: Called for a pointer-down outside the region
        """
        self.hub = hub
        self.region = region
        self.on_dismiss = on_dismiss
        self._attached = False

    @property
    def attached(self) -> bool:
        return self._attached

    def attach(self) -> "DismissalWatcher":
        """
        Start listening; a second call does not add a second listener.

        Returns:
            self, for use in a with statement
        """
        if not self._attached:
            self.hub.add_listener(self._handle_pointer_down)
            self._attached = True
        return self

    def detach(self) -> None:
        """Stop listening; safe to call when not attached."""
        if self._attached:
            self.hub.remove_listener(self._handle_pointer_down)
            self._attached = False

    def _handle_pointer_down(self, target: Any) -> None:
        if not self.region.contains(target):
            logger.debug("Pointer down outside suggestions, dismissing")
            self.on_dismiss()

    def __enter__(self):
        """Context manager entry."""
        return self.attach()

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.detach()
