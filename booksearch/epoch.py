"""Per-request-class counters for discarding stale responses."""


class RequestEpoch:
    """
    Monotonic counter identifying the most recently issued request of one class.

    Callers take a token with advance() before issuing a request and check
    is_current(token) before letting the response touch shared state.
    """

    def __init__(self, name: str = ""):
        """
        Args:
            name: Request class, used in log and repr output
        """
        self.name = name
        self._current = 0

    @property
    def current(self) -> int:
        return self._current

    def advance(self) -> int:
        """
        Start a new epoch.

        Returns:
            Token identifying the request about to be issued
        """
        self._current += 1
        return self._current

    def invalidate(self) -> None:
        """Make every outstanding token stale without issuing a request."""
        self._current += 1

    def is_current(self, token: int) -> bool:
        """
        Check a response's token against the live epoch.

        Args:
            token: Value returned by advance() when the request was issued

        Returns:
            True if no newer request or invalidation happened since
        """
        return token == self._current

    def __repr__(self):
        return f"RequestEpoch({self.name!r}, current={self._current})"
