"""Shared fixtures: a scriptable in-memory catalog backend."""
import asyncio

import pytest

from booksearch.async_client import CatalogRequestError
from booksearch.notify import NotificationLog


class PendingCall:
    """One outstanding backend request; the test decides when it resolves."""

    def __init__(self, kind, args, future):
        self.kind = kind
        self.args = args
        self.future = future

    def resolve(self, value):
        self.future.set_result(value)

    def fail(self, message="backend unavailable"):
        self.future.set_exception(CatalogRequestError(f"/{self.kind}/", message))


class FakeCatalog:
    """
    Stand-in for AsyncCatalogClient.

    Kinds listed in `replies` answer immediately (an Exception instance is
    raised); every other call stays pending until the test resolves it.
    """

    def __init__(self, **replies):
        self.replies = replies
        self.calls = []
        self.closed = False

    async def _request(self, kind, *args):
        if kind in self.replies:
            self.calls.append(PendingCall(kind, args, None))
            reply = self.replies[kind]
            if isinstance(reply, Exception):
                raise reply
            return reply

        call = PendingCall(kind, args, asyncio.get_running_loop().create_future())
        self.calls.append(call)
        return await call.future

    async def get_filters(self):
        return await self._request("filters")

    async def suggest(self, query):
        return await self._request("suggest", query)

    async def search(self, query, filters):
        return await self._request("search", query, filters)

    async def close(self):
        self.closed = True

    def of(self, kind):
        return [c for c in self.calls if c.kind == kind]

    @staticmethod
    async def settle():
        """Let every runnable task reach its next await."""
        for _ in range(5):
            await asyncio.sleep(0)


@pytest.fixture
def notifications():
    return NotificationLog(forward=lambda notification: None)


def backend_error(message="backend unavailable"):
    return CatalogRequestError("/fake/", message)


@pytest.fixture
def make_catalog():
    return FakeCatalog


@pytest.fixture
def failure():
    return backend_error
