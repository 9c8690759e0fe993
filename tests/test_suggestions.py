"""Tests for the suggestion controller."""
import asyncio

import pytest

from booksearch.suggestions import SuggestionController


@pytest.mark.parametrize("text", ["", " ", "D", " D ", "\tx\n"])
def test_short_query_never_fetches(make_catalog, text):
    """Test that trimmed queries under two characters stay local."""
    catalog = make_catalog(suggest={"suggestions": ["never"]})
    controller = SuggestionController(catalog)

    asyncio.run(controller.on_query_change(text))

    assert controller.query == text
    assert controller.suggestions == ()
    assert controller.visible is False
    assert catalog.calls == []


def test_two_characters_fetch_and_show(make_catalog):
    """Typing "Du" shows the backend's suggestions."""
    catalog = make_catalog(suggest={"suggestions": ["Dune", "Dune Messiah"]})
    controller = SuggestionController(catalog)

    asyncio.run(controller.on_query_change("Du"))

    assert catalog.of("suggest")[0].args == ("Du",)
    assert controller.suggestions == ("Dune", "Dune Messiah")
    assert controller.visible is True


def test_empty_suggestions_hide_region(make_catalog):
    catalog = make_catalog(suggest={})
    controller = SuggestionController(catalog)

    asyncio.run(controller.on_query_change("Zz"))

    assert controller.suggestions == ()
    assert controller.visible is False


def test_failure_clears_silently(make_catalog, failure):
    """Test suggestion failures clear the list without raising."""
    catalog = make_catalog(suggest={"suggestions": ["Dune"]})
    controller = SuggestionController(catalog)

    async def scenario():
        await controller.on_query_change("Du")
        catalog.replies["suggest"] = failure()
        await controller.on_query_change("Dun")

    asyncio.run(scenario())

    assert controller.suggestions == ()
    assert controller.visible is False


def test_query_updates_before_response(make_catalog):
    """Test the query changes synchronously even while the fetch is pending."""
    catalog = make_catalog()
    controller = SuggestionController(catalog)

    async def scenario():
        task = asyncio.create_task(controller.on_query_change("Dun"))
        await catalog.settle()
        assert controller.query == "Dun"
        assert controller.visible is False
        catalog.of("suggest")[0].resolve({"suggestions": ["Dune"]})
        await task

    asyncio.run(scenario())

    assert controller.suggestions == ("Dune",)


@pytest.mark.parametrize("order", [("A", "B"), ("B", "A")])
def test_latest_request_wins(make_catalog, order):
    """Test only the newest request's response is shown, in any resolution order."""
    catalog = make_catalog()
    controller = SuggestionController(catalog)
    replies = {"A": {"suggestions": ["Du A"]}, "B": {"suggestions": ["Dun B"]}}

    async def scenario():
        first = asyncio.create_task(controller.on_query_change("Du"))
        await catalog.settle()
        second = asyncio.create_task(controller.on_query_change("Dun"))
        await catalog.settle()

        calls = dict(zip("AB", catalog.of("suggest")))
        for name in order:
            calls[name].resolve(replies[name])
            await catalog.settle()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert controller.suggestions == ("Dun B",)
    assert controller.visible is True


def test_stale_failure_does_not_clear_newer_list(make_catalog):
    catalog = make_catalog()
    controller = SuggestionController(catalog)

    async def scenario():
        first = asyncio.create_task(controller.on_query_change("Du"))
        await catalog.settle()
        second = asyncio.create_task(controller.on_query_change("Dun"))
        await catalog.settle()
        stale, latest = catalog.of("suggest")
        latest.resolve({"suggestions": ["Dune"]})
        await catalog.settle()
        stale.fail()
        await asyncio.gather(first, second)

    asyncio.run(scenario())

    assert controller.suggestions == ("Dune",)


def test_short_query_discards_pending_response(make_catalog):
    """Test deleting back below two characters beats a slow response."""
    catalog = make_catalog()
    controller = SuggestionController(catalog)

    async def scenario():
        task = asyncio.create_task(controller.on_query_change("Du"))
        await catalog.settle()
        await controller.on_query_change("D")
        catalog.of("suggest")[0].resolve({"suggestions": ["Dune"]})
        await task

    asyncio.run(scenario())

    assert controller.query == "D"
    assert controller.suggestions == ()
    assert controller.visible is False


def test_select_suggestion_searches_once(make_catalog):
    """Picking "Dune" sets the query, hides the list and searches once."""
    catalog = make_catalog(suggest={"suggestions": ["Dune", "Dune Messiah"]})
    searches = []

    async def on_select():
        searches.append(controller.query)

    controller = SuggestionController(catalog, on_select=on_select)

    async def scenario():
        await controller.on_query_change("Du")
        await controller.select_suggestion("Dune")

    asyncio.run(scenario())

    assert controller.query == "Dune"
    assert controller.visible is False
    assert controller.suggestions == ()
    assert searches == ["Dune"]
    assert len(catalog.of("suggest")) == 1


def test_pending_response_after_select_is_dropped(make_catalog):
    catalog = make_catalog()
    controller = SuggestionController(catalog)

    async def scenario():
        task = asyncio.create_task(controller.on_query_change("Dun"))
        await catalog.settle()
        await controller.select_suggestion("Dune")
        catalog.of("suggest")[0].resolve({"suggestions": ["Dune"]})
        await task

    asyncio.run(scenario())

    assert controller.visible is False


def test_clear_query(make_catalog):
    catalog = make_catalog(suggest={"suggestions": ["Dune"]})
    controller = SuggestionController(catalog)

    asyncio.run(controller.on_query_change("Du"))
    controller.clear_query()

    assert controller.query == ""
    assert controller.suggestions == ()
    assert controller.visible is False


def test_visibility_observer(make_catalog):
    catalog = make_catalog(suggest={"suggestions": ["Dune"]})
    seen = []
    controller = SuggestionController(catalog, on_visibility_change=seen.append)

    asyncio.run(controller.on_query_change("Du"))
    controller.hide_suggestions()

    assert seen == [True, False]


@pytest.mark.parametrize("response", [{"suggestions": 5}, {"suggestions": "Dune"}, ["Dune"]])
def test_malformed_suggestions_hide_region(make_catalog, response):
    """Test a wrongly shaped body neither raises nor shows characters as suggestions."""
    catalog = make_catalog(suggest=response)
    controller = SuggestionController(catalog)

    asyncio.run(controller.on_query_change("Du"))

    assert controller.suggestions == ()
    assert controller.visible is False
