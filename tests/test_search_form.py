"""
Tests for the search form controller.
"""

import asyncio

import pytest
from unittest.mock import AsyncMock, MagicMock

from conftest import FailingStore, SAMPLE_PROPERTIES, make_property, run_async
from realty_site.models import SearchCriteria, SearchOutcome
from realty_site.search import (
    LocationSuggestionResolver,
    PropertyQueryComposer,
    ResultBroadcast,
    SEARCH_ERROR_MESSAGE,
    SearchForm,
    not_found_message,
)
from realty_site.store import InMemoryDataStore


def make_form(store=None, on_scroll=None):
    store = store or InMemoryDataStore(
        tables={"properties": [dict(row) for row in SAMPLE_PROPERTIES]}
    )
    composer = PropertyQueryComposer(store, ResultBroadcast())
    resolver = LocationSuggestionResolver(store)
    return SearchForm(composer, resolver, on_scroll_to_results=on_scroll)


async def submit(form):
    outcome = await form.submit()
    await form.composer.wait_for_history()
    return outcome


def test_successful_search_sets_results_and_scrolls():
    scroll = MagicMock()
    form = make_form(on_scroll=scroll)
    form.update(property_type="house")

    outcome = run_async(submit(form))

    assert outcome.ok
    assert sorted(r.id for r in form.results) == ["p-2", "p-5"]
    assert form.error_message == ""
    assert form.is_searching is False
    scroll.assert_called_once()


def test_no_results_sets_not_found_message():
    scroll = MagicMock()
    form = make_form(on_scroll=scroll)

    async def scenario():
        await form.set_location("Unknown Place")
        return await submit(form)

    run_async(scenario())

    assert form.results == []
    assert form.error_message == 'Nenhum imóvel encontrado em "Unknown Place" com os critérios especificados.'
    scroll.assert_not_called()


def test_not_found_message_without_location():
    assert not_found_message("") == "Nenhum imóvel encontrado com os critérios especificados."


def test_store_failure_sets_error_message_and_resets_flag():
    form = make_form(store=FailingStore(fail_tables={"properties"}))

    outcome = run_async(submit(form))

    assert not outcome.ok
    assert form.error_message == SEARCH_ERROR_MESSAGE
    assert form.is_searching is False


def test_unexpected_exception_resets_flag():
    form = make_form()
    form.composer.search = AsyncMock(side_effect=RuntimeError("boom"))

    outcome = run_async(form.submit())

    assert not outcome.ok
    assert form.error_message == SEARCH_ERROR_MESSAGE
    assert form.is_searching is False


def test_resubmit_while_searching_is_ignored():
    form = make_form()
    release = asyncio.Event()
    calls = []

    async def slow_search(criteria):
        calls.append(criteria)
        await release.wait()
        return SearchOutcome(records=[])

    form.composer.search = slow_search

    async def scenario():
        first = asyncio.ensure_future(form.submit())
        await asyncio.sleep(0)
        assert form.is_searching
        second = await form.submit()
        release.set()
        await first
        return second

    assert run_async(scenario()) is None
    assert len(calls) == 1
    assert form.is_searching is False


def test_short_location_clears_suggestions():
    form = make_form()

    async def scenario():
        await form.set_location("jar")
        assert form.suggestions
        await form.set_location("ja")

    run_async(scenario())
    assert form.suggestions == {}
    assert form.criteria.location == "ja"


def test_stale_suggestions_are_discarded():
    form = make_form()
    release = asyncio.Event()

    async def slow_resolve(text):
        if text == "jar":
            await release.wait()
            return {"stale": object()}
        return {}

    form.resolver.resolve = slow_resolve

    async def scenario():
        pending = asyncio.ensure_future(form.set_location("jar"))
        await asyncio.sleep(0)
        await form.set_location("jardins x")
        release.set()
        await pending

    run_async(scenario())
    assert form.suggestions == {}
    assert form.criteria.location == "jardins x"


def test_select_suggestion_searches_immediately():
    form = make_form()

    async def scenario():
        await form.set_location("jar")
        label = next(iter(form.suggestions))
        await form.select_suggestion(label)
        await form.composer.wait_for_history()

    run_async(scenario())

    assert form.criteria.location == "Jardins - São Paulo, SP"
    assert form.suggestions == {}
    assert sorted(r.id for r in form.results) == ["p-1", "p-2", "p-3", "p-4", "p-5"]
    assert form.show_location_results is True


def test_picked_suggestion_without_location_finds_its_property():
    store = InMemoryDataStore(tables={"properties": [
        make_property("x-1", None, city="Campinas", region="SP"),
        make_property("x-2", "Moema", city="São Paulo", region="RJ"),
    ]})
    form = make_form(store)

    async def scenario():
        await form.set_location("Campinas")
        assert list(form.suggestions) == ["Campinas - SP"]
        await form.select_suggestion("Campinas - SP")
        await form.composer.wait_for_history()

    run_async(scenario())

    assert form.criteria.location == "Campinas - SP"
    assert [r.id for r in form.results] == ["x-1"]
    assert form.error_message == ""


def test_update_rejects_location():
    form = make_form()
    with pytest.raises(TypeError):
        form.update(location="Jardins")


def test_clear_resets_everything():
    form = make_form()

    async def scenario():
        await form.set_location("jar")
        form.update(bedrooms_min=3, price_max=2000000)
        await submit(form)

    run_async(scenario())
    form.clear()

    assert form.criteria == SearchCriteria()
    assert form.suggestions == {}
    assert form.results == []
    assert form.error_message == ""
