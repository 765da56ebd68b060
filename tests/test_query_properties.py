"""
Property-based tests for the store query builder.

The same Query drives both backends, so its in-memory evaluation and its
PostgREST rendering must agree on what each predicate means.
"""

import pytest
from hypothesis import given, settings, strategies as st

from realty_site.store import Condition, Query


words = st.text(alphabet="abcdefghijklmnopqrstuvwxyzáéíóúãç", min_size=1, max_size=12)
counts = st.integers(min_value=0, max_value=10)


@given(value=words, prefix=words, suffix=words)
@settings(max_examples=100)
def test_contains_is_case_insensitive_substring(value, prefix, suffix):
    """
    **Feature: realty-site, Property 1: Contains matching**

    A contains-condition matches any value holding the text, whatever the
    letter case.
    """
    row = {"location": f"{prefix}{value.upper()}{suffix}"}
    assert Condition.contains("location", value).matches(row)


@given(value=words)
@settings(max_examples=100)
def test_iexact_requires_whole_value(value):
    """
    **Feature: realty-site, Property 2: Exact matching**

    An exact condition ignores case but not extra characters.
    """
    assert Condition.iexact("city", value).matches({"city": value.upper()})
    assert not Condition.iexact("city", value).matches({"city": value + "x"})


@given(minimum=counts, actual=counts)
@settings(max_examples=100)
def test_gte_matches_at_or_above_minimum(minimum, actual):
    """
    **Feature: realty-site, Property 3: Minimum thresholds**

    ``gte`` keeps a row exactly when its value is at least the minimum.
    """
    query = Query().gte("bedrooms", minimum)
    assert query.matches({"bedrooms": actual}) == (actual >= minimum)


def test_null_column_never_matches():
    assert not Condition("bedrooms", "gte", 0).matches({"bedrooms": None})
    assert not Condition.contains("city", "a").matches({})


def test_or_groups_and_filters_are_combined_with_and():
    query = (
        Query()
        .or_(Condition.contains("location", "jard"), Condition.contains("city", "jard"))
        .eq("type", "house")
    )
    assert query.matches({"location": "Jardins", "city": "São Paulo", "type": "house"})
    assert not query.matches({"location": "Jardins", "city": "São Paulo", "type": "apartment"})
    assert not query.matches({"location": "Centro", "city": "Campinas", "type": "house"})


def test_to_params_renders_postgrest_filters():
    query = (
        Query()
        .or_(Condition.contains("location", "Jardins"), Condition.contains("city", "São Paulo, SP"))
        .eq("status", "new")
        .gte("price", 500000.0)
        .lte("price", 1500000)
        .order("created_at", descending=True)
        .limit(6)
    )

    assert query.to_params() == [
        ("select", "*"),
        ("status", "eq.new"),
        ("price", "gte.500000"),
        ("price", "lte.1500000"),
        ("or", '(location.ilike.*Jardins*,city.ilike."*São Paulo, SP*")'),
        ("order", "created_at.desc"),
        ("limit", "6"),
    ]


def test_in_filter_renders_and_matches():
    query = Query().in_("id", ["p-1", "p-2"])
    assert ("id", "in.(p-1,p-2)") in query.to_params()
    assert query.matches({"id": "p-2"})
    assert not query.matches({"id": "p-3"})


def test_eq_renders_booleans_lowercase():
    assert ("active", "eq.true") in Query().eq("active", True).to_params()


def test_apply_orders_with_nulls_last_then_limits():
    rows = [
        {"id": 1, "property_count": 2},
        {"id": 2, "property_count": None},
        {"id": 3, "property_count": 5},
        {"id": 4, "property_count": 3},
    ]
    ordered = Query().order("property_count", descending=True).apply(rows)
    assert [row["id"] for row in ordered] == [3, 4, 1, 2]

    limited = Query().order("property_count", descending=True).limit(2).apply(rows)
    assert [row["id"] for row in limited] == [3, 4]


def test_unfiltered_query_is_flagged():
    assert Query().order("id").limit(3).is_unfiltered
    assert not Query().eq("id", 1).is_unfiltered
    assert not Query().or_(Condition.contains("city", "x")).is_unfiltered


def test_unknown_operator_rejected():
    with pytest.raises(ValueError):
        Condition("price", "neq", 1)
