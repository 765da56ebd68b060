"""Shared fixtures for the realty site tests."""

import asyncio

import pytest

from realty_site.error_handling import StoreError
from realty_site.store import InMemoryDataStore


def run_async(coro):
    """Run a coroutine to completion on a fresh event loop."""
    return asyncio.run(coro)


def make_property(id, location, city="São Paulo", region="SP", **fields):
    row = {
        "id": id,
        "title": f"Imóvel {id}",
        "price": 1000000,
        "location": location,
        "city": city,
        "region": region,
        "type": "apartment",
        "status": "new",
        "bedrooms": 2,
        "suites": 1,
        "parking_spots": 1,
        "created_at": f"2024-01-{int(id.split('-')[-1]) % 28 + 1:02d}T10:00:00+00:00",
    }
    row.update(fields)
    return row


SAMPLE_PROPERTIES = [
    make_property("p-1", "Jardins", price=1250000, bedrooms=3, suites=1, parking_spots=2),
    make_property("p-2", "Jardins", price=2400000, bedrooms=4, suites=3, parking_spots=3, type="house"),
    make_property("p-3", "Jardins", price=890000, bedrooms=2, suites=0, parking_spots=1, status="launch"),
    make_property("p-4", "Jardins", price=650000, bedrooms=1, suites=0, parking_spots=0, status="used"),
    make_property("p-5", "Jardins", price=5200000, bedrooms=5, suites=4, parking_spots=4, type="house"),
    make_property("p-6", "Jardim América", price=3100000, bedrooms=4, suites=2, parking_spots=3),
    make_property("p-7", "Jardim América", price=1800000, bedrooms=3, suites=2, parking_spots=2),
    make_property("p-8", "Pinheiros", price=780000, bedrooms=2, suites=1, parking_spots=1),
    make_property("p-9", "Centro", city="Campinas", region="SP", price=420000, bedrooms=2,
                  suites=None, parking_spots=None, type="commercial"),
]


@pytest.fixture
def sample_store():
    """In-memory store holding the sample properties."""
    return InMemoryDataStore(tables={"properties": [dict(row) for row in SAMPLE_PROPERTIES]})


@pytest.fixture
def admin_store(sample_store):
    """Sample store with one admin and one regular user."""
    sample_store.add_user("admin@example.com", "secret", user_id="admin-1")
    sample_store.add_user("visitor@example.com", "secret", user_id="user-1")
    sample_store.tables["profiles"] = [
        {"id": "admin-1", "role": "admin"},
        {"id": "user-1", "role": "user"},
    ]
    return sample_store


class FailingStore(InMemoryDataStore):
    """Store whose reads and writes can be made to fail per table."""

    def __init__(self, *args, fail_tables=(), **kwargs):
        super().__init__(*args, **kwargs)
        self.fail_tables = set(fail_tables)
        self.calls = []

    async def select(self, table, query=None):
        self.calls.append(("select", table))
        if table in self.fail_tables:
            raise StoreError("connection refused", status=503)
        return await super().select(table, query)

    async def insert(self, table, row):
        self.calls.append(("insert", table))
        if table in self.fail_tables:
            raise StoreError("connection refused", status=503)
        return await super().insert(table, row)
