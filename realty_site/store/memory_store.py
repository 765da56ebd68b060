"""
In-memory implementation of the store interface.

Used for local development without a hosted backend (``STORE_BACKEND=memory``)
and by the test suite. Rows are plain dictionaries; filters are evaluated by
the same Query objects the REST client renders.
"""

import copy
import json
import logging
import uuid
from collections import OrderedDict
from datetime import datetime, timedelta
from pathlib import Path
from typing import Any, Callable, Dict, List, Optional, Tuple

from realty_site.error_handling import StoreError
from .base import AuthSession, DataStore
from .query import Query


logger = logging.getLogger(__name__)


def location_stats_view(tables: Dict[str, List[Dict[str, Any]]]) -> List[Dict[str, Any]]:
    """Aggregate ``properties`` into per-(location, city, region) counts."""
    counts: "OrderedDict[Tuple, int]" = OrderedDict()
    for row in tables.get("properties", []):
        key = (row.get("location"), row.get("city"), row.get("region"))
        counts[key] = counts.get(key, 0) + 1
    return [
        {"location": loc, "city": city, "region": region, "property_count": count}
        for (loc, city, region), count in counts.items()
    ]


class InMemoryDataStore(DataStore):
    """Dictionary-backed store.

    Attributes:
        tables: Table name to list of rows
        views: Read-only tables computed from ``tables`` on every select
        users: E-mail to ``{"id", "password"}`` for password sign-in
        files: ``(bucket, path)`` to uploaded bytes
    """

    def __init__(
        self,
        base_url: str = "http://localhost:54321",
        tables: Optional[Dict[str, List[Dict[str, Any]]]] = None
    ):
        super().__init__(base_url)
        self.tables: Dict[str, List[Dict[str, Any]]] = {}
        self.views: Dict[str, Callable] = {"location_stats": location_stats_view}
        self.users: Dict[str, Dict[str, str]] = {}
        self.files: Dict[Tuple[str, str], bytes] = {}
        for table, rows in (tables or {}).items():
            for row in rows:
                self._store_row(table, row)

    @classmethod
    def from_seed_file(cls, path: str, base_url: str = "http://localhost:54321") -> 'InMemoryDataStore':
        """Load tables from a JSON file shaped ``{"table": [rows...]}``.

        An optional top-level ``"users"`` list of ``{email, password, id}``
        entries registers sign-in accounts.
        """
        seed_path = Path(path)
        with open(seed_path, 'r', encoding='utf-8') as f:
            seed = json.load(f)

        users = seed.pop("users", [])
        store = cls(base_url=base_url, tables=seed)
        for user in users:
            store.add_user(user["email"], user["password"], user.get("id"))
        logger.info(f"Loaded in-memory store from {seed_path} ({len(store.tables)} tables)")
        return store

    def add_user(self, email: str, password: str, user_id: Optional[str] = None) -> str:
        """Register an account that ``sign_in`` will accept."""
        user_id = user_id or str(uuid.uuid4())
        self.users[email.lower()] = {"id": user_id, "password": password}
        return user_id

    def _store_row(self, table: str, row: Dict[str, Any]) -> Dict[str, Any]:
        stored = copy.deepcopy(row)
        stored.setdefault("id", str(uuid.uuid4()))
        stored.setdefault("created_at", datetime.now().isoformat())
        self.tables.setdefault(table, []).append(stored)
        return stored

    def _rows(self, table: str) -> List[Dict[str, Any]]:
        if table in self.tables:
            return self.tables[table]
        if table in self.views:
            return self.views[table](self.tables)
        return []

    async def select(self, table: str, query: Optional[Query] = None) -> List[Dict[str, Any]]:
        query = query or Query()
        return copy.deepcopy(query.apply(self._rows(table)))

    async def insert(self, table: str, row: Dict[str, Any]) -> List[Dict[str, Any]]:
        if table in self.views:
            raise StoreError(f"Cannot insert into view {table}", status=405)
        return [copy.deepcopy(self._store_row(table, row))]

    async def update(self, table: str, values: Dict[str, Any], query: Query) -> List[Dict[str, Any]]:
        if query.is_unfiltered:
            raise StoreError(f"Refusing to update every row of {table}")
        updated = []
        for row in self.tables.get(table, []):
            if query.matches(row):
                row.update(copy.deepcopy(values))
                updated.append(copy.deepcopy(row))
        return updated

    async def delete(self, table: str, query: Query) -> List[Dict[str, Any]]:
        if query.is_unfiltered:
            raise StoreError(f"Refusing to delete every row of {table}")
        rows = self.tables.get(table, [])
        removed = [row for row in rows if query.matches(row)]
        self.tables[table] = [row for row in rows if not query.matches(row)]
        return removed

    async def sign_in(self, email: str, password: str) -> AuthSession:
        user = self.users.get(email.lower())
        if user is None or user["password"] != password:
            raise StoreError("Invalid login credentials", status=400)
        self.session = AuthSession(
            access_token=uuid.uuid4().hex,
            user_id=user["id"],
            email=email,
            expires_at=datetime.now() + timedelta(hours=1),
        )
        return self.session

    async def sign_out(self) -> None:
        self.session = None

    def fork(self) -> 'InMemoryDataStore':
        """Share every table, user and file, but not the session."""
        other = InMemoryDataStore(self.base_url)
        other.tables = self.tables
        other.views = self.views
        other.users = self.users
        other.files = self.files
        return other

    async def upload(self, bucket: str, path: str, data: bytes, content_type: str) -> str:
        self.files[(bucket, path)] = data
        return path
