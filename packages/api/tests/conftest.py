"""Shared test fixtures for bestof-api.

Helpers are exposed as fixtures (make_supabase, firestore_db) so test
modules never import this file directly.
"""

from __future__ import annotations

from typing import Any
from unittest.mock import MagicMock, patch
from uuid import uuid4

import pytest
from fastapi.testclient import TestClient

CHAIN_METHODS = (
    "select", "eq", "neq", "gt", "gte", "lt", "lte", "ilike", "in_", "is_",
    "or_", "order", "limit", "range", "update", "insert", "upsert", "delete",
)

# Every module that binds get_supabase_client / get_firestore_client at import time
SUPABASE_TARGETS = (
    "bestof_api.middleware.auth.get_supabase_client",
    "bestof_api.services.place_service.get_supabase_client",
    "bestof_api.services.contact_service.get_supabase_client",
    "bestof_api.services.favorites_service.get_supabase_client",
    "bestof_api.services.stats_service.get_supabase_client",
)
FIRESTORE_TARGETS = (
    "bestof_api.services.restaurant_service.get_firestore_client",
    "bestof_api.services.search_service.get_firestore_client",
    "bestof_api.services.newsletter_service.get_firestore_client",
    "bestof_api.services.stats_service.get_firestore_client",
)


# ---------------------------------------------------------------------------
# Supabase fakes
# ---------------------------------------------------------------------------

def _make_chain(data=None, count=0):
    """Create a chainable mock that returns given data on execute()."""
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=data or [], count=count)
    for method in CHAIN_METHODS:
        getattr(chain, method).return_value = chain
    return chain


def _make_supabase(table_data=None):
    """Create a mock Supabase client.

    table_data: optional dict mapping table name -> (data, count).
    All unmapped tables return empty results. The same chain is returned
    for every call on a table, so tests can inspect update()/insert() args
    through client.tables[name].
    """
    client = MagicMock()
    td = table_data or {}
    tables: dict[str, MagicMock] = {}

    def _table(name):
        if name not in tables:
            data, count = td.get(name, ([], 0))
            tables[name] = _make_chain(data, count)
        return tables[name]

    client.table.side_effect = _table
    client.tables = tables
    return client


# ---------------------------------------------------------------------------
# Firestore fake
# ---------------------------------------------------------------------------

class FakeSnapshot:
    def __init__(self, reference: "FakeDocRef", data: dict[str, Any] | None) -> None:
        self.reference = reference
        self.id = reference.id
        self._data = data

    @property
    def exists(self) -> bool:
        return self._data is not None

    def to_dict(self) -> dict[str, Any] | None:
        return dict(self._data) if self._data is not None else None


class FakeDocRef:
    def __init__(self, store: dict[str, dict[str, Any]], doc_id: str) -> None:
        self._store = store
        self.id = doc_id

    def get(self) -> FakeSnapshot:
        return FakeSnapshot(self, self._store.get(self.id))

    def set(self, data: dict[str, Any]) -> None:
        self._store[self.id] = dict(data)

    def update(self, data: dict[str, Any]) -> None:
        self._store[self.id].update(data)

    def delete(self) -> None:
        self._store.pop(self.id, None)


class FakeQuery:
    def __init__(self, store, filters=(), order=None, limit_n=None, fields=None) -> None:
        self._store = store
        self._filters = list(filters)
        self._order = order
        self._limit = limit_n
        self._fields = fields

    def _copy(self, **changes) -> "FakeQuery":
        state = {
            "filters": self._filters,
            "order": self._order,
            "limit_n": self._limit,
            "fields": self._fields,
        }
        state.update(changes)
        return FakeQuery(self._store, **state)

    def where(self, field, op, value) -> "FakeQuery":
        return self._copy(filters=[*self._filters, (field, op, value)])

    def order_by(self, field, direction="ASCENDING") -> "FakeQuery":
        return self._copy(order=(field, direction))

    def limit(self, n) -> "FakeQuery":
        return self._copy(limit_n=n)

    def select(self, fields) -> "FakeQuery":
        return self._copy(fields=list(fields))

    @staticmethod
    def _matches(doc, field, op, value) -> bool:
        actual = doc.get(field)
        if op == "==":
            return actual == value
        if op == "in":
            return actual in value
        if op == "array_contains":
            return value in (actual or [])
        raise NotImplementedError(op)

    def stream(self):
        items = [
            (doc_id, doc)
            for doc_id, doc in self._store.items()
            if all(self._matches(doc, f, op, v) for f, op, v in self._filters)
        ]
        if self._order:
            field, direction = self._order
            items.sort(key=lambda item: item[1].get(field) or 0, reverse=direction == "DESCENDING")
        if self._limit is not None:
            items = items[: self._limit]
        for doc_id, doc in items:
            data = {k: doc.get(k) for k in self._fields} if self._fields else doc
            yield FakeSnapshot(FakeDocRef(self._store, doc_id), data)


class FakeCollection(FakeQuery):
    def document(self, doc_id: str) -> FakeDocRef:
        return FakeDocRef(self._store, doc_id)


class FakeFirestore:
    """In-memory stand-in for google.cloud.firestore.Client."""

    def __init__(self, data: dict[str, dict[str, dict[str, Any]]] | None = None) -> None:
        self.data: dict[str, dict[str, dict[str, Any]]] = {
            name: {doc_id: dict(doc) for doc_id, doc in docs.items()}
            for name, docs in (data or {}).items()
        }

    def collection(self, name: str) -> FakeCollection:
        return FakeCollection(self.data.setdefault(name, {}))


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _clear_caches():
    """Clear all in-memory caches between tests."""
    from bestof_api.utils.cache import search_cache, stats_cache
    yield
    for cache in (search_cache, stats_cache):
        cache.clear()


@pytest.fixture()
def make_supabase():
    """Factory: build a Supabase mock and patch it in everywhere it's imported."""
    active: list = []

    def _factory(table_data=None):
        for p in active:
            p.stop()
        active.clear()
        mock = _make_supabase(table_data)
        for target in SUPABASE_TARGETS:
            p = patch(target, return_value=mock)
            p.start()
            active.append(p)
        return mock

    yield _factory
    for p in active:
        p.stop()


@pytest.fixture()
def firestore_db():
    """Factory: seed an in-memory Firestore and patch it in everywhere it's imported."""
    active: list = []

    def _factory(data=None):
        for p in active:
            p.stop()
        active.clear()
        db = FakeFirestore(data)
        for target in FIRESTORE_TARGETS:
            p = patch(target, return_value=db)
            p.start()
            active.append(p)
        return db

    yield _factory
    for p in active:
        p.stop()


@pytest.fixture()
def admin_user():
    from bestof_api.middleware.auth import AuthUser
    return AuthUser(user_id=str(uuid4()), role="admin", email="admin@bestofgoa.com")


@pytest.fixture()
def regular_user():
    from bestof_api.middleware.auth import AuthUser
    return AuthUser(user_id=str(uuid4()), role="user", email="reader@example.com")


@pytest.fixture()
def app(make_supabase, firestore_db):
    """Create test FastAPI app with empty fake backends."""
    make_supabase()
    firestore_db()
    from bestof_api.app import create_app
    return create_app()


@pytest.fixture()
def client(app):
    """HTTP test client (anonymous)."""
    return TestClient(app)


@pytest.fixture()
def admin_client(app, admin_user):
    """HTTP test client authenticated as an admin."""
    from bestof_api.middleware.auth import require_admin, require_user
    app.dependency_overrides[require_admin] = lambda: admin_user
    app.dependency_overrides[require_user] = lambda: admin_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def user_client(app, regular_user):
    """HTTP test client authenticated as a regular signed-in user."""
    from bestof_api.middleware.auth import require_user
    app.dependency_overrides[require_user] = lambda: regular_user
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture()
def sample_hotel():
    return {
        "id": str(uuid4()),
        "name": "Taj Fort Aguada Resort",
        "slug": "taj-fort-aguada-resort-candolim",
        "area": "Candolim",
        "google_place_id": "ChIJ-hotel-1",
        "google_rating": 4.6,
        "active": False,
        "verified": False,
        "extraction_status": "completed",
        "created_at": "2025-01-10T08:00:00+00:00",
    }


@pytest.fixture()
def sample_restaurant():
    return {
        "name": "Thalassa",
        "slug": "thalassa-vagator",
        "area": "Vagator",
        "google_place_id": "ChIJ-rest-1",
        "status": "active",
        "active": True,
        "verified": False,
        "overall_rating": 8.7,
        "created_at": "2025-02-01T10:00:00+00:00",
    }
