"""
tests/conftest.py — Shared pytest fixtures for the pipeline test suite.

Provides:
  mock_supabase_client() — chainable MagicMock of the Supabase client
  memory_store()         — factory for a PlaceStore backed by in-memory rows
  cli_runner()           — click CliRunner
"""

from __future__ import annotations

import copy
from typing import Any
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from bestof_pipeline.loaders.place_store import PlaceStore

CHAIN_METHODS = ("select", "eq", "is_", "range", "update", "delete", "order", "limit")


# ---------------------------------------------------------------------------
# Logging
# ---------------------------------------------------------------------------

@pytest.fixture(autouse=True)
def _no_logging_config():
    """The CLI configures structlog against sys.stderr, which CliRunner swaps out."""
    with patch("bestof_pipeline.cli.configure_logging"):
        yield


# ---------------------------------------------------------------------------
# Supabase client mock
# ---------------------------------------------------------------------------

@pytest.fixture
def mock_supabase_client() -> MagicMock:
    """
    A MagicMock that simulates the supabase.Client query builder.

    Every builder method returns the same chain, so a test sets
    chain.execute.side_effect / return_value and inspects the recorded calls.
    The chain is available as client.chain.
    """
    client = MagicMock()
    chain = MagicMock()
    chain.execute.return_value = MagicMock(data=[], count=0)
    for method in CHAIN_METHODS:
        getattr(chain, method).return_value = chain
    client.table.return_value = chain
    client.chain = chain
    return client


# ---------------------------------------------------------------------------
# In-memory store
# ---------------------------------------------------------------------------

class MemoryStore(PlaceStore):
    """PlaceStore over {category: [row, ...]}; update_many/delete_many are inherited."""

    def __init__(self, data: dict[str, list[dict[str, Any]]] | None = None) -> None:
        super().__init__(supabase=MagicMock(), firestore=MagicMock())
        self.data = {k: [dict(r) for r in rows] for k, rows in (data or {}).items()}
        self.failing_ids: set[str] = set()
        self.deleted: list[tuple[str, str]] = []

    def _row(self, category: str, record_id: str) -> dict[str, Any]:
        for row in self.data.get(category, []):
            if str(row["id"]) == record_id:
                return row
        raise KeyError(record_id)

    def fetch(self, category, *, columns=None, filters=None):
        rows = []
        for row in self.data.get(category, []):
            if all(row.get(k) == v for k, v in (filters or {}).items()):
                selected = {k: row.get(k) for k in columns} if columns else row
                rows.append(copy.deepcopy({**selected, "id": row["id"]}))
        return rows

    def update(self, category, record_id, values):
        if record_id in self.failing_ids:
            raise RuntimeError("write rejected")
        self._row(category, record_id).update(values)

    def delete(self, category, record_id):
        if record_id in self.failing_ids:
            raise RuntimeError("delete rejected")
        row = self._row(category, record_id)
        self.data[category].remove(row)
        self.deleted.append((category, record_id))


@pytest.fixture
def memory_store():
    """Factory: memory_store({"hotel": [...]}) -> MemoryStore."""
    return MemoryStore


@pytest.fixture
def cli_runner() -> CliRunner:
    return CliRunner()
