"""
loaders/place_store.py — Read/write access to place records for the maintenance CLI.

Restaurants are Firestore documents (document id = slug); every other
category is a Supabase table. The store hides that split so the repair
pipelines can work on plain dicts:
  - fetch() pages through Supabase in PAGE_SIZE chunks
  - update_many() applies per-record updates, logs failures and continues
  - delete() removes child-table rows before the parent record
  - Returns an UpdateResult with records_updated and records_failed counts

Usage:
    from bestof_pipeline.loaders.place_store import PlaceStore

    store = PlaceStore()
    rows = store.fetch("hotel", filters={"verified": False})
    result = store.update_many("hotel", {row["id"]: {"verified": True} for row in rows})
    print(result.records_updated, result.records_failed)
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Any

import structlog

from bestof_shared.constants import (
    CATEGORY_TABLES,
    CHILD_FOREIGN_KEYS,
    CHILD_TABLES,
    FIRESTORE_CATEGORIES,
)
from bestof_shared.db import get_firestore_client, get_supabase_client

log = structlog.get_logger(__name__)

PAGE_SIZE = 1000  # Supabase caps a single select at 1000 rows


@dataclass
class UpdateResult:
    """Summary of a bulk update."""

    table: str
    records_updated: int = 0
    records_failed: int = 0
    records_skipped: int = 0
    errors: list[str] = field(default_factory=list)
    duration_ms: int = 0

    @property
    def success(self) -> bool:
        return self.records_failed == 0

    @property
    def status(self) -> str:
        if self.records_failed == 0:
            return "success"
        if self.records_updated > 0:
            return "partial_failure"
        return "failure"


class PlaceStore:
    """
    Handles all record reads and writes from the CLI.

    Uses the Supabase service role key so RLS is bypassed for repairs.
    Clients are created on first use unless injected.
    """

    def __init__(self, *, supabase: Any = None, firestore: Any = None) -> None:
        self._supabase = supabase
        self._firestore = firestore

    @property
    def supabase(self) -> Any:
        if self._supabase is None:
            self._supabase = get_supabase_client(service_role=True)
        return self._supabase

    @property
    def firestore(self) -> Any:
        if self._firestore is None:
            self._firestore = get_firestore_client()
        return self._firestore

    @staticmethod
    def table_for(category: str) -> str:
        return CATEGORY_TABLES[category]

    @staticmethod
    def uses_firestore(category: str) -> bool:
        return category in FIRESTORE_CATEGORIES

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def fetch(
        self,
        category: str,
        *,
        columns: list[str] | None = None,
        filters: dict[str, Any] | None = None,
    ) -> list[dict[str, Any]]:
        """
        Return every record of a category matching equality filters.

        A filter value of None matches missing/NULL values.
        """
        table = self.table_for(category)
        filters = filters or {}

        if self.uses_firestore(category):
            query = self.firestore.collection(table)
            for key, value in filters.items():
                query = query.where(key, "==", value)
            rows = []
            for snap in query.stream():
                doc = snap.to_dict() or {}
                row = {k: doc.get(k) for k in columns} if columns else doc
                rows.append({**row, "id": snap.id})
            log.debug("fetch_complete", table=table, rows=len(rows))
            return rows

        select = ",".join(columns) if columns else "*"
        rows = []
        offset = 0
        while True:
            query = self.supabase.table(table).select(select)
            for key, value in filters.items():
                query = query.is_(key, "null") if value is None else query.eq(key, value)
            page = query.range(offset, offset + PAGE_SIZE - 1).execute().data or []
            rows.extend(page)
            if len(page) < PAGE_SIZE:
                break
            offset += PAGE_SIZE
        log.debug("fetch_complete", table=table, rows=len(rows))
        return rows

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def update(self, category: str, record_id: str, values: dict[str, Any]) -> None:
        table = self.table_for(category)
        if self.uses_firestore(category):
            self.firestore.collection(table).document(record_id).update(values)
        else:
            self.supabase.table(table).update(values).eq("id", record_id).execute()

    def update_many(
        self,
        category: str,
        updates: dict[str, dict[str, Any]],
        *,
        dry_run: bool = False,
    ) -> UpdateResult:
        """
        Apply {record_id: values} one record at a time.

        A failed record is logged and counted; the remaining records still run.
        With dry_run nothing is written and every record counts as skipped.
        """
        table = self.table_for(category)
        result = UpdateResult(table=table)
        t0 = time.monotonic()

        store_log = log.bind(table=table, total=len(updates), dry_run=dry_run)
        store_log.info("update_start")

        for record_id, values in updates.items():
            if dry_run or not values:
                result.records_skipped += 1
                continue
            try:
                self.update(category, record_id, values)
                result.records_updated += 1
            except Exception as exc:
                log.error("record_update_failed", table=table, id=record_id, error=str(exc))
                result.records_failed += 1
                result.errors.append(f"{record_id}: {exc}")

        result.duration_ms = int((time.monotonic() - t0) * 1000)
        store_log.info(
            "update_complete",
            records_updated=result.records_updated,
            records_failed=result.records_failed,
            records_skipped=result.records_skipped,
            status=result.status,
        )
        return result

    def delete(self, category: str, record_id: str) -> None:
        """
        Delete a record and its child-table rows (children first).

        A failing child table is logged and skipped; only a failed parent
        delete raises.
        """
        table = self.table_for(category)
        if self.uses_firestore(category):
            self.firestore.collection(table).document(record_id).delete()
            log.info("record_deleted", table=table, id=record_id)
            return

        foreign_key = CHILD_FOREIGN_KEYS[category]
        for child in CHILD_TABLES.get(category, ()):
            try:
                self.supabase.table(child).delete().eq(foreign_key, record_id).execute()
            except Exception as exc:
                log.warning(
                    "child_delete_failed", table=child, id=record_id, error=str(exc)
                )
        self.supabase.table(table).delete().eq("id", record_id).execute()
        log.info("record_deleted", table=table, id=record_id)

    def delete_many(
        self,
        category: str,
        record_ids: list[str],
        *,
        dry_run: bool = False,
    ) -> UpdateResult:
        """Delete records one at a time; records_updated counts removed records."""
        table = self.table_for(category)
        result = UpdateResult(table=table)
        t0 = time.monotonic()

        for record_id in record_ids:
            if dry_run:
                result.records_skipped += 1
                continue
            try:
                self.delete(category, record_id)
                result.records_updated += 1
            except Exception as exc:
                log.error("record_delete_failed", table=table, id=record_id, error=str(exc))
                result.records_failed += 1
                result.errors.append(f"{record_id}: {exc}")

        result.duration_ms = int((time.monotonic() - t0) * 1000)
        log.info(
            "delete_complete",
            table=table,
            records_deleted=result.records_updated,
            records_failed=result.records_failed,
            status=result.status,
        )
        return result
