"""
tests/test_loaders/test_place_store.py — Tests for the PlaceStore read/write funnel.
"""

from __future__ import annotations

from unittest.mock import MagicMock, patch

from bestof_shared.constants import CHILD_TABLES

from bestof_pipeline.loaders.place_store import PAGE_SIZE, PlaceStore, UpdateResult


def _result(data):
    return MagicMock(data=data, count=len(data))


class TestUpdateResult:
    def test_status(self):
        assert UpdateResult(table="hotels", records_updated=3).status == "success"
        assert UpdateResult(table="hotels", records_updated=2, records_failed=1).status == "partial_failure"
        assert UpdateResult(table="hotels", records_failed=2).status == "failure"
        assert not UpdateResult(table="hotels", records_failed=1).success


class TestSupabaseFetch:
    def test_pages_until_short_page(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        chain.execute.side_effect = [
            _result([{"id": str(i)} for i in range(PAGE_SIZE)]),
            _result([{"id": "last"}]),
        ]
        store = PlaceStore(supabase=mock_supabase_client)

        rows = store.fetch("hotel")

        assert len(rows) == PAGE_SIZE + 1
        assert [c.args for c in chain.range.call_args_list] == [
            (0, PAGE_SIZE - 1),
            (PAGE_SIZE, 2 * PAGE_SIZE - 1),
        ]
        mock_supabase_client.table.assert_called_with("hotels")

    def test_filters(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        store = PlaceStore(supabase=mock_supabase_client)

        store.fetch("mall", columns=["id", "name"], filters={"verified": False, "google_place_id": None})

        chain.select.assert_called_with("id,name")
        chain.eq.assert_called_with("verified", False)
        chain.is_.assert_called_with("google_place_id", "null")

    def test_client_created_lazily_with_service_role(self):
        with patch("bestof_pipeline.loaders.place_store.get_supabase_client") as factory:
            store = PlaceStore()
            factory.assert_not_called()
            assert store.supabase is factory.return_value
            factory.assert_called_once_with(service_role=True)


class TestFirestoreFetch:
    def test_restaurants_read_from_firestore(self):
        firestore = MagicMock()
        snap = MagicMock(id="thalassa-vagator")
        snap.to_dict.return_value = {"name": "Thalassa", "status": "active", "area": "Vagator"}
        collection = firestore.collection.return_value
        collection.where.return_value.stream.return_value = [snap]
        store = PlaceStore(firestore=firestore)

        rows = store.fetch("restaurant", columns=["name"], filters={"status": "active"})

        firestore.collection.assert_called_with("restaurants")
        collection.where.assert_called_once_with("status", "==", "active")
        assert rows == [{"name": "Thalassa", "id": "thalassa-vagator"}]


class TestUpdateMany:
    def test_failed_record_does_not_stop_batch(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        chain.execute.side_effect = [_result([]), RuntimeError("boom"), _result([])]
        store = PlaceStore(supabase=mock_supabase_client)

        result = store.update_many(
            "school",
            {"s1": {"verified": True}, "s2": {"verified": True}, "s3": {"verified": True}},
        )

        assert result.records_updated == 2
        assert result.records_failed == 1
        assert result.status == "partial_failure"
        assert result.errors == ["s2: boom"]

    def test_dry_run_writes_nothing(self, mock_supabase_client):
        store = PlaceStore(supabase=mock_supabase_client)

        result = store.update_many("hotel", {"h1": {"active": True}}, dry_run=True)

        assert result.records_skipped == 1
        mock_supabase_client.chain.update.assert_not_called()

    def test_update_targets_record(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        store = PlaceStore(supabase=mock_supabase_client)

        store.update("attraction", "a1", {"slug": "fort-aguada"})

        chain.update.assert_called_once_with({"slug": "fort-aguada"})
        chain.eq.assert_called_with("id", "a1")

    def test_restaurant_update_goes_to_document(self):
        firestore = MagicMock()
        store = PlaceStore(firestore=firestore)

        store.update("restaurant", "thalassa-vagator", {"verified": True})

        firestore.collection.return_value.document.assert_called_with("thalassa-vagator")
        firestore.collection.return_value.document.return_value.update.assert_called_once_with(
            {"verified": True}
        )


class TestDelete:
    def test_children_deleted_before_parent(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        store = PlaceStore(supabase=mock_supabase_client)

        store.delete("hotel", "h1")

        tables = [c.args[0] for c in mock_supabase_client.table.call_args_list]
        assert tables == [*CHILD_TABLES["hotel"], "hotels"]
        assert ("hotel_id", "h1") in [c.args for c in chain.eq.call_args_list]
        assert chain.eq.call_args.args == ("id", "h1")

    def test_child_failure_still_deletes_parent(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        n_children = len(CHILD_TABLES["hotel"])
        chain.execute.side_effect = (
            [RuntimeError("permission denied")] + [_result([])] * n_children
        )
        store = PlaceStore(supabase=mock_supabase_client)

        result = store.delete_many("hotel", ["h1"])

        assert result.status == "success"
        assert result.records_updated == 1
        assert mock_supabase_client.table.call_args.args == ("hotels",)
        assert chain.eq.call_args.args == ("id", "h1")
        assert chain.execute.call_count == n_children + 1

    def test_delete_many_counts_failures(self, mock_supabase_client):
        chain = mock_supabase_client.chain
        n_children = len(CHILD_TABLES["fitness"])
        chain.execute.side_effect = (
            [_result([])] * (n_children + 1)
            + [_result([])] * n_children
            + [RuntimeError("fk violation")]
        )
        store = PlaceStore(supabase=mock_supabase_client)

        result = store.delete_many("fitness", ["f1", "f2"])

        assert result.records_updated == 1
        assert result.records_failed == 1
