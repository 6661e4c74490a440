"""
tests/test_pipelines/test_reports.py — Tests for the read-only reports.
"""

from __future__ import annotations

from bestof_pipeline.pipelines import reports


class TestStatusCounts:
    def test_missing_status_counts_as_pending(self, memory_store):
        store = memory_store(
            {
                "hotel": [
                    {"id": "h1", "extraction_status": "completed"},
                    {"id": "h2", "extraction_status": "completed"},
                    {"id": "h3", "extraction_status": None},
                ],
                "restaurant": [{"id": "r1", "status": "importing"}],
            }
        )

        counts = reports.status_counts(store)

        assert counts["hotel"] == {"completed": 2, "pending": 1}
        assert counts["restaurant"] == {"importing": 1}
        assert counts["mall"] == {}


class TestProgress:
    def test_areas_and_daily_rate(self, memory_store):
        store = memory_store(
            {
                "school": [
                    {"id": "s1", "extraction_status": "completed", "area": "Panjim", "created_at": "2025-03-01T09:00:00Z"},
                    {"id": "s2", "extraction_status": "failed", "area": "Panjim", "created_at": "2025-03-01T11:00:00Z"},
                    {"id": "s3", "extraction_status": "completed", "area": None, "created_at": "2025-03-02T08:00:00Z"},
                ]
            }
        )

        report = reports.progress(store, "school")

        assert report["total"] == 3
        assert report["by_status"] == {"completed": 2, "failed": 1}
        assert report["completed_percent"] == 66.7
        assert report["by_area"] == {"Panjim": 2, "Unknown": 1}
        assert report["per_day"] == {"2025-03-01": 2, "2025-03-02": 1}
        assert report["daily_rate"] == 1.5


class TestAuditAndDuplicates:
    def test_audit_uses_category_groups(self, memory_store):
        store = memory_store({"restaurant": [{"id": "r1", "name": "Thalassa", "price_level": 3}]})

        report = reports.audit(store, "restaurant")

        groups = {g["group"]: g for g in report["groups"]}
        assert report["total"] == 1
        assert groups["Pricing"]["percent"] == 100.0
        assert groups["Hours"]["percent"] == 0.0

    def test_duplicates(self, memory_store):
        store = memory_store(
            {
                "hotel": [
                    {"id": "h1", "name": "Taj Exotica", "google_place_id": "p1"},
                    {"id": "h2", "name": "The Taj Exotica", "google_place_id": "p2"},
                ]
            }
        )

        report = reports.duplicates(store, "hotel")

        assert report["by_place_id"] == []
        assert report["by_name"][0]["key"] == "taj exotica"
