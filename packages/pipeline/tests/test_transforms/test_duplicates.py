"""
tests/test_transforms/test_duplicates.py — Tests for duplicate detection.
"""

from __future__ import annotations

from bestof_pipeline.transforms.duplicates import find_duplicates, normalize_name


class TestNormalizeName:
    def test_article_suffix_and_apostrophe(self):
        assert normalize_name("The Fisherman's Wharf Restaurant") == "fishermans wharf"
        assert normalize_name("Fishermans Wharf") == "fishermans wharf"

    def test_punctuation_and_ampersand(self):
        assert normalize_name("Ritz & Co.") == "ritz and co"
        assert normalize_name("Café Al-Fresco") == "café al fresco"

    def test_empty(self):
        assert normalize_name(None) == ""


class TestFindDuplicates:
    def test_groups_by_place_id_and_name(self):
        rows = [
            {"id": "1", "name": "Fisherman's Wharf", "slug": "fishermans-wharf-panjim", "area": "Panjim", "google_place_id": "ChIJ-1"},
            {"id": "2", "name": "The Fishermans Wharf Restaurant", "slug": "fishermans-wharf-2", "area": "Panjim", "google_place_id": "ChIJ-1"},
            {"id": "3", "name": "Thalassa", "slug": "thalassa-vagator", "area": "Vagator", "google_place_id": "ChIJ-2"},
        ]
        report = find_duplicates(rows)

        assert len(report["by_place_id"]) == 1
        assert report["by_place_id"][0]["key"] == "ChIJ-1"
        assert [r["id"] for r in report["by_place_id"][0]["records"]] == ["1", "2"]

        assert report["by_name"] == [
            {
                "key": "fishermans wharf",
                "records": [
                    {"id": "1", "name": "Fisherman's Wharf", "slug": "fishermans-wharf-panjim", "area": "Panjim"},
                    {"id": "2", "name": "The Fishermans Wharf Restaurant", "slug": "fishermans-wharf-2", "area": "Panjim"},
                ],
            }
        ]

    def test_no_duplicates(self):
        assert find_duplicates([{"id": "1", "name": "Thalassa", "google_place_id": "x"}]) == {
            "by_place_id": [],
            "by_name": [],
        }
