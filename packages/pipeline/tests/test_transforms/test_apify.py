"""
tests/test_transforms/test_apify.py — Tests for Apify payload mapping.
"""

from __future__ import annotations

from bestof_pipeline.transforms.apify import (
    map_apify_fields,
    map_price_level,
    missing_field_updates,
    normalize_hours,
    to_24_hour,
)


class TestPriceAndTime:
    def test_price_levels(self):
        assert map_price_level("$$") == 2
        assert map_price_level("$$$$") == 4
        assert map_price_level("$$$$$") is None
        assert map_price_level(None) is None

    def test_to_24_hour(self):
        assert to_24_hour("8 AM") == "08:00"
        assert to_24_hour("10:30 PM") == "22:30"
        assert to_24_hour("12 AM") == "00:00"
        assert to_24_hour("12 PM") == "12:00"
        assert to_24_hour("noon") is None

    def test_narrow_space_accepted(self):
        assert to_24_hour("11\u202fPM") == "23:00"


class TestNormalizeHours:
    def test_open_and_closed_days(self):
        hours = normalize_hours(
            [
                {"day": "Monday", "hours": "11 AM to 11 PM"},
                {"day": "Tuesday", "hours": "Closed"},
                {"day": "Funday", "hours": "1 AM to 2 AM"},
            ]
        )
        assert hours == {
            "mon": {"open": "11:00", "close": "23:00", "closed": False},
            "tue": {"open": None, "close": None, "closed": True},
        }

    def test_dash_separator(self):
        hours = normalize_hours([{"day": "Sunday", "hours": "9 AM–5:30 PM"}])
        assert hours == {"sun": {"open": "09:00", "close": "17:30", "closed": False}}

    def test_unusable_input(self):
        assert normalize_hours("Mon-Fri") is None
        assert normalize_hours([]) is None


class TestMapApifyFields:
    def test_maps_and_omits_missing(self):
        mapped = map_apify_fields(
            {
                "phoneUnformatted": "+918326543210",
                "url": "https://thalassagoa.com",
                "fullAddress": "Small Vagator, Goa 403509",
                "neighborhood": "Vagator",
                "location": {"lat": 15.6, "lng": 73.73},
                "totalScore": 4.5,
                "reviewsCount": 8123,
                "price": "$$$",
            }
        )
        assert mapped == {
            "phone": "+918326543210",
            "website": "https://thalassagoa.com",
            "address": "Small Vagator, Goa 403509",
            "area": "Vagator",
            "latitude": 15.6,
            "longitude": 73.73,
            "google_rating": 4.5,
            "google_review_count": 8123,
            "price_level": 3,
        }

    def test_empty_payload(self):
        assert map_apify_fields(None) == {}


class TestMissingFieldUpdates:
    def test_only_empty_columns_filled(self):
        row = {"phone": "", "website": "https://existing.example", "hours": {}, "area": None}
        mapped = {"phone": "123", "website": "https://other.example", "hours": {"mon": {}}, "area": "Baga"}
        assert missing_field_updates(row, mapped) == {"phone": "123", "hours": {"mon": {}}, "area": "Baga"}
