"""Tests for the admin list status rule shared by both backends."""

from __future__ import annotations

import pytest

from bestof_shared.status import display_status

from bestof_api.utils.filtering import status_matches

HOTEL_ROWS = {
    "live": {"active": True, "verified": True, "extraction_status": "completed"},
    "unpublished": {"active": False, "verified": True, "extraction_status": "completed"},
    "unreviewed": {"active": False, "verified": False, "extraction_status": "completed"},
    "running": {"active": False, "verified": False, "extraction_status": "processing"},
    "broken": {"active": False, "verified": False, "extraction_status": "failed"},
    "unstarted": {"active": False, "verified": False},
}


@pytest.mark.parametrize(
    "status, expected",
    [
        ("published", {"live"}),
        ("draft", {"unpublished", "unreviewed"}),
        ("processing", {"running"}),
        ("failed", {"broken"}),
        ("pending", {"unstarted"}),
        ("all", set(HOTEL_ROWS)),
    ],
)
def test_status_matches(status, expected):
    matched = {
        name for name, row in HOTEL_ROWS.items()
        if status_matches(row, status, "extraction_status")
    }
    assert matched == expected


@pytest.mark.parametrize("name", sorted(HOTEL_ROWS))
def test_filter_agrees_with_display_status(name):
    row = HOTEL_ROWS[name]
    label = display_status(row, "hotel")
    assert status_matches(row, label, "extraction_status")


def test_restaurant_active_status_counts_as_completed():
    row = {"active": False, "verified": True, "status": "active"}
    assert status_matches(row, "draft", "status")
    assert display_status(row, "restaurant") == "draft"
