"""
tests/test_google_places.py — Tests for the Google Places client (HTTP mocked with respx).
"""

from __future__ import annotations

import httpx
import pytest
import respx

from bestof_shared.google_places import (
    GooglePlacesClient,
    PlacesApiError,
    area_from_address,
)

BASE = "https://places.test/api"


@pytest.fixture
def client():
    return GooglePlacesClient(api_key="test-key", base_url=BASE, region="in")


def test_area_from_address():
    assert area_from_address("Chapora Fort Rd, Vagator, Goa 403509, India") == "Chapora Fort Rd"
    assert area_from_address("Goa 403509") == "Goa 403509"
    assert area_from_address(None) == "Goa"


@respx.mock
async def test_text_search_maps_results(client):
    route = respx.get(f"{BASE}/textsearch/json").mock(
        return_value=httpx.Response(
            200,
            json={
                "status": "OK",
                "results": [
                    {
                        "place_id": "ChIJ-1",
                        "name": "Thalassa",
                        "formatted_address": "Small Vagator, Goa 403509, India",
                        "geometry": {"location": {"lat": 15.6, "lng": 73.73}},
                        "rating": 4.5,
                        "user_ratings_total": 8123,
                        "types": ["restaurant"],
                    }
                ],
            },
        )
    )

    results = await client.text_search("Thalassa", place_type="restaurant")

    params = route.calls.last.request.url.params
    assert params["type"] == "restaurant"
    assert params["key"] == "test-key"
    assert params["region"] == "in"
    assert results[0]["place_id"] == "ChIJ-1"
    assert results[0]["area"] == "Small Vagator"
    assert results[0]["review_count"] == 8123


@respx.mock
async def test_find_place_id(client):
    route = respx.get(f"{BASE}/findplacefromtext/json").mock(
        return_value=httpx.Response(200, json={"status": "OK", "candidates": [{"place_id": "ChIJ-9"}]})
    )

    assert await client.find_place_id("Sharada Mandir", "Miramar") == "ChIJ-9"
    assert route.calls.last.request.url.params["input"] == "Sharada Mandir, Miramar"


@respx.mock
async def test_zero_results_is_not_an_error(client):
    respx.get(f"{BASE}/findplacefromtext/json").mock(
        return_value=httpx.Response(200, json={"status": "ZERO_RESULTS", "candidates": []})
    )
    assert await client.find_place_id("Nowhere") is None


@respx.mock
async def test_error_status_raises(client):
    respx.get(f"{BASE}/textsearch/json").mock(
        return_value=httpx.Response(200, json={"status": "REQUEST_DENIED", "error_message": "bad key"})
    )
    with pytest.raises(PlacesApiError) as exc_info:
        await client.text_search("Thalassa")
    assert exc_info.value.status == "REQUEST_DENIED"
    assert exc_info.value.message == "bad key"
