"""Tests for public search endpoints."""

from __future__ import annotations


def _mirror():
    return {
        "restaurants": {
            "thalassa": {"name": "Thalassa", "slug": "thalassa-vagator", "area": "Vagator",
                         "active": True, "overall_rating": 8.7,
                         "restaurant_cuisine_ids": ["greek"],
                         "description": "Greek taverna on the cliffs"},
            "fishermans": {"name": "Fisherman's Wharf", "slug": "fishermans-wharf-panjim",
                           "area": "Panjim", "active": True, "overall_rating": 8.1,
                           "restaurant_cuisine_ids": ["goan"]},
            "hidden": {"name": "Vagator Secret Shack", "slug": "vagator-secret-shack",
                       "area": "Vagator", "active": False, "overall_rating": 9.0},
        },
        "hotels": {
            "w-goa": {"name": "W Goa", "slug": "w-goa-vagator", "area": "Vagator",
                      "active": True, "google_rating": 4.5, "images": ["w.jpg"]},
        },
        "restaurants_cuisines": {
            "c1": {"id": "greek", "name": "Greek"},
            "c2": {"id": "goan", "name": "Goan"},
        },
        "attractions": {
            "fort": {"name": "Chapora Fort", "area": "Vagator", "active": True,
                     "google_rating": 4.4, "attraction_category_ids": ["heritage"]},
            "beach": {"name": "Vagator Beach", "area": "Vagator", "active": True,
                      "google_rating": 4.6, "attraction_category_ids": ["beaches"]},
        },
        "attraction_categories": {
            "a": {"id": "heritage", "slug": "heritage", "name": "Heritage"},
            "b": {"id": "beaches", "slug": "beaches", "name": "Beaches"},
        },
    }


def test_short_query_returns_empty_groups(client, firestore_db):
    firestore_db(_mirror())
    response = client.get("/v1/search", params={"q": "v"})
    assert response.status_code == 200
    data = response.json()["data"]
    assert data["totalResults"] == 0
    assert data["message"] == "Query must be at least 2 characters"
    assert data["restaurants"] == []
    assert data["fitness"] == []


def test_universal_search_groups_active_matches(client, firestore_db):
    firestore_db(_mirror())
    data = client.get("/v1/search", params={"q": "vagator"}).json()["data"]
    assert [r["slug"] for r in data["restaurants"]] == ["thalassa-vagator"]
    assert data["hotels"][0]["type"] == "hotel"
    assert data["hotels"][0]["hero_image"] == "w.jpg"
    assert data["totalResults"] == 4
    assert "message" not in data


def test_universal_search_caps_results_per_category(client, firestore_db):
    hotels = {
        f"h{i}": {"name": f"Goa Stay {i}", "slug": f"goa-stay-{i}", "active": True}
        for i in range(8)
    }
    firestore_db({"hotels": hotels})
    data = client.get("/v1/search", params={"q": "goa stay"}).json()["data"]
    assert len(data["hotels"]) == 5


def test_search_restaurants_orders_by_rating_and_joins_cuisines(client, firestore_db):
    firestore_db(_mirror())
    body = client.get("/v1/search/restaurants").json()
    results = body["data"]["results"]
    assert [r["name"] for r in results] == ["Vagator Secret Shack", "Thalassa", "Fisherman's Wharf"]
    assert results[1]["cuisines"] == [{"id": "greek", "name": "Greek"}]
    assert body["meta"]["total_count"] == 3


def test_search_restaurants_by_cuisine(client, firestore_db):
    firestore_db(_mirror())
    results = client.get(
        "/v1/search/restaurants", params={"cuisine": "goan"}
    ).json()["data"]["results"]
    assert [r["name"] for r in results] == ["Fisherman's Wharf"]


def test_search_restaurants_short_query(client, firestore_db):
    firestore_db(_mirror())
    data = client.get("/v1/search/restaurants", params={"q": "x"}).json()["data"]
    assert data["results"] == []
    assert data["total"] == 0


def test_search_attractions_filters_by_category_slug(client, firestore_db):
    firestore_db(_mirror())
    data = client.get(
        "/v1/search/attractions", params={"q": "vagator", "category": "beaches"}
    ).json()["data"]
    assert [r["name"] for r in data["results"]] == ["Vagator Beach"]
    assert data["results"][0]["categories"][0]["slug"] == "beaches"


def test_search_attractions_best_rated_first(client, firestore_db):
    firestore_db(_mirror())
    data = client.get("/v1/search/attractions", params={"q": "vagator"}).json()["data"]
    assert [r["name"] for r in data["results"]] == ["Vagator Beach", "Chapora Fort"]


def test_search_attractions_requires_query(client, firestore_db):
    firestore_db(_mirror())
    data = client.get("/v1/search/attractions").json()["data"]
    assert data["total"] == 0
    assert "message" in data


def test_search_restaurants_served_from_cache(client, firestore_db):
    db = firestore_db(_mirror())
    first = client.get("/v1/search/restaurants", params={"area": "Panjim"}).json()["data"]
    db.data["restaurants"]["fishermans"]["name"] = "Renamed"
    second = client.get("/v1/search/restaurants", params={"area": "Panjim"}).json()["data"]
    assert second == first
    assert second["results"][0]["name"] == "Fisherman's Wharf"


def test_search_attractions_served_from_cache(client, firestore_db):
    db = firestore_db(_mirror())
    client.get("/v1/search/attractions", params={"q": "chapora"})
    db.data["attractions"].clear()
    data = client.get("/v1/search/attractions", params={"q": "chapora"}).json()["data"]
    assert [r["name"] for r in data["results"]] == ["Chapora Fort"]
