"""
constants.py — shared constants used across the API and the maintenance CLI.

Category → table/collection routing, child tables, extraction step lists,
status literals, and editable-field allow-lists are defined here so the
API routes and the repair scripts stay in sync.
"""

from __future__ import annotations

from typing import Final, Literal

# ---------------------------------------------------------------------------
# Categories
# ---------------------------------------------------------------------------
Category = Literal["restaurant", "hotel", "mall", "school", "attraction", "fitness"]

CATEGORIES: Final[tuple[str, ...]] = (
    "restaurant",
    "hotel",
    "mall",
    "school",
    "attraction",
    "fitness",
)

# Category -> Supabase table / Firestore collection
CATEGORY_TABLES: Final[dict[str, str]] = {
    "restaurant": "restaurants",
    "hotel": "hotels",
    "mall": "malls",
    "school": "schools",
    "attraction": "attractions",
    "fitness": "fitness_places",
}

# Plural path segment used by the admin API (/v1/admin/hotels/...)
CATEGORY_PATHS: Final[dict[str, str]] = {
    "restaurants": "restaurant",
    "hotels": "hotel",
    "malls": "mall",
    "schools": "school",
    "attractions": "attraction",
    "fitness": "fitness",
}

# Categories whose canonical records live in Firestore. Everything else is Supabase.
FIRESTORE_CATEGORIES: Final[frozenset[str]] = frozenset({"restaurant"})

# Key used for each collection in the universal search response
SEARCH_RESULT_KEYS: Final[dict[str, str]] = {
    "restaurants": "restaurants",
    "hotels": "hotels",
    "malls": "malls",
    "attractions": "attractions",
    "schools": "schools",
    "fitness_places": "fitness",
}

# ---------------------------------------------------------------------------
# Child tables (deleted before the parent row)
# ---------------------------------------------------------------------------
CHILD_TABLES: Final[dict[str, tuple[str, ...]]] = {
    "hotel": (
        "hotel_images",
        "hotel_rooms",
        "hotel_faqs",
        "hotel_reviews",
        "hotel_amenities",
    ),
    "mall": ("mall_images", "mall_faqs", "mall_reviews"),
    "school": ("school_images", "school_faqs", "school_policies"),
    "attraction": (
        "attraction_images",
        "attraction_reviews",
        "attraction_faqs",
        "attraction_special_hours",
    ),
    "fitness": ("fitness_images", "fitness_reviews", "fitness_faqs"),
    "restaurant": (),
}

CHILD_FOREIGN_KEYS: Final[dict[str, str]] = {
    "hotel": "hotel_id",
    "mall": "mall_id",
    "school": "school_id",
    "attraction": "attraction_id",
    "fitness": "fitness_place_id",
    "restaurant": "restaurant_id",
}

# ---------------------------------------------------------------------------
# Extraction pipeline steps (order is display order)
# ---------------------------------------------------------------------------
EXTRACTION_STEPS: Final[dict[str, tuple[str, ...]]] = {
    "restaurant": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_menu",
        "firecrawl_website",
        "apify_reviews",
        "apify_images",
        "upload_images",
        "ai_enhancement",
        "data_mapping",
    ),
    "hotel": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_rooms",
        "firecrawl_website",
        "firecrawl_social_media_search",
        "apify_reviews",
        "firecrawl_tripadvisor",
        "firecrawl_booking_com",
        "process_images",
        "ai_sentiment",
        "ai_enhancement",
        "data_mapping",
    ),
    "mall": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_stores",
        "firecrawl_website",
        "firecrawl_social_media_search",
        "apify_reviews",
        "firecrawl_tripadvisor",
        "process_images",
        "ai_sentiment",
        "ai_enhancement",
        "data_mapping",
    ),
    "school": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_website",
        "firecrawl_admissions",
        "apify_reviews",
        "process_images",
        "ai_enhancement",
        "data_mapping",
    ),
    "attraction": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_website",
        "apify_reviews",
        "process_images",
        "ai_enhancement",
        "data_mapping",
    ),
    "fitness": (
        "initial_creation",
        "apify_fetch",
        "firecrawl_general",
        "firecrawl_website",
        "firecrawl_social_media_search",
        "apify_reviews",
        "process_images",
        "ai_enhancement",
        "data_mapping",
    ),
}

# ---------------------------------------------------------------------------
# Status literals
# ---------------------------------------------------------------------------
ExtractionStatus = Literal["pending", "processing", "completed", "failed"]
StepStatus = Literal["pending", "running", "completed", "failed"]
DisplayStatus = Literal["published", "draft", "processing", "failed", "pending"]

EXTRACTION_STATUSES: Final[tuple[str, ...]] = (
    "pending",
    "processing",
    "completed",
    "failed",
)

LIST_STATUS_FILTERS: Final[tuple[str, ...]] = (
    "all",
    "published",
    "draft",
    "pending",
    "processing",
    "failed",
)

# Restaurants use "importing" while the record is being created
IN_PROGRESS_STATUSES: Final[frozenset[str]] = frozenset({"processing", "importing"})

# ---------------------------------------------------------------------------
# Field allow-lists
# ---------------------------------------------------------------------------
PROTECTED_FIELDS: Final[frozenset[str]] = frozenset(
    {
        "id",
        "created_at",
        "google_place_id",
        "extraction_source",
        "extraction_job_id",
        "apify_output",
        "firecrawl_output",
    }
)

EDITABLE_FIELDS: Final[dict[str, frozenset[str]]] = {
    "restaurant": frozenset(
        {
            "name", "slug", "cuisine", "address", "neighborhood", "phone",
            "coordinates", "price_level", "website", "instagram", "facebook",
            "hours", "status", "description", "short_description",
            "thumbnail_url", "hero_image", "verified", "active", "area",
            "district", "latitude", "longitude", "google_rating",
            "google_review_count",
        }
    ),
    "fitness": frozenset(
        {
            "name", "slug", "description", "short_description", "address",
            "area", "fitness_types", "gender_policy", "amenities",
            "pricing_summary", "class_schedule", "phone", "email", "website",
            "instagram", "facebook", "twitter", "tiktok", "google_rating",
            "google_review_count", "meta_title", "meta_description",
            "meta_keywords", "hero_image", "verified",
        }
    ),
}

# ---------------------------------------------------------------------------
# Social platforms
# ---------------------------------------------------------------------------
SOCIAL_PLATFORMS: Final[tuple[str, ...]] = (
    "instagram",
    "facebook",
    "twitter",
    "tiktok",
    "youtube",
    "linkedin",
    "snapchat",
)

SOCIAL_URL_PREFIXES: Final[dict[str, str]] = {
    "instagram": "https://instagram.com/",
    "facebook": "https://facebook.com/",
    "twitter": "https://twitter.com/",
    "tiktok": "https://tiktok.com/@",
}

# ---------------------------------------------------------------------------
# Contact form / favorites
# ---------------------------------------------------------------------------
ContactReason = Literal[
    "general", "suggestion", "correction", "partnership", "feedback", "other"
]
CONTACT_REASONS: Final[tuple[str, ...]] = (
    "general",
    "suggestion",
    "correction",
    "partnership",
    "feedback",
    "other",
)

ContactStatus = Literal["new", "read", "responded", "archived"]
CONTACT_STATUSES: Final[tuple[str, ...]] = ("new", "read", "responded", "archived")

FAVORITE_ITEM_TYPES: Final[tuple[str, ...]] = CATEGORIES

# ---------------------------------------------------------------------------
# Search
# ---------------------------------------------------------------------------
MIN_SEARCH_QUERY_LENGTH: Final[int] = 2
UNIVERSAL_SEARCH_SCAN_LIMIT: Final[int] = 50
UNIVERSAL_SEARCH_RESULTS_PER_CATEGORY: Final[int] = 5
FIRESTORE_IN_QUERY_LIMIT: Final[int] = 10

# ---------------------------------------------------------------------------
# Goa locations (slug generation)
# ---------------------------------------------------------------------------
DEFAULT_LOCATION: Final[str] = "goa"

GOA_LOCATIONS: Final[tuple[str, ...]] = (
    # North Goa
    "panjim", "panaji", "candolim", "calangute", "baga", "anjuna", "vagator",
    "siolim", "morjim", "ashwem", "mandrem", "arambol", "mapusa", "porvorim",
    "old goa", "miramar", "dona paula", "nerul", "sinquerim", "saligao",
    "assagao",
    # South Goa
    "margao", "madgaon", "vasco da gama", "vasco", "colva", "benaulim", "varca",
    "cavelossim", "mobor", "agonda", "palolem", "patnem", "majorda", "utorda",
    "bogmalo", "canacona", "quepem", "ponda",
)

# Spelling variants -> canonical slug form
AREA_ALIASES: Final[dict[str, str]] = {
    "panaji": "panjim",
    "madgaon": "margao",
    "vasco da gama": "vasco",
    "vasco-da-gama": "vasco",
    "mormugao": "vasco",
    "old goa": "old-goa",
    "velha goa": "old-goa",
    "dona paula": "dona-paula",
}
