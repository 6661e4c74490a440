"""
bestof_shared — shared configuration, clients, models, and helpers for Best of Goa.

Usage:
    from bestof_shared.config import settings
    from bestof_shared.db import get_supabase_client, get_firestore_client
    from bestof_shared.models import Place, ContactSubmission
    from bestof_shared.constants import CATEGORIES, CATEGORY_TABLES
    from bestof_shared.text import generate_place_slug, similarity
    from bestof_shared.status import display_status, publish_values
"""

__version__ = "0.1.0"
