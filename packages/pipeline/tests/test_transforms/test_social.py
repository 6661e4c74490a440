"""
tests/test_transforms/test_social.py — Tests for social link cleaning.
"""

from __future__ import annotations

from bestof_pipeline.transforms.social import clean_social_value, social_link_fixes


class TestCleanSocialValue:
    def test_handle_becomes_profile_url(self):
        assert clean_social_value("@thalassagoa", "instagram") == "https://instagram.com/thalassagoa"

    def test_tiktok_keeps_at_prefix(self):
        assert clean_social_value("goafoodie", "tiktok") == "https://tiktok.com/@goafoodie"

    def test_markdown_leftovers_are_stripped(self):
        assert (
            clean_social_value("goa.shack)[Instagram](https:", "instagram")
            == "https://instagram.com/goa.shack"
        )

    def test_trailing_parenthesis_removed_from_url(self):
        assert (
            clean_social_value("https://instagram.com/thalassagoa)", "instagram")
            == "https://instagram.com/thalassagoa"
        )

    def test_share_artifacts_rejected(self):
        for value in ("sharer", "intent", "Share"):
            assert clean_social_value(value, "facebook") is None

    def test_bare_domain_rejected(self):
        assert clean_social_value("https://facebook.com/", "facebook") is None

    def test_numeric_id_only_valid_for_facebook(self):
        assert clean_social_value("100063512345", "facebook") == "https://facebook.com/100063512345"
        assert clean_social_value("100063512345", "instagram") is None

    def test_single_character_handle_rejected(self):
        assert clean_social_value("@x", "twitter") is None

    def test_empty_values(self):
        assert clean_social_value(None, "instagram") is None
        assert clean_social_value("   ", "instagram") is None

    def test_platform_without_prefix_rejects_handles(self):
        assert clean_social_value("@goachannel", "youtube") is None


class TestSocialLinkFixes:
    def test_only_changed_columns_reported(self):
        row = {
            "instagram": "@martins_corner",
            "facebook": "https://facebook.com/martinscorner",
            "twitter": None,
        }
        fixes = social_link_fixes(row, ("instagram", "facebook", "twitter"))
        assert fixes == {"instagram": "https://instagram.com/martins_corner"}

    def test_junk_value_fixed_to_none(self):
        fixes = social_link_fixes({"facebook": "sharer"}, ("facebook",))
        assert fixes == {"facebook": None}
