"""
Unit tests for the label catalog.
"""

from profile_inference.labels.canonicalizer import CANONICAL_LABEL_IDS
from profile_inference.labels.catalog import MODE_LABEL_LIMITS, get_label_catalog
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory


class TestLabelCatalog:
    """Test suite for LabelCatalog."""

    def test_catalog_covers_canonical_ids(self):
        catalog = get_label_catalog("en-US")
        for label_id in CANONICAL_LABEL_IDS:
            assert label_id in catalog

    def test_catalog_is_shared_per_locale(self):
        assert get_label_catalog("en-US") is get_label_catalog(Locale.EN_US)
        assert get_label_catalog("zh") is get_label_catalog("zh-CN")

    def test_unknown_locale_falls_back_to_english(self):
        assert get_label_catalog("fr-FR").locale is Locale.EN_US

    def test_phrases_follow_score_sign(self):
        authority = get_label_catalog("en-US").get("authority")
        assert authority.resulting_phrase(0.8) == "Authoritarian"
        assert authority.resulting_phrase(-0.8) == "Libertarian"
        assert authority.opposite_phrase(0.8) == "Libertarian"
        assert authority.name == "Libertarian vs Authoritarian"

    def test_localized_phrases(self):
        authority = get_label_catalog("zh-CN").get("authority")
        assert authority.resulting_phrase(0.8) == "威权主义"

    def test_opaque_label_lookup_returns_none(self):
        assert get_label_catalog().get("not_a_label") is None

    def test_general_offers_whole_catalog(self):
        catalog = get_label_catalog()
        assert len(catalog.relevant_labels(MacroCategory.GENERAL)) == len(catalog)

    def test_related_categories_follow_own_labels(self):
        labels = get_label_catalog().relevant_labels(MacroCategory.ECONOMY)
        categories = [label.category for label in labels]
        assert categories[0] is MacroCategory.ECONOMY
        assert set(categories) == {MacroCategory.ECONOMY, MacroCategory.POLITICS}

    def test_mode_trimming(self):
        catalog = get_label_catalog()
        fast = catalog.labels_for_context(MacroCategory.GENERAL, AnalysisMode.FAST)
        balanced = catalog.labels_for_context(MacroCategory.GENERAL, AnalysisMode.BALANCED)
        deep = catalog.labels_for_context(MacroCategory.GENERAL, AnalysisMode.DEEP)

        assert len(fast) == MODE_LABEL_LIMITS[AnalysisMode.FAST]
        assert len(balanced) == MODE_LABEL_LIMITS[AnalysisMode.BALANCED]
        assert len(deep) == len(catalog)
        # Both modes keep the highest weights, so fast is a prefix of balanced
        assert fast == balanced[: len(fast)]
        assert min(label.weight for label in fast) >= max(label.weight for label in balanced[len(fast):])

    def test_format_for_prompt_lines(self):
        text = get_label_catalog().format_for_prompt(MacroCategory.POLITICS, AnalysisMode.DEEP)
        assert "- 【ideology】: Left-wing vs Right-wing (" in text
        assert all(line.startswith("- 【") for line in text.splitlines())
