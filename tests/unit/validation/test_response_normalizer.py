"""
Unit tests for the response normalizer.
"""

import json

import pytest

from profile_inference.validation.response_normalizer import (
    DEFAULT_SUMMARY,
    FAILURE_OBJECT,
    FAILURE_SUMMARY,
    normalize_and_fix_response,
    normalize_response,
)


class TestNormalizeResponse:
    """Test suite for normalize_response."""

    def test_empty_object_gets_defaults(self):
        result = normalize_response("{}")

        assert result.recovered is True
        assert result.data == {
            "value_orientation": [],
            "nickname": "",
            "topic_classification": "Unknown",
            "summary": DEFAULT_SUMMARY,
            "evidence": [],
        }

    def test_unrecoverable_text_yields_failure_object(self):
        result = normalize_response("not json at all")

        assert result.recovered is False
        assert result.data == FAILURE_OBJECT
        assert result.data["summary"] == FAILURE_SUMMARY == "Analysis Failed"

    def test_failure_object_is_a_copy(self):
        normalize_response("nope").data["summary"] = "mutated"
        assert FAILURE_OBJECT["summary"] == "Analysis Failed"

    @pytest.mark.parametrize("raw", [None, 42, {"summary": "x"}])
    def test_non_text_is_unrecoverable(self, raw):
        assert normalize_response(raw).recovered is False

    def test_markdown_fences_stripped(self):
        result = normalize_response('```json\n{"summary": "fenced"}\n```')
        assert result.data["summary"] == "fenced"

    def test_json_embedded_in_prose(self):
        result = normalize_response('Sure! Here it is: {"summary": "inner"} Hope it helps.')
        assert result.recovered is True
        assert result.data["summary"] == "inner"

    def test_top_level_array_is_unrecoverable(self):
        assert normalize_response("[1, 2, 3]").recovered is False

    def test_legacy_field_migrated(self):
        raw = json.dumps({"political_leaning": [{"label": "left_right", "score": 0.3}]})
        data = normalize_response(raw).data

        assert data["value_orientation"] == [{"label": "ideology", "score": 0.3}]
        assert "political_leaning" not in data

    def test_legacy_field_ignored_when_current_field_present(self):
        raw = json.dumps({
            "value_orientation": [{"label": "authority", "score": 0.2}],
            "political_leaning": [{"label": "ideology", "score": 0.9}],
        })
        data = normalize_response(raw).data

        assert data["value_orientation"] == [{"label": "authority", "score": 0.2}]
        assert "political_leaning" not in data

    def test_string_entries_become_default_scored_labels(self):
        data = normalize_response('{"value_orientation": ["LEFT_RIGHT"]}').data
        assert data["value_orientation"] == [{"label": "ideology", "score": 0.5}]

    @pytest.mark.parametrize(
        "score,expected",
        [(3, 1.0), (-7.5, -1.0), ("high", 0.5), (None, 0.5), (True, 0.5), (-0.25, -0.25)],
    )
    def test_scores_sanitized(self, score, expected):
        raw = json.dumps({"value_orientation": [{"label": "authority", "score": score}]})
        assert normalize_response(raw).data["value_orientation"][0]["score"] == expected

    def test_missing_score_defaults(self):
        data = normalize_response('{"value_orientation": [{"label": "change"}]}').data
        assert data["value_orientation"] == [{"label": "change", "score": 0.5}]

    @pytest.mark.parametrize("entry", [5, {"score": 0.3}, {"label": ""}, None])
    def test_invalid_entries_become_unknown(self, entry):
        raw = json.dumps({"value_orientation": [entry]})
        assert normalize_response(raw).data["value_orientation"] == [{"label": "Unknown", "score": 0.5}]

    def test_non_list_orientation_replaced(self):
        assert normalize_response('{"value_orientation": "authority"}').data["value_orientation"] == []

    def test_falsy_fields_default_filled(self):
        data = normalize_response('{"summary": "", "nickname": null, "topic_classification": 0}').data
        assert data["summary"] == DEFAULT_SUMMARY
        assert data["nickname"] == ""
        assert data["topic_classification"] == "Unknown"

    def test_present_fields_kept(self):
        raw = json.dumps({"nickname": "n", "summary": "s", "evidence": [{"quote": "q"}], "extra": 1})
        data = normalize_response(raw).data
        assert data["nickname"] == "n"
        assert data["summary"] == "s"
        assert data["evidence"] == [{"quote": "q"}]
        assert data["extra"] == 1

    def test_normalize_and_fix_returns_json_text(self):
        text = normalize_and_fix_response("garbage")
        assert json.loads(text) == FAILURE_OBJECT
