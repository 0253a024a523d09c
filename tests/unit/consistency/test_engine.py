"""
Unit tests for the consistency engine.
"""

import pytest

from profile_inference.consistency.engine import (
    ALIGNMENT_NOTICE,
    ConsistencyEngine,
    get_consistency_engine,
)
from profile_inference.models.enums import AnalysisMode, Locale
from profile_inference.models.profile_models import Evidence, ProfileDraft, ValueOrientation


def _draft(summary: str, *pairs, evidence=None) -> ProfileDraft:
    return ProfileDraft(
        nickname="n",
        topic_classification="Politics",
        reasoning="r",
        value_orientation=[ValueOrientation(label=label, score=score) for label, score in pairs],
        summary=summary,
        evidence=evidence,
    )


class TestEngineFactory:
    def test_engine_shared_per_locale(self):
        assert get_consistency_engine("en-US") is get_consistency_engine(Locale.EN_US)
        assert isinstance(get_consistency_engine("zh-CN"), ConsistencyEngine)
        assert get_consistency_engine("zh-CN").locale is Locale.ZH_CN


class TestIntensity:
    @pytest.mark.parametrize(
        "score,word", [(0.8, "strong"), (-0.7, "strong"), (0.5, "clear"), (-0.3, "slight"), (0.1, "mild")]
    )
    def test_english(self, score, word):
        assert get_consistency_engine("en-US").intensity(score) == word

    def test_chinese(self):
        assert get_consistency_engine("zh-CN").intensity(0.9) == "强烈"


class TestNormalizeScores:
    def test_dedupe_keeps_larger_magnitude(self):
        draft = _draft("s", ("ideology", -0.3), ("ideology", 0.9))
        result = get_consistency_engine().normalize_scores(draft)
        assert result.value_orientation == [ValueOrientation(label="ideology", score=0.9)]

    def test_fills_requested_labels(self):
        draft = _draft("s", ("ideology", 0.4))
        result = get_consistency_engine().normalize_scores(draft, ["LEFT_RIGHT", "change"])
        assert [(vo.label, vo.score) for vo in result.value_orientation] == [("ideology", 0.4), ("change", 0.0)]

    def test_input_not_mutated(self):
        draft = _draft("s", ("ideology", 3.0))
        get_consistency_engine().normalize_scores(draft)
        assert draft.value_orientation[0].score == 3.0


class TestAdjustScoresByEvidence:
    def test_supported_kept_unsupported_dampened(self, sample_draft):
        result = get_consistency_engine().adjust_scores_by_evidence(sample_draft)
        scores = {vo.label: vo.score for vo in result.value_orientation}

        # "Authoritarian" appears in the evidence analysis
        assert scores["authority"] == 0.8
        assert scores["market_vs_gov"] == pytest.approx(0.4)

    def test_strong_unsupported_score(self):
        draft = _draft("s", ("change", -0.9), ("ideology", 0.2), evidence=[])
        result = get_consistency_engine().adjust_scores_by_evidence(draft)

        assert result.value_orientation[0].score == pytest.approx(-0.54)
        assert result.value_orientation[1].score == 0.2

    def test_no_evidence_field_is_noop(self):
        draft = _draft("s", ("change", -0.9))
        assert get_consistency_engine().adjust_scores_by_evidence(draft) is draft

    def test_opaque_labels_untouched(self):
        draft = _draft("s", ("mystery_axis", 0.9), evidence=[])
        result = get_consistency_engine().adjust_scores_by_evidence(draft)
        assert result.value_orientation[0].score == 0.9

    def test_restricted_to_label_ids(self):
        draft = _draft("s", ("change", 0.9), ("ideology", 0.9), evidence=[])
        result = get_consistency_engine().adjust_scores_by_evidence(draft, label_ids=["LEFT_RIGHT"])
        scores = {vo.label: vo.score for vo in result.value_orientation}

        assert scores["change"] == 0.9
        assert scores["ideology"] == pytest.approx(0.54)


class TestSummaryAlignment:
    def test_fast_mode_is_noop(self, sample_draft):
        engine = get_consistency_engine()
        assert engine.enforce_summary_alignment(sample_draft, AnalysisMode.FAST) == sample_draft

    def test_balanced_appends_strong_clause(self, sample_draft):
        result = get_consistency_engine().enforce_summary_alignment(sample_draft, AnalysisMode.BALANCED)
        assert result.summary == (
            "The user writes about public order. "
            "Overall, the user shows strong Authoritarian, clear Free market."
        )

    def test_already_mentioned_label_skipped(self):
        draft = _draft("An authoritarian streak shows.", ("authority", 0.8))
        engine = get_consistency_engine()
        assert engine.enforce_summary_alignment(draft, "balanced").summary == draft.summary

    def test_top_k_depends_on_mode(self):
        draft = _draft("s.", ("authority", 0.9), ("change", 0.8), ("ideology", 0.7), ("radicalism", 0.6))
        engine = get_consistency_engine()

        balanced = engine.enforce_summary_alignment(draft, AnalysisMode.BALANCED).summary
        deep = engine.enforce_summary_alignment(draft, AnalysisMode.DEEP).summary

        assert "strong Progress" in balanced
        assert "Right-wing" not in balanced
        assert "strong Right-wing" in deep
        assert "Radical" not in deep

    def test_low_scores_and_opaque_labels_ignored(self):
        draft = _draft("s.", ("mystery_axis", 0.95), ("change", 0.2))
        engine = get_consistency_engine()
        assert engine.enforce_summary_alignment(draft, AnalysisMode.DEEP).summary == "s."

    def test_chinese_sentence(self):
        draft = _draft("该用户关注公共秩序。", ("authority", 0.8), ("market_vs_gov", 0.5))
        result = get_consistency_engine("zh-CN").enforce_summary_alignment(draft, AnalysisMode.BALANCED)
        assert result.summary == "该用户关注公共秩序。总体而言，该用户表现出强烈威权主义，明显市场主导的倾向。"


class TestSummaryConflicts:
    def test_detects_contradicting_phrase(self):
        draft = _draft("The user has libertarian instincts.", ("authority", 0.8))
        conflicts = get_consistency_engine().detect_summary_conflicts(draft)

        assert len(conflicts) == 1
        assert conflicts[0].conflict is True
        assert conflicts[0].expected == "Authoritarian"
        assert conflicts[0].opposite == "Libertarian"

    def test_both_phrases_is_not_a_conflict(self):
        draft = _draft("Torn between libertarian and authoritarian views.", ("authority", 0.8))
        assert not get_consistency_engine().detect_summary_conflicts(draft)[0].conflict

    def test_zero_scores_skipped(self):
        draft = _draft("Libertarian.", ("authority", 0.0))
        assert get_consistency_engine().detect_summary_conflicts(draft) == []

    def test_resolution_strips_phrase_and_prepends_notice(self):
        draft = _draft("The user has libertarian instincts.", ("authority", 0.8))
        result = get_consistency_engine().resolve_summary_conflicts(draft)

        assert result.summary == "[Summary adjusted for consistency with scores] The user has instincts."
        assert "libertarian" not in result.summary.lower()

    def test_resolution_without_conflict_is_noop(self, sample_draft):
        assert get_consistency_engine().resolve_summary_conflicts(sample_draft) is sample_draft

    def test_notice_not_repeated(self):
        engine = get_consistency_engine()
        notice = ALIGNMENT_NOTICE[Locale.EN_US]
        draft = _draft(f"{notice}Libertarian, mostly.", ("authority", 0.8))

        result = engine.resolve_summary_conflicts(draft)
        assert result.summary.count(notice.strip()) == 1

    def test_chinese_notice(self):
        draft = _draft("该用户具有自由意志倾向。", ("authority", 0.8))
        result = get_consistency_engine("zh-CN").resolve_summary_conflicts(draft)
        assert result.summary == "【已根据评分自动校准】该用户具有倾向。"

    def test_resolution_keeps_longer_phrase_of_another_label(self):
        # "传统" (change) also starts "传统性别观" (feminism_vs_patriarchy)
        draft = _draft(
            "该用户偏向传统，坚持传统性别观。",
            ("change", 0.8),
            ("feminism_vs_patriarchy", -0.6),
        )
        result = get_consistency_engine("zh-CN").resolve_summary_conflicts(draft)

        assert result.summary == "【已根据评分自动校准】该用户偏向，坚持传统性别观。"

    def test_phrase_inside_longer_phrase_is_not_a_conflict(self):
        draft = _draft("该用户坚持传统性别观。", ("change", 0.8), ("feminism_vs_patriarchy", -0.6))
        engine = get_consistency_engine("zh-CN")

        assert not any(c.conflict for c in engine.detect_summary_conflicts(draft))
        assert engine.resolve_summary_conflicts(draft) is draft

    def test_english_resolution_keeps_longer_phrase(self):
        draft = _draft("Holds traditional gender roles and leans to tradition.", ("change", 0.8))
        result = get_consistency_engine().resolve_summary_conflicts(draft)

        assert result.summary == "[Summary adjusted for consistency with scores] Holds traditional gender roles and leans to."

    def test_reconcile_runs_alignment_then_resolution(self):
        draft = _draft("Libertarian at heart.", ("authority", 0.8))
        result = get_consistency_engine().reconcile_summary(draft, AnalysisMode.BALANCED)

        assert result.summary.startswith(ALIGNMENT_NOTICE[Locale.EN_US])
        assert "strong Authoritarian" in result.summary
        assert "Libertarian" not in result.summary


class TestConsistencyReport:
    def test_english_report(self, sample_draft):
        report = get_consistency_engine().consistency_report(sample_draft)

        assert report.startswith("=== Consistency Report ===")
        assert "  - Libertarian vs Authoritarian: 0.80 (right side - Authoritarian)" in report
        assert "    * Mentioned in summary: no" in report
        assert "Evidence support:" in report
        assert "  - Libertarian vs Authoritarian: supported" in report

    def test_incomplete_profile(self):
        draft = _draft("s")
        assert get_consistency_engine().consistency_report(draft) == "Profile data incomplete for consistency analysis."
        assert get_consistency_engine("zh-CN").consistency_report(draft) == "画像数据不完整，无法进行一致性分析。"

    def test_fast_profile_has_no_evidence_section(self):
        draft = ProfileDraft(value_orientation=[ValueOrientation(label="authority", score=-0.9)], summary="s")
        report = get_consistency_engine().consistency_report(draft)

        assert "(left side - Libertarian)" in report
        assert "Evidence support:" not in report
