"""
Summary / score consistency enforcement.

The LLM writes a narrative summary and numeric scores in one pass, and the
two regularly disagree. ConsistencyEngine offers independent, pure
operations over a ProfileDraft to bring them back in line:

- normalize_scores: clamp, dedupe, fill requested labels with 0
- adjust_scores_by_evidence: dampen strong scores no evidence mentions
- enforce_summary_alignment: append the dominant directions to the summary
- detect_summary_conflicts / resolve_summary_conflicts: remove phrases that
  contradict the score direction and mark the summary as adjusted

Labels missing from the catalog (opaque ids) never take part.
"""

import re
from dataclasses import dataclass
from functools import lru_cache
from typing import Iterable, Optional, Union

import structlog

from profile_inference.consistency.scores import dedupe_orientations
from profile_inference.labels.canonicalizer import normalize_label_id
from profile_inference.labels.catalog import LabelCatalog, LabelDefinition, get_label_catalog
from profile_inference.models.enums import AnalysisMode, Locale
from profile_inference.models.profile_models import ProfileDraft, ValueOrientation

logger = structlog.get_logger(__name__)


# Evidence dampening: (min |score|, factor), first matching row applies
EVIDENCE_DAMPENING: tuple[tuple[float, float], ...] = (
    (0.7, 0.6),
    (0.4, 0.8),
)

# Labels considered for summary alignment
ALIGNMENT_TOP_K: dict[AnalysisMode, int] = {
    AnalysisMode.BALANCED: 2,
    AnalysisMode.DEEP: 3,
}
ALIGNMENT_MIN_SCORE = 0.3

# Report threshold for "high-score" labels
HIGH_SCORE_THRESHOLD = 0.7

ALIGNMENT_NOTICE: dict[Locale, str] = {
    Locale.EN_US: "[Summary adjusted for consistency with scores] ",
    Locale.ZH_CN: "【已根据评分自动校准】",
}

_CONNECTOR: dict[Locale, str] = {
    Locale.EN_US: ", ",
    Locale.ZH_CN: "，",
}

# (threshold, en, zh), first matching row applies
_INTENSITY: tuple[tuple[float, str, str], ...] = (
    (0.7, "strong", "强烈"),
    (0.5, "clear", "明显"),
    (0.3, "slight", "轻微"),
)
_DEFAULT_INTENSITY = ("mild", "温和")

_MULTI_SPACE_RE = re.compile(r"[ \t]{2,}")
_SPACE_BEFORE_PUNCT_RE = re.compile(r"[ \t]+([.,;:!?，。；：！？])")


@dataclass(frozen=True)
class SummaryConflict:
    """
    Direction check of one label against the summary.

    Attributes:
        label: Canonical label id
        conflict: Summary mentions the opposite phrase but not the expected one
        expected: Phrase implied by the score's sign
        opposite: Phrase on the other side of the axis
    """

    label: str
    conflict: bool
    expected: str
    opposite: str


def _contains(text: str, keyword: str) -> bool:
    if not text or not keyword:
        return False
    return keyword.lower() in text.lower()


class ConsistencyEngine:
    """
    Consistency operations bound to one locale's label catalog.

    Every operation returns a new ProfileDraft; inputs are never mutated.
    """

    def __init__(self, catalog: LabelCatalog):
        self.catalog = catalog
        self.locale = catalog.locale

    def _label(self, label_id: str) -> Optional[LabelDefinition]:
        return self.catalog.get(label_id)

    def _labelled(self, draft: ProfileDraft, min_score: float) -> list[tuple[ValueOrientation, LabelDefinition]]:
        """Catalog labels of the draft with |score| >= min_score, in draft order."""
        pairs = []
        for vo in draft.value_orientation:
            label = self._label(vo.label)
            if label is not None and abs(vo.score) >= min_score:
                pairs.append((vo, label))
        return pairs

    def _phrase_pattern(self, phrases: Iterable[str]) -> "re.Pattern[str]":
        """
        Alternation of `phrases` and every longer catalog phrase embedding one.

        Longest alternatives come first, so a match is always a whole phrase:
        "传统" inside "传统性别观" matches as the longer phrase.
        """
        targets = {phrase.lower() for phrase in phrases if phrase}
        alternatives = set(targets)
        for label in self.catalog.all_labels():
            for phrase in (label.left_phrase, label.right_phrase):
                lowered = phrase.lower()
                if any(target in lowered for target in targets):
                    alternatives.add(lowered)
        ordered = sorted(alternatives, key=len, reverse=True)
        return re.compile("|".join(re.escape(phrase) for phrase in ordered), re.IGNORECASE)

    def _mentions(self, text: str, phrase: str) -> bool:
        """`phrase` occurs in `text` on its own, not only inside a longer catalog phrase."""
        if not text or not phrase:
            return False
        target = phrase.lower()
        return any(match.group(0).lower() == target for match in self._phrase_pattern([phrase]).finditer(text))

    def intensity(self, score: float) -> str:
        """Intensity word for |score| in the engine's locale."""
        magnitude = abs(score)
        zh = self.locale is Locale.ZH_CN
        for threshold, en_word, zh_word in _INTENSITY:
            if magnitude >= threshold:
                return zh_word if zh else en_word
        return _DEFAULT_INTENSITY[1] if zh else _DEFAULT_INTENSITY[0]

    def normalize_scores(self, draft: ProfileDraft, label_ids: Iterable[str] = ()) -> ProfileDraft:
        """
        Clamp scores, collapse duplicate labels and fill requested labels.

        Args:
            draft: Profile draft
            label_ids: Labels that must be present afterwards; missing ones get score 0

        Returns:
            Draft with unique, clamped value orientations
        """
        orientations = dedupe_orientations(draft.value_orientation)
        present = {vo.label for vo in orientations}
        for label_id in label_ids:
            canonical = normalize_label_id(label_id)
            if canonical not in present:
                orientations.append(ValueOrientation(label=canonical, score=0.0))
                present.add(canonical)
        return draft.model_copy(update={"value_orientation": orientations})

    def has_supporting_evidence(self, label: LabelDefinition, score: float, evidence_text: str) -> bool:
        """Evidence mentions the label's name, id or resulting phrase."""
        return any(
            _contains(evidence_text, keyword)
            for keyword in (label.name, label.id, label.resulting_phrase(score))
        )

    def adjust_scores_by_evidence(
        self,
        draft: ProfileDraft,
        label_ids: Optional[Iterable[str]] = None,
    ) -> ProfileDraft:
        """
        Dampen strong scores that no evidence supports.

        |score| >= 0.7 without support is multiplied by 0.6, |score| >= 0.4
        without support by 0.8. A draft without evidence (fast mode) is
        returned unchanged.

        Args:
            draft: Profile draft
            label_ids: Restrict the adjustment to these labels (None = all)

        Returns:
            Draft with adjusted scores
        """
        if draft.evidence is None:
            return draft

        targets = None if label_ids is None else {normalize_label_id(label_id) for label_id in label_ids}
        evidence_text = draft.evidence_text()
        adjusted: list[ValueOrientation] = []
        changed = []

        for vo in draft.value_orientation:
            label = self._label(vo.label)
            if label is None or (targets is not None and vo.label not in targets):
                adjusted.append(vo)
                continue

            score = vo.score
            if not self.has_supporting_evidence(label, score, evidence_text):
                for threshold, factor in EVIDENCE_DAMPENING:
                    if abs(score) >= threshold:
                        score = score * factor
                        changed.append(vo.label)
                        break
            adjusted.append(vo if score == vo.score else ValueOrientation(label=vo.label, score=score))

        if changed:
            logger.debug("scores_dampened_by_evidence", labels=changed)
        return draft.model_copy(update={"value_orientation": adjusted})

    def enforce_summary_alignment(self, draft: ProfileDraft, mode: Union[AnalysisMode, str]) -> ProfileDraft:
        """
        Make the summary state the dominant label directions.

        No-op in fast mode. Otherwise the top K labels by |score| (K=2
        balanced, K=3 deep, |score| >= 0.3) that the summary does not already
        mention are appended as one sentence of intensity + phrase clauses.

        Args:
            draft: Profile draft
            mode: Analysis mode

        Returns:
            Draft with an aligned summary
        """
        mode = AnalysisMode(mode)
        if not mode.is_rich:
            return draft

        candidates = self._labelled(draft, ALIGNMENT_MIN_SCORE)
        candidates.sort(key=lambda item: abs(item[0].score), reverse=True)

        clauses = []
        for vo, label in candidates[: ALIGNMENT_TOP_K[mode]]:
            phrase = label.resulting_phrase(vo.score)
            if any(_contains(draft.summary, keyword) for keyword in (phrase, label.name, label.id)):
                continue
            if self.locale is Locale.ZH_CN:
                clauses.append(f"{self.intensity(vo.score)}{phrase}")
            else:
                clauses.append(f"{self.intensity(vo.score)} {phrase}")

        if not clauses:
            return draft

        joined = _CONNECTOR[self.locale].join(clauses)
        if self.locale is Locale.ZH_CN:
            sentence = f"总体而言，该用户表现出{joined}的倾向。"
            summary = f"{draft.summary}{sentence}"
        else:
            sentence = f"Overall, the user shows {joined}."
            summary = f"{draft.summary} {sentence}" if draft.summary else sentence

        logger.debug("summary_aligned", clauses=len(clauses), mode=mode.value)
        return draft.model_copy(update={"summary": summary})

    def detect_summary_conflicts(self, draft: ProfileDraft) -> list[SummaryConflict]:
        """
        Check every catalog label's direction against the summary.

        Zero scores have no direction and are skipped. A phrase only counts
        when it stands on its own, not as part of a longer catalog phrase.
        """
        results = []
        for vo in draft.value_orientation:
            label = self._label(vo.label)
            if label is None or vo.score == 0:
                continue
            expected = label.resulting_phrase(vo.score)
            opposite = label.opposite_phrase(vo.score)
            conflict = self._mentions(draft.summary, opposite) and not self._mentions(draft.summary, expected)
            results.append(SummaryConflict(label=vo.label, conflict=conflict, expected=expected, opposite=opposite))
        return results

    def resolve_summary_conflicts(self, draft: ProfileDraft) -> ProfileDraft:
        """
        Strip contradicting phrases and prepend the alignment notice.

        Returns the draft unchanged when there is no conflict.
        """
        conflicts = [c for c in self.detect_summary_conflicts(draft) if c.conflict]
        if not conflicts:
            return draft

        # Longer catalog phrases that embed an opposite phrase are kept intact
        opposites = {c.opposite.lower() for c in conflicts}
        summary = self._phrase_pattern(opposites).sub(
            lambda match: "" if match.group(0).lower() in opposites else match.group(0),
            draft.summary,
        )
        summary = _SPACE_BEFORE_PUNCT_RE.sub(r"\1", _MULTI_SPACE_RE.sub(" ", summary)).strip()

        notice = ALIGNMENT_NOTICE[self.locale]
        if not summary.startswith(notice.strip()):
            summary = f"{notice}{summary}"

        logger.info(
            "summary_conflicts_resolved",
            labels=[c.label for c in conflicts],
            locale=self.locale.value,
        )
        return draft.model_copy(update={"summary": summary})

    def reconcile_summary(self, draft: ProfileDraft, mode: Union[AnalysisMode, str]) -> ProfileDraft:
        """Conflict resolution followed by alignment."""
        return self.enforce_summary_alignment(self.resolve_summary_conflicts(draft), mode)

    def consistency_report(self, draft: ProfileDraft) -> str:
        """
        Plain-text debug report.

        Lists high-score labels, whether the summary mentions them, and
        whether the evidence supports them.
        """
        zh = self.locale is Locale.ZH_CN
        if not draft.value_orientation or not draft.summary:
            return "画像数据不完整，无法进行一致性分析。" if zh else "Profile data incomplete for consistency analysis."

        high = self._labelled(draft, HIGH_SCORE_THRESHOLD)

        lines = ["=== 一致性分析报告 ===" if zh else "=== Consistency Report ==="]
        if high:
            lines.append("\n高分标签:" if zh else "\nHigh-score labels:")
            for vo, label in high:
                phrase = label.resulting_phrase(vo.score)
                if zh:
                    side = "右" if vo.score > 0 else "左"
                    lines.append(f"  - {label.name}: {vo.score:.2f} ({side}侧-{phrase})")
                else:
                    side = "right" if vo.score > 0 else "left"
                    lines.append(f"  - {label.name}: {vo.score:.2f} ({side} side - {phrase})")
                mentioned = any(_contains(draft.summary, k) for k in (phrase, label.name, label.id))
                if zh:
                    lines.append(f"    * 摘要中提及: {'是' if mentioned else '否'}")
                else:
                    lines.append(f"    * Mentioned in summary: {'yes' if mentioned else 'no'}")

        if draft.evidence is not None:
            evidence_text = draft.evidence_text()
            lines.append("\n证据支持情况:" if zh else "\nEvidence support:")
            for vo, label in high:
                supported = self.has_supporting_evidence(label, vo.score, evidence_text)
                if zh:
                    lines.append(f"  - {label.name}: {'有支持证据' if supported else '缺乏支持证据'}")
                else:
                    lines.append(f"  - {label.name}: {'supported' if supported else 'no supporting evidence'}")

        return "\n".join(lines)


@lru_cache(maxsize=None)
def _cached_engine(locale: Locale) -> ConsistencyEngine:
    return ConsistencyEngine(get_label_catalog(locale))


def get_consistency_engine(locale: Union[Locale, str, None] = None) -> ConsistencyEngine:
    """Shared engine for a locale."""
    return _cached_engine(Locale.coerce(locale))
