"""
Few-shot example retrieval.

Candidates are the bank entries whose stored category (or keyword-classified
content) matches the request category, falling back to the whole bank.
Candidates are ranked by Jaccard similarity between token sets of the input
and the example content. Retrieval is deterministic: the sort is stable, so
ties keep bank order.
"""

import re
from functools import lru_cache
from typing import Optional, Sequence, Union

import structlog

from profile_inference.examples.bank import EXAMPLE_BANK, Example
from profile_inference.labels.catalog import get_label_catalog
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory
from profile_inference.topics.classifier import classify

logger = structlog.get_logger(__name__)


# Few-shot examples per mode
EXAMPLE_COUNTS: dict[AnalysisMode, int] = {
    AnalysisMode.FAST: 0,
    AnalysisMode.BALANCED: 1,
    AnalysisMode.DEEP: 2,
}

_CJK_PUNCTUATION_RE = re.compile(r"[，。！？；：、]")
_ASCII_PUNCTUATION_RE = re.compile(r"[,.!?;:]")
_CJK_CHAR_RE = re.compile(r"[\u4e00-\u9fa5]")


def tokenize(text: str) -> list[str]:
    """
    Split text into lexical tokens.

    Punctuation becomes whitespace, whitespace separates tokens, and every
    CJK ideograph is additionally emitted as its own token so that scripts
    without word spacing still get partial overlap credit.
    """
    lowered = text.lower()
    spaced = _ASCII_PUNCTUATION_RE.sub(" ", _CJK_PUNCTUATION_RE.sub(" ", lowered))
    tokens = spaced.split()
    tokens.extend(_CJK_CHAR_RE.findall(lowered))
    return tokens


def jaccard_similarity(left: str, right: str) -> float:
    """Jaccard index of the two texts' token sets (0.0 if either is empty)."""
    left_tokens = set(tokenize(left))
    right_tokens = set(tokenize(right))
    if not left_tokens or not right_tokens:
        return 0.0
    return len(left_tokens & right_tokens) / len(left_tokens | right_tokens)


class ExampleRetriever:
    """
    Selects and formats few-shot examples from a static bank.

    Stateless apart from the read-only bank.
    """

    def __init__(self, examples: Sequence[Example] = EXAMPLE_BANK):
        self.examples = tuple(examples)

    def get_relevant_examples(
        self,
        input_text: str,
        category: MacroCategory,
        mode: AnalysisMode = AnalysisMode.BALANCED,
        count: int = 2,
    ) -> list[Example]:
        """
        Most similar examples for the input.

        Args:
            input_text: User content the prompt is being built for
            category: Request macro category
            mode: Analysis mode (does not change ranking)
            count: Maximum number of examples to return

        Returns:
            Up to `count` examples, most similar first
        """
        if count <= 0:
            return []

        candidates = [
            example
            for example in self.examples
            if example.category is category or classify(example.content) is category
        ]
        if not candidates:
            candidates = list(self.examples)

        scored = [(example, jaccard_similarity(input_text or "", example.content)) for example in candidates]
        scored.sort(key=lambda item: item[1], reverse=True)

        selected = [example for example, _ in scored[:count]]
        logger.debug(
            "examples_retrieved",
            category=category.value,
            mode=mode.value,
            candidates=len(candidates),
            selected=[example.id for example in selected],
        )
        return selected

    def format_examples_as_prompt(
        self,
        examples: Sequence[Example],
        mode: AnalysisMode,
        locale: Union[Locale, str, None] = None,
    ) -> str:
        """
        Render examples as a `【Few-Shot Examples】` block.

        Balanced and deep modes append each example's reasoning line.
        """
        locale = Locale.coerce(locale)
        en = locale is Locale.EN_US

        if not examples:
            if en:
                return "【Few-Shot Examples】\nNo relevant examples found for this topic."
            return "【Few-Shot Examples】\n未找到与此主题相关的示例。"

        catalog = get_label_catalog(locale)
        blocks = []
        for index, example in enumerate(examples, start=1):
            if en:
                lines = [f"Example {index}:", f'Text: "{example.content}"', "Analysis:"]
            else:
                lines = [f"示例 {index}:", f'文本: "{example.content}"', "分析:"]

            for vo in example.value_orientations:
                lines.append(f"- {vo.label}: {vo.score} ({self._explain(catalog.get(vo.label), vo.score, en)})")

            if mode.is_rich and example.reasoning:
                lines.append(f"Reasoning: {example.reasoning}" if en else f"推理: {example.reasoning}")

            blocks.append("\n".join(lines) + "\n")

        return "【Few-Shot Examples】\n" + "\n".join(blocks)

    @staticmethod
    def _explain(label, score: float, en: bool) -> str:
        if label is None:
            return "Score explanation" if en else "评分说明"
        phrase = label.resulting_phrase(score)
        return f"Leans towards {phrase}" if en else f"倾向于{phrase}"


@lru_cache(maxsize=1)
def get_example_retriever() -> ExampleRetriever:
    """Shared retriever over the built-in bank."""
    return ExampleRetriever()


def examples_for_mode(mode: AnalysisMode) -> int:
    return EXAMPLE_COUNTS[mode]


def get_relevant_examples(
    input_text: str,
    category: MacroCategory,
    mode: AnalysisMode = AnalysisMode.BALANCED,
    count: Optional[int] = None,
) -> list[Example]:
    """Module-level shortcut; `count` defaults to the mode's example count."""
    if count is None:
        count = examples_for_mode(mode)
    return get_example_retriever().get_relevant_examples(input_text, category, mode, count)
