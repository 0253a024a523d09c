"""
Topic classification into macro categories.
"""

from profile_inference.topics.classifier import (
    CATEGORY_KEYWORDS,
    category_name,
    classify,
    classify_with_llm,
    parse_category_answer,
)

__all__ = [
    "CATEGORY_KEYWORDS",
    "category_name",
    "classify",
    "classify_with_llm",
    "parse_category_answer",
]
