"""
Few-shot example bank and retrieval.
"""

from profile_inference.examples.bank import EXAMPLE_BANK, Example
from profile_inference.examples.retriever import (
    EXAMPLE_COUNTS,
    ExampleRetriever,
    get_example_retriever,
    get_relevant_examples,
    jaccard_similarity,
    tokenize,
)

__all__ = [
    "EXAMPLE_BANK",
    "Example",
    "EXAMPLE_COUNTS",
    "ExampleRetriever",
    "get_example_retriever",
    "get_relevant_examples",
    "jaccard_similarity",
    "tokenize",
]
