"""
Label catalog and label id canonicalization.
"""

from profile_inference.labels.canonicalizer import (
    CANONICAL_LABEL_IDS,
    LABEL_ALIASES,
    is_canonical_label_id,
    normalize_label_id,
)
from profile_inference.labels.catalog import (
    LabelCatalog,
    LabelCategory,
    LabelDefinition,
    get_label_catalog,
)

__all__ = [
    "CANONICAL_LABEL_IDS",
    "LABEL_ALIASES",
    "is_canonical_label_id",
    "normalize_label_id",
    "LabelCatalog",
    "LabelCategory",
    "LabelDefinition",
    "get_label_catalog",
]
