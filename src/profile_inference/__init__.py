"""
LLM Inference Layer for value-orientation profiling.

Turns free-form social-media text about one user into a structured profile:
- Topic classification (macro category)
- Bounded bipolar-label scores (value_orientation)
- Narrative summary
- Optional evidence quotes (balanced/deep modes)

Architecture: prompt builder + external LLM transport + tolerant parsing,
single corrective retry and post-hoc consistency enforcement.
"""

__version__ = "0.1.0"
