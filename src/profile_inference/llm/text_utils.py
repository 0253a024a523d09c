"""
Text processing utilities for the LLM layer.

Helpers for cleaning raw model output (markdown fences, JSON embedded in
prose) and for bounding the size of text sent to the model.
"""

import re

_LEADING_FENCE_JSON = "```json"
_FENCE = "```"

# Greedy: first "{" to last "}"
_JSON_OBJECT_SPAN_RE = re.compile(r"\{[\s\S]*\}")

# Sentence end: ASCII punctuation followed by whitespace/end, or CJK full stops
_SENTENCE_END_RE = re.compile(r"(?:[.!?](?:\s|$))|[。！？]")


def strip_code_fences(text: str) -> str:
    """
    Remove one leading ```json (or ```) fence and one trailing ``` fence.

    Examples:
        >>> strip_code_fences('```json\\n{"a": 1}\\n```')
        '{"a": 1}'
        >>> strip_code_fences('{"a": 1}')
        '{"a": 1}'
    """
    cleaned = text.strip()
    if cleaned.startswith(_LEADING_FENCE_JSON):
        cleaned = cleaned[len(_LEADING_FENCE_JSON):]
    elif cleaned.startswith(_FENCE):
        cleaned = cleaned[len(_FENCE):]
    if cleaned.endswith(_FENCE):
        cleaned = cleaned[: -len(_FENCE)]
    return cleaned.strip()


def extract_json_object_span(text: str) -> str | None:
    """
    Return the greedy `{...}` span of text, or None if there is no brace pair.

    The span is not guaranteed to be valid JSON; callers still parse it.
    """
    match = _JSON_OBJECT_SPAN_RE.search(text)
    return match.group(0) if match else None


def truncate_at_sentence_boundary(text: str, max_chars: int) -> str:
    """
    Truncate text at the nearest sentence boundary before max_chars.

    Handles both ASCII (. ! ? followed by whitespace) and CJK (。！？)
    sentence endings.

    Args:
        text: Text to truncate
        max_chars: Maximum character count

    Returns:
        Truncated text ending at a sentence boundary, or hard-truncated if
        no sentence boundary found within the limit.

    Examples:
        >>> truncate_at_sentence_boundary("Hello. World. Test.", 15)
        'Hello. World.'
        >>> truncate_at_sentence_boundary("你好。世界。测试。", 7)
        '你好。世界。'
    """
    if len(text) <= max_chars:
        return text

    truncated_segment = text[:max_chars]
    matches = list(_SENTENCE_END_RE.finditer(truncated_segment))

    if matches:
        cutoff = matches[-1].end()
        if truncated_segment[cutoff - 1:cutoff].isspace():
            cutoff -= 1
        return text[:cutoff]

    # Avoid cutting a word in half when a late enough space exists
    last_space = truncated_segment.rfind(" ")
    if last_space > max_chars * 0.8:
        return text[:last_space]

    return text[:max_chars]
