"""
User content formatting.

Turns scraped platform items into the plain-text user message sent to the
LLM. Items flagged relevant to the current page come first under a "key
analysis" header; the rest follow as personality context. With three or
more relevant items the remaining items are capped at three so they do not
drown out the topic.
"""

import re
from typing import Iterable, Optional, Union

import structlog

from profile_inference.models.content_models import ContentItem, UserInfo
from profile_inference.models.enums import Platform

logger = structlog.get_logger(__name__)

ITEM_CONTENT_LIMIT = 1000
RELEVANT_THRESHOLD = 3
MAX_OTHER_ITEMS_WHEN_RELEVANT = 3

RELEVANT_HEADER = "--- RELEVANT CONTENT (★ Key Analysis) ---\n"
OTHER_HEADER = "--- OTHER RECENT CONTENT (For Personality Reference Only) ---\n"

EMPTY_CONTENT_MESSAGES: dict[str, str] = {
    Platform.ZHIHU.value: "This user has no public answers or articles.",
    Platform.REDDIT.value: "This user has no public posts or comments.",
}
DEFAULT_EMPTY_CONTENT_MESSAGE = "This user has no public content."

_HTML_TAG_RE = re.compile(r"<[^>]*>?")


def strip_html(html: Optional[str]) -> str:
    """Drop tags (including an unterminated trailing one) and decode &nbsp;."""
    if not html:
        return ""
    return _HTML_TAG_RE.sub("", html).replace("&nbsp;", " ")


def _platform_value(platform: Union[Platform, str]) -> str:
    return platform.value if isinstance(platform, Platform) else str(platform).lower()


def _type_tag(platform: str, item_type: str) -> str:
    if platform == Platform.ZHIHU.value:
        if item_type == "answer":
            return "【Answer】"
        if item_type == "article":
            return "【Article】"
        return "【Activity】"
    if platform == Platform.REDDIT.value:
        return "【Post】" if item_type == "article" else "【Comment】"
    return ""


def format_item(item: ContentItem, platform: Union[Platform, str]) -> str:
    """`[ID:..] {action}{type} Title: 【..】` line followed by the cleaned content."""
    content = strip_html(item.content) if item.content else (item.excerpt or "")
    content = content[:ITEM_CONTENT_LIMIT]
    action_tag = "【Upvoted】" if item.action_type == "voted" else "【Original】"
    type_tag = _type_tag(_platform_value(platform), item.type)
    return f"[ID:{item.id}] {action_tag}{type_tag} Title: 【{item.title}】\nContent: {content}"


def format_user_content(
    platform: Union[Platform, str],
    items: Optional[Iterable[ContentItem]],
    user: Optional[UserInfo] = None,
) -> str:
    """
    Build the LLM user message for one user.

    Args:
        platform: Source platform
        items: Collected content items (may be empty)
        user: Public identity, when known

    Returns:
        Formatted text
    """
    platform_value = _platform_value(platform)
    text = f"Platform: {platform_value}\n"
    if user is not None:
        text += f"User Nickname: {user.name}\nUser Headline: {user.headline}\n\n"

    items = list(items or [])
    if not items:
        return text + EMPTY_CONTENT_MESSAGES.get(platform_value, DEFAULT_EMPTY_CONTENT_MESSAGE)

    relevant = [item for item in items if item.is_relevant]
    others = [item for item in items if not item.is_relevant]
    if len(relevant) >= RELEVANT_THRESHOLD:
        others = others[:MAX_OTHER_ITEMS_WHEN_RELEVANT]
        logger.debug("other_content_trimmed", relevant=len(relevant), kept_other=len(others))

    content_text = ""
    if relevant:
        content_text += RELEVANT_HEADER
        content_text += "\n\n".join(format_item(item, platform_value) for item in relevant)
        content_text += "\n\n"
    if others:
        content_text += OTHER_HEADER
        content_text += "\n\n".join(format_item(item, platform_value) for item in others)

    return text + content_text
