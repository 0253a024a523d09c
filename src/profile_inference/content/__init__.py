"""Formatting of scraped user content into the LLM user message."""

from profile_inference.content.formatter import format_item, format_user_content, strip_html

__all__ = ["format_user_content", "format_item", "strip_html"]
