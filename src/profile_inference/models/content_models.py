"""
Input data models for user content.

These models carry what a platform scraper collected about one user: the
user's public identity and a list of content items, some flagged as relevant
to the page context being analyzed.
"""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class UserInfo(BaseModel):
    """Public identity of the analyzed user."""

    model_config = ConfigDict(extra="ignore")

    name: str = Field(..., description="Display name / nickname")
    headline: str = Field(default="", description="Bio or headline")


class ContentItem(BaseModel):
    """
    One piece of user content (answer, article, post, comment, upvote).

    `content` may contain HTML; `excerpt` is used when it is absent.
    """

    model_config = ConfigDict(extra="ignore")

    id: str = Field(..., description="Platform id of the item")
    title: str = Field(default="", description="Title of the item or of the thread it belongs to")
    content: Optional[str] = Field(default=None, description="Full text, possibly HTML")
    excerpt: Optional[str] = Field(default=None, description="Short plain-text excerpt")
    type: str = Field(default="", description="answer, article, comment, ... (platform specific)")
    action_type: Optional[str] = Field(default=None, description="'voted' for upvoted items, else authored")
    is_relevant: bool = Field(default=False, description="Item relates to the page context being analyzed")
