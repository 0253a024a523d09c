"""
Enumerations for profile inference data models.

All enums are closed sets - no values outside these sets are permitted.
"""

from enum import Enum


class AnalysisMode(str, Enum):
    """
    Analysis depth.

    Governs schema richness, few-shot count, label catalog size, retry
    feedback verbosity and summary length targets.
    """

    FAST = "fast"
    BALANCED = "balanced"
    DEEP = "deep"

    @property
    def is_rich(self) -> bool:
        """True for modes whose schema requires reasoning and evidence."""
        return self is not AnalysisMode.FAST


class MacroCategory(str, Enum):
    """
    Coarse topical buckets used to scope the label catalog.

    GENERAL is the fallback when nothing more specific matches.
    """

    POLITICS = "politics"
    ECONOMY = "economy"
    SOCIETY = "society"
    TECHNOLOGY = "technology"
    CULTURE = "culture"
    ENVIRONMENT = "environment"
    ENTERTAINMENT = "entertainment"
    LIFESTYLE_CAREER = "lifestyle_career"
    GENERAL = "general"

    @classmethod
    def specific(cls) -> list["MacroCategory"]:
        """All categories except GENERAL, in declaration order."""
        return [c for c in cls if c is not cls.GENERAL]


class Locale(str, Enum):
    """UI / output language."""

    EN_US = "en-US"
    ZH_CN = "zh-CN"

    @classmethod
    def coerce(cls, value: "str | Locale | None") -> "Locale":
        """Map a loose locale string onto a supported locale (English fallback)."""
        if isinstance(value, cls):
            return value
        if value and str(value).lower().startswith("zh"):
            return cls.ZH_CN
        return cls.EN_US


class Platform(str, Enum):
    """Social platform the user content was collected from."""

    ZHIHU = "zhihu"
    REDDIT = "reddit"
    TWITTER = "twitter"
    QUORA = "quora"
    WEIBO = "weibo"
