"""
Static catalog of bipolar value-orientation labels.

Each label is an axis with a left phrase and a right phrase. A positive score
leans towards the right phrase, a negative score towards the left phrase.
Labels are grouped into the eight macro categories; prompts include the
subset relevant to the request's category, trimmed by analysis mode.

Catalogs are built once per locale and shared read-only.
"""

from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Union

from profile_inference.labels.canonicalizer import CANONICAL_LABEL_IDS
from profile_inference.models.enums import AnalysisMode, Locale, MacroCategory


@dataclass(frozen=True)
class LabelDefinition:
    """
    One bipolar label in one locale.

    Attributes:
        id: Canonical label id (locale independent)
        left_phrase: Phrase for negative scores
        right_phrase: Phrase for positive scores
        category: Macro category the label belongs to
        weight: Prompt priority; higher weights survive mode trimming
        description: One-line explanation shown to the LLM
    """

    id: str
    left_phrase: str
    right_phrase: str
    category: MacroCategory
    weight: float
    description: str

    @property
    def name(self) -> str:
        """Display name in `left vs right` form."""
        return f"{self.left_phrase} vs {self.right_phrase}"

    def resulting_phrase(self, score: float) -> str:
        """Phrase selected by the score's sign."""
        return self.right_phrase if score > 0 else self.left_phrase

    def opposite_phrase(self, score: float) -> str:
        """Phrase on the other side of the axis from the score's sign."""
        return self.left_phrase if score > 0 else self.right_phrase

    def prompt_line(self) -> str:
        """Catalog line as it appears in the system prompt."""
        return f"- 【{self.id}】: {self.name} ({self.description})"


@dataclass(frozen=True)
class LabelCategory:
    """A macro category with its labels, in catalog order."""

    id: MacroCategory
    name: str
    labels: tuple[LabelDefinition, ...]


# Label counts kept in the prompt per mode (None = every relevant label)
MODE_LABEL_LIMITS: dict[AnalysisMode, Optional[int]] = {
    AnalysisMode.FAST: 8,
    AnalysisMode.BALANCED: 14,
    AnalysisMode.DEEP: None,
}

# Categories whose labels are offered for a given request category
RELATED_CATEGORIES: dict[MacroCategory, tuple[MacroCategory, ...]] = {
    MacroCategory.POLITICS: (MacroCategory.POLITICS, MacroCategory.ECONOMY, MacroCategory.SOCIETY),
    MacroCategory.ECONOMY: (MacroCategory.ECONOMY, MacroCategory.POLITICS),
    MacroCategory.SOCIETY: (MacroCategory.SOCIETY, MacroCategory.CULTURE, MacroCategory.POLITICS),
    MacroCategory.TECHNOLOGY: (MacroCategory.TECHNOLOGY,),
    MacroCategory.CULTURE: (MacroCategory.CULTURE, MacroCategory.SOCIETY),
    MacroCategory.ENVIRONMENT: (MacroCategory.ENVIRONMENT,),
    MacroCategory.ENTERTAINMENT: (MacroCategory.ENTERTAINMENT, MacroCategory.CULTURE),
    MacroCategory.LIFESTYLE_CAREER: (MacroCategory.LIFESTYLE_CAREER,),
}

_CATEGORY_NAMES: dict[MacroCategory, tuple[str, str]] = {
    MacroCategory.POLITICS: ("Politics", "政治"),
    MacroCategory.ECONOMY: ("Economy", "经济"),
    MacroCategory.SOCIETY: ("Society", "社会"),
    MacroCategory.TECHNOLOGY: ("Technology", "科技"),
    MacroCategory.CULTURE: ("Culture", "文化"),
    MacroCategory.ENVIRONMENT: ("Environment", "环境"),
    MacroCategory.ENTERTAINMENT: ("Entertainment", "娱乐"),
    MacroCategory.LIFESTYLE_CAREER: ("Lifestyle & Career", "生活与职场"),
}

# (id, category, weight,
#  en_left, en_right, en_description,
#  zh_left, zh_right, zh_description)
_LABEL_TABLE: tuple[tuple, ...] = (
    # politics
    ("ideology", MacroCategory.POLITICS, 1.0,
     "Left-wing", "Right-wing", "Overall left/right political stance",
     "左派", "右派", "经济与社会政策的左右倾向"),
    ("authority", MacroCategory.POLITICS, 0.95,
     "Libertarian", "Authoritarian", "Individual liberty versus state power and order",
     "自由意志", "威权主义", "个人自由与国家权力的倾向"),
    ("change", MacroCategory.POLITICS, 0.9,
     "Tradition", "Progress", "Preference for preserving or reforming social norms",
     "传统", "进步", "维护传统还是推动变革"),
    ("geopolitics", MacroCategory.POLITICS, 0.8,
     "Nationalism", "Globalism", "National identity versus international integration",
     "民族主义", "全球主义", "国家认同与国际一体化的倾向"),
    ("radicalism", MacroCategory.POLITICS, 0.75,
     "Moderate", "Radical", "How far-reaching the advocated changes are",
     "温和派", "激进派", "政治主张的激进程度"),
    ("establishment", MacroCategory.POLITICS, 0.7,
     "Populist", "Establishment", "Trust in institutions versus anti-elite sentiment",
     "民粹派", "建制派", "对既有体制的信任程度"),
    # economy
    ("market_vs_gov", MacroCategory.ECONOMY, 0.95,
     "Government intervention", "Free market", "Role of markets versus the state in the economy",
     "政府干预", "市场主导", "经济中市场与政府的角色"),
    ("competition_vs_equality", MacroCategory.ECONOMY, 0.9,
     "Equal distribution", "Free competition", "Attitude towards wealth distribution",
     "平等分配", "自由竞争", "财富分配的倾向"),
    ("capital_labor", MacroCategory.ECONOMY, 0.85,
     "Pro-labor", "Pro-capital", "Sympathy for workers versus owners",
     "劳工立场", "资本立场", "站在劳动者还是资本一方"),
    ("speculation_vs_value", MacroCategory.ECONOMY, 0.7,
     "Value investing", "Speculation", "Investment style and attitude to risk assets",
     "价值投资", "投机", "投资风格与对风险资产的态度"),
    ("real_vs_virtual", MacroCategory.ECONOMY, 0.65,
     "Virtual economy", "Real economy", "Manufacturing and goods versus finance and digital assets",
     "虚拟经济", "实体经济", "实体产业与金融、数字资产的偏好"),
    ("micro_vs_macro", MacroCategory.ECONOMY, 0.6,
     "Macro perspective", "Micro perspective", "Personal finance focus versus big-picture economics",
     "宏观视角", "微观视角", "关注个人生计还是宏观经济"),
    # society
    ("individualism_vs_collectivism", MacroCategory.SOCIETY, 1.0,
     "Collectivism", "Individualism", "Priority of individual versus collective interests",
     "集体主义", "个人主义", "个人与集体利益的优先级"),
    ("feminism_vs_patriarchy", MacroCategory.SOCIETY, 0.85,
     "Traditional gender roles", "Feminism", "Views on gender equality",
     "传统性别观", "女权主义", "对性别平等的看法"),
    ("elite_vs_grassroots", MacroCategory.SOCIETY, 0.8,
     "Grassroots", "Elitism", "Identification with elites or ordinary people",
     "草根", "精英", "认同精英还是普通民众"),
    ("conformity_vs_individuality", MacroCategory.SOCIETY, 0.7,
     "Individuality", "Conformity", "Following social expectations versus standing out",
     "个性表达", "从众", "顺应社会期待还是坚持自我"),
    ("generational_conflict", MacroCategory.SOCIETY, 0.65,
     "Elder generation", "Younger generation", "Which generation's values the author sides with",
     "长辈立场", "年轻一代立场", "在代际矛盾中站在哪一方"),
    ("urban_vs_rural", MacroCategory.SOCIETY, 0.6,
     "Rural", "Urban", "Urban versus rural lifestyle and identity",
     "乡土", "城市", "城市与乡村的生活方式与认同"),
    # technology
    ("innovation_vs_security", MacroCategory.TECHNOLOGY, 0.9,
     "Security first", "Innovation first", "Trade-off between innovation and safety",
     "安全优先", "创新优先", "创新与安全之间的取舍"),
    ("acceleration_vs_caution", MacroCategory.TECHNOLOGY, 0.85,
     "Caution", "Accelerationism", "Speed of technological adoption",
     "审慎", "加速主义", "技术推进的速度"),
    ("open_vs_closed", MacroCategory.TECHNOLOGY, 0.8,
     "Proprietary", "Open source", "Open versus closed technology ecosystems",
     "封闭专有", "开放开源", "开放与封闭的技术生态"),
    ("privacy_vs_convenience", MacroCategory.TECHNOLOGY, 0.8,
     "Convenience first", "Privacy first", "Willingness to trade personal data for convenience",
     "便利优先", "隐私优先", "是否愿意用个人数据换取便利"),
    ("optimism_vs_conservatism", MacroCategory.TECHNOLOGY, 0.75,
     "Tech skepticism", "Tech optimism", "Expectations about the impact of technology",
     "技术保守", "技术乐观", "对技术影响的预期"),
    ("decentralization_vs_centralization", MacroCategory.TECHNOLOGY, 0.7,
     "Centralized control", "Decentralized networks", "Preferred architecture of platforms and power",
     "集中管控", "去中心化", "平台与权力结构的偏好"),
    # culture
    ("local_vs_global", MacroCategory.CULTURE, 0.85,
     "Cosmopolitan culture", "Local culture", "Attachment to local versus global culture",
     "全球化", "本土化", "本土文化与全球文化的倾向"),
    ("spiritual_vs_material", MacroCategory.CULTURE, 0.8,
     "Materialism", "Spirituality", "Material versus spiritual pursuits",
     "物质主义", "精神追求", "物质与精神追求的取向"),
    ("secular_vs_religious", MacroCategory.CULTURE, 0.75,
     "Religious", "Secular", "Role of religion in life and society",
     "宗教信仰", "世俗主义", "宗教在生活与社会中的地位"),
    ("serious_vs_popular", MacroCategory.CULTURE, 0.7,
     "Pop culture", "High culture", "Taste for serious versus popular culture",
     "大众文化", "严肃文化", "对严肃文化与大众文化的偏好"),
    # environment
    ("protection_vs_development", MacroCategory.ENVIRONMENT, 1.0,
     "Economic development", "Environmental protection", "Environment versus growth trade-off",
     "发展优先", "环保优先", "环境保护与经济发展的取舍"),
    ("climate_believer_vs_skeptic", MacroCategory.ENVIRONMENT, 0.9,
     "Climate skepticism", "Climate concern", "Stance on climate change",
     "气候怀疑", "气候关切", "对气候变化的态度"),
    # entertainment
    ("hardcore_vs_casual", MacroCategory.ENTERTAINMENT, 0.9,
     "Casual", "Hardcore", "Depth of engagement with hobbies and games",
     "休闲玩家", "硬核玩家", "对爱好与游戏的投入程度"),
    ("niche_vs_mainstream", MacroCategory.ENTERTAINMENT, 0.85,
     "Mainstream", "Niche", "Taste for niche versus mainstream works",
     "主流", "小众", "偏好小众还是主流作品"),
    ("2d_vs_3d", MacroCategory.ENTERTAINMENT, 0.8,
     "Live-action", "Anime and ACG", "Anime/comics/games versus live-action entertainment",
     "三次元", "二次元", "二次元与真人娱乐的偏好"),
    # lifestyle & career
    ("work_vs_life", MacroCategory.LIFESTYLE_CAREER, 0.95,
     "Life first", "Career first", "Work-life balance priorities",
     "生活优先", "事业优先", "工作与生活的优先级"),
    ("stable_vs_risk", MacroCategory.LIFESTYLE_CAREER, 0.9,
     "Risk-taking", "Stability", "Career and life risk appetite",
     "冒险", "稳定", "职业与生活中的风险偏好"),
    ("discipline_vs_hedonism", MacroCategory.LIFESTYLE_CAREER, 0.85,
     "Hedonism", "Self-discipline", "Self-discipline versus enjoying the moment",
     "享乐", "自律", "自律还是及时行乐"),
    ("frugal_vs_luxury", MacroCategory.LIFESTYLE_CAREER, 0.8,
     "Luxury", "Frugality", "Spending habits",
     "精致消费", "节俭", "消费习惯"),
    ("family_vs_single", MacroCategory.LIFESTYLE_CAREER, 0.75,
     "Single life", "Family life", "Attitude to marriage and family",
     "单身", "家庭", "对婚姻与家庭的态度"),
    ("cat_vs_dog", MacroCategory.LIFESTYLE_CAREER, 0.5,
     "Dog person", "Cat person", "Pet preference",
     "狗派", "猫派", "宠物偏好"),
)


class LabelCatalog:
    """
    Read-only label catalog for one locale.

    Obtain instances through `get_label_catalog`; they are shared.
    """

    def __init__(self, locale: Locale, categories: tuple[LabelCategory, ...]):
        self.locale = locale
        self.categories = categories
        self._by_id: dict[str, LabelDefinition] = {
            label.id: label for category in categories for label in category.labels
        }
        self._by_category: dict[MacroCategory, LabelCategory] = {c.id: c for c in categories}

    def get(self, label_id: str) -> Optional[LabelDefinition]:
        """Look up a label by canonical id (None for opaque labels)."""
        return self._by_id.get(label_id)

    def __contains__(self, label_id: object) -> bool:
        return label_id in self._by_id

    def __len__(self) -> int:
        return len(self._by_id)

    def all_labels(self) -> list[LabelDefinition]:
        """Every label, in catalog order."""
        return [label for category in self.categories for label in category.labels]

    def category(self, category: MacroCategory) -> Optional[LabelCategory]:
        return self._by_category.get(category)

    def relevant_labels(self, category: MacroCategory) -> list[LabelDefinition]:
        """
        Labels relevant to a macro category.

        GENERAL yields the whole catalog; specific categories yield their own
        labels followed by those of related categories.
        """
        related = RELATED_CATEGORIES.get(category)
        if related is None:
            return self.all_labels()
        return [label for cat_id in related for label in self._by_category[cat_id].labels]

    def labels_for_context(self, category: MacroCategory, mode: AnalysisMode) -> list[LabelDefinition]:
        """
        Relevant labels trimmed by mode.

        Fast and balanced keep the highest-weight labels (catalog order on
        ties); deep keeps every relevant label.
        """
        labels = self.relevant_labels(category)
        limit = MODE_LABEL_LIMITS[mode]
        if limit is None or len(labels) <= limit:
            return labels
        # sorted() is stable, so equal weights keep catalog order
        return sorted(labels, key=lambda label: label.weight, reverse=True)[:limit]

    def format_for_prompt(self, category: MacroCategory, mode: AnalysisMode) -> str:
        """Catalog section body: one `- 【id】: left vs right (description)` line per label."""
        return "\n".join(label.prompt_line() for label in self.labels_for_context(category, mode))


def _build_catalog(locale: Locale) -> LabelCatalog:
    zh = locale is Locale.ZH_CN
    grouped: dict[MacroCategory, list[LabelDefinition]] = {c: [] for c in MacroCategory.specific()}

    for row in _LABEL_TABLE:
        label_id, category, weight, en_left, en_right, en_desc, zh_left, zh_right, zh_desc = row
        grouped[category].append(
            LabelDefinition(
                id=label_id,
                left_phrase=zh_left if zh else en_left,
                right_phrase=zh_right if zh else en_right,
                category=category,
                weight=weight,
                description=zh_desc if zh else en_desc,
            )
        )

    categories = tuple(
        LabelCategory(
            id=category,
            name=_CATEGORY_NAMES[category][1 if zh else 0],
            labels=tuple(labels),
        )
        for category, labels in grouped.items()
    )
    return LabelCatalog(locale, categories)


@lru_cache(maxsize=None)
def _cached_catalog(locale: Locale) -> LabelCatalog:
    catalog = _build_catalog(locale)
    missing = set(CANONICAL_LABEL_IDS) - {label.id for label in catalog.all_labels()}
    if missing:
        raise RuntimeError(f"Label catalog is missing canonical ids: {sorted(missing)}")
    return catalog


def get_label_catalog(locale: Union[str, Locale, None] = None) -> LabelCatalog:
    """
    Shared catalog for a locale.

    Args:
        locale: Locale or loose locale string; None and unknown values fall back to en-US

    Returns:
        Cached LabelCatalog instance
    """
    return _cached_catalog(Locale.coerce(locale))
