"""
Curated few-shot example bank.

Examples are static and shared read-only. Label ids are canonical catalog ids.
"""

from dataclasses import dataclass
from typing import Optional

from profile_inference.models.enums import MacroCategory
from profile_inference.models.profile_models import Evidence, ValueOrientation


@dataclass(frozen=True)
class Example:
    """A worked analysis used as a few-shot demonstration."""

    id: str
    content: str
    category: MacroCategory
    value_orientations: tuple[ValueOrientation, ...]
    summary: str
    reasoning: Optional[str] = None
    evidence: Optional[tuple[Evidence, ...]] = None


def _vo(*pairs: tuple[str, float]) -> tuple[ValueOrientation, ...]:
    return tuple(ValueOrientation(label=label, score=score) for label, score in pairs)


EXAMPLE_BANK: tuple[Example, ...] = (
    # politics
    Example(
        id="politics-liberal",
        content="政府应该减少对市场的干预，让企业和个人有更多的自由来创造财富。过多的管制只会阻碍经济发展。",
        category=MacroCategory.POLITICS,
        value_orientations=_vo(
            ("market_vs_gov", 0.8),
            ("authority", -0.7),
            ("individualism_vs_collectivism", 0.6),
        ),
        summary="该用户倾向于自由市场经济理念，强调个人自由和市场效率，对政府管制持谨慎态度。",
        reasoning="从文本中可以看出用户强调减少政府干预、增加个人自由，这体现了典型的自由主义经济观点。",
        evidence=(
            Evidence(
                quote="过多的管制只会阻碍经济发展",
                analysis="将政府管制视为经济发展的障碍，倾向市场主导",
                source_title="关于营商环境的讨论",
            ),
        ),
    ),
    Example(
        id="politics-conservative",
        content="我们需要维护传统的家庭价值观，社会稳定比个人自由更重要。过度的个人主义会破坏社会凝聚力。",
        category=MacroCategory.POLITICS,
        value_orientations=_vo(
            ("change", -0.8),
            ("authority", 0.6),
            ("individualism_vs_collectivism", -0.7),
        ),
        summary="该用户重视传统价值观和社会稳定，认为集体利益高于个人自由，体现了保守主义倾向。",
        reasoning="文本强调传统价值观、社会稳定和集体利益，反映了保守主义的核心观点。",
    ),
    # economy
    Example(
        id="economy-market",
        content="自由市场是推动经济增长的最佳方式。竞争促使企业创新，消费者获得更好的产品和服务。",
        category=MacroCategory.ECONOMY,
        value_orientations=_vo(
            ("market_vs_gov", 0.9),
            ("competition_vs_equality", 0.8),
            ("innovation_vs_security", 0.7),
        ),
        summary="该用户相信自由市场机制，认为竞争是促进经济发展的关键因素。",
        reasoning="文本中反复提到自由市场、竞争和创新，这些都是自由市场经济理论的核心概念。",
    ),
    Example(
        id="economy-regulation",
        content="政府需要加强对金融市场的监管，以防止金融危机的发生。保护普通投资者的利益比市场自由更重要。",
        category=MacroCategory.ECONOMY,
        value_orientations=_vo(
            ("market_vs_gov", -0.8),
            ("competition_vs_equality", -0.7),
            ("real_vs_virtual", 0.5),
        ),
        summary="该用户支持政府监管，认为保护投资者和防范风险比市场自由更重要。",
        reasoning="文本关注风险防范、投资者保护和政府监管，体现了对市场失灵的担忧。",
    ),
    Example(
        id="economy-crypto-en",
        content="Bought the dip again. Index funds are for boomers, real gains come from getting into the next coin before everyone else does.",
        category=MacroCategory.ECONOMY,
        value_orientations=_vo(
            ("speculation_vs_value", 0.8),
            ("stable_vs_risk", -0.7),
            ("real_vs_virtual", -0.6),
        ),
        summary="The user chases short-term gains in digital assets and dismisses long-term, diversified investing as outdated.",
        reasoning="Mocking index funds and praising early entry into new coins signals a speculative, risk-seeking investment style.",
        evidence=(
            Evidence(
                quote="real gains come from getting into the next coin before everyone else does",
                analysis="Prefers speculation on virtual assets over steady value investing",
                source_title="Weekly market thread",
            ),
        ),
    ),
    # society
    Example(
        id="society-individual",
        content="每个人都应该有追求自己幸福的权利，社会不应强迫所有人遵循同样的生活方式。多元化是我们社会的财富。",
        category=MacroCategory.SOCIETY,
        value_orientations=_vo(
            ("individualism_vs_collectivism", 0.8),
            ("authority", -0.7),
            ("open_vs_closed", 0.9),
        ),
        summary="该用户强调个人权利和多元价值观，支持包容和开放的社会观念。",
        reasoning="文本突出个人权利、多元和包容，反映了自由主义的社会价值观。",
    ),
    Example(
        id="society-collective",
        content="社区和家庭是社会的基本单位，我们应该优先考虑集体福祉。个人行为应当符合社会整体利益。",
        category=MacroCategory.SOCIETY,
        value_orientations=_vo(
            ("individualism_vs_collectivism", -0.8),
            ("change", -0.7),
            ("conformity_vs_individuality", 0.6),
        ),
        summary="该用户重视集体利益和传统价值观，认为个人应服务于社区和家庭。",
        reasoning="文本强调社区、家庭和集体利益，体现了集体主义的社会观念。",
    ),
    # technology
    Example(
        id="tech-acceleration",
        content="我们必须加快技术创新的步伐，即使这意味着承担一些风险。技术进步是解决人类问题的关键。",
        category=MacroCategory.TECHNOLOGY,
        value_orientations=_vo(
            ("acceleration_vs_caution", 0.8),
            ("innovation_vs_security", 0.7),
            ("optimism_vs_conservatism", 0.6),
        ),
        summary="该用户支持技术加速发展，认为创新比规避风险更重要。",
        reasoning="文本强调加快步伐、接受风险和技术解决论，体现了加速主义观点。",
    ),
    Example(
        id="tech-caution",
        content="新技术应用前必须充分评估风险，安全比进步更重要。我们不能拿公众安全做实验。",
        category=MacroCategory.TECHNOLOGY,
        value_orientations=_vo(
            ("acceleration_vs_caution", -0.8),
            ("innovation_vs_security", -0.9),
            ("privacy_vs_convenience", 0.6),
        ),
        summary="该用户主张谨慎的技术发展路径，优先考虑安全和风险控制。",
        reasoning="文本突出安全优先、风险评估和防范意识，体现了谨慎主义观点。",
    ),
    Example(
        id="tech-open-source-en",
        content="Every serious tool I use is open source. Closed platforms lock you in and sell your data, self-hosting is worth the extra effort.",
        category=MacroCategory.TECHNOLOGY,
        value_orientations=_vo(
            ("open_vs_closed", 0.9),
            ("privacy_vs_convenience", 0.7),
            ("decentralization_vs_centralization", 0.6),
        ),
        summary="The user is a committed open-source advocate who accepts inconvenience to keep control over data and infrastructure.",
        reasoning="Rejecting closed platforms and favouring self-hosting shows a preference for open, privacy-preserving and decentralized tooling.",
    ),
    # entertainment
    Example(
        id="entertainment-open",
        content="不同的文化背景产生了各种有趣的游戏和动漫作品，我们应该开放心态去接纳各种类型的作品，而不是固守单一的文化形态。",
        category=MacroCategory.ENTERTAINMENT,
        value_orientations=_vo(
            ("open_vs_closed", 0.8),
            ("change", 0.6),
            ("local_vs_global", -0.5),
        ),
        summary="该用户支持文化多样性，主张开放心态接纳不同类型的娱乐内容。",
        reasoning="文本强调接纳多样性、开放心态和跨文化交流，体现了开放的文化观念。",
    ),
    Example(
        id="entertainment-traditional",
        content="我们应当珍视传统文化作品的价值，新的娱乐形式虽然吸引人，但往往缺乏深度和内涵。",
        category=MacroCategory.ENTERTAINMENT,
        value_orientations=_vo(
            ("change", -0.8),
            ("serious_vs_popular", 0.6),
            ("spiritual_vs_material", 0.5),
        ),
        summary="该用户重视传统文化价值，对新兴娱乐形式持保留态度。",
        reasoning="文本强调传统价值、深度内涵和对新形式的质疑，体现了保守的文化观。",
    ),
    # lifestyle & career
    Example(
        id="lifestyle-balance-en",
        content="Turned down the promotion. More money is not worth losing my evenings with my kids, I log off at six and I do not answer work messages on weekends.",
        category=MacroCategory.LIFESTYLE_CAREER,
        value_orientations=_vo(
            ("work_vs_life", -0.8),
            ("family_vs_single", 0.7),
        ),
        summary="The user puts family time and personal boundaries ahead of career advancement.",
        reasoning="Declining a promotion to protect evenings and weekends with family signals a life-first attitude to work.",
    ),
    # environment
    Example(
        id="environment-protection-en",
        content="No amount of GDP growth is worth poisoning the rivers. We need binding emissions cuts now, the climate data has been clear for decades.",
        category=MacroCategory.ENVIRONMENT,
        value_orientations=_vo(
            ("protection_vs_development", 0.9),
            ("climate_believer_vs_skeptic", 0.8),
        ),
        summary="The user prioritizes environmental protection over growth and treats climate science as settled.",
        reasoning="Explicitly ranking clean rivers above GDP and demanding emissions cuts indicates strong environmentalist and climate-concerned views.",
    ),
)
