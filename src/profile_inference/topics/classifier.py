"""
Topic classification into macro categories.

`classify` is a cheap keyword matcher: the text is lower-cased and tested
against ordered keyword sets, first hit wins. Entertainment is tested first
so that narrow terms like game or anime titles are not swallowed by the
broader culture/society sets. `classify_with_llm` asks the LLM to pick a
category id and degrades to GENERAL on any failure.
"""

import re
from typing import TYPE_CHECKING, Any, Optional, Union

import structlog

from profile_inference.models.enums import Locale, MacroCategory

if TYPE_CHECKING:
    from profile_inference.llm.base_client import BaseLLMClient
    from profile_inference.llm.prompt_builder import PromptBuilder

logger = structlog.get_logger(__name__)


# Matching order is significant
CATEGORY_KEYWORDS: tuple[tuple[MacroCategory, tuple[str, ...]], ...] = (
    (MacroCategory.ENTERTAINMENT, (
        "娱乐", "游戏", "二次元", "动漫", "acgn", "明星", "体育", "足球", "篮球", "电影",
        "音乐", "亚文化", "小众", "邪典", "entertainment", "game", "movie", "music", "sport", "anime",
        "原神", "王者荣耀", "英雄联盟", "lol", "dota", "steam", "switch", "ps5", "xbox", "任天堂",
        "nba", "cba", "世界杯", "奥运会", "梅西", "c罗", "詹姆斯", "科比", "演唱会", "综艺",
    )),
    (MacroCategory.POLITICS, (
        "政治", "意识形态", "左翼", "右翼", "自由主义", "威权", "政府", "国家", "外交", "战争",
        "军事", "地缘", "民族", "爱国", "改革", "保守", "建制", "民粹", "politics", "ideology",
        "government", "war", "美国", "中国", "俄罗斯", "乌克兰", "以色列", "巴勒斯坦", "台湾",
        "日本", "韩国", "朝鲜", "印度", "欧洲", "欧盟", "拜登", "特朗普", "普京", "泽连斯基",
        "联合国", "北约", "制裁", "贸易战", "脱钩", "一带一路", "巡洋舰", "航母", "战斗机",
        "导弹", "核武器", "军队", "解放军", "美军",
    )),
    (MacroCategory.ECONOMY, (
        "经济", "金融", "市场", "计划", "公有制", "私有制", "国企", "民企", "投资", "股票",
        "基金", "币圈", "宏观", "汇率", "搞钱", "副业", "实体经济", "虚拟经济", "economy",
        "finance", "market", "money", "gdp", "cpi", "通胀", "通缩", "降息", "加息", "美联储",
        "央行", "财政", "税收", "债务", "房地产", "房价", "股市", "a股", "美股", "港股",
        "比特币", "以太坊", "区块链", "web3", "消费", "降级", "升级",
    )),
    (MacroCategory.SOCIETY, (
        "社会", "集体", "个人", "阶级", "资本", "躺平", "内卷", "奋斗", "女权", "性别",
        "家庭观", "父权", "城市", "乡土", "地域", "代际", "后浪", "00后", "society", "class",
        "gender", "feminism", "人口", "生育", "老龄化", "少子化", "退休", "养老", "医保",
        "社保", "教育", "高考", "考研", "留学", "歧视", "公平", "正义", "道德", "伦理",
        "法律", "案件", "犯罪", "治安",
    )),
    (MacroCategory.TECHNOLOGY, (
        "科技", "技术", "开源", "闭源", "ai", "人工智能", "加速主义", "安卓", "苹果", "windows",
        "数码", "评测", "芯片", "软件", "硬件", "去中心化", "technology", "tech", "code",
        "software", "chatgpt", "gpt", "llm", "大模型", "华为", "小米", "荣耀", "oppo", "vivo",
        "三星", "索尼", "显卡", "cpu", "gpu", "英伟达", "英特尔", "amd", "特斯拉", "马斯克",
        "spacex", "火箭", "航天",
    )),
    (MacroCategory.CULTURE, (
        "文化", "传统", "国学", "西化", "普世价值", "审美", "哲学", "艺术", "宗教", "信仰",
        "无神论", "玄学", "神秘学", "星座", "culture", "tradition", "art", "philosophy",
        "religion", "历史", "文学", "小说", "诗歌", "绘画", "书法", "戏剧", "博物馆", "文物",
    )),
    (MacroCategory.ENVIRONMENT, (
        "环境", "环保", "气候", "变暖", "碳排放", "污染", "生态", "绿色", "environment",
        "climate", "pollution", "green", "新能源", "电动车", "电池", "光伏", "风能", "核能",
        "垃圾分类", "保护动物", "生物多样性",
    )),
    (MacroCategory.LIFESTYLE_CAREER, (
        "生活", "极简", "奢华", "精致", "健康", "养生", "熬夜", "婚恋", "单身", "丁克",
        "二胎", "宠物", "猫", "狗", "职场", "工作", "体制内", "考公", "编制", "自由职业",
        "打工", "摸鱼", "老板", "创业", "lifestyle", "life", "health", "marriage", "pet",
        "career", "job", "work", "面试", "简历", "跳槽", "裁员", "失业", "996", "007",
        "加班", "调休", "年假", "工资", "薪资", "买房", "租房", "装修", "家居", "美食",
        "做饭", "外卖", "旅游", "旅行", "签证",
    )),
)

_CATEGORY_DISPLAY: dict[MacroCategory, tuple[str, str]] = {
    MacroCategory.POLITICS: ("🏛️ Politics", "🏛️ 政治 (Politics)"),
    MacroCategory.ECONOMY: ("💰 Economy", "💰 经济 (Economy)"),
    MacroCategory.SOCIETY: ("👥 Society", "👥 社会 (Society)"),
    MacroCategory.TECHNOLOGY: ("💻 Technology", "💻 科技 (Technology)"),
    MacroCategory.CULTURE: ("🎨 Culture", "🎨 文化 (Culture)"),
    MacroCategory.ENVIRONMENT: ("🌍 Environment", "🌍 环境 (Environment)"),
    MacroCategory.ENTERTAINMENT: ("🎮 Entertainment", "🎮 娱乐 (Entertainment)"),
    MacroCategory.LIFESTYLE_CAREER: ("💼 Lifestyle & Career", "💼 生活与职场 (Lifestyle & Career)"),
    MacroCategory.GENERAL: ("🌐 General", "🌐 通用综合"),
}

_ANSWER_STRIP_CHARS = " \t\r\n\"'`.,;:!?。，；：！？「」“”‘’*"
_ANSWER_TOKEN_RE = re.compile(r"[a-z_]+")


def classify(text: Any) -> MacroCategory:
    """
    Keyword-classify text into a macro category.

    Args:
        text: Arbitrary input; None, non-strings and empty strings yield GENERAL

    Returns:
        First category whose keyword set has a substring hit, else GENERAL
    """
    if not isinstance(text, str) or not text:
        return MacroCategory.GENERAL

    lowered = text.lower()
    for category, keywords in CATEGORY_KEYWORDS:
        if any(keyword in lowered for keyword in keywords):
            return category
    return MacroCategory.GENERAL


def parse_category_answer(answer: str) -> Optional[MacroCategory]:
    """
    Map an LLM answer onto a specific category id.

    The answer is trimmed, lower-cased and stripped of quotes and
    punctuation. Anything outside the fixed id set yields None.
    """
    cleaned = answer.strip().lower().strip(_ANSWER_STRIP_CHARS)
    valid = {c.value: c for c in MacroCategory.specific()}
    if cleaned in valid:
        return valid[cleaned]

    # Tolerate a single id wrapped in extra words ("Category: economy")
    tokens = [t for t in _ANSWER_TOKEN_RE.findall(cleaned) if t in valid]
    if len(set(tokens)) == 1:
        return valid[tokens[0]]
    return None


async def classify_with_llm(
    text: str,
    llm_client: "BaseLLMClient",
    prompt_builder: "PromptBuilder",
) -> MacroCategory:
    """
    Ask the LLM to pick a macro category.

    Never raises: transport errors and out-of-set answers degrade to GENERAL.

    Args:
        text: Text to classify
        llm_client: Transport used for the single classification call
        prompt_builder: Renders the classification prompt

    Returns:
        Chosen category, or GENERAL
    """
    if not isinstance(text, str) or not text.strip():
        return MacroCategory.GENERAL

    try:
        answer = await llm_client.invoke(
            prompt_builder.build_topic_prompt(),
            text,
            json_mode=False,
        )
    except Exception as e:
        logger.warning(
            "llm_topic_classification_failed",
            error_type=type(e).__name__,
            error=str(e),
        )
        return MacroCategory.GENERAL

    category = parse_category_answer(answer)
    if category is None:
        logger.info("llm_topic_answer_out_of_set", answer=answer[:100])
        return MacroCategory.GENERAL

    logger.debug("llm_topic_classified", category=category.value)
    return category


def category_name(category: Union[MacroCategory, str], locale: Union[Locale, str, None] = None) -> str:
    """Display name of a category for prompts and UIs."""
    try:
        category = MacroCategory(category)
    except ValueError:
        return "Unknown category" if Locale.coerce(locale) is Locale.EN_US else "未知分类"
    names = _CATEGORY_DISPLAY[category]
    return names[1] if Locale.coerce(locale) is Locale.ZH_CN else names[0]
