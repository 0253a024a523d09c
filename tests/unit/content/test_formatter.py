"""
Unit tests for user content formatting.
"""

from profile_inference.content.formatter import (
    DEFAULT_EMPTY_CONTENT_MESSAGE,
    ITEM_CONTENT_LIMIT,
    OTHER_HEADER,
    RELEVANT_HEADER,
    format_item,
    format_user_content,
    strip_html,
)
from profile_inference.models.content_models import ContentItem, UserInfo
from profile_inference.models.enums import Platform


def _item(item_id: str, relevant: bool = False, **kwargs) -> ContentItem:
    return ContentItem(id=item_id, title=f"Title {item_id}", content=f"Body {item_id}", is_relevant=relevant, **kwargs)


class TestStripHtml:
    def test_removes_tags_and_nbsp(self):
        assert strip_html("<p>Hello&nbsp;<b>world</b></p>") == "Hello world"

    def test_unterminated_tag(self):
        assert strip_html("text <img src='x'") == "text "

    def test_empty(self):
        assert strip_html(None) == ""


class TestFormatItem:
    def test_zhihu_answer(self):
        item = ContentItem(id="42", title="Q", content="<p>A</p>", type="answer")
        assert format_item(item, Platform.ZHIHU) == "[ID:42] 【Original】【Answer】 Title: 【Q】\nContent: A"

    def test_upvoted_reddit_comment(self):
        item = ContentItem(id="7", title="T", excerpt="short", type="comment", action_type="voted")
        assert format_item(item, "reddit") == "[ID:7] 【Upvoted】【Comment】 Title: 【T】\nContent: short"

    def test_unknown_platform_has_no_type_tag(self):
        item = ContentItem(id="1", title="T", content="c", type="answer")
        assert format_item(item, Platform.TWITTER).startswith("[ID:1] 【Original】 Title:")

    def test_content_truncated(self):
        item = ContentItem(id="1", title="T", content="x" * (ITEM_CONTENT_LIMIT + 50))
        assert format_item(item, "zhihu").endswith("x" * ITEM_CONTENT_LIMIT)
        assert len(format_item(item, "zhihu").split("Content: ")[1]) == ITEM_CONTENT_LIMIT


class TestFormatUserContent:
    def test_header_with_user(self):
        text = format_user_content(Platform.REDDIT, [_item("1")], UserInfo(name="amy", headline="dev"))
        assert text.startswith("Platform: reddit\nUser Nickname: amy\nUser Headline: dev\n\n")

    def test_empty_items_message(self):
        assert format_user_content("zhihu", []).endswith("This user has no public answers or articles.")
        assert format_user_content("weibo", None).endswith(DEFAULT_EMPTY_CONTENT_MESSAGE)

    def test_relevant_items_first(self):
        text = format_user_content("zhihu", [_item("other"), _item("rel", relevant=True)])
        assert text.index(RELEVANT_HEADER) < text.index("[ID:rel]") < text.index(OTHER_HEADER) < text.index("[ID:other]")

    def test_other_items_capped_when_many_relevant(self):
        items = [_item(f"r{i}", relevant=True) for i in range(3)] + [_item(f"o{i}") for i in range(5)]
        text = format_user_content("zhihu", items)
        assert "[ID:o2]" in text
        assert "[ID:o3]" not in text

    def test_other_items_not_capped_below_threshold(self):
        items = [_item("r0", relevant=True)] + [_item(f"o{i}") for i in range(5)]
        assert "[ID:o4]" in format_user_content("zhihu", items)
