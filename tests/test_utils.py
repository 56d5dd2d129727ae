"""Tests for display helpers."""

from aom_store import NodeElement, TextElement
from aom_store.utils import (
    find_descendant_input,
    has_empty_role_mapping,
    is_root_landmark,
    trim_start,
    trim_string,
)


class TestTrimString:
    """Tests for trim_string."""

    def test_short_text_is_unchanged(self) -> None:
        assert trim_string("abc", 10) == "abc"

    def test_long_text_gets_ellipsis(self) -> None:
        assert trim_string("abcdefghij", 8) == "abcde..."

    def test_empty_text(self) -> None:
        assert trim_string(None, 10) == ""
        assert trim_string("", 10) == ""


class TestTrimStart:
    """Tests for trim_start."""

    def test_skips_blank_text(self) -> None:
        """Test that blank leading text is dropped and the next is trimmed."""
        blank = TextElement("a", "   ")
        first = TextElement("b", "  Hello")
        rest = NodeElement("c", "span")
        parent = NodeElement("p", "p", children=[blank, first, rest])

        trimmed = trim_start(parent.children)

        assert [node.key for node in trimmed] == ["b", "c"]
        assert trimmed[0].text == "Hello"
        assert trimmed[0] is not first
        assert trimmed[0].parent is parent
        assert first.text == "  Hello"
        assert trimmed[1] is rest

    def test_leading_container_stops_trimming(self) -> None:
        """Test that a leading container is kept as is."""
        span = NodeElement("s", "span")

        assert trim_start([span, TextElement("t", "  x")])[0] is span

    def test_all_blank(self) -> None:
        """Test that only blank text gives None."""
        assert trim_start([TextElement("a", " "), TextElement("b", "\n")]) is None


class TestTreeHelpers:
    """Tests for tree queries."""

    def test_find_descendant_input(self) -> None:
        """Test depth-first search for an input."""
        field = NodeElement("field", "input")
        label = NodeElement("label", "label", children=[
            TextElement("t", "Name"),
            NodeElement("wrap", "span", children=[field]),
        ])

        assert find_descendant_input([label]) is field
        assert find_descendant_input([TextElement("x", "no")]) is None

    def test_has_empty_role_mapping(self) -> None:
        """Test tags without a role mapping."""
        assert has_empty_role_mapping("DIV")
        assert not has_empty_role_mapping("button")

    def test_is_root_landmark(self) -> None:
        """Test page scoped and sectioned landmarks."""
        page_header = NodeElement("h1", "header")
        article_header = NodeElement("h2", "header")
        article = NodeElement("article", "article", children=[article_header])
        body = NodeElement("body", "body", children=[page_header, article])

        assert is_root_landmark(page_header)
        assert not is_root_landmark(article_header)
        assert body.children == [page_header, article]
