"""
Tests for the typed markup tree.
"""

import pytest

from reqmate.core.markup import (
    MarkupNode,
    StorageFormatTreeBuilder,
    clean_html_fragment,
    local_name,
    normalize_attribute_value,
    parse_markup,
)


class TestNames:
    """Tests for namespace-insensitive name helpers."""

    @pytest.mark.parametrize("name, expected", [
        ("ac:structured-macro", "structured-macro"),
        ("AC:Name", "name"),
        ("param", "param"),
    ])
    def test_local_name(self, name: str, expected: str):
        assert local_name(name) == expected

    def test_normalize_attribute_value_strips_escaped_quotes(self):
        assert normalize_attribute_value('\\"requirement\\"') == "requirement"
        assert normalize_attribute_value(" key ") == "key"


class TestParseMarkup:
    """Tests for lenient parsing."""

    def test_namespaced_macro_is_navigable(self):
        root = parse_markup(
            '<ac:structured-macro ac:name="requirement">'
            '<ac:parameter ac:name="key">BR-404</ac:parameter>'
            '</ac:structured-macro>'
        )

        macro = root.children[0]
        assert macro.name == "ac:structured-macro"
        assert macro.local_name == "structured-macro"
        assert macro.get_attribute("name") == "requirement"
        assert macro.children[0].get_attribute("ac:name") == "key"
        assert macro.text_content() == "BR-404"

    def test_param_element_keeps_its_text(self):
        root = parse_markup('<macro name="requirement"><param name="key">BR-404</param></macro>')

        param = root.find_first(lambda n: n.local_name == "param")
        assert param is not None
        assert param.text_content() == "BR-404"
        assert param.self_closing is False
        assert param.parent.local_name == "macro"

    def test_builder_keeps_other_void_elements(self):
        builder = StorageFormatTreeBuilder(multi_valued_attributes=None)

        assert builder.can_be_empty_element("param") is False
        assert builder.can_be_empty_element("br") is True
        assert builder.can_be_empty_element("img") is True

    def test_unbalanced_markup_does_not_raise(self):
        root = parse_markup("<div><p>open paragraph<span>never closed</div></b><td>")

        assert "open paragraph" in root.text_content()
        assert "never closed" in root.text_content()

    def test_entities_are_decoded_in_text(self):
        root = parse_markup("<p>Fish &amp; Chips &lt;3</p>")
        assert root.text_content() == "Fish & Chips <3"

    def test_empty_input_gives_empty_document(self):
        root = parse_markup("")
        assert root.children == []

    def test_parent_links(self):
        root = parse_markup("<div><span>a</span></div>")
        span = root.find_first(lambda n: n.name == "span")
        assert span.parent.name == "div"
        assert span.parent.parent is root


class TestQueries:
    """Tests for descendant queries."""

    def test_find_all_in_document_order(self):
        root = parse_markup("<ul><li>1</li><li>2<ul><li>3</li></ul></li></ul>")

        items = root.find_all(lambda n: n.name == "li")
        assert [item.children[0].text for item in items] == ["1", "2", "3"]

    def test_prune_skips_subtrees(self):
        root = parse_markup("<div><section><b>inner</b></section><b>outer</b></div>")

        found = root.find_first(lambda n: n.name == "b", prune=lambda n: n.name == "section")
        assert found.text_content() == "outer"

    def test_insert_after(self):
        root = parse_markup("<p><b>one</b><i>three</i></p>")
        paragraph = root.children[0]
        bold = paragraph.children[0]

        paragraph.insert_after(bold, MarkupNode.text_node("two"))

        assert [child.name for child in paragraph.children] == ["b", "#text", "i"]
        assert paragraph.children[1].parent is paragraph

    def test_insert_after_unknown_reference_raises(self):
        root = parse_markup("<p>text</p>")
        with pytest.raises(ValueError):
            root.insert_after(MarkupNode.text_node("orphan"), MarkupNode.text_node("x"))


class TestSerialize:
    """Tests for rendering the tree back to markup."""

    def test_round_trips_simple_markup(self):
        markup = '<p class="intro">Hello <b>world</b></p>'
        assert parse_markup(markup).to_markup() == markup

    def test_text_is_escaped(self):
        root = MarkupNode.element("p", children=[MarkupNode.text_node("a < b & c")])
        assert root.to_markup() == "<p>a &lt; b &amp; c</p>"

    def test_void_elements_are_self_closed(self):
        assert parse_markup("line<br>next").to_markup() == "line<br/>next"

    def test_comments_survive(self):
        markup = "<p>kept</p><!-- note -->"
        assert parse_markup(markup).to_markup() == markup


class TestCleanHtmlFragment:
    """Tests for excerpt cleaning."""

    def test_strips_tags_and_collapses_whitespace(self):
        assert clean_html_fragment("<p>Expert <b>support</b>\n\n agent</p>") == "Expert support agent"

    def test_plain_text_is_only_collapsed(self):
        assert clean_html_fragment("  must   be\tnon-empty ") == "must be non-empty"

    def test_empty(self):
        assert clean_html_fragment("") == ""
