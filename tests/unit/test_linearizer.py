"""
Tests for TextLinearizer.
"""

import re

import pytest

from reqmate.core.enricher import RequirementEnricher
from reqmate.core.index_parser import RequirementIndexParser
from reqmate.core.linearizer import TextLinearizer, normalize_whitespace
from reqmate.models.document import RawDocument
from reqmate.models.requirement import RequirementIndex, RequirementRecord


@pytest.fixture
def linearizer() -> TextLinearizer:
    return TextLinearizer()


@pytest.fixture
def enriched_text(linearizer, storage_page, requirements_payload) -> str:
    index = RequirementIndexParser().parse(requirements_payload)
    enriched = RequirementEnricher().enrich(RawDocument(markup=storage_page), index)
    return linearizer.linearize(enriched.markup)


class TestLinearize:
    """Tests for markup to text conversion."""

    def test_paragraphs_and_headings(self, linearizer):
        text = linearizer.linearize("<h1>Title</h1><p>One</p><p>Two</p>")
        assert text == "Title\n\nOne\n\nTwo"

    def test_line_breaks(self, linearizer):
        assert linearizer.linearize("<p>first<br>second</p>") == "first\nsecond"

    def test_inline_elements_do_not_split_words(self, linearizer):
        assert linearizer.linearize("<p>re<b>quire</b><span>ment</span></p>") == "requirement"

    def test_unknown_tags_separate_words(self, linearizer):
        assert linearizer.linearize("<ac:link>page</ac:link>link") == "page link"

    def test_table_cells(self, linearizer):
        markup = "<table><tr><th>Rule</th><th>Ref</th></tr><tr><td>A</td><td>B</td></tr></table>"
        assert linearizer.linearize(markup) == "Rule | Ref |\nA | B |"

    def test_script_and_style_are_dropped(self, linearizer):
        markup = "<p>visible</p><script>var x = 1;</script><style>p { color: red; }</style>"
        assert linearizer.linearize(markup) == "visible"

    def test_entities_are_decoded(self, linearizer):
        assert linearizer.linearize("<p>Fish &amp; Chips&nbsp;today</p>") == "Fish & Chips today"

    def test_entity_encoded_tags_are_stripped(self, linearizer):
        markup = "<p>Use &lt;b&gt;bold&lt;/b&gt; and &lt;script&gt;x()&lt;/script&gt; here</p>"

        text = linearizer.linearize(markup)

        assert text == "Use bold and here"
        assert linearizer.linearize(text) == text

    def test_double_encoded_entities(self, linearizer):
        text = linearizer.linearize("<p>AT&amp;amp;T &amp;lt;br&amp;gt; rules</p>")

        assert "<" not in text and ">" not in text
        assert linearizer.linearize(text) == text

    def test_whitespace_is_normalized(self, linearizer):
        markup = "<p>a \t  b</p>\n\n\n\n<div>  c  </div>"
        assert linearizer.linearize(markup) == "a b\n\nc"

    @pytest.mark.parametrize("markup", ["", "   ", "\n\t"])
    def test_empty_markup(self, linearizer, markup):
        assert linearizer.linearize(markup) == ""

    def test_plain_text_is_stable(self, linearizer):
        assert linearizer.linearize("already plain") == "already plain"


class TestEnrichedPage:
    """Tests for text produced from an enriched page."""

    def test_definitions_follow_keys(self, enriched_text):
        assert "ACT-006\nBJS\n(Actors: @ActorNameEn: Support Expert)" in enriched_text
        assert "CASE-EXP-STS-001 (Case Statuses: Request must be open)" in enriched_text

    def test_unresolved_key_has_no_definition(self, enriched_text):
        assert "MSG-999" in enriched_text
        assert "MSG-999 (" not in enriched_text

    def test_script_is_dropped(self, enriched_text):
        assert "tracking" not in enriched_text

    def test_output_is_normalized(self, enriched_text):
        assert "\n\n\n" not in enriched_text
        assert "\t" not in enriched_text
        assert "  " not in enriched_text
        assert enriched_text == enriched_text.strip()
        assert not re.search(r" \n|\n ", enriched_text)

    def test_linearize_is_idempotent(self, linearizer, enriched_text):
        assert linearizer.linearize(enriched_text) == enriched_text

    def test_single_marker_page(self, linearizer):
        markup = '<macro name="requirement"><param name="key">BR-404</param></macro>'
        index = RequirementIndex([
            RequirementRecord(key="BR-404", origin_title="Field Rules", excerpt="must be non-empty"),
        ])
        enriched = RequirementEnricher().enrich(RawDocument(markup=markup), index)

        assert linearizer.linearize(enriched.markup) == "BR-404 (Field Rules: must be non-empty)"


class TestNormalizeWhitespace:
    """Tests for the whitespace rules."""

    def test_carriage_returns(self):
        assert normalize_whitespace("a\r\nb\rc") == "a\nb\nc"

    def test_newline_runs_capped_at_two(self):
        assert normalize_whitespace("a\n\n\n\n\nb") == "a\n\nb"

    def test_horizontal_runs(self):
        assert normalize_whitespace("  a \t  b  ") == "a b"
