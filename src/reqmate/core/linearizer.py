"""
Markup to plain text conversion for language model prompts.

Entities are decoded by the parser, ``script``/``style`` subtrees are dropped,
block boundaries become newlines and table cells are joined with `` | ``.
Tags revealed by decoding (``&lt;b&gt;``) are stripped as well.
"""

import re
from typing import List

from loguru import logger

from reqmate.core.exceptions import MalformedInputError
from reqmate.core.markup import CDATA, TEXT, MarkupNode, parse_markup

SKIPPED_ELEMENTS = frozenset({"script", "style", "noscript", "template"})
PARAGRAPH_ELEMENTS = frozenset({"p", "h1", "h2", "h3", "h4", "h5", "h6"})
LINE_ELEMENTS = frozenset({
    "li", "tr", "div", "table", "ul", "ol", "dl", "dt", "dd",
    "blockquote", "pre", "section", "article", "header", "footer",
    "hr", "caption", "tbody", "thead", "tfoot",
})
CELL_ELEMENTS = frozenset({"td", "th"})
# inline formatting that must not split a word in two
INLINE_ELEMENTS = frozenset({
    "a", "abbr", "b", "bdi", "bdo", "cite", "code", "data", "dfn", "em", "i",
    "kbd", "mark", "q", "s", "samp", "small", "span", "strong", "sub", "sup",
    "time", "u", "var", "font", "strike", "tt",
})
CELL_SEPARATOR = " | "
# render passes allowed for markup that was entity-encoded more than once
MAX_PASSES = 8

_HORIZONTAL_WHITESPACE = re.compile(r"[^\S\n]+")
_SPACES_AROUND_NEWLINE = re.compile(r" *\n *")
_EXCESS_NEWLINES = re.compile(r"\n{3,}")


def normalize_whitespace(text: str) -> str:
    """Collapse horizontal runs to one space and newline runs to at most two."""
    text = text.replace("\r\n", "\n").replace("\r", "\n")
    text = _HORIZONTAL_WHITESPACE.sub(" ", text)
    text = _SPACES_AROUND_NEWLINE.sub("\n", text)
    text = _EXCESS_NEWLINES.sub("\n\n", text)
    return text.strip()


class TextLinearizer:
    """Flattens (enriched) markup into prompt-ready plain text."""

    def __init__(self, cell_separator: str = CELL_SEPARATOR):
        self.cell_separator = cell_separator

    def linearize(self, markup: str) -> str:
        """
        Plain text for a markup string.

        Rendering repeats on its own output until nothing changes, so tags that
        only appear once entities are decoded (`&lt;b&gt;`) are stripped too and
        `linearize(linearize(x)) == linearize(x)`.
        """
        if not markup or not markup.strip():
            return ""

        text = self._render_text(markup)
        for _ in range(MAX_PASSES):
            again = self._render_text(text)
            if again == text:
                break
            text = again
        else:
            logger.warning(f"Linearized text still changing after {MAX_PASSES} passes")

        logger.debug(f"Linearized {len(markup)} chars of markup into {len(text)} chars of text")
        return text

    def _render_text(self, markup: str) -> str:
        try:
            document = parse_markup(markup)
        except MalformedInputError as e:
            logger.warning(f"Linearizing unparsable markup as text: {e}")
            return normalize_whitespace(markup)
        return normalize_whitespace("".join(self._render(document)))

    def _render(self, root: MarkupNode) -> List[str]:
        parts: List[str] = []
        # entries are nodes to visit, or literal strings emitted on element exit
        stack: List[object] = list(reversed(root.children))
        while stack:
            item = stack.pop()
            if isinstance(item, str):
                parts.append(item)
                continue

            if item.name in (TEXT, CDATA):
                parts.append(item.text)
                continue
            if not item.is_element:
                continue

            tag = item.local_name
            if item.name in SKIPPED_ELEMENTS:
                parts.append(" ")
                continue
            if tag == "br":
                parts.append("\n")
                continue

            if tag in PARAGRAPH_ELEMENTS:
                stack.append("\n\n")
            elif tag in LINE_ELEMENTS:
                stack.append("\n")
            elif tag in CELL_ELEMENTS:
                stack.append(self.cell_separator)
            elif tag not in INLINE_ELEMENTS:
                # other tags separate words the way stripped tags would
                parts.append(" ")
                stack.append(" ")
            stack.extend(reversed(item.children))
        return parts
