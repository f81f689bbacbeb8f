"""
Typed markup tree.

Wiki storage-format pages are HTML mixed with namespaced macro tags
(``ac:structured-macro``, ``ac:parameter``, ``ri:page``...). They are rarely
well-formed XML, so the markup is parsed leniently with BeautifulSoup's
``html.parser`` and converted into a small tree of ``MarkupNode`` objects
that the enricher and linearizer can walk without touching bs4 types.
"""

import html
import re
import warnings
from dataclasses import dataclass, field
from typing import Callable, Dict, Iterator, List, Optional

from bs4 import BeautifulSoup, MarkupResemblesLocatorWarning
from bs4.builder import HTMLParserTreeBuilder
from bs4.element import CData, Comment, Declaration, Doctype, NavigableString, ProcessingInstruction, Tag
from loguru import logger

from reqmate.core.exceptions import MalformedInputError

TEXT = "#text"
COMMENT = "#comment"
CDATA = "#cdata"
DOCTYPE = "#doctype"
DECLARATION = "#declaration"
PROCESSING_INSTRUCTION = "#pi"
DOCUMENT = "#document"

VOID_ELEMENTS = frozenset({
    "area", "base", "br", "col", "embed", "hr", "img", "input",
    "link", "meta", "param", "source", "track", "wbr",
})

_TAG_PATTERN = re.compile(r"<[^>]+>")
_WHITESPACE_PATTERN = re.compile(r"\s+")


class StorageFormatTreeBuilder(HTMLParserTreeBuilder):
    """html.parser builder where macro parameters such as <param> may hold text."""

    def __init__(self, *args, **kwargs):
        super().__init__(*args, **kwargs)
        # bs4 >= 4.13 fills the void set per instance in TreeBuilder.__init__
        self.empty_element_tags = set(self.empty_element_tags or VOID_ELEMENTS) - {"param"}


def local_name(name: str) -> str:
    """Name without its namespace prefix, lowercased (``ac:name`` -> ``name``)."""
    return name.rsplit(":", 1)[-1].lower()


def normalize_attribute_value(value: str) -> str:
    """Strip whitespace, backslashes and quotes that some exports leave around values."""
    return value.strip().strip('\\"\'').strip()


@dataclass
class MarkupNode:
    """A node of the markup tree: an element, a text run, or other markup."""
    name: str
    attributes: Dict[str, str] = field(default_factory=dict)
    children: List["MarkupNode"] = field(default_factory=list)
    text: str = ""
    self_closing: bool = False
    parent: Optional["MarkupNode"] = field(default=None, repr=False, compare=False)

    @classmethod
    def element(
        cls,
        name: str,
        attributes: Optional[Dict[str, str]] = None,
        children: Optional[List["MarkupNode"]] = None,
    ) -> "MarkupNode":
        node = cls(name=name, attributes=dict(attributes or {}))
        for child in children or []:
            node.append(child)
        return node

    @classmethod
    def text_node(cls, text: str) -> "MarkupNode":
        return cls(name=TEXT, text=text)

    @property
    def is_element(self) -> bool:
        return not self.name.startswith("#")

    @property
    def local_name(self) -> str:
        return local_name(self.name) if self.is_element else self.name

    def get_attribute(self, name: str) -> Optional[str]:
        """Look up an attribute by local name, ignoring prefix and case."""
        wanted = local_name(name)
        for attr_name, value in self.attributes.items():
            if local_name(attr_name) == wanted:
                return normalize_attribute_value(value)
        return None

    def append(self, child: "MarkupNode") -> None:
        child.parent = self
        self.children.append(child)

    def insert_after(self, reference: "MarkupNode", node: "MarkupNode") -> None:
        """Insert ``node`` directly after ``reference``, one of this node's children."""
        for position, child in enumerate(self.children):
            if child is reference:
                node.parent = self
                self.children.insert(position + 1, node)
                return
        raise ValueError(f"<{reference.name}> is not a child of <{self.name}>")

    def iter_descendants(self, prune: Optional[Callable[["MarkupNode"], bool]] = None) -> Iterator["MarkupNode"]:
        """Depth-first, document-order walk below this node.

        Nodes matching ``prune`` are yielded but their subtrees are skipped.
        """
        stack = list(reversed(self.children))
        while stack:
            node = stack.pop()
            yield node
            if prune is not None and prune(node):
                continue
            stack.extend(reversed(node.children))

    def find_all(self, predicate: Callable[["MarkupNode"], bool]) -> List["MarkupNode"]:
        return [node for node in self.iter_descendants() if predicate(node)]

    def find_first(
        self,
        predicate: Callable[["MarkupNode"], bool],
        prune: Optional[Callable[["MarkupNode"], bool]] = None,
    ) -> Optional["MarkupNode"]:
        for node in self.iter_descendants(prune=prune):
            if predicate(node):
                return node
        return None

    def text_content(self) -> str:
        if self.name in (TEXT, CDATA):
            return self.text
        return "".join(
            node.text for node in self.iter_descendants() if node.name in (TEXT, CDATA)
        )

    def to_markup(self) -> str:
        return serialize(self)


def parse_markup(markup: str) -> MarkupNode:
    """Parse markup into a ``#document`` node.

    Raises:
        MalformedInputError: if the parser gives up on the input entirely
    """
    try:
        with warnings.catch_warnings():
            warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
            soup = BeautifulSoup(
                markup or "",
                builder=StorageFormatTreeBuilder(multi_valued_attributes=None),
            )
    except Exception as e:
        raise MalformedInputError(f"Markup could not be parsed: {e}") from e

    document = MarkupNode(name=DOCUMENT)
    # (bs4 node, MarkupNode parent) pairs, iterative to survive deeply nested exports
    stack = [(child, document) for child in reversed(list(soup.contents))]
    while stack:
        source, parent = stack.pop()
        node = _convert(source)
        if node is None:
            continue
        parent.append(node)
        if isinstance(source, Tag):
            stack.extend((child, node) for child in reversed(list(source.contents)))

    logger.debug(f"Parsed markup: {len(markup or '')} chars")
    return document


def _convert(source) -> Optional[MarkupNode]:
    if isinstance(source, Tag):
        return MarkupNode(
            name=source.name,
            attributes={k: v if isinstance(v, str) else " ".join(v) for k, v in source.attrs.items()},
            self_closing=bool(source.is_empty_element),
        )
    if isinstance(source, Comment):
        return MarkupNode(name=COMMENT, text=str(source))
    if isinstance(source, CData):
        return MarkupNode(name=CDATA, text=str(source))
    if isinstance(source, Doctype):
        return MarkupNode(name=DOCTYPE, text=str(source))
    if isinstance(source, Declaration):
        return MarkupNode(name=DECLARATION, text=str(source))
    if isinstance(source, ProcessingInstruction):
        return MarkupNode(name=PROCESSING_INSTRUCTION, text=str(source))
    if isinstance(source, NavigableString):
        return MarkupNode.text_node(str(source))
    return None


def serialize(node: MarkupNode) -> str:
    """Render a node (and its subtree) back to markup."""
    parts: List[str] = []
    # entries are nodes to open, or closing-tag strings
    stack: List[object] = [node]
    while stack:
        item = stack.pop()
        if isinstance(item, str):
            parts.append(item)
            continue
        if item.name == DOCUMENT:
            stack.extend(reversed(item.children))
        elif item.name == TEXT:
            parts.append(html.escape(item.text, quote=False))
        elif item.name == COMMENT:
            parts.append(f"<!--{item.text}-->")
        elif item.name == CDATA:
            parts.append(f"<![CDATA[{item.text}]]>")
        elif item.name == DOCTYPE:
            parts.append(f"<!DOCTYPE {item.text}>")
        elif item.name == DECLARATION:
            parts.append(f"<!{item.text}>")
        elif item.name == PROCESSING_INSTRUCTION:
            parts.append(f"<?{item.text}>")
        else:
            attrs = "".join(
                f' {name}="{html.escape(value, quote=True)}"' for name, value in item.attributes.items()
            )
            if not item.children and (item.self_closing or item.local_name in VOID_ELEMENTS):
                parts.append(f"<{item.name}{attrs}/>")
                continue
            parts.append(f"<{item.name}{attrs}>")
            stack.append(f"</{item.name}>")
            stack.extend(reversed(item.children))
    return "".join(parts)


def clean_html_fragment(value: str) -> str:
    """Reduce an HTML snippet to a single line of text."""
    if not value:
        return ""
    if "<" in value or "&" in value:
        try:
            with warnings.catch_warnings():
                warnings.simplefilter("ignore", MarkupResemblesLocatorWarning)
                value = BeautifulSoup(value, "html.parser").get_text(" ")
        except Exception as e:
            logger.debug(f"Falling back to tag stripping for fragment: {e}")
            value = _TAG_PATTERN.sub(" ", value)
    return _WHITESPACE_PATTERN.sub(" ", value).strip()
