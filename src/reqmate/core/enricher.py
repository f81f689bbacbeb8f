"""
Requirement definition injection.

Finds requirement macros in a page's storage-format markup, e.g.::

    <ac:structured-macro ac:name="requirement">
      <ac:parameter ac:name="key">BR-404</ac:parameter>
    </ac:structured-macro>

and inserts a short ``<span class="requirement-definition">`` right after
each macro whose key resolves in the requirements index. The macro itself is
left in place. Keys that do not resolve are recorded as diagnostics.
"""

from typing import List, Optional

from loguru import logger

from reqmate.core.exceptions import MalformedInputError
from reqmate.core.markup import MarkupNode, clean_html_fragment, parse_markup
from reqmate.domain.value_objects.diagnostic_kind import DiagnosticKind
from reqmate.models.document import Diagnostic, EnrichedDocument, RawDocument
from reqmate.models.requirement import RequirementIndex, RequirementRecord

REQUIREMENT_MACRO_NAME = "requirement"
KEY_PARAMETER_NAME = "key"
PARAMETER_TAGS = frozenset({"parameter", "param"})
ANNOTATION_CLASS = "requirement-definition"


def is_macro(node: MarkupNode) -> bool:
    return node.is_element and node.local_name.endswith("macro")


def is_requirement_marker(node: MarkupNode) -> bool:
    """A macro element whose (possibly prefixed) ``name`` attribute is ``requirement``."""
    if not is_macro(node):
        return False
    name = node.get_attribute("name")
    return name is not None and name.lower() == REQUIREMENT_MACRO_NAME


def is_key_parameter(node: MarkupNode) -> bool:
    if not node.is_element or node.local_name not in PARAMETER_TAGS:
        return False
    name = node.get_attribute("name")
    return name is not None and name.lower() == KEY_PARAMETER_NAME


class RequirementEnricher:
    """
    Splices requirement definitions into wiki markup.

    The enricher never fabricates text: a marker gets an annotation only when
    its key is present in the index, and at most one annotation per marker.
    """

    def __init__(self, excerpt_max_chars: Optional[int] = None):
        """
        Args:
            excerpt_max_chars: Truncate excerpts in annotations to this many characters
        """
        self.excerpt_max_chars = excerpt_max_chars

    def find_markers(self, root: MarkupNode) -> List[MarkupNode]:
        return root.find_all(is_requirement_marker)

    def extract_key(self, marker: MarkupNode) -> Optional[str]:
        """Text of the marker's own key parameter, ignoring nested macros."""
        parameter = marker.find_first(is_key_parameter, prune=is_macro)
        if parameter is None:
            return None
        key = parameter.text_content().strip()
        return key or None

    def format_excerpt(self, excerpt: str) -> str:
        text = clean_html_fragment(excerpt)
        if self.excerpt_max_chars is not None and len(text) > self.excerpt_max_chars:
            text = text[: self.excerpt_max_chars].rstrip() + "..."
        return text

    def build_annotation(self, record: RequirementRecord) -> MarkupNode:
        title = record.origin_title or record.key
        excerpt = self.format_excerpt(record.excerpt)
        body = f" ({title}: {excerpt})" if excerpt else f" ({title})"
        return MarkupNode.element(
            "span",
            {"class": ANNOTATION_CLASS},
            [MarkupNode.text_node(body)],
        )

    def enrich(self, document: RawDocument, index: RequirementIndex) -> EnrichedDocument:
        """
        Insert definitions after every resolvable requirement marker.

        Args:
            document: Raw page markup
            index: Requirements index for the page

        Returns:
            EnrichedDocument with serialized markup, annotated keys and diagnostics
        """
        if document.is_empty:
            logger.info("Page markup is empty; nothing to enrich")
            return EnrichedDocument(markup=document.markup)

        try:
            root = parse_markup(document.markup)
        except MalformedInputError as e:
            logger.error(f"Could not parse page markup, passing it through unchanged: {e}")
            return EnrichedDocument(
                markup=document.markup,
                diagnostics=[Diagnostic(kind=DiagnosticKind.MALFORMED_INPUT, message=str(e))],
            )

        markers = self.find_markers(root)
        logger.info(f"Found {len(markers)} requirement markers")

        annotated_keys: List[str] = []
        diagnostics: List[Diagnostic] = []
        for marker in markers:
            key = self.extract_key(marker)
            if key is None:
                logger.warning("Requirement marker has no key parameter")
                diagnostics.append(
                    Diagnostic(kind=DiagnosticKind.MISSING_KEY, message="Requirement marker has no key parameter")
                )
                continue

            record = index.get(key)
            if record is None:
                logger.warning(f"No definition found for requirement {key}")
                diagnostics.append(
                    Diagnostic(
                        kind=DiagnosticKind.UNRESOLVED_REFERENCE,
                        message=f"No definition found for requirement {key}",
                        key=key,
                    )
                )
                continue

            marker.parent.insert_after(marker, self.build_annotation(record))
            annotated_keys.append(key)
            logger.debug(f"Added definition for requirement {key}")

        logger.info(
            f"Annotated {len(annotated_keys)} of {len(markers)} requirement markers"
        )
        return EnrichedDocument(
            markup=root.to_markup(),
            marker_count=len(markers),
            annotated_keys=annotated_keys,
            diagnostics=diagnostics,
        )
