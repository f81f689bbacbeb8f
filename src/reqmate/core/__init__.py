"""Pipeline building blocks: markup tree, enrichment and linearization."""

from reqmate.core.exceptions import (
    ReqmateError,
    SourceUnavailableError,
    MalformedInputError,
    UnsupportedUrlShapeError,
)
from reqmate.core.markup import MarkupNode, parse_markup, serialize
from reqmate.core.url_parser import parse_confluence_url
from reqmate.core.index_parser import RequirementIndexParser
from reqmate.core.enricher import RequirementEnricher
from reqmate.core.linearizer import TextLinearizer, normalize_whitespace

__all__ = [
    "ReqmateError",
    "SourceUnavailableError",
    "MalformedInputError",
    "UnsupportedUrlShapeError",
    "MarkupNode",
    "parse_markup",
    "serialize",
    "parse_confluence_url",
    "RequirementIndexParser",
    "RequirementEnricher",
    "TextLinearizer",
    "normalize_whitespace",
]
