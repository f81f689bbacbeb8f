"""
Domain models for requirement enrichment.

- Document models (RawDocument, EnrichedDocument, PlainTextDocument, Diagnostic)
- Requirement models (RequirementRecord, RequirementIndex)
- Page addressing (PageLocator)
"""

from reqmate.models.document import (
    Diagnostic,
    RawDocument,
    EnrichedDocument,
    PlainTextDocument,
)

from reqmate.models.requirement import (
    RequirementRecord,
    RequirementIndex,
)

from reqmate.models.page import PageLocator

__all__ = [
    "Diagnostic",
    "RawDocument",
    "EnrichedDocument",
    "PlainTextDocument",
    "RequirementRecord",
    "RequirementIndex",
    "PageLocator",
]
