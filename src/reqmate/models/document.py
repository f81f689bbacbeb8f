"""
Document models for the enrichment pipeline.

Every document is created and discarded within a single pipeline run:
- RawDocument: markup as fetched from the page source
- EnrichedDocument: markup with requirement definitions spliced in
- PlainTextDocument: linearized text handed to a language model prompt
"""

from typing import List, Optional
from pydantic import BaseModel, ConfigDict, Field

from reqmate.domain.value_objects.diagnostic_kind import DiagnosticKind


class Diagnostic(BaseModel):
    """A non-fatal condition observed while processing a document."""
    model_config = ConfigDict(frozen=True)

    kind: DiagnosticKind = Field(..., description="Category of the condition")
    message: str = Field(..., description="Human readable description")
    key: Optional[str] = Field(default=None, description="Requirement key involved, if any")


class RawDocument(BaseModel):
    """Immutable markup input."""
    model_config = ConfigDict(frozen=True)

    markup: str = Field(default="", description="Storage-format HTML/XML of the page")
    source: str = Field(default="", description="Where the markup came from (URL or file path)")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Conditions raised while loading")

    @property
    def is_empty(self) -> bool:
        return not self.markup.strip()

    @classmethod
    def empty(cls, source: str = "", diagnostics: Optional[List[Diagnostic]] = None) -> "RawDocument":
        return cls(markup="", source=source, diagnostics=diagnostics or [])


class EnrichedDocument(BaseModel):
    """Markup with an annotation inserted after every resolved requirement marker."""
    markup: str = Field(default="", description="Serialized enriched markup")
    marker_count: int = Field(default=0, description="Requirement markers found")
    annotated_keys: List[str] = Field(default_factory=list, description="Keys annotated, in document order")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Unresolved keys and other conditions")

    @property
    def annotation_count(self) -> int:
        return len(self.annotated_keys)

    @property
    def unresolved_keys(self) -> List[str]:
        return [
            d.key for d in self.diagnostics
            if d.kind == DiagnosticKind.UNRESOLVED_REFERENCE and d.key
        ]


class PlainTextDocument(BaseModel):
    """Final linearized output consumed by a language model prompt."""
    text: str = Field(default="", description="Plain text with normalized whitespace")
    diagnostics: List[Diagnostic] = Field(default_factory=list, description="Conditions accumulated by the pipeline")

    def __str__(self) -> str:
        return self.text
