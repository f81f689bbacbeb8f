"""Diagnostic kind value object"""

from enum import StrEnum


class DiagnosticKind(StrEnum):
    """Non-fatal conditions recorded while running the pipeline"""

    SOURCE_UNAVAILABLE = "source_unavailable"
    MALFORMED_INPUT = "malformed_input"
    UNRESOLVED_REFERENCE = "unresolved_reference"
    MISSING_KEY = "missing_key"
