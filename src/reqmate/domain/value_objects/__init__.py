from reqmate.domain.value_objects.requirement_status import RequirementStatus
from reqmate.domain.value_objects.diagnostic_kind import DiagnosticKind

__all__ = ["RequirementStatus", "DiagnosticKind"]
