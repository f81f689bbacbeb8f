"""
Requirement domain models.

- RequirementRecord: one entry of the requirements index
- RequirementIndex: key -> RequirementRecord mapping built once per run
"""

from collections.abc import Mapping
from typing import Dict, Iterable, Iterator, List, Optional
from pydantic import BaseModel, ConfigDict, Field

from reqmate.domain.value_objects.requirement_status import RequirementStatus
from reqmate.models.document import Diagnostic


class RequirementRecord(BaseModel):
    """Canonical definition of a requirement referenced from wiki pages."""
    model_config = ConfigDict(frozen=True)

    key: str = Field(..., min_length=1, description="Unique requirement id, e.g. BR-404")
    excerpt: str = Field(default="", description="Plain-text definition of the requirement")
    origin_title: str = Field(default="", description="Title of the page defining the requirement")
    destination_url: str = Field(default="", description="Link to the requirement definition")
    status: RequirementStatus = Field(default=RequirementStatus.ACTIVE, description="Requirement status")
    space_key: str = Field(default="", description="Space the requirement belongs to")
    properties: Dict[str, str] = Field(default_factory=dict, description="Cleaned property values, e.g. @ActorNameEn")


class RequirementIndex(Mapping[str, RequirementRecord]):
    """
    Requirement lookup table.

    Insertion keeps the first record seen for a key; later duplicates are
    rejected so a key never silently changes meaning within a run.
    """

    def __init__(
        self,
        records: Optional[Iterable[RequirementRecord]] = None,
        space_key: str = "",
        page_id: str = "",
    ):
        self.space_key = space_key
        self.page_id = page_id
        self._records: Dict[str, RequirementRecord] = {}
        self.diagnostics: List[Diagnostic] = []
        for record in records or []:
            self.add(record)

    def add(self, record: RequirementRecord) -> bool:
        """Add a record unless its key is already present.

        Returns:
            True if the record was stored, False if it was a duplicate
        """
        if record.key in self._records:
            return False
        self._records[record.key] = record
        return True

    def __getitem__(self, key: str) -> RequirementRecord:
        return self._records[key]

    def __iter__(self) -> Iterator[str]:
        return iter(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __repr__(self) -> str:
        return f"RequirementIndex(space_key={self.space_key!r}, page_id={self.page_id!r}, size={len(self)})"
