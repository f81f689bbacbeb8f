"""
Requirements index parsing.

Turns the requirements endpoint payload (or an equivalent local JSON file)
into a RequirementIndex. Entries that cannot be used are skipped with a
warning; a payload that is not usable at all yields an empty index.
"""

import json
from typing import Any, List, Optional

from loguru import logger

from reqmate.core.markup import clean_html_fragment
from reqmate.domain.value_objects.diagnostic_kind import DiagnosticKind
from reqmate.domain.value_objects.requirement_status import RequirementStatus
from reqmate.models.document import Diagnostic
from reqmate.models.requirement import RequirementIndex, RequirementRecord


def _as_text(value: Any) -> str:
    if value is None:
        return ""
    if isinstance(value, str):
        return value.strip()
    if isinstance(value, (int, float, bool)):
        return str(value)
    return ""


class RequirementIndexParser:
    """Builds RequirementIndex instances from requirements payloads."""

    def parse_json(self, raw: str, space_key: str = "", page_id: str = "") -> RequirementIndex:
        """Parse a JSON document; invalid JSON yields an empty index."""
        try:
            payload = json.loads(raw)
        except (TypeError, ValueError) as e:
            logger.warning(f"Requirements index is not valid JSON: {e}")
            index = RequirementIndex(space_key=space_key, page_id=page_id)
            index.diagnostics.append(
                Diagnostic(kind=DiagnosticKind.MALFORMED_INPUT, message=f"Invalid requirements JSON: {e}")
            )
            return index
        return self.parse(payload, space_key=space_key, page_id=page_id)

    def parse(self, payload: Any, space_key: str = "", page_id: str = "") -> RequirementIndex:
        """
        Build an index from a decoded payload of the form
        ``{"requirements": [{"key": ..., "htmlExcerpt": ..., "origin": {"title": ...}, ...}]}``.

        Args:
            payload: Decoded JSON payload
            space_key: Space of the page, used when an entry has no spaceKey
            page_id: Page the index belongs to

        Returns:
            RequirementIndex keyed by requirement key, first occurrence wins
        """
        index = RequirementIndex(space_key=space_key, page_id=page_id)

        entries = payload.get("requirements") if isinstance(payload, dict) else None
        if entries is None and isinstance(payload, dict):
            logger.info("Requirements payload has no 'requirements' list")
            return index
        if not isinstance(entries, list):
            logger.warning(f"Requirements payload is malformed: {type(payload).__name__}")
            index.diagnostics.append(
                Diagnostic(kind=DiagnosticKind.MALFORMED_INPUT, message="Requirements payload has no usable 'requirements' list")
            )
            return index

        skipped = 0
        duplicates = 0
        for position, entry in enumerate(entries):
            record = self.parse_entry(entry, fallback_space_key=space_key)
            if record is None:
                skipped += 1
                logger.warning(f"Skipping malformed requirement entry at position {position}")
                continue
            if not index.add(record):
                duplicates += 1
                logger.debug(f"Ignoring duplicate requirement key {record.key}")

        if skipped:
            index.diagnostics.append(
                Diagnostic(kind=DiagnosticKind.MALFORMED_INPUT, message=f"Skipped {skipped} malformed requirement entries")
            )
        logger.info(
            f"Loaded {len(index)} requirements for page {page_id or '-'} "
            f"({skipped} skipped, {duplicates} duplicates)"
        )
        return index

    def parse_entry(self, entry: Any, fallback_space_key: str = "") -> Optional[RequirementRecord]:
        if not isinstance(entry, dict):
            return None

        key = _as_text(entry.get("key"))
        if not key:
            return None

        origin = entry.get("origin")
        origin_title = _as_text(origin.get("title")) if isinstance(origin, dict) else ""

        properties = {}
        excerpt_lines: List[str] = []
        raw_properties = entry.get("properties")
        for prop in raw_properties if isinstance(raw_properties, list) else []:
            if not isinstance(prop, dict):
                continue
            prop_key = _as_text(prop.get("key"))
            prop_value = clean_html_fragment(_as_text(prop.get("value")))
            if prop_key and prop_value:
                properties[prop_key] = prop_value
            excerpt_lines.extend(self._indexation_lines(prop_key, prop.get("indexation")))

        excerpt = "\n".join(excerpt_lines).strip()
        if not excerpt:
            excerpt = clean_html_fragment(_as_text(entry.get("htmlExcerpt")))

        return RequirementRecord(
            key=key,
            excerpt=excerpt,
            origin_title=origin_title,
            destination_url=_as_text(entry.get("destinationUrl")),
            status=RequirementStatus.parse(entry.get("status")),
            space_key=_as_text(entry.get("spaceKey")) or fallback_space_key,
            properties=properties,
        )

    @staticmethod
    def _indexation_lines(prop_key: str, indexation: Any) -> List[str]:
        """Excerpt lines from a property's indexation block (multivalues, then text)."""
        if not isinstance(indexation, dict):
            return []

        lines: List[str] = []
        multivalues = indexation.get("multivalues")
        values = [_as_text(v) for v in multivalues] if isinstance(multivalues, list) else []
        values = [v for v in values if v]
        if values:
            lines.append(f"{prop_key}:")
            lines.extend(f"  • {value}" for value in values)

        text = _as_text(indexation.get("text"))
        if text:
            lines.append(f"{prop_key}: {text}")
        return lines
