"""Requirement status value object"""

from enum import StrEnum


class RequirementStatus(StrEnum):
    """Enumeration for requirement lifecycle status"""

    ACTIVE = "ACTIVE"
    DEPRECATED = "DEPRECATED"
    DELETED = "DELETED"
    UNKNOWN = "UNKNOWN"

    @classmethod
    def parse(cls, value: object) -> "RequirementStatus":
        """Map a raw status string to a member, defaulting missing values to ACTIVE"""
        if value is None or (isinstance(value, str) and not value.strip()):
            return cls.ACTIVE
        try:
            return cls(str(value).strip().upper())
        except ValueError:
            return cls.UNKNOWN

