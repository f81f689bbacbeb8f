"""Page addressing value object."""

from dataclasses import dataclass


@dataclass(frozen=True)
class PageLocator:
    """Identifies a wiki page by id and space key."""
    page_id: str
    space_key: str
    url: str = ""
