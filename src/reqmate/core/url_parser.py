"""Decompose wiki page URLs into a page id and space key."""

import re

from reqmate.core.exceptions import UnsupportedUrlShapeError
from reqmate.models.page import PageLocator

DEFAULT_SPACE_KEY = "BJS"

# https://host/spaces/BJS/pages/248936913/UC-Cancel+Expert+Support+Request
SPACES_PAGES_PATTERN = re.compile(r"/spaces/([^/?#]+)/pages/(\d+)")
# https://host/pages/viewpage.action?pageId=248936913
PAGE_ID_PATTERN = re.compile(r"[?&]pageId=(\d+)")
# https://host/display/BJS/Page+Title
DISPLAY_PATTERN = re.compile(r"/display/([^/?#]+)/")


def parse_confluence_url(url: str, default_space_key: str = DEFAULT_SPACE_KEY) -> PageLocator:
    """
    Extract page id and space key from a Confluence page URL.

    Args:
        url: Page URL as pasted by a user
        default_space_key: Space used when the URL carries a page id but no space

    Returns:
        PageLocator with page_id and space_key

    Raises:
        UnsupportedUrlShapeError: if no numeric page id can be found

    Example:
        >>> parse_confluence_url("https://host/spaces/BJS/pages/248936913/Title")
        PageLocator(page_id='248936913', space_key='BJS', url='https://host/spaces/BJS/pages/248936913/Title')
    """
    url = (url or "").strip()
    if not url:
        raise UnsupportedUrlShapeError(url, "empty URL")

    match = SPACES_PAGES_PATTERN.search(url)
    if match:
        return PageLocator(page_id=match.group(2), space_key=match.group(1), url=url)

    match = PAGE_ID_PATTERN.search(url)
    if match:
        space_match = DISPLAY_PATTERN.search(url)
        space_key = space_match.group(1) if space_match else default_space_key
        return PageLocator(page_id=match.group(1), space_key=space_key, url=url)

    if DISPLAY_PATTERN.search(url):
        raise UnsupportedUrlShapeError(url, "/display/ URLs carry a title, not a page id")

    raise UnsupportedUrlShapeError(url)
