from reqmate.integrations.confluence.client import ConfluenceClient
from reqmate.integrations.confluence.sources import (
    PageSource,
    ConfluencePageSource,
    LocalPageSource,
)

__all__ = [
    "ConfluenceClient",
    "PageSource",
    "ConfluencePageSource",
    "LocalPageSource",
]
