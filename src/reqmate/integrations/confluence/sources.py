"""
Page sources.

A page source yields the raw page markup and the raw requirements payload
for a PageLocator, either from the Confluence REST API or from local files
standing in for it.
"""

import json
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any

from reqmate.core.exceptions import MalformedInputError, SourceUnavailableError
from reqmate.integrations.confluence.client import ConfluenceClient
from reqmate.models.page import PageLocator
from reqmate.utils.file_utils import read_text


class PageSource(ABC):
    """Where page markup and requirement payloads come from."""

    name: str = "source"

    @abstractmethod
    async def fetch_page(self, locator: PageLocator) -> str:
        """Raw page markup.

        Raises:
            SourceUnavailableError: if the page cannot be obtained
        """

    @abstractmethod
    async def fetch_index_payload(self, locator: PageLocator) -> Any:
        """Decoded requirements payload.

        Raises:
            SourceUnavailableError: if the payload cannot be obtained
            MalformedInputError: if the payload is not valid JSON
        """

    async def aclose(self) -> None:
        return None


class ConfluencePageSource(PageSource):
    """Fetches both artifacts from the Confluence REST API."""

    name = "confluence"

    def __init__(self, client: ConfluenceClient):
        self.client = client

    async def fetch_page(self, locator: PageLocator) -> str:
        return await self.client.get_page_html(locator.page_id)

    async def fetch_index_payload(self, locator: PageLocator) -> Any:
        return await self.client.get_requirements_payload(locator.space_key, locator.page_id)

    async def aclose(self) -> None:
        await self.client.aclose()


class LocalPageSource(PageSource):
    """Reads a saved storage-format page and requirements JSON from disk."""

    name = "local"

    def __init__(self, page_path: str | Path, index_path: str | Path):
        self.page_path = Path(page_path)
        self.index_path = Path(index_path)

    @staticmethod
    def _read(path: Path) -> str:
        try:
            return read_text(path)
        except (OSError, ValueError) as e:
            raise SourceUnavailableError(str(path), str(e)) from e

    async def fetch_page(self, locator: PageLocator) -> str:
        return self._read(self.page_path)

    async def fetch_index_payload(self, locator: PageLocator) -> Any:
        raw = self._read(self.index_path)
        try:
            return json.loads(raw)
        except ValueError as e:
            raise MalformedInputError(f"{self.index_path} is not valid JSON: {e}") from e
