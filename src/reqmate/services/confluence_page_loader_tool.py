"""
Confluence page loader tool.

Wraps RequirementEnrichmentService for agent frameworks that register tools
by name and description and expect a string back, errors included.
"""

import asyncio
from pathlib import Path

from loguru import logger

from reqmate.services.factory import ServiceFactoryABC
from reqmate.services.requirement_enrichment_service import (
    RequirementEnrichmentService,
    RequirementEnrichmentServiceFactory,
)


class ConfluencePageLoaderTool:
    """Loads a wiki page URL and returns its enriched content for an agent."""

    name = "confluence_loader"
    description = (
        "Loads and extracts business requirements from a Confluence Wiki page URL. "
        "Input should be the full Confluence Wiki URL. "
        "Returns the page content with all requirement definitions enriched and ready for analysis."
    )

    def __init__(self, service: RequirementEnrichmentService, timeout: float | None = None):
        self.service = service
        self.timeout = timeout

    @staticmethod
    def format_result(text: str) -> str:
        return f"# Wiki Page Information\n## Full Page Content\n{text}"

    async def arun(self, wiki_url: str) -> str:
        url = (wiki_url or "").strip()
        if not url:
            return "Error: No URL provided. Please provide a valid Confluence Wiki URL."

        try:
            text = await self.service.load_page_context(url, timeout=self.timeout)
        except Exception as e:
            logger.error(f"Error loading Wiki page {url}: {e}")
            return (
                f"Error loading Wiki page: {e}\n\n"
                "Please ensure the URL is a valid Confluence page URL with proper authentication."
            )
        return self.format_result(text)

    async def _arun_and_release(self, wiki_url: str) -> str:
        try:
            return await self.arun(wiki_url)
        finally:
            await self.service.aclose()

    def run(self, wiki_url: str) -> str:
        """Synchronous entry point; each call runs in its own event loop."""
        return asyncio.run(self._arun_and_release(wiki_url))

    def __call__(self, wiki_url: str) -> str:
        return self.run(wiki_url)


class ConfluencePageLoaderToolFactory(ServiceFactoryABC[ConfluencePageLoaderTool]):
    """Factory for creating ConfluencePageLoaderTool with default configurations."""

    @classmethod
    def create_default(cls) -> ConfluencePageLoaderTool:
        return ConfluencePageLoaderTool(RequirementEnrichmentServiceFactory.create_default())

    @classmethod
    def from_env_file(cls, env_path: str | Path) -> ConfluencePageLoaderTool:
        return ConfluencePageLoaderTool(RequirementEnrichmentServiceFactory.from_env_file(env_path))
