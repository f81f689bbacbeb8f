"""Services package for high-level business logic."""

from reqmate.services.requirement_enrichment_service import (
    RequirementEnrichmentService,
    RequirementEnrichmentServiceFactory,
)
from reqmate.services.confluence_page_loader_tool import (
    ConfluencePageLoaderTool,
    ConfluencePageLoaderToolFactory,
)

__all__ = [
    "RequirementEnrichmentService",
    "RequirementEnrichmentServiceFactory",
    "ConfluencePageLoaderTool",
    "ConfluencePageLoaderToolFactory",
]
