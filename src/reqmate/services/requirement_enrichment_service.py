"""
Requirement Enrichment Service.

Turns a wiki use-case page into plain text for language model prompts:

    load page markup -> load requirements index -> enrich -> linearize

Every step favours local recovery: unreachable sources and malformed input
degrade to empty or partial results with diagnostics. Only an unusable page
URL is reported to the caller as a failure.
"""

import asyncio
from pathlib import Path
from typing import List, Optional, Sequence

from loguru import logger
from neopipe import Result, Ok, Err

from reqmate.core.enricher import RequirementEnricher
from reqmate.core.exceptions import MalformedInputError, SourceUnavailableError, UnsupportedUrlShapeError
from reqmate.core.index_parser import RequirementIndexParser
from reqmate.core.linearizer import TextLinearizer
from reqmate.core.url_parser import DEFAULT_SPACE_KEY, parse_confluence_url
from reqmate.domain.value_objects.diagnostic_kind import DiagnosticKind
from reqmate.integrations.confluence.client import ConfluenceClient
from reqmate.integrations.confluence.sources import ConfluencePageSource, LocalPageSource, PageSource
from reqmate.models.document import Diagnostic, EnrichedDocument, PlainTextDocument, RawDocument
from reqmate.models.page import PageLocator
from reqmate.models.requirement import RequirementIndex
from reqmate.services.factory import ServiceFactoryABC
from reqmate.utils.file_utils import save_artifact
from reqmate.utils.settings.core import AppSettings, ConfluenceSettings
from reqmate.utils.settings.factory import settings_factory


class RequirementEnrichmentService:
    """
    Pipeline service producing enriched plain text for a wiki page.

    Sources are tried in order; the first one that answers wins, so a
    remote source can be backed by a local file substitute.
    """

    def __init__(
        self,
        sources: Sequence[PageSource],
        app_settings: Optional[AppSettings] = None,
        default_space_key: str = DEFAULT_SPACE_KEY,
        enricher: Optional[RequirementEnricher] = None,
        linearizer: Optional[TextLinearizer] = None,
        index_parser: Optional[RequirementIndexParser] = None,
    ):
        """
        Initialize the service.

        Args:
            sources: Page sources, in order of preference
            app_settings: Application settings (artifact output, excerpt truncation)
            default_space_key: Space used for URLs that carry only a page id
            enricher: Marker enricher; built from app settings if omitted
            linearizer: Markup to text converter
            index_parser: Requirements payload parser
        """
        if not sources:
            raise ValueError("At least one page source is required")

        self.sources = list(sources)
        self.app_settings = app_settings or AppSettings()
        self.default_space_key = default_space_key
        self.enricher = enricher or RequirementEnricher(excerpt_max_chars=self.app_settings.excerpt_max_chars)
        self.linearizer = linearizer or TextLinearizer()
        self.index_parser = index_parser or RequirementIndexParser()

    async def load(self, locator: PageLocator, degrade: bool = False) -> RawDocument:
        """
        Obtain page markup from the first source that answers.

        Args:
            locator: Page to load
            degrade: Return an empty document instead of raising when no source answers

        Raises:
            SourceUnavailableError: if no source answers and degrade is False
        """
        failures: List[str] = []
        for source in self.sources:
            try:
                markup = await source.fetch_page(locator)
            except SourceUnavailableError as e:
                logger.warning(f"Page source '{source.name}' unavailable: {e}")
                failures.append(f"{source.name}: {e.reason}")
                continue
            except MalformedInputError as e:
                logger.warning(f"Page source '{source.name}' returned malformed data: {e}")
                failures.append(f"{source.name}: {e}")
                continue
            except Exception as e:
                logger.error(f"Page source '{source.name}' failed: {type(e).__name__}: {e}")
                failures.append(f"{source.name}: {type(e).__name__}: {e}")
                continue

            logger.info(f"Loaded page {locator.page_id} from '{source.name}' ({len(markup)} chars)")
            return RawDocument(markup=markup, source=locator.url or source.name)

        reason = "; ".join(failures) or "no sources configured"
        if not degrade:
            raise SourceUnavailableError(locator.url or locator.page_id, reason)

        logger.error(f"Could not load page {locator.page_id}, continuing with an empty document: {reason}")
        return RawDocument.empty(
            source=locator.url,
            diagnostics=[Diagnostic(kind=DiagnosticKind.SOURCE_UNAVAILABLE, message=reason)],
        )

    async def load_index(self, locator: PageLocator) -> RequirementIndex:
        """Load the requirements index; failures degrade to an empty index."""
        failures: List[Diagnostic] = []
        for source in self.sources:
            try:
                payload = await source.fetch_index_payload(locator)
            except SourceUnavailableError as e:
                logger.warning(f"Requirements source '{source.name}' unavailable: {e}")
                failures.append(Diagnostic(kind=DiagnosticKind.SOURCE_UNAVAILABLE, message=str(e)))
                continue
            except MalformedInputError as e:
                logger.warning(f"Requirements source '{source.name}' returned malformed data: {e}")
                failures.append(Diagnostic(kind=DiagnosticKind.MALFORMED_INPUT, message=str(e)))
                continue
            except Exception as e:
                logger.error(f"Requirements source '{source.name}' failed: {type(e).__name__}: {e}")
                failures.append(
                    Diagnostic(kind=DiagnosticKind.SOURCE_UNAVAILABLE, message=f"{source.name}: {type(e).__name__}: {e}")
                )
                continue

            index = self.index_parser.parse(payload, space_key=locator.space_key, page_id=locator.page_id)
            index.diagnostics[:0] = failures
            return index

        logger.error(f"Could not load requirements for page {locator.page_id}, using an empty index")
        index = RequirementIndex(space_key=locator.space_key, page_id=locator.page_id)
        index.diagnostics.extend(failures)
        return index

    def enrich(self, document: RawDocument, index: RequirementIndex) -> EnrichedDocument:
        return self.enricher.enrich(document, index)

    def linearize(self, document: EnrichedDocument | str) -> PlainTextDocument:
        if isinstance(document, EnrichedDocument):
            return PlainTextDocument(
                text=self.linearizer.linearize(document.markup),
                diagnostics=list(document.diagnostics),
            )
        return PlainTextDocument(text=self.linearizer.linearize(document))

    async def _fetch(self, locator: PageLocator) -> tuple[RawDocument, RequirementIndex]:
        document = await self.load(locator, degrade=True)
        if document.is_empty:
            # an empty page has nothing to annotate
            return document, RequirementIndex(space_key=locator.space_key, page_id=locator.page_id)
        return document, await self.load_index(locator)

    async def process(self, locator: PageLocator, timeout: Optional[float] = None) -> PlainTextDocument:
        """
        Run the full pipeline for a page.

        Args:
            locator: Page to process
            timeout: Deadline in seconds for the fetch step only

        Returns:
            PlainTextDocument; empty text with diagnostics when nothing could be loaded
        """
        try:
            document, index = await asyncio.wait_for(self._fetch(locator), timeout=timeout)
        except asyncio.TimeoutError:
            message = f"Fetching page {locator.page_id} exceeded {timeout}s"
            logger.error(message)
            document = RawDocument.empty(
                source=locator.url,
                diagnostics=[Diagnostic(kind=DiagnosticKind.SOURCE_UNAVAILABLE, message=message)],
            )
            index = RequirementIndex(space_key=locator.space_key, page_id=locator.page_id)

        enriched = self.enrich(document, index)
        plain = self.linearize(enriched)
        plain.diagnostics[:0] = [*document.diagnostics, *index.diagnostics]

        if self.app_settings.save_artifacts:
            self.save_artifacts(enriched, plain)

        logger.info(
            f"Page {locator.page_id}: {enriched.annotation_count}/{enriched.marker_count} "
            f"requirements resolved, {len(plain.text)} chars of text"
        )
        return plain

    def save_artifacts(self, enriched: EnrichedDocument, plain: PlainTextDocument) -> List[Path]:
        """Persist enriched markup and plain text under the configured output directory."""
        output_dir = self.app_settings.output_dir
        saved = [
            save_artifact(enriched.markup, output_dir, "enriched_page", ".html"),
            save_artifact(plain.text, output_dir, "plain_text", ".txt"),
        ]
        return [path for path in saved if path is not None]

    async def load_page_context(self, url: str, timeout: Optional[float] = None) -> str:
        """
        Plain text for a page URL.

        Raises:
            UnsupportedUrlShapeError: if the URL does not identify a page
        """
        locator = parse_confluence_url(url, default_space_key=self.default_space_key)
        plain = await self.process(locator, timeout=timeout)
        return plain.text

    async def run(self, url: str, timeout: Optional[float] = None) -> Result[PlainTextDocument, str]:
        """
        Run the pipeline for a page URL and wrap the outcome.

        Returns:
            Result[PlainTextDocument, str]: Ok with the document or Err with error message
        """
        try:
            locator = parse_confluence_url(url, default_space_key=self.default_space_key)
        except UnsupportedUrlShapeError as e:
            logger.error(str(e))
            return Err(str(e))

        try:
            return Ok(await self.process(locator, timeout=timeout))
        except Exception as e:
            error_msg = f"Error processing page {locator.page_id}: {str(e)}"
            logger.error(error_msg)
            return Err(error_msg)

    async def aclose(self) -> None:
        """Release source connections; sources reopen them on their next fetch."""
        for source in self.sources:
            await source.aclose()

    async def _run_and_release(self, url: str, timeout: Optional[float]) -> Result[PlainTextDocument, str]:
        # pooled connections are bound to this event loop
        try:
            return await self.run(url, timeout=timeout)
        finally:
            await self.aclose()

    def execute(self, url: str, timeout: Optional[float] = None) -> Result[PlainTextDocument, str]:
        """
        Execute the service synchronously in a fresh event loop.

        Connections opened during the call are released before returning, so
        the service can be executed again.

        Args:
            url: Confluence page URL
            timeout: Deadline in seconds for the fetch step

        Returns:
            Result[PlainTextDocument, str]: Ok with the document or Err with error message
        """
        try:
            return asyncio.run(self._run_and_release(url, timeout))
        except Exception as e:
            error_msg = f"Error executing enrichment service: {str(e)}"
            logger.error(error_msg)
            return Err(error_msg)

    def __call__(self, url: str, timeout: Optional[float] = None) -> Result[PlainTextDocument, str]:
        return self.execute(url, timeout=timeout)


class RequirementEnrichmentServiceFactory(ServiceFactoryABC[RequirementEnrichmentService]):
    """Factory for creating RequirementEnrichmentService with default configurations."""

    @staticmethod
    def build_sources(settings: ConfluenceSettings) -> List[PageSource]:
        """
        Remote source when a token is configured, then the local file
        substitute when both local paths are configured. Falls back to an
        unauthenticated remote source when neither is set.
        """
        sources: List[PageSource] = []
        if settings.token:
            sources.append(ConfluencePageSource(ConfluenceClient(settings)))
        if settings.uses_local_files:
            sources.append(LocalPageSource(settings.local_page_path, settings.local_requirements_path))
        if not sources:
            sources.append(ConfluencePageSource(ConfluenceClient(settings)))
        return sources

    @classmethod
    def create(
        cls,
        confluence_settings: ConfluenceSettings,
        app_settings: AppSettings,
    ) -> RequirementEnrichmentService:
        return RequirementEnrichmentService(
            sources=cls.build_sources(confluence_settings),
            app_settings=app_settings,
            default_space_key=confluence_settings.default_space_key,
        )

    @classmethod
    def create_default(cls) -> RequirementEnrichmentService:
        """
        Create the service from environment configuration.

        Uses CONFLUENCE_* variables for the wiki connection and APP_* for
        artifact output.

        Example:
            >>> service = RequirementEnrichmentServiceFactory.create_default()
            >>> result = service.execute("https://wiki/spaces/BJS/pages/248936913/UC")
        """
        return cls.create(
            settings_factory.create_confluence_settings(),
            settings_factory.create_app_settings(),
        )

    @classmethod
    def from_env_file(cls, env_path: str | Path) -> RequirementEnrichmentService:
        return cls.create(
            settings_factory.create_confluence_settings(env_path),
            settings_factory.create_app_settings(env_path),
        )

    @classmethod
    def create_local(
        cls,
        page_path: str | Path,
        index_path: str | Path,
        app_settings: Optional[AppSettings] = None,
    ) -> RequirementEnrichmentService:
        """Service reading a saved page and requirements JSON from disk."""
        return RequirementEnrichmentService(
            sources=[LocalPageSource(page_path, index_path)],
            app_settings=app_settings,
        )
