"""Confluence REST client integration"""

from typing import Any, Dict, Optional

import httpx
from loguru import logger

from reqmate.core.exceptions import MalformedInputError, SourceUnavailableError
from reqmate.utils.retry import RetryPolicy
from reqmate.utils.settings.core import ConfluenceSettings

PAGE_CONTENT_PATH = "/rest/api/content/{page_id}"
REQUIREMENTS_PATH = "/rest/reqs/1/page/{space_key}/{page_id}"


class ConfluenceClient:
    """
    Thin async client for the two endpoints the pipeline needs:
    page storage-format body and the page's requirements index.

    Example:
        >>> settings = settings_factory.create_confluence_settings()
        >>> async with ConfluenceClient(settings) as client:
        ...     html = await client.get_page_html("248936913")
    """

    def __init__(
        self,
        settings: ConfluenceSettings,
        retry_policy: Optional[RetryPolicy] = None,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        """
        Initialize the client.

        Args:
            settings: Confluence configuration (base URL, token, timeouts)
            retry_policy: Policy applied to every request; derived from settings if omitted
            transport: Optional httpx transport, used to stub the wiki in tests
        """
        self.settings = settings
        self.retry_policy = retry_policy or RetryPolicy.from_settings(settings)
        self.transport = transport
        self._client: Optional[httpx.AsyncClient] = None

    def _open(self) -> httpx.AsyncClient:
        # one connection pool per event loop; aclose() lets the next loop open a fresh one
        if self._client is None or self._client.is_closed:
            headers = {"Accept": "application/json"}
            if self.settings.token:
                headers["Authorization"] = f"Bearer {self.settings.token}"
            self._client = httpx.AsyncClient(
                base_url=self.settings.api_base_url,
                headers=headers,
                timeout=self.settings.timeout_seconds,
                transport=self.transport,
            )
        return self._client

    async def __aenter__(self) -> "ConfluenceClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        """Release the connection pool. The client reopens on its next request."""
        if self._client is not None:
            client, self._client = self._client, None
            await client.aclose()

    async def _send(self, path: str, params: Dict[str, Any]) -> httpx.Response:
        response = await self._open().get(path, params=params)
        response.raise_for_status()
        return response

    async def get_json(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        """
        GET a JSON resource under the retry policy.

        Raises:
            SourceUnavailableError: on HTTP or transport failure after retries
            MalformedInputError: if the body is not valid JSON
        """
        url = f"{self.settings.api_base_url}{path}"
        try:
            response = await self.retry_policy.run(self._send, path, params or {})
        except httpx.HTTPStatusError as e:
            logger.error(f"Confluence request failed: {url} -> HTTP {e.response.status_code}")
            raise SourceUnavailableError(url, f"HTTP {e.response.status_code}") from e
        except httpx.HTTPError as e:
            logger.error(f"Confluence request failed: {url} -> {type(e).__name__}: {e}")
            raise SourceUnavailableError(url, f"{type(e).__name__}: {e}") from e

        try:
            return response.json()
        except ValueError as e:
            raise MalformedInputError(f"Response from {url} is not valid JSON: {e}") from e

    async def get_page_html(self, page_id: str) -> str:
        """Storage-format body of a page (``body.storage.value``), or "" when absent."""
        logger.info(f"Fetching page {page_id} from {self.settings.api_base_url}")
        payload = await self.get_json(
            PAGE_CONTENT_PATH.format(page_id=page_id),
            {"expand": "body.storage"},
        )
        body = payload.get("body") if isinstance(payload, dict) else None
        storage = body.get("storage") if isinstance(body, dict) else None
        value = storage.get("value") if isinstance(storage, dict) else None
        if not isinstance(value, str):
            logger.warning(f"Page {page_id} has no storage-format body")
            return ""
        return value

    async def get_requirements_payload(self, space_key: str, page_id: str) -> Any:
        """Raw requirements payload for a page, ``{"requirements": [...]}``."""
        logger.info(f"Fetching requirements for page {page_id} in space {space_key}")
        return await self.get_json(
            REQUIREMENTS_PATH.format(space_key=space_key, page_id=page_id),
            {"numberOfRequirements": self.settings.requirements_limit},
        )
