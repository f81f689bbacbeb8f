"""Error taxonomy for the requirement enrichment pipeline."""


class ReqmateError(Exception):
    """Base class for all reqmate errors."""


class SourceUnavailableError(ReqmateError):
    """Raised when a page or requirements source cannot be reached or read."""

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Source unavailable ({source}): {reason}")


class MalformedInputError(ReqmateError):
    """Raised when markup or index JSON cannot be parsed at all."""


class UnsupportedUrlShapeError(ReqmateError, ValueError):
    """Raised when a page URL cannot be decomposed into a page id and space key."""

    def __init__(self, url: str, detail: str | None = None):
        self.url = url
        message = (
            f"Could not parse Confluence URL: {url}. "
            "Expected formats: /spaces/SPACE/pages/PAGEID/... or ?pageId=..."
        )
        if detail:
            message = f"{message} ({detail})"
        super().__init__(message)
