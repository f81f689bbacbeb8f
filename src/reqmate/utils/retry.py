"""
Retry policy for upstream HTTP calls.

One policy object is shared by the page fetch and the requirements fetch,
so both back off the same way when the wiki rate-limits or hiccups.
"""

from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, FrozenSet

import httpx
from loguru import logger
from tenacity import (
    AsyncRetrying,
    RetryCallState,
    retry_if_exception,
    stop_after_attempt,
    wait_exponential,
)

from reqmate.utils.settings.core import ConfluenceSettings

RETRYABLE_STATUS_CODES: FrozenSet[int] = frozenset({429, 500, 502, 503, 504})


def is_retryable_http_error(exc: BaseException) -> bool:
    """Rate limiting, server errors and transport failures are worth another attempt."""
    if isinstance(exc, httpx.HTTPStatusError):
        return exc.response.status_code in RETRYABLE_STATUS_CODES
    return isinstance(exc, httpx.TransportError)


def _log_before_sleep(retry_state: RetryCallState) -> None:
    exc = retry_state.outcome.exception() if retry_state.outcome else None
    sleep = retry_state.next_action.sleep if retry_state.next_action else 0.0
    logger.warning(
        f"Attempt {retry_state.attempt_number} failed ({type(exc).__name__}: {exc}); "
        f"retrying in {sleep:.1f}s"
    )


@dataclass(frozen=True)
class RetryPolicy:
    """Max attempts, exponential backoff and a retryable-error predicate."""
    max_attempts: int = 3
    backoff_min: float = 2.0
    backoff_max: float = 30.0
    multiplier: float = 1.0
    retry_on: Callable[[BaseException], bool] = field(default=is_retryable_http_error)

    @classmethod
    def from_settings(cls, settings: ConfluenceSettings) -> "RetryPolicy":
        return cls(
            max_attempts=max(1, settings.max_attempts),
            backoff_min=settings.backoff_min_seconds,
            backoff_max=settings.backoff_max_seconds,
        )

    @classmethod
    def no_retry(cls) -> "RetryPolicy":
        return cls(max_attempts=1, backoff_min=0.0, backoff_max=0.0)

    def retrying(self) -> AsyncRetrying:
        return AsyncRetrying(
            stop=stop_after_attempt(self.max_attempts),
            wait=wait_exponential(multiplier=self.multiplier, min=self.backoff_min, max=self.backoff_max),
            retry=retry_if_exception(self.retry_on),
            before_sleep=_log_before_sleep,
            reraise=True,
        )

    async def run(self, func: Callable[..., Awaitable[Any]], *args: Any, **kwargs: Any) -> Any:
        """Await ``func(*args, **kwargs)`` under this policy; the last error is re-raised."""
        return await self.retrying()(func, *args, **kwargs)
