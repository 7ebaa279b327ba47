"""
Retry mechanism for calls to the Yantra API.

Only connectivity-class failures are retried. Application-level rejections
(HTTP 4xx/5xx) surface on the first attempt.
"""

import asyncio
from typing import Any, Optional, Callable, Awaitable, Tuple

from sutra_shared.errors import SutraException
from sutra_shared.logging import get_logger


# Lowercased substrings identifying a transient connectivity failure.
TRANSIENT_SIGNATURES: Tuple[str, ...] = (
    "econnreset",
    "econnrefused",
    "etimedout",
    "enotfound",
    "enetunreach",
    "connection reset",
    "connection refused",
    "all connection attempts failed",
    "timed out",
    "host not found",
    "name or service not known",
    "nodename nor servname",
    "temporary failure in name resolution",
    "getaddrinfo failed",
    "network is unreachable",
    "network unreachable",
)


class RetryConfig:
    """Configuration for retry behavior."""

    def __init__(self,
                 max_retries: int = 3,
                 base_delay: float = 1.0):
        self.max_retries = max_retries
        self.base_delay = base_delay


def is_transient_message(message: str) -> bool:
    """Check whether an error message matches a transient network signature."""
    lowered = message.lower()
    return any(signature in lowered for signature in TRANSIENT_SIGNATURES)


def is_retryable(error: BaseException) -> bool:
    """Classify a failure as retryable.

    Sutra errors carry their own classification; anything else is judged by
    its message alone.
    """
    if isinstance(error, SutraException):
        return error.retryable
    return is_transient_message(str(error))


def _calculate_delay(attempt: int, config: RetryConfig) -> float:
    """Linear delay before retry ``attempt`` (1-indexed)."""
    return max(0.0, config.base_delay * attempt)


class RetryPolicy:
    """Run an async call, retrying classified failures with linear backoff."""

    def __init__(self,
                 config: Optional[RetryConfig] = None,
                 classifier: Callable[[BaseException], bool] = is_retryable,
                 on_retry: Optional[Callable[[int, BaseException], None]] = None,
                 name: str = "default"):
        self.config = config or RetryConfig()
        self.classifier = classifier
        self.on_retry = on_retry
        self.name = name
        self.logger = get_logger(f"retry.{name}")

    async def call(self, func: Callable[..., Awaitable[Any]], *args, **kwargs) -> Any:
        """Execute ``func`` with retries. The last failure is re-raised as is."""
        retry = 0
        while True:
            try:
                result = await func(*args, **kwargs)

                if retry > 0:
                    self.logger.info(
                        "Retry succeeded",
                        attempt=retry + 1,
                        operation=self.name
                    )

                return result

            except Exception as e:
                retryable = self.classifier(e)
                if not retryable or retry >= self.config.max_retries:
                    if retryable and retry > 0:
                        self.logger.error(
                            "All retry attempts exhausted",
                            attempts=retry + 1,
                            operation=self.name,
                            error=str(e)
                        )
                    raise

                retry += 1
                delay = _calculate_delay(retry, self.config)

                self.logger.warning(
                    "Retryable failure, waiting before next attempt",
                    retry=retry,
                    max_retries=self.config.max_retries,
                    delay=delay,
                    operation=self.name,
                    error=str(e)
                )
                if self.on_retry is not None:
                    self.on_retry(retry, e)

                await asyncio.sleep(delay)
