"""
Error Handler - Retry with Exponential Backoff.

Design Notes:
    - Attempts and delays come from ResilienceConfig
    - ExportError subclasses are permanent and never retried
    - The last underlying exception is chained onto RetryExhausted
"""

from __future__ import annotations

import logging
import time
from typing import Callable, Optional, Tuple, Type, TypeVar

from record_exporter.config.models import ResilienceConfig
from record_exporter.domain.errors import ExportError

logger = logging.getLogger(__name__)

T = TypeVar("T")


class RetryExhausted(Exception):
    """Raised when all retry attempts are exhausted."""

    def __init__(self, message: str, attempts: int) -> None:
        super().__init__(message)
        self.attempts = attempts


class ErrorHandler:
    """Retries transient failures of idempotent operations."""

    def __init__(
        self,
        config: Optional[ResilienceConfig] = None,
        retryable_exceptions: Tuple[Type[BaseException], ...] = (Exception,),
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        """
        Initialize error handler.

        Args:
            config: Attempts and backoff settings
            retryable_exceptions: Exception types considered transient
            sleep: Delay function, replaceable in tests
        """
        self.config = config or ResilienceConfig()
        self.retryable_exceptions = retryable_exceptions
        self._sleep = sleep

    def retry(
        self,
        func: Callable[[], T],
        operation_name: str = "operation",
    ) -> T:
        """
        Execute ``func`` with retry and exponential backoff.

        Args:
            func: Idempotent operation
            operation_name: Name for logging

        Returns:
            Result of the first successful attempt

        Raises:
            ExportError: Immediately, without retrying
            RetryExhausted: When all attempts fail
        """
        last_exception: Optional[BaseException] = None
        max_attempts = self.config.max_attempts

        for attempt in range(1, max_attempts + 1):
            try:
                result = func()
                if attempt > 1:
                    logger.info(f"{operation_name} succeeded on attempt {attempt}")
                return result
            except ExportError:
                raise
            except self.retryable_exceptions as e:
                last_exception = e
                if attempt < max_attempts:
                    delay = self._calculate_delay(attempt)
                    logger.warning(
                        f"{operation_name} failed (attempt {attempt}/{max_attempts}), "
                        f"retrying in {delay:.2f}s: {e}"
                    )
                    self._sleep(delay)
                else:
                    logger.error(f"{operation_name} failed after {attempt} attempts: {e}")

        raise RetryExhausted(
            f"{operation_name} failed after {max_attempts} attempts: {last_exception}",
            attempts=max_attempts,
        ) from last_exception

    def _calculate_delay(self, attempt: int) -> float:
        delay = self.config.base_delay_seconds * (2 ** (attempt - 1))
        return min(delay, self.config.max_delay_seconds)
