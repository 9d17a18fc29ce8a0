"""
Retry policies for the request executor.

A policy answers two questions for :class:`~dmm_client.api_client.DmmApiClient`:
whether a failed call may be repeated, and how long to wait first. Policies
hold no per-request state, so one instance serves every call of a client.
"""

import logging
import time
from abc import ABC, abstractmethod
from typing import Optional

from ..runtime.errors import ErrorHandler


logger = logging.getLogger(__name__)


class RetryPolicy(ABC):
    """
    Base class for retry policies.

    ``max_retries`` counts retries, not calls: with ``max_retries=3`` a
    persistently failing request is sent four times.
    """

    def __init__(self, max_retries: int = 3, base_delay: float = 1.0):
        """
        Args:
            max_retries: Retries allowed after the first call
            base_delay: Delay before the first retry, in seconds
        """
        self.max_retries = max_retries
        self.base_delay = base_delay

    @abstractmethod
    def calculate_delay(self, attempt: int) -> float:
        """Seconds to wait before retry number ``attempt`` (1-based)."""

    def should_retry(self, attempts: int, exception: BaseException) -> bool:
        """
        Decide whether another call is allowed.

        Args:
            attempts: Retries already made for this request
            exception: Error raised by the last call

        Returns:
            True if the error is transient and the budget is not spent
        """
        if attempts >= self.max_retries:
            return False
        return ErrorHandler.is_retryable(exception)

    def wait(self, attempt: int) -> float:
        """Sleep before retry ``attempt`` and return the delay used."""
        delay = self.calculate_delay(attempt)
        logger.debug(f"Sleeping {delay:.3f}s before retry {attempt}")
        time.sleep(delay)
        return delay


class ExponentialBackoff(RetryPolicy):
    """
    Delay grows geometrically: base_delay * factor ** (attempt - 1).

    With the default factor of 2 and a 1s base the waits are 1s, 2s, 4s, ...
    """

    def __init__(self, max_retries: int = 3, base_delay: float = 1.0, factor: float = 2.0,
                 max_delay: Optional[float] = None):
        """
        Args:
            max_retries: Retries allowed after the first call
            base_delay: Delay before the first retry, in seconds
            factor: Growth factor between consecutive delays
            max_delay: Upper bound on a single delay (None for unbounded)
        """
        super().__init__(max_retries, base_delay)
        self.factor = factor
        self.max_delay = max_delay

    def calculate_delay(self, attempt: int) -> float:
        delay = self.base_delay * (self.factor ** (attempt - 1))
        if self.max_delay is not None and delay > self.max_delay:
            return self.max_delay
        return delay
