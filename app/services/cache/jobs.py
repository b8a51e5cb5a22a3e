"""Background cache removal - queued invalidation on a worker pool."""

from concurrent.futures import Future, ThreadPoolExecutor

from loguru import logger
from tenacity import (
    RetryError,
    Retrying,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from app.errors import CacheStoreUnavailable
from app.models.common import CacheRemovalKey
from app.services.cache.invalidator import CacheInvalidator
from settings import CACHE_REMOVAL_ATTEMPTS, CACHE_REMOVAL_WORKERS


class CacheRemovalJob:
    """One invalidation run, retried while the store is unavailable."""

    def __init__(
        self,
        removal_key: CacheRemovalKey,
        attempts: int = CACHE_REMOVAL_ATTEMPTS,
        backoff: float = 1.0,
    ):
        self.removal_key = removal_key
        self._attempts = attempts
        self._backoff = backoff

    def perform(self, invalidator: CacheInvalidator) -> int:
        """Run the removal. Failures are logged, never raised; returns entries removed."""
        retrying = Retrying(
            stop=stop_after_attempt(self._attempts),
            wait=wait_exponential(multiplier=self._backoff, min=0, max=30),
            retry=retry_if_exception_type(CacheStoreUnavailable),
        )
        try:
            for attempt in retrying:
                with attempt:
                    if attempt.retry_state.attempt_number > 1:
                        logger.warning("Retrying cache removal {} (attempt {})", self.removal_key, attempt.retry_state.attempt_number)
                    return invalidator.invalidate(self.removal_key)
        except RetryError as e:
            logger.error("Cache removal {} gave up after {} attempts: {}", self.removal_key, self._attempts, e.last_attempt.exception())
        except Exception as e:
            logger.exception("Cache removal {} failed: {}", self.removal_key, e)
        return 0


class CacheRemovalQueue:
    """Fire-and-forget dispatch of removal jobs off the request path."""

    def __init__(
        self,
        invalidator: CacheInvalidator,
        max_workers: int = CACHE_REMOVAL_WORKERS,
        attempts: int = CACHE_REMOVAL_ATTEMPTS,
        backoff: float = 1.0,
    ):
        self._invalidator = invalidator
        self._attempts = attempts
        self._backoff = backoff
        self._executor = ThreadPoolExecutor(max_workers=max_workers, thread_name_prefix="cache-removal")
        logger.info("CacheRemovalQueue: max_workers={}", max_workers)

    def enqueue(self, removal_key: CacheRemovalKey | None) -> Future | None:
        """Schedule a removal; the future resolves to the number of entries removed."""
        if removal_key is None:
            return None
        job = CacheRemovalJob(removal_key, attempts=self._attempts, backoff=self._backoff)
        logger.info("Queued cache removal: {}", removal_key)
        return self._executor.submit(job.perform, self._invalidator)

    def shutdown(self, wait: bool = True) -> None:
        self._executor.shutdown(wait=wait)
