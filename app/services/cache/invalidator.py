"""Cache invalidator - purges derived view entries when study data changes."""

from loguru import logger

from app.models.common import CacheRemovalKey
from app.repositories.common import ViewCacheRepository


class CacheInvalidator:
    """Scoped removal of view cache entries.

    Matching goes through the view_cache index columns, so a removal costs
    O(matching keys) rather than a scan of every stored key. Entries written
    while a removal runs are not excluded and survive until the next one.
    """

    def __init__(self, cache_repo: ViewCacheRepository):
        self._cache = cache_repo
        logger.debug("CacheInvalidator initialized")

    def preview(self, removal_key: CacheRemovalKey) -> list[str]:
        """Keys that ``invalidate`` would remove right now."""
        return self._cache.keys_in_scope(removal_key)

    def invalidate(self, removal_key: CacheRemovalKey) -> int:
        """Delete every entry in scope and return how many were removed."""
        removed = self._cache.delete_scope(removal_key)
        if not removed:
            logger.debug("Nothing cached for {}", removal_key)
        return removed
