"""Read-through cache for rendered study views."""

from collections.abc import Callable

from loguru import logger

from app.errors import CacheStoreUnavailable
from app.models.common import CacheKey
from app.models.study import Study
from app.repositories.common import ViewCacheRepository
from app.services.cache.keys import ViewParams, compute_key
from settings import CACHE_VIEW_NAMESPACE


class ViewCache:
    """Serve cached artifacts, rendering and storing on a miss."""

    def __init__(self, cache_repo: ViewCacheRepository, view_namespace: str = CACHE_VIEW_NAMESPACE):
        self._cache = cache_repo
        self._namespace = view_namespace
        logger.debug("ViewCache initialized: namespace={}", view_namespace)

    def key_for(self, study: Study, action: str, params: ViewParams) -> CacheKey:
        return compute_key(self._namespace, study.url_safe_name, action, params)

    def fetch(self, study: Study, action: str, params: ViewParams, render: Callable[[], bytes]) -> bytes:
        """Cached artifact for a view, rendering it on a miss.

        A store outage degrades to rendering without caching.
        """
        key = self.key_for(study, action, params)
        try:
            cached = self._cache.read(key)
        except CacheStoreUnavailable as e:
            logger.warning("{}; rendering {} uncached", e.message, key)
            return render()
        if cached is not None:
            return cached

        artifact = render()
        try:
            self._cache.write(key, artifact)
        except CacheStoreUnavailable as e:
            logger.warning("{}; {} not stored", e.message, key)
        return artifact
