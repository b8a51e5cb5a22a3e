"""Dependency Injection container - initialized at app startup."""

import duckdb

from app.repositories.analysis import AnalysisMetadataRepository
from app.repositories.common import ViewCacheRepository
from app.repositories.db import close_db
from app.services.analysis import AnalysisMetadataService
from app.services.cache import CacheInvalidator, CacheRemovalQueue, ViewCache
from app.services.study import StudyEvents


class Container:
    """Application DI container - holds all singleton instances."""

    _instance = None
    _initialized = False

    def __new__(cls):
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def init(self, conn: duckdb.DuckDBPyConnection | None = None) -> None:
        """Initialize all dependencies. Call once at app startup."""
        if self._initialized:
            return

        # Repositories (singletons)
        self._cache_repo = ViewCacheRepository(read_only=False, conn=conn)
        self._analysis_repo = AnalysisMetadataRepository(read_only=False, conn=conn)

        # Services (with injected repos)
        self.view_cache = ViewCache(cache_repo=self._cache_repo)
        self.invalidator = CacheInvalidator(cache_repo=self._cache_repo)
        self.removal_queue = CacheRemovalQueue(invalidator=self.invalidator)
        self.study_events = StudyEvents(removal_queue=self.removal_queue)
        self.analysis_metadata = AnalysisMetadataService(repo=self._analysis_repo)

        self._initialized = True

    def shutdown(self) -> None:
        """Drain queued cache removals and close the thread-local connection."""
        if self._initialized:
            self.removal_queue.shutdown(wait=True)
            close_db()
            self._initialized = False


# Global container instance
container = Container()
