"""Common repositories."""

from app.repositories.common.cache import ViewCacheRepository

__all__ = ["ViewCacheRepository"]
