"""Common models - base classes and shared tables."""

from app.models.common.base import BaseEntity
from app.models.common.cache import (
    VIEW_CACHE_DDL,
    VIEW_CACHE_INDEXES,
    Action,
    CacheKey,
    CacheRemovalKey,
)

__all__ = [
    "BaseEntity",
    "VIEW_CACHE_DDL",
    "VIEW_CACHE_INDEXES",
    "Action",
    "CacheKey",
    "CacheRemovalKey",
]
