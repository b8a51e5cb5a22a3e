"""View cache services - keys, invalidation, background removal, read-through views."""

from app.services.cache.invalidator import CacheInvalidator
from app.services.cache.jobs import CacheRemovalJob, CacheRemovalQueue
from app.services.cache.keys import (
    ViewParams,
    compute_key,
    genes_hash,
    removal_key_for_file,
    removal_key_for_study,
)
from app.services.cache.views import ViewCache

__all__ = [
    "CacheInvalidator",
    "CacheRemovalJob",
    "CacheRemovalQueue",
    "ViewCache",
    "ViewParams",
    "compute_key",
    "genes_hash",
    "removal_key_for_file",
    "removal_key_for_study",
]
