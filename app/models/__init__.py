"""Models package - DDL and entities for all domains."""

from app.models.analysis import (
    ANALYSIS_METADATA_DDL,
    ANALYSIS_METADATA_INDEXES,
    AnalysisMetadatum,
)
from app.models.common import (
    VIEW_CACHE_DDL,
    VIEW_CACHE_INDEXES,
    Action,
    BaseEntity,
    CacheKey,
    CacheRemovalKey,
)
from app.models.study import FileType, Study, StudyFile

ALL_DDL = [
    # Common
    VIEW_CACHE_DDL,
    *VIEW_CACHE_INDEXES,
    # Analysis
    ANALYSIS_METADATA_DDL,
    *ANALYSIS_METADATA_INDEXES,
]

__all__ = [
    # Common
    "BaseEntity",
    "VIEW_CACHE_DDL",
    "VIEW_CACHE_INDEXES",
    "Action",
    "CacheKey",
    "CacheRemovalKey",
    # Study
    "FileType",
    "Study",
    "StudyFile",
    # Analysis
    "ANALYSIS_METADATA_DDL",
    "ANALYSIS_METADATA_INDEXES",
    "AnalysisMetadatum",
    # All DDL
    "ALL_DDL",
]
