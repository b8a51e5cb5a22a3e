"""Services package - service class exports."""

from app.services.analysis import AnalysisMetadataService, PayloadAssembler
from app.services.cache import CacheInvalidator, CacheRemovalQueue, ViewCache
from app.services.study import StudyEvents

__all__ = [
    "AnalysisMetadataService",
    "CacheInvalidator",
    "CacheRemovalQueue",
    "PayloadAssembler",
    "StudyEvents",
    "ViewCache",
]
