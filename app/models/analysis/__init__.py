"""Analysis domain models - HCA analysis metadata."""

from app.models.analysis.metadatum import (
    ANALYSIS_METADATA_DDL,
    ANALYSIS_METADATA_INDEXES,
    AnalysisMetadatum,
)

__all__ = [
    "ANALYSIS_METADATA_DDL",
    "ANALYSIS_METADATA_INDEXES",
    "AnalysisMetadatum",
]
