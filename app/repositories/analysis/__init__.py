"""Analysis repositories."""

from app.repositories.analysis.metadatum import AnalysisMetadataRepository

__all__ = ["AnalysisMetadataRepository"]
