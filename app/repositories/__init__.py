"""Repositories package - data access layer for our database."""

from app.repositories.analysis import AnalysisMetadataRepository
from app.repositories.base import BaseRepository
from app.repositories.common import ViewCacheRepository
from app.repositories.db import (
    close_db,
    connect,
    get_db,
    init_tables,
)

__all__ = [
    # DB
    "get_db",
    "close_db",
    "connect",
    "init_tables",
    # Base
    "BaseRepository",
    # Common
    "ViewCacheRepository",
    # Analysis
    "AnalysisMetadataRepository",
]
