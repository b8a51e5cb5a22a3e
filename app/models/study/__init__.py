"""Study domain models - studies and their uploaded files."""

from app.models.study.entities import FileType, Study, StudyFile, url_safe

__all__ = [
    "FileType",
    "Study",
    "StudyFile",
    "url_safe",
]
