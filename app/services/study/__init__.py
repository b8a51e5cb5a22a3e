"""Study services."""

from app.services.study.events import StudyEvents

__all__ = ["StudyEvents"]
