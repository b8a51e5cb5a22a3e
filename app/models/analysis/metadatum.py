"""Analysis metadatum - HCA formatted metadata for a FireCloud submission.

https://github.com/HumanCellAtlas/metadata-schema/blob/master/json_schema/analysis.json
"""

from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from app.models.common import BaseEntity
from app.models.study.entities import Study

ANALYSIS_METADATA_DDL = """
CREATE TABLE IF NOT EXISTS analysis_metadata (
    submission_id VARCHAR PRIMARY KEY,
    study VARCHAR NOT NULL,
    version VARCHAR NOT NULL,
    name VARCHAR NOT NULL,
    payload JSON NOT NULL,
    created_at TIMESTAMP NOT NULL,
    UNIQUE (study, submission_id)
)
"""

ANALYSIS_METADATA_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_analysis_metadata_study ON analysis_metadata(study)",
]

ENTITY_NAME = "analysis"
ENTITY_FILENAME = ENTITY_NAME + ".json"


@dataclass
class AnalysisMetadatum(BaseEntity):
    """One analysis record; payload is set once before validation and never updated."""

    study: Study
    submission_id: str
    version: str
    name: str | None = None
    payload: dict[str, Any] | None = None
    created_at: datetime | None = None
    errors: dict[str, list[str]] = field(default_factory=dict)

    @property
    def filename(self) -> str:
        return ENTITY_FILENAME

    @property
    def entity(self) -> str:
        return ENTITY_NAME

    @property
    def persisted(self) -> bool:
        return self.created_at is not None

    def add_error(self, field_name: str, message: str) -> None:
        self.errors.setdefault(field_name, []).append(message)
