"""Analysis metadata repository - persisted HCA analysis records."""

import json
from datetime import datetime

from loguru import logger

from app.models.analysis import AnalysisMetadatum
from app.repositories.base import BaseRepository


class AnalysisMetadataRepository(BaseRepository):
    """Repository for analysis metadata records. Insert-only; records are never updated."""

    def submission_exists(self, submission_id: str) -> bool:
        row = self.fetchone(
            "SELECT COUNT(*) FROM analysis_metadata WHERE submission_id = ?",
            [submission_id],
        )
        return row[0] > 0

    def insert(self, metadatum: AnalysisMetadatum) -> AnalysisMetadatum:
        """Persist a validated record and stamp its creation time."""
        self._check_writable("insert analysis metadata")

        created_at = datetime.utcnow()
        self.execute(
            """
            INSERT INTO analysis_metadata (submission_id, study, version, name, payload, created_at)
            VALUES (?, ?, ?, ?, ?, ?)
            """,
            [
                metadatum.submission_id,
                metadatum.study.url_safe_name,
                metadatum.version,
                metadatum.name,
                json.dumps(metadatum.payload),
                created_at,
            ],
        )
        metadatum.created_at = created_at
        logger.info("Analysis metadata saved: study={}, submission={}", metadatum.study.url_safe_name, metadatum.submission_id)
        return metadatum

    def get_payload(self, submission_id: str) -> dict | None:
        row = self.fetchone(
            "SELECT payload FROM analysis_metadata WHERE submission_id = ?",
            [submission_id],
        )
        if row:
            return json.loads(row[0])
        return None

    def list_for_study(self, study: str) -> list[dict]:
        """Summaries of a study's analyses, newest first."""
        rows = self.fetchall(
            """
            SELECT submission_id, version, name, created_at
            FROM analysis_metadata WHERE study = ?
            ORDER BY created_at DESC
            """,
            [study],
        )
        return [{"submission_id": r[0], "version": r[1], "name": r[2], "created_at": r[3]} for r in rows]
