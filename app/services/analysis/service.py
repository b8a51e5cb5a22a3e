"""Analysis metadata service - create-once lifecycle for HCA analysis records."""

import asyncio
from collections.abc import Callable

import duckdb
from loguru import logger

from app.errors import (
    ExternalFetchFailure,
    PayloadAssemblyError,
    SchemaValidationFailure,
    UnknownSchemaVersion,
)
from app.models.analysis import AnalysisMetadatum
from app.models.study import Study
from app.repositories.analysis import AnalysisMetadataRepository
from app.services.analysis.assembler import JobClient, PayloadAssembler
from app.services.analysis.validation import payload_errors
from firecloud_client import WorkspaceClient
from settings import DEFAULT_SCHEMA_VERSION


class AnalysisMetadataService:
    """Assemble, validate and persist analysis metadata for completed submissions.

    Records move Unvalidated -> Valid (persisted) or Invalid (rejected). An
    invalid record is never written and a valid one is never updated.
    """

    def __init__(
        self,
        repo: AnalysisMetadataRepository,
        client_factory: Callable[[], JobClient] = WorkspaceClient,
    ):
        self._repo = repo
        self._client_factory = client_factory
        logger.debug("AnalysisMetadataService initialized")

    def create(self, study: Study, submission_id: str, version: str = DEFAULT_SCHEMA_VERSION) -> AnalysisMetadatum:
        """Blocking entry point for the submission-completed background job."""
        return asyncio.run(self.create_async(study, submission_id, version))

    async def create_async(
        self, study: Study, submission_id: str, version: str = DEFAULT_SCHEMA_VERSION
    ) -> AnalysisMetadatum:
        metadatum = AnalysisMetadatum(study=study, submission_id=submission_id, version=version)

        await self._set_payload(metadatum)
        self._validate(metadatum)
        if metadatum.errors:
            logger.warning("Analysis metadata for submission {} rejected: {}", submission_id, metadatum.errors)
            raise SchemaValidationFailure(metadatum.errors)

        try:
            return self._repo.insert(metadatum)
        except duckdb.ConstraintException as e:
            # lost a race with another job for the same submission
            metadatum.add_error("submission_id", "is already taken")
            raise SchemaValidationFailure(metadatum.errors) from e

    async def _set_payload(self, metadatum: AnalysisMetadatum) -> None:
        """Pre-validation hook: compute the payload and name from FireCloud."""
        async with self._client_factory() as client:
            assembler = PayloadAssembler(client)
            try:
                metadatum.payload = await assembler.assemble(
                    metadatum.study, metadatum.submission_id, metadatum.version
                )
            except UnknownSchemaVersion as e:
                metadatum.add_error("version", e.message)
                return
            except ExternalFetchFailure as e:
                logger.error("Submission {}: {}", metadatum.submission_id, e.message)
                metadatum.add_error("payload", e.message)
                return
            except PayloadAssemblyError as e:
                logger.error("Submission {}: cannot compute {}: {}", metadatum.submission_id, e.field, e.message)
                metadatum.add_error(f"payload.{e.field}", e.message)
                return
        metadatum.name = metadatum.payload.get("name")

    def _validate(self, metadatum: AnalysisMetadatum) -> None:
        for field_name in ("payload", "version", "name", "submission_id"):
            if not getattr(metadatum, field_name) and not metadatum.errors.get(field_name):
                metadatum.add_error(field_name, "can't be blank")

        if metadatum.submission_id and self._repo.submission_exists(metadatum.submission_id):
            metadatum.add_error("submission_id", "is already taken")

        if metadatum.payload:
            for field_name, messages in payload_errors(metadatum.payload, metadatum.version).items():
                for message in messages:
                    metadatum.add_error(f"payload.{field_name}", message)
