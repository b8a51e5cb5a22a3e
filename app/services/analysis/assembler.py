"""Metadata payload assembler - FireCloud submission records to HCA analysis payload."""

import asyncio
from typing import Any, Protocol

from loguru import logger

from app.errors import ExternalFetchFailure, PayloadAssemblyError
from app.models.study import Study
from app.services.analysis.schemas import get_schema
from app.services.analysis.strategies import STRATEGIES, SubmissionRecords, fallback
from app.services.analysis.validation import set_value_by_type
from firecloud_client.base import safe_request
from firecloud_client.workspaces import MethodConfigurationSchema, SubmissionSchema


class JobClient(Protocol):
    """The FireCloud calls payload assembly needs."""

    api_root: str

    async def get_submission(self, project: str, workspace: str, submission_id: str) -> dict: ...

    async def get_configuration(self, project: str, workspace: str, namespace: str, name: str) -> dict: ...

    async def get_submission_workflow(
        self, project: str, workspace: str, submission_id: str, workflow_id: str
    ) -> dict: ...


class PayloadAssembler:
    """Build analysis payloads from an injected FireCloud client."""

    def __init__(self, client: JobClient):
        self._client = client

    async def collect(self, study: Study, submission_id: str, schema_version: str) -> SubmissionRecords:
        """Fetch submission, configuration and every workflow of the submission.

        Submission and configuration failures raise ExternalFetchFailure; a
        failed workflow fetch drops only that workflow.
        """
        project, workspace = study.firecloud_project, study.firecloud_workspace

        try:
            submission = SubmissionSchema.model_validate(
                await self._client.get_submission(project, workspace, submission_id)
            )
        except Exception as e:
            raise ExternalFetchFailure(f"could not load submission {submission_id}: {e}", "submission") from e

        try:
            raw_configuration = await self._client.get_configuration(
                project,
                workspace,
                submission.method_configuration_namespace,
                submission.method_configuration_name,
            )
            configuration = MethodConfigurationSchema.model_validate(raw_configuration)
        except Exception as e:
            raise ExternalFetchFailure(
                f"could not load configuration {submission.method_configuration_namespace}/"
                f"{submission.method_configuration_name}: {e}",
                "configuration",
            ) from e

        workflow_ids = [w.workflow_id for w in submission.workflows if w.workflow_id]
        fetched = await asyncio.gather(
            *(
                safe_request(self._client.get_submission_workflow(project, workspace, submission_id, workflow_id))
                for workflow_id in workflow_ids
            )
        )
        workflows = [w for w in fetched if w is not None]
        if len(workflows) < len(workflow_ids):
            logger.warning(
                "Submission {}: {} of {} workflows could not be loaded",
                submission_id,
                len(workflow_ids) - len(workflows),
                len(workflow_ids),
            )

        return SubmissionRecords(
            study=study,
            submission_id=submission_id,
            version=schema_version,
            api_root=self._client.api_root,
            submission=submission,
            configuration=configuration,
            raw_configuration=raw_configuration,
            workflows=workflows,
        )

    @staticmethod
    def build(records: SubmissionRecords) -> dict[str, Any]:
        """Evaluate each schema property's strategy and coerce it to its declared type."""
        schema = get_schema(records.version)
        payload: dict[str, Any] = {}

        for prop, definition in schema["properties"].items():
            compute = STRATEGIES.get(prop)
            try:
                value = compute(records) if compute else fallback(records, prop)
                payload[prop] = set_value_by_type(definition, value, schema)
            except Exception as e:
                raise PayloadAssemblyError(prop, str(e)) from e

        return payload

    async def assemble(self, study: Study, submission_id: str, schema_version: str) -> dict[str, Any]:
        """Payload for a completed submission under ``schema_version``."""
        get_schema(schema_version)
        records = await self.collect(study, submission_id, schema_version)
        payload = self.build(records)
        logger.info(
            "Assembled analysis payload for submission {}: {} tasks, {} outputs",
            submission_id,
            len(payload.get("tasks") or []),
            len(payload.get("outputs") or []),
        )
        return payload
