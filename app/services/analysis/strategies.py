"""Payload property strategies - one named computation per HCA analysis property."""

from collections.abc import Callable
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from loguru import logger

from app.models.study import Study
from app.services.analysis.schemas import get_schema, parse_definitions, schema_url, task_mapping
from app.services.analysis.validation import set_value_by_type
from firecloud_client.workspaces import MethodConfigurationSchema, SubmissionSchema
from settings import ANALYSIS_ID_PREFIX


@dataclass
class SubmissionRecords:
    """Everything fetched for one submission; strategies read only from here."""

    study: Study
    submission_id: str
    version: str
    api_root: str
    submission: SubmissionSchema
    configuration: MethodConfigurationSchema
    raw_configuration: dict[str, Any] = field(default_factory=dict)
    workflows: list[dict[str, Any]] = field(default_factory=list)


Strategy = Callable[[SubmissionRecords], Any]

STRATEGIES: dict[str, Strategy] = {}


def strategy(name: str) -> Callable[[Strategy], Strategy]:
    """Register the computation for a payload property."""

    def register(fn: Strategy) -> Strategy:
        STRATEGIES[name] = fn
        return fn

    return register


def fallback(records: SubmissionRecords, name: str) -> Any:
    """Direct lookup by property name on the configuration; likely a miss."""
    logger.warning("No strategy for analysis property {}, trying direct lookup", name)
    return records.raw_configuration.get(name)


def _parse_time(value: str) -> datetime:
    return datetime.fromisoformat(value.replace("Z", "+00:00"))


def _unquote(value: str) -> str:
    return value.strip().strip('"')


@strategy("analysis_id")
def analysis_id(records: SubmissionRecords) -> str:
    return f"{ANALYSIS_ID_PREFIX}{records.submission_id}"


@strategy("analysis_run_type")
def analysis_run_type(records: SubmissionRecords) -> str:
    return "run"


@strategy("metadata_schema")
def metadata_schema(records: SubmissionRecords) -> str:
    return records.version


@strategy("core")
def core(records: SubmissionRecords) -> dict:
    return {
        "type": "analysis",
        "schema_url": schema_url(records.version),
        "schema_version": records.version,
    }


@strategy("name")
def name(records: SubmissionRecords) -> str:
    return records.configuration.name


@strategy("description")
def description(records: SubmissionRecords) -> str:
    method = records.configuration.method_repo_method
    return f"Analysis submission of {method.path} from Single Cell Portal"


@strategy("computational_method")
def computational_method(records: SubmissionRecords) -> str:
    return f"{records.api_root}/api/methods/{records.configuration.method_repo_method.path}"


@strategy("input_bundles")
def input_bundles(records: SubmissionRecords) -> list[str]:
    return [records.study.workspace_url]


@strategy("reference_bundle")
def reference_bundle(records: SubmissionRecords) -> str | None:
    """Bucket root of the configuration's reference input (or first gs:// input)."""
    gs_inputs = [
        (key, _unquote(value))
        for key, value in records.configuration.inputs.items()
        if _unquote(value).startswith("gs://")
    ]
    if not gs_inputs:
        return None
    references = [path for key, path in gs_inputs if "ref" in key.lower()]
    path = references[0] if references else gs_inputs[0][1]
    bucket = path[len("gs://"):].split("/", 1)[0]
    return f"gs://{bucket}"


@strategy("timestamp_start_utc")
def timestamp_start_utc(records: SubmissionRecords) -> str | None:
    return records.submission.submission_date


@strategy("timestamp_stop_utc")
def timestamp_stop_utc(records: SubmissionRecords) -> str | None:
    """Latest end time across workflows."""
    stop = None
    for workflow in records.workflows:
        end_time = workflow.get("end")
        if not end_time:
            continue
        if stop is None or _parse_time(end_time) > _parse_time(stop):
            stop = end_time
    return stop


@strategy("inputs")
def inputs(records: SubmissionRecords) -> list[dict]:
    return [
        {"name": input_name, "value": value}
        for workflow in records.workflows
        for input_name, value in (workflow.get("inputs") or {}).items()
    ]


@strategy("outputs")
def outputs(records: SubmissionRecords) -> list[dict]:
    result = []
    for workflow in records.workflows:
        for value in (workflow.get("outputs") or {}).values():
            # scattered tasks report a list of files per output
            for path in value if isinstance(value, list) else [value]:
                if not isinstance(path, str):
                    continue
                basename = path.rsplit("/", 1)[-1]
                result.append(
                    {
                        "name": basename,
                        "file_path": path,
                        "format": basename.rsplit(".", 1)[-1] if "." in basename else None,
                    }
                )
    return result


def workflow_call_attributes(records: SubmissionRecords) -> list[dict]:
    """One task record per call of every workflow.

    A workflow that cannot be mapped is logged and skipped; the rest are kept.
    """
    schema = get_schema(records.version)
    definitions = parse_definitions(records.version, "definitions", "task")
    mapping = task_mapping(records.version)
    call_metadata = []

    for workflow in records.workflows:
        try:
            workflow_calls = []
            for task, task_attributes in (workflow.get("calls") or {}).items():
                call = {"name": task}
                # one entry per call unless scattered; the first shard stands in for the task
                attributes = task_attributes[0] if task_attributes else {}
                for prop, prop_definition in definitions["properties"].items():
                    location = mapping.get(prop)
                    if location is None:
                        logger.info("Trying unmappable HCA analysis.task property: {}", prop)
                        value = attributes.get(prop)
                    else:
                        value = location.resolve(attributes)
                    if call.get(prop) is None:
                        call[prop] = set_value_by_type(prop_definition, value, schema)
                workflow_calls.append(call)
            call_metadata.extend(workflow_calls)
        except Exception as e:
            logger.error("Error retrieving call metadata for workflow {}: {}", workflow.get("id"), e)

    return call_metadata


@strategy("tasks")
def tasks(records: SubmissionRecords) -> list[dict]:
    return workflow_call_attributes(records)
