"""Versioned HCA analysis schemas and FireCloud field mappings.

Each schema version registers a JSON-schema-like definition and a task field
map from HCA task properties to locations in FireCloud call metadata.
"""

from dataclasses import dataclass
from typing import Any

from app.errors import UnknownSchemaVersion


@dataclass(frozen=True)
class Direct:
    """Top-level field of an external record."""

    name: str

    def resolve(self, record: dict) -> Any:
        return record.get(self.name)

    def __str__(self) -> str:
        return self.name


@dataclass(frozen=True)
class Nested:
    """Child field of a mapping held under ``parent``."""

    parent: str
    child: str

    def resolve(self, record: dict) -> Any:
        parent = record.get(self.parent)
        if not isinstance(parent, dict):
            return None
        return parent.get(self.child)

    def __str__(self) -> str:
        return f"{self.parent}/{self.child}"


FieldPath = Direct | Nested


SCHEMA_URL_TEMPLATE = "https://raw.githubusercontent.com/HumanCellAtlas/metadata-schema/{version}/json_schema/analysis.json"

_STRING = {"type": "string"}

ANALYSIS_SCHEMA_4_6_1: dict[str, Any] = {
    "$schema": "http://json-schema.org/draft-04/schema#",
    "id": SCHEMA_URL_TEMPLATE.format(version="4.6.1"),
    "description": "A single analysis bundle.",
    "type": "object",
    "required": [
        "analysis_id",
        "analysis_run_type",
        "computational_method",
        "core",
        "input_bundles",
        "inputs",
        "metadata_schema",
        "outputs",
        "tasks",
        "timestamp_start_utc",
        "timestamp_stop_utc",
    ],
    "properties": {
        "analysis_id": _STRING,
        "analysis_run_type": {"type": "string", "enum": ["run", "copy-forward"]},
        "computational_method": _STRING,
        "core": {
            "type": "object",
            "required": ["type", "schema_url", "schema_version"],
            "properties": {
                "type": _STRING,
                "schema_url": _STRING,
                "schema_version": _STRING,
            },
        },
        "description": _STRING,
        "input_bundles": {"type": "array", "items": _STRING},
        "inputs": {"type": "array", "items": {"$ref": "#/definitions/parameter"}},
        "metadata_schema": _STRING,
        "name": _STRING,
        "outputs": {"type": "array", "items": {"$ref": "#/definitions/file"}},
        "reference_bundle": _STRING,
        "tasks": {"type": "array", "items": {"$ref": "#/definitions/task"}},
        "timestamp_start_utc": {"type": "string", "format": "date-time"},
        "timestamp_stop_utc": {"type": "string", "format": "date-time"},
    },
    "definitions": {
        "parameter": {
            "type": "object",
            "required": ["name"],
            "properties": {"name": _STRING, "value": _STRING},
        },
        "file": {
            "type": "object",
            "required": ["name", "file_path"],
            "properties": {"name": _STRING, "file_path": _STRING, "format": _STRING},
        },
        "task": {
            "type": "object",
            "required": ["name"],
            "properties": {
                "cpus": {"type": "integer"},
                "disk_size": _STRING,
                "docker_image": _STRING,
                "log_err": _STRING,
                "log_out": _STRING,
                "memory": _STRING,
                "name": _STRING,
                "start_time": {"type": "string", "format": "date-time"},
                "stop_time": {"type": "string", "format": "date-time"},
                "zone": _STRING,
            },
        },
    },
}

SCHEMAS: dict[str, dict[str, Any]] = {
    "4.6.1": ANALYSIS_SCHEMA_4_6_1,
}

TASK_FIELD_MAPS: dict[str, dict[str, FieldPath]] = {
    "4.6.1": {
        "cpus": Nested("runtimeAttributes", "cpu"),
        "disk_size": Nested("runtimeAttributes", "disks"),
        "docker_image": Nested("runtimeAttributes", "docker"),
        "log_err": Direct("stderr"),
        "log_out": Direct("stdout"),
        "memory": Nested("runtimeAttributes", "memory"),
        "name": Direct("name"),
        "start_time": Direct("start"),
        "stop_time": Direct("end"),
        "zone": Nested("runtimeAttributes", "zones"),
    },
}


def get_schema(version: str) -> dict[str, Any]:
    try:
        return SCHEMAS[version]
    except KeyError:
        raise UnknownSchemaVersion(version) from None


def schema_url(version: str) -> str:
    return get_schema(version)["id"]


def parse_definitions(version: str, key: str, field: str | None = None) -> Any:
    """Pull a section out of a schema, e.g. ('definitions', 'task') or ('required')."""
    section = get_schema(version)[key]
    return section[field] if field else section


def task_mapping(version: str, direction: str = "HCA") -> dict[str, Any]:
    """Task field map for a version.

    'HCA' maps HCA property -> FireCloud path; 'FireCloud' maps the path string
    back to the HCA property.
    """
    try:
        mapping = TASK_FIELD_MAPS[version]
    except KeyError:
        raise UnknownSchemaVersion(version) from None
    if direction == "HCA":
        return dict(mapping)
    if direction == "FireCloud":
        return {str(path): prop for prop, path in mapping.items()}
    raise ValueError(f"Unknown mapping direction: {direction}")
