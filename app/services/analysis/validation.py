"""Schema-driven value coercion and payload validation.

Validation re-derives a payload from its schema (required properties present,
each value coerced to its declared type, undeclared properties dropped) and
compares the result with the original. Any divergence is a failure.
"""

from typing import Any

from app.services.analysis.schemas import get_schema

TRUE_STRINGS = ("true", "1", "yes")


def resolve_ref(definition: dict, schema: dict) -> dict:
    """Follow a local '#/definitions/<name>' reference."""
    ref = definition.get("$ref")
    if not ref:
        return definition
    if not ref.startswith("#/definitions/"):
        raise ValueError(f"Unsupported schema reference: {ref}")
    return schema["definitions"][ref.rsplit("/", 1)[-1]]


def set_value_by_type(definition: dict, value: Any, schema: dict) -> Any:
    """Coerce ``value`` to the type declared by ``definition``."""
    if value is None:
        return None
    definition = resolve_ref(definition, schema)
    kind = definition.get("type")

    if kind == "string":
        value = value if isinstance(value, str) else str(value)
        if "enum" in definition and value not in definition["enum"]:
            raise ValueError(f"{value!r} is not one of {definition['enum']}")
        return value
    if kind == "integer":
        return int(value)
    if kind == "number":
        return float(value)
    if kind == "boolean":
        if isinstance(value, str):
            return value.strip().lower() in TRUE_STRINGS
        return bool(value)
    if kind == "array":
        items = value if isinstance(value, list) else [value]
        item_definition = definition.get("items")
        if not item_definition:
            return list(items)
        return [set_value_by_type(item_definition, item, schema) for item in items]
    if kind == "object":
        if not isinstance(value, dict):
            raise TypeError(f"expected an object, got {type(value).__name__}")
        properties = definition.get("properties")
        if properties is None:
            return dict(value)
        missing = [name for name in definition.get("required", []) if value.get(name) is None]
        if missing:
            raise ValueError(f"missing required field(s): {', '.join(missing)}")
        return {
            name: set_value_by_type(properties[name], item, schema)
            for name, item in value.items()
            if name in properties
        }
    return value


def payload_errors(payload: dict | None, schema_version: str) -> dict[str, list[str]]:
    """Field-keyed messages for everything that breaks the schema."""
    if not isinstance(payload, dict):
        return {"payload": ["is not an object"]}

    schema = get_schema(schema_version)
    properties = schema["properties"]
    errors: dict[str, list[str]] = {}

    for name in schema.get("required", []):
        if payload.get(name) is None:
            errors.setdefault(name, []).append("can't be blank")

    for name, value in payload.items():
        if name not in properties:
            errors.setdefault(name, []).append("is not a schema property")
            continue
        try:
            derived = set_value_by_type(properties[name], value, schema)
        except (TypeError, ValueError, KeyError) as e:
            errors.setdefault(name, []).append(str(e))
            continue
        if derived != value:
            errors.setdefault(name, []).append("does not match its declared type")

    return errors


def validate(payload: dict | None, schema_version: str) -> bool:
    """True if the payload survives re-derivation from its schema unchanged."""
    return not payload_errors(payload, schema_version)
