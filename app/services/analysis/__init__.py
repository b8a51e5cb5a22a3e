"""Analysis metadata services - schemas, payload assembly, validation, lifecycle."""

from app.services.analysis.assembler import PayloadAssembler
from app.services.analysis.schemas import get_schema, task_mapping
from app.services.analysis.service import AnalysisMetadataService
from app.services.analysis.validation import payload_errors, validate

__all__ = [
    "AnalysisMetadataService",
    "PayloadAssembler",
    "get_schema",
    "payload_errors",
    "task_mapping",
    "validate",
]
