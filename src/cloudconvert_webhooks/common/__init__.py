"""Common module - job snapshots and error types."""

from .errors import HexDecodeSignature, JsonDecodeError, ParseError, SignatureMismatch
from .schema_job import Job, JobsOutput, Status, TaskStatus

__all__ = [
    "Job",
    "JobsOutput",
    "Status",
    "TaskStatus",
    "ParseError",
    "SignatureMismatch",
    "HexDecodeSignature",
    "JsonDecodeError",
]
