"""cloudconvert_webhooks - Verify and parse CloudConvert webhook events."""

from .common.errors import HexDecodeSignature, JsonDecodeError, ParseError, SignatureMismatch
from .common.schema_job import Job, Status, TaskStatus
from .config import WebhookSettings, get_settings
from .webhook import Event, EventKind, compute_signature, verify_event

__version__ = "0.1.0"

__all__ = [
    "Event",
    "EventKind",
    "Job",
    "Status",
    "TaskStatus",
    "ParseError",
    "SignatureMismatch",
    "HexDecodeSignature",
    "JsonDecodeError",
    "WebhookSettings",
    "compute_signature",
    "get_settings",
    "verify_event",
    "__version__",
]
