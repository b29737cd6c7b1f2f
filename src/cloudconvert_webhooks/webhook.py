"""Verifying and parsing CloudConvert webhook calls.

An :class:`Event` can only be obtained from :meth:`Event.from_json`, which
checks the HMAC-SHA256 signature before looking at the payload:

    event = Event.from_json(
        request_body,
        request.headers["CloudConvert-Signature"],
        signing_secret,
    )
"""

import binascii
import hashlib
import hmac
from enum import Enum
from typing import override

from pydantic import BaseModel, ValidationError

from .common.errors import HexDecodeSignature, JsonDecodeError, SignatureMismatch
from .common.schema_job import Job

SIGNATURE_SIZE = 32

_VERIFIED = object()


class EventKind(str, Enum):
    JOB_CREATED = "job.created"
    JOB_FINISHED = "job.finished"
    JOB_FAILED = "job.failed"


class _EventBody(BaseModel):
    event: EventKind
    job: Job


def compute_signature(payload: bytes, signing_secret: bytes) -> str:
    """Return the lowercase hex HMAC-SHA256 of ``payload``, as CloudConvert sends it."""
    return hmac.new(signing_secret, payload, hashlib.sha256).hexdigest()


def _decode_signature(signature: str) -> bytes:
    try:
        expected = binascii.unhexlify(signature)
    except ValueError as e:
        # binascii.Error for bad digits or odd length, ValueError for non-ASCII
        raise HexDecodeSignature(e) from e

    if len(expected) != SIGNATURE_SIZE:
        cause = ValueError(
            f"Signature must be {SIGNATURE_SIZE} bytes, got {len(expected)}"
        )
        raise HexDecodeSignature(cause) from cause

    return expected


class Event:
    """A signed webhook event.

    Instances are immutable and can only be created with :meth:`from_json`,
    so holding one means the payload was signed with the shared secret.
    """

    __slots__ = ("_event", "_job", "_signature")

    _event: EventKind
    _job: Job
    _signature: bytes

    def __init__(self, event: EventKind, job: Job, signature: bytes, *, _token: object = None):
        if _token is not _VERIFIED:
            raise TypeError("Event instances are created by Event.from_json")
        object.__setattr__(self, "_event", event)
        object.__setattr__(self, "_job", job)
        object.__setattr__(self, "_signature", signature)

    @override
    def __setattr__(self, name: str, value: object) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    @override
    def __delattr__(self, name: str) -> None:
        raise AttributeError(f"{type(self).__name__} is immutable")

    # Immutable, so copies can share the instance
    def __copy__(self) -> "Event":
        return self

    def __deepcopy__(self, memo: dict[int, object]) -> "Event":
        return self

    @override
    def __repr__(self) -> str:
        return f"Event(event={self._event.value!r}, job_id={self._job.id!r})"

    @property
    def event(self) -> EventKind:
        return self._event

    @property
    def job(self) -> Job:
        return self._job

    @property
    def signature(self) -> bytes:
        """The computed HMAC-SHA256 of the payload (32 bytes)."""
        return self._signature

    @classmethod
    def from_json(cls, payload: bytes, signature: str, signing_secret: bytes) -> "Event":
        """Verify the signature of a webhook payload and parse it.

        Args:
            payload: Raw request body, exactly as received.
            signature: Value of the ``CloudConvert-Signature`` header (hex).
            signing_secret: The webhook signing secret.

        Returns:
            The verified event.

        Raises:
            HexDecodeSignature: ``signature`` is not 32 bytes of hex.
            SignatureMismatch: ``signature`` does not match the payload.
            JsonDecodeError: The payload is signed but is not a valid event.
        """
        expected = _decode_signature(signature)

        actual = hmac.new(signing_secret, payload, hashlib.sha256).digest()
        if not hmac.compare_digest(actual, expected):
            raise SignatureMismatch()

        try:
            body = _EventBody.model_validate_json(payload)
        except ValidationError as e:
            raise JsonDecodeError(e) from e

        return cls(body.event, body.job, actual, _token=_VERIFIED)


def verify_event(payload: bytes, signature: str, signing_secret: bytes) -> Event:
    """Shortcut for :meth:`Event.from_json`."""
    return Event.from_json(payload, signature, signing_secret)
