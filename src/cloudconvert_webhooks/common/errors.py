from typing import override

from pydantic import ValidationError


class ParseError(Exception):
    """Base class for webhook events that could not be trusted or parsed."""


class SignatureMismatch(ParseError):
    """The signature did not match the payload."""

    def __init__(self) -> None:
        super().__init__("Webhook signature does not match the payload")


class HexDecodeSignature(ParseError):
    """The provided signature string is not 32 bytes of hex."""

    def __init__(self, cause: ValueError):
        self.cause: ValueError = cause
        super().__init__(str(cause))

    @override
    def __str__(self):
        return f"Invalid webhook signature: {self.cause}"


class JsonDecodeError(ParseError):
    """The signed payload is not a well-formed webhook event."""

    def __init__(self, cause: ValidationError):
        self.cause: ValidationError = cause
        super().__init__(str(cause))

    @override
    def __str__(self):
        return f"Invalid webhook event: {self.cause.error_count()} validation error(s)"
