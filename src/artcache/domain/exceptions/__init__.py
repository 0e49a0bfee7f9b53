"""Domain exceptions."""

from enum import Enum
from typing import Any


class DomainException(Exception):
    """Base exception for all domain exceptions."""

    # Hey future me, we store message as an attribute so code can inspect it without parsing
    # str(exception). Don't raise this directly - use a specific subclass so callers can catch
    # precisely (a store outage and a broken thumbnail are handled VERY differently).
    def __init__(self, message: str, *args: Any) -> None:
        super().__init__(message, *args)
        self.message = message


class ValidationException(DomainException):
    """Raised when input violates a domain rule (e.g. non-numeric object id)."""

    pass


class ArtStoreError(DomainException):
    """Raised when the image store cannot be read or written.

    This is a durable-state problem, NOT a best-effort gather failure. It is
    always surfaced to the caller of insert/get/get_sized.
    """

    def __init__(self, message: str, operation: str | None = None) -> None:
        super().__init__(message)
        self.operation = operation


class TranscodeFailure(Enum):
    """Why a thumbnail could not be produced."""

    INVALID_INPUT = "INVALID_INPUT"
    BACKEND_MISSING = "BACKEND_MISSING"  # Pillow not installed
    UNSUPPORTED_FORMAT = "UNSUPPORTED_FORMAT"
    DECODE_FAILED = "DECODE_FAILED"
    RESAMPLE_FAILED = "RESAMPLE_FAILED"
    ENCODE_FAILED = "ENCODE_FAILED"
    EMPTY_OUTPUT = "EMPTY_OUTPUT"


class TranscodeError(DomainException):
    """Raised by the transcoder. Callers treat it as "no thumbnail available"."""

    def __init__(self, reason: TranscodeFailure, message: str) -> None:
        super().__init__(f"{reason.value}: {message}")
        self.reason = reason


class ArtSourceError(DomainException):
    """Raised inside an art source when a provider lookup fails.

    Never leaves the gather pipeline - one broken provider yields zero
    candidates and the next provider is tried.
    """

    def __init__(self, provider: str, message: str) -> None:
        super().__init__(f"{provider}: {message}")
        self.provider = provider


__all__ = [
    "ArtSourceError",
    "ArtStoreError",
    "DomainException",
    "TranscodeError",
    "TranscodeFailure",
    "ValidationException",
]
