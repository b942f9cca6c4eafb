"""
Error codes, exception types and check outcomes for checksum-attest.

Error codes are stable strings so that logged failures can be matched
by log pipelines without parsing messages.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Union


class ErrorCode(str, Enum):
    """
    Failure codes raised or logged by checksum-attest.
    """
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UNSUPPORTED_ALGORITHM = "UNSUPPORTED_ALGORITHM"
    PROVIDER_INIT_FAILED = "PROVIDER_INIT_FAILED"
    ARTIFACT_READ_FAILED = "ARTIFACT_READ_FAILED"
    CHECKSUM_READ_FAILED = "CHECKSUM_READ_FAILED"
    HOST_RESOLUTION_FAILED = "HOST_RESOLUTION_FAILED"
    MISSING_CONTEXT = "MISSING_CONTEXT"
    SIGNING_FAILED = "SIGNING_FAILED"


class ChecksumAttestError(Exception):
    """
    Base error with a typed code and audit details.
    """
    code: ErrorCode = ErrorCode.INTERNAL_ERROR

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def to_dict(self) -> dict[str, Any]:
        return {
            "code": self.code.value,
            "message": self.message,
            "details": self.details,
        }


class UnsupportedAlgorithmError(ChecksumAttestError):
    """Requested hash algorithm identifier is not recognized."""
    code = ErrorCode.UNSUPPORTED_ALGORITHM


class ProviderInitError(ChecksumAttestError):
    """Hash provider could not be constructed for a known algorithm."""
    code = ErrorCode.PROVIDER_INIT_FAILED


class SigningError(ChecksumAttestError):
    """Record could not be signed (bad key material, unknown key type)."""
    code = ErrorCode.SIGNING_FAILED


class RecoverableError(ChecksumAttestError):
    """
    Failure that the verifier converts into an "unavailable" outcome
    instead of propagating.
    """


class ArtifactReadError(RecoverableError):
    code = ErrorCode.ARTIFACT_READ_FAILED

    @property
    def path(self) -> str:
        return self.details.get("path", "")


class ChecksumFileReadError(RecoverableError):
    code = ErrorCode.CHECKSUM_READ_FAILED


class HostResolutionError(RecoverableError):
    code = ErrorCode.HOST_RESOLUTION_FAILED


class InvalidContextError(RecoverableError):
    code = ErrorCode.MISSING_CONTEXT


@dataclass(frozen=True)
class Verified:
    """
    The check ran to completion. ``satisfied`` tells whether the
    recorded checksum matched the recomputed one.
    """
    satisfied: bool
    expected: str
    actual: str

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "verified",
            "satisfied": self.satisfied,
            "expected": self.expected,
            "actual": self.actual,
        }


@dataclass(frozen=True)
class Unavailable:
    """
    The check could not be performed. Always unsatisfied.
    """
    error: RecoverableError
    satisfied: bool = field(default=False, init=False)

    def to_dict(self) -> dict[str, Any]:
        return {
            "status": "unavailable",
            "satisfied": False,
            "error": self.error.to_dict(),
        }


CheckOutcome = Union[Verified, Unavailable]
