"""
Attestation records for checksum-attest.

A record states whether an artifact's recomputed checksum matched the
recorded one, with the subject key, algorithm, host and time of the
check. Signing is always the last step: the signature covers the
canonical JSON of every other field.
"""

from dataclasses import dataclass, replace
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from .canonical import canonical_json, format_timestamp
from .hashing import HashType
from .sign import SigningKey, sign_payload, verify_payload


class AnnotationKind(str, Enum):
    CHECKSUM = "CHECKSUM"


@dataclass(frozen=True)
class AttestationRecord:
    """Result of one checksum verification, signed or not yet signed."""
    subject_key: str
    algorithm: HashType
    host_name: str
    kind: AnnotationKind
    satisfied: bool
    timestamp: datetime
    parent_seed: str | None = None
    signature: str = ""

    @property
    def is_signed(self) -> bool:
        return bool(self.signature)

    def unsigned_dict(self) -> dict[str, Any]:
        return {
            "subject_key": self.subject_key,
            "algorithm": self.algorithm.value,
            "host_name": self.host_name,
            "kind": self.kind.value,
            "parent_seed": self.parent_seed,
            "satisfied": self.satisfied,
            "timestamp": format_timestamp(self.timestamp),
        }

    def to_dict(self) -> dict[str, Any]:
        data = self.unsigned_dict()
        data["signature"] = self.signature
        return data


def build_record(
    subject_key: str,
    algorithm: HashType,
    host_name: str,
    satisfied: bool,
    timestamp: datetime | None = None,
    kind: AnnotationKind = AnnotationKind.CHECKSUM,
    parent_seed: str | None = None,
) -> AttestationRecord:
    """Assemble an unsigned record. ``timestamp`` defaults to now (UTC)."""
    return AttestationRecord(
        subject_key=subject_key,
        algorithm=algorithm,
        host_name=host_name,
        kind=kind,
        satisfied=satisfied,
        timestamp=timestamp or datetime.now(timezone.utc),
        parent_seed=parent_seed,
    )


def record_payload(record: AttestationRecord) -> bytes:
    """Canonical bytes covered by the signature (every field but ``signature``)."""
    return canonical_json(record.unsigned_dict()).encode("utf-8")


def sign_record(record: AttestationRecord, key: SigningKey) -> AttestationRecord:
    """
    Return a signed copy of ``record``. The input record is not modified.

    Raises:
        SigningError: If the key cannot be used
    """
    signature = sign_payload(key, record_payload(record))
    return replace(record, signature=signature)


def verify_record_signature(record: AttestationRecord, key: SigningKey) -> bool:
    """Check that ``record.signature`` covers the record's current fields."""
    return verify_payload(key, record_payload(record), record.signature)
