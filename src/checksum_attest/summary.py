"""
Record summary utilities for human-readable inspection.

Extracts key metadata from attestation records without modifying them.
"""

from typing import Any

from .attestation import AttestationRecord
from .canonical import format_timestamp


def record_summary(record: AttestationRecord) -> dict[str, Any]:
    """
    Extract a human-readable summary from an attestation record.

    Returns:
        Dict with kind, satisfied, algorithm, host, subject_key,
        timestamp and signed flag
    """
    return {
        "kind": record.kind.value,
        "satisfied": record.satisfied,
        "algorithm": record.algorithm.value,
        "host_name": record.host_name or "unknown-host",
        "subject_key": record.subject_key,
        "timestamp": format_timestamp(record.timestamp),
        "signed": record.is_signed,
    }


def format_record_summary(record: AttestationRecord) -> str:
    """
    Format a record as a single line.

    Example:
        "CHECKSUM satisfied | sha256:3a6eb079... | build-01 | 2024-05-01T... | signed"
    """
    s = record_summary(record)
    key = s["subject_key"]
    key_short = key[:8] + "..." if len(key) > 8 else key
    verdict = "satisfied" if s["satisfied"] else "NOT satisfied"
    signed = "signed" if s["signed"] else "unsigned"
    return f"{s['kind']} {verdict} | {s['algorithm']}:{key_short} | {s['host_name']} | {s['timestamp']} | {signed}"
