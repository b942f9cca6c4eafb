"""
checksum-attest: Deterministic artifact checksums and signed attestations.

Recomputes a canonical digest of a file or directory artifact, compares
it to a recorded sidecar checksum and returns a signed, timestamped
record of the result.
"""

from .artifact import (
    CHUNK_SIZE,
    FileDigestEntry,
    canonical_listing,
    collect_entries,
    hash_artifact,
    hash_file,
    list_files,
)
from .attestation import (
    AnnotationKind,
    AttestationRecord,
    build_record,
    record_payload,
    sign_record,
    verify_record_signature,
)
from .canonical import canonical_json
from .errors import (
    ArtifactReadError,
    ChecksumAttestError,
    ChecksumFileReadError,
    ErrorCode,
    HostResolutionError,
    InvalidContextError,
    ProviderInitError,
    RecoverableError,
    SigningError,
    Unavailable,
    UnsupportedAlgorithmError,
    Verified,
)
from .hashing import HashProvider, HashType, get_provider, parse_hash_type
from .sign import KeyType, SigningKey
from .summary import format_record_summary, record_summary
from .verify import (
    ChecksumProps,
    ChecksumVerifier,
    VerificationReport,
    VerifierOptions,
)

__version__ = "0.1.0"
__all__ = [
    # Hashing
    "HashType",
    "HashProvider",
    "get_provider",
    "parse_hash_type",
    # Canonicalization
    "CHUNK_SIZE",
    "FileDigestEntry",
    "list_files",
    "hash_file",
    "collect_entries",
    "canonical_listing",
    "hash_artifact",
    "canonical_json",
    # Attestation
    "AnnotationKind",
    "AttestationRecord",
    "build_record",
    "record_payload",
    "sign_record",
    "verify_record_signature",
    "KeyType",
    "SigningKey",
    "record_summary",
    "format_record_summary",
    # Verification
    "ChecksumProps",
    "ChecksumVerifier",
    "VerificationReport",
    "VerifierOptions",
    # Errors
    "ErrorCode",
    "ChecksumAttestError",
    "RecoverableError",
    "UnsupportedAlgorithmError",
    "ProviderInitError",
    "SigningError",
    "ArtifactReadError",
    "ChecksumFileReadError",
    "HostResolutionError",
    "InvalidContextError",
    "Verified",
    "Unavailable",
]
