"""
Checksum verification for checksum-attest.

Loads the recorded checksum from a sidecar file, recomputes the
artifact's canonical digest and wraps the comparison in a signed
attestation record.

The verifier is the single boundary where recoverable failures
(unreadable artifact or checksum file, unresolvable host, incomplete
context) become an ``Unavailable`` outcome and an unsatisfied record.
Only provider construction and signing failures propagate.
"""

import logging
import socket
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any

from .artifact import CHUNK_SIZE, check_chunk_size, hash_artifact
from .attestation import AnnotationKind, AttestationRecord, build_record, sign_record
from .errors import (
    CheckOutcome,
    ChecksumFileReadError,
    HostResolutionError,
    InvalidContextError,
    RecoverableError,
    Unavailable,
    Verified,
)
from .hashing import HashType, get_provider, parse_hash_type
from .sign import SigningKey

logger = logging.getLogger(__name__)

# Context key under which checksum props may be nested
CONTEXT_KEY = AnnotationKind.CHECKSUM.value

_ARTIFACT_KEYS = ("artifact_path", "artifactPath")
_CHECKSUM_KEYS = ("checksum_path", "checksumPath")


@dataclass(frozen=True)
class ChecksumProps:
    """Where the artifact lives and where its recorded checksum is stored."""
    artifact_path: str
    checksum_path: str

    @classmethod
    def from_context(cls, context: Mapping[str, Any]) -> "ChecksumProps":
        """
        Extract props from a property bag.

        Looks under ``context["CHECKSUM"]`` first (a ChecksumProps or a
        mapping), then at the top level.

        Raises:
            InvalidContextError: If either path is missing
        """
        nested = context.get(CONTEXT_KEY)
        if isinstance(nested, ChecksumProps):
            return nested
        source = nested if isinstance(nested, Mapping) else context

        artifact_path = _first_present(source, _ARTIFACT_KEYS)
        checksum_path = _first_present(source, _CHECKSUM_KEYS)
        missing = [
            name
            for name, value in (("artifact_path", artifact_path), ("checksum_path", checksum_path))
            if not value
        ]
        if missing:
            raise InvalidContextError(
                f"Context missing required field(s): {', '.join(missing)}",
                details={"missing": missing},
            )
        return cls(artifact_path=str(artifact_path), checksum_path=str(checksum_path))


def _first_present(source: Mapping[str, Any], keys: tuple[str, ...]) -> Any:
    for key in keys:
        value = source.get(key)
        if value:
            return value
    return None


@dataclass(frozen=True)
class VerifierOptions:
    """Settings fixed for the lifetime of a verifier."""
    hash_type: HashType = HashType.SHA256
    chunk_size: int = CHUNK_SIZE

    def __post_init__(self):
        check_chunk_size(self.chunk_size)


@dataclass(frozen=True)
class VerificationReport:
    """Signed record plus the outcome that explains it."""
    record: AttestationRecord
    outcome: CheckOutcome

    @property
    def checked(self) -> bool:
        return isinstance(self.outcome, Verified)


def resolve_host() -> str:
    """
    Local host name.

    Raises:
        HostResolutionError: If the name cannot be determined
    """
    try:
        name = socket.gethostname()
    except OSError as exc:
        raise HostResolutionError(f"Could not resolve local host name: {exc}") from exc
    if not name:
        raise HostResolutionError("Local host name is empty")
    return name


def read_checksum(path: str) -> str:
    """
    Read the recorded checksum verbatim (UTF-8, nothing stripped).

    Raises:
        ChecksumFileReadError: If the file cannot be read or decoded
    """
    try:
        with open(path, "r", encoding="utf-8", newline="") as fh:
            return fh.read()
    except (OSError, UnicodeDecodeError) as exc:
        raise ChecksumFileReadError(
            f"Failed to read checksum file {path}: {exc}",
            details={"path": path},
        ) from exc


class ChecksumVerifier:
    """
    Verifies artifacts against sidecar checksums and signs the result.

    Args:
        signing_key: Key used to sign every record
        options: Algorithm and chunk size
        host_resolver: Returns the local host name; may raise
            HostResolutionError
        clock: Returns the record timestamp

    Raises:
        UnsupportedAlgorithmError: Unknown algorithm in ``options``
        ProviderInitError: Algorithm known but unavailable on this host
    """

    def __init__(
        self,
        signing_key: SigningKey,
        options: VerifierOptions | None = None,
        host_resolver: Callable[[], str] = resolve_host,
        clock: Callable[[], datetime] | None = None,
    ):
        options = options or VerifierOptions()
        self.options = VerifierOptions(
            hash_type=parse_hash_type(options.hash_type),
            chunk_size=options.chunk_size,
        )
        self.signing_key = signing_key
        self._host_resolver = host_resolver
        self._clock = clock or (lambda: datetime.now(timezone.utc))
        # Fail at construction, not on first use
        get_provider(self.options.hash_type)

    @property
    def hash_type(self) -> HashType:
        return self.options.hash_type

    def check(self, context: Mapping[str, Any]) -> CheckOutcome:
        """
        Compare the recorded checksum with the artifact's canonical digest.

        Never raises for recoverable failures; they come back as
        ``Unavailable``.
        """
        try:
            props = ChecksumProps.from_context(context)
            expected = read_checksum(props.checksum_path)
            actual = hash_artifact(props.artifact_path, self.hash_type, self.options.chunk_size)
        except RecoverableError as exc:
            return self._unavailable(exc)

        satisfied = expected == actual
        logger.info(
            "Checksum %s for %s",
            "matched" if satisfied else "did not match",
            props.artifact_path,
        )
        if not satisfied:
            logger.debug("Expected %r, computed %r", expected, actual)
        return Verified(satisfied=satisfied, expected=expected, actual=actual)

    def attest(self, context: Mapping[str, Any], data: bytes = b"") -> VerificationReport:
        """
        Run the check and produce a signed record.

        The record's subject key is the digest of ``data``, the payload
        being annotated, not of the artifact on disk.
        """
        subject_key = get_provider(self.hash_type).derive(data)

        host = ""
        try:
            host = self._host_resolver()
        except RecoverableError as exc:
            outcome: CheckOutcome = self._unavailable(exc)
        else:
            outcome = self.check(context)

        record = build_record(
            subject_key=subject_key,
            algorithm=self.hash_type,
            host_name=host,
            satisfied=outcome.satisfied,
            timestamp=self._clock(),
        )
        return VerificationReport(record=sign_record(record, self.signing_key), outcome=outcome)

    def verify(self, context: Mapping[str, Any], data: bytes = b"") -> AttestationRecord:
        """Signed record for ``context``; see ``attest`` for the outcome as well."""
        return self.attest(context, data).record

    @staticmethod
    def _unavailable(exc: RecoverableError) -> Unavailable:
        logger.error(
            "Checksum verification could not be performed: %s",
            exc.message,
            exc_info=exc,
            extra={"error_code": exc.code.value, "details": exc.details},
        )
        return Unavailable(error=exc)
