"""
Command-line entry point for checksum-attest.

Usage:
    checksum-attest hash <path> [--algo sha256] [--output FILE]
    checksum-attest verify --artifact PATH --checksum FILE \\
        --key-type ed25519 --key-file KEY.pem [--data FILE] [--json]

Exit codes for ``verify``:
  0 - Checksum matched
  1 - Checksum checked and did not match
  2 - Check could not be performed
"""

import argparse
import logging
import sys

from .artifact import hash_artifact
from .canonical import canonical_json
from .errors import ChecksumAttestError
from .hashing import HashType
from .summary import format_record_summary
from .sign import KeyType, SigningKey
from .verify import ChecksumProps, ChecksumVerifier, VerifierOptions

logger = logging.getLogger(__name__)

EXIT_SATISFIED = 0
EXIT_MISMATCH = 1
EXIT_UNAVAILABLE = 2


def _read_text(path: str) -> str:
    with open(path, "r", encoding="utf-8") as fh:
        return fh.read()


def _cmd_hash(args: argparse.Namespace) -> int:
    digest = hash_artifact(args.path, HashType(args.algo))
    if args.output:
        # No trailing newline: the sidecar must match exactly
        with open(args.output, "w", encoding="utf-8", newline="") as fh:
            fh.write(digest)
    else:
        print(digest)
    return EXIT_SATISFIED


def _cmd_verify(args: argparse.Namespace) -> int:
    key = SigningKey(
        key_type=KeyType(args.key_type),
        private_key=_read_text(args.key_file).strip(),
    )
    verifier = ChecksumVerifier(key, VerifierOptions(hash_type=HashType(args.algo)))

    data = b""
    if args.data:
        with open(args.data, "rb") as fh:
            data = fh.read()

    context = {
        "CHECKSUM": ChecksumProps(artifact_path=args.artifact, checksum_path=args.checksum),
    }
    report = verifier.attest(context, data)

    if args.json:
        print(canonical_json(report.record.to_dict()))
    else:
        print(format_record_summary(report.record))

    if not report.checked:
        return EXIT_UNAVAILABLE
    return EXIT_SATISFIED if report.record.satisfied else EXIT_MISMATCH


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checksum-attest",
        description="Compute canonical artifact checksums and signed attestations",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command", required=True)

    algos = [h.value for h in HashType]

    hash_cmd = sub.add_parser("hash", help="Print the canonical digest of a file or directory")
    hash_cmd.add_argument("path", help="Artifact file or directory")
    hash_cmd.add_argument("--algo", default=HashType.SHA256.value, choices=algos)
    hash_cmd.add_argument("--output", help="Write the digest to this sidecar file")
    hash_cmd.set_defaults(func=_cmd_hash)

    verify_cmd = sub.add_parser("verify", help="Verify an artifact and print a signed record")
    verify_cmd.add_argument("--artifact", required=True, help="Artifact file or directory")
    verify_cmd.add_argument("--checksum", required=True, help="Sidecar file with the expected digest")
    verify_cmd.add_argument("--key-type", default=KeyType.ED25519.value, choices=[k.value for k in KeyType])
    verify_cmd.add_argument("--key-file", required=True, help="Private key (PEM/hex/base64) or HMAC secret")
    verify_cmd.add_argument("--algo", default=HashType.SHA256.value, choices=algos)
    verify_cmd.add_argument("--data", help="Payload whose digest becomes the record's subject key")
    verify_cmd.add_argument("--json", action="store_true", help="Print the record as canonical JSON")
    verify_cmd.set_defaults(func=_cmd_verify)

    return parser


def main(argv: list[str] | None = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        return args.func(args)
    except (ChecksumAttestError, OSError) as exc:
        logger.error("%s", exc)
        print(f"error: {exc}", file=sys.stderr)
        return EXIT_UNAVAILABLE
