"""
Payload signing for checksum-attest.

Produces base64 signatures over canonical record bytes using either
Ed25519 (asymmetric, via ``cryptography``) or HMAC-SHA256 (shared
secret). Key generation and storage are the caller's responsibility.

SECURITY: Private keys and HMAC secrets MUST come from a secrets
manager or protected file. Never hardcode or commit them.
"""

import base64
import binascii
import hashlib
import hmac
from dataclasses import dataclass
from enum import Enum

from cryptography.exceptions import InvalidSignature
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519

from .errors import SigningError


class KeyType(str, Enum):
    ED25519 = "ed25519"
    HMAC_SHA256 = "hmac-sha256"


@dataclass(frozen=True)
class SigningKey:
    """
    Key material handed in by the caller.

    For ed25519, ``private_key`` is PEM text or the raw 32-byte seed as
    base64 or hex; ``public_key`` is optional and derived when absent.
    For hmac-sha256, ``private_key`` is the shared secret.
    """
    key_type: KeyType
    private_key: str
    public_key: str | None = None

    def __repr__(self) -> str:
        return f"SigningKey(key_type={self.key_type.value!r}, private_key=<redacted>)"


def _decode_raw_key(text: str) -> bytes:
    """Raw key bytes from hex or base64 text."""
    try:
        return bytes.fromhex(text)
    except ValueError:
        pass
    try:
        return base64.b64decode(text, validate=True)
    except binascii.Error:
        raise ValueError("key must be PEM, hex or base64") from None


def _load_ed25519_private_key(key_value: str) -> ed25519.Ed25519PrivateKey:
    key_text = (key_value or "").strip()
    if not key_text:
        raise ValueError("empty private key")

    if "BEGIN" in key_text:
        key_obj = serialization.load_pem_private_key(key_text.encode("utf-8"), password=None)
        if not isinstance(key_obj, ed25519.Ed25519PrivateKey):
            raise ValueError("expected Ed25519 private key")
        return key_obj

    raw = _decode_raw_key(key_text)
    if len(raw) != 32:
        raise ValueError(f"raw Ed25519 private key must be 32 bytes, got {len(raw)}")
    return ed25519.Ed25519PrivateKey.from_private_bytes(raw)


def _load_ed25519_public_key(key: SigningKey) -> ed25519.Ed25519PublicKey:
    if not key.public_key:
        return _load_ed25519_private_key(key.private_key).public_key()

    key_text = key.public_key.strip()
    if "BEGIN" in key_text:
        key_obj = serialization.load_pem_public_key(key_text.encode("utf-8"))
        if not isinstance(key_obj, ed25519.Ed25519PublicKey):
            raise ValueError("expected Ed25519 public key")
        return key_obj

    raw = _decode_raw_key(key_text)
    if len(raw) != 32:
        raise ValueError(f"raw Ed25519 public key must be 32 bytes, got {len(raw)}")
    return ed25519.Ed25519PublicKey.from_public_bytes(raw)


def sign_payload(key: SigningKey, payload: bytes) -> str:
    """
    Sign ``payload`` and return the base64 signature.

    Raises:
        SigningError: Key material is unusable or the key type is unknown
    """
    if key.key_type == KeyType.HMAC_SHA256:
        if not key.private_key:
            raise SigningError("HMAC secret must not be empty", details={"key_type": key.key_type.value})
        mac = hmac.new(key.private_key.encode("utf-8"), payload, hashlib.sha256)
        return base64.b64encode(mac.digest()).decode("ascii")

    if key.key_type == KeyType.ED25519:
        try:
            private_key = _load_ed25519_private_key(key.private_key)
        except (ValueError, TypeError) as exc:
            raise SigningError(
                f"Invalid Ed25519 private key: {exc}",
                details={"key_type": key.key_type.value},
            ) from exc
        return base64.b64encode(private_key.sign(payload)).decode("ascii")

    raise SigningError(
        f"Unsupported key type: {key.key_type}",
        details={"key_type": str(key.key_type)},
    )


def verify_payload(key: SigningKey, payload: bytes, signature: str) -> bool:
    """Check a base64 signature over ``payload``. Never raises on bad input."""
    if not signature:
        return False

    if key.key_type == KeyType.HMAC_SHA256:
        if not key.private_key:
            return False
        expected = base64.b64encode(
            hmac.new(key.private_key.encode("utf-8"), payload, hashlib.sha256).digest()
        ).decode("ascii")
        return hmac.compare_digest(expected.encode("utf-8"), signature.encode("utf-8"))

    if key.key_type == KeyType.ED25519:
        try:
            public_key = _load_ed25519_public_key(key)
            signature_bytes = base64.b64decode(signature, validate=True)
        except (ValueError, TypeError):
            return False
        try:
            public_key.verify(signature_bytes, payload)
        except InvalidSignature:
            return False
        return True

    return False
