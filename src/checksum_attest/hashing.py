"""
Hash providers for checksum-attest.

A provider wraps one ``hashlib`` algorithm and supports one-shot
digesting of an in-memory buffer as well as incremental digesting of
chunks. Digests are returned as lowercase hex.

Providers hold mutable state. Obtain one per hashing operation via
``get_provider`` and never share it between threads.
"""

import hashlib
from enum import Enum

from .errors import ProviderInitError, UnsupportedAlgorithmError


class HashType(str, Enum):
    """Hash algorithm selector."""
    SHA256 = "sha256"
    SHA512 = "sha512"
    MD5 = "md5"


def parse_hash_type(value: "str | HashType") -> HashType:
    """
    Resolve an algorithm identifier to a HashType.

    Raises:
        UnsupportedAlgorithmError: If the identifier is not recognized
    """
    if isinstance(value, HashType):
        return value
    try:
        return HashType(str(value).strip().lower())
    except ValueError:
        raise UnsupportedAlgorithmError(
            f"Unsupported hash algorithm: {value!r}",
            details={
                "algorithm": value,
                "supported": [h.value for h in HashType],
            },
        ) from None


class HashProvider:
    """
    Digest calculator for a single algorithm.

    ``derive`` is pure. ``update``/``get_value`` accumulate state;
    ``get_value`` finalizes and resets it.
    """

    def __init__(self, hash_type: HashType):
        self.hash_type = hash_type
        self._state = self._new()

    def _new(self):
        return hashlib.new(self.hash_type.value)

    def derive(self, data: bytes) -> str:
        """One-shot hex digest of ``data``."""
        h = self._new()
        h.update(data)
        return h.hexdigest()

    def update(self, buffer: bytes, offset: int = 0, length: int | None = None) -> None:
        """Feed ``buffer[offset:offset + length]`` into the running digest."""
        if length is None:
            length = len(buffer) - offset
        if offset < 0 or length < 0 or offset + length > len(buffer):
            raise ValueError(
                f"Chunk out of range: offset={offset} length={length} size={len(buffer)}"
            )
        self._state.update(memoryview(buffer)[offset:offset + length])

    def get_value(self) -> str:
        """Finalize the running digest, reset state and return the hex value."""
        value = self._state.hexdigest()
        self._state = self._new()
        return value


def get_provider(hash_type: "str | HashType") -> HashProvider:
    """
    Construct a fresh provider.

    Raises:
        UnsupportedAlgorithmError: Unknown algorithm identifier
        ProviderInitError: hashlib refused the algorithm (e.g. MD5 under FIPS)
    """
    resolved = parse_hash_type(hash_type)
    try:
        return HashProvider(resolved)
    except ValueError as exc:
        raise ProviderInitError(
            f"Could not initialize {resolved.value} provider: {exc}",
            details={"algorithm": resolved.value},
        ) from exc
