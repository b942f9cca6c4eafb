"""Shared fixtures for checksum-attest tests."""

from datetime import datetime, timezone
from pathlib import Path

import sys

import pytest

# Add parent src to path for development
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from checksum_attest import KeyType, SigningKey


FIXED_TIME = datetime(2024, 5, 1, 12, 30, 0, tzinfo=timezone.utc)


@pytest.fixture
def hmac_key() -> SigningKey:
    return SigningKey(key_type=KeyType.HMAC_SHA256, private_key="test-shared-secret")


@pytest.fixture
def artifact_dir(tmp_path: Path) -> Path:
    """Directory with a.txt="hello" and b/c.txt="world"."""
    root = tmp_path / "artifact"
    (root / "b").mkdir(parents=True)
    (root / "a.txt").write_bytes(b"hello")
    (root / "b" / "c.txt").write_bytes(b"world")
    return root
