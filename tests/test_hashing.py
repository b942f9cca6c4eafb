"""Tests for hash providers."""

import hashlib

import pytest

from checksum_attest import (
    ErrorCode,
    HashType,
    ProviderInitError,
    UnsupportedAlgorithmError,
    get_provider,
    parse_hash_type,
)
from checksum_attest import hashing


HELLO_SHA256 = "2cf24dba5fb0a30e26e83b2ac5b9e29e1b161e5c1fa7425e73043362938b9824"
HELLO_MD5 = "5d41402abc4b2a76b9719d911017c592"


class TestDerive:
    """One-shot digesting."""

    def test_sha256_known_value(self):
        assert get_provider(HashType.SHA256).derive(b"hello") == HELLO_SHA256

    def test_md5_known_value(self):
        assert get_provider("md5").derive(b"hello") == HELLO_MD5

    def test_lowercase_hex(self):
        digest = get_provider(HashType.SHA512).derive(b"hello")
        assert digest == digest.lower()
        assert len(digest) == 128

    def test_derive_is_pure(self):
        """derive does not disturb incremental state."""
        provider = get_provider(HashType.SHA256)
        provider.update(b"hel")
        provider.derive(b"something else")
        provider.update(b"lo")
        assert provider.get_value() == HELLO_SHA256


class TestIncremental:
    """Chunked digesting."""

    def test_chunks_equal_one_shot(self):
        provider = get_provider(HashType.SHA256)
        for chunk in (b"he", b"l", b"lo"):
            provider.update(chunk)
        assert provider.get_value() == HELLO_SHA256

    def test_offset_and_length(self):
        provider = get_provider(HashType.SHA256)
        provider.update(b"xxhelloyy", 2, 5)
        assert provider.get_value() == HELLO_SHA256

    def test_get_value_resets_state(self):
        provider = get_provider(HashType.SHA256)
        provider.update(b"hello")
        provider.get_value()
        assert provider.get_value() == hashlib.sha256(b"").hexdigest()

    def test_out_of_range_chunk_rejected(self):
        provider = get_provider(HashType.SHA256)
        with pytest.raises(ValueError):
            provider.update(b"abc", 2, 5)


class TestConstruction:
    """Provider construction failures."""

    def test_parse_is_case_insensitive(self):
        assert parse_hash_type("SHA256") is HashType.SHA256
        assert parse_hash_type(" md5 ") is HashType.MD5

    def test_unknown_algorithm(self):
        with pytest.raises(UnsupportedAlgorithmError) as info:
            get_provider("crc32")
        assert info.value.code == ErrorCode.UNSUPPORTED_ALGORITHM
        assert "sha256" in info.value.details["supported"]

    def test_hashlib_refusal_is_provider_init_error(self, monkeypatch):
        real_new = hashlib.new

        def fips_new(name, *args, **kwargs):
            if name == "md5":
                raise ValueError("disabled for FIPS")
            return real_new(name, *args, **kwargs)

        monkeypatch.setattr(hashing.hashlib, "new", fips_new)

        with pytest.raises(ProviderInitError) as info:
            get_provider(HashType.MD5)
        assert info.value.code == ErrorCode.PROVIDER_INIT_FAILED
        assert get_provider(HashType.SHA256).derive(b"hello") == HELLO_SHA256
