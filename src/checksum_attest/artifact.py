"""
Artifact canonicalization for checksum-attest.

Turns a file or directory tree into one reproducible digest:

    digest(file_1) + "  " + abspath(file_1)
    ...
    digest(file_n) + "  " + abspath(file_n)

Lines are sorted by Unicode code point (never by locale), joined with
"\\n" and terminated with a trailing "\\n". The resulting UTF-8 blob is
digested with the same algorithm used for the files. File name bytes
that are not valid UTF-8 are kept as-is.
"""

import logging
import os
from dataclasses import dataclass

from .errors import ArtifactReadError
from .hashing import HashType, get_provider

logger = logging.getLogger(__name__)

CHUNK_SIZE = 8192

# Separator between digest and path in each canonical line
ENTRY_SEPARATOR = "  "


@dataclass(frozen=True)
class FileDigestEntry:
    """Digest of a single file, paired with its absolute path."""
    path: str
    digest: str

    @property
    def sort_key(self) -> str:
        return f"{self.digest}{ENTRY_SEPARATOR}{self.path}"


def check_chunk_size(chunk_size: int) -> None:
    """Reject read sizes that would never make progress."""
    if chunk_size < 1:
        raise ValueError(f"chunk_size must be at least 1, got {chunk_size}")


def encode_listing(listing: str) -> bytes:
    """
    UTF-8 bytes of the canonical blob.

    Names that are not valid UTF-8 on disk arrive from ``os.listdir`` as
    surrogate escapes; they are written back as their original bytes,
    the same bytes ``os.fsencode`` gives on a UTF-8 filesystem.
    """
    return listing.encode("utf-8", "surrogateescape")


def list_files(path: str | os.PathLike) -> list[str]:
    """
    Enumerate every regular file under ``path`` as absolute paths.

    A file yields itself; a directory is walked with an explicit stack.
    A nonexistent path yields an empty list. The result order is not
    meaningful; callers sort.

    Raises:
        ArtifactReadError: Directory cannot be listed, dangling symlink,
            or a symlink cycle
    """
    root = os.path.abspath(os.fspath(path))

    if os.path.isfile(root):
        return [root]
    if not os.path.isdir(root):
        if os.path.islink(root):
            raise ArtifactReadError(
                f"Dangling symlink: {root}", details={"path": root}
            )
        logger.debug("Artifact path %s does not exist, treating as empty", root)
        return []

    files: list[str] = []
    # (directory, real paths of the directories above it)
    pending: list[tuple[str, frozenset[str]]] = [(root, frozenset())]

    while pending:
        directory, ancestors = pending.pop()
        real = os.path.realpath(directory)
        if real in ancestors:
            raise ArtifactReadError(
                f"Directory cycle detected at {directory}",
                details={"path": directory, "target": real},
            )
        ancestors = ancestors | {real}

        try:
            names = os.listdir(directory)
        except OSError as exc:
            raise ArtifactReadError(
                f"Failed to list directory {directory}: {exc}",
                details={"path": directory},
            ) from exc

        for name in names:
            entry = os.path.join(directory, name)
            if os.path.isfile(entry):
                files.append(entry)
            elif os.path.isdir(entry):
                pending.append((entry, ancestors))
            elif os.path.islink(entry):
                raise ArtifactReadError(
                    f"Dangling symlink: {entry}", details={"path": entry}
                )

    return files


def hash_file(
    path: str,
    hash_type: HashType = HashType.SHA256,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """
    Digest a file in fixed-size chunks with a provider owned by this call.

    Raises:
        ArtifactReadError: File cannot be opened or read
        ValueError: ``chunk_size`` is not positive
    """
    check_chunk_size(chunk_size)
    provider = get_provider(hash_type)
    buffer = bytearray(chunk_size)
    try:
        with open(path, "rb") as fh:
            while True:
                read = fh.readinto(buffer)
                if not read:
                    break
                provider.update(buffer, 0, read)
    except OSError as exc:
        raise ArtifactReadError(
            f"Failed to hash artifact file {path}: {exc}",
            details={"path": path},
        ) from exc
    return provider.get_value()


def collect_entries(
    path: str | os.PathLike,
    hash_type: HashType = HashType.SHA256,
    chunk_size: int = CHUNK_SIZE,
) -> list[FileDigestEntry]:
    """Digest every file under ``path`` and return entries in canonical order."""
    check_chunk_size(chunk_size)
    entries = [
        FileDigestEntry(path=file_path, digest=hash_file(file_path, hash_type, chunk_size))
        for file_path in list_files(path)
    ]
    # str comparison is by code point, independent of LC_COLLATE
    entries.sort(key=lambda entry: entry.sort_key)
    return entries


def canonical_listing(entries: list[FileDigestEntry]) -> str:
    """Join already-sorted entries into the canonical text blob."""
    return "\n".join(entry.sort_key for entry in entries) + "\n"


def hash_artifact(
    path: str | os.PathLike,
    hash_type: HashType = HashType.SHA256,
    chunk_size: int = CHUNK_SIZE,
) -> str:
    """
    Compute the canonical digest of a file or directory artifact.

    Args:
        path: File or directory to digest
        hash_type: Algorithm used for every file and for the listing
        chunk_size: Read size for incremental file hashing

    Returns:
        Lowercase hex composite digest

    Raises:
        ArtifactReadError: Any file or directory under ``path`` is unreadable
        ValueError: ``chunk_size`` is not positive
    """
    entries = collect_entries(path, hash_type, chunk_size)
    listing = canonical_listing(entries)
    digest = get_provider(hash_type).derive(encode_listing(listing))
    logger.debug(
        "Canonical digest of %s over %d file(s): %s", path, len(entries), digest
    )
    return digest
