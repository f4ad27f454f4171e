"""
SHA-256 helpers for payloads and their chunks.

Files are streamed in fixed-size blocks so large images never need to be
held twice in memory.
"""

from __future__ import annotations

import hashlib
from pathlib import Path

from otachunk.constants import HASH_BUFFER_SIZE


def sha256sum(fp: Path, buf: int = HASH_BUFFER_SIZE) -> str:
    """
    Compute the SHA-256 hex digest of the file at *fp*.

    Parameters
    ----------
    fp : Path
        File to hash.
    buf : int, optional
        Read size in bytes (default = ``HASH_BUFFER_SIZE``, 1 MiB).

    Returns
    -------
    str
        64-character lowercase hexadecimal digest.
    """
    h = hashlib.sha256()
    with Path(fp).open("rb") as f:
        while blk := f.read(buf):
            h.update(blk)
    return h.hexdigest()


def sha256_bytes(data: bytes) -> str:
    """Hex SHA-256 of an in-memory buffer."""
    return hashlib.sha256(data).hexdigest()


__all__ = ["sha256sum", "sha256_bytes"]
