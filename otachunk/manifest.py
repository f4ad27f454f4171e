# otachunk/manifest.py
# -----------------------------------------------------------------------------
#  Partition manifest – lets the receiving side verify and rebuild an image
# -----------------------------------------------------------------------------
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Iterable, List

import msgpack
import bittensor as bt

from otachunk.chunker import FileChunker
from otachunk.constants import MANIFEST_SUFFIX, MANIFEST_VERSION
from otachunk.errors import ManifestError
from otachunk.transfer import iter_chunks
from otachunk.utils.hash import sha256_bytes


@dataclass(slots=True)
class ChunkManifest:
    size_bytes: int
    block_size: int
    chunk_size: int
    number_of_blocks: int
    total_chunk_count: int
    sha256: str
    chunk_sha256: List[str] = field(default_factory=list)
    version: str = MANIFEST_VERSION

    def __post_init__(self):
        if self.size_bytes <= 0 or self.chunk_size <= 0:
            raise ManifestError(
                f"sizes must be positive (size_bytes={self.size_bytes}, chunk_size={self.chunk_size})"
            )
        expected = -(-self.size_bytes // self.chunk_size)
        if self.total_chunk_count != expected:
            raise ManifestError(
                f"{self.size_bytes} bytes in chunks of {self.chunk_size} give {expected} "
                f"chunk(s), manifest says {self.total_chunk_count}"
            )
        if len(self.chunk_sha256) != self.total_chunk_count:
            raise ManifestError(
                f"{len(self.chunk_sha256)} chunk digest(s) for {self.total_chunk_count} chunk(s)"
            )

    # --- builders --------------------------------------------------------- #
    @classmethod
    def from_chunker(cls, chunker: FileChunker) -> "ChunkManifest":
        """Describe the partition of a configured *chunker*."""
        return cls(
            size_bytes=len(chunker.payload),
            block_size=chunker.file_block_size,
            chunk_size=chunker.file_chunk_size,
            number_of_blocks=chunker.number_of_blocks,
            total_chunk_count=chunker.total_chunk_count,
            sha256=sha256_bytes(chunker.payload),
            chunk_sha256=[sha256_bytes(c) for c in iter_chunks(chunker)],
        )

    # --- msgpack persistence ---------------------------------------------- #
    def pack(self) -> bytes:
        return msgpack.packb(asdict(self), use_bin_type=True)

    @staticmethod
    def unpack(blob: bytes) -> "ChunkManifest":
        try:
            obj = msgpack.unpackb(blob, raw=False)
            return ChunkManifest(**obj)
        except (TypeError, ValueError, msgpack.UnpackException) as e:
            raise ManifestError(f"Malformed manifest: {e}") from e

    def write(self, path) -> Path:
        path = Path(path)
        path.write_bytes(self.pack())
        return path

    @staticmethod
    def read(path) -> "ChunkManifest":
        return ChunkManifest.unpack(Path(path).read_bytes())

    # --- verification ----------------------------------------------------- #
    def expected_chunk_size(self, index: int) -> int:
        if not 0 <= index < self.total_chunk_count:
            raise ManifestError(
                f"chunk index {index} out of range [0, {self.total_chunk_count})"
            )
        if index < self.total_chunk_count - 1:
            return self.chunk_size
        return self.size_bytes - self.chunk_size * (self.total_chunk_count - 1)

    def verify_chunk(self, index: int, data: bytes) -> bool:
        """True when *data* has the length and digest recorded for chunk *index*."""
        if len(data) != self.expected_chunk_size(index):
            return False
        return sha256_bytes(data) == self.chunk_sha256[index]

    def reassemble(self, chunks: Iterable[bytes]) -> bytes:
        """
        Concatenate received *chunks* after checking them against the manifest.

        Raises
        ------
        ManifestError
            Wrong chunk count, a chunk failing :meth:`verify_chunk`, or a
            whole-image digest mismatch.
        """
        chunks = list(chunks)
        if len(chunks) != self.total_chunk_count:
            raise ManifestError(
                f"expected {self.total_chunk_count} chunk(s), got {len(chunks)}"
            )
        for i, chunk in enumerate(chunks):
            if not self.verify_chunk(i, chunk):
                raise ManifestError(f"chunk {i} does not match its manifest entry")

        image = b"".join(chunks)
        if sha256_bytes(image) != self.sha256:
            raise ManifestError("reassembled image digest mismatch")
        bt.logging.debug(f"Reassembled {len(image)} bytes from {len(chunks)} chunk(s)")
        return image


def default_manifest_path(image) -> Path:
    """``firmware.bin`` → ``firmware.bin.manifest`` beside the image."""
    image = Path(image)
    return image.with_name(image.name + MANIFEST_SUFFIX)


__all__ = ["ChunkManifest", "default_manifest_path"]
