"""Split firmware images into fixed-size chunks for over-the-air transfer."""

__version__ = "0.1.0"

from otachunk.chunker import ChunkerState, FileChunker, partition
from otachunk.errors import (
    BlockIndexError,
    ChunkerError,
    ChunkerStateError,
    EmptyPayloadError,
    InvalidSizeError,
    ManifestError,
    PayloadReadError,
)
from otachunk.manifest import ChunkManifest
from otachunk.transfer import ChunkFrame, ChunkSequencer, iter_chunks

__all__ = [
    "__version__",
    "FileChunker",
    "ChunkerState",
    "partition",
    "ChunkSequencer",
    "ChunkFrame",
    "iter_chunks",
    "ChunkManifest",
    "ChunkerError",
    "PayloadReadError",
    "BlockIndexError",
    "InvalidSizeError",
    "EmptyPayloadError",
    "ChunkerStateError",
    "ManifestError",
]
