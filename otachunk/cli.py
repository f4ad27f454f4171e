# otachunk/cli.py
# -------------------------------------------------------------------------
#  Stand-alone layout inspector
# -------------------------------------------------------------------------
#  python -m otachunk.cli --file.path firmware.bin --chunker.chunk_size 244
#
#  Reads the image, logs the resulting block/chunk layout (per-chunk
#  detail at debug level) and optionally writes the manifest the receiver
#  uses to verify the transfer.  --chunker.manifest writes it next to the
#  image as <image>.manifest.
# -------------------------------------------------------------------------

import sys
from pathlib import Path
from typing import List, Optional

import bittensor as bt

from otachunk.chunker import FileChunker
from otachunk.config import read_config
from otachunk.errors import ChunkerError, ManifestError
from otachunk.manifest import ChunkManifest, default_manifest_path
from otachunk.transfer import ChunkSequencer
from otachunk.utils.hash import sha256sum
from otachunk.utils.logging import ColoredLogger, describe_layout


def run(
    path,
    block_size: int,
    chunk_size: int,
    manifest_out=None,
) -> ChunkManifest:
    with FileChunker.by_file_name(path) as chunker:
        chunker.configure(block_size, chunk_size)
        ColoredLogger.info(describe_layout(chunker), ColoredLogger.CYAN)

        for frame in ChunkSequencer(chunker):
            ColoredLogger.debug(
                f"block {frame.block_index + 1}/{frame.number_of_blocks}, "
                f"chunk {frame.chunk_index + 1}/{frame.chunks_in_block}, "
                f"size {frame.size}, counter {frame.counter}, {frame.progress:.0f}%"
            )

        manifest = ChunkManifest.from_chunker(chunker)

    if manifest_out:
        # the image must not have changed on disk while it was being chunked
        on_disk = sha256sum(Path(path))
        if on_disk != manifest.sha256:
            raise ManifestError(
                f"{path} changed while chunking (sha256 {on_disk[:16]}… != {manifest.sha256[:16]}…)"
            )
        out = manifest.write(manifest_out)
        ColoredLogger.success(f"Manifest written to {out} (sha256 {manifest.sha256[:16]}…)")
    return manifest


def main(argv: Optional[List[str]] = None) -> int:
    config = read_config(argv)
    bt.logging(config=config)

    path = config.file.path
    if not path:
        ColoredLogger.error("--file.path is required")
        return 2

    try:
        run(
            Path(path),
            config.chunker.block_size,
            config.chunker.chunk_size,
            config.chunker.manifest_out
            or (default_manifest_path(path) if config.chunker.manifest else None),
        )
    except (OSError, ChunkerError) as e:
        ColoredLogger.error(f"Chunking {path} failed: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
