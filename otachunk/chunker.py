# otachunk/chunker.py
# -----------------------------------------------------------------------------
#  Fixed-size chunking of an image for over-the-air transfer
# -----------------------------------------------------------------------------
"""Read a whole image into memory and split it into transmit-sized chunks.

Life cycle of a :class:`FileChunker`:

* **OPENED**      – the source is open, its remaining length is recorded.
* **CONFIGURED**  – :meth:`FileChunker.configure` read the payload and built
  the partition.  The partition is immutable from here on.
* **CLOSED**      – :meth:`FileChunker.close` released the source.  Terminal;
  an already built partition stays readable.

The partition always holds exactly one populated block whose size is the
payload length.  The multi-block count derived from the requested block size
is computed first and then overridden, so receivers expecting the OTA
sender's layout see identical chunk boundaries.
"""
from __future__ import annotations

import io
import operator
from enum import Enum
from pathlib import Path
from typing import BinaryIO, Optional, Tuple

from otachunk.constants import (
    DEFAULT_FILE_CHUNK_SIZE,
    READ_BUFFER_SIZE,
    SINGLE_BLOCK_COUNT,
)
from otachunk.errors import (
    BlockIndexError,
    ChunkerStateError,
    EmptyPayloadError,
    InvalidSizeError,
    PayloadReadError,
)
from otachunk.utils.logging import ColoredLogger

Block = Tuple[bytes, ...]


class ChunkerState(str, Enum):
    OPENED = "opened"
    CONFIGURED = "configured"
    CLOSED = "closed"


# --------------------------------------------------------------------------- #
# 1.  Pure helpers                                                            #
# --------------------------------------------------------------------------- #


def _ceil_div(numerator: int, denominator: int) -> int:
    return numerator // denominator + (1 if numerator % denominator else 0)


def _check_size(name: str, value) -> None:
    # bool is an int subclass but never a meaningful size
    if isinstance(value, bool) or not isinstance(value, int):
        raise InvalidSizeError(f"{name} must be an integer, got {type(value).__name__}")
    if value <= 0:
        raise InvalidSizeError(f"{name} must be positive, got {value}")


def _remaining_bytes(stream: BinaryIO) -> Optional[int]:
    """Bytes left between the current position and the end of *stream*.

    ``None`` when the stream cannot seek; the payload is then read to EOF.
    """
    try:
        if not stream.seekable():
            return None
        pos = stream.tell()
        end = stream.seek(0, io.SEEK_END)
        stream.seek(pos)
    except (AttributeError, io.UnsupportedOperation):
        return None
    return max(end - pos, 0)


def partition(payload: bytes, chunk_size: int) -> Block:
    """
    Split *payload* into consecutive chunks of *chunk_size* bytes.

    Parameters
    ----------
    payload : bytes
        Bytes to split.
    chunk_size : int
        Length of every chunk except possibly the last one.

    Returns
    -------
    tuple of bytes
        ``ceil(len(payload) / chunk_size)`` chunks.  Only the final chunk may
        be shorter; concatenated in order they equal *payload*.
    """
    _check_size("chunk_size", chunk_size)
    total = len(payload)
    chunks = []
    offset = 0
    for _ in range(_ceil_div(total, chunk_size)):
        end = min(offset + chunk_size, total)
        chunks.append(bytes(payload[offset:end]))
        # only the last chunk can be short
        offset += chunk_size
    return tuple(chunks)


# --------------------------------------------------------------------------- #
# 2.  Chunker                                                                 #
# --------------------------------------------------------------------------- #


class FileChunker:
    """Owns one payload source and the chunk partition built from it.

    Size properties keep their pre-configure sentinels (``0`` sizes and
    ``-1`` blocks) until :meth:`configure` succeeds.
    """

    def __init__(self, stream: BinaryIO, *, name: Optional[str] = None):
        if stream is None:
            raise ValueError("stream must not be None")
        self._stream: Optional[BinaryIO] = stream
        self._name = name or getattr(stream, "name", "<stream>")
        self._bytes_available = _remaining_bytes(stream)

        self._payload: Optional[bytes] = None
        self._blocks: Optional[Tuple[Block, ...]] = None
        self._file_block_size = 0
        self._file_chunk_size = 0
        self._number_of_blocks = -1
        self._total_chunk_count = 0
        self._effective_block_size = 0
        self._requested_number_of_blocks = -1

    @classmethod
    def by_file_name(cls, filename) -> "FileChunker":
        """Open *filename* for binary reading; ``OSError`` propagates."""
        path = Path(filename)
        stream = path.open("rb")
        try:
            return cls(stream, name=str(path))
        except Exception:
            stream.close()
            raise

    # ------------------------------------------------------------------
    #  Context manager
    # ------------------------------------------------------------------
    def __enter__(self) -> "FileChunker":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    # ------------------------------------------------------------------
    #  Read-only view
    # ------------------------------------------------------------------
    @property
    def name(self) -> str:
        return self._name

    @property
    def state(self) -> ChunkerState:
        if self._stream is None:
            return ChunkerState.CLOSED
        if self._blocks is not None:
            return ChunkerState.CONFIGURED
        return ChunkerState.OPENED

    @property
    def configured(self) -> bool:
        return self._blocks is not None

    @property
    def closed(self) -> bool:
        return self._stream is None

    @property
    def bytes_available(self) -> Optional[int]:
        """Payload length estimate taken at construction (``None`` if unknown)."""
        if self._payload is not None:
            return len(self._payload)
        return self._bytes_available

    @property
    def file_block_size(self) -> int:
        """Size of the populated block, i.e. the payload length once configured."""
        return self._file_block_size

    @property
    def effective_block_size(self) -> int:
        """``max(block_size, chunk_size)`` after clamping to the payload length."""
        return self._effective_block_size

    @property
    def requested_number_of_blocks(self) -> int:
        """``ceil(len / effective_block_size)``; not what gets populated."""
        return self._requested_number_of_blocks

    @property
    def file_chunk_size(self) -> int:
        return self._file_chunk_size

    @property
    def number_of_blocks(self) -> int:
        return self._number_of_blocks

    @property
    def total_chunk_count(self) -> int:
        return self._total_chunk_count

    @property
    def payload(self) -> bytes:
        self._require_configured()
        return self._payload  # type: ignore[return-value]

    @property
    def blocks(self) -> Tuple[Block, ...]:
        self._require_configured()
        return self._blocks  # type: ignore[return-value]

    # ------------------------------------------------------------------
    #  Operations
    # ------------------------------------------------------------------
    def configure(self, block_size: int, chunk_size: int = DEFAULT_FILE_CHUNK_SIZE) -> None:
        """
        Read the payload and partition it.

        The effective block size is ``max(block_size, chunk_size)``.  When
        that exceeds the payload length it is clamped to the payload length,
        and the chunk size is clamped to the block size if it is now larger.

        Raises
        ------
        ChunkerStateError
            Already configured, or closed.
        InvalidSizeError
            A size is not a positive integer.
        PayloadReadError
            The source failed or ended before the recorded length.
        EmptyPayloadError
            The source holds no bytes.
        """
        if self._stream is None:
            raise ChunkerStateError(f"{self._name}: cannot configure a closed chunker")
        if self._blocks is not None:
            raise ChunkerStateError(f"{self._name}: chunker is already configured")
        _check_size("block_size", block_size)
        _check_size("chunk_size", chunk_size)

        payload = self._read_payload()
        length = len(payload)
        if length == 0:
            raise EmptyPayloadError(f"{self._name}: payload is empty")

        eff_block = max(block_size, chunk_size)
        eff_chunk = chunk_size
        if eff_block > length:
            eff_block = length
            if eff_chunk > eff_block:
                eff_chunk = eff_block

        requested_blocks = _ceil_div(length, eff_block)
        ColoredLogger.debug(
            f"{self._name}: block size {eff_block} → {requested_blocks} block(s) requested, "
            f"populating {SINGLE_BLOCK_COUNT}"
        )

        chunks = partition(payload, eff_chunk)

        # commit only once everything above succeeded
        self._payload = payload
        self._blocks = (chunks,)
        self._number_of_blocks = SINGLE_BLOCK_COUNT
        self._file_block_size = length
        self._file_chunk_size = eff_chunk
        self._total_chunk_count = len(chunks)
        self._effective_block_size = eff_block
        self._requested_number_of_blocks = requested_blocks

        ColoredLogger.info(
            f"{self._name}: {length} bytes split into {len(chunks)} chunk(s) of ≤{eff_chunk} B"
        )

    def get_block(self, index: int) -> Block:
        """Return the chunks of block *index*.

        ``TypeError`` for a non-integer index, ``BlockIndexError`` if out of range.
        """
        index = operator.index(index)
        blocks = self.blocks
        if not 0 <= index < len(blocks):
            raise BlockIndexError(
                f"block index {index} out of range [0, {len(blocks)})"
            )
        return blocks[index]

    def close(self) -> None:
        """Release the source.  Safe to call repeatedly; failures are only logged."""
        if self._stream is None:
            return
        stream, self._stream = self._stream, None
        try:
            stream.close()
        except Exception as e:
            ColoredLogger.warning(f"{self._name}: ignoring error while closing source: {e}")

    # ------------------------------------------------------------------
    #  Internals
    # ------------------------------------------------------------------
    def _require_configured(self) -> None:
        if self._blocks is None:
            raise ChunkerStateError(f"{self._name}: chunker has not been configured")

    def _read_payload(self) -> bytes:
        """Read until the recorded length is reached (or EOF when unknown)."""
        expected = self._bytes_available
        buf = bytearray()
        try:
            while expected is None or len(buf) < expected:
                want = READ_BUFFER_SIZE if expected is None else min(READ_BUFFER_SIZE, expected - len(buf))
                blk = self._stream.read(want)  # type: ignore[union-attr]
                if not blk:
                    break
                buf += blk
        except OSError as e:
            raise PayloadReadError(
                f"{self._name}: read failed after {len(buf)} bytes: {e}"
            ) from e

        if expected is not None and len(buf) < expected:
            raise PayloadReadError(
                f"{self._name}: short read, got {len(buf)} of {expected} bytes"
            )
        return bytes(buf)


__all__ = ["Block", "ChunkerState", "FileChunker", "partition"]
