"""Walk a configured chunker in send order.

The sender on an OTA link pushes one chunk per write, tags each write with a
rolling counter and reports progress per block.  :class:`ChunkSequencer`
produces that sequence as :class:`ChunkFrame` objects; putting them on the
wire is left to the caller.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Iterator

from otachunk.chunker import FileChunker
from otachunk.constants import COUNTER_MAX, COUNTER_MIN, PROGRESS_COMPLETE
from otachunk.errors import ChunkerStateError


@dataclass(slots=True, frozen=True)
class ChunkFrame:
    """One chunk in send order.

    ``progress`` counts this frame as sent: ``(chunk_index + 1) /
    chunks_in_block * 100``, so a 5-chunk block reports 20, 40, ... 100.
    Senders that update their display *before* each write (0, 20, ... 80,
    then 100 on completion) can use the previous frame's value instead.
    """

    block_index: int
    chunk_index: int
    chunks_in_block: int
    number_of_blocks: int
    counter: int
    progress: float
    data: bytes

    @property
    def size(self) -> int:
        return len(self.data)

    @property
    def is_last_chunk(self) -> bool:
        return self.chunk_index == self.chunks_in_block - 1

    @property
    def is_last_block(self) -> bool:
        return self.block_index == self.number_of_blocks - 1


def next_counter(counter: int) -> int:
    """Advance the write counter, wrapping ``COUNTER_MAX`` back to ``COUNTER_MIN``."""
    if counter >= COUNTER_MAX:
        return COUNTER_MIN
    return counter + 1


class ChunkSequencer:
    """Stateful cursor over every chunk of every populated block."""

    def __init__(self, chunker: FileChunker):
        if not chunker.configured:
            raise ChunkerStateError("sequencer needs a configured chunker")
        self._chunker = chunker
        self._block = 0
        self._chunk = 0
        self._counter = COUNTER_MIN - 1
        self._sent = 0
        self._done = False

    def __iter__(self) -> Iterator[ChunkFrame]:
        return self

    def __next__(self) -> ChunkFrame:
        if self._done:
            raise StopIteration

        number_of_blocks = self._chunker.number_of_blocks
        block = self._chunker.get_block(self._block)
        index = self._chunk
        self._counter = next_counter(self._counter)
        self._sent += 1

        frame = ChunkFrame(
            block_index=self._block,
            chunk_index=index,
            chunks_in_block=len(block),
            number_of_blocks=number_of_blocks,
            counter=self._counter,
            progress=(index + 1) / len(block) * PROGRESS_COMPLETE,
            data=block[index],
        )

        if frame.is_last_chunk:
            self._chunk = 0
            if frame.is_last_block:
                self._done = True
            else:
                self._block += 1
        else:
            self._chunk += 1
        return frame

    @property
    def done(self) -> bool:
        return self._done

    @property
    def sent(self) -> int:
        return self._sent

    @property
    def progress(self) -> float:
        """Overall percentage of chunks produced so far."""
        total = self._chunker.total_chunk_count
        if self._done or total == 0:
            return PROGRESS_COMPLETE
        return self._sent / total * PROGRESS_COMPLETE


def iter_chunks(chunker: FileChunker) -> Iterator[bytes]:
    """Yield every chunk of *chunker* in send order."""
    for index in range(chunker.number_of_blocks):
        yield from chunker.get_block(index)


__all__ = ["ChunkFrame", "ChunkSequencer", "iter_chunks", "next_counter"]
