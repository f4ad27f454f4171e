import io
import math

import pytest

from otachunk.chunker import ChunkerState, FileChunker, partition
from otachunk.errors import (
    BlockIndexError,
    ChunkerStateError,
    EmptyPayloadError,
    InvalidSizeError,
    PayloadReadError,
)
from streams import (
    ExplodingCloseStream,
    ExplodingReadStream,
    PipeLikeStream,
    TrickleStream,
    TruncatingStream,
    make_payload,
)


def _configured(data: bytes, block_size: int, chunk_size: int) -> FileChunker:
    chunker = FileChunker(io.BytesIO(data))
    chunker.configure(block_size, chunk_size)
    return chunker


# ---------------------------------------------------------------------
# Partition properties
# ---------------------------------------------------------------------
@pytest.mark.parametrize("length", [1, 2, 19, 20, 21, 45, 100, 257, 1000])
@pytest.mark.parametrize("chunk_size", [1, 3, 20, 64])
def test_partition_covers_payload(length, chunk_size):
    data = make_payload(length)
    chunker = _configured(data, 16, chunk_size)
    chunks = chunker.get_block(0)
    c = chunker.file_chunk_size

    assert sum(len(ch) for ch in chunks) == length
    assert len(chunks) == math.ceil(length / c) == chunker.total_chunk_count
    assert all(len(ch) == c for ch in chunks[:-1])
    assert 1 <= len(chunks[-1]) <= c
    assert len(chunks[-1]) == length - c * (len(chunks) - 1)
    assert b"".join(chunks) == data


def test_scenario_even_split():
    chunker = _configured(make_payload(100), 50, 20)
    assert chunker.effective_block_size == 50
    assert chunker.requested_number_of_blocks == 2
    assert chunker.total_chunk_count == 5
    assert [len(c) for c in chunker.get_block(0)] == [20, 20, 20, 20, 20]


def test_scenario_short_tail():
    chunker = _configured(make_payload(45), 16, 20)
    assert chunker.total_chunk_count == 3
    assert [len(c) for c in chunker.get_block(0)] == [20, 20, 5]


def test_scenario_sizes_clamp_to_small_payload():
    data = make_payload(10)
    chunker = _configured(data, 50, 20)
    assert chunker.effective_block_size == 10
    assert chunker.file_chunk_size == 10
    assert chunker.total_chunk_count == 1
    assert chunker.get_block(0) == (data,)


def test_block_size_grows_to_chunk_size():
    chunker = _configured(make_payload(200), 16, 64)
    assert chunker.effective_block_size == 64
    assert chunker.requested_number_of_blocks == 4
    assert chunker.file_chunk_size == 64


def test_single_block_is_populated():
    data = make_payload(100)
    chunker = _configured(data, 10, 10)
    assert chunker.requested_number_of_blocks == 10
    assert chunker.number_of_blocks == 1
    assert chunker.file_block_size == len(data)
    assert len(chunker.blocks) == 1


def test_chunks_are_independent_bytes():
    chunker = _configured(make_payload(50), 16, 20)
    for chunk in chunker.get_block(0):
        assert type(chunk) is bytes
    assert isinstance(chunker.blocks, tuple)
    assert isinstance(chunker.get_block(0), tuple)


def test_partition_helper_matches_chunker():
    data = make_payload(77)
    assert partition(data, 10) == _configured(data, 10, 10).get_block(0)
    assert partition(b"", 4) == ()


# ---------------------------------------------------------------------
# Block access
# ---------------------------------------------------------------------
@pytest.mark.parametrize("index", [-1, 1, 5])
def test_get_block_out_of_range(index):
    chunker = _configured(make_payload(30), 16, 20)
    with pytest.raises(BlockIndexError):
        chunker.get_block(index)


def test_block_index_error_is_index_error():
    chunker = _configured(make_payload(30), 16, 20)
    with pytest.raises(IndexError):
        chunker.get_block(3)


def test_get_block_before_configure():
    chunker = FileChunker(io.BytesIO(b"abc"))
    with pytest.raises(ChunkerStateError):
        chunker.get_block(0)


def test_defaults_before_configure():
    chunker = FileChunker(io.BytesIO(make_payload(12)))
    assert chunker.state is ChunkerState.OPENED
    assert chunker.bytes_available == 12
    assert chunker.number_of_blocks == -1
    assert chunker.file_block_size == 0
    assert chunker.total_chunk_count == 0


# ---------------------------------------------------------------------
# Size validation & lifecycle
# ---------------------------------------------------------------------
@pytest.mark.parametrize(
    "block_size, chunk_size",
    [(0, 20), (16, 0), (-1, 20), (16, -5), (16, 2.5), (True, 20), ("16", 20)],
)
def test_invalid_sizes_rejected(block_size, chunk_size):
    chunker = FileChunker(io.BytesIO(make_payload(40)))
    with pytest.raises(InvalidSizeError):
        chunker.configure(block_size, chunk_size)
    assert not chunker.configured


def test_invalid_sizes_leave_source_unread():
    stream = io.BytesIO(make_payload(40))
    chunker = FileChunker(stream)
    with pytest.raises(ValueError):
        chunker.configure(16, 0)
    assert stream.tell() == 0


def test_configure_twice_is_rejected():
    chunker = _configured(make_payload(40), 16, 20)
    with pytest.raises(ChunkerStateError):
        chunker.configure(16, 20)


def test_configure_after_close_is_rejected():
    chunker = FileChunker(io.BytesIO(make_payload(40)))
    chunker.close()
    with pytest.raises(ChunkerStateError):
        chunker.configure(16, 20)


def test_empty_payload():
    chunker = FileChunker(io.BytesIO(b""))
    with pytest.raises(EmptyPayloadError):
        chunker.configure(16, 20)
    assert chunker.state is ChunkerState.OPENED


def test_state_transitions():
    chunker = FileChunker(io.BytesIO(make_payload(40)))
    assert chunker.state is ChunkerState.OPENED
    chunker.configure(16, 20)
    assert chunker.state is ChunkerState.CONFIGURED
    chunker.close()
    assert chunker.state is ChunkerState.CLOSED
    # the partition outlives the source
    assert len(chunker.get_block(0)) == 2


# ---------------------------------------------------------------------
# Reading
# ---------------------------------------------------------------------
def test_read_loops_over_partial_reads():
    data = make_payload(100)
    stream = TrickleStream(data, step=7)
    chunker = FileChunker(stream)
    chunker.configure(16, 20)
    assert chunker.payload == data
    assert stream.reads >= math.ceil(100 / 7)


def test_short_read_raises():
    chunker = FileChunker(TruncatingStream(make_payload(100), limit=60))
    assert chunker.bytes_available == 100
    with pytest.raises(PayloadReadError) as exc_info:
        chunker.configure(16, 20)
    assert isinstance(exc_info.value, OSError)
    assert not chunker.configured


def test_read_failure_raises_payload_read_error():
    chunker = FileChunker(ExplodingReadStream(make_payload(10)))
    with pytest.raises(PayloadReadError):
        chunker.configure(16, 20)


def test_unseekable_stream_read_to_eof():
    data = make_payload(33)
    chunker = FileChunker(PipeLikeStream(data))
    assert chunker.bytes_available is None
    chunker.configure(16, 20)
    assert chunker.payload == data
    assert chunker.bytes_available == 33


def test_available_counts_from_current_position():
    data = make_payload(50)
    stream = io.BytesIO(data)
    stream.seek(10)
    chunker = FileChunker(stream)
    assert chunker.bytes_available == 40
    chunker.configure(16, 20)
    assert chunker.payload == data[10:]


# ---------------------------------------------------------------------
# Files & closing
# ---------------------------------------------------------------------
def test_by_file_name(payload_file):
    path, data = payload_file(45)
    with FileChunker.by_file_name(path) as chunker:
        assert chunker.name == str(path)
        chunker.configure(16, 20)
        assert b"".join(chunker.get_block(0)) == data
    assert chunker.closed


def test_by_file_name_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        FileChunker.by_file_name(tmp_path / "nope.bin")


def test_by_file_name_directory(tmp_path):
    with pytest.raises(OSError):
        FileChunker.by_file_name(tmp_path)


def test_close_is_idempotent():
    stream = io.BytesIO(make_payload(5))
    chunker = FileChunker(stream)
    chunker.close()
    chunker.close()
    assert stream.closed
    assert chunker.closed


def test_close_failure_is_swallowed():
    stream = ExplodingCloseStream(make_payload(25))
    chunker = FileChunker(stream)
    chunker.configure(16, 20)
    chunker.close()
    assert stream.close_calls == 1
    assert chunker.closed
    assert chunker.total_chunk_count == 2


def test_context_manager_closes_on_error():
    stream = io.BytesIO(b"")
    with pytest.raises(EmptyPayloadError):
        with FileChunker(stream) as chunker:
            chunker.configure(16, 20)
    assert stream.closed


def test_none_stream_rejected():
    with pytest.raises(ValueError):
        FileChunker(None)


@pytest.mark.parametrize("index", [0.0, "0", None])
def test_get_block_rejects_non_integer_index(index):
    chunker = _configured(make_payload(30), 16, 20)
    with pytest.raises(TypeError):
        chunker.get_block(index)


def test_get_block_accepts_index_like_objects():
    class _Zero:
        def __index__(self):
            return 0

    chunker = _configured(make_payload(30), 16, 20)
    assert chunker.get_block(_Zero()) == chunker.get_block(0)
