"""Payload generator and misbehaving binary streams used across the tests."""
from __future__ import annotations

import io


def make_payload(size: int) -> bytes:
    """Deterministic bytes with a short period, so misplaced slices show up."""
    return bytes((i * 31 + 7) % 256 for i in range(size))


class TrickleStream(io.BytesIO):
    """Hands out at most ``step`` bytes per read() call."""

    def __init__(self, data: bytes, step: int = 3):
        super().__init__(data)
        self.step = step
        self.reads = 0

    def read(self, size=-1):
        self.reads += 1
        if size is None or size < 0:
            size = self.step
        return super().read(min(size, self.step))


class TruncatingStream(io.BytesIO):
    """Reports the full length when seeking but hits EOF after ``limit`` bytes."""

    def __init__(self, data: bytes, limit: int):
        super().__init__(data)
        self.limit = limit

    def read(self, size=-1):
        left = self.limit - self.tell()
        if left <= 0:
            return b""
        if size is None or size < 0:
            size = left
        return super().read(min(size, left))


class ExplodingReadStream(io.BytesIO):
    def read(self, size=-1):
        raise OSError("device unplugged")


class ExplodingCloseStream(io.BytesIO):
    """First close() fails; later ones (e.g. from GC) really close."""

    def __init__(self, data: bytes):
        super().__init__(data)
        self.close_calls = 0

    def close(self):
        self.close_calls += 1
        if self.close_calls == 1:
            raise OSError("close failed")
        super().close()


class PipeLikeStream(io.BytesIO):
    """Cannot seek, so its length is unknown up front."""

    def seekable(self):
        return False
