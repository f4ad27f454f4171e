"""Shared fixtures and import path setup for the test-suite."""
from __future__ import annotations

import sys
from pathlib import Path

import pytest

_TESTS_DIR = Path(__file__).resolve().parent
for _p in (str(_TESTS_DIR.parent), str(_TESTS_DIR)):
    if _p not in sys.path:
        sys.path.insert(0, _p)

from streams import make_payload  # noqa: E402


@pytest.fixture
def payload_file(tmp_path: Path):
    """Factory writing *size* bytes to a fresh file and returning ``(path, data)``."""

    def _write(size: int, name: str = "firmware.bin"):
        data = make_payload(size)
        path = tmp_path / name
        path.write_bytes(data)
        return path, data

    return _write
