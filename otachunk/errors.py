"""Exception hierarchy for the chunker.

Every error derives from :class:`ChunkerError` *and* from the builtin the
caller would naturally catch (``OSError`` for I/O, ``IndexError`` for bad
indices, ...).
"""


class ChunkerError(Exception):
    """Base class for all otachunk errors."""


class PayloadReadError(ChunkerError, OSError):
    """The payload could not be read in full from its source."""


class BlockIndexError(ChunkerError, IndexError):
    """A block index outside the populated range was requested."""


class InvalidSizeError(ChunkerError, ValueError):
    """A block or chunk size is not a positive integer."""


class EmptyPayloadError(ChunkerError, ValueError):
    """The source holds no bytes, so no partition can be built."""


class ChunkerStateError(ChunkerError, RuntimeError):
    """An operation was called in the wrong lifecycle state."""


class ManifestError(ChunkerError, ValueError):
    """Received chunks do not match their manifest."""


__all__ = [
    "ChunkerError",
    "PayloadReadError",
    "BlockIndexError",
    "InvalidSizeError",
    "EmptyPayloadError",
    "ChunkerStateError",
    "ManifestError",
]
