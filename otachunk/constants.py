# =============================================================================
# OTACHUNK CONSTANTS
# =============================================================================
# Default sizes and limits used when partitioning an image for an
# over-the-air transfer.
# =============================================================================

# =============================================================================
# PARTITIONING
# =============================================================================

DEFAULT_FILE_BLOCK_SIZE = 16            # Requested block size used by the OTA sender (bytes)
DEFAULT_FILE_CHUNK_SIZE = 20            # Chunk size when the link did not negotiate one (bytes)
SINGLE_BLOCK_COUNT = 1                  # Populated blocks per partition

# =============================================================================
# I/O
# =============================================================================

READ_BUFFER_SIZE = 1 << 18              # Max bytes requested per read() call (256 KiB)
HASH_BUFFER_SIZE = 1 << 20              # Block size for streamed SHA-256 (1 MiB)

# =============================================================================
# TRANSFER
# =============================================================================

COUNTER_MIN = 1                         # First value of the rolling write counter
COUNTER_MAX = 255                       # Counter wraps back to COUNTER_MIN after this
PROGRESS_COMPLETE = 100.0               # Progress reported once the last chunk is out

# =============================================================================
# MANIFEST
# =============================================================================

MANIFEST_VERSION = "1"
MANIFEST_SUFFIX = ".manifest"
