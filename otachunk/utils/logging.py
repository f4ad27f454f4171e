import bittensor as bt


class ColoredLogger:
    """Thin wrapper that colours status lines before handing them to bt.logging."""

    BLUE = "blue"
    YELLOW = "yellow"
    RED = "red"
    GREEN = "green"
    CYAN = "cyan"
    GRAY = "gray"
    RESET = "reset"

    _COLORS = {
        "blue": "\033[94m",
        "yellow": "\033[93m",
        "red": "\033[91m",
        "green": "\033[92m",
        "cyan": "\033[96m",
        "gray": "\033[90m",
        "reset": "\033[0m",
    }

    @staticmethod
    def _colored_msg(message: str, color: str) -> str:
        """Return *message* wrapped in the ANSI codes for *color*."""
        if color not in ColoredLogger._COLORS:
            # Unknown colour: leave the message as is
            return message
        return (
            f"{ColoredLogger._COLORS[color]}{message}{ColoredLogger._COLORS['reset']}"
        )

    @staticmethod
    def debug(message: str, color: str = "gray") -> None:
        bt.logging.debug(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def info(message: str, color: str = "blue") -> None:
        bt.logging.info(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def warning(message: str, color: str = "yellow") -> None:
        bt.logging.warning(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def error(message: str, color: str = "red") -> None:
        bt.logging.error(ColoredLogger._colored_msg(message, color))

    @staticmethod
    def success(message: str, color: str = "green") -> None:
        bt.logging.success(ColoredLogger._colored_msg(message, color))


def describe_layout(chunker) -> str:
    """One-line summary of a configured chunker's partition."""
    return (
        f"{chunker.bytes_available} bytes → {chunker.number_of_blocks} block(s) of "
        f"{chunker.file_block_size} B, {chunker.total_chunk_count} chunk(s) of "
        f"≤{chunker.file_chunk_size} B"
    )
