"""
Logging setup for CodeMaker.

Library modules log through ``logging.getLogger(__name__)``; the CLI installs
the formatter below once via ``setup_logging``. ``StructuredLogger`` attaches
``key=value`` data to records for the background job progress messages.
"""

import logging
import sys
from datetime import datetime
from pathlib import Path


class CodeMakerFormatter(logging.Formatter):
    """
    Formatter for CodeMaker logs with emoji markers and structured output.
    """

    LEVEL_EMOJIS = {
        "DEBUG": "🔍",
        "INFO": "ℹ️",
        "WARNING": "⚠️",
        "ERROR": "❌",
        "CRITICAL": "🚨",
    }

    # Color codes for terminal output
    COLORS = {
        "DEBUG": "\033[90m",  # Gray
        "INFO": "\033[36m",  # Cyan
        "WARNING": "\033[33m",  # Yellow
        "ERROR": "\033[31m",  # Red
        "CRITICAL": "\033[35m",  # Magenta
        "RESET": "\033[0m",
    }

    def __init__(self, use_color: bool | None = None, show_traceback: bool = False):
        super().__init__()
        self.use_color = use_color
        self.show_traceback = show_traceback

    def format(self, record: logging.LogRecord) -> str:
        """Format log record with emoji, color, and structured data."""
        emoji = self.LEVEL_EMOJIS.get(record.levelname, "📝")
        timestamp = datetime.fromtimestamp(record.created).strftime("%H:%M:%S")

        message = f"[{timestamp}] {emoji}  {record.getMessage()}"

        if hasattr(record, "extra_data") and record.extra_data:
            extra_parts = [f"{key}={value}" for key, value in record.extra_data.items()]
            message += f" ({', '.join(extra_parts)})"

        if record.exc_info and record.exc_info[1] is not None:
            if self.show_traceback:
                message += "\n" + self.formatException(record.exc_info)
            else:
                exc = record.exc_info[1]
                message += f" [{type(exc).__name__}: {exc}]"

        if self._should_color():
            color = self.COLORS.get(record.levelname, "")
            reset = self.COLORS["RESET"]
            message = f"{color}{message}{reset}"

        return message

    def _should_color(self) -> bool:
        if self.use_color is not None:
            return self.use_color
        return hasattr(sys.stderr, "isatty") and sys.stderr.isatty()


class StructuredLogger:
    """
    Logger adapter that accepts structured keyword data.

    Example:
        logger = get_logger(__name__)
        logger.info("File written", path="src/a.py", mode="code")
    """

    def __init__(self, name: str):
        self.logger = logging.getLogger(name)

    def debug(self, message: str, **kwargs) -> None:
        self._log(logging.DEBUG, message, kwargs)

    def info(self, message: str, **kwargs) -> None:
        self._log(logging.INFO, message, kwargs)

    def warning(self, message: str, **kwargs) -> None:
        self._log(logging.WARNING, message, kwargs)

    def error(self, message: str, exc_info: bool = False, **kwargs) -> None:
        self._log(logging.ERROR, message, kwargs, exc_info=exc_info)

    def _log(
        self, level: int, message: str, extra_data: dict, exc_info: bool = False
    ) -> None:
        if not self.logger.isEnabledFor(level):
            return
        self.logger.log(level, message, extra={"extra_data": extra_data}, exc_info=exc_info)


def setup_logging(
    level: str = "INFO", log_file: Path | None = None, color: bool | None = None
) -> None:
    """
    Setup application-wide logging configuration.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional file to write logs to
        color: Force colored output on or off (auto-detected when None)
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, level.upper()))

    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setFormatter(
        CodeMakerFormatter(use_color=color, show_traceback=level.upper() == "DEBUG")
    )
    root_logger.addHandler(console_handler)

    if log_file:
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file)
        file_formatter = logging.Formatter(
            "%(asctime)s - %(name)s - %(levelname)s - %(message)s"
        )
        file_handler.setFormatter(file_formatter)
        root_logger.addHandler(file_handler)

    # Keep request logging from the HTTP stack out of normal output
    logging.getLogger("httpx").setLevel(max(root_logger.level, logging.WARNING))
    logging.getLogger("httpcore").setLevel(max(root_logger.level, logging.WARNING))


def get_logger(name: str) -> StructuredLogger:
    """
    Get a structured logger instance for a module.

    Args:
        name: Logger name (typically __name__)

    Returns:
        StructuredLogger instance
    """
    return StructuredLogger(name)
