"""
Logger Utility
==============

Context-aware logging for Robin.

Every component creates its own Logger with a short context name
("Handlers", "KnowledgeStore", ...) so a single line tells you where it
came from:

    [2024-03-19T10:30:00] [INFO] [Discussion] Got answer for U123 (iteration 2)

Output goes to the terminal (colored, errors on stderr) unless a log file
has been configured with configure_log_file(). The knowledge tool server
needs that: it speaks the tool protocol over stdout, so anything printed
there would corrupt the stream.

Usage:
    from robin.utils.logger import Logger

    store_logger = Logger("KnowledgeStore")
    store_logger.info("Looking up knowledge", {"email": "a@b.com"})

    # Route every logger in the process to a file
    configure_log_file(Path("~/.robin/logs/mcp-server.log").expanduser())
"""

import json
import os
import sys
from datetime import datetime
from enum import IntEnum
from pathlib import Path
from typing import Any, TextIO


class LogLevel(IntEnum):
    """Log levels; higher is more severe."""
    DEBUG = 10
    INFO = 20
    WARNING = 30
    ERROR = 40


class Colors:
    """ANSI escape codes for colored terminal output."""
    RESET = "\033[0m"
    DEBUG = "\033[36m"    # Cyan
    INFO = "\033[32m"     # Green
    WARNING = "\033[33m"  # Yellow
    ERROR = "\033[31m"    # Red
    DIM = "\033[2m"


_LEVEL_NAMES = {
    "DEBUG": LogLevel.DEBUG,
    "INFO": LogLevel.INFO,
    "WARNING": LogLevel.WARNING,
    "WARN": LogLevel.WARNING,
    "ERROR": LogLevel.ERROR,
}

# Process-wide file sink. None means terminal output.
_log_file: Path | None = None


def _get_log_level_from_env() -> LogLevel:
    """Parse LOG_LEVEL, defaulting to INFO."""
    return _LEVEL_NAMES.get(os.getenv("LOG_LEVEL", "INFO").upper(), LogLevel.INFO)


def configure_log_file(path: Path | None) -> None:
    """
    Send all log output to a file instead of the terminal.

    The parent directory is created if needed. Pass None to go back to
    terminal output.

    Args:
        path: File to append log lines to, or None
    """
    global _log_file
    if path is not None:
        path.parent.mkdir(parents=True, exist_ok=True)
    _log_file = path


def get_log_file() -> Path | None:
    """Return the configured log file, if any."""
    return _log_file


class Logger:
    """
    A context-aware logger.

    Example:
        logger = Logger("Agent")
        logger.info("Answering on behalf of a user")

        child = logger.child("Prompt")
        child.debug("Prompt built", {"chars": 812})   # [Agent:Prompt]
    """

    def __init__(self, context: str = ""):
        """
        Args:
            context: Prefix shown on every line (e.g. "Handlers")
        """
        self.context = context
        self._min_level = _get_log_level_from_env()

    def child(self, child_context: str) -> "Logger":
        """Create a logger whose context is nested under this one."""
        new_context = f"{self.context}:{child_context}" if self.context else child_context
        return Logger(new_context)

    def _format_message(self, level: str, message: str, color: str, colored: bool) -> str:
        """Format as [TIMESTAMP] [LEVEL] [context] message."""
        timestamp = datetime.now().isoformat(timespec="seconds")
        context_str = f"[{self.context}] " if self.context else ""

        if not colored:
            return f"[{timestamp}] [{level}] {context_str}{message}"

        return (
            f"{Colors.DIM}[{timestamp}]{Colors.RESET} "
            f"{color}[{level}]{Colors.RESET} "
            f"{context_str}{message}"
        )

    def _log(
        self,
        level: LogLevel,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None = None
    ) -> None:
        """Filter by level and write to the active sink."""
        if level < self._min_level:
            return

        if _log_file is not None:
            with _log_file.open("a", encoding="utf-8") as handle:
                self._write(handle, level_name, color, message, data, colored=False)
            return

        stream = sys.stderr if level >= LogLevel.ERROR else sys.stdout
        self._write(stream, level_name, color, message, data, colored=True)

    def _write(
        self,
        stream: TextIO,
        level_name: str,
        color: str,
        message: str,
        data: dict[str, Any] | None,
        colored: bool
    ) -> None:
        print(self._format_message(level_name, message, color, colored), file=stream)

        if data:
            data_str = json.dumps(data, indent=2, default=str)
            if colored:
                data_str = f"{Colors.DIM}{data_str}{Colors.RESET}"
            print(data_str, file=stream)

    def debug(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a debug message (only shown with LOG_LEVEL=DEBUG)."""
        self._log(LogLevel.DEBUG, "DEBUG", Colors.DEBUG, message, data)

    def info(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log an info message."""
        self._log(LogLevel.INFO, "INFO", Colors.INFO, message, data)

    def warning(self, message: str, data: dict[str, Any] | None = None) -> None:
        """Log a warning."""
        self._log(LogLevel.WARNING, "WARN", Colors.WARNING, message, data)

    def error(self, message: str, error: Exception | None = None) -> None:
        """
        Log an error, optionally with the exception that caused it.

        Args:
            message: What went wrong
            error: Exception whose type and message are included
        """
        data = None
        if error:
            data = {
                "error_type": type(error).__name__,
                "error_message": str(error),
            }
        self._log(LogLevel.ERROR, "ERROR", Colors.ERROR, message, data)

