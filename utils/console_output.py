# ABOUTME: Rich-based console output shared by the CLI and generation phases
# ABOUTME: Mirrors user-facing messages into an optional log file via the logging module

import logging
from typing import Any

from rich.console import Console
from rich.logging import RichHandler
from rich.table import Table

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"

logger = logging.getLogger("seograph")
logger.addHandler(logging.NullHandler())


class SeoConsole:
    """Indented, colour-coded status lines plus file logging setup."""

    def __init__(self, console: Console | None = None):
        self.console = console or Console(highlight=False)
        self.file_handler: logging.FileHandler | None = None

    def _emit(self, style: str, symbol: str, message: str, indent: int) -> None:
        prefix = "  " * indent
        self.console.print(f"{prefix}[{style}]{symbol}[/{style}] {message}" if symbol else f"{prefix}{message}")

    def info(self, message: str, indent: int = 0) -> None:
        self._emit("cyan", "", message, indent)
        logger.info(message)

    def success(self, message: str, indent: int = 0) -> None:
        self._emit("green", "✓", message, indent)
        logger.info(message)

    def warning(self, message: str, indent: int = 0) -> None:
        self._emit("yellow", "!", message, indent)
        logger.warning(message)

    def error(self, message: str, indent: int = 0) -> None:
        self._emit("bold red", "✗", message, indent)
        logger.error(message)

    def section(self, title: str) -> None:
        self.console.rule(f"[bold]{title}[/bold]")
        logger.info(f"== {title} ==")

    def table(self, title: str, columns: list[str], rows: list[list[Any]]) -> None:
        table = Table(title=title)
        for column in columns:
            table.add_column(column)
        for row in rows:
            table.add_row(*(str(cell) for cell in row))
        self.console.print(table)

    def setup_file_logging(self, log_file_path: str, level: str = "INFO", verbose_console: bool = False) -> None:
        """
        Route log records to ``log_file_path``.

        Args:
            log_file_path: Destination file (appended to)
            level: Logging level name for the file handler
            verbose_console: Also render library log records on the console
        """
        root = logging.getLogger()
        numeric_level = getattr(logging, level.upper(), logging.INFO)

        if self.file_handler is not None:
            root.removeHandler(self.file_handler)
            self.file_handler.close()

        self.file_handler = logging.FileHandler(log_file_path, encoding="utf-8")
        self.file_handler.setLevel(numeric_level)
        self.file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(self.file_handler)

        if verbose_console:
            root.addHandler(RichHandler(console=self.console, level=numeric_level, show_path=False))

        root.setLevel(min(root.level or logging.WARNING, numeric_level))

    @staticmethod
    def format_number(value: int) -> str:
        return f"{value:,}"

    @staticmethod
    def format_size(num_bytes: int) -> str:
        size = float(num_bytes)
        for unit in ("B", "KB", "MB", "GB"):
            if size < 1024 or unit == "GB":
                return f"{size:.0f} {unit}" if unit == "B" else f"{size:.1f} {unit}"
            size /= 1024
        return f"{size:.1f} GB"


console = SeoConsole()


def print_info(message: str, indent: int = 0) -> None:
    console.info(message, indent)


def print_success(message: str, indent: int = 0) -> None:
    console.success(message, indent)


def print_warning(message: str, indent: int = 0) -> None:
    console.warning(message, indent)


def print_error(message: str, indent: int = 0) -> None:
    console.error(message, indent)


def print_section(title: str) -> None:
    console.section(title)
