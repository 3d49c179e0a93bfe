#!/usr/bin/env python3
"""
logging_manager.py
--------------------
File logging for moodjournal.

Each record is a single line: the event name, the journal context it
touched (user, entry, day) and whatever details remain as sorted JSON.
Everything goes to `<component>.log`; errors are copied to `errors.log`.

Usage:
    logger = JournalLogger(LOG_DIR, component_name="database")
    logger.log_operation("save_entry", {"user_id": 3, "entry_id": 12, "status": "created"})
    # 2026-10-19 08:30:00 - INFO - save_entry [user=3 entry=12] {"status": "created"}
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import json
import logging
import sys
import traceback
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Any, Dict, Optional

# --- Third party imports ---
import click

# Detail keys promoted into the bracketed record scope, in display order
CONTEXT_KEYS = (("user_id", "user"), ("entry_id", "entry"), ("date", "day"))

RECORD_FORMAT = "%(asctime)s - %(levelname)s - %(message)s"


def format_record(event: str, details: Optional[Dict[str, Any]] = None) -> str:
    """
    Render an event and its details as one log line.

    Examples:
        >>> format_record("delete_entry", {"entry_id": 4, "user_id": 1, "status": "deleted"})
        'delete_entry [user=1 entry=4] {"status": "deleted"}'
    """
    rest = dict(details or {})
    scope = []
    for key, label in CONTEXT_KEYS:
        value = rest.pop(key, None)
        if value is not None:
            scope.append(f"{label}={value}")

    line = event
    if scope:
        line += f" [{' '.join(scope)}]"
    if rest:
        line += f" {json.dumps(rest, default=str, sort_keys=True)}"
    return line


def format_cli_error(error: Exception, show_traceback: bool = False) -> str:
    """Short error line for the terminal, optionally followed by the traceback."""
    message = f"❌ {type(error).__name__}: {error}"
    if show_traceback and error.__traceback__ is not None:
        tb = "".join(
            traceback.format_exception(type(error), error, error.__traceback__)
        )
        return f"{message}\n\n{tb}"
    return message


class JournalLogger:
    """
    Rotating file logger for one moodjournal component.

    Attributes:
        log_dir: Directory holding the log files
        component_name: Component label, also the main log file name
        logger: Underlying stdlib logger (does not propagate to root)
    """

    def __init__(
        self,
        log_dir: Path,
        component_name: str = "moodjournal",
        max_bytes: int = 5 * 1024 * 1024,
        backup_count: int = 3,
    ) -> None:
        self.log_dir = Path(log_dir)
        self.component_name = component_name
        self.log_dir.mkdir(parents=True, exist_ok=True)

        self.logger = logging.getLogger(f"moodjournal.{component_name}")
        self.logger.setLevel(logging.DEBUG)
        self.logger.propagate = False
        # A second JournalLogger for the same component replaces the first
        self.close()

        for file_name, level in (
            (f"{component_name}.log", logging.DEBUG),
            ("errors.log", logging.ERROR),
        ):
            handler = RotatingFileHandler(
                self.log_dir / file_name,
                maxBytes=max_bytes,
                backupCount=backup_count,
                encoding="utf-8",
            )
            handler.setLevel(level)
            handler.setFormatter(
                logging.Formatter(RECORD_FORMAT, datefmt="%Y-%m-%d %H:%M:%S")
            )
            self.logger.addHandler(handler)

    def close(self) -> None:
        """Flush and detach the file handlers."""
        for handler in list(self.logger.handlers):
            handler.close()
            self.logger.removeHandler(handler)

    def log_operation(
        self, operation: str, details: Optional[Dict[str, Any]] = None
    ) -> None:
        """Record a completed operation at INFO level."""
        self.logger.info(format_record(operation, details))

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        self.logger.debug(format_record(message, details))

    def log_error(
        self, error: Exception, context: Optional[Dict[str, Any]] = None
    ) -> None:
        """
        Record an error with its context and, when available, its traceback.

        Args:
            error: Exception that occurred
            context: Operation details (user_id, entry_id, ...)
        """
        exc_info = None
        if error.__traceback__ is not None:
            exc_info = (type(error), error, error.__traceback__)
        self.logger.error(
            format_record(f"{type(error).__name__}: {error}", context),
            exc_info=exc_info,
        )

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        """Log a CLI failure and return the line to show the user."""
        self.log_error(error, context or {"source": "cli"})
        return format_cli_error(error, show_traceback)


class NullLogger:
    """Stands in for JournalLogger when no log directory is configured."""

    def log_operation(self, operation: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_debug(self, message: str, details: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_error(self, error: Exception, context: Optional[Dict[str, Any]] = None) -> None:
        pass

    def log_cli_error(
        self,
        error: Exception,
        context: Optional[Dict[str, Any]] = None,
        show_traceback: bool = False,
    ) -> str:
        return format_cli_error(error, show_traceback)

    def close(self) -> None:
        pass


_null_logger = NullLogger()


def safe_logger(logger: Optional[JournalLogger]) -> JournalLogger:
    """
    Return the logger, or a shared NullLogger for None.

    Usage:
        safe_logger(self.logger).log_debug("tag_missing", {"user_id": 1})
    """
    return logger if logger is not None else _null_logger  # type: ignore[return-value]


def handle_cli_error(
    ctx: "click.Context",
    error: Exception,
    operation: str,
    additional_context: Optional[Dict[str, Any]] = None,
    exit_code: int = 1,
) -> None:
    """
    Log a failed CLI command, print a one-line error to stderr and exit.

    The logger and verbose flag come from `ctx.obj`; with `--verbose` the
    traceback is printed as well. Never returns.

    Args:
        ctx: Click context
        error: Exception that occurred
        operation: Name of the failed command (e.g. 'write_entry')
        additional_context: Extra details (user_id, date, entry_id, ...)
        exit_code: Process exit status
    """
    obj = ctx.obj or {}
    context = {"operation": operation, **(additional_context or {})}

    message = safe_logger(obj.get("logger")).log_cli_error(
        error, context, show_traceback=obj.get("verbose", False)
    )
    click.echo(message, err=True)
    sys.exit(exit_code)
