#!/usr/bin/env python3
"""
temporal_files.py
--------------------
Temporal file management for atomic writes.

Files are staged next to their destination and moved into place only once
fully written, so a failed export never leaves a truncated file behind.

Usage:
    from moodjournal.core.temporal_files import TemporalFileManager

    with TemporalFileManager(base_dir=target.parent) as temp_manager:
        temp_file = temp_manager.create_temp_file(suffix=".json")
        temp_file.write_text(payload, encoding="utf-8")
        temp_manager.commit(temp_file, target)
    # Anything not committed is removed on exit
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import tempfile
from pathlib import Path
from typing import Any, Dict, List, Optional

# --- Local imports ---
from .exceptions import TemporalFileError


class TemporalFileManager:
    """
    Manages temporary files with automatic cleanup.

    Attributes:
        base_dir: Directory the temporary files are created in
        active_files: Temporary files not yet committed or removed
    """

    def __init__(self, base_dir: Optional[Path] = None) -> None:
        self.base_dir = Path(base_dir) if base_dir else Path(tempfile.gettempdir())
        self.active_files: List[Path] = []

    def create_temp_file(self, suffix: str = "", prefix: str = "moodjournal_") -> Path:
        """
        Create a temporary file and track it for cleanup.

        Raises:
            TemporalFileError: If file creation fails
        """
        try:
            self.base_dir.mkdir(parents=True, exist_ok=True)
            fd, temp_path = tempfile.mkstemp(
                suffix=suffix, prefix=prefix, dir=self.base_dir
            )
            os.close(fd)
        except OSError as e:
            raise TemporalFileError(f"Failed to create temporary file: {e}") from e

        path_obj = Path(temp_path)
        self.active_files.append(path_obj)
        return path_obj

    def commit(self, temp_file: Path, destination: Path) -> Path:
        """
        Atomically move a staged file to its destination.

        Returns:
            The destination path
        """
        destination = Path(destination)
        destination.parent.mkdir(parents=True, exist_ok=True)
        os.replace(temp_file, destination)
        if temp_file in self.active_files:
            self.active_files.remove(temp_file)
        return destination

    def cleanup(self) -> Dict[str, int]:
        """
        Remove every tracked file that was not committed.

        Returns:
            Dictionary with cleanup statistics
        """
        cleanup_stats = {"files_removed": 0, "errors": 0}

        for temp_file in self.active_files[:]:
            try:
                if temp_file.exists():
                    temp_file.unlink()
                    cleanup_stats["files_removed"] += 1
                self.active_files.remove(temp_file)
            except OSError:
                cleanup_stats["errors"] += 1

        return cleanup_stats

    def __enter__(self) -> "TemporalFileManager":
        return self

    def __exit__(
        self,
        exc_type: Optional[type],
        exc_val: Optional[Exception],
        exc_tb: Optional[Any],
    ) -> None:
        """Context manager exit with automatic cleanup."""
        del exc_type, exc_val, exc_tb
        self.cleanup()
