#!/usr/bin/env python3
"""
export_manager.py
-----------------
Data export functionality for the moodjournal database.

Export Formats:
    1. **JSON**: One document holding a user's entries and tag catalog
       - Suitable for programmatic processing and backups
    2. **Markdown**: One file per day
       - YAML frontmatter with date, title, moods, tags and word count
       - Entry content as the body
       - year/ subdirectories mirror a journal folder layout

Every file is staged in a temporary file next to its destination and
atomically moved into place, so a failed export never leaves a partial file.

Usage:
    exporter = ExportManager(logger=db.logger)
    entries = db.get_all_entries()

    exporter.export_to_json(entries, Path("exports/journal.json"), tags=db.get_tags())
    exporter.export_to_markdown(entries, Path("exports/md"))
"""
from __future__ import annotations

import json
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence, Union

import yaml

from moodjournal.core.exceptions import ExportError, TemporalFileError
from moodjournal.core.logging_manager import JournalLogger, safe_logger
from moodjournal.core.temporal_files import TemporalFileManager

from .decorators import log_database_operation
from .models import JournalEntry, Tag


class ExportManager:
    """
    Handles data export operations for journal entries.

    Exporters take already-loaded entries, so they never hold a session open
    while writing files.
    """

    def __init__(self, logger: Optional[JournalLogger] = None) -> None:
        self.logger = logger

    @log_database_operation("export_to_json")
    def export_to_json(
        self,
        entries: Sequence[JournalEntry],
        export_file: Union[str, Path],
        tags: Optional[Sequence[Tag]] = None,
    ) -> Path:
        """
        Export entries (and optionally the tag catalog) to one JSON file.

        Args:
            entries: Entries to export
            export_file: Destination path
            tags: Tag rows to include

        Returns:
            Path to the exported JSON file

        Raises:
            ExportError: If the file cannot be written
        """
        export_file = Path(export_file)
        document = {
            "export_timestamp": datetime.now(timezone.utc).isoformat(),
            "entry_count": len(entries),
            "entries": [
                self._serialize_entry(entry)
                for entry in sorted(entries, key=lambda e: e.date)
            ],
            "tags": [self._serialize_tag(tag) for tag in tags or []],
        }
        payload = json.dumps(document, ensure_ascii=False, indent=2, default=str)

        self._write_atomic(export_file, payload + "\n")
        return export_file

    @log_database_operation("export_to_markdown")
    def export_to_markdown(
        self,
        entries: Sequence[JournalEntry],
        output_dir: Union[str, Path],
    ) -> List[Path]:
        """
        Export each entry to `<output_dir>/<year>/<YYYY-MM-DD>.md`.

        Returns:
            Paths of the written files, in date order

        Raises:
            ExportError: If any file cannot be written
        """
        output_dir = Path(output_dir)
        written: List[Path] = []

        for entry in sorted(entries, key=lambda e: e.date):
            target = output_dir / str(entry.date.year) / f"{entry.date_formatted}.md"
            self._write_atomic(target, self.entry_to_markdown(entry))
            written.append(target)

        safe_logger(self.logger).log_operation(
            "export_markdown",
            {"entries": len(written), "output_dir": str(output_dir)},
        )
        return written

    # ---- Serialization ----
    @staticmethod
    def _serialize_entry(entry: JournalEntry) -> Dict[str, Any]:
        return {
            "id": entry.id,
            "user_id": entry.user_id,
            "date": entry.date_formatted,
            "title": entry.title,
            "content": entry.content,
            "primary_mood": entry.primary_mood.value,
            "secondary_moods": [m.value for m in entry.secondary_moods],
            "tags": entry.tag_names,
            "word_count": entry.word_count,
            "reading_time": entry.reading_time,
            "created_at": entry.created_at.isoformat() if entry.created_at else None,
            "updated_at": entry.updated_at.isoformat() if entry.updated_at else None,
        }

    @staticmethod
    def _serialize_tag(tag: Tag) -> Dict[str, Any]:
        return {
            "id": tag.id,
            "name": tag.name,
            "color": tag.color,
            "usage_count": tag.usage_count,
        }

    @staticmethod
    def entry_to_markdown(entry: JournalEntry) -> str:
        """Render one entry as Markdown with YAML frontmatter."""
        frontmatter = {
            "date": entry.date_formatted,
            "title": entry.title or None,
            "primary_mood": entry.primary_mood.value,
            "secondary_moods": [m.value for m in entry.secondary_moods],
            "tags": entry.tag_names,
            "word_count": entry.word_count,
        }
        yaml_str = yaml.dump(
            frontmatter,
            default_flow_style=False,
            allow_unicode=True,
            sort_keys=False,
        )
        body = entry.content.rstrip("\n")
        return f"---\n{yaml_str}---\n\n{body}\n"

    # ---- Files ----
    def _write_atomic(self, target: Path, content: str) -> None:
        try:
            with TemporalFileManager(base_dir=target.parent) as temp_manager:
                temp_file = temp_manager.create_temp_file(suffix=target.suffix)
                temp_file.write_text(content, encoding="utf-8")
                temp_manager.commit(temp_file, target)
        except (OSError, TemporalFileError) as e:
            raise ExportError(f"Failed to write {target}: {e}") from e
