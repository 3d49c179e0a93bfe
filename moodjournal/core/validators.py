#!/usr/bin/env python3
"""
validators.py
--------------------
Data validation and normalization utilities for moodjournal operations.

Provides type-safe conversion, validation, and normalization functions
used by the entry and tag managers and by the CLI.
"""
from __future__ import annotations

from datetime import date, datetime
from typing import Any, Dict, Iterable, List, Optional

from .exceptions import ValidationError


class DataValidator:
    """Centralized data validation for database operations."""

    @staticmethod
    def validate_required_fields(
        data: Dict[str, Any], required_fields: List[str]
    ) -> None:
        """
        Validate that required fields are present and non-empty.

        Args:
            data: Data dictionary to validate
            required_fields: List of required field names

        Raises:
            ValidationError: If validation fails
        """
        for field in required_fields:
            if field not in data or data[field] is None or data[field] == "":
                raise ValidationError(f"Required field '{field}' missing or empty")

    @staticmethod
    def normalize_date(date_value: Any) -> Optional[date]:
        """
        Normalize various date inputs to a calendar day.

        Time-of-day information is discarded.

        Args:
            date_value: ISO date string, date object, or datetime

        Returns:
            Normalized date object or None if it cannot be parsed
        """
        # datetime is a subclass of date, so it must be checked first
        if isinstance(date_value, datetime):
            return date_value.date()
        if isinstance(date_value, date):
            return date_value
        if isinstance(date_value, str):
            text = date_value.strip()
            if not text:
                return None
            try:
                return datetime.fromisoformat(text).date()
            except ValueError:
                pass
            try:
                return date.fromisoformat(text)
            except ValueError:
                return None
        return None

    @staticmethod
    def normalize_string(value: Any) -> Optional[str]:
        """
        Normalize string value: strip surrounding whitespace.

        Args:
            value: Value to normalize

        Returns:
            Stripped string, or None for None/blank input
        """
        if value is None:
            return None
        text = str(value).strip()
        return text or None

    @staticmethod
    def normalize_int(value: Any) -> Optional[int]:
        """
        Convert value to integer safely.

        Args:
            value: Value to convert

        Returns:
            Integer value or None
        """
        if value is None or isinstance(value, bool):
            return None
        try:
            return int(value)
        except (TypeError, ValueError):
            return None

    @staticmethod
    def tag_key(name: Any) -> Optional[str]:
        """
        Case-insensitive identity of a tag name.

        Args:
            name: Raw tag name

        Returns:
            Lower-cased, stripped name or None for blank input
        """
        normalized = DataValidator.normalize_string(name)
        return normalized.lower() if normalized else None

    @staticmethod
    def normalize_tag_names(names: Optional[Iterable[Any]]) -> Dict[str, str]:
        """
        Deduplicate tag names case-insensitively.

        The first spelling seen for a key is kept as the display name.

        Args:
            names: Iterable of raw tag names (or a single comma separated string)

        Returns:
            Ordered mapping of tag key -> display name

        Examples:
            >>> DataValidator.normalize_tag_names(["Work", " work ", "Health"])
            {'work': 'Work', 'health': 'Health'}
        """
        if names is None:
            return {}
        if isinstance(names, str):
            names = names.split(",")

        result: Dict[str, str] = {}
        for raw in names:
            display = DataValidator.normalize_string(raw)
            if not display:
                continue
            key = display.lower()
            if key not in result:
                result[key] = display
        return result

    @staticmethod
    def validate_page(page: Any, page_size: Any) -> tuple[int, int]:
        """
        Validate 1-based pagination arguments.

        Raises:
            ValidationError: If page or page_size are not positive integers
        """
        page_num = DataValidator.normalize_int(page)
        size = DataValidator.normalize_int(page_size)
        if page_num is None or page_num < 1:
            raise ValidationError(f"Page must be a positive integer, got {page!r}")
        if size is None or size < 1:
            raise ValidationError(f"Page size must be a positive integer, got {page_size!r}")
        return page_num, size
