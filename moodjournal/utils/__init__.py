"""
Utilities package for moodjournal.

- txt: Markup stripping, word counting and reading time

Import commonly-used utilities directly from this package:
    from moodjournal.utils import count_words
"""

from .txt import count_words, reading_time, strip_markup

__all__ = [
    "count_words",
    "reading_time",
    "strip_markup",
]
