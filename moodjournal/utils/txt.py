"""
txt.py
-------------------
Text utilities for journal entry content.

Entry content comes from a rich-text editor and may contain HTML markup.
Word counts are computed on the text with markup removed.
"""

from __future__ import annotations

# --- Standard library imports ---
import re
from typing import Optional

_MARKUP_RE = re.compile(r"<[^>]*>")
_WHITESPACE_RE = re.compile(r"[ \t\n\r]+")

WORDS_PER_MINUTE = 260


# ----- Markup -----
def strip_markup(text: Optional[str]) -> str:
    """
    input: text, possibly containing <...> tags
    output: the text with every tag replaced by a single space
    process: tags become separators, so "a<br>b" still reads as two words
    """
    if not text:
        return ""
    return _MARKUP_RE.sub(" ", text)


# ----- Word-count & ~reading time -----
def count_words(text: Optional[str]) -> int:
    """
    input: text, raw entry content (may contain markup)
    output: number of whitespace-separated tokens after stripping markup

    >>> count_words("Hello <b>world</b>")
    2
    >>> count_words("   ")
    0
    """
    plain = strip_markup(text)
    return len([token for token in _WHITESPACE_RE.split(plain) if token])


def reading_time(word_count: int) -> float:
    """Minutes needed to read `word_count` words at 260 WPM."""
    if word_count <= 0:
        return 0.0
    return word_count / WORDS_PER_MINUTE
