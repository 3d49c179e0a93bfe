#!/usr/bin/env python3
"""
seeds.py
--------------------
Default lookup data (mood catalog and starter tags).

Seed data is read once at startup from a YAML file and handed explicitly to
the components that need it (JournalDB for tag prepopulation, the analytics
aggregator for mood valence). Nothing here is module-level mutable state.

Seed file format:
    moods:
      - {name: Happy, category: Primary, valence: Positive}
    tags:
      - {name: Work, color: "#29B6F6"}

Usage:
    seeds = load_seeds(SEEDS_PATH)
    seeds.valence_of("happy")  # -> "Positive"
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

# --- Third party imports ---
import yaml

# --- Local imports ---
from .exceptions import SeedError
from .paths import SEEDS_PATH

VALENCES = ("Positive", "Neutral", "Negative")
CATEGORIES = ("Primary", "Secondary")
DEFAULT_TAG_COLOR = "#AAAAAA"


@dataclass(frozen=True)
class MoodSeed:
    """Catalog information for one mood."""

    name: str
    category: str = "Secondary"
    valence: str = "Neutral"


@dataclass(frozen=True)
class TagSeed:
    """A starter tag created for new profiles."""

    name: str
    color: str = DEFAULT_TAG_COLOR


@dataclass(frozen=True)
class SeedData:
    """
    Immutable bundle of seed moods and tags.

    Attributes:
        moods: Mood catalog entries
        tags: Starter tags
    """

    moods: tuple = field(default_factory=tuple)
    tags: tuple = field(default_factory=tuple)

    def _mood_index(self) -> Dict[str, MoodSeed]:
        return {m.name.lower(): m for m in self.moods}

    def valence_of(self, mood_name: Optional[str]) -> Optional[str]:
        """Return the valence of a mood (case-insensitive), or None if unknown."""
        if not mood_name:
            return None
        seed = self._mood_index().get(str(mood_name).strip().lower())
        return seed.valence if seed else None

    def category_of(self, mood_name: Optional[str]) -> Optional[str]:
        """Return the category of a mood (case-insensitive), or None if unknown."""
        if not mood_name:
            return None
        seed = self._mood_index().get(str(mood_name).strip().lower())
        return seed.category if seed else None

    def moods_by_valence(self, valence: str) -> List[str]:
        """List mood names for a valence; empty for unknown valences."""
        wanted = (valence or "").strip().lower()
        return [m.name for m in self.moods if m.valence.lower() == wanted]


def _parse_mood(raw: Any) -> MoodSeed:
    if isinstance(raw, str):
        return MoodSeed(name=raw.strip())
    if not isinstance(raw, dict) or not raw.get("name"):
        raise SeedError(f"Invalid mood seed: {raw!r}")

    category = str(raw.get("category", "Secondary")).strip().title()
    valence = str(raw.get("valence", "Neutral")).strip().title()
    if category not in CATEGORIES:
        raise SeedError(f"Invalid mood category '{category}' for {raw['name']}")
    if valence not in VALENCES:
        raise SeedError(f"Invalid mood valence '{valence}' for {raw['name']}")
    return MoodSeed(name=str(raw["name"]).strip(), category=category, valence=valence)


def _parse_tag(raw: Any) -> TagSeed:
    if isinstance(raw, str):
        return TagSeed(name=raw.strip())
    if not isinstance(raw, dict) or not raw.get("name"):
        raise SeedError(f"Invalid tag seed: {raw!r}")
    return TagSeed(
        name=str(raw["name"]).strip(),
        color=str(raw.get("color") or DEFAULT_TAG_COLOR),
    )


def parse_seeds(data: Any) -> SeedData:
    """
    Build SeedData from an already-parsed YAML document.

    Args:
        data: Mapping with optional 'moods' and 'tags' lists

    Returns:
        SeedData

    Raises:
        SeedError: If the document has the wrong shape
    """
    if data is None:
        return SeedData()
    if not isinstance(data, dict):
        raise SeedError("Seed document must be a mapping with 'moods' and 'tags'")

    moods = data.get("moods") or []
    tags = data.get("tags") or []
    if not isinstance(moods, list) or not isinstance(tags, list):
        raise SeedError("Seed 'moods' and 'tags' must be lists")

    return SeedData(
        moods=tuple(_parse_mood(m) for m in moods),
        tags=tuple(_parse_tag(t) for t in tags),
    )


def load_seeds(path: Optional[Union[str, Path]] = None) -> SeedData:
    """
    Load seed data from a YAML file.

    Args:
        path: Seed file (defaults to the packaged defaults.yaml)

    Returns:
        SeedData

    Raises:
        SeedError: If the file is missing, unreadable, or malformed
    """
    seed_path = Path(path) if path else SEEDS_PATH
    try:
        with open(seed_path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise SeedError(f"Cannot read seed file {seed_path}: {e}")
    except yaml.YAMLError as e:
        raise SeedError(f"Invalid YAML in seed file {seed_path}: {e}")

    return parse_seeds(data)
