"""
Enumeration Types
------------------

Enum classes for the moodjournal database models.

Enums:
    - Mood: Every mood a journal entry may carry
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from enum import Enum
from typing import Any, List


class Mood(str, Enum):
    """
    Enumeration of moods.

    Values match the names used by the seed catalog, so a mood's category
    and valence can be looked up with `SeedData.valence_of(mood.value)`.
    """

    HAPPY = "Happy"
    EXCITED = "Excited"
    RELAXED = "Relaxed"
    GRATEFUL = "Grateful"
    CONFIDENT = "Confident"
    CALM = "Calm"
    THOUGHTFUL = "Thoughtful"
    CURIOUS = "Curious"
    NOSTALGIC = "Nostalgic"
    BORED = "Bored"
    SAD = "Sad"
    ANGRY = "Angry"
    STRESSED = "Stressed"
    LONELY = "Lonely"
    ANXIOUS = "Anxious"
    TIRED = "Tired"

    @classmethod
    def choices(cls) -> List[str]:
        """Get all available mood choices."""
        return [mood.value for mood in cls]

    @classmethod
    def parse(cls, value: Any) -> "Mood":
        """
        Resolve a Mood from an enum member or a case-insensitive name.

        Raises:
            ValueError: If the value does not name a mood
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            wanted = value.strip().lower()
            for mood in cls:
                if mood.value.lower() == wanted or mood.name.lower() == wanted:
                    return mood
        raise ValueError(f"Unknown mood: {value!r}")
