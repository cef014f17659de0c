"""Mood labels shared by entries, user statistics and analysis."""

import enum


class Mood(str, enum.Enum):
    HAPPY = 'happy'
    SAD = 'sad'
    EXCITED = 'excited'
    CALM = 'calm'
    ANXIOUS = 'anxious'
    JOYFUL = 'joyful'
    TIRED = 'tired'
    NEUTRAL = 'neutral'

    @classmethod
    def parse(cls, value):
        """Return the matching member or None for unknown labels."""
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).strip().lower())
        except ValueError:
            return None


# Moods counted in a user's statistics. NEUTRAL is a valid entry mood but is not tallied.
TRACKED_MOODS = (
    Mood.HAPPY,
    Mood.SAD,
    Mood.EXCITED,
    Mood.CALM,
    Mood.ANXIOUS,
    Mood.JOYFUL,
    Mood.TIRED,
)

ENTRY_MOODS = tuple(m.value for m in Mood)
