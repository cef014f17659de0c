"""AI-backed journal analysis with deterministic fallbacks.

The three public operations (entry analysis, insight generation, weekly
summary) never raise because of the text-generation service: any
``ExternalServiceError`` or unparsable reply is replaced by a fixed default
so that writing an entry never blocks on the external API.
"""

from __future__ import annotations

import copy
import json
import logging
import threading
from typing import Iterable, Optional

from flask import current_app

from app.errors import ExternalServiceError
from app.moods import ENTRY_MOODS
from journal.dispatcher import AIRequestDispatcher, ResponseMode

logger = logging.getLogger(__name__)

_assistant_lock = threading.Lock()

MIN_POINTS = 10
MAX_POINTS = 50
DEFAULT_POINTS = 10

ANALYZE_ENTRY_PROMPT = """
Analyze the following journal entry with the empathy of a trained therapist.
Journal Entry: "{content}"

User Context:
- Writing Streak: {streak} days
- Mood Patterns: {mood_stats}

Provide a JSON response with the following structure:
{{
  "sentiment": "positive/negative/neutral",
  "sentimentScore": -1.0 to 1.0,
  "primaryMood": "happy/sad/excited/calm/anxious/joyful/tired/neutral",
  "moodIntensity": 1-10,
  "secondaryMoods": ["mood1", "mood2"],
  "keywords": ["keyword1", "keyword2"],
  "themes": ["theme1", "theme2"],
  "insights": "Therapeutic analysis of emotional patterns.",
  "suggestions": ["Actionable suggestion 1.", "Actionable suggestion 2."],
  "encouragement": "A supportive, therapeutic message.",
  "pointsEarned": 10-50
}}
"""

GENERATE_INSIGHTS_PROMPT = """
Analyze this user's journaling patterns and provide therapeutic insights.

User Profile:
- Username: {username}
- Writing Streak: {streak} days
- Total Entries: {total_entries}
- Mood Stats: {mood_stats}

Recent Entry Summaries:
{entries_text}

Provide a JSON response with the following structure:
{{
  "emotionalPatterns": "Therapeutic analysis of emotional trends over time.",
  "growthAreas": "Key areas for personal growth and focus.",
  "recommendations": ["Recommendation 1.", "Recommendation 2."],
  "strengths": "Recognized strengths and positive coping mechanisms.",
  "therapeuticNotes": "Professional therapeutic observations."
}}
"""

WEEKLY_SUMMARY_PROMPT = """
You are Dr. Luna, a compassionate AI therapist. Provide a therapeutic weekly summary based on these journal entries.

Weekly Entries:
{entries_text}

Please provide a compassionate, therapeutic summary of the week that includes:
- The overall emotional journey and mood of the week.
- Key themes, patterns, or recurring thoughts.
- Moments of progress, strength, or growth you noticed.
- A warm, encouraging message for the week ahead.

Keep the tone supportive, insightful, and therapeutic.
"""

DEFAULT_ANALYSIS = {
    'sentiment': 'neutral',
    'sentimentScore': 0,
    'primaryMood': None,
    'moodIntensity': None,
    'keywords': [],
    'themes': [],
    'insights': "I'm here to support your journaling journey!",
    'suggestions': ['Try reflecting on a challenge you overcame recently.'],
    'encouragement': "Every entry is a step forward! Keep writing, you're doing great.",
    'therapeuticNotes': '',
    'pointsEarned': DEFAULT_POINTS,
}

DEFAULT_INSIGHTS = {
    'emotionalPatterns': 'Your commitment to self-reflection is a wonderful strength!',
    'growthAreas': 'Continue to explore the connections between your thoughts and feelings.',
    'recommendations': ['Try a new writing prompt to spark different insights.'],
    'strengths': 'Consistency and willingness to be vulnerable.',
    'therapeuticNotes': 'User is actively engaged in self-reflection.',
}

NO_ENTRIES_SUMMARY = (
    "No entries were made this week. Remember, every small step on your journey counts. "
    "We're here when you're ready to write again."
)
EMPTY_SUMMARY_FALLBACK = (
    "I had a moment of reflection and couldn't summarize the week. "
    "What was the most memorable part of it for you?"
)
FAILED_SUMMARY_FALLBACK = (
    "It seems my thoughts got a bit tangled summarizing the week. "
    "What stood out most to you? Let's talk about it."
)


def default_analysis():
    return copy.deepcopy(DEFAULT_ANALYSIS)


def default_insights():
    return copy.deepcopy(DEFAULT_INSIGHTS)


def _entry_field(entry, name, default=None):
    if isinstance(entry, dict):
        return entry.get(name, default)
    return getattr(entry, name, default)


def _entry_line(entry, limit, with_mood=False):
    created = _entry_field(entry, 'created_at')
    day = created.strftime('%Y-%m-%d') if created else 'unknown date'
    content = (_entry_field(entry, 'content', '') or '')[:limit]
    line = f'On {day}: "{content}..."'
    if with_mood:
        line += f" (Mood: {_entry_field(entry, 'mood_primary') or 'N/A'})"
    return line


def _string_list(value):
    if not isinstance(value, list):
        return []
    return [str(item) for item in value if item not in (None, '')]


def _clamp_score(value):
    try:
        score = float(value)
    except (TypeError, ValueError):
        return 0.0
    return max(-1.0, min(1.0, score))


def _coerce_points(value):
    try:
        points = int(round(float(value)))
    except (TypeError, ValueError):
        return DEFAULT_POINTS
    return max(MIN_POINTS, min(MAX_POINTS, points))


def _coerce_intensity(value):
    try:
        intensity = int(value)
    except (TypeError, ValueError):
        return None
    return intensity if 1 <= intensity <= 10 else None


def normalize_analysis(raw: dict) -> dict:
    """Fill gaps and clamp ranges so callers can rely on every key."""
    result = default_analysis()
    sentiment = str(raw.get('sentiment') or '').lower()
    if sentiment in ('positive', 'negative', 'neutral'):
        result['sentiment'] = sentiment
    result['sentimentScore'] = _clamp_score(raw.get('sentimentScore', 0))

    mood = str(raw.get('primaryMood') or '').lower()
    result['primaryMood'] = mood if mood in ENTRY_MOODS else None
    result['moodIntensity'] = _coerce_intensity(raw.get('moodIntensity'))

    for key in ('keywords', 'themes', 'suggestions'):
        result[key] = _string_list(raw.get(key))
    for key in ('insights', 'encouragement', 'therapeuticNotes'):
        if isinstance(raw.get(key), str) and raw[key].strip():
            result[key] = raw[key].strip()
    result['pointsEarned'] = _coerce_points(raw.get('pointsEarned', DEFAULT_POINTS))
    return result


class JournalAssistant:
    """Prompts, dispatch and fallbacks for the journaling features."""

    def __init__(self, dispatcher: AIRequestDispatcher):
        self.dispatcher = dispatcher

    def analyze_entry(self, content: str, user_context: Optional[dict] = None) -> dict:
        user_context = user_context or {}
        prompt = ANALYZE_ENTRY_PROMPT.format(
            content=content,
            streak=user_context.get('streak') or 0,
            mood_stats=json.dumps(user_context['moodStats']) if user_context.get('moodStats') else 'Not available',
        )
        try:
            response = self.dispatcher.dispatch(prompt, ResponseMode.STRUCTURED)
        except ExternalServiceError as exc:
            logger.error('Error in analyze_entry: %s', exc.message)
            return default_analysis()
        if not response:
            return default_analysis()
        return normalize_analysis(response)

    def generate_insights(self, user_context: dict, recent_entries: Iterable = ()) -> dict:
        entries_text = '\n'.join(_entry_line(entry, 150) for entry in recent_entries)
        prompt = GENERATE_INSIGHTS_PROMPT.format(
            username=user_context.get('username', 'friend'),
            streak=user_context.get('streak', 0),
            total_entries=user_context.get('totalEntries', 0),
            mood_stats=json.dumps(user_context.get('moodStats', {})),
            entries_text=entries_text or 'No recent entries.',
        )
        try:
            response = self.dispatcher.dispatch(prompt, ResponseMode.STRUCTURED)
        except ExternalServiceError as exc:
            logger.error('Error in generate_insights: %s', exc.message)
            return default_insights()
        if not response:
            return default_insights()
        insights = default_insights()
        insights.update({k: v for k, v in response.items() if k in insights and v})
        if not isinstance(insights['recommendations'], list):
            insights['recommendations'] = [str(insights['recommendations'])]
        return insights

    def generate_weekly_summary(self, recent_entries: Iterable = ()) -> str:
        recent_entries = list(recent_entries)
        if not recent_entries:
            return NO_ENTRIES_SUMMARY

        entries_text = '\n'.join(_entry_line(entry, 200, with_mood=True) for entry in recent_entries)
        try:
            summary = self.dispatcher.dispatch(
                WEEKLY_SUMMARY_PROMPT.format(entries_text=entries_text),
                ResponseMode.FREE_TEXT,
            )
        except ExternalServiceError as exc:
            logger.error('Error in generate_weekly_summary: %s', exc.message)
            return FAILED_SUMMARY_FALLBACK
        return summary.strip() if summary and summary.strip() else EMPTY_SUMMARY_FALLBACK


def get_assistant(app=None) -> JournalAssistant:
    """Process-wide assistant for *app*, so the key cursor is shared by all requests."""
    app = app or current_app._get_current_object()
    with _assistant_lock:
        assistant = app.extensions.get('journal_assistant')
        if assistant is None:
            assistant = JournalAssistant(AIRequestDispatcher.from_config(app.config))
            app.extensions['journal_assistant'] = assistant
    return assistant
