from datetime import datetime

from app.errors import ExternalServiceError
from journal.analysis import (
    DEFAULT_POINTS,
    FAILED_SUMMARY_FALLBACK,
    NO_ENTRIES_SUMMARY,
    JournalAssistant,
    get_assistant,
    normalize_analysis,
)
from journal.dispatcher import ResponseMode

from conftest import FakeDispatcher, analysis_reply


def test_analyze_entry_normalises_reply():
    assistant = JournalAssistant(FakeDispatcher(structured=[analysis_reply(pointsEarned='80', sentimentScore=3)]))

    result = assistant.analyze_entry('A long walk.', {'streak': 2, 'moodStats': {'happy': 1}})

    assert result['pointsEarned'] == 50
    assert result['sentimentScore'] == 1.0
    assert result['primaryMood'] == 'happy'
    assert result['keywords'] == ['river', 'walk']


def test_analyze_entry_prompt_includes_context():
    dispatcher = FakeDispatcher(structured=[analysis_reply()])
    JournalAssistant(dispatcher).analyze_entry('Rainy day.', {'streak': 4, 'moodStats': {'sad': 2}})

    prompt, mode = dispatcher.calls[0]
    assert mode is ResponseMode.STRUCTURED
    assert 'Rainy day.' in prompt
    assert '4 days' in prompt
    assert '"sad": 2' in prompt


def test_analyze_entry_falls_back_on_service_failure():
    assistant = JournalAssistant(FakeDispatcher(structured=[ExternalServiceError('All AI API keys failed')]))

    result = assistant.analyze_entry('Anything')

    assert result['pointsEarned'] == DEFAULT_POINTS
    assert result['sentiment'] == 'neutral'
    assert result['sentimentScore'] == 0
    assert result['primaryMood'] is None


def test_analyze_entry_falls_back_on_unparsable_reply():
    result = JournalAssistant(FakeDispatcher(structured=[])).analyze_entry('Anything')
    assert result['pointsEarned'] == DEFAULT_POINTS


def test_normalize_analysis_rejects_unknown_mood_and_intensity():
    result = normalize_analysis({'primaryMood': 'furious', 'moodIntensity': 42, 'pointsEarned': 3})

    assert result['primaryMood'] is None
    assert result['moodIntensity'] is None
    assert result['pointsEarned'] == 10


def test_generate_insights_merges_reply_over_defaults():
    reply = {'emotionalPatterns': 'Steady and reflective.', 'recommendations': 'Sleep earlier.'}
    assistant = JournalAssistant(FakeDispatcher(structured=[reply]))

    insights = assistant.generate_insights({'username': 'ana'}, [])

    assert insights['emotionalPatterns'] == 'Steady and reflective.'
    assert insights['recommendations'] == ['Sleep earlier.']
    assert insights['strengths']


def test_generate_insights_falls_back_on_failure():
    assistant = JournalAssistant(FakeDispatcher(structured=[ExternalServiceError()]))
    insights = assistant.generate_insights({'username': 'ana'}, [])
    assert insights['recommendations']


def test_weekly_summary_without_entries_skips_dispatch():
    dispatcher = FakeDispatcher()

    assert JournalAssistant(dispatcher).generate_weekly_summary([]) == NO_ENTRIES_SUMMARY
    assert dispatcher.calls == []


def test_weekly_summary_uses_free_text():
    dispatcher = FakeDispatcher(text='  You wrote with honesty this week.  ')
    entries = [{'created_at': datetime(2024, 5, 1, 8), 'content': 'Tired but ok', 'mood_primary': 'tired'}]

    summary = JournalAssistant(dispatcher).generate_weekly_summary(entries)

    assert summary == 'You wrote with honesty this week.'
    prompt, mode = dispatcher.calls[0]
    assert mode is ResponseMode.FREE_TEXT
    assert 'On 2024-05-01' in prompt and '(Mood: tired)' in prompt


def test_weekly_summary_failure_returns_fallback():
    class Failing(FakeDispatcher):
        def dispatch(self, prompt, mode=ResponseMode.FREE_TEXT):
            raise ExternalServiceError('timeout')

    entries = [{'created_at': datetime(2024, 5, 1), 'content': 'x'}]
    assert JournalAssistant(Failing()).generate_weekly_summary(entries) == FAILED_SUMMARY_FALLBACK


def test_get_assistant_is_shared_per_app(app):
    first = get_assistant()
    assert get_assistant() is first
    assert first.dispatcher.pool_size == 3
