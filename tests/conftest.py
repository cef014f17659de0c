from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from app import create_app
from app.extensions import db
from auth.models import User
from journal.analysis import JournalAssistant
from journal.dispatcher import ResponseMode
from journal.models import JournalEntry


class FakeDispatcher:
    """Stands in for AIRequestDispatcher; answers from canned replies."""

    def __init__(self, structured=None, text='A gentle week of reflection.'):
        self.structured = list(structured or [])
        self.text = text
        self.calls = []

    def dispatch(self, prompt, mode=ResponseMode.FREE_TEXT):
        self.calls.append((prompt, mode))
        if mode is ResponseMode.FREE_TEXT:
            return self.text
        if not self.structured:
            return None
        reply = self.structured[0] if len(self.structured) == 1 else self.structured.pop(0)
        if isinstance(reply, Exception):
            raise reply
        return reply


class FakeOpenAIClient:
    """Mimics ``client.chat.completions.create`` of the openai SDK."""

    def __init__(self, outcome, log):
        self.chat = SimpleNamespace(completions=self)
        self._outcome = outcome
        self._log = log

    def create(self, **params):
        self._log.append(params)
        if isinstance(self._outcome, Exception):
            raise self._outcome
        message = SimpleNamespace(content=self._outcome)
        return SimpleNamespace(choices=[SimpleNamespace(message=message)])


@pytest.fixture()
def app():
    app = create_app('testing')
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture()
def client(app):
    return app.test_client()


@pytest.fixture()
def fake_dispatcher(app):
    """Install a FakeDispatcher behind the app's journal assistant."""
    dispatcher = FakeDispatcher(structured=[analysis_reply()])
    app.extensions['journal_assistant'] = JournalAssistant(dispatcher)
    return dispatcher


@pytest.fixture()
def make_user(app):
    counter = {'n': 0}

    def _make_user(**overrides):
        counter['n'] += 1
        fields = {
            'username': f"writer{counter['n']}",
            'email': f"writer{counter['n']}@example.com",
            'password': 'secret123',
        }
        fields.update(overrides)
        user = User(**fields)
        db.session.add(user)
        db.session.commit()
        return user

    return _make_user


@pytest.fixture()
def user(make_user):
    return make_user()


@pytest.fixture()
def auth_headers(user):
    return {'Authorization': f'Bearer {user.generate_auth_token()}'}


@pytest.fixture()
def make_entry(app):
    def _make_entry(user, created_at=None, **overrides):
        created_at = created_at or datetime.utcnow()
        fields = {
            'title': 'Morning pages',
            'mood_primary': 'calm',
            'tags': [],
            'points_earned': 10,
            'created_at': created_at,
            'updated_at': created_at,
        }
        content = overrides.pop('content', 'Slept well and walked by the river.')
        fields.update(overrides)
        entry = JournalEntry(user_id=user.id, **fields)
        entry.set_content(content)
        db.session.add(entry)
        db.session.commit()
        return entry

    return _make_entry


def analysis_reply(**overrides):
    reply = {
        'sentiment': 'positive',
        'sentimentScore': 0.6,
        'primaryMood': 'happy',
        'moodIntensity': 7,
        'keywords': ['river', 'walk'],
        'themes': ['nature'],
        'insights': 'You find calm outdoors.',
        'suggestions': ['Walk again tomorrow.'],
        'encouragement': 'Lovely entry, keep going!',
        'pointsEarned': 15,
    }
    reply.update(overrides)
    return reply


def days_ago(days, hour=9):
    return (datetime.utcnow() - timedelta(days=days)).replace(hour=hour, minute=0, second=0, microsecond=0)
