"""Per-user journaling counters: points, entry totals, mood tallies and streaks.

Counter changes are sent to the database as single ``UPDATE`` statements
(``points = points + :n``) rather than read-modify-write on the loaded
object, so two requests touching the same user cannot lose each other's
increments. Every operation commits by default; pass ``commit=False`` to
fold it into a larger transaction (see ``app.storage.transaction``).
"""

import logging
from datetime import date, datetime

from sqlalchemy import case, update
from sqlalchemy.exc import SQLAlchemyError

from app.errors import StorageError
from app.extensions import db
from app.moods import Mood, TRACKED_MOODS
from auth.models import User, level_for, progress_for

logger = logging.getLogger(__name__)

__all__ = [
    'apply_new_entry',
    'revise_entry_points',
    'remove_entry',
    'evaluate_streak',
    'next_streak',
    'longest_daily_run',
    'level_for',
    'progress_for',
]


def _floor_zero(expr):
    return case((expr < 0, 0), else_=expr)


def _as_day(value):
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    raise TypeError(f'Expected date or datetime, got {type(value).__name__}')


def _execute_counters(user, values, commit):
    stmt = (
        update(User)
        .where(User.id == user.id)
        .values(values)
        .execution_options(synchronize_session=False)
    )
    try:
        db.session.execute(stmt)
        if commit:
            db.session.commit()
        db.session.refresh(user)
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Counter update for user %s failed: %s', user.id, exc)
        raise StorageError('Could not update user statistics') from exc
    return user


def apply_new_entry(user, mood, points_earned, commit=True):
    """Count a freshly created entry: one more entry, its points and its mood.

    Moods outside the tracked set (``neutral`` or anything unknown) are
    ignored for the tally; the entry and points still count.
    """
    points_earned = max(0, int(points_earned or 0))
    values = {
        User.total_entries: User.total_entries + 1,
        User.points: User.points + points_earned,
    }
    parsed = Mood.parse(mood)
    if parsed in TRACKED_MOODS:
        column = User.mood_column(parsed)
        values[column] = column + 1
    else:
        logger.debug('Mood %r is not tracked; skipping tally', mood)
    return _execute_counters(user, values, commit)


def revise_entry_points(user, old_points, new_points, commit=True):
    """Replace an entry's previous award with a new one; points never drop below 0."""
    delta = int(new_points or 0) - int(old_points or 0)
    values = {User.points: _floor_zero(User.points + delta)}
    return _execute_counters(user, values, commit)


def remove_entry(user, points_earned, commit=True):
    """Undo an entry's contribution; both counters are floored at 0."""
    values = {
        User.total_entries: _floor_zero(User.total_entries - 1),
        User.points: _floor_zero(User.points - int(points_earned or 0)),
    }
    return _execute_counters(user, values, commit)


def next_streak(streak, last_active, now):
    """Streak value after activity at *now*, given the previous active moment.

    Comparison is by calendar day. A gap of exactly one day extends the
    streak, a longer gap restarts it at 1, and same-day or backdated
    activity (clock skew) leaves it unchanged.
    """
    if last_active is None:
        return 1
    day_diff = (_as_day(now) - _as_day(last_active)).days
    if day_diff == 1:
        return (streak or 0) + 1
    if day_diff > 1:
        return 1
    return streak or 0


def evaluate_streak(user, now=None, commit=True):
    """Advance the user's daily streak for activity at *now*.

    ``last_active_date`` is set to *now* whichever branch applies, so calling
    this twice on the same day is a no-op for the streak while calls on two
    later days advance it twice.
    """
    now = now or datetime.utcnow()
    user.streak = next_streak(user.streak, user.last_active_date, now)
    user.longest_streak = max(user.longest_streak or 0, user.streak)
    user.last_active_date = now
    try:
        if commit:
            db.session.commit()
        else:
            db.session.flush()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Streak update for user %s failed: %s', user.id, exc)
        raise StorageError('Could not update streak') from exc
    return user.streak


def longest_daily_run(moments):
    """Length of the longest run of consecutive calendar days in *moments*."""
    days = sorted({_as_day(m) for m in moments})
    longest = current = 0
    previous = None
    for day in days:
        if previous is not None and (day - previous).days == 1:
            current += 1
        else:
            current = 1
        longest = max(longest, current)
        previous = day
    return longest
