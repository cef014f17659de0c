"""Pure reducers over lists of journal entries.

Entries may be ``JournalEntry`` objects or plain dicts with the same
attribute names; nothing here touches the database.
"""

from collections import Counter
from datetime import date, datetime, timedelta

from app.moods import ENTRY_MOODS

DAY_NAMES = ['Sunday', 'Monday', 'Tuesday', 'Wednesday', 'Thursday', 'Friday', 'Saturday']

ACHIEVEMENTS = [
    # (title, description, predicate over (total_entries, current_run, total_points, average_points))
    ('First Steps', 'Wrote your first journal entry', lambda t, r, p, a: t >= 1),
    ('Week Warrior', 'Completed a week of journaling', lambda t, r, p, a: t >= 7),
    ('Streak Master', 'Maintained a 7-day writing streak', lambda t, r, p, a: r >= 7),
    ('Monthly Master', 'Maintained a 30-day writing streak', lambda t, r, p, a: r >= 30),
    ('Century Club', 'Earned 100 total points', lambda t, r, p, a: p >= 100),
    ('High Achiever', 'Maintained high emotional well-being', lambda t, r, p, a: a >= 30),
]


def _field(entry, name, default=None):
    if isinstance(entry, dict):
        value = entry.get(name, default)
    else:
        value = getattr(entry, name, default)
    return default if value is None else value


def _day(value):
    return value.date() if isinstance(value, datetime) else value


def _sunday_index(moment):
    """0 for Sunday through 6 for Saturday."""
    return (moment.weekday() + 1) % 7


def average(values):
    values = list(values)
    return sum(values) / len(values) if values else 0


def mood_histogram(entries):
    """Count of entries per primary mood; only moods that occur are listed."""
    return dict(Counter(_field(entry, 'mood_primary', 'neutral') for entry in entries))


def entries_by_day(entries):
    """Entries per ISO calendar day, e.g. ``{'2024-05-01': 2}``."""
    counts = Counter(_field(entry, 'created_at').date().isoformat() for entry in entries)
    return dict(sorted(counts.items()))


def entries_by_hour(entries):
    counts = Counter(_field(entry, 'created_at').hour for entry in entries)
    return dict(sorted(counts.items()))


def weekday_histogram(entries):
    """Entries per weekday, keyed 0 (Sunday) to 6 (Saturday), all keys present."""
    histogram = {index: 0 for index in range(7)}
    for entry in entries:
        histogram[_sunday_index(_field(entry, 'created_at'))] += 1
    return histogram


def most_common_key(counts, default=None):
    """Key with the highest count; ties go to the key seen first."""
    if not counts or not any(counts.values()):
        return default
    return max(counts, key=counts.get)


def count_values(values):
    return dict(Counter(values))


def top_counts(values, limit=5, label='value'):
    """``[{label: value, 'count': n}, ...]`` for the *limit* most frequent values."""
    return [{label: value, 'count': count} for value, count in Counter(values).most_common(limit)]


def flatten(entries, name):
    """All items of the list attribute *name* across *entries*."""
    return [item for entry in entries for item in (_field(entry, name) or [])]


def word_count_buckets(entries):
    buckets = {'short': 0, 'medium': 0, 'long': 0}
    for entry in entries:
        words = _field(entry, 'word_count', 0)
        if words < 100:
            buckets['short'] += 1
        elif words < 500:
            buckets['medium'] += 1
        else:
            buckets['long'] += 1
    return buckets


def reading_time_buckets(entries):
    buckets = {'quick': 0, 'moderate': 0, 'detailed': 0}
    for entry in entries:
        minutes = _field(entry, 'reading_time', 1)
        if minutes < 2:
            buckets['quick'] += 1
        elif minutes < 5:
            buckets['moderate'] += 1
        else:
            buckets['detailed'] += 1
    return buckets


def current_daily_run(moments, now=None):
    """Consecutive calendar days with activity, counting back from today.

    Returns 0 when there is nothing today, even if yesterday was active.
    """
    today = _day(now or datetime.utcnow())
    days = {_day(moment) for moment in moments if moment is not None}
    run = 0
    while today - timedelta(days=run) in days:
        run += 1
    return run


def weekly_mood_trends(entries):
    """Mood counts per week, keyed by the ISO date of the week's Sunday."""
    weeks = {}
    for entry in sorted(entries, key=lambda e: _field(e, 'created_at')):
        created = _field(entry, 'created_at')
        week_start = created.date() - timedelta(days=_sunday_index(created))
        bucket = weeks.setdefault(week_start.isoformat(), {mood: 0 for mood in ENTRY_MOODS})
        mood = _field(entry, 'mood_primary', 'neutral')
        if mood in bucket:
            bucket[mood] += 1
    return weeks


def intensity_trend(entries):
    return [
        {
            'date': _field(entry, 'created_at').isoformat(),
            'mood': _field(entry, 'mood_primary', 'neutral'),
            'intensity': _field(entry, 'mood_intensity', 5),
        }
        for entry in sorted(entries, key=lambda e: _field(e, 'created_at'))
    ]


def achievements(total_entries, current_run, total_points, average_points):
    return [
        {'title': title, 'description': description}
        for title, description, earned in ACHIEVEMENTS
        if earned(total_entries, current_run, total_points, average_points)
    ]


def month_starts(now, count=6):
    """First day of each of the last *count* months, oldest first, ending with *now*'s month."""
    year, month = now.year, now.month
    starts = []
    for _ in range(count):
        starts.append(date(year, month, 1))
        month -= 1
        if month == 0:
            year, month = year - 1, 12
    return list(reversed(starts))


def monthly_progress(entries, now=None, months=6):
    """Entries, words, points and mean sentiment for each of the last *months* months."""
    now = now or datetime.utcnow()
    progress = []
    for start in month_starts(now, months):
        in_month = [
            entry for entry in entries
            if (_field(entry, 'created_at').year, _field(entry, 'created_at').month) == (start.year, start.month)
        ]
        progress.append({
            'month': start.strftime('%b %Y'),
            'entries': len(in_month),
            'words': sum(_field(entry, 'word_count', 0) for entry in in_month),
            'points': sum(_field(entry, 'points_earned', 0) for entry in in_month),
            'avgSentiment': round(average(_field(entry, 'sentiment_score', 0) for entry in in_month), 2),
        })
    return progress


def word_growth(entries_newest_first, window=10):
    """Compare average words of the latest *window* entries with the *window* before them."""
    recent = entries_newest_first[:window]
    older = entries_newest_first[window:window * 2]
    recent_avg = average(_field(entry, 'word_count', 0) for entry in recent)
    older_avg = average(_field(entry, 'word_count', 0) for entry in older)
    rate = round((recent_avg - older_avg) / older_avg * 100, 1) if older_avg else 0
    return {
        'wordGrowthRate': rate,
        'recentAvgWords': round(recent_avg),
        'olderAvgWords': round(older_avg),
    }
