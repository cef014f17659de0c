"""Entry lifecycle: create, edit and delete keep the owner's counters in step.

Each operation writes the entry and the counter changes in one transaction,
so ``points_earned`` on an entry always matches what it contributed to the
owner's ``points``.
"""

import logging
from datetime import datetime, timedelta

from sqlalchemy import String, case, cast, func, or_

from app.errors import EditWindowExpiredError
from app.extensions import db
from app.storage import commit, get_owned_or_404, transaction
from journal.aggregations import current_daily_run, mood_histogram
from journal import stats
from journal.analysis import get_assistant
from journal.models import JournalEntry

logger = logging.getLogger(__name__)

SORT_FIELDS = {
    'date': JournalEntry.created_at,
    'alphabet': JournalEntry.title,
    'points': JournalEntry.points_earned,
}


def user_context(user):
    return {
        'username': user.username,
        'moodStats': user.mood_stats,
        'streak': user.streak,
        'totalEntries': user.total_entries,
        'level': user.level,
        'points': user.points,
    }


def create_entry(user, fields, now=None):
    """Analyse, store and count a new entry. Returns (entry, analysis)."""
    now = now or datetime.utcnow()
    analysis = get_assistant().analyze_entry(fields['content'], user_context(user))

    entry = JournalEntry(
        user_id=user.id,
        title=fields['title'],
        mood_primary=fields['mood_primary'],
        mood_intensity=fields.get('mood_intensity', 5),
        tags=fields.get('tags', []),
        weather=fields.get('weather', 'unknown'),
        location=fields.get('location', ''),
        is_private=fields.get('is_private', True),
        created_at=now,
        updated_at=now,
    )
    entry.set_content(fields['content'])
    entry.apply_analysis(analysis)

    with transaction():
        db.session.add(entry)
        stats.apply_new_entry(user, entry.mood_primary, entry.points_earned, commit=False)
        stats.evaluate_streak(user, now, commit=False)

    logger.info('User %s created entry %s (+%d points)', user.id, entry.id, entry.points_earned)
    return entry, analysis


def update_entry(user, entry_id, fields, now=None):
    """Edit a same-day entry; new content is re-analysed and its points re-awarded."""
    entry = get_owned_or_404(JournalEntry, entry_id, user.id, 'Journal entry not found')
    if not entry.can_edit(now):
        raise EditWindowExpiredError('You can only edit entries from today')

    content_changed = fields['content'] != entry.content

    analysis = None
    if content_changed:
        analysis = get_assistant().analyze_entry(fields['content'], user_context(user))

    entry.title = fields['title']
    entry.mood_primary = fields['mood_primary']
    for name in ('mood_intensity', 'tags', 'weather', 'location', 'is_private'):
        if name in fields:
            setattr(entry, name, fields[name])

    with transaction():
        if analysis is not None:
            old_points = entry.points_earned or 0
            entry.set_content(fields['content'])
            entry.apply_analysis(analysis)
            stats.revise_entry_points(user, old_points, entry.points_earned, commit=False)
    return entry


def delete_entry(user, entry_id, now=None):
    entry = get_owned_or_404(JournalEntry, entry_id, user.id, 'Journal entry not found')
    if not entry.can_delete(now):
        raise EditWindowExpiredError('You can only delete entries from today')

    with transaction():
        stats.remove_entry(user, entry.points_earned, commit=False)
        db.session.delete(entry)
    logger.info('User %s deleted entry %s', user.id, entry_id)


def toggle_favorite(user, entry_id):
    entry = get_owned_or_404(JournalEntry, entry_id, user.id, 'Journal entry not found')
    entry.is_favorite = not entry.is_favorite
    commit()
    return entry


def get_entry(user, entry_id):
    return get_owned_or_404(JournalEntry, entry_id, user.id, 'Journal entry not found')


def list_entries(user, page=1, limit=10, mood=None, is_private=None, is_favorite=None,
                 search=None, sort_by='date', sort_order='desc'):
    """Filtered, sorted, paginated entries for *user*."""
    query = db.select(JournalEntry).filter_by(user_id=user.id)
    if mood:
        query = query.filter_by(mood_primary=mood)
    if is_private is not None:
        query = query.filter_by(is_private=is_private)
    if is_favorite is not None:
        query = query.filter_by(is_favorite=is_favorite)
    if search:
        pattern = f'%{search}%'
        query = query.where(or_(
            JournalEntry.title.ilike(pattern),
            JournalEntry.content.ilike(pattern),
            cast(JournalEntry.tags, String).ilike(pattern),
        ))

    column = SORT_FIELDS.get(sort_by, JournalEntry.created_at)
    query = query.order_by(column.asc() if sort_order == 'asc' else column.desc(), JournalEntry.id.desc())
    return db.paginate(query, page=page, per_page=limit, error_out=False)


def entries_since(user, days=None, now=None, newest_first=True):
    """Entries of *user* written in the last *days* days (all entries when days is None)."""
    query = db.select(JournalEntry).filter_by(user_id=user.id)
    if days is not None:
        now = now or datetime.utcnow()
        query = query.where(JournalEntry.created_at >= now - timedelta(days=days))
    order = JournalEntry.created_at.desc() if newest_first else JournalEntry.created_at.asc()
    return db.session.execute(query.order_by(order)).scalars().all()


def stats_overview(user, days=30, now=None):
    now = now or datetime.utcnow()
    recent = entries_since(user, days, now)
    all_dates = db.session.execute(
        db.select(JournalEntry.created_at).filter_by(user_id=user.id)
    ).scalars().all()
    total_entries, total_words, favorites = db.session.execute(
        db.select(
            func.count(JournalEntry.id),
            func.coalesce(func.sum(JournalEntry.word_count), 0),
            func.coalesce(func.sum(case((JournalEntry.is_favorite.is_(True), 1), else_=0)), 0),
        ).filter_by(user_id=user.id)
    ).one()

    return {
        'moodStats': mood_histogram(recent),
        'writingStreak': current_daily_run(all_dates, now),
        'totalEntries': total_entries,
        'totalWords': int(total_words),
        'favoriteEntries': int(favorites),
        'averageWordsPerEntry': round(total_words / total_entries) if total_entries else 0,
    }
