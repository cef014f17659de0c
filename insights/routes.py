from datetime import datetime

from flask import request, jsonify
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from auth.utils import get_current_user
from journal import aggregations as agg
from journal.analysis import get_assistant
from journal.services import entries_since, user_context
from journal.utils import parse_int_arg

from . import insights_bp

PERIOD_PARAM = {
    'name': 'period',
    'in': 'query',
    'type': 'integer',
    'default': 30,
    'description': 'Number of days to look back'
}

NO_ENTRIES_INSIGHTS = {
    'emotionalPatterns': 'No entries found in the selected time period.',
    'growthAreas': 'Start journaling to see your insights!',
    'recommendations': ['Write your first entry today', 'Set a daily journaling goal']
}


def _period(name='period'):
    return parse_int_arg(request.args.get(name), 30, maximum=365)


@insights_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Insights'],
    'description': 'Overview of writing activity, mood trends and AI insights',
    'security': [{'Bearer': []}],
    'parameters': [PERIOD_PARAM],
    'responses': {
        '200': {'description': 'Insights overview'},
        '401': {'description': 'Unauthorized'}
    }
})
def get_insights():
    user = get_current_user()
    days = _period()
    entries = entries_since(user, days)

    by_day = agg.entries_by_day(entries)
    by_hour = agg.entries_by_hour(entries)
    total_words = sum(entry.word_count for entry in entries)
    average_sentiment = agg.average(entry.sentiment_score for entry in entries)
    most_active_hour = agg.most_common_key(by_hour)

    return jsonify({
        'success': True,
        'data': {
            'period': days,
            'overview': {
                'totalEntries': len(entries),
                'totalWords': total_words,
                'averageWordsPerEntry': round(total_words / len(entries)) if entries else 0,
                'averageSentiment': round(average_sentiment, 2),
                'writingStreak': user.streak
            },
            'moodTrends': agg.mood_histogram(entries),
            'patterns': {
                'mostActiveDay': agg.most_common_key(by_day),
                'mostActiveHour': most_active_hour,
                'entriesByDay': by_day,
                'entriesByHour': by_hour
            },
            'content': {
                'topKeywords': agg.top_counts(agg.flatten(entries, 'keywords'), 5, 'keyword'),
                'topThemes': agg.top_counts(agg.flatten(entries, 'themes'), 5, 'theme'),
                'averageSentiment': average_sentiment
            },
            'aiInsights': get_assistant().generate_insights(user_context(user), entries)
        }
    })


@insights_bp.route('/comprehensive', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Insights'],
    'description': 'Points, streak, achievements, weekly summary and AI insights for a period',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'days', 'in': 'query', 'type': 'integer', 'default': 30}
    ],
    'responses': {
        '200': {'description': 'Comprehensive insights'},
        '401': {'description': 'Unauthorized'}
    }
})
def comprehensive_insights():
    user = get_current_user()
    days = _period('days')
    now = datetime.utcnow()
    entries = entries_since(user, days, now)

    if not entries:
        return jsonify({
            'success': True,
            'data': {
                'totalEntries': 0,
                'totalPoints': 0,
                'currentStreak': 0,
                'averagePoints': 0,
                'moodStats': {},
                'aiInsights': NO_ENTRIES_INSIGHTS
            }
        })

    total_entries = len(entries)
    points = [entry.points_earned or 0 for entry in entries]
    total_points = sum(points)
    average_points = total_points / total_entries
    current_run = agg.current_daily_run((entry.created_at for entry in entries), now)
    weekdays = agg.weekday_histogram(entries)
    assistant = get_assistant()

    return jsonify({
        'success': True,
        'data': {
            'totalEntries': total_entries,
            'totalPoints': total_points,
            'currentStreak': current_run,
            'averagePoints': average_points,
            'moodStats': agg.mood_histogram(entries),
            'mostActiveDay': agg.DAY_NAMES[agg.most_common_key(weekdays)],
            'averageWordsPerEntry': round(agg.average(entry.word_count for entry in entries)),
            'completionRate': round(current_run / days * 100),
            'bestDayScore': max(points),
            # oldest first, last seven entries
            'pointsTrend': list(reversed(points[:7])),
            'achievements': agg.achievements(total_entries, current_run, total_points, average_points),
            'weeklySummary': assistant.generate_weekly_summary(entries[:7]),
            'aiInsights': assistant.generate_insights(user_context(user), entries[:10])
        }
    })


@insights_bp.route('/mood', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Insights'],
    'description': 'Mood counts, weekly mood trends and intensity over time',
    'security': [{'Bearer': []}],
    'parameters': [PERIOD_PARAM],
    'responses': {
        '200': {'description': 'Mood insights'},
        '401': {'description': 'Unauthorized'}
    }
})
def mood_insights():
    user = get_current_user()
    days = _period()
    entries = entries_since(user, days, newest_first=False)

    return jsonify({
        'success': True,
        'data': {
            'period': days,
            'moodStats': agg.mood_histogram(entries),
            'weeklyTrends': agg.weekly_mood_trends(entries),
            'intensityTrends': agg.intensity_trend(entries),
            'totalMoodEntries': len(entries)
        }
    })


@insights_bp.route('/patterns', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Insights'],
    'description': 'When and how much the user writes, and which tags they use',
    'security': [{'Bearer': []}],
    'parameters': [PERIOD_PARAM],
    'responses': {
        '200': {'description': 'Writing patterns'},
        '401': {'description': 'Unauthorized'}
    }
})
def writing_patterns():
    user = get_current_user()
    days = _period()
    entries = entries_since(user, days, newest_first=False)

    weekdays = agg.weekday_histogram(entries)
    by_hour = agg.entries_by_hour(entries)
    tags = agg.flatten(entries, 'tags')
    most_active_day = agg.most_common_key(weekdays)

    return jsonify({
        'success': True,
        'data': {
            'period': days,
            'patterns': {
                'byDayOfWeek': weekdays,
                'byHour': by_hour,
                'byWordCount': agg.word_count_buckets(entries),
                'byReadingTime': agg.reading_time_buckets(entries),
                'tagUsage': agg.count_values(tags)
            },
            'insights': {
                'mostActiveDay': agg.DAY_NAMES[most_active_day] if most_active_day is not None else None,
                'mostActiveHour': agg.most_common_key(by_hour),
                'topTags': agg.top_counts(tags, 10, 'tag'),
                'totalEntries': len(entries)
            }
        }
    })


@insights_bp.route('/progress', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Insights'],
    'description': 'Level, monthly progress over six months and word-count growth',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {'description': 'Progress insights'},
        '401': {'description': 'Unauthorized'}
    }
})
def progress_insights():
    user = get_current_user()
    now = datetime.utcnow()
    entries = entries_since(user, None, now)

    total_days = max(1, (now - user.created_at).days + 1) if user.created_at else 1
    per_day = user.total_entries / total_days

    return jsonify({
        'success': True,
        'data': {
            'overview': {
                'totalDays': total_days,
                'averageEntriesPerDay': round(per_day, 2),
                'completionRate': round(per_day * 100, 1),
                'currentStreak': user.streak,
                'totalEntries': user.total_entries,
                'totalPoints': user.points,
                'currentLevel': user.level,
                'progressToNextLevel': user.progress_to_next_level
            },
            'monthlyProgress': agg.monthly_progress(entries, now),
            'growth': agg.word_growth(entries)
        }
    })
