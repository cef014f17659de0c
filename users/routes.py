import random

from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import ValidationError
from app.extensions import db
from app.storage import commit
from auth.models import User
from auth.utils import (
    get_current_user, json_body, text_field, validate_email, validate_password, validate_username
)
from journal import aggregations as agg
from journal.services import entries_since
from journal.utils import parse_int_arg
from . import users_bp

BIO_MAX = 200

QUOTES = [
    {'text': 'Every day is a new beginning. Take a deep breath and start again.', 'author': 'Anonymous'},
    {'text': 'The only way to do great work is to love what you do.', 'author': 'Steve Jobs'},
    {'text': 'Your journey is unique. Embrace it.', 'author': 'Anonymous'},
]


def motivational_quote(points, streak):
    """Pick a quote, favouring fixed ones for long streaks and high scores."""
    if streak >= 30:
        return QUOTES[2]
    if points >= 500:
        return QUOTES[1]
    return random.choice(QUOTES)


@users_bp.route('/dashboard', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Users'],
    'description': 'Stats, activity heatmap, emotion distribution and recent entries for the dashboard',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {
            'description': 'Dashboard data',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'data': {
                        'type': 'object',
                        'properties': {
                            'stats': {'type': 'object'},
                            'emotionDistribution': {'type': 'array', 'items': {'type': 'object'}},
                            'heatmapData': {'type': 'object', 'additionalProperties': {'type': 'integer'}},
                            'recentEntries': {'type': 'array', 'items': {'$ref': '#/definitions/JournalEntry'}}
                        }
                    }
                }
            }
        },
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'User not found'}
    }
})
def dashboard():
    """Everything the dashboard page needs in one call."""
    user = get_current_user()
    # One query for the last year; heatmap and recent entries are derived from it
    entries = entries_since(user, 365)

    return jsonify({
        'success': True,
        'data': {
            'stats': {
                'totalEntries': user.total_entries,
                'totalPoints': user.points,
                'currentStreak': user.streak,
                'longestStreak': max(user.longest_streak or 0, user.streak or 0),
                'level': user.level,
                'progressToNextLevel': user.progress_to_next_level,
                'primaryMood': user.most_common_mood(),
                'motivationalQuote': motivational_quote(user.points, user.streak)
            },
            'emotionDistribution': [
                {'label': label, 'value': value} for label, value in user.mood_stats.items()
            ],
            'heatmapData': agg.entries_by_day(entries),
            'recentEntries': [entry.to_dict() for entry in entries[:5]]
        }
    })


@users_bp.route('/profile', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Users'],
    'description': 'Get current user profile',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {
            'description': 'User profile',
            'schema': {'$ref': '#/definitions/User'}
        },
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'User not found'}
    }
})
def get_profile():
    """Get the authenticated user's profile."""
    user = get_current_user()
    return jsonify({'success': True, 'data': {'user': user.to_dict()}})


@users_bp.route('/profile', methods=['PUT'])
@jwt_required()
@swag_from({
    'tags': ['Users'],
    'description': 'Update current user profile',
    'security': [{'Bearer': []}],
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'newusername'},
                'email': {'type': 'string', 'example': 'newemail@example.com'},
                'bio': {'type': 'string', 'example': 'Writing a little every day.'},
                'currentPassword': {'type': 'string', 'example': 'currentpassword'},
                'newPassword': {'type': 'string', 'example': 'newsecurepassword'}
            }
        }
    }],
    'responses': {
        '200': {
            'description': 'Profile updated successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'message': {'type': 'string'},
                    'data': {
                        'type': 'object',
                        'properties': {'user': {'$ref': '#/definitions/User'}}
                    }
                }
            }
        },
        '400': {'description': 'Invalid input'},
        '401': {'description': 'Unauthorized'},
        '409': {'description': 'Username or email already exists'}
    }
})
def update_profile():
    """Update the authenticated user's profile."""
    user = get_current_user()
    data = json_body()

    # Validate everything first so a rejected request leaves the user untouched
    changes = {}

    username = text_field(data, 'username')
    if username and username != user.username:
        ok, message = validate_username(username)
        if not ok:
            raise ValidationError(message)
        if db.session.execute(db.select(User.id).filter_by(username=username)).first():
            return jsonify({'success': False, 'message': 'Username already exists'}), 409
        changes['username'] = username

    email = text_field(data, 'email').lower()
    if email and email != user.email:
        ok, message = validate_email(email)
        if not ok:
            raise ValidationError(message)
        if db.session.execute(db.select(User.id).filter_by(email=email)).first():
            return jsonify({'success': False, 'message': 'Email already registered'}), 409
        changes['email'] = email

    if 'bio' in data:
        bio = text_field(data, 'bio')
        if len(bio) > BIO_MAX:
            raise ValidationError(f'Bio cannot exceed {BIO_MAX} characters')
        changes['bio'] = bio

    new_password = text_field(data, 'newPassword', strip=False)
    if new_password:
        if not user.check_password(text_field(data, 'currentPassword', strip=False)):
            raise ValidationError('Current password is incorrect')
        ok, message = validate_password(new_password)
        if not ok:
            raise ValidationError(message)

    for name, value in changes.items():
        setattr(user, name, value)
    if new_password:
        user.set_password(new_password)

    commit()
    current_app.logger.info('User %s updated their profile', user.id)
    return jsonify({
        'success': True,
        'message': 'Profile updated successfully',
        'data': {'user': user.to_dict()}
    })


@users_bp.route('/leaderboard', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Users'],
    'description': 'Users with the most points',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'limit', 'in': 'query', 'type': 'integer', 'default': 10}
    ],
    'responses': {
        '200': {'description': 'Top users by points'},
        '401': {'description': 'Unauthorized'}
    }
})
def leaderboard():
    limit = parse_int_arg(request.args.get('limit'), 10, maximum=100)
    users = db.session.execute(
        db.select(User).order_by(User.points.desc(), User.id.asc()).limit(limit)
    ).scalars().all()

    return jsonify({
        'success': True,
        'data': {
            'leaderboard': [
                {
                    'rank': rank,
                    'username': user.username,
                    'points': user.points,
                    'level': user.level,
                    'streak': user.streak
                }
                for rank, user in enumerate(users, start=1)
            ]
        }
    })
