from flask import request, jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from auth.utils import get_current_user
from journal import services
from journal.utils import parse_bool_arg, parse_int_arg, validate_entry_payload

from . import journal_bp

ENTRY_ID_PARAM = {
    'name': 'entry_id',
    'in': 'path',
    'type': 'integer',
    'required': True,
    'description': 'ID of the journal entry'
}

ENTRY_BODY_PARAM = {
    'name': 'body',
    'in': 'body',
    'required': True,
    'schema': {'$ref': '#/definitions/EntryInput'}
}


def _entry_response(entry, message=None, status=200):
    body = {'success': True, 'data': {'entry': entry.to_dict()}}
    if message:
        body['message'] = message
    return jsonify(body), status


@journal_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Create a journal entry. The entry is analysed and points are awarded.',
    'security': [{'Bearer': []}],
    'parameters': [ENTRY_BODY_PARAM],
    'responses': {
        '201': {
            'description': 'Journal entry created successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'message': {'type': 'string'},
                    'data': {
                        'type': 'object',
                        'properties': {
                            'entry': {'$ref': '#/definitions/JournalEntry'},
                            'pointsEarned': {'type': 'integer'},
                            'totalPoints': {'type': 'integer'},
                            'currentStreak': {'type': 'integer'},
                            'encouragement': {'type': 'string'}
                        }
                    }
                }
            }
        },
        '400': {'description': 'Invalid input', 'schema': {'$ref': '#/definitions/Error'}},
        '401': {'description': 'Unauthorized'}
    }
})
def create_entry():
    """Create a new journal entry."""
    user = get_current_user()
    fields = validate_entry_payload(request.get_json(silent=True))

    entry, analysis = services.create_entry(user, fields)

    return jsonify({
        'success': True,
        'message': 'Journal entry created successfully',
        'data': {
            'entry': entry.to_dict(),
            'pointsEarned': entry.points_earned,
            'totalPoints': user.points,
            'currentStreak': user.streak,
            'encouragement': analysis['encouragement']
        }
    }), 201


@journal_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'List the current user\'s journal entries',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'page', 'in': 'query', 'type': 'integer', 'default': 1},
        {'name': 'limit', 'in': 'query', 'type': 'integer', 'default': 10},
        {'name': 'mood', 'in': 'query', 'type': 'string'},
        {'name': 'isPrivate', 'in': 'query', 'type': 'boolean'},
        {'name': 'isFavorite', 'in': 'query', 'type': 'boolean'},
        {'name': 'search', 'in': 'query', 'type': 'string',
         'description': 'Case-insensitive match on title, content and tags'},
        {'name': 'sortBy', 'in': 'query', 'type': 'string', 'enum': ['date', 'alphabet', 'points']},
        {'name': 'sortOrder', 'in': 'query', 'type': 'string', 'enum': ['asc', 'desc']}
    ],
    'responses': {
        '200': {
            'description': 'Paginated list of journal entries',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'data': {
                        'type': 'object',
                        'properties': {
                            'entries': {'type': 'array', 'items': {'$ref': '#/definitions/JournalEntry'}},
                            'pagination': {'type': 'object'}
                        }
                    }
                }
            }
        },
        '401': {'description': 'Unauthorized'}
    }
})
def list_entries():
    """Get the journal entries of the current user."""
    user = get_current_user()
    args = request.args

    page = parse_int_arg(args.get('page'), 1)
    limit = parse_int_arg(args.get('limit'), current_app.config.get('ENTRIES_PER_PAGE', 10), maximum=100)

    entries = services.list_entries(
        user,
        page=page,
        limit=limit,
        mood=args.get('mood') or None,
        is_private=parse_bool_arg(args.get('isPrivate')),
        is_favorite=parse_bool_arg(args.get('isFavorite')),
        search=(args.get('search') or '').strip() or None,
        sort_by=args.get('sortBy', 'date'),
        sort_order=args.get('sortOrder', 'desc'),
    )

    return jsonify({
        'success': True,
        'data': {
            'entries': [entry.to_dict() for entry in entries.items],
            'pagination': {
                'currentPage': entries.page,
                'totalPages': entries.pages,
                'totalEntries': entries.total,
                'hasNext': entries.has_next,
                'hasPrev': entries.has_prev
            }
        }
    })


@journal_bp.route('/<int:entry_id>', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Get a specific journal entry',
    'security': [{'Bearer': []}],
    'parameters': [ENTRY_ID_PARAM],
    'responses': {
        '200': {'description': 'Journal entry details', 'schema': {'$ref': '#/definitions/JournalEntry'}},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Journal entry not found'}
    }
})
def get_entry(entry_id):
    """Get a specific journal entry by ID."""
    user = get_current_user()
    return _entry_response(services.get_entry(user, entry_id))


@journal_bp.route('/<int:entry_id>', methods=['PUT'])
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Update a journal entry written today. Changed content is re-analysed.',
    'security': [{'Bearer': []}],
    'parameters': [ENTRY_ID_PARAM, ENTRY_BODY_PARAM],
    'responses': {
        '200': {'description': 'Journal entry updated successfully'},
        '400': {'description': 'Invalid input', 'schema': {'$ref': '#/definitions/Error'}},
        '401': {'description': 'Unauthorized'},
        '403': {'description': 'Entry is no longer editable'},
        '404': {'description': 'Journal entry not found'}
    }
})
def update_entry(entry_id):
    """Update a journal entry."""
    user = get_current_user()
    fields = validate_entry_payload(request.get_json(silent=True))
    entry = services.update_entry(user, entry_id, fields)
    return _entry_response(entry, 'Journal entry updated successfully')


@journal_bp.route('/<int:entry_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Delete a journal entry written today',
    'security': [{'Bearer': []}],
    'parameters': [ENTRY_ID_PARAM],
    'responses': {
        '200': {'description': 'Journal entry deleted successfully'},
        '401': {'description': 'Unauthorized'},
        '403': {'description': 'Entry can no longer be deleted'},
        '404': {'description': 'Journal entry not found'}
    }
})
def delete_entry(entry_id):
    """Delete a journal entry."""
    user = get_current_user()
    services.delete_entry(user, entry_id)
    return jsonify({'success': True, 'message': 'Journal entry deleted successfully'})


@journal_bp.route('/<int:entry_id>/favorite', methods=['PATCH'])
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Toggle the favorite flag of a journal entry',
    'security': [{'Bearer': []}],
    'parameters': [ENTRY_ID_PARAM],
    'responses': {
        '200': {'description': 'Favorite status updated'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Journal entry not found'}
    }
})
def toggle_favorite(entry_id):
    user = get_current_user()
    entry = services.toggle_favorite(user, entry_id)
    message = 'Entry added to favorites' if entry.is_favorite else 'Entry removed from favorites'
    return _entry_response(entry, message)


@journal_bp.route('/stats/overview', methods=['GET'])
@jwt_required()
@swag_from({
    'tags': ['Journal'],
    'description': 'Mood counts, writing streak and word totals for the current user',
    'security': [{'Bearer': []}],
    'parameters': [
        {'name': 'days', 'in': 'query', 'type': 'integer', 'default': 30,
         'description': 'Window for the mood counts'}
    ],
    'responses': {
        '200': {'description': 'Journal statistics'},
        '401': {'description': 'Unauthorized'}
    }
})
def stats_overview():
    user = get_current_user()
    days = parse_int_arg(request.args.get('days'), 30, maximum=365)
    return jsonify({'success': True, 'data': services.stats_overview(user, days)})
