from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import ValidationError
from app.extensions import db
from app.storage import commit, get_owned_or_404
from auth.utils import get_current_user, json_body
from .models import CATEGORIES, PRIORITIES, TITLE_MAX, Manifestation
from . import manifestations_bp

MANIFESTATION_ID_PARAM = {
    'name': 'manifestation_id',
    'in': 'path',
    'type': 'integer',
    'required': True,
    'description': 'ID of the manifestation'
}

MANIFESTATION_BODY = {
    'type': 'object',
    'properties': {
        'title': {'type': 'string', 'example': 'Run a half marathon'},
        'category': {'type': 'string', 'enum': list(CATEGORIES)},
        'priority': {'type': 'string', 'enum': list(PRIORITIES)},
        'fulfilled': {'type': 'boolean'}
    }
}


def _validate(data, creating):
    """Return the cleaned fields present in *data*; title is mandatory on create."""
    errors = []
    cleaned = {}

    if 'title' in data or creating:
        title = data.get('title')
        title = title.strip() if isinstance(title, str) else ''
        if not title:
            if creating:
                errors.append('Title cannot be empty')
        elif len(title) > TITLE_MAX:
            errors.append(f'Title cannot be more than {TITLE_MAX} characters')
        else:
            cleaned['title'] = title

    for name, allowed in (('category', CATEGORIES), ('priority', PRIORITIES)):
        value = data.get(name)
        if not value:
            continue
        if value not in allowed:
            errors.append(f"{name.capitalize()} must be one of: {', '.join(allowed)}")
        else:
            cleaned[name] = value

    if 'fulfilled' in data and not isinstance(data['fulfilled'], bool):
        errors.append('fulfilled must be a boolean')

    if errors:
        raise ValidationError('Validation failed', errors=errors)
    return cleaned


@manifestations_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Manifestations'],
    'description': 'Create a manifestation',
    'security': [{'Bearer': []}],
    'parameters': [{'name': 'body', 'in': 'body', 'required': True, 'schema': MANIFESTATION_BODY}],
    'responses': {
        '201': {'description': 'Manifestation created', 'schema': {'$ref': '#/definitions/Manifestation'}},
        '400': {'description': 'Invalid input', 'schema': {'$ref': '#/definitions/Error'}},
        '401': {'description': 'Unauthorized'}
    }
})
def create_manifestation():
    user = get_current_user()
    fields = _validate(json_body(), creating=True)

    manifestation = Manifestation(
        user_id=user.id,
        title=fields['title'],
        category=fields.get('category', 'personal'),
        priority=fields.get('priority', 'medium'),
    )
    db.session.add(manifestation)
    commit()
    current_app.logger.info('User %s added manifestation %s', user.id, manifestation.id)
    return jsonify({'success': True, 'data': manifestation.to_dict()}), 201


@manifestations_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Manifestations'],
    'description': 'List the current user\'s manifestations, newest first',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {
            'description': 'Manifestations',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'data': {'type': 'array', 'items': {'$ref': '#/definitions/Manifestation'}}
                }
            }
        },
        '401': {'description': 'Unauthorized'}
    }
})
def list_manifestations():
    user = get_current_user()
    manifestations = db.session.execute(
        db.select(Manifestation).filter_by(user_id=user.id)
        .order_by(Manifestation.created_at.desc(), Manifestation.id.desc())
    ).scalars().all()
    return jsonify({'success': True, 'data': [m.to_dict() for m in manifestations]})


@manifestations_bp.route('/<int:manifestation_id>', methods=['PUT'])
@jwt_required()
@swag_from({
    'tags': ['Manifestations'],
    'description': 'Update a manifestation. Setting fulfilled also sets or clears its fulfilled date.',
    'security': [{'Bearer': []}],
    'parameters': [
        MANIFESTATION_ID_PARAM,
        {'name': 'body', 'in': 'body', 'required': True, 'schema': MANIFESTATION_BODY}
    ],
    'responses': {
        '200': {'description': 'Manifestation updated', 'schema': {'$ref': '#/definitions/Manifestation'}},
        '400': {'description': 'Invalid input'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Manifestation not found'}
    }
})
def update_manifestation(manifestation_id):
    user = get_current_user()
    manifestation = get_owned_or_404(Manifestation, manifestation_id, user.id, 'Manifestation not found')
    data = json_body()
    fields = _validate(data, creating=False)

    if 'fulfilled' in data:
        manifestation.mark_fulfilled(data['fulfilled'])
    for name, value in fields.items():
        setattr(manifestation, name, value)
    commit()
    return jsonify({'success': True, 'data': manifestation.to_dict()})


@manifestations_bp.route('/<int:manifestation_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Manifestations'],
    'description': 'Delete a manifestation',
    'security': [{'Bearer': []}],
    'parameters': [MANIFESTATION_ID_PARAM],
    'responses': {
        '200': {'description': 'Manifestation deleted'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Manifestation not found'}
    }
})
def delete_manifestation(manifestation_id):
    user = get_current_user()
    manifestation = get_owned_or_404(Manifestation, manifestation_id, user.id, 'Manifestation not found')
    db.session.delete(manifestation)
    commit()
    return jsonify({'success': True, 'message': 'Manifestation deleted successfully.'})
