from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from app.errors import ValidationError
from app.extensions import db
from app.storage import commit, get_owned_or_404
from auth.utils import get_current_user, json_body
from .models import Affirmation, TEXT_MAX
from . import affirmations_bp

AFFIRMATION_ID_PARAM = {
    'name': 'affirmation_id',
    'in': 'path',
    'type': 'integer',
    'required': True,
    'description': 'ID of the affirmation'
}

TEXT_BODY_PARAM = {
    'name': 'body',
    'in': 'body',
    'required': True,
    'schema': {
        'type': 'object',
        'properties': {
            'text': {'type': 'string', 'example': 'I am growing every day.'}
        },
        'required': ['text']
    }
}


def _clean_text(data, required=True):
    text = data.get('text')
    text = text.strip() if isinstance(text, str) else ''
    if not text:
        if required:
            raise ValidationError('Text cannot be empty')
        return None
    if len(text) > TEXT_MAX:
        raise ValidationError(f'Text cannot exceed {TEXT_MAX} characters')
    return text


@affirmations_bp.route('/', methods=['POST'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Affirmations'],
    'description': 'Create an affirmation',
    'security': [{'Bearer': []}],
    'parameters': [TEXT_BODY_PARAM],
    'responses': {
        '201': {'description': 'Affirmation created', 'schema': {'$ref': '#/definitions/Affirmation'}},
        '400': {'description': 'Invalid input', 'schema': {'$ref': '#/definitions/Error'}},
        '401': {'description': 'Unauthorized'}
    }
})
def create_affirmation():
    user = get_current_user()
    text = _clean_text(json_body())

    affirmation = Affirmation(user_id=user.id, text=text)
    db.session.add(affirmation)
    commit()
    current_app.logger.info('User %s added affirmation %s', user.id, affirmation.id)
    return jsonify({'success': True, 'data': affirmation.to_dict()}), 201


@affirmations_bp.route('/', methods=['GET'], strict_slashes=False)
@jwt_required()
@swag_from({
    'tags': ['Affirmations'],
    'description': 'List the current user\'s affirmations, newest first',
    'security': [{'Bearer': []}],
    'responses': {
        '200': {
            'description': 'Affirmations',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'data': {'type': 'array', 'items': {'$ref': '#/definitions/Affirmation'}}
                }
            }
        },
        '401': {'description': 'Unauthorized'}
    }
})
def list_affirmations():
    user = get_current_user()
    affirmations = db.session.execute(
        db.select(Affirmation).filter_by(user_id=user.id)
        .order_by(Affirmation.created_at.desc(), Affirmation.id.desc())
    ).scalars().all()
    return jsonify({'success': True, 'data': [a.to_dict() for a in affirmations]})


@affirmations_bp.route('/<int:affirmation_id>', methods=['PUT'])
@jwt_required()
@swag_from({
    'tags': ['Affirmations'],
    'description': 'Change the text of an affirmation',
    'security': [{'Bearer': []}],
    'parameters': [AFFIRMATION_ID_PARAM, TEXT_BODY_PARAM],
    'responses': {
        '200': {'description': 'Affirmation updated', 'schema': {'$ref': '#/definitions/Affirmation'}},
        '400': {'description': 'Invalid input'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Affirmation not found'}
    }
})
def update_affirmation(affirmation_id):
    user = get_current_user()
    affirmation = get_owned_or_404(Affirmation, affirmation_id, user.id, 'Affirmation not found')

    # Blank text keeps the current one
    text = _clean_text(json_body(), required=False)
    if text:
        affirmation.text = text
    commit()
    return jsonify({'success': True, 'data': affirmation.to_dict()})


@affirmations_bp.route('/<int:affirmation_id>', methods=['DELETE'])
@jwt_required()
@swag_from({
    'tags': ['Affirmations'],
    'description': 'Delete an affirmation',
    'security': [{'Bearer': []}],
    'parameters': [AFFIRMATION_ID_PARAM],
    'responses': {
        '200': {'description': 'Affirmation deleted'},
        '401': {'description': 'Unauthorized'},
        '404': {'description': 'Affirmation not found'}
    }
})
def delete_affirmation(affirmation_id):
    user = get_current_user()
    affirmation = get_owned_or_404(Affirmation, affirmation_id, user.id, 'Affirmation not found')
    db.session.delete(affirmation)
    commit()
    return jsonify({'success': True, 'message': 'Affirmation deleted'})
