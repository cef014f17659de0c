from flask import jsonify, current_app
from flask_jwt_extended import jwt_required
from flasgger import swag_from
from sqlalchemy import or_
from app.errors import ValidationError
from app.extensions import db
from app.storage import commit
from auth.utils import (
    get_current_user, json_body, text_field, validate_email, validate_password, validate_username
)
from .models import User
from . import auth_bp


@auth_bp.route('/register', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Register a new user',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'username': {'type': 'string', 'example': 'johndoe'},
                'email': {'type': 'string', 'example': 'john@example.com'},
                'password': {'type': 'string', 'example': 'secret123'}
            },
            'required': ['username', 'email', 'password']
        }
    }],
    'responses': {
        '201': {
            'description': 'User registered successfully',
            'schema': {
                'type': 'object',
                'properties': {
                    'success': {'type': 'boolean'},
                    'message': {'type': 'string'},
                    'data': {
                        'type': 'object',
                        'properties': {
                            'user': {'$ref': '#/definitions/User'},
                            'token': {'type': 'string'}
                        }
                    }
                }
            }
        },
        '400': {'description': 'Invalid input data'},
        '409': {'description': 'Username or email already exists'}
    }
})
def register():
    """Register a new user."""
    data = json_body()

    username = text_field(data, 'username')
    email = text_field(data, 'email').lower()
    password = text_field(data, 'password', strip=False)

    errors = [message for ok, message in (
        validate_username(username),
        validate_email(email),
        validate_password(password),
    ) if not ok]
    if errors:
        raise ValidationError('Validation failed', errors=errors)

    # Check if user already exists
    existing = db.session.execute(
        db.select(User).where(or_(User.username == username, User.email == email))
    ).scalar_one_or_none()
    if existing is not None:
        field = 'Username' if existing.username == username else 'Email'
        return jsonify({'success': False, 'message': f'{field} already exists'}), 409

    user = User(username=username, email=email, password=password)
    db.session.add(user)
    commit()
    current_app.logger.info('Registered user %s', user.id)

    return jsonify({
        'success': True,
        'message': 'User registered successfully',
        'data': {
            'user': user.to_dict(),
            'token': user.generate_auth_token()
        }
    }), 201


@auth_bp.route('/login', methods=['POST'])
@swag_from({
    'tags': ['Authentication'],
    'description': 'Login with email and password',
    'parameters': [{
        'name': 'body',
        'in': 'body',
        'required': True,
        'schema': {
            'type': 'object',
            'properties': {
                'email': {'type': 'string', 'example': 'john@example.com'},
                'password': {'type': 'string', 'example': 'secret123'}
            },
            'required': ['email', 'password']
        }
    }],
    'responses': {
        '200': {'description': 'Login successful'},
        '400': {'description': 'Invalid input data'},
        '401': {'description': 'Invalid credentials'}
    }
})
def login():
    """Login user and return JWT token."""
    data = json_body()

    email = text_field(data, 'email').lower()
    password = text_field(data, 'password', strip=False)
    if not email or not password:
        raise ValidationError('Missing email or password')

    user = db.session.execute(db.select(User).filter_by(email=email)).scalar_one_or_none()

    if user and user.check_password(password):
        return jsonify({
            'success': True,
            'message': 'Login successful',
            'data': {
                'user': user.to_dict(),
                'token': user.generate_auth_token()
            }
        })

    return jsonify({'success': False, 'message': 'Invalid email or password'}), 401


@auth_bp.route('/me')
@jwt_required()
@swag_from({
    'security': [{'Bearer': []}],
    'tags': ['Authentication'],
    'description': 'Get current user profile',
    'responses': {
        '200': {
            'description': 'User profile',
            'schema': {'$ref': '#/definitions/User'}
        },
        '401': {'description': 'Invalid or missing token'}
    }
})
def get_current_user_profile():
    """Get current user's profile."""
    user = get_current_user()
    return jsonify({'success': True, 'data': {'user': user.to_dict()}})
