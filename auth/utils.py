import re
from typing import Tuple, Optional

from flask import request
from flask_jwt_extended import get_jwt_identity

from app.errors import NotFoundError, ValidationError
from app.extensions import db
from auth.models import User

EMAIL_REGEX = re.compile(r"^[\w\.-]+@[\w\.-]+\.\w{2,}$")
USERNAME_REGEX = re.compile(r"^[A-Za-z0-9_.-]+$")


def validate_email(email: str) -> Tuple[bool, Optional[str]]:
    """Simple email validation.

    Returns (is_valid, error_message)."""
    if not email:
        return False, "Email is required"
    if not EMAIL_REGEX.match(email):
        return False, "Please enter a valid email"
    return True, None


def validate_username(username: str) -> Tuple[bool, Optional[str]]:
    """Usernames are 3-20 characters of letters, digits, dot, dash or underscore."""
    if not username:
        return False, "Username is required"
    if len(username) < 3:
        return False, "Username must be at least 3 characters long"
    if len(username) > 20:
        return False, "Username cannot exceed 20 characters"
    if not USERNAME_REGEX.match(username):
        return False, "Username may only contain letters, digits, '.', '-' and '_'"
    return True, None


def validate_password(password: str) -> Tuple[bool, Optional[str]]:
    """Ensure password meets minimum requirements (at least 6 characters)."""
    if not password:
        return False, "Password is required"
    if len(password) < 6:
        return False, "Password must be at least 6 characters long"
    return True, None


def get_current_user():
    """Load the user behind the JWT of the current request."""
    user = db.session.get(User, int(get_jwt_identity()))
    if user is None:
        raise NotFoundError('User not found')
    return user


def json_body():
    """The request's JSON object, or {} when no body was sent.

    Bodies that are not a JSON object (a list, a string, malformed JSON)
    are rejected with ValidationError.
    """
    data = request.get_json(silent=True)
    if data is None and not request.get_data():
        return {}
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')
    return data


def text_field(data, name, strip=True):
    """*data[name]* as a string, or '' when missing or not a string."""
    value = data.get(name)
    if not isinstance(value, str):
        return ''
    return value.strip() if strip else value
