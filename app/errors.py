"""Exception hierarchy for the journaling API and its JSON error handlers.

Hierarchy::

    JournalAppError
    ├── ValidationError         400, bad input rejected before core logic
    ├── NotFoundError           404, missing or not owned by the caller
    ├── EditWindowExpiredError  403, entry is no longer in its same-day window
    ├── StorageError            500, persistence failure
    ├── ExternalServiceError    AI dispatch failed; absorbed by the analysis layer
    └── ConfigurationError      raised at startup only
"""

from flask import jsonify
from werkzeug.exceptions import HTTPException


class JournalAppError(Exception):
    """Base class for errors that map onto an HTTP response."""

    status_code = 500
    default_message = 'Something went wrong'

    def __init__(self, message=None):
        super().__init__(message or self.default_message)
        self.message = message or self.default_message

    def to_dict(self):
        return {'success': False, 'message': self.message}


class ValidationError(JournalAppError):
    status_code = 400
    default_message = 'Invalid input'

    def __init__(self, message=None, errors=None):
        super().__init__(message)
        self.errors = list(errors or [])

    def to_dict(self):
        payload = super().to_dict()
        if self.errors:
            payload['errors'] = self.errors
        return payload


class NotFoundError(JournalAppError):
    status_code = 404
    default_message = 'Not found'


class EditWindowExpiredError(JournalAppError):
    status_code = 403
    default_message = 'You can only modify entries from today'


class StorageError(JournalAppError):
    status_code = 500
    default_message = 'A storage error occurred'


class ExternalServiceError(JournalAppError):
    """The text-generation service could not produce a result."""

    status_code = 502
    default_message = 'External AI service unavailable'

    def __init__(self, message=None, status=None):
        super().__init__(message)
        self.status = status


class ConfigurationError(JournalAppError):
    default_message = 'Invalid application configuration'


def register_error_handlers(app):
    """Render every error as the JSON envelope the API uses."""

    @app.errorhandler(JournalAppError)
    def handle_app_error(error):
        if error.status_code >= 500:
            app.logger.error('%s: %s', type(error).__name__, error.message)
            if not app.debug:
                return jsonify({'success': False, 'message': 'Internal server error'}), error.status_code
        return jsonify(error.to_dict()), error.status_code

    @app.errorhandler(404)
    def handle_not_found(error):
        return jsonify({
            'success': False,
            'message': 'Route not found',
        }), 404

    @app.errorhandler(HTTPException)
    def handle_http_error(error):
        return jsonify({'success': False, 'message': error.description}), error.code

    @app.errorhandler(Exception)
    def handle_unexpected(error):
        app.logger.exception('Unhandled error: %s', error)
        message = str(error) if app.debug else 'Internal server error'
        return jsonify({'success': False, 'message': message}), 500
