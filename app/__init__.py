import os
from datetime import datetime

from flask import Flask, jsonify

from app.config import config
from app.errors import ConfigurationError, register_error_handlers
from app.logging_setup import configure_logging


def create_app(config_name=None):
    app = Flask(__name__)
    config_name = config_name or os.getenv('FLASK_ENV', 'default')
    app.config.from_object(config.get(config_name, config['default']))

    configure_logging(app)

    # The dispatcher cannot run without credentials; fail at startup, not per request
    if app.config.get('AI_REQUIRE_KEYS') and not app.config.get('AI_API_KEYS'):
        raise ConfigurationError(
            'No AI API keys configured. Set GROQ_API_KEYS or GROQ_API_KEY_1..3.'
        )

    # Initialize extensions
    from app.extensions import init_app
    init_app(app)

    # Register blueprints
    from auth import auth_bp
    from journal import journal_bp
    from insights import insights_bp
    from users import users_bp
    from affirmations import affirmations_bp
    from manifestations import manifestations_bp

    app.register_blueprint(auth_bp, url_prefix='/api/auth')
    app.register_blueprint(journal_bp, url_prefix='/api/journal')
    app.register_blueprint(insights_bp, url_prefix='/api/insights')
    app.register_blueprint(users_bp, url_prefix='/api/user')
    app.register_blueprint(affirmations_bp, url_prefix='/api/affirmation')
    app.register_blueprint(manifestations_bp, url_prefix='/api/manifestation')

    register_error_handlers(app)

    @app.route('/api/health')
    def health():
        return jsonify({
            'status': 'OK',
            'message': 'Bloom Journal API is running',
            'timestamp': datetime.utcnow().isoformat(),
            'environment': config_name,
        })

    # Simple root endpoint for quick check
    @app.route('/')
    def index():
        return {'message': 'Bloom Journal API is running', 'docs': '/apidocs/'}

    with app.app_context():
        from app.extensions import db
        db.create_all()

    app.logger.info('Bloom Journal API initialised (%s)', config_name)
    return app
