from flask import Blueprint

# Create blueprint
affirmations_bp = Blueprint('affirmations', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
