from flask import Blueprint

# Create blueprint
insights_bp = Blueprint('insights', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
