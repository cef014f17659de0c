from flask import Blueprint

# Create blueprint
manifestations_bp = Blueprint('manifestations', __name__)

# Import routes after creating the blueprint to avoid circular imports
from . import routes  # noqa
