"""Session helpers that turn SQLAlchemy failures into StorageError."""

import logging
from contextlib import contextmanager

from sqlalchemy.exc import SQLAlchemyError

from app.errors import NotFoundError, StorageError
from app.extensions import db

logger = logging.getLogger(__name__)


def commit():
    """Commit the current session, rolling back on failure."""
    try:
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Commit failed: %s', exc)
        raise StorageError() from exc


@contextmanager
def transaction():
    """Group writes so they are committed together or not at all."""
    try:
        yield db.session
        db.session.commit()
    except SQLAlchemyError as exc:
        db.session.rollback()
        logger.error('Transaction rolled back: %s', exc)
        raise StorageError() from exc
    except Exception:
        db.session.rollback()
        raise


def get_owned_or_404(model, object_id, user_id, message=None):
    """Fetch *model* by id, scoped to its owner; raise NotFoundError otherwise."""
    try:
        obj = db.session.execute(
            db.select(model).filter_by(id=object_id, user_id=user_id)
        ).scalar_one_or_none()
    except SQLAlchemyError as exc:
        raise StorageError() from exc
    if obj is None:
        raise NotFoundError(message or f'{model.__name__} not found')
    return obj
