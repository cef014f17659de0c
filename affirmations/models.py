from datetime import datetime
from app.extensions import db

TEXT_MAX = 200


class Affirmation(db.Model):
    """Short positive statement pinned by a user."""
    __tablename__ = 'affirmations'

    id = db.Column(db.Integer, primary_key=True)
    text = db.Column(db.String(TEXT_MAX), nullable=False)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    def to_dict(self):
        return {
            'id': self.id,
            'text': self.text,
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None
        }

    def __repr__(self):
        return f'<Affirmation {self.id}>'
