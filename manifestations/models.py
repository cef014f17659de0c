from datetime import datetime
from app.extensions import db

TITLE_MAX = 300
CATEGORIES = ('personal', 'career', 'relationships', 'health', 'financial', 'spiritual', 'travel')
PRIORITIES = ('low', 'medium', 'high')


class Manifestation(db.Model):
    """A goal the user wants to bring about, ticked off once fulfilled."""
    __tablename__ = 'manifestations'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(TITLE_MAX), nullable=False)
    category = db.Column(db.String(20), nullable=False, default='personal')
    priority = db.Column(db.String(10), nullable=False, default='medium')
    fulfilled = db.Column(db.Boolean, nullable=False, default=False)
    fulfilled_date = db.Column(db.DateTime, nullable=True)
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    def mark_fulfilled(self, fulfilled, now=None):
        """Set the flag; the date follows it (set when fulfilled, cleared otherwise)."""
        self.fulfilled = fulfilled
        self.fulfilled_date = (now or datetime.utcnow()) if fulfilled else None

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'category': self.category,
            'priority': self.priority,
            'fulfilled': self.fulfilled,
            'fulfilledDate': self.fulfilled_date.isoformat() if self.fulfilled_date else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<Manifestation {self.title}>'
