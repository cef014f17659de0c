from datetime import datetime, timedelta
from werkzeug.security import generate_password_hash, check_password_hash
from flask_jwt_extended import create_access_token
from app.extensions import db
from app.moods import TRACKED_MOODS

POINTS_PER_LEVEL = 100


def level_for(points):
    """Level 1 covers 0-99 points, level 2 covers 100-199, and so on."""
    return max(0, points or 0) // POINTS_PER_LEVEL + 1


def progress_for(points):
    """Percentage (0-100) of the way from the current level to the next."""
    points = points or 0
    base = (level_for(points) - 1) * POINTS_PER_LEVEL
    return min(100, max(0, (points - base) / POINTS_PER_LEVEL * 100))


class User(db.Model):
    """User model holding credentials and the journaling aggregates.

    Counters (points, streak, total_entries, mood counts) are only changed
    through ``journal.stats``; ``level`` and ``progress_to_next_level`` are
    derived from ``points`` and never stored.
    """
    __tablename__ = 'users'

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(20), unique=True, nullable=False)
    email = db.Column(db.String(120), unique=True, nullable=False)
    password_hash = db.Column(db.String(255), nullable=False)
    bio = db.Column(db.String(200), nullable=False, default='')
    created_at = db.Column(db.DateTime, default=datetime.utcnow)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Journaling aggregates
    points = db.Column(db.Integer, nullable=False, default=0)
    streak = db.Column(db.Integer, nullable=False, default=0)
    longest_streak = db.Column(db.Integer, nullable=False, default=0)
    last_active_date = db.Column(db.DateTime, nullable=True)
    total_entries = db.Column(db.Integer, nullable=False, default=0)

    # One counter per tracked mood
    mood_happy = db.Column(db.Integer, nullable=False, default=0)
    mood_sad = db.Column(db.Integer, nullable=False, default=0)
    mood_excited = db.Column(db.Integer, nullable=False, default=0)
    mood_calm = db.Column(db.Integer, nullable=False, default=0)
    mood_anxious = db.Column(db.Integer, nullable=False, default=0)
    mood_joyful = db.Column(db.Integer, nullable=False, default=0)
    mood_tired = db.Column(db.Integer, nullable=False, default=0)

    # Relationships
    entries = db.relationship('JournalEntry', backref='author', lazy=True, cascade='all, delete-orphan')

    __table_args__ = (
        db.Index('ix_users_points', 'points'),
    )

    def __init__(self, **kwargs):
        password = kwargs.pop('password', None)
        super(User, self).__init__(**kwargs)
        if password is not None:
            self.set_password(password)

    @staticmethod
    def mood_column(mood):
        """Column attribute that counts *mood*."""
        return getattr(User, f'mood_{mood.value}')

    def set_password(self, password):
        """Create hashed password."""
        self.password_hash = generate_password_hash(password)

    def check_password(self, password):
        """Check hashed password."""
        return check_password_hash(self.password_hash, password)

    def generate_auth_token(self, expires_in=None):
        """Generate JWT token for the user."""
        expires = timedelta(seconds=expires_in) if expires_in else None
        return create_access_token(identity=str(self.id), expires_delta=expires)

    @property
    def mood_stats(self):
        return {mood.value: getattr(self, f'mood_{mood.value}') or 0 for mood in TRACKED_MOODS}

    @property
    def level(self):
        return level_for(self.points)

    @property
    def progress_to_next_level(self):
        return progress_for(self.points)

    def most_common_mood(self):
        stats = self.mood_stats
        if not any(stats.values()):
            return 'neutral'
        return max(stats, key=stats.get)

    def to_dict(self):
        """Return user data as dictionary."""
        return {
            'id': self.id,
            'username': self.username,
            'email': self.email,
            'bio': self.bio,
            'points': self.points,
            'streak': self.streak,
            'longestStreak': self.longest_streak,
            'totalEntries': self.total_entries,
            'level': self.level,
            'progressToNextLevel': self.progress_to_next_level,
            'moodStats': self.mood_stats,
            'lastActiveDate': self.last_active_date.isoformat() if self.last_active_date else None,
            'createdAt': self.created_at.isoformat() if self.created_at else None
        }

    def __repr__(self):
        return f'<User {self.username}>'
