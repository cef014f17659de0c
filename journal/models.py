import math
from datetime import datetime
from app.extensions import db

WORDS_PER_MINUTE = 200


def count_words(text):
    return len((text or '').split())


def reading_time_for(word_count):
    """Minutes needed to read *word_count* words, never less than one."""
    return max(1, math.ceil(word_count / WORDS_PER_MINUTE))


class JournalEntry(db.Model):
    """Journal entry with the AI analysis merged into it."""
    __tablename__ = 'journal_entries'

    id = db.Column(db.Integer, primary_key=True)
    title = db.Column(db.String(100), nullable=False)
    content = db.Column(db.Text, nullable=False)
    mood_primary = db.Column(db.String(20), nullable=False, default='neutral')
    mood_intensity = db.Column(db.Integer, nullable=False, default=5)
    tags = db.Column(db.JSON, nullable=False, default=list)
    weather = db.Column(db.String(50), nullable=False, default='unknown')
    location = db.Column(db.String(200), nullable=False, default='')
    is_private = db.Column(db.Boolean, nullable=False, default=True)
    is_favorite = db.Column(db.Boolean, nullable=False, default=False)
    word_count = db.Column(db.Integer, nullable=False, default=0)
    reading_time = db.Column(db.Integer, nullable=False, default=1)

    # AI analysis
    sentiment = db.Column(db.String(20), nullable=False, default='neutral')
    sentiment_score = db.Column(db.Float, nullable=False, default=0.0)
    keywords = db.Column(db.JSON, nullable=False, default=list)
    themes = db.Column(db.JSON, nullable=False, default=list)
    suggestions = db.Column(db.JSON, nullable=False, default=list)
    therapeutic_notes = db.Column(db.Text, nullable=False, default='')
    points_earned = db.Column(db.Integer, nullable=False, default=0)

    created_at = db.Column(db.DateTime, default=datetime.utcnow, index=True)
    updated_at = db.Column(db.DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    # Relationships
    user_id = db.Column(db.Integer, db.ForeignKey('users.id'), nullable=False, index=True)

    def set_content(self, content):
        self.content = content
        self.word_count = count_words(content)
        self.reading_time = reading_time_for(self.word_count)

    def apply_analysis(self, analysis):
        """Copy a normalised analysis dict onto the entry."""
        self.sentiment = analysis['sentiment']
        self.sentiment_score = analysis['sentimentScore']
        self.keywords = list(analysis['keywords'])
        self.themes = list(analysis['themes'])
        self.suggestions = list(analysis['suggestions'])
        self.therapeutic_notes = analysis.get('therapeuticNotes', '')
        self.points_earned = analysis['pointsEarned']
        if analysis.get('primaryMood'):
            self.mood_primary = analysis['primaryMood']
        if analysis.get('moodIntensity'):
            self.mood_intensity = analysis['moodIntensity']

    def can_edit(self, now=None):
        """Entries may be edited or deleted only on the day they were written."""
        now = now or datetime.utcnow()
        return self.created_at is not None and self.created_at.date() == now.date()

    can_delete = can_edit

    def ai_analysis_dict(self):
        return {
            'sentiment': self.sentiment,
            'sentimentScore': self.sentiment_score,
            'keywords': self.keywords or [],
            'themes': self.themes or [],
            'suggestions': self.suggestions or [],
            'therapeuticNotes': self.therapeutic_notes,
            'pointsEarned': self.points_earned
        }

    def to_dict(self):
        """Return entry data as dictionary."""
        return {
            'id': self.id,
            'title': self.title,
            'content': self.content,
            'mood': {'primary': self.mood_primary, 'intensity': self.mood_intensity},
            'tags': self.tags or [],
            'weather': self.weather,
            'location': self.location,
            'isPrivate': self.is_private,
            'isFavorite': self.is_favorite,
            'wordCount': self.word_count,
            'readingTime': self.reading_time,
            'aiAnalysis': self.ai_analysis_dict(),
            'createdAt': self.created_at.isoformat() if self.created_at else None,
            'updatedAt': self.updated_at.isoformat() if self.updated_at else None,
            'userId': self.user_id
        }

    def __repr__(self):
        return f'<JournalEntry {self.title}>'
