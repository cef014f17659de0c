"""Swagger (flasgger) template and UI configuration."""

SWAGGER_CONFIG = {
    "headers": [],
    "specs": [
        {
            "endpoint": 'apispec',
            "route": '/apispec.json',
            "rule_filter": lambda rule: True,  # all in
            "model_filter": lambda tag: True,  # all in
        }
    ],
    "static_url_path": "/flasgger_static",
    "swagger_ui": True,
    "specs_route": "/apidocs/"
}

SWAGGER_TEMPLATE = {
    "swagger": "2.0",
    "info": {
        "title": "Bloom API",
        "description": "API for Bloom - an AI-assisted journaling application",
        "version": "1.0.0"
    },
    "securityDefinitions": {
        "Bearer": {
            "type": "apiKey",
            "name": "Authorization",
            "in": "header",
            "description": "JWT Authorization header using the Bearer scheme. Example: \"Authorization: Bearer {token}\""
        }
    },
    "security": [{"Bearer": []}],
    "schemes": ["http", "https"],
    "consumes": ["application/json"],
    "produces": ["application/json"],
    "tags": [
        {"name": "Authentication", "description": "User authentication and registration"},
        {"name": "Users", "description": "Dashboard, profile and leaderboard"},
        {"name": "Journal", "description": "Journal entries management"},
        {"name": "Insights", "description": "Mood trends, writing patterns and progress"},
        {"name": "Affirmations", "description": "Personal affirmations board"},
        {"name": "Manifestations", "description": "Goal tracking board"}
    ],
    "definitions": {
        'User': {
            'type': 'object',
            'properties': {
                'id': {'type': 'integer', 'format': 'int64'},
                'username': {'type': 'string'},
                'email': {'type': 'string', 'format': 'email'},
                'points': {'type': 'integer'},
                'streak': {'type': 'integer'},
                'longestStreak': {'type': 'integer'},
                'totalEntries': {'type': 'integer'},
                'level': {'type': 'integer'},
                'progressToNextLevel': {'type': 'number'},
                'moodStats': {
                    'type': 'object',
                    'additionalProperties': {'type': 'integer'}
                },
                'lastActiveDate': {'type': 'string', 'format': 'date-time'},
                'createdAt': {'type': 'string', 'format': 'date-time'}
            }
        },
        'JournalEntry': {
            'type': 'object',
            'properties': {
                'id': {'type': 'integer', 'format': 'int64'},
                'title': {'type': 'string'},
                'content': {'type': 'string'},
                'mood': {
                    'type': 'object',
                    'properties': {
                        'primary': {'type': 'string'},
                        'intensity': {'type': 'integer', 'minimum': 1, 'maximum': 10}
                    }
                },
                'tags': {'type': 'array', 'items': {'type': 'string'}},
                'isPrivate': {'type': 'boolean'},
                'isFavorite': {'type': 'boolean'},
                'wordCount': {'type': 'integer'},
                'readingTime': {'type': 'integer'},
                'aiAnalysis': {'$ref': '#/definitions/AIAnalysis'},
                'createdAt': {'type': 'string', 'format': 'date-time'},
                'updatedAt': {'type': 'string', 'format': 'date-time'}
            }
        },
        'AIAnalysis': {
            'type': 'object',
            'properties': {
                'sentiment': {'type': 'string'},
                'sentimentScore': {'type': 'number', 'minimum': -1, 'maximum': 1},
                'keywords': {'type': 'array', 'items': {'type': 'string'}},
                'themes': {'type': 'array', 'items': {'type': 'string'}},
                'suggestions': {'type': 'array', 'items': {'type': 'string'}},
                'therapeuticNotes': {'type': 'string'},
                'pointsEarned': {'type': 'integer'}
            }
        },
        'EntryInput': {
            'type': 'object',
            'properties': {
                'title': {'type': 'string', 'example': 'A calm morning'},
                'content': {'type': 'string', 'example': 'Went for a walk before work.'},
                'mood': {
                    'type': 'object',
                    'properties': {
                        'primary': {'type': 'string', 'example': 'calm'},
                        'intensity': {'type': 'integer', 'example': 6}
                    }
                },
                'tags': {'type': 'array', 'items': {'type': 'string'}},
                'weather': {'type': 'string'},
                'location': {'type': 'string'},
                'isPrivate': {'type': 'boolean'}
            },
            'required': ['title', 'content', 'mood']
        },
        'Affirmation': {
            'type': 'object',
            'properties': {
                'id': {'type': 'integer'},
                'text': {'type': 'string'},
                'createdAt': {'type': 'string', 'format': 'date-time'}
            }
        },
        'Manifestation': {
            'type': 'object',
            'properties': {
                'id': {'type': 'integer'},
                'title': {'type': 'string'},
                'category': {'type': 'string'},
                'priority': {'type': 'string'},
                'fulfilled': {'type': 'boolean'},
                'fulfilledDate': {'type': 'string', 'format': 'date-time'}
            }
        },
        'Error': {
            'type': 'object',
            'properties': {
                'success': {'type': 'boolean'},
                'message': {'type': 'string', 'description': 'Error message'}
            }
        }
    }
}
