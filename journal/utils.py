"""Input validation and query-string helpers for the journal endpoints."""

from typing import Any, Dict, List, Optional

from app.errors import ValidationError
from app.moods import ENTRY_MOODS

TITLE_MAX = 100
CONTENT_MAX = 10000
TAG_MAX = 50


def _clean_tags(tags: Any, errors: List[str]) -> List[str]:
    if not isinstance(tags, list):
        errors.append('Tags must be an array')
        return []
    cleaned = []
    for tag in tags:
        if not isinstance(tag, str):
            errors.append('Tags must be strings')
            continue
        tag = tag.strip()
        if not tag:
            continue
        if len(tag) > TAG_MAX:
            errors.append(f'Tags cannot exceed {TAG_MAX} characters')
            continue
        if tag not in cleaned:
            cleaned.append(tag)
    return cleaned


def validate_entry_payload(data: Optional[Dict[str, Any]]) -> Dict[str, Any]:
    """Validate a create/update body and return the cleaned fields.

    Raises ValidationError listing every problem found.
    """
    if not isinstance(data, dict):
        raise ValidationError('Request body must be a JSON object')

    errors: List[str] = []
    cleaned: Dict[str, Any] = {}

    title = data.get('title')
    title = title.strip() if isinstance(title, str) else ''
    if not 1 <= len(title) <= TITLE_MAX:
        errors.append(f'Title must be between 1 and {TITLE_MAX} characters')
    cleaned['title'] = title

    content = data.get('content')
    content = content.strip() if isinstance(content, str) else ''
    if not 1 <= len(content) <= CONTENT_MAX:
        errors.append(f'Content must be between 1 and {CONTENT_MAX} characters')
    cleaned['content'] = content

    mood = data.get('mood')
    if not isinstance(mood, dict):
        mood = {}
    primary = mood.get('primary')
    if primary not in ENTRY_MOODS:
        errors.append('Invalid primary mood')
    cleaned['mood_primary'] = primary

    intensity = mood.get('intensity')
    if intensity is not None:
        if isinstance(intensity, bool) or not isinstance(intensity, int) or not 1 <= intensity <= 10:
            errors.append('Mood intensity must be between 1 and 10')
        else:
            cleaned['mood_intensity'] = intensity

    if 'tags' in data and data['tags'] is not None:
        cleaned['tags'] = _clean_tags(data['tags'], errors)

    if 'isPrivate' in data:
        if not isinstance(data['isPrivate'], bool):
            errors.append('isPrivate must be a boolean')
        else:
            cleaned['is_private'] = data['isPrivate']

    for field, limit in (('weather', 50), ('location', 200)):
        value = data.get(field)
        if value is None or value == '':
            continue
        if not isinstance(value, str) or len(value) > limit:
            errors.append(f'{field.capitalize()} must be a string of at most {limit} characters')
        else:
            cleaned[field] = value.strip()

    if errors:
        raise ValidationError('Validation failed', errors=errors)
    return cleaned


def parse_bool_arg(value: Optional[str]) -> Optional[bool]:
    """'true'/'false' query values to bool; anything else is treated as absent."""
    if value is None:
        return None
    lowered = value.strip().lower()
    if lowered in ('true', '1', 'yes'):
        return True
    if lowered in ('false', '0', 'no'):
        return False
    return None


def parse_int_arg(value: Optional[str], default: int, minimum: int = 1, maximum: Optional[int] = None) -> int:
    try:
        number = int(value) if value is not None else default
    except (TypeError, ValueError):
        raise ValidationError(f'Expected an integer, got {value!r}')
    number = max(minimum, number)
    if maximum is not None:
        number = min(maximum, number)
    return number
