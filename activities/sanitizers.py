# activities/sanitizers.py
"""
Input sanitization and validation for activity fields.

All faculty-entered content passes through these functions before being
stored or rendered.
"""
import re
from typing import Optional

import bleach


# Allowed HTML tags for activity descriptions
ALLOWED_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li',
    'h3', 'h4', 'blockquote', 'code', 'pre'
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title'],
}


class ValidationError(Exception):
    """Raised when validation fails."""
    pass


def sanitize_text(text: Optional[str], max_length: Optional[int] = None, strip: bool = True) -> str:
    """
    Sanitize plain text input.

    - Strips leading/trailing whitespace
    - Removes control characters
    - Enforces maximum length
    - Returns empty string for None input
    """
    if text is None:
        return ""

    if strip:
        text = text.strip()

    # Remove control characters except newlines and tabs
    text = re.sub(r'[\x00-\x08\x0b\x0c\x0e-\x1f\x7f]', '', text)

    if max_length and len(text) > max_length:
        text = text[:max_length]

    return text


def sanitize_title(title: Optional[str]) -> str:
    """
    Single line, no HTML, whitespace collapsed.
    """
    text = bleach.clean(sanitize_text(title), tags=[], strip=True)
    text = re.sub(r'\s+', ' ', text)
    return text


def sanitize_description(description: Optional[str], max_length: int = 2000) -> str:
    """
    Sanitize activity descriptions, keeping a small set of formatting tags.
    """
    if description is None:
        return ""

    clean = bleach.clean(
        description.strip(),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    if len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def validate_capacity(value, min_value: int = 1, max_value: int = 10000) -> int:
    """
    Validate activity capacity.

    - Must be an integer
    - Must be between min_value and max_value
    """
    if isinstance(value, bool):
        raise ValidationError("Capacity must be a valid integer")

    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Capacity must be a valid integer")

    if capacity < min_value:
        raise ValidationError(f"Capacity must be at least {min_value}")

    if capacity > max_value:
        raise ValidationError(f"Capacity cannot exceed {max_value}")

    return capacity
