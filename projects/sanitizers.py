# vmatch-backend/projects/sanitizers.py
"""
Input sanitization and validation for projects and applications.

All user-generated text should pass through these functions
before being stored or rendered.
"""
import re
from typing import Iterable, Optional

import bleach


# Allowed HTML tags for rich text (descriptions, application messages)
ALLOWED_TAGS = [
    "p", "br", "strong", "em", "u", "a", "ul", "ol", "li",
    "h3", "h4", "blockquote", "code",
]

ALLOWED_ATTRIBUTES = {
    "a": ["href", "title"],
}


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
    Sanitize project titles.

    - Max 255 characters
    - No HTML
    - Single line (no newlines)
    """
    text = sanitize_text(title, max_length=255)
    text = re.sub(r'<[^>]+>', '', text)
    # Replace newlines with spaces
    text = re.sub(r'[\r\n]+', ' ', text)
    # Collapse multiple spaces
    text = re.sub(r'\s+', ' ', text)
    return text


def sanitize_html(html: Optional[str], max_length: Optional[int] = None) -> str:
    """
    Sanitize HTML content with bleach, keeping only ALLOWED_TAGS.
    Disallowed tags are stripped, not escaped.
    """
    if html is None:
        return ""

    clean = bleach.clean(
        sanitize_text(html),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True,
    )

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def sanitize_description(description: Optional[str]) -> str:
    """
    Sanitize project descriptions and application notes.

    - Max 10000 characters
    - HTML sanitized
    """
    return sanitize_html(description, max_length=10000)


def sanitize_skills(skills: Optional[Iterable[str]], max_items: int = 50) -> list:
    """
    Normalize a skills list.

    - Trims each entry, drops empties
    - De-duplicates case-insensitively (first spelling wins)
    - Caps the list length
    """
    if not skills:
        return []

    cleaned = []
    seen = set()
    for skill in skills:
        # commas separate entries in the search index and in ?skills=
        text = sanitize_title(str(skill).replace(",", " "))[:100]
        key = text.lower()
        if not text or key in seen:
            continue
        seen.add(key)
        cleaned.append(text)
        if len(cleaned) >= max_items:
            break
    return cleaned


def build_skills_index(skills: Optional[Iterable[str]]) -> str:
    """
    Searchable form of a skills list: ",first aid,python,".

    Lets the filter layer do an exact, case-insensitive, database-agnostic
    membership test with a single `icontains=",<skill>,"` lookup.
    """
    normalized = sorted({s.strip().lower() for s in (skills or []) if s and s.strip()})
    if not normalized:
        return ""
    return "," + ",".join(normalized) + ","


# ─────────────────────────────────────────────────────────────
# Numeric Validators
# ─────────────────────────────────────────────────────────────

class ValidationError(Exception):
    """Raised when validation fails."""
    pass


def validate_max_volunteers(value, min_value: int = 1, max_value: int = 10000) -> int:
    """
    Validate project capacity.

    - Must be an integer
    - Must be between min_value and max_value
    """
    try:
        capacity = int(value)
    except (TypeError, ValueError):
        raise ValidationError("Max volunteers must be a valid integer")

    if capacity < min_value:
        raise ValidationError(f"Max volunteers must be at least {min_value}")

    if capacity > max_value:
        raise ValidationError(f"Max volunteers cannot exceed {max_value}")

    return capacity
