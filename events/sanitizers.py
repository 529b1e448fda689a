# events/sanitizers.py
"""
Input sanitization for attendee-supplied content.

Team names, submission titles and descriptions are shown to every visitor
of the event portal, so they pass through here before being stored.
"""
import re
from typing import Optional

import bleach


# Allowed HTML tags for rich text (team and project descriptions)
ALLOWED_TAGS = [
    'p', 'br', 'strong', 'em', 'u', 'a', 'ul', 'ol', 'li',
    'h1', 'h2', 'h3', 'h4', 'h5', 'h6', 'blockquote', 'code', 'pre'
]

ALLOWED_ATTRIBUTES = {
    'a': ['href', 'title'],
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


def sanitize_html(html: Optional[str], max_length: Optional[int] = None) -> str:
    """Sanitize HTML content, removing dangerous elements."""
    if html is None:
        return ""

    clean = bleach.clean(
        html.strip(),
        tags=ALLOWED_TAGS,
        attributes=ALLOWED_ATTRIBUTES,
        strip=True
    )

    if max_length and len(clean) > max_length:
        clean = clean[:max_length]

    return clean


def sanitize_title(title: Optional[str], max_length: int = 255) -> str:
    """
    Sanitize team names / project titles.

    - No HTML
    - Single line (no newlines)
    """
    text = bleach.clean(sanitize_text(title), tags=[], strip=True)
    text = re.sub(r'[\r\n]+', ' ', text)
    text = re.sub(r'\s+', ' ', text)
    return text[:max_length]


def sanitize_description(description: Optional[str]) -> str:
    """Max 10000 characters, HTML sanitized."""
    return sanitize_html(description, max_length=10000)


def sanitize_string_list(values, max_items: int = 50, max_length: int = 100) -> list:
    """
    Clean a list of short labels (skills, technologies, categories).
    Drops blanks and duplicates, keeps the caller's order.
    """
    cleaned = []
    seen = set()
    for value in values or []:
        text = sanitize_title(str(value), max_length=max_length)
        key = text.lower()
        if text and key not in seen:
            seen.add(key)
            cleaned.append(text)
        if len(cleaned) >= max_items:
            break
    return cleaned
