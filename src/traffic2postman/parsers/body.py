"""Content-Type based body language classification."""

from __future__ import annotations

from traffic2postman.models import BodyLanguage

DEFAULT_CONTENT_TYPE = "text/plain"

# First match wins
_LANGUAGE_KEYWORDS: tuple[tuple[str, BodyLanguage], ...] = (
    ("json", BodyLanguage.JSON),
    ("xml", BodyLanguage.XML),
    ("javascript", BodyLanguage.JAVASCRIPT),
    ("html", BodyLanguage.HTML),
)


def classify_body(content_type: str | None) -> BodyLanguage:
    """Map a Content-Type value to a body language hint.

    Args:
        content_type: Content-Type header value, or None if absent.

    Returns:
        The first matching language, or ``BodyLanguage.TEXT``.
    """
    mime = (content_type or DEFAULT_CONTENT_TYPE).lower()
    for keyword, language in _LANGUAGE_KEYWORDS:
        if keyword in mime:
            return language
    return BodyLanguage.TEXT
