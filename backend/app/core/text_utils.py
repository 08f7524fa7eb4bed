"""Text normalization utilities."""
from __future__ import annotations

from backend.app.constants import AI_ERROR_MAX_CHARS


def clamp_text(value: str | None, max_chars: int | None) -> str:
    """
    Trim whitespace and cut to at most ``max_chars`` characters.

    Args:
        value: Raw field value (None is treated as empty)
        max_chars: Limit; falsy means no limit

    Returns:
        The trimmed, clamped string

    Examples:
        >>> clamp_text("  Armageddon  ", 4)
        'Arma'
        >>> clamp_text(None, 10)
        ''
    """
    raw = (value or "").strip()
    return raw[:max_chars] if max_chars else raw


def or_default(value: str, default: str) -> str:
    return value if value else default


def short_diagnostic(error: BaseException | str, limit: int = AI_ERROR_MAX_CHARS) -> str:
    """Reduce an exception to a one-line message of at most ``limit`` characters."""
    if isinstance(error, BaseException):
        text = str(error) or type(error).__name__
    else:
        text = str(error)
    text = " ".join(text.split())
    return text[:limit] if text else "Unknown error"
