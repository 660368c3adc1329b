"""
Translation utility functions.
"""

import unicodedata
from typing import Optional

# Unicode categories that carry no translatable language:
# symbols (math, currency, modifier, other) and control/format characters
NON_LINGUISTIC_CATEGORIES = {'Sm', 'Sc', 'Sk', 'So', 'Cc', 'Cf'}


def is_passthrough_text(text: str) -> bool:
    """
    Check whether text should be copied instead of translated.

    True for empty text and for text made only of whitespace, symbols
    and control characters (e.g. "   ", "→", "$ + €"). Punctuation
    is not in that set, so "..." still goes to the service.

    Examples:
        >>> is_passthrough_text("   ")
        True
        >>> is_passthrough_text("★ ★")
        True
        >>> is_passthrough_text("Hello")
        False
    """
    if not text:
        return True
    return all(
        ch.isspace() or unicodedata.category(ch) in NON_LINGUISTIC_CATEGORIES
        for ch in text
    )


def join_context(*parts: Optional[str]) -> Optional[str]:
    """
    Join context fragments with a space, dropping blank ones.

    Returns None when nothing is left.
    """
    kept = [part.strip() for part in parts if part and part.strip()]
    return " ".join(kept) if kept else None
