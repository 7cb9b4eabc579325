"""Content processing utilities - meta description shortening."""

import re
from typing import Optional

META_DESCRIPTION_MAX_LENGTH = 160
"""
Maximum length of a meta description.

Search engines cut snippets at roughly this many characters. Descriptions
longer than this are rewritten on every create/update.
"""

ELLIPSIS = "..."

# Applied in order; "detailed guide to" must run before "detailed".
FILLER_PHRASES = (
    ", expertly crafted",
    " comprehensive",
    " in-depth",
    " complete guide to",
    " ultimate guide to",
    " detailed guide to",
    " step-by-step guide to",
    " and much more",
    " detailed",
    " extensive",
    " everything you need to know about",
    " all you need to know about",
)

WORDY_REPLACEMENTS = (
    (" and discover how to ", " and "),
    (" learn how to ", " "),
    (" find out how to ", " "),
    (" understand how to ", " "),
    (" explore the world of ", " explore "),
    (" dive deep into ", " explore "),
    (" take a deep dive into ", " explore "),
)

_FILLER_PATTERNS = tuple(re.compile(re.escape(phrase), re.IGNORECASE) for phrase in FILLER_PHRASES)
_REPLACEMENT_PATTERNS = tuple(
    (re.compile(re.escape(search), re.IGNORECASE), replacement)
    for search, replacement in WORDY_REPLACEMENTS
)
_WHITESPACE = re.compile(r"\s+")


def _condense(text: str) -> str:
    """Drop filler phrases, swap wordy phrases, and collapse whitespace."""
    for pattern in _FILLER_PATTERNS:
        text = pattern.sub("", text)
    for pattern, replacement in _REPLACEMENT_PATTERNS:
        text = pattern.sub(replacement, text)
    return _WHITESPACE.sub(" ", text).strip()


def _truncate(text: str, budget: int) -> str:
    """Cut text to at most ``budget`` chars at a sentence, then word, boundary."""
    sentences = text.split(". ")
    result = sentences[0]
    for sentence in sentences[1:]:
        candidate = f"{result}. {sentence}"
        if len(candidate) > budget:
            break
        result = candidate

    if len(result) > budget:
        result = ""
        for word in text.split(" "):
            candidate = f"{result} {word}" if result else word
            if len(candidate) > budget:
                break
            result = candidate

    # A single leading word longer than the budget leaves nothing to keep.
    if not result:
        result = text[:budget].rstrip()

    return result


def shorten_meta_description(text: Optional[str], limit: int = META_DESCRIPTION_MAX_LENGTH) -> Optional[str]:
    """
    Shorten a meta description to fit within ``limit`` characters.

    Text already within the limit is returned exactly as given, surrounding
    whitespace included. Longer text is condensed (filler phrases removed,
    wordy phrases replaced, whitespace collapsed) and, if still too long,
    truncated at the last sentence or word boundary that leaves room for an
    ellipsis.

    The result is a deterministic function of ``text`` and ``limit``, and
    applying it again to its own output is a no-op.

    Args:
        text: The description to shorten. ``None`` and ``""`` pass through.
        limit: Maximum length of the result.

    Returns:
        The shortened description.
    """
    if not text or len(text) <= limit:
        return text

    condensed = _condense(text)
    if len(condensed) <= limit:
        return condensed
    if limit <= len(ELLIPSIS):
        return condensed[:limit].strip()

    budget = limit - len(ELLIPSIS)
    result = _truncate(condensed, budget)

    if len(result) < len(condensed):
        result += ".." if result.endswith(".") else ELLIPSIS

    return result.strip()
