"""
Text Extraction - Turn feed markup into plain text.

Supports:
- HTML fragments from RSS/Atom content fields (via BeautifulSoup)
- Whitespace normalization
- Case and accent folding for keyword comparisons
"""

import re
import unicodedata
from typing import Any

from bs4 import BeautifulSoup

_WHITESPACE_RE = re.compile(r"\s+")


def to_text(value: Any) -> str:
    """
    Coerce a parsed feed value to a string.

    feedparser hands back strings for most fields, but some feeds produce
    lists (repeated elements) or dicts with a ``value`` key.
    """
    if value is None:
        return ""
    if isinstance(value, str):
        return value
    if isinstance(value, (list, tuple)):
        return " ".join(to_text(v) for v in value)
    if isinstance(value, dict):
        return to_text(value.get("value"))
    return str(value)


def normalize_whitespace(value: Any) -> str:
    """Collapse runs of whitespace to single spaces and trim."""
    return _WHITESPACE_RE.sub(" ", to_text(value)).strip()


def strip_html(content: Any) -> str:
    """
    Extract text from an HTML fragment.

    Args:
        content: HTML string

    Returns:
        Text with tags removed; block boundaries become spaces
    """
    text = to_text(content)
    if "<" not in text:
        return text

    soup = BeautifulSoup(text, "html.parser")

    # Remove script and style elements
    for tag in soup.find_all(["script", "style"]):
        tag.decompose()

    return soup.get_text(separator=" ")


def fold_text(value: Any) -> str:
    """Lowercase, strip diacritics and collapse whitespace."""
    decomposed = unicodedata.normalize("NFD", to_text(value).lower())
    stripped = "".join(ch for ch in decomposed if not unicodedata.combining(ch))
    return normalize_whitespace(stripped)
