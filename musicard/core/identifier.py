"""Parse scanned card codes into (category, id)."""
import re
from typing import Optional

from musicard.models.song import SongCategory

# Checked in order; the first marker found in the code picks the list
CATEGORY_MARKERS: tuple[tuple[str, SongCategory], ...] = (
    ("aaaa0037", SongCategory.XMAS),
    ("aaaa0027", SongCategory.MOVIES),
    ("aaaa0007", SongCategory.SCHLAGER),
    ("aaaa0006", SongCategory.GUILTY_PLEASURE),
)

_TRAILING_DIGITS = re.compile(r"[0-9]+$")
_NON_DIGITS = re.compile(r"[^0-9]+")


def category_for_code(code: str) -> SongCategory:
    """Return the list category for a code; codes without a marker use the standard list."""
    for marker, category in CATEGORY_MARKERS:
        if marker in code:
            return category
    return SongCategory.STANDARD


def extract_identifier(code: str) -> Optional[int]:
    """Return the card number: trailing digits, else the last digit run anywhere in the code."""
    match = _TRAILING_DIGITS.search(code)
    if match:
        digits = match.group(0)
    else:
        runs = [part for part in _NON_DIGITS.split(code) if part]
        if not runs:
            return None
        digits = runs[-1]
    try:
        value = int(digits)
    except ValueError:
        # digit runs beyond the interpreter's int conversion limit
        return None
    return value if value > 0 else None


def extract_card_code(code) -> Optional[tuple[SongCategory, int]]:
    """Parse a scanned string. Never raises; returns None when no usable id is present."""
    if not isinstance(code, str):
        return None
    identifier = extract_identifier(code)
    if identifier is None:
        return None
    return category_for_code(code), identifier
