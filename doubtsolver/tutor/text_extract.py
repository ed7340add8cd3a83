"""
Doubt Solver: Text Extraction
Detectors that run on the student's latest message (never on the model's answer):
1. Word-list request detector
2. Requested word count
3. Requested starting letter

Plus the word splitter used to rebuild an answer as a word list.
PURE FUNCTION module: no API calls, no side effects.
"""

import re
import sys
from typing import Optional


# ─── Word-List Request ───────────────────────────────────────────────────────

WORD_LIST_PHRASES = (
    "only words",
    "just words",
    "not a passage",
    "not a paragraph",
    "no explanation",
)


def wants_word_list(text: str) -> bool:
    """True if the message asks for bare words instead of prose."""
    lowered = text.lower()
    return any(phrase in lowered for phrase in WORD_LIST_PHRASES)


# ─── Word Splitting ──────────────────────────────────────────────────────────

_NON_LETTER_RE = re.compile(r"[^a-zA-Z\s]")


def extract_words(text: str) -> list[str]:
    """
    Split text into ASCII-letter words.

    Anything that is not an ASCII letter or whitespace becomes a space first,
    so "well-known" gives ["well", "known"] and "café" gives ["caf"].
    """
    return _NON_LETTER_RE.sub(" ", text).split()


# ─── Count / Letter ──────────────────────────────────────────────────────────

_COUNT_RE = re.compile(r"([0-9]+)\s+words?", re.IGNORECASE)
_LETTER_RE = re.compile(r"starting with\s+([a-z])", re.IGNORECASE)

# Longer counts than this can never limit a word list
_MAX_COUNT_DIGITS = 18


def extract_requested_count(text: str) -> Optional[int]:
    """'give me 5 words' -> 5. First match wins. Huge counts saturate at sys.maxsize."""
    match = _COUNT_RE.search(text)
    if not match:
        return None
    digits = match.group(1).lstrip("0") or "0"
    if len(digits) > _MAX_COUNT_DIGITS:
        return sys.maxsize
    return int(digits)


def extract_starting_letter(text: str) -> Optional[str]:
    """'starting with B' -> 'b'."""
    match = _LETTER_RE.search(text)
    return match.group(1).lower() if match else None
