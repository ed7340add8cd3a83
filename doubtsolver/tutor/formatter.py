"""
Doubt Solver: Response Formatter
Rewrites a prose answer into a comma-separated word list when the student asked for one.
"""

import logging

from doubtsolver.tutor.text_extract import (
    wants_word_list,
    extract_words,
    extract_requested_count,
    extract_starting_letter,
)

logger = logging.getLogger(__name__)


def format_answer(raw_answer: str, triggering_message: str) -> str:
    """
    Apply the student's formatting request to the model's answer.

    No word-list request -> raw_answer unchanged. Otherwise:
    words of the answer -> starting-letter filter -> case-insensitive dedupe
    (first occurrence order) -> first N -> "a, b, c".
    Output words are lower-cased. May return "".
    """
    if not wants_word_list(triggering_message):
        return raw_answer

    words = extract_words(raw_answer)

    letter = extract_starting_letter(triggering_message)
    if letter:
        words = [w for w in words if w.lower().startswith(letter)]

    # dict keeps insertion order
    unique = list(dict.fromkeys(w.lower() for w in words))

    count = extract_requested_count(triggering_message)
    if count is not None:
        unique = unique[:count]

    logger.info(
        f"Word-list format applied: letter={letter!r} count={count} -> {len(unique)} words"
    )
    return ", ".join(unique)
