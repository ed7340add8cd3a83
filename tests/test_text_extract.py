"""
Tests for the text extraction detectors.
"""

import sys

import pytest
from doubtsolver.tutor.text_extract import (
    WORD_LIST_PHRASES,
    wants_word_list,
    extract_words,
    extract_requested_count,
    extract_starting_letter,
)


class TestWantsWordList:

    @pytest.mark.parametrize("phrase", WORD_LIST_PHRASES)
    def test_every_phrase_detected(self, phrase):
        assert wants_word_list(f"give me animals, {phrase} please")

    def test_case_insensitive(self):
        assert wants_word_list("Only Words")
        assert wants_word_list("NO EXPLANATION, just the list")

    def test_prose_request(self):
        assert not wants_word_list("explain in detail")

    def test_phrase_split_by_punctuation_not_detected(self):
        assert not wants_word_list("only, words")

    def test_empty(self):
        assert not wants_word_list("")


class TestExtractWords:

    def test_punctuation_and_digits_stripped(self):
        assert extract_words("Hello, World! 123") == ["Hello", "World"]

    def test_hyphen_splits_word(self):
        assert extract_words("well-known") == ["well", "known"]

    def test_accented_letters_break_word(self):
        assert extract_words("café au lait") == ["caf", "au", "lait"]

    def test_whitespace_runs_collapsed(self):
        assert extract_words("  one\t\ttwo\n three  ") == ["one", "two", "three"]

    def test_case_preserved(self):
        assert extract_words("Apple apple APPLE") == ["Apple", "apple", "APPLE"]

    def test_no_letters(self):
        assert extract_words("42 + 7 = 49") == []

    def test_empty(self):
        assert extract_words("") == []


class TestRequestedCount:

    def test_words_plural(self):
        assert extract_requested_count("give me 5 words starting with a") == 5

    def test_word_singular(self):
        assert extract_requested_count("just 1 word") == 1

    def test_case_insensitive(self):
        assert extract_requested_count("10 WORDS only") == 10

    def test_first_match_wins(self):
        assert extract_requested_count("3 words, no wait, 7 words") == 3

    def test_zero(self):
        assert extract_requested_count("0 words") == 0

    def test_leading_zeros(self):
        assert extract_requested_count("007 words") == 7
        assert extract_requested_count("000 words") == 0

    def test_huge_count_saturates(self):
        assert extract_requested_count("9" * 5000 + " words") == sys.maxsize

    def test_long_zero_padded_count(self):
        assert extract_requested_count("0" * 5000 + "4 words") == 4

    def test_spelled_number_ignored(self):
        assert extract_requested_count("five words") is None

    def test_needs_space_before_word(self):
        assert extract_requested_count("5words") is None

    def test_absent(self):
        assert extract_requested_count("list some fruits") is None


class TestStartingLetter:

    def test_lowercase(self):
        assert extract_starting_letter("give me 5 words starting with a") == "a"

    def test_uppercase_returned_lower(self):
        assert extract_starting_letter("Words Starting With Q") == "q"

    def test_extra_spaces(self):
        assert extract_starting_letter("starting with    m") == "m"

    def test_digit_not_a_letter(self):
        assert extract_starting_letter("starting with 5") is None

    def test_absent(self):
        assert extract_starting_letter("words that end with e") is None
