#!/usr/bin/env python3
"""
Test script for text segmentation and emphasis splits.
"""

import os
import sys
import unittest

# Add the project root to the path so we can import glance modules
sys.path.insert(0, os.path.dirname(os.path.abspath(__file__)))

from glance.segmenter import (
    EmphasisSplit,
    Unit,
    count_words,
    phrase_emphasis,
    segment,
    split_into_sentences,
    word_emphasis,
)

SAMPLE_TEXT = (
    "Speed reading is a skill.  It takes practice; patience, and focus! "
    "Do you read fast?\nMost people read between 200 and 300 words per minute: "
    "trained readers manage far more."
)


class TestSegment(unittest.TestCase):
    """Test cases for segment()."""

    def texts(self, text, words_per_unit):
        return [unit.text for unit in segment(text, words_per_unit)]

    def test_sentence_and_length_rules(self):
        """Short sentences close at their end rather than borrowing from the next."""
        self.assertEqual(self.texts("Hello world. Go now.", 3), ["Hello world.", "Go now."])

    def test_phrase_closes_at_max_words(self):
        self.assertEqual(self.texts("a b c d e f g", 2), ["a b", "c d", "e f", "g"])

    def test_punctuation_closes_phrase_early(self):
        self.assertEqual(self.texts("one, two three four five", 3), ["one,", "two three four", "five"])
        self.assertEqual(self.texts("first; second: third", 6), ["first;", "second:", "third"])

    def test_no_unit_spans_sentences(self):
        self.assertEqual(self.texts("One two. Three", 6), ["One two.", "Three"])
        self.assertEqual(self.texts("Really? Yes! Ok.", 6), ["Really?", "Yes!", "Ok."])

    def test_period_without_whitespace_is_not_a_boundary(self):
        self.assertEqual(self.texts("Version 3.5 is out", 6), ["Version 3.5 is out"])

    def test_empty_text(self):
        self.assertEqual(segment("", 3), [])
        self.assertEqual(segment("   \n\t  ", 3), [])

    def test_word_mode_has_one_word_per_unit(self):
        units = segment(SAMPLE_TEXT, 1)
        self.assertTrue(units)
        for unit in units:
            self.assertEqual(unit.word_count, 1)

    def test_words_are_preserved_in_order(self):
        """Joining the words of every unit reproduces the whitespace tokens."""
        expected = SAMPLE_TEXT.split()
        for words_per_unit in range(1, 7):
            units = segment(SAMPLE_TEXT, words_per_unit)
            words = [word for unit in units for word in unit.words]
            self.assertEqual(words, expected, f"words_per_unit={words_per_unit}")

    def test_units_never_exceed_words_per_unit(self):
        for words_per_unit in range(1, 7):
            for unit in segment(SAMPLE_TEXT, words_per_unit):
                self.assertLessEqual(unit.word_count, words_per_unit)

    def test_deterministic(self):
        self.assertEqual(segment(SAMPLE_TEXT, 3), segment(SAMPLE_TEXT, 3))
        self.assertEqual(
            [unit.emphasis for unit in segment(SAMPLE_TEXT, 1)],
            [unit.emphasis for unit in segment(SAMPLE_TEXT, 1)],
        )

    def test_words_per_unit_is_clamped(self):
        self.assertEqual(segment("a b c", 0), segment("a b c", 1))
        self.assertEqual(self.texts("a b c d e f g h", 10), ["a b c d e f", "g h"])

    def test_word_mode_units_carry_character_emphasis(self):
        units = segment("Hi reading", 1)
        self.assertEqual(units[0].emphasis, EmphasisSplit("", "H", "i"))
        self.assertEqual(units[1].emphasis, EmphasisSplit("re", "a", "ding"))

    def test_phrase_mode_units_carry_word_emphasis(self):
        units = segment("The quick brown fox. Go.", 3)
        self.assertEqual(units[0].emphasis, EmphasisSplit("The ", "quick", " brown"))
        self.assertEqual(units[-1].emphasis, EmphasisSplit("", "Go.", ""))


class TestEmphasis(unittest.TestCase):
    """Test cases for the emphasis split helpers."""

    def test_short_words_focus_first_character(self):
        for word in ("a", "to", "cat", "word"):
            split = word_emphasis(word)
            self.assertEqual(split.before, "")
            self.assertEqual(split.emphasis, word[0])
            self.assertEqual(split.text, word)

    def test_longer_words_focus_near_a_third(self):
        self.assertEqual(word_emphasis("words"), EmphasisSplit("w", "o", "rds"))
        self.assertEqual(word_emphasis("extraordinary"), EmphasisSplit("ext", "r", "aordinary"))

    def test_empty_word(self):
        self.assertEqual(word_emphasis(""), EmphasisSplit())

    def test_phrase_emphasis_positions(self):
        self.assertEqual(phrase_emphasis(["alone"]), EmphasisSplit("", "alone", ""))
        self.assertEqual(phrase_emphasis(["one", "two"]), EmphasisSplit("one ", "two", ""))
        self.assertEqual(
            phrase_emphasis(["a", "b", "c", "d", "e", "f"]),
            EmphasisSplit("a ", "b", " c d e f"),
        )

    def test_phrase_emphasis_reproduces_text(self):
        words = ["never", "stop", "reading", "books"]
        self.assertEqual(phrase_emphasis(words).text, " ".join(words))


class TestHelpers(unittest.TestCase):

    def test_split_into_sentences(self):
        self.assertEqual(
            split_into_sentences("One. Two!  Three? Four"),
            ["One.", "Two!", "Three?", "Four"],
        )

    def test_count_words(self):
        self.assertEqual(count_words(""), 0)
        self.assertEqual(count_words("  one two\nthree  "), 3)

    def test_unit_properties(self):
        unit = Unit(words=("hello", "world,"))
        self.assertEqual(unit.text, "hello world,")
        self.assertEqual(unit.word_count, 2)
        self.assertEqual(unit.char_count, 11)
        self.assertEqual(str(unit), "hello world,")

    def test_unit_equality_ignores_emphasis(self):
        self.assertEqual(Unit(words=("a",)), Unit(words=("a",), emphasis=EmphasisSplit("", "a", "")))


if __name__ == '__main__':
    unittest.main()
