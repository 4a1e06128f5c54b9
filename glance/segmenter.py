"""
Text segmentation for the Glance speed reader.

Splits raw text into the units shown one at a time during playback. A unit is
a single word in word mode, or a short phrase of up to six words otherwise.
Segmentation is purely rule based: sentences end at '.', '!' or '?' followed
by whitespace, and phrases close early after ',', ';' or ':'.
"""

import re
from dataclasses import dataclass, field

from . import config

SENTENCE_BOUNDARY = re.compile(r'(?<=[.!?])\s+')
PHRASE_BREAK = re.compile(r'[,;:]$')

# Words at or below this length are focused on their first character
SHORT_WORD_LENGTH = 4
ORP_RATIO = 0.3


@dataclass(frozen=True)
class EmphasisSplit:
    """The before/emphasis/after decomposition of a unit's text."""

    before: str = ""
    emphasis: str = ""
    after: str = ""

    @property
    def text(self) -> str:
        return self.before + self.emphasis + self.after


@dataclass(frozen=True)
class Unit:
    """One displayable piece of a document: a word or a short phrase."""

    words: tuple[str, ...]
    emphasis: EmphasisSplit = field(default_factory=EmphasisSplit, compare=False)

    @property
    def text(self) -> str:
        return " ".join(self.words)

    @property
    def word_count(self) -> int:
        return len(self.words)

    @property
    def char_count(self) -> int:
        """Number of non-whitespace characters in the unit."""
        return sum(len(word) for word in self.words)

    def __str__(self):
        return self.text


def clamp_words_per_unit(words_per_unit) -> int:
    try:
        value = int(words_per_unit)
    except (TypeError, ValueError):
        return config.DEFAULT_WORDS_PER_UNIT
    return max(config.MIN_WORDS_PER_UNIT, min(config.MAX_WORDS_PER_UNIT, value))


def split_into_sentences(text: str) -> list[str]:
    """Split text wherever sentence punctuation is followed by whitespace."""
    if not text:
        return []
    return [sentence for sentence in SENTENCE_BOUNDARY.split(text) if sentence.strip()]


def split_into_words(text: str) -> list[str]:
    return text.split()


def count_words(text: str) -> int:
    """Count the whitespace separated words in a text."""
    return len(split_into_words(text)) if text else 0


def word_emphasis(word: str) -> EmphasisSplit:
    """
    Split a single word around its optimal recognition point.

    Short words are focused on their first character; longer ones on the
    character roughly a third of the way in.

    Args:
        word: The word to split

    Returns:
        EmphasisSplit with exactly one emphasised character
    """
    if not word:
        return EmphasisSplit()
    if len(word) <= SHORT_WORD_LENGTH:
        index = 0
    else:
        index = int(len(word) * ORP_RATIO)
    return EmphasisSplit(word[:index], word[index], word[index + 1:])


def phrase_emphasis(words) -> EmphasisSplit:
    """
    Pick the word to emphasise inside a phrase.

    A phrase of one word is emphasised whole. Otherwise the second word is
    used, or the middle word when the phrase is shorter than that.
    """
    words = list(words)
    if len(words) <= 1:
        return EmphasisSplit(emphasis=" ".join(words))

    index = min(1, len(words) // 2)
    before = " ".join(words[:index])
    after = " ".join(words[index + 1:])
    return EmphasisSplit(
        before=before + " " if before else "",
        emphasis=words[index],
        after=" " + after if after else "",
    )


def make_unit(words, words_per_unit: int) -> Unit:
    words = tuple(words)
    if words_per_unit == 1 and len(words) == 1:
        emphasis = word_emphasis(words[0])
    else:
        emphasis = phrase_emphasis(words)
    return Unit(words=words, emphasis=emphasis)


def segment(text: str, words_per_unit: int = config.DEFAULT_WORDS_PER_UNIT) -> list[Unit]:
    """
    Segment text into display units.

    Words are accumulated greedily within each sentence. A unit is closed when
    it holds words_per_unit words, when its last word ends in ',', ';' or ':',
    or at the end of the sentence, so no unit ever crosses a sentence boundary.

    Args:
        text: Raw document text
        words_per_unit: Maximum words per unit, clamped to 1..6

    Returns:
        list[Unit]: Units in reading order (empty for blank text)
    """
    words_per_unit = clamp_words_per_unit(words_per_unit)
    units = []

    for sentence in split_into_sentences(text):
        words = split_into_words(sentence)
        current = []
        for index, word in enumerate(words):
            current.append(word)
            is_last_word = index == len(words) - 1
            if len(current) >= words_per_unit or PHRASE_BREAK.search(word) or is_last_word:
                units.append(make_unit(current, words_per_unit))
                current = []

    return units
