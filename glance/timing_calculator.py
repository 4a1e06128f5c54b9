"""
Unit display timing for the Glance speed reader.
"""

import math
from typing import NamedTuple

from . import config


class ReadingTime(NamedTuple):
    minutes: int
    seconds: int


def clamp_wpm(wpm, lower: int = config.MIN_WPM, upper: int = config.MAX_WPM) -> int:
    """Clamp a reading rate into its allowed range, falling back to the default if unparseable."""
    try:
        value = int(round(float(wpm)))
    except (TypeError, ValueError, OverflowError):
        return config.DEFAULT_WPM
    return max(lower, min(upper, value))


def flat_duration(word_count: int, wpm: float) -> float:
    """
    Display time for a number of words at a flat reading rate.

    Args:
        word_count: Number of words shown together
        wpm: Reading rate in words per minute

    Returns:
        float: Duration in milliseconds (0 for an empty unit or a non-positive rate)
    """
    if word_count <= 0 or not wpm or wpm <= 0:
        return 0.0
    return (word_count / wpm) * 60 * 1000


def has_pause_punctuation(text: str) -> bool:
    return any(char in config.PAUSE_PUNCTUATION for char in text)


def mean_word_length(unit) -> float:
    if unit.word_count == 0:
        return 0.0
    return unit.char_count / unit.word_count


def unit_duration(unit, wpm: float, smart_timing: bool = True, comprehension_mode: bool = False) -> float:
    """
    Calculate how long a unit should stay on screen.

    The flat duration is proportional to the unit's word count. Smart timing
    lengthens units whose words average more than six characters (x1.2) and
    units containing pause punctuation (x1.3). Comprehension mode adds a
    further x1.2 in either mode.

    Args:
        unit: The Unit to time
        wpm: Reading rate in words per minute
        smart_timing: Whether to apply the complexity adjustments
        comprehension_mode: Whether to add the comprehension pause

    Returns:
        float: Duration in milliseconds, finite and non-negative
    """
    duration = flat_duration(unit.word_count, wpm)
    if duration == 0:
        return 0.0

    if smart_timing:
        if mean_word_length(unit) > config.LONG_WORD_THRESHOLD:
            duration *= config.LONG_WORD_MULTIPLIER
        if has_pause_punctuation(unit.text):
            duration *= config.PUNCTUATION_MULTIPLIER

    if comprehension_mode:
        duration *= config.COMPREHENSION_MULTIPLIER

    return duration


def _round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def estimate_time(word_count: int, wpm: float) -> ReadingTime:
    """
    Estimate the time needed to read a number of words.

    Seconds are rounded half up rather than floored, so a total just short of
    a whole minute reports 60 seconds; estimate_time leaves that as is and
    format_time carries it into the minutes.

    Args:
        word_count: Number of words to read
        wpm: Reading rate in words per minute

    Returns:
        ReadingTime: (minutes, seconds)
    """
    if word_count <= 0 or not wpm or wpm <= 0:
        return ReadingTime(0, 0)
    total_seconds = (word_count / wpm) * 60
    minutes = int(total_seconds // 60)
    seconds = _round_half_up(total_seconds % 60)
    return ReadingTime(minutes, seconds)


def format_time(minutes: int, seconds: int) -> str:
    """Format a reading time as m:ss."""
    if seconds >= 60:
        minutes, seconds = minutes + seconds // 60, seconds % 60
    return f"{minutes}:{seconds:02d}"
