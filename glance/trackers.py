"""Reading history and position tracking for the Glance speed reader."""

from collections import deque

from . import config


class HistoryTracker:
    """
    Bounded log of the units the reader has moved forward past.

    Only the most recent entries are kept; older ones fall off the head.
    Backward navigation never touches the history.
    """

    def __init__(self, limit: int = config.HISTORY_LIMIT):
        self.limit = limit
        self._entries = deque(maxlen=limit)

    def append(self, unit):
        self._entries.append(unit)

    def extend(self, units):
        for unit in units:
            self.append(unit)

    def clear(self):
        self._entries.clear()

    @property
    def entries(self) -> tuple:
        return tuple(self._entries)

    def __len__(self):
        return len(self._entries)

    def __iter__(self):
        return iter(self._entries)


class PositionTracker:
    """Running count of words consumed, clamped to the document's word count."""

    def __init__(self, total_words: int = 0):
        self.total_words = max(0, total_words)
        self.words = 0

    def _clamp(self, value: int) -> int:
        return max(0, min(self.total_words, value))

    def advance(self, word_count: int):
        self.words = self._clamp(self.words + word_count)

    def retreat(self, word_count: int):
        self.words = self._clamp(self.words - word_count)

    def set(self, word_count: int):
        self.words = self._clamp(word_count)

    def reset(self, total_words: int | None = None):
        """Move back to the start, optionally for a document of a new length."""
        if total_words is not None:
            self.total_words = max(0, total_words)
        self.words = 0

    @property
    def remaining(self) -> int:
        return self.total_words - self.words
