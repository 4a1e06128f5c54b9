"""
Playback state machine for the Glance speed reader.

The controller walks a document's unit sequence, scheduling one advance at a
time on an asyncio-style scheduler. Every state change cancels the pending
advance before touching the index, and each scheduled callback carries the
generation it was scheduled under so a stale callback is ignored.
"""

import asyncio
import logging
from dataclasses import dataclass
from enum import Enum

from . import config
from .segmenter import Unit, segment, count_words, clamp_words_per_unit
from .timing_calculator import ReadingTime, unit_duration, estimate_time, clamp_wpm
from .trackers import HistoryTracker, PositionTracker


class PlaybackState(Enum):
    IDLE = "idle"
    PLAYING = "playing"
    PAUSED = "paused"
    FINISHED = "finished"


@dataclass(frozen=True)
class Snapshot:
    """Immutable view of the controller handed to the host after every change."""

    state: PlaybackState
    index: int
    total_units: int
    unit: Unit | None
    progress: float
    progress_text: str
    words_consumed: int
    total_words: int
    total_time: ReadingTime
    remaining_time: ReadingTime
    history: tuple
    wpm: int
    words_per_unit: int
    smart_timing: bool
    comprehension_mode: bool


class PlaybackController:
    """
    Drives RSVP playback over a segmented document.

    Args:
        settings: Optional dict with wpm, words_per_unit, smart_timing and
            comprehension_mode; missing keys use the configured defaults
        scheduler: Object with call_later(delay_seconds, callback, *args)
            returning a cancellable handle. Defaults to the running asyncio loop.
        on_change: Optional callable receiving a Snapshot after each change
    """

    def __init__(self, settings: dict | None = None, scheduler=None, on_change=None):
        settings = settings or {}
        self.wpm = clamp_wpm(settings.get("wpm", config.DEFAULT_WPM))
        self.words_per_unit = clamp_words_per_unit(
            settings.get("words_per_unit", config.DEFAULT_WORDS_PER_UNIT)
        )
        self.smart_timing = bool(settings.get("smart_timing", True))
        self.comprehension_mode = bool(settings.get("comprehension_mode", False))

        self.text = ""
        self.units: list[Unit] = []
        self.total_words = 0
        self.index = -1
        self.playing = False

        self.history = HistoryTracker()
        self.position = PositionTracker()

        self.on_change = on_change
        self._scheduler = scheduler
        self._timer = None
        self._generation = 0

    # ------------------------------------------------------------------
    # Document and settings
    # ------------------------------------------------------------------

    def load_document(self, text: str):
        """Replace the document and return to the unstarted state."""
        self._cancel_advance()
        self.text = text or ""
        self._resegment()
        logging.info(f"Loaded document: {self.total_words} words in {len(self.units)} units")
        self._notify()

    def _resegment(self):
        self.units = segment(self.text, self.words_per_unit)
        self.total_words = count_words(self.text)
        self.index = -1
        self.playing = False
        self.history.clear()
        self.position.reset(self.total_words)

    def configure(self, wpm=None, words_per_unit=None, smart_timing=None, comprehension_mode=None):
        """
        Apply a partial settings update.

        Rate and timing flag changes only affect the next scheduled advance.
        Switching comprehension mode on caps the rate and unit size once.
        A new unit size re-segments the document and returns to the start.
        """
        if wpm is not None:
            self.wpm = clamp_wpm(wpm)
        if smart_timing is not None:
            self.smart_timing = bool(smart_timing)

        target_words_per_unit = self.words_per_unit
        if words_per_unit is not None:
            target_words_per_unit = clamp_words_per_unit(words_per_unit)

        if comprehension_mode is not None:
            turning_on = bool(comprehension_mode) and not self.comprehension_mode
            self.comprehension_mode = bool(comprehension_mode)
            if turning_on:
                self.wpm = min(self.wpm, config.COMPREHENSION_MAX_WPM)
                target_words_per_unit = min(target_words_per_unit, config.COMPREHENSION_MAX_WORDS_PER_UNIT)

        if target_words_per_unit != self.words_per_unit:
            self._cancel_advance()
            self.words_per_unit = target_words_per_unit
            self._resegment()
            logging.info(f"Re-segmented document with {self.words_per_unit} words per unit")

        self._notify()

    @property
    def settings(self) -> dict:
        return {
            "wpm": self.wpm,
            "words_per_unit": self.words_per_unit,
            "smart_timing": self.smart_timing,
            "comprehension_mode": self.comprehension_mode,
        }

    def adjust_speed(self, delta: int) -> int:
        """Change the reading rate by delta, staying within the allowed range."""
        self.wpm = clamp_wpm(self.wpm + delta)
        self._notify()
        return self.wpm

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    @property
    def state(self) -> PlaybackState:
        if self.playing:
            return PlaybackState.PLAYING
        if self.index < 0 or not self.units:
            return PlaybackState.IDLE
        if self.index >= len(self.units):
            return PlaybackState.FINISHED
        return PlaybackState.PAUSED

    @property
    def current_unit(self) -> Unit | None:
        if 0 <= self.index < len(self.units):
            return self.units[self.index]
        return None

    @property
    def progress(self) -> float:
        """Percentage of units passed, 0 before playback starts."""
        if not self.units or self.index < 0:
            return 0.0
        return min((self.index / len(self.units)) * 100, 100.0)

    @property
    def progress_text(self) -> str:
        if not self.units:
            return "0/0"
        shown = min(self.index + 1, len(self.units)) if self.index >= 0 else 0
        return f"{shown}/{len(self.units)}"

    @property
    def total_time(self) -> ReadingTime:
        return estimate_time(self.total_words, self.wpm)

    @property
    def remaining_time(self) -> ReadingTime:
        if not self.units or self.index < 0:
            return self.total_time
        return estimate_time(self.position.remaining, self.wpm)

    def snapshot(self) -> Snapshot:
        return Snapshot(
            state=self.state,
            index=self.index,
            total_units=len(self.units),
            unit=self.current_unit,
            progress=self.progress,
            progress_text=self.progress_text,
            words_consumed=self.position.words,
            total_words=self.total_words,
            total_time=self.total_time,
            remaining_time=self.remaining_time,
            history=self.history.entries,
            wpm=self.wpm,
            words_per_unit=self.words_per_unit,
            smart_timing=self.smart_timing,
            comprehension_mode=self.comprehension_mode,
        )

    def _notify(self):
        if self.on_change:
            self.on_change(self.snapshot())

    # ------------------------------------------------------------------
    # Scheduling
    # ------------------------------------------------------------------

    def _get_scheduler(self):
        if self._scheduler is None:
            return asyncio.get_running_loop()
        return self._scheduler

    def _cancel_advance(self):
        self._generation += 1
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def _schedule_advance(self):
        self._cancel_advance()
        duration = unit_duration(self.units[self.index], self.wpm, self.smart_timing, self.comprehension_mode)
        delay = max(duration, config.MIN_UNIT_DELAY_MS) / 1000
        self._timer = self._get_scheduler().call_later(delay, self._on_advance_due, self._generation)

    def _on_advance_due(self, generation: int):
        if generation != self._generation or not self.playing:
            logging.debug(f"Ignoring stale advance (generation {generation}, current {self._generation})")
            return
        self._timer = None
        self._advance()

    def _advance(self):
        left = self.units[self.index]
        self.index += 1
        self.position.advance(left.word_count)
        if self.index < len(self.units):
            self.history.append(left)
            self._schedule_advance()
        else:
            self.playing = False
        self._notify()

    # ------------------------------------------------------------------
    # Transport
    # ------------------------------------------------------------------

    def play(self):
        if not self.units or self.playing:
            return
        self._cancel_advance()
        if self.index < 0 or self.index >= len(self.units):
            self.index = 0
            self.position.reset()
        self.playing = True
        self._schedule_advance()
        self._notify()

    def pause(self):
        if not self.playing:
            return
        self._cancel_advance()
        self.playing = False
        self._notify()

    def toggle(self):
        if self.playing:
            self.pause()
        else:
            self.play()

    def navigate(self, delta: int):
        """
        Step delta units forward or backward, clamped to the sequence.

        Moving forward records the units stepped over in the history and keeps
        playing. Moving backward removes their words from the position and
        always pauses playback.
        """
        if not self.units or not delta:
            return
        self._cancel_advance()

        prior = self.index
        new_index = max(0, min(prior + delta, len(self.units) - 1))

        if delta > 0:
            if prior >= 0:
                stepped = self.units[prior:new_index]
                self.history.extend(stepped)
                self.position.advance(sum(unit.word_count for unit in stepped))
            else:
                self.position.set(self._words_before(new_index))
        else:
            stepped = self.units[new_index:max(prior, new_index)]
            self.position.retreat(sum(unit.word_count for unit in stepped))
            self.playing = False

        self.index = new_index
        if self.playing:
            self._schedule_advance()
        self._notify()

    def reset_to_start(self):
        if not self.units:
            return
        self._cancel_advance()
        self.index = 0
        self.playing = False
        self.history.clear()
        self.position.reset()
        self._notify()

    def jump_to_end(self):
        if not self.units:
            return
        self._cancel_advance()
        self.index = len(self.units) - 1
        self.playing = False
        self.position.set(self.total_words)
        self._notify()

    def seek(self, index: int) -> bool:
        """Jump straight to a unit index and pause there."""
        if not 0 <= index < len(self.units):
            return False
        self._cancel_advance()
        self.index = index
        self.playing = False
        self.position.set(self._words_before(index))
        self._notify()
        return True

    def seek_history(self, unit: Unit) -> bool:
        """Jump to the first unit in the current sequence with the same words."""
        for index, candidate in enumerate(self.units):
            if candidate.words == unit.words:
                return self.seek(index)
        logging.info(f"History entry '{unit.text}' is not in the current document")
        return False

    def _words_before(self, index: int) -> int:
        return sum(unit.word_count for unit in self.units[:index])

    def close(self):
        """Cancel any pending advance."""
        self._cancel_advance()
        self.playing = False
