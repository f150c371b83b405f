"""Time-driven slide advancement.

Two mutually exclusive time sources move playback forward: a fixed
100ms timer when the presentation has no voice-over track, or the audio
element's time updates when it does. Either one maps elapsed time onto
cumulative slide durations and calls go_to_slide only when the slide
changes. Step advancement inside a click-mode slide is never timer-driven.
"""

import asyncio
import logging
from bisect import bisect_right
from typing import Optional

from .presenter import Presenter

logger = logging.getLogger("SceneKit.core.timeline")

TICK_MS = 100


def slide_index_at_time(cumulative: list[float], time_ms: float) -> int:
    """First slide whose cumulative end exceeds time_ms, saturating at the last."""
    if not cumulative:
        return 0
    return min(bisect_right(cumulative, time_ms), len(cumulative) - 1)


def slide_start_time(cumulative: list[float], index: int) -> float:
    return cumulative[index - 1] if index > 0 else 0


class AutoAdvanceDriver:
    """Drives a presenter from the timer or from audio time updates."""

    def __init__(self, presenter: Presenter, tick_ms: int = TICK_MS):
        self.presenter = presenter
        self.tick_ms = tick_ms
        self._cumulative = presenter.presentation.cumulative_durations()
        self._step_elapsed = 0

    @property
    def uses_audio(self) -> bool:
        return bool(self.presenter.presentation.full_audio_url)

    @property
    def is_auto(self) -> bool:
        return self.presenter.slide_trigger_mode() == "auto"

    def _follow_time(self, time_ms: float):
        index = slide_index_at_time(self._cumulative, time_ms)
        if index != self.presenter.state.current_slide_index:
            logger.debug(f"Time {time_ms:.0f}ms -> slide {index}")
            self.presenter.go_to_slide(index)
            self._step_elapsed = 0

    def _align_time_to_slide(self):
        """Snap the clock into the current slide's window after manual navigation."""
        state = self.presenter.state
        index = state.current_slide_index
        start = slide_start_time(self._cumulative, index)
        if not start <= state.current_time < self._cumulative[index]:
            state.seek_to(start)

    def tick(self) -> bool:
        """One timer tick. Returns False when the timer is not the active driver."""
        state = self.presenter.state
        if not state.is_playing or self.uses_audio or not self.is_auto:
            return False
        if not self._cumulative:
            state.pause()
            return False

        self._align_time_to_slide()
        next_time = state.current_time + self.tick_ms
        if next_time >= state.total_duration:
            state.seek_to(state.total_duration)
            state.pause()
            logger.info("Reached end of presentation")
            return True

        state.seek_to(next_time)
        self._follow_time(next_time)
        return True

    def on_audio_time_update(self, seconds: float) -> bool:
        """Audio element time update. Ignored when no voice-over track exists."""
        if not self.uses_audio:
            return False
        time_ms = seconds * 1000
        self.presenter.state.seek_to(time_ms)
        if self.is_auto:
            self._follow_time(time_ms)
        return True

    def on_audio_ended(self):
        self.presenter.state.pause()

    def step_tick(self, elapsed_ms: float) -> bool:
        """Autoplay steps and scenes within the current slide.

        Fires once the scene's step duration has elapsed. Never leaves the
        slide, slide changes belong to the time source.
        """
        presenter = self.presenter
        state = presenter.state
        if not state.is_playing or presenter.trigger_mode() != "auto":
            self._step_elapsed = 0
            return False

        self._step_elapsed += elapsed_ms
        if self._step_elapsed < presenter.step_duration():
            return False
        self._step_elapsed = 0

        if state.current_step_index < state.total_steps - 1:
            presenter.advance()
            return True
        if state.current_scene_index < state.total_scenes - 1:
            presenter.advance_scene()
            return True
        return False

    async def run(self, interval: Optional[float] = None):
        """Tick until playback stops. Cancel the task to stop early."""
        if self.uses_audio:
            return
        delay = self.tick_ms / 1000 if interval is None else interval
        while self.presenter.state.is_playing:
            await asyncio.sleep(delay)
            self.tick()
            self.step_tick(self.tick_ms)
