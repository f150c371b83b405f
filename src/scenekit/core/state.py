"""Playback state machine. Position tracking and navigation with clamping."""

import logging
from dataclasses import dataclass
from pydantic import BaseModel, Field

from .scenes import TriggerMode
from .trigger import resolve_trigger_mode

logger = logging.getLogger("SceneKit.core.state")


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass(frozen=True)
class PlaybackPosition:
    slide_index: int
    scene_index: int
    step_index: int
    total_scenes: int
    total_steps: int


class PlayerState(BaseModel):
    """Playback state for one presentation session.

    Counters are zero-based. total_* fields are bounds supplied by the
    caller (init_player / set_scene_counts / set_total_anim_steps) whenever
    the active slide or scene changes; this class does not derive them.
    Out-of-range targets clamp, they never raise.

    current_anim_step / total_anim_steps are the single-level step counters
    used by slides that have no scene breakdown. Their valid range is
    [0, total_anim_steps] inclusive.
    """
    is_playing: bool = False
    presentation_trigger_mode: TriggerMode = "auto"
    slide_trigger_modes: dict[int, TriggerMode] = Field(default_factory=dict)
    current_slide_index: int = 0

    current_scene_index: int = 0
    total_scenes: int = 1
    current_step_index: int = 0
    total_steps: int = 0

    current_anim_step: int = 0
    total_anim_steps: int = 0

    current_time: float = 0.0  # milliseconds
    total_duration: float = 0.0  # milliseconds
    total_slides: int = 0
    volume: float = 1.0
    is_muted: bool = False

    @property
    def position(self) -> PlaybackPosition:
        return PlaybackPosition(
            slide_index=self.current_slide_index,
            scene_index=self.current_scene_index,
            step_index=self.current_step_index,
            total_scenes=self.total_scenes,
            total_steps=self.total_steps,
        )

    @property
    def is_last_slide(self) -> bool:
        return self.current_slide_index >= self.total_slides - 1

    # ── Playback ────────────────────────────────────────────────────────

    def play(self):
        self.is_playing = True

    def pause(self):
        self.is_playing = False

    def toggle_play(self):
        self.is_playing = not self.is_playing

    # ── Slide navigation ────────────────────────────────────────────────

    def _enter_slide(self, index: int):
        if index != self.current_slide_index:
            logger.debug(f"Slide {self.current_slide_index} -> {index}")
        self.current_slide_index = index
        self.current_scene_index = 0
        self.current_step_index = 0
        self.total_scenes = 1
        self.total_steps = 0
        self.current_anim_step = 0
        self.total_anim_steps = 0

    def go_to_slide(self, index: int):
        self._enter_slide(_clamp(index, 0, self.total_slides - 1))

    def next_slide(self):
        if not self.is_last_slide:
            self._enter_slide(self.current_slide_index + 1)

    def prev_slide(self):
        if self.current_slide_index > 0:
            self._enter_slide(self.current_slide_index - 1)

    # ── Single-level step navigation ────────────────────────────────────

    def advance_step(self):
        """Next step; past the last step moves to the next slide."""
        if self.current_anim_step < self.total_anim_steps:
            self.current_anim_step += 1
        elif not self.is_last_slide:
            self._enter_slide(self.current_slide_index + 1)

    def retreat_step(self):
        """Previous step; at step 0 moves to step 0 of the previous slide."""
        if self.current_anim_step > 0:
            self.current_anim_step -= 1
        elif self.current_slide_index > 0:
            self._enter_slide(self.current_slide_index - 1)

    def go_to_step(self, step: int):
        self.current_anim_step = _clamp(step, 0, self.total_anim_steps)

    def to_group_start(self):
        self.current_anim_step = 0

    def to_group_end(self):
        self.current_anim_step = self.total_anim_steps

    def set_total_anim_steps(self, count: int):
        self.total_anim_steps = max(0, count)

    # ── Scene navigation ────────────────────────────────────────────────

    def go_to_scene(self, scene_index: int):
        self.current_scene_index = _clamp(scene_index, 0, self.total_scenes - 1)
        self.current_step_index = 0

    def advance_scene(self):
        """Next scene; after the last scene moves to the next slide."""
        if self.current_scene_index < self.total_scenes - 1:
            self.current_scene_index += 1
            self.current_step_index = 0
        elif not self.is_last_slide:
            self._enter_slide(self.current_slide_index + 1)

    def retreat_scene(self):
        """Previous scene; before the first scene moves to scene 0 of the previous slide.

        The previous slide's last scene is not restored.
        """
        if self.current_scene_index > 0:
            self.current_scene_index -= 1
            self.current_step_index = 0
        elif self.current_slide_index > 0:
            self._enter_slide(self.current_slide_index - 1)

    def next_scene_step(self) -> bool:
        """Move to the next step of the current scene. False at its last step."""
        if self.current_step_index < self.total_steps - 1:
            self.current_step_index += 1
            return True
        return False

    def prev_scene_step(self) -> bool:
        if self.current_step_index > 0:
            self.current_step_index -= 1
            return True
        return False

    def go_to_scene_step(self, step: int):
        self.current_step_index = _clamp(step, 0, max(self.total_steps - 1, 0))

    def set_scene_counts(self, total_scenes: int, total_steps_in_current_scene: int):
        self.total_scenes = total_scenes
        self.total_steps = total_steps_in_current_scene

    def set_current_scene_steps(self, total_steps: int):
        self.total_steps = total_steps

    # ── Trigger mode ────────────────────────────────────────────────────

    def set_presentation_trigger_mode(self, mode: TriggerMode):
        self.presentation_trigger_mode = mode

    def set_slide_trigger_mode(self, slide_index: int, mode: TriggerMode):
        self.slide_trigger_modes = {**self.slide_trigger_modes, slide_index: mode}

    def clear_slide_trigger_mode(self, slide_index: int):
        self.slide_trigger_modes = {
            k: v for k, v in self.slide_trigger_modes.items() if k != slide_index
        }

    def get_effective_trigger_mode(self, slide_index: int) -> TriggerMode:
        return resolve_trigger_mode(
            self.slide_trigger_modes, self.presentation_trigger_mode, slide_index
        )

    # ── Time & audio controls ───────────────────────────────────────────

    def seek_to(self, time_ms: float):
        self.current_time = _clamp(time_ms, 0, self.total_duration)

    def set_volume(self, volume: float):
        self.volume = _clamp(volume, 0.0, 1.0)
        self.is_muted = False

    def toggle_mute(self):
        self.is_muted = not self.is_muted

    def init_player(self, total_duration: float, total_slides: int):
        """Establish bounds for a freshly loaded presentation and rewind."""
        self.total_duration = total_duration
        self.total_slides = total_slides
        self._enter_slide(0)
        self.current_time = 0.0
        self.is_playing = False

    def reset(self):
        """Restore every field to its initial value."""
        for name, field in type(self).model_fields.items():
            setattr(self, name, field.get_default(call_default_factory=True))
