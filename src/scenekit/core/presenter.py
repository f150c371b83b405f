"""Scene-aware presenter. Owns one presentation and its playback state.

The presenter is the only writer of its PlayerState. After every move that
can change the active slide or scene it recomputes the scene/step bounds
from the scene model, so step counts never drift from scene behavior.
"""

import logging
from typing import Optional

from .scenes import (
    Presentation,
    Scene,
    Slide,
    TriggerMode,
    WidgetVisibility,
    calc_scene_steps,
    generate_scene_step_labels,
    is_exit_step,
    scene_for_widget,
    widget_visibility,
)
from .state import PlayerState
from .trigger import resolve_scene_trigger_mode

logger = logging.getLogger("SceneKit.core.presenter")

DEFAULT_STEP_DURATION_MS = 1500

ADVANCE_KEYS = {"ArrowRight", " "}
RETREAT_KEYS = {"ArrowLeft"}
TOGGLE_PLAY_KEYS = {"p", "P"}


class Presenter:
    """Walks a presentation step -> scene -> slide."""

    def __init__(self, presentation: Presentation, state: Optional[PlayerState] = None):
        self.presentation = presentation
        self.state = state or PlayerState()
        self.load()

    def load(self):
        """(Re)initialise bounds, trigger defaults and position for the presentation."""
        pres = self.presentation
        self.state.init_player(pres.total_duration, len(pres.slides))
        self.state.set_presentation_trigger_mode(pres.trigger_mode)
        for index in list(self.state.slide_trigger_modes):
            self.state.clear_slide_trigger_mode(index)
        for index, mode in pres.slide_trigger_overrides().items():
            self.state.set_slide_trigger_mode(index, mode)
        self.sync_counts()
        logger.info(f"Loaded presentation '{pres.title or pres.id}' "
                    f"({len(pres.slides)} slides, {pres.total_duration}ms)")

    # ── Derived views ───────────────────────────────────────────────────

    @property
    def current_slide(self) -> Optional[Slide]:
        slides = self.presentation.slides
        if not slides:
            return None
        return slides[self.state.current_slide_index]

    @property
    def scenes(self) -> list[Scene]:
        slide = self.current_slide
        return slide.ensure_scenes() if slide else []

    @property
    def current_scene(self) -> Optional[Scene]:
        scenes = self.scenes
        if not scenes:
            return None
        return scenes[min(self.state.current_scene_index, len(scenes) - 1)]

    def sync_counts(self):
        """Push scene/step bounds for the active slide and scene into the state."""
        scenes = self.scenes
        scene = self.current_scene
        steps = calc_scene_steps(scene) if scene else 1
        self.state.set_scene_counts(max(len(scenes), 1), steps)
        self.state.set_total_anim_steps(sum(calc_scene_steps(s) for s in scenes))

    # ── Navigation ──────────────────────────────────────────────────────

    def advance(self):
        """Next step; past the scene's last step, the next scene or slide."""
        if not self.state.next_scene_step():
            self.state.advance_scene()
            self.sync_counts()

    def retreat(self):
        """Previous step; before step 0, scene 0 of the previous scene or slide."""
        if not self.state.prev_scene_step():
            self.state.retreat_scene()
            self.sync_counts()

    def go_to_slide(self, index: int):
        self.state.go_to_slide(index)
        self.sync_counts()

    def next_slide(self):
        self.state.next_slide()
        self.sync_counts()

    def prev_slide(self):
        self.state.prev_slide()
        self.sync_counts()

    def go_to_scene(self, scene_index: int):
        self.state.go_to_scene(scene_index)
        self.sync_counts()

    def advance_scene(self):
        self.state.advance_scene()
        self.sync_counts()

    def retreat_scene(self):
        self.state.retreat_scene()
        self.sync_counts()

    def go_to_step(self, step: int):
        """Jump within the current scene, clamped to its steps."""
        self.state.go_to_scene_step(step)

    def activate_widget(self, widget_id: str) -> bool:
        """Menu navigation: jump to the scene a widget activates."""
        index = scene_for_widget(self.scenes, widget_id)
        if index is None:
            return False
        self.go_to_scene(index)
        return True

    def handle_key(self, key: str) -> bool:
        if key in ADVANCE_KEYS:
            self.advance()
        elif key in RETREAT_KEYS:
            self.retreat()
        elif key in TOGGLE_PLAY_KEYS:
            self.state.toggle_play()
        else:
            return False
        return True

    # ── Renderer queries ────────────────────────────────────────────────

    def step_labels(self) -> list[str]:
        scene = self.current_scene
        if scene is None:
            return []
        return generate_scene_step_labels(scene, self.current_slide.widget_titles())

    def visibility(self, widget_id: str) -> WidgetVisibility:
        scene = self.current_scene
        if scene is None:
            return WidgetVisibility(visible=True)
        return widget_visibility(scene, widget_id, self.state.current_step_index)

    def slide_trigger_mode(self) -> TriggerMode:
        return self.state.get_effective_trigger_mode(self.state.current_slide_index)

    def trigger_mode(self) -> TriggerMode:
        """Effective mode for the current step, scene overrides included."""
        scene = self.current_scene
        phase = "exit" if scene and is_exit_step(scene, self.state.current_step_index) else "enter"
        return resolve_scene_trigger_mode(scene, self.slide_trigger_mode(), phase)

    def step_duration(self) -> int:
        scene = self.current_scene
        if scene and scene.widget_state_layer.enter_behavior.step_duration:
            return scene.widget_state_layer.enter_behavior.step_duration
        return DEFAULT_STEP_DURATION_MS

    def snapshot(self) -> dict:
        s = self.state
        slide = self.current_slide
        scene = self.current_scene
        return {
            "slide_index": s.current_slide_index,
            "slide_id": slide.id if slide else None,
            "total_slides": s.total_slides,
            "scene_index": s.current_scene_index,
            "scene_title": scene.title if scene else None,
            "total_scenes": s.total_scenes,
            "step_index": s.current_step_index,
            "total_steps": s.total_steps,
            "step_labels": self.step_labels(),
            "trigger_mode": self.trigger_mode(),
            "is_playing": s.is_playing,
            "current_time_ms": s.current_time,
            "total_duration_ms": s.total_duration,
        }
