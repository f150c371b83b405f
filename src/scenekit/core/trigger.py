"""Trigger mode resolution.

Precedence, most specific first:
1. the scene's enter/exit behavior trigger_mode
2. the scene's own trigger_mode
3. a per-slide override (sparse map keyed by slide index)
4. the presentation default

A missing map entry or a None field means "inherit". Clearing a slide
override deletes its entry, it is never rewritten to the default value.
"""

from typing import Literal, Mapping, Optional

from .scenes import Scene, TriggerMode


def resolve_trigger_mode(slide_overrides: Mapping[int, TriggerMode],
                         presentation_default: TriggerMode,
                         slide_index: int) -> TriggerMode:
    return slide_overrides.get(slide_index, presentation_default)


def resolve_scene_trigger_mode(scene: Optional[Scene], slide_mode: TriggerMode,
                               phase: Literal["enter", "exit"] = "enter") -> TriggerMode:
    if scene is None:
        return slide_mode

    layer = scene.widget_state_layer
    behavior = layer.exit_behavior if phase == "exit" else layer.enter_behavior
    if behavior is not None and behavior.trigger_mode is not None:
        return behavior.trigger_mode
    if scene.trigger_mode is not None:
        return scene.trigger_mode
    return slide_mode
