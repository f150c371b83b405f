"""Scenes package: public API re-exports."""

from .behavior import (
    TriggerMode,
    RevealMode,
    WidgetDisplayMode,
    WidgetVisualState,
    AnimationBehavior,
    InteractionBehavior,
    WidgetStateLayer,
)
from .scene import Scene, calc_scene_steps, generate_scene_step_labels, scene_for_widget
from .slide import AnimationConfig, SlideElement, Slide, default_scene
from .presentation import Presentation
from .visibility import WidgetVisibility, widget_visibility, is_exit_step

__all__ = [
    "TriggerMode",
    "RevealMode",
    "WidgetDisplayMode",
    "WidgetVisualState",
    "AnimationBehavior",
    "InteractionBehavior",
    "WidgetStateLayer",
    "Scene",
    "calc_scene_steps",
    "generate_scene_step_labels",
    "scene_for_widget",
    "AnimationConfig",
    "SlideElement",
    "Slide",
    "default_scene",
    "Presentation",
    "WidgetVisibility",
    "widget_visibility",
    "is_exit_step",
]
