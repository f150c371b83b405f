"""Scene data model and step calculation."""

import uuid
from typing import Optional
from pydantic import BaseModel, Field

from .behavior import TriggerMode, WidgetStateLayer


class Scene(BaseModel):
    """A narrative unit within a slide.

    Scenes share the slide's widgets and only configure how they reveal.
    order is zero-based and dense within the parent slide.
    """
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    title: str = ""
    icon: Optional[str] = None
    description: Optional[str] = None
    order: int = 0
    widget_state_layer: WidgetStateLayer = Field(default_factory=WidgetStateLayer)
    trigger_mode: Optional[TriggerMode] = None  # None = inherit from slide
    duration: Optional[int] = None  # milliseconds
    activated_by_widget_ids: list[str] = Field(default_factory=list)

    @property
    def step_count(self) -> int:
        return calc_scene_steps(self)

    @property
    def has_overview_step(self) -> bool:
        enter = self.widget_state_layer.enter_behavior
        return enter.include_overview_step and enter.reveal_mode == "sequential"


def calc_scene_steps(scene: Scene) -> int:
    """Number of navigable steps a scene contributes.

    - 'all-at-once' enter = 1 step (0 if nothing animates)
    - 'sequential' enter = one step per animated widget
    - overview flag (sequential only) adds one leading step
    - an exit behavior always adds exactly one step
    The result is never below 1 so empty scenes stay reachable.
    """
    layer = scene.widget_state_layer
    enter = layer.enter_behavior

    if enter.reveal_mode == "all-at-once":
        enter_steps = 1 if layer.animated_widget_ids else 0
    else:
        enter_steps = len(layer.animated_widget_ids)

    if scene.has_overview_step:
        enter_steps += 1

    exit_steps = 1 if layer.exit_behavior is not None else 0

    return max(enter_steps + exit_steps, 1)


def generate_scene_step_labels(scene: Scene, widget_titles: dict[str, str]) -> list[str]:
    """Breadcrumb labels for each step, always len == calc_scene_steps(scene)."""
    layer = scene.widget_state_layer
    enter = layer.enter_behavior
    labels: list[str] = []

    if enter.reveal_mode == "all-at-once":
        if layer.animated_widget_ids:
            labels.append(scene.title or "Enter")
    else:
        if enter.include_overview_step:
            labels.append("Overview")
        for widget_id in layer.animated_widget_ids:
            labels.append(widget_titles.get(widget_id, f"Widget {widget_id}"))

    if layer.exit_behavior is not None:
        labels.append("Exit")

    if not labels:
        labels.append(scene.title or "Scene")

    return labels


def scene_for_widget(scenes: list[Scene], widget_id: str) -> Optional[int]:
    """Index of the first scene a menu widget activates, or None."""
    for i, scene in enumerate(scenes):
        if widget_id in scene.activated_by_widget_ids:
            return i
    return None
