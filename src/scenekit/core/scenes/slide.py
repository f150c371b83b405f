"""Slide and slide element data models."""

import uuid
from typing import Literal, Optional
from pydantic import BaseModel, Field

from .behavior import AnimationBehavior, TriggerMode, WidgetStateLayer, WidgetVisualState
from .scene import Scene

ElementType = Literal["text", "icon", "shape", "image"]


class AnimationConfig(BaseModel):
    """Entrance animation of a single element."""
    type: str = "fade-in"  # "none" disables the animation
    duration: float = 0.5  # seconds
    delay: float = 0.0  # seconds from slide start
    easing: str = "ease-out"


class SlideElement(BaseModel):
    """A widget on a slide. Scenes refer to it by id."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    type: ElementType = "text"
    content: str = ""
    title: Optional[str] = None  # display name for step labels
    animation: AnimationConfig = Field(default_factory=AnimationConfig)


class Slide(BaseModel):
    """A single slide: widgets plus the scenes that walk through them."""
    id: str = Field(default_factory=lambda: uuid.uuid4().hex[:8])
    order: int = 0
    title: str = ""
    elements: list[SlideElement] = Field(default_factory=list)
    scenes: list[Scene] = Field(default_factory=list)
    duration: int = 5000  # milliseconds
    trigger_mode: Optional[TriggerMode] = None  # None = presentation default

    def get_element(self, element_id: str) -> Optional[SlideElement]:
        for el in self.elements:
            if el.id == element_id:
                return el
        return None

    def widget_titles(self) -> dict[str, str]:
        return {el.id: el.title for el in self.elements if el.title}

    def ensure_scenes(self) -> list[Scene]:
        """Authored scenes in order, or a single default scene."""
        if self.scenes:
            return sorted(self.scenes, key=lambda s: s.order)
        return [default_scene(self)]


def default_scene(slide: Slide) -> Scene:
    """Build the implicit scene for a slide that has no authored scenes.

    Animated elements reveal in delay order; more than one animated element
    means a sequential reveal. Trigger modes stay unset so the player's
    per-slide mode applies.
    """
    animated = sorted(
        (el for el in slide.elements if el.animation.type != "none"),
        key=lambda el: el.animation.delay,
    )
    reveal_mode = "sequential" if len(animated) > 1 else "all-at-once"
    first = animated[0].animation if animated else AnimationConfig()

    return Scene(
        id=f"{slide.id}-scene-0",
        title=slide.title or "Main",
        order=0,
        widget_state_layer=WidgetStateLayer(
            initial_states=[
                WidgetVisualState(
                    widget_id=el.id,
                    visible=el.animation.type == "none",
                )
                for el in slide.elements
            ],
            enter_behavior=AnimationBehavior(
                reveal_mode=reveal_mode,
                animation_type=first.type,
                duration=first.duration,
                easing=first.easing,
                stagger_delay=0.15 if reveal_mode == "all-at-once" else None,
                step_duration=1500,
            ),
            animated_widget_ids=[el.id for el in animated],
        ),
        duration=slide.duration,
    )
