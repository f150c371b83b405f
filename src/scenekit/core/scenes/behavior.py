"""Widget state layer models: enter/exit behaviors, interactions, visual states.

Pure data that the player reads to decide how widgets reveal within a scene.
"""

from typing import Literal, Optional
from pydantic import BaseModel, Field

TriggerMode = Literal["auto", "click"]
RevealMode = Literal["all-at-once", "sequential"]
WidgetDisplayMode = Literal["normal", "expanded", "minimized", "hidden"]


class WidgetVisualState(BaseModel):
    """The visual state of one widget when a scene begins."""
    widget_id: str
    visible: bool = True
    is_focused: bool = False
    display_mode: WidgetDisplayMode = "normal"


class AnimationBehavior(BaseModel):
    """How a group of widgets animates into or out of a scene.

    'all-at-once' produces one step, 'sequential' one step per widget.
    include_overview_step only applies to 'sequential': step 0 shows every
    widget with none focused.
    """
    reveal_mode: RevealMode = "all-at-once"
    animation_type: str = "fade-in"
    duration: float = 0.5  # seconds per widget
    easing: str = "ease-out"
    stagger_delay: Optional[float] = None  # all-at-once only
    trigger_mode: Optional[TriggerMode] = None  # None = inherit from scene
    step_duration: Optional[int] = None  # ms between auto steps
    include_overview_step: bool = False


class InteractionBehavior(BaseModel):
    """A user-triggered widget reaction. Never counted as a step."""
    trigger: Literal["click", "hover"] = "click"
    action: Literal["expand", "collapse", "toggle-expand", "show-detail", "highlight"] = "toggle-expand"
    target_display_mode: Optional[WidgetDisplayMode] = None
    exclusive: bool = False
    available_in_auto_mode: bool = False


class WidgetStateLayer(BaseModel):
    """Animation and interaction rules for the widgets of one scene.

    animated_widget_ids is the reveal order for 'sequential' mode; for
    'all-at-once' the listed widgets animate together.
    """
    initial_states: list[WidgetVisualState] = Field(default_factory=list)
    enter_behavior: AnimationBehavior = Field(default_factory=AnimationBehavior)
    exit_behavior: Optional[AnimationBehavior] = None
    interaction_behaviors: list[InteractionBehavior] = Field(default_factory=list)
    animated_widget_ids: list[str] = Field(default_factory=list)

    def initial_state_for(self, widget_id: str) -> Optional[WidgetVisualState]:
        for state in self.initial_states:
            if state.widget_id == widget_id:
                return state
        return None
