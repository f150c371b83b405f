"""Per-step widget visibility for a scene."""

from dataclasses import dataclass

from .scene import Scene, calc_scene_steps


@dataclass(frozen=True)
class WidgetVisibility:
    visible: bool
    is_focused: bool = False
    hidden: bool = False


def is_exit_step(scene: Scene, step_index: int) -> bool:
    return (
        scene.widget_state_layer.exit_behavior is not None
        and step_index == calc_scene_steps(scene) - 1
    )


def widget_visibility(scene: Scene, widget_id: str, step_index: int) -> WidgetVisibility:
    """How a widget should appear while the scene sits on step_index.

    Exit and overview steps show every animated widget with none focused.
    Sequential reveal shows widgets up to the current one and focuses it.
    Widgets outside the reveal sequence keep their initial state.
    """
    layer = scene.widget_state_layer
    total_steps = calc_scene_steps(scene)

    if is_exit_step(scene, step_index):
        return WidgetVisibility(visible=True)

    if widget_id in layer.animated_widget_ids:
        widget_index = layer.animated_widget_ids.index(widget_id)

        if scene.has_overview_step and step_index == 0:
            return WidgetVisibility(visible=True)

        effective_step = step_index - 1 if scene.has_overview_step else step_index

        if layer.enter_behavior.reveal_mode == "sequential":
            return WidgetVisibility(
                visible=widget_index <= effective_step,
                is_focused=widget_index == effective_step,
            )
        return WidgetVisibility(visible=step_index > 0 or total_steps <= 1)

    initial = layer.initial_state_for(widget_id)
    if initial is not None:
        return WidgetVisibility(
            visible=initial.visible,
            is_focused=initial.is_focused,
            hidden=not initial.visible and initial.display_mode == "hidden",
        )

    return WidgetVisibility(visible=True)
