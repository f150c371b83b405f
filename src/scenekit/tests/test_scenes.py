"""Tests for scenekit.core.scenes: step counts, labels, default scenes, presentation."""

import pytest

from scenekit.core.scenes import (
    AnimationBehavior,
    AnimationConfig,
    Presentation,
    Scene,
    Slide,
    SlideElement,
    WidgetStateLayer,
    calc_scene_steps,
    default_scene,
    generate_scene_step_labels,
    scene_for_widget,
)


def _scene(reveal_mode="all-at-once", widgets=(), overview=False, exit=False, title="") -> Scene:
    return Scene(
        title=title,
        widget_state_layer=WidgetStateLayer(
            enter_behavior=AnimationBehavior(
                reveal_mode=reveal_mode,
                include_overview_step=overview,
            ),
            exit_behavior=AnimationBehavior() if exit else None,
            animated_widget_ids=list(widgets),
        ),
    )


# ── calc_scene_steps ────────────────────────────────────────────────────

class TestCalcSceneSteps:
    @pytest.mark.parametrize("reveal_mode, widgets, overview, exit, expected", [
        ("all-at-once", ["a", "b", "c"], False, False, 1),
        ("all-at-once", ["a", "b", "c"], False, True, 2),
        ("all-at-once", ["a"], True, False, 1),
        ("sequential", ["a", "b", "c"], False, False, 3),
        ("sequential", ["a", "b", "c"], True, False, 4),
        ("sequential", ["a", "b", "c"], True, True, 5),
        ("sequential", ["a", "b"], False, True, 3),
    ])
    def test_step_counts(self, reveal_mode, widgets, overview, exit, expected):
        scene = _scene(reveal_mode, widgets, overview, exit)
        assert calc_scene_steps(scene) == expected
        assert scene.step_count == expected

    def test_empty_all_at_once_floors_to_one(self):
        assert calc_scene_steps(_scene("all-at-once")) == 1

    def test_empty_sequential_floors_to_one(self):
        assert calc_scene_steps(_scene("sequential")) == 1

    def test_empty_scene_with_exit_is_one_step(self):
        assert calc_scene_steps(_scene("all-at-once", exit=True)) == 1

    def test_overview_only_counts_for_sequential(self):
        assert not _scene("all-at-once", ["a"], overview=True).has_overview_step
        assert _scene("sequential", ["a"], overview=True).has_overview_step


# ── Step labels ─────────────────────────────────────────────────────────

class TestStepLabels:
    def test_sequential_uses_widget_titles(self):
        scene = _scene("sequential", ["a", "b"])
        labels = generate_scene_step_labels(scene, {"a": "Alpha"})
        assert labels == ["Alpha", "Widget b"]

    def test_overview_and_exit(self):
        scene = _scene("sequential", ["a"], overview=True, exit=True)
        labels = generate_scene_step_labels(scene, {"a": "Alpha"})
        assert labels == ["Overview", "Alpha", "Exit"]

    def test_all_at_once_uses_scene_title(self):
        scene = _scene("all-at-once", ["a", "b"], title="Intro")
        assert generate_scene_step_labels(scene, {}) == ["Intro"]

    def test_all_at_once_without_title(self):
        assert generate_scene_step_labels(_scene("all-at-once", ["a"]), {}) == ["Enter"]

    def test_empty_scene_gets_one_label(self):
        assert generate_scene_step_labels(_scene(title="Blank"), {}) == ["Blank"]
        assert generate_scene_step_labels(_scene(), {}) == ["Scene"]

    def test_exit_only_scene(self):
        assert generate_scene_step_labels(_scene(exit=True), {}) == ["Exit"]

    @pytest.mark.parametrize("reveal_mode", ["all-at-once", "sequential"])
    @pytest.mark.parametrize("widgets", [[], ["a"], ["a", "b", "c"]])
    @pytest.mark.parametrize("overview", [False, True])
    @pytest.mark.parametrize("exit", [False, True])
    def test_label_count_matches_steps(self, reveal_mode, widgets, overview, exit):
        scene = _scene(reveal_mode, widgets, overview, exit)
        assert len(generate_scene_step_labels(scene, {})) == calc_scene_steps(scene)


# ── Menu navigation ─────────────────────────────────────────────────────

class TestSceneForWidget:
    def test_finds_first_activating_scene(self):
        scenes = [
            Scene(activated_by_widget_ids=[]),
            Scene(activated_by_widget_ids=["menu-1"]),
            Scene(activated_by_widget_ids=["menu-1", "menu-2"]),
        ]
        assert scene_for_widget(scenes, "menu-1") == 1
        assert scene_for_widget(scenes, "menu-2") == 2

    def test_unknown_widget(self):
        assert scene_for_widget([Scene()], "nope") is None


# ── Slides and default scenes ───────────────────────────────────────────

class TestDefaultScene:
    def _slide(self) -> Slide:
        return Slide(
            id="s1",
            title="Welcome",
            elements=[
                SlideElement(id="late", content="Late", animation=AnimationConfig(delay=0.5)),
                SlideElement(id="early", content="Early", animation=AnimationConfig(delay=0.1)),
                SlideElement(id="static", content="Static", animation=AnimationConfig(type="none")),
            ],
        )

    def test_reveals_in_delay_order(self):
        scene = default_scene(self._slide())
        assert scene.widget_state_layer.animated_widget_ids == ["early", "late"]
        assert scene.widget_state_layer.enter_behavior.reveal_mode == "sequential"
        assert calc_scene_steps(scene) == 2

    def test_identity(self):
        scene = default_scene(self._slide())
        assert scene.id == "s1-scene-0"
        assert scene.title == "Welcome"
        assert scene.order == 0

    def test_initial_states(self):
        layer = default_scene(self._slide()).widget_state_layer
        assert layer.initial_state_for("static").visible is True
        assert layer.initial_state_for("early").visible is False
        assert layer.initial_state_for("missing") is None

    def test_single_animated_element_is_all_at_once(self):
        slide = Slide(elements=[SlideElement(id="x")])
        scene = default_scene(slide)
        assert scene.widget_state_layer.enter_behavior.reveal_mode == "all-at-once"
        assert scene.title == "Main"

    def test_no_elements(self):
        scene = default_scene(Slide())
        assert scene.widget_state_layer.animated_widget_ids == []
        assert calc_scene_steps(scene) == 1

    def test_leaves_trigger_mode_to_the_slide(self):
        scene = default_scene(Slide(trigger_mode="click"))
        assert scene.trigger_mode is None
        assert scene.widget_state_layer.enter_behavior.trigger_mode is None


class TestSlide:
    def test_ensure_scenes_sorts_by_order(self):
        slide = Slide(scenes=[Scene(id="b", order=1), Scene(id="a", order=0)])
        assert [s.id for s in slide.ensure_scenes()] == ["a", "b"]

    def test_ensure_scenes_defaults(self):
        slide = Slide(id="s9")
        scenes = slide.ensure_scenes()
        assert len(scenes) == 1
        assert scenes[0].id == "s9-scene-0"

    def test_widget_titles_skip_untitled(self):
        slide = Slide(elements=[
            SlideElement(id="a", title="Alpha"),
            SlideElement(id="b"),
        ])
        assert slide.widget_titles() == {"a": "Alpha"}

    def test_get_element(self):
        slide = Slide(elements=[SlideElement(id="a")])
        assert slide.get_element("a").id == "a"
        assert slide.get_element("z") is None

    def test_default_duration(self):
        assert Slide().duration == 5000


# ── Presentation ────────────────────────────────────────────────────────

class TestPresentation:
    def _presentation(self) -> Presentation:
        return Presentation(
            id="p1",
            slides=[
                Slide(id="a", duration=1000),
                Slide(id="b", duration=2500, trigger_mode="click"),
                Slide(id="c", duration=500, trigger_mode="auto"),
            ],
        )

    def test_total_duration(self):
        assert self._presentation().total_duration == 4000

    def test_cumulative_durations(self):
        assert self._presentation().cumulative_durations() == [1000, 3500, 4000]

    def test_empty(self):
        pres = Presentation()
        assert pres.total_duration == 0
        assert pres.cumulative_durations() == []

    def test_lookup(self):
        pres = self._presentation()
        assert pres.get("b").duration == 2500
        assert pres.get("zzz") is None
        assert pres.index_of("c") == 2
        assert pres.index_of("zzz") is None

    def test_overrides_are_sparse(self):
        # slide c matches the default and is not recorded
        assert self._presentation().slide_trigger_overrides() == {1: "click"}

    def test_summary(self):
        summary = self._presentation().to_summary()
        assert len(summary) == 3
        assert summary[0]["title"] == "(untitled)"
        assert summary[0]["trigger_mode"] == "inherit"
        assert summary[1]["trigger_mode"] == "click"
        assert summary[2]["scene_count"] == 1

    def test_json_round_trip(self):
        pres = self._presentation()
        assert Presentation.model_validate_json(pres.model_dump_json()) == pres
