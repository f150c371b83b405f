"""Presentation model: ordered slides plus presentation-wide playback defaults."""

from itertools import accumulate
from typing import Optional
from pydantic import BaseModel, Field

from .behavior import TriggerMode
from .slide import Slide


class Presentation(BaseModel):
    """Ordered collection of slides.

    trigger_mode is the presentation-level default; slides that carry their
    own trigger_mode override it. full_audio_url marks a single voice-over
    track that drives playback time instead of the timer.
    """
    id: str = ""
    title: str = ""
    slides: list[Slide] = Field(default_factory=list)
    trigger_mode: TriggerMode = "auto"
    full_audio_url: Optional[str] = None

    @property
    def total_duration(self) -> int:
        """Sum of slide durations in milliseconds."""
        return sum(s.duration for s in self.slides)

    def cumulative_durations(self) -> list[int]:
        return list(accumulate(s.duration for s in self.slides))

    def get(self, slide_id: str) -> Optional[Slide]:
        for s in self.slides:
            if s.id == slide_id:
                return s
        return None

    def index_of(self, slide_id: str) -> Optional[int]:
        for i, s in enumerate(self.slides):
            if s.id == slide_id:
                return i
        return None

    def slide_trigger_overrides(self) -> dict[int, TriggerMode]:
        """Sparse map of slides whose authored mode differs from the default."""
        return {
            i: s.trigger_mode
            for i, s in enumerate(self.slides)
            if s.trigger_mode is not None and s.trigger_mode != self.trigger_mode
        }

    def to_summary(self) -> list[dict]:
        return [
            {
                "id": s.id,
                "index": i,
                "title": s.title or "(untitled)",
                "duration_ms": s.duration,
                "scene_count": len(s.ensure_scenes()),
                "trigger_mode": s.trigger_mode or "inherit",
            }
            for i, s in enumerate(self.slides)
        ]
