"""Voice-over timing models: word timestamps and slide sync points."""

from typing import Optional
from pydantic import BaseModel, Field


class WordTimestamp(BaseModel):
    """One spoken word. Times are seconds from the start of the slide's audio."""
    word: str
    start: float
    end: float


class SyncPoint(BaseModel):
    """When an element's reveal should fire, aligned to the voice-over."""
    element_id: str
    slide_id: str
    timestamp: float  # seconds
    duration: float  # seconds of element animation
    trigger_word: Optional[str] = None
    locked: bool = False


class SlideSync(BaseModel):
    """Sync points for one slide, ordered as the elements were processed."""
    slide_id: str
    start_time: float = 0.0
    end_time: float = 0.0
    element_sync_points: list[SyncPoint] = Field(default_factory=list)

    def get(self, element_id: str) -> Optional[SyncPoint]:
        for p in self.element_sync_points:
            if p.element_id == element_id:
                return p
        return None


class SyncAdjustment(BaseModel):
    """A manual timing change. Locked adjustments survive re-syncing."""
    element_id: str
    slide_id: str
    adjusted_timestamp: float
    locked: bool = False
