"""Voice-over to slide element alignment.

Greedy single pass over the word timestamps with a cursor that only moves
forward. Each element, in priority order, takes the first word at or after
the cursor that contains one of its keywords. The cursor moves to that
word, not past it. Elements with no match get a deterministic stagger.
"""

import logging
import re
from typing import Iterable, Mapping

from ..core.scenes import Presentation, Slide, SlideElement
from ..core.voice import SlideSync, SyncAdjustment, SyncPoint, WordTimestamp

logger = logging.getLogger("SceneKit.intake.sync")

ANTICIPATION_OFFSET = 0.2  # reveal leads the spoken word
FALLBACK_CURSOR_STEP = 0.5
FALLBACK_EMITTED_STEP = 0.3
END_PADDING = 0.5

SYNC_MIN_KEYWORD_LENGTH = 4
ICON_MIN_KEYWORD_LENGTH = 3

STOP_WORDS = frozenset({
    "the", "a", "an", "is", "are", "was", "were", "be", "been",
    "being", "have", "has", "had", "do", "does", "did", "will", "would",
    "could", "should", "may", "might", "shall", "can", "to", "of", "in",
    "for", "on", "with", "at", "by", "from", "and", "or", "but", "not",
    "this", "that", "it", "its", "your", "my", "we", "our", "you", "they",
    "their",
})

_PUNCTUATION = re.compile(r"[^\w\s]")


def extract_keywords(text: str, min_length: int = SYNC_MIN_KEYWORD_LENGTH) -> list[str]:
    """Lowercased content words of text, punctuation stripped, stop words dropped."""
    words = _PUNCTUATION.sub("", text.lower()).split()
    return [w for w in words if len(w) >= min_length and w not in STOP_WORDS]


def extract_icon_keywords(text: str) -> list[str]:
    return extract_keywords(text, min_length=ICON_MIN_KEYWORD_LENGTH)


def order_elements_by_priority(elements: Iterable[SlideElement]) -> list[SlideElement]:
    """Text elements first, original order kept within each group."""
    return sorted(elements, key=lambda el: 0 if el.type == "text" else 1)


def find_keyword_in_timestamps(keywords: list[str], timestamps: list[WordTimestamp],
                               start_index: int) -> int:
    """Index of the first word at or after start_index containing a keyword, or -1."""
    if not keywords:
        return -1
    lowered = [kw.lower() for kw in keywords]
    for i in range(start_index, len(timestamps)):
        word = timestamps[i].word.lower()
        if any(kw in word for kw in lowered):
            return i
    return -1


def calculate_sync(slide: Slide, timestamps: list[WordTimestamp],
                   adjustments: Iterable[SyncAdjustment] = ()) -> SlideSync:
    """Compute reveal times for every element of a slide.

    Matched elements fire ANTICIPATION_OFFSET seconds before their word
    (never below 0). Unmatched elements fire at
    cursor * 0.5 + emitted * 0.3. The slide ends 0.5s after the last word,
    or after its authored duration when there is no voice-over.
    """
    points: list[SyncPoint] = []
    cursor = 0

    for element in order_elements_by_priority(slide.elements):
        keywords = extract_keywords(element.content)
        match = find_keyword_in_timestamps(keywords, timestamps, cursor)

        if match != -1:
            word = timestamps[match]
            points.append(SyncPoint(
                element_id=element.id,
                slide_id=slide.id,
                timestamp=max(0.0, word.start - ANTICIPATION_OFFSET),
                duration=element.animation.duration,
                trigger_word=word.word,
            ))
            cursor = match
        else:
            logger.debug(f"No keyword match for element {element.id} on slide {slide.id}")
            points.append(SyncPoint(
                element_id=element.id,
                slide_id=slide.id,
                timestamp=cursor * FALLBACK_CURSOR_STEP + len(points) * FALLBACK_EMITTED_STEP,
                duration=element.animation.duration,
            ))

    if timestamps:
        end_time = timestamps[-1].end + END_PADDING
    else:
        end_time = slide.duration / 1000

    sync = SlideSync(
        slide_id=slide.id,
        start_time=0.0,
        end_time=end_time,
        element_sync_points=points,
    )
    return apply_adjustments(sync, adjustments)


def apply_adjustments(sync: SlideSync, adjustments: Iterable[SyncAdjustment]) -> SlideSync:
    """Overlay locked manual adjustments. Unlocked ones do not survive re-syncing."""
    locked = {
        a.element_id: a for a in adjustments
        if a.locked and a.slide_id == sync.slide_id
    }
    if not locked:
        return sync

    points = []
    for point in sync.element_sync_points:
        adjustment = locked.pop(point.element_id, None)
        if adjustment is None:
            points.append(point)
        else:
            points.append(point.model_copy(update={
                "timestamp": adjustment.adjusted_timestamp,
                "locked": True,
            }))
    for element_id in locked:
        logger.warning(f"Locked adjustment for unknown element {element_id} on slide {sync.slide_id}")

    return sync.model_copy(update={"element_sync_points": points})


def calculate_presentation_sync(presentation: Presentation,
                                timestamps_by_slide: Mapping[str, list[WordTimestamp]],
                                adjustments: Iterable[SyncAdjustment] = ()) -> dict[str, SlideSync]:
    """Sync every slide that has voice-over timestamps, keyed by slide id."""
    adjustments = list(adjustments)
    result: dict[str, SlideSync] = {}
    for slide in presentation.slides:
        if slide.id not in timestamps_by_slide:
            continue
        result[slide.id] = calculate_sync(
            slide,
            timestamps_by_slide[slide.id],
            [a for a in adjustments if a.slide_id == slide.id],
        )
    return result
