"""SceneKit MCP Server - presentation playback tools over one presenter session."""

from mcp.server.fastmcp import FastMCP, Context
import json
import logging
import os
from contextlib import asynccontextmanager
from typing import AsyncIterator, Dict, Any, Optional

from pydantic import ValidationError

# SDK imports
from scenekit.core.scenes import Presentation
from scenekit.core.presenter import Presenter
from scenekit.core.voice import SlideSync, SyncAdjustment, WordTimestamp
from scenekit.intake.audio import AudioTranscriber
from scenekit.intake.sync import calculate_sync

# Configure logging
logging.basicConfig(level=os.environ.get("SCENEKIT_LOG_LEVEL", "INFO").upper(),
                    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger("SceneKit")

DEFAULT_WHISPER_MODEL = os.environ.get("SCENEKIT_WHISPER_MODEL", "base")
TRIGGER_MODES = ("auto", "click")


# ── Session ─────────────────────────────────────────────────────────────

_presenter: Optional[Presenter] = None
_slide_syncs: dict[str, SlideSync] = {}
_audio_transcriber: Optional[AudioTranscriber] = None


def _require_presenter() -> Presenter:
    if _presenter is None:
        raise RuntimeError("No presentation loaded. Use load_presentation first.")
    return _presenter


def _get_transcriber() -> AudioTranscriber:
    global _audio_transcriber
    if _audio_transcriber is None:
        _audio_transcriber = AudioTranscriber(model_size=DEFAULT_WHISPER_MODEL)
    return _audio_transcriber


def _navigate(action) -> str:
    try:
        presenter = _require_presenter()
    except RuntimeError as e:
        return f"Error: {e}"
    action(presenter)
    return json.dumps(presenter.snapshot(), indent=2)


# ── Server Setup ────────────────────────────────────────────────────────

@asynccontextmanager
async def server_lifespan(server: FastMCP) -> AsyncIterator[Dict[str, Any]]:
    try:
        logger.info("SceneKit server starting up")
        yield {}
    finally:
        logger.info("SceneKit server shut down")


mcp = FastMCP("SceneKit", lifespan=server_lifespan)


# ═══════════════════════════════════════════════════════════════════════
# PRESENTATION TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def load_presentation(ctx: Context, presentation_json: str) -> str:
    """Load a presentation and rewind playback to the first slide.

    Parameters:
    - presentation_json: JSON object with slides, scenes and trigger_mode
    """
    global _presenter, _slide_syncs
    try:
        presentation = Presentation.model_validate_json(presentation_json)
    except ValidationError as e:
        return f"Error: Invalid presentation: {e}"

    _presenter = Presenter(presentation)
    _slide_syncs = {}
    return json.dumps({
        "status": "loaded",
        "slide_count": len(presentation.slides),
        "total_duration_ms": presentation.total_duration,
        "slides": presentation.to_summary(),
    }, indent=2)


@mcp.tool()
def get_position(ctx: Context) -> str:
    """Get the current slide, scene and step with labels and trigger mode."""
    return _navigate(lambda p: None)


# ═══════════════════════════════════════════════════════════════════════
# NAVIGATION TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def advance(ctx: Context) -> str:
    """Advance one step (crosses into the next scene or slide when needed)."""
    return _navigate(lambda p: p.advance())


@mcp.tool()
def retreat(ctx: Context) -> str:
    """Go back one step (crosses into the previous scene or slide when needed)."""
    return _navigate(lambda p: p.retreat())


@mcp.tool()
def advance_scene(ctx: Context) -> str:
    """Skip to the next scene, or the next slide after the last scene."""
    return _navigate(lambda p: p.advance_scene())


@mcp.tool()
def retreat_scene(ctx: Context) -> str:
    """Go back to the previous scene, or the previous slide's first scene."""
    return _navigate(lambda p: p.retreat_scene())


@mcp.tool()
def go_to_slide(ctx: Context, index: int) -> str:
    """Jump to a slide by zero-based index (clamped to the valid range).

    Parameters:
    - index: Target slide index
    """
    return _navigate(lambda p: p.go_to_slide(index))


@mcp.tool()
def go_to_scene(ctx: Context, index: int) -> str:
    """Jump to a scene of the current slide by zero-based index (clamped).

    Parameters:
    - index: Target scene index
    """
    return _navigate(lambda p: p.go_to_scene(index))


@mcp.tool()
def go_to_step(ctx: Context, step: int) -> str:
    """Jump to a step of the current scene (clamped).

    Parameters:
    - step: Target step index
    """
    return _navigate(lambda p: p.go_to_step(step))


@mcp.tool()
def press_key(ctx: Context, key: str) -> str:
    """Send a keyboard key: ArrowRight or space advances, ArrowLeft retreats, p toggles play.

    Parameters:
    - key: Key name as reported by a browser KeyboardEvent
    """
    return _navigate(lambda p: p.handle_key(key))


# ═══════════════════════════════════════════════════════════════════════
# TRIGGER MODE TOOLS
# ═══════════════════════════════════════════════════════════════════════

@mcp.tool()
def set_trigger_mode(ctx: Context, mode: str, slide_index: Optional[int] = None) -> str:
    """Set the presentation default trigger mode, or override it for one slide.

    Parameters:
    - mode: "auto" or "click"
    - slide_index: Slide to override (omit to change the presentation default)
    """
    if mode not in TRIGGER_MODES:
        return f"Error: Unknown trigger mode '{mode}'. Use 'auto' or 'click'."

    def apply(p: Presenter):
        if slide_index is None:
            p.state.set_presentation_trigger_mode(mode)
        else:
            p.state.set_slide_trigger_mode(slide_index, mode)

    return _navigate(apply)


@mcp.tool()
def clear_trigger_mode(ctx: Context, slide_index: int) -> str:
    """Remove a slide's trigger mode override so it follows the presentation default.

    Parameters:
    - slide_index: Slide whose override should be removed
    """
    return _navigate(lambda p: p.state.clear_slide_trigger_mode(slide_index))


@mcp.tool()
def get_step_labels(ctx: Context) -> str:
    """List the step labels of the current scene."""
    try:
        presenter = _require_presenter()
    except RuntimeError as e:
        return f"Error: {e}"
    return json.dumps(presenter.step_labels(), indent=2)


# ═══════════════════════════════════════════════════════════════════════
# VOICE-OVER SYNC TOOLS
# ═══════════════════════════════════════════════════════════════════════

def _sync_slide(slide_id: str, timestamps: list[WordTimestamp],
                adjustments: list[SyncAdjustment]) -> str:
    presenter = _require_presenter()
    slide = presenter.presentation.get(slide_id)
    if not slide:
        return f"Error: Slide '{slide_id}' not found."

    sync = calculate_sync(slide, timestamps, adjustments)
    _slide_syncs[slide_id] = sync
    return sync.model_dump_json(indent=2)


@mcp.tool()
def calculate_slide_sync(ctx: Context, slide_id: str, timestamps_json: str,
                         adjustments_json: str = "[]") -> str:
    """Align a slide's elements to voice-over word timestamps.

    Parameters:
    - slide_id: The slide to sync
    - timestamps_json: JSON list of {word, start, end} in seconds
    - adjustments_json: JSON list of manual adjustments; locked ones are kept
    """
    try:
        timestamps = [WordTimestamp.model_validate(w) for w in json.loads(timestamps_json)]
        adjustments = [SyncAdjustment.model_validate(a) for a in json.loads(adjustments_json)]
        return _sync_slide(slide_id, timestamps, adjustments)
    except (ValidationError, json.JSONDecodeError) as e:
        return f"Error: Invalid sync input: {e}"
    except RuntimeError as e:
        return f"Error: {e}"


@mcp.tool()
def transcribe_voiceover(ctx: Context, slide_id: str, file_path: str) -> str:
    """Transcribe a slide's voice-over file and align its elements to the words.

    Parameters:
    - slide_id: The slide the audio belongs to
    - file_path: Path to the audio file (wav, mp3, m4a, etc.)
    """
    try:
        words = _get_transcriber().transcribe_words(file_path)
        return _sync_slide(slide_id, words, [])
    except FileNotFoundError as e:
        return f"Error: {e}"
    except RuntimeError as e:
        return f"Error: {e}"
    except Exception as e:
        logger.error(f"Transcription error: {str(e)}")
        return f"Error during transcription: {str(e)}"


@mcp.tool()
def get_slide_sync(ctx: Context, slide_id: str) -> str:
    """Get the last computed sync points for a slide.

    Parameters:
    - slide_id: The slide to look up
    """
    sync = _slide_syncs.get(slide_id)
    if not sync:
        return f"No sync computed for slide '{slide_id}'. Use calculate_slide_sync first."
    return sync.model_dump_json(indent=2)


# ═══════════════════════════════════════════════════════════════════════
# MCP PROMPT
# ═══════════════════════════════════════════════════════════════════════

@mcp.prompt()
def presentation_playback_workflow() -> str:
    """Recommended workflow for walking through a presentation"""
    return """You are helping the user rehearse a scene-based presentation. Follow this workflow:

1. **Load**: Use load_presentation() with the presentation JSON.

2. **Trigger modes**: Use set_trigger_mode() to choose 'auto' (timed) or 'click'
   for the whole presentation or single slides; clear_trigger_mode() reverts a slide.

3. **Walk through**: Use advance() and retreat() to move step by step.
   - advance_scene() / retreat_scene() skip whole scenes
   - go_to_slide(), go_to_scene(), go_to_step() jump directly
   - get_position() and get_step_labels() show where you are

4. **Voice-over**: Use calculate_slide_sync() with word timestamps, or
   transcribe_voiceover() with an audio file, to time element reveals.

Tips:
- Out-of-range targets are clamped, never rejected
- Going back across a slide boundary lands on the first scene of that slide
"""


# ── Main ────────────────────────────────────────────────────────────────

def main():
    """Run the MCP server"""
    mcp.run()


if __name__ == "__main__":
    main()
