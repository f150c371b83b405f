"""Word-level timestamps for voice-over audio.

Either transcribed locally with faster-whisper or rebuilt from a TTS
provider's character alignment.
"""

import logging
from pathlib import Path
from typing import Optional

from ..core.voice import WordTimestamp

logger = logging.getLogger("SceneKit.intake.audio")


class AudioTranscriber:
    """Word-level voice-over transcription. The whisper model loads on first use."""

    def __init__(self, model_size: str = "base", device: str = "cpu", compute_type: str = "int8"):
        self.model_size = model_size
        self.device = device
        self.compute_type = compute_type
        self._model = None

    def _get_model(self):
        if self._model is not None:
            return self._model

        from faster_whisper import WhisperModel
        logger.info(f"Loading whisper '{self.model_size}' for voice-over timing "
                    f"({self.device}/{self.compute_type})")
        self._model = WhisperModel(self.model_size, device=self.device, compute_type=self.compute_type)
        return self._model

    def transcribe(self, audio_path: str | Path, model_size: Optional[str] = None) -> dict:
        """Transcribe an audio file.

        Returns:
            dict with keys: segments (list, each with a words list), language, duration
        """
        if not Path(audio_path).exists():
            raise FileNotFoundError(f"Audio file not found: {audio_path}")

        if model_size and model_size != self.model_size:
            self.model_size = model_size
            self._model = None

        model = self._get_model()
        segments_raw, info = model.transcribe(
            str(audio_path),
            word_timestamps=True,
            vad_filter=True,
        )

        segments = []
        for seg in segments_raw:
            segments.append({
                "start": seg.start,
                "end": seg.end,
                "text": seg.text.strip(),
                "words": [
                    {"word": w.word, "start": w.start, "end": w.end}
                    for w in (seg.words or [])
                ],
            })

        return {
            "segments": segments,
            "language": info.language,
            "duration": info.duration,
        }

    def transcribe_words(self, audio_path: str | Path) -> list[WordTimestamp]:
        return words_from_transcript(self.transcribe(audio_path))


def words_from_transcript(transcript: dict) -> list[WordTimestamp]:
    """Flatten a segment/word transcript into ordered word timestamps."""
    words: list[WordTimestamp] = []
    for seg in transcript.get("segments", []):
        for w in seg.get("words", []):
            text = w["word"].strip()
            if text:
                words.append(WordTimestamp(word=text, start=w["start"], end=w["end"]))
    return words


def words_from_character_alignment(alignment: dict) -> list[WordTimestamp]:
    """Group a TTS character alignment into words.

    Expects parallel lists: characters, character_start_times_seconds,
    character_end_times_seconds. Whitespace separates words.
    """
    chars = alignment.get("characters", [])
    starts = alignment.get("character_start_times_seconds", [])
    ends = alignment.get("character_end_times_seconds", [])
    if not (len(chars) == len(starts) == len(ends)):
        raise ValueError("Character alignment lists have different lengths")

    words: list[WordTimestamp] = []
    current = ""
    word_start = 0.0
    word_end = 0.0

    for ch, start, end in zip(chars, starts, ends):
        if ch.isspace():
            if current:
                words.append(WordTimestamp(word=current, start=word_start, end=word_end))
                current = ""
            continue
        if not current:
            word_start = start
        current += ch
        word_end = end

    if current:
        words.append(WordTimestamp(word=current, start=word_start, end=word_end))

    return words
