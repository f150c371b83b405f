"""Tests for scenekit.intake.audio: word timestamps from transcripts and TTS alignment.

The faster-whisper model is replaced with a stub, no model download needed.
"""

from types import SimpleNamespace
from unittest.mock import MagicMock, patch

import pytest

from scenekit.core.voice import WordTimestamp
from scenekit.intake.audio import (
    AudioTranscriber,
    words_from_character_alignment,
    words_from_transcript,
)


@pytest.fixture
def transcriber():
    return AudioTranscriber(model_size="base")


@pytest.fixture
def audio_file(tmp_path):
    path = tmp_path / "voice.wav"
    path.write_bytes(b"RIFF")
    return path


def _fake_model():
    segments = [
        SimpleNamespace(
            start=0.0, end=1.2, text=" Hello world ",
            words=[
                SimpleNamespace(word=" Hello", start=0.0, end=0.5),
                SimpleNamespace(word=" world", start=0.6, end=1.2),
            ],
        ),
        SimpleNamespace(start=2.0, end=2.5, text=" Bye", words=None),
    ]
    model = MagicMock()
    model.transcribe.return_value = (iter(segments), SimpleNamespace(language="en", duration=2.5))
    return model


# ── Transcript flattening ───────────────────────────────────────────────

class TestWordsFromTranscript:
    def test_flattens_segments(self):
        transcript = {"segments": [
            {"words": [{"word": " Hi", "start": 0.0, "end": 0.3}]},
            {"words": [{"word": " there", "start": 0.4, "end": 0.8}]},
        ]}
        assert words_from_transcript(transcript) == [
            WordTimestamp(word="Hi", start=0.0, end=0.3),
            WordTimestamp(word="there", start=0.4, end=0.8),
        ]

    def test_skips_blank_words(self):
        transcript = {"segments": [{"words": [{"word": "  ", "start": 0.0, "end": 0.1}]}]}
        assert words_from_transcript(transcript) == []

    def test_empty(self):
        assert words_from_transcript({}) == []
        assert words_from_transcript({"segments": [{"text": "no words"}]}) == []


# ── TTS character alignment ─────────────────────────────────────────────

class TestCharacterAlignment:
    def test_groups_on_whitespace(self):
        alignment = {
            "characters": list("Hi yo"),
            "character_start_times_seconds": [0.0, 0.1, 0.2, 0.3, 0.4],
            "character_end_times_seconds": [0.1, 0.2, 0.3, 0.4, 0.5],
        }
        assert words_from_character_alignment(alignment) == [
            WordTimestamp(word="Hi", start=0.0, end=0.2),
            WordTimestamp(word="yo", start=0.3, end=0.5),
        ]

    def test_collapses_repeated_spaces(self):
        alignment = {
            "characters": [" ", "a", " ", " ", "b", " "],
            "character_start_times_seconds": [0, 1, 2, 3, 4, 5],
            "character_end_times_seconds": [1, 2, 3, 4, 5, 6],
        }
        result = words_from_character_alignment(alignment)
        assert [w.word for w in result] == ["a", "b"]
        assert result[1].start == 4
        assert result[1].end == 5

    def test_length_mismatch(self):
        alignment = {
            "characters": ["a", "b"],
            "character_start_times_seconds": [0.0],
            "character_end_times_seconds": [0.1, 0.2],
        }
        with pytest.raises(ValueError):
            words_from_character_alignment(alignment)

    def test_empty(self):
        assert words_from_character_alignment({}) == []


# ── AudioTranscriber ────────────────────────────────────────────────────

class TestAudioTranscriber:
    def test_missing_file(self, transcriber, tmp_path):
        with pytest.raises(FileNotFoundError):
            transcriber.transcribe(tmp_path / "missing.wav")

    def test_model_is_lazy(self, transcriber):
        assert transcriber._model is None

    def test_transcribe(self, transcriber, audio_file):
        with patch.object(transcriber, "_get_model", return_value=_fake_model()):
            result = transcriber.transcribe(audio_file)
        assert result["language"] == "en"
        assert result["duration"] == 2.5
        assert len(result["segments"]) == 2
        assert result["segments"][0]["text"] == "Hello world"
        assert result["segments"][1]["words"] == []

    def test_transcribe_words(self, transcriber, audio_file):
        with patch.object(transcriber, "_get_model", return_value=_fake_model()):
            result = transcriber.transcribe_words(audio_file)
        assert [w.word for w in result] == ["Hello", "world"]
        assert result[1].start == 0.6

    def test_model_size_switch_drops_model(self, transcriber, audio_file):
        transcriber._model = object()
        with patch.object(transcriber, "_get_model", return_value=_fake_model()):
            transcriber.transcribe(audio_file, model_size="small")
        assert transcriber.model_size == "small"
        assert transcriber._model is None

    def test_get_model_loads_once(self, transcriber):
        fake_module = MagicMock()
        with patch.dict("sys.modules", {"faster_whisper": fake_module}):
            first = transcriber._get_model()
            second = transcriber._get_model()
        assert first is second
        fake_module.WhisperModel.assert_called_once_with("base", device="cpu", compute_type="int8")

    def test_get_model_uses_configured_device(self):
        transcriber = AudioTranscriber(model_size="small", device="cuda", compute_type="float16")
        fake_module = MagicMock()
        with patch.dict("sys.modules", {"faster_whisper": fake_module}):
            transcriber._get_model()
        fake_module.WhisperModel.assert_called_once_with("small", device="cuda", compute_type="float16")
