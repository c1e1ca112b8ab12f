"""Speech recognition, translation and synthesis module boundaries."""

from .interfaces import RecognitionStream, SpeechRecognizer, SpeechSynthesizer, Translator

__all__ = [
    "RecognitionStream",
    "SpeechRecognizer",
    "SpeechSynthesizer",
    "Translator",
]
