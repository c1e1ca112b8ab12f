"""Contracts for speech recognition, translation and synthesis backends."""

from typing import Protocol

from babel_io.models import RecognitionResponse


class RecognitionStream(Protocol):
    """One bidirectional streaming recognition session."""

    def send_audio(self, chunk: bytes) -> None:
        """Queue a chunk of raw audio for recognition."""

    def close_send(self) -> None:
        """Signal that no more audio will be sent."""

    def receive(self) -> RecognitionResponse | None:
        """Block for the next response; ``None`` once the stream has ended."""

    def close(self) -> None:
        """Release the session, unblocking any pending ``receive``."""


class SpeechRecognizer(Protocol):
    """Opens streaming recognition sessions."""

    def open_stream(self) -> RecognitionStream:
        """Start a session and send its initial configuration."""


class Translator(Protocol):
    """Translates text into a target language."""

    def translate(self, text: str, target_language: str) -> str:
        """Return ``text`` translated into ``target_language``."""


class SpeechSynthesizer(Protocol):
    """Converts text into encoded audio."""

    def synthesize(self, text: str) -> bytes:
        """Return encoded audio bytes for the given text."""
