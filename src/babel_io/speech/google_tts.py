"""Text-to-speech backend powered by ``google-cloud-texttospeech``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from babel_io.errors import SynthesisError

from .google_recognizer import _build_client, _load_vendor_module
from .interfaces import SpeechSynthesizer


@dataclass(slots=True)
class GoogleSpeechSynthesizer(SpeechSynthesizer):
    """Synthesize speech with a fixed voice selection and audio encoding."""

    language_code: str = "pt-BR"
    voice_gender: str = "NEUTRAL"
    audio_encoding: str = "MP3"
    credentials_file: str | Path | None = None

    def __post_init__(self) -> None:
        tts = _load_vendor_module("google.cloud.texttospeech")
        try:
            gender = getattr(tts.SsmlVoiceGender, self.voice_gender.upper())
            encoding = getattr(tts.AudioEncoding, self.audio_encoding.upper())
        except AttributeError as exc:
            raise ValueError(
                f"Unsupported voice settings: gender={self.voice_gender!r} encoding={self.audio_encoding!r}"
            ) from exc

        self._tts = tts
        self._voice = tts.VoiceSelectionParams(language_code=self.language_code, ssml_gender=gender)
        self._audio_config = tts.AudioConfig(audio_encoding=encoding)
        self._client = _build_client(tts.TextToSpeechClient, self.credentials_file)

    def synthesize(self, text: str) -> bytes:
        try:
            response = self._client.synthesize_speech(
                input=self._tts.SynthesisInput(text=text),
                voice=self._voice,
                audio_config=self._audio_config,
            )
        except Exception as exc:  # noqa: BLE001
            raise SynthesisError(f"Speech synthesis failed: {exc}") from exc
        return bytes(response.audio_content)
