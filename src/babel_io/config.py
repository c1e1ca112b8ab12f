"""Runtime configuration for babel-io."""

from __future__ import annotations

import re
from pathlib import Path

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

_LANGUAGE_TAG = re.compile(r"^[A-Za-z]{2,3}(?:-[A-Za-z0-9]{2,8})*$")


def validate_language_tag(value: str) -> str:
    """Return ``value`` stripped if it looks like a BCP-47 tag, else raise ``ValueError``."""
    tag = value.strip()
    if not _LANGUAGE_TAG.match(tag):
        raise ValueError(f"Invalid language tag: {value!r}")
    return tag


class Settings(BaseSettings):
    """Environment-driven runtime settings."""

    model_config = SettingsConfigDict(env_prefix="BABEL_IO_", env_file=".env", extra="ignore")

    app_name: str = "babel-io"
    log_level: str = "INFO"

    source_language: str = Field(default="en-US", description="Language spoken on the audio input.")
    target_language: str = Field(default="pt-BR", description="Language transcripts are translated into.")
    voice_language: str | None = Field(
        default=None,
        description="Language tag of the synthesized voice; defaults to the target language.",
    )
    translation_source_language: str | None = Field(
        default=None,
        description="Source language passed to the translator; unset means auto-detect.",
    )

    sample_rate_hertz: int = Field(default=16_000, gt=0)
    chunk_size: int = Field(default=1024, gt=0, description="Bytes read from the audio input per chunk.")
    max_read_errors: int = Field(default=3, ge=0, description="Consecutive input read errors tolerated.")
    enable_automatic_punctuation: bool = True
    interim_results: bool = Field(default=False, description="Ask the recognizer for non-final results.")
    forward_interim_results: bool = Field(
        default=True,
        description="Translate and speak non-final results when the recognizer returns them.",
    )

    output_path: Path = Path("output.mp3")
    audio_encoding: str = "MP3"
    voice_gender: str = "NEUTRAL"
    credentials_file: Path | None = Field(
        default=None,
        description="Service-account JSON used instead of application default credentials.",
    )

    @field_validator("source_language", "target_language")
    @classmethod
    def _check_language(cls, value: str) -> str:
        return validate_language_tag(value)

    @field_validator("voice_language", "translation_source_language")
    @classmethod
    def _check_optional_language(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        return validate_language_tag(value)

    @property
    def effective_voice_language(self) -> str:
        return self.voice_language or self.target_language


settings = Settings()
