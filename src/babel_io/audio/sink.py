"""Destinations for synthesized speech audio."""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class AudioSink(Protocol):
    """Interface for a synthesized-audio destination."""

    def write(self, audio: bytes) -> None:
        """Store one synthesized utterance."""


class FileAudioSink:
    """Overwrite a single file with every synthesized utterance (last write wins)."""

    def __init__(self, path: str | Path = "output.mp3") -> None:
        self._path = Path(path).expanduser()

    @property
    def path(self) -> Path:
        return self._path

    def write(self, audio: bytes) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        self._path.write_bytes(audio)
