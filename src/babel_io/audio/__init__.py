"""Audio input and output boundaries."""

from .sink import AudioSink, FileAudioSink
from .source import AudioSource, PipeAudioSource, StreamAudioSource, open_stdin_source

__all__ = [
    "AudioSink",
    "AudioSource",
    "FileAudioSink",
    "PipeAudioSource",
    "StreamAudioSource",
    "open_stdin_source",
]
