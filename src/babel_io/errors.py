"""Exception types raised by backends and the translation pipeline."""

from __future__ import annotations


class BabelIOError(RuntimeError):
    """Base class for babel-io failures."""


class AudioSendError(BabelIOError):
    """Raised when an audio chunk cannot be delivered to the recognition session."""


class RecognitionError(BabelIOError):
    """Raised when the recognition backend reports an error or the stream breaks."""

    def __init__(self, message: str, *, code: int | None = None) -> None:
        super().__init__(message)
        self.code = code


class StreamLimitExceededError(RecognitionError):
    """Raised when a streaming session runs past the backend's time limit."""


class TranslationError(BabelIOError):
    """Raised when the translation backend rejects or fails a request."""


class SynthesisError(BabelIOError):
    """Raised when speech synthesis or writing the synthesized audio fails."""


class PipelineError(BabelIOError):
    """Raised by the pipeline coordinator when a stage fails."""

    def __init__(self, stage: str, message: str) -> None:
        super().__init__(f"{stage}: {message}")
        self.stage = stage


class PipelineStopped(PipelineError):
    """Raised when the pipeline was asked to stop before input was exhausted."""

    def __init__(self) -> None:
        super().__init__("pipeline", "stopped before input was exhausted")
