"""Transient values passed between pipeline stages."""

from __future__ import annotations

from dataclasses import dataclass, field

# Status codes returned when a streaming session outlives the backend limit.
STREAM_LIMIT_CODES = frozenset({3, 11})


@dataclass(slots=True)
class RecognitionAlternative:
    """One candidate transcription with its confidence."""

    transcript: str
    confidence: float = 0.0


@dataclass(slots=True)
class RecognitionResult:
    """Alternatives recognized for one audio segment."""

    alternatives: list[RecognitionAlternative] = field(default_factory=list)
    is_final: bool = False
    stability: float = 0.0


@dataclass(slots=True)
class RecognitionStatus:
    """Error status reported by the recognition backend."""

    code: int
    message: str = ""

    @property
    def stream_limit_exceeded(self) -> bool:
        return self.code in STREAM_LIMIT_CODES


@dataclass(slots=True)
class RecognitionResponse:
    """One message received from a streaming recognition session."""

    results: list[RecognitionResult] = field(default_factory=list)
    error: RecognitionStatus | None = None


@dataclass(slots=True)
class PipelineReport:
    """Counters collected over one pipeline run."""

    chunks_sent: int = 0
    read_errors: int = 0
    alternatives_forwarded: int = 0
    alternatives_skipped: int = 0
    translations: int = 0
    syntheses: int = 0
