"""Streaming speech-to-text backend powered by ``google-cloud-speech``."""

from __future__ import annotations

import importlib
import queue
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Iterator

from babel_io.errors import AudioSendError, RecognitionError, StreamLimitExceededError
from babel_io.models import (
    STREAM_LIMIT_CODES,
    RecognitionAlternative,
    RecognitionResponse,
    RecognitionResult,
    RecognitionStatus,
)

from .interfaces import RecognitionStream, SpeechRecognizer


def _load_vendor_module(name: str) -> Any:
    try:
        return importlib.import_module(name)
    except ImportError as exc:  # pragma: no cover - import guard
        raise RuntimeError(
            f"Google Cloud backend unavailable ({name}). Install extras with: pip install 'babel-io[google]'"
        ) from exc


def _build_client(client_cls: Any, credentials_file: str | Path | None) -> Any:
    if credentials_file:
        return client_cls.from_service_account_file(str(credentials_file))
    return client_cls()


def _status_code(exc: BaseException) -> int | None:
    """Extract the numeric gRPC status code from a google.api_core error, if any."""
    value = getattr(getattr(exc, "grpc_status_code", None), "value", None)
    if isinstance(value, tuple) and value and isinstance(value[0], int):
        return value[0]
    return None


def _convert_response(response: Any) -> RecognitionResponse:
    results = [
        RecognitionResult(
            alternatives=[
                RecognitionAlternative(transcript=alt.transcript, confidence=float(alt.confidence))
                for alt in result.alternatives
            ],
            is_final=bool(result.is_final),
            stability=float(getattr(result, "stability", 0.0)),
        )
        for result in response.results
    ]
    error = getattr(response, "error", None)
    # An unset google.rpc.Status still exists on the message with code 0.
    status = RecognitionStatus(code=int(error.code), message=str(error.message)) if error and error.code else None
    return RecognitionResponse(results=results, error=status)


class GoogleRecognitionStream(RecognitionStream):
    """Adapts the request-iterator/response-iterator gRPC API to send/receive calls."""

    def __init__(self, client: Any, speech_module: Any, streaming_config: Any) -> None:
        self._speech = speech_module
        self._requests: queue.Queue[bytes | None] = queue.Queue()
        self._send_closed = False
        self._responses = iter(
            client.streaming_recognize(config=streaming_config, requests=self._request_iterator())
        )

    def _request_iterator(self) -> Iterator[Any]:
        while True:
            chunk = self._requests.get()
            if chunk is None:
                return
            yield self._speech.StreamingRecognizeRequest(audio_content=chunk)

    def send_audio(self, chunk: bytes) -> None:
        if self._send_closed:
            raise AudioSendError("Cannot send audio after the stream was closed for sending")
        self._requests.put(bytes(chunk))

    def close_send(self) -> None:
        if self._send_closed:
            return
        self._send_closed = True
        self._requests.put(None)

    def receive(self) -> RecognitionResponse | None:
        try:
            response = next(self._responses)
        except StopIteration:
            return None
        except Exception as exc:  # noqa: BLE001
            code = _status_code(exc)
            error_cls = StreamLimitExceededError if code in STREAM_LIMIT_CODES else RecognitionError
            raise error_cls(f"Cannot stream results: {exc}", code=code) from exc
        return _convert_response(response)

    def close(self) -> None:
        self.close_send()
        cancel = getattr(self._responses, "cancel", None)
        if callable(cancel):
            cancel()


@dataclass(slots=True)
class GoogleStreamingRecognizer(SpeechRecognizer):
    """Open LINEAR16 streaming sessions against Google Cloud Speech-to-Text."""

    language_code: str = "en-US"
    sample_rate_hertz: int = 16_000
    enable_automatic_punctuation: bool = True
    interim_results: bool = False
    credentials_file: str | Path | None = None

    def __post_init__(self) -> None:
        self._speech = _load_vendor_module("google.cloud.speech")
        self._client = _build_client(self._speech.SpeechClient, self.credentials_file)

    def open_stream(self) -> GoogleRecognitionStream:
        speech = self._speech
        config = speech.RecognitionConfig(
            encoding=speech.RecognitionConfig.AudioEncoding.LINEAR16,
            sample_rate_hertz=self.sample_rate_hertz,
            language_code=self.language_code,
            enable_automatic_punctuation=self.enable_automatic_punctuation,
        )
        streaming_config = speech.StreamingRecognitionConfig(config=config, interim_results=self.interim_results)
        return GoogleRecognitionStream(self._client, speech, streaming_config)
