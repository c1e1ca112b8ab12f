"""Concurrent speech → translation → speech pipeline.

Four asyncio stages are connected by two unbounded queues::

    audio source -> [ingest] -> recognition stream -> [receive]
        -> alternatives queue -> [translate] -> text queue -> [speak] -> audio sink

Input exhaustion drains the pipeline stage by stage. Any stage failure cancels
the remaining stages and surfaces as :class:`PipelineError`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from rich.console import Console

from babel_io.audio import AudioSink, AudioSource
from babel_io.errors import (
    AudioSendError,
    PipelineError,
    PipelineStopped,
    RecognitionError,
    StreamLimitExceededError,
    SynthesisError,
)
from babel_io.models import PipelineReport, RecognitionAlternative, RecognitionResponse
from babel_io.speech import RecognitionStream, SpeechRecognizer, SpeechSynthesizer, Translator

# Marks the end of a queue's stream of values.
_END: Any = object()


class TranslationPipeline:
    """Run the ingest, receive, translate and speak stages until input is drained."""

    def __init__(
        self,
        source: AudioSource,
        recognizer: SpeechRecognizer,
        translator: Translator,
        synthesizer: SpeechSynthesizer,
        sink: AudioSink,
        *,
        target_language: str = "pt-BR",
        chunk_size: int = 1024,
        forward_interim_results: bool = True,
        max_read_errors: int = 3,
        console: Console | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        if chunk_size <= 0:
            raise ValueError("chunk_size must be positive")
        self._source = source
        self._recognizer = recognizer
        self._translator = translator
        self._synthesizer = synthesizer
        self._sink = sink
        self._target_language = target_language
        self._chunk_size = chunk_size
        self._forward_interim_results = forward_interim_results
        self._max_read_errors = max(0, max_read_errors)
        self._console = console or Console()
        self._logger = logger or logging.getLogger("babel_io.pipeline")

        self._report = PipelineReport()
        self._stop_requested = asyncio.Event()

    @property
    def report(self) -> PipelineReport:
        """Counters of the current or most recent run."""
        return self._report

    def stop(self) -> None:
        """Ask a running pipeline to cancel all stages."""
        self._logger.info("pipeline_stop_requested")
        self._stop_requested.set()

    async def run(self) -> PipelineReport:
        """Run all stages; return once every queued value has been spoken."""
        self._report = PipelineReport()
        self._stop_requested.clear()
        try:
            stream = await asyncio.to_thread(self._recognizer.open_stream)
        except Exception as exc:  # noqa: BLE001
            raise PipelineError("receive", f"Could not open recognition stream: {exc}") from exc

        alternatives: asyncio.Queue[RecognitionAlternative] = asyncio.Queue()
        texts: asyncio.Queue[str] = asyncio.Queue()
        ingest_task = asyncio.create_task(self._ingest(stream), name="ingest")
        receive_task = asyncio.create_task(self._receive(stream, alternatives), name="receive")
        stages = {
            ingest_task: "ingest",
            receive_task: "receive",
            asyncio.create_task(self._translate(alternatives, texts), name="translate"): "translate",
            asyncio.create_task(self._speak(texts), name="speak"): "speak",
        }
        stop_waiter = asyncio.create_task(self._stop_requested.wait(), name="stop-waiter")
        self._logger.info(
            "pipeline_started",
            extra={"target_language": self._target_language, "chunk_size": self._chunk_size},
        )

        try:
            pending = set(stages)
            while pending:
                done, _ = await asyncio.wait({*pending, stop_waiter}, return_when=asyncio.FIRST_COMPLETED)
                if stop_waiter in done:
                    raise PipelineStopped()
                for task in done:
                    pending.discard(task)
                    if task.cancelled():
                        continue
                    exc = task.exception()
                    if exc is not None:
                        stage = stages[task]
                        self._logger.error("stage_failed", extra={"stage": stage, "error": repr(exc)})
                        raise PipelineError(stage, str(exc)) from exc
                    if task is receive_task and ingest_task in pending:
                        self._logger.warning("recognition_stream_ended_before_input")
                        ingest_task.cancel()
        finally:
            stop_waiter.cancel()
            for task in stages:
                task.cancel()
            stream.close()
            await asyncio.gather(stop_waiter, *stages, return_exceptions=True)

        self._logger.info("pipeline_finished", extra={"report": self._report})
        return self._report

    async def _ingest(self, stream: RecognitionStream) -> None:
        consecutive_errors = 0
        while True:
            try:
                chunk = await self._source.read(self._chunk_size)
            except OSError as exc:
                consecutive_errors += 1
                self._report.read_errors += 1
                self._logger.warning(
                    "audio_read_failed",
                    extra={"error": str(exc), "consecutive_errors": consecutive_errors},
                )
                if consecutive_errors > self._max_read_errors:
                    raise
                continue
            consecutive_errors = 0

            if not chunk:
                stream.close_send()
                self._logger.info("audio_input_exhausted", extra={"chunks_sent": self._report.chunks_sent})
                return

            try:
                stream.send_audio(chunk)
            except AudioSendError:
                raise
            except Exception as exc:  # noqa: BLE001
                raise AudioSendError(f"Could not send audio: {exc}") from exc
            self._report.chunks_sent += 1

    async def _receive(self, stream: RecognitionStream, alternatives: asyncio.Queue) -> None:
        while True:
            try:
                response = await asyncio.to_thread(stream.receive)
            except StreamLimitExceededError:
                self._warn_stream_limit()
                raise

            if response is None:
                self._logger.info("recognition_stream_ended")
                alternatives.put_nowait(_END)
                return

            self._check_response_error(response)
            for result in response.results:
                if not result.is_final and not self._forward_interim_results:
                    self._report.alternatives_skipped += len(result.alternatives)
                    self._logger.debug("interim_result_skipped", extra={"stability": result.stability})
                    continue
                for alternative in result.alternatives:
                    self._emit("Transcript alternative", alternative.transcript)
                    alternatives.put_nowait(alternative)
                    self._report.alternatives_forwarded += 1

    async def _translate(self, alternatives: asyncio.Queue, texts: asyncio.Queue) -> None:
        while True:
            alternative = await alternatives.get()
            if alternative is _END:
                texts.put_nowait(_END)
                return

            if not alternative.transcript.strip():
                self._logger.debug("empty_transcript_skipped")
                continue

            translated = await asyncio.to_thread(
                self._translator.translate, alternative.transcript, self._target_language
            )
            self._report.translations += 1
            self._emit("Translation", translated)
            texts.put_nowait(translated)

    async def _speak(self, texts: asyncio.Queue) -> None:
        while True:
            text = await texts.get()
            if text is _END:
                return

            audio = await asyncio.to_thread(self._synthesizer.synthesize, text)
            try:
                await asyncio.to_thread(self._sink.write, audio)
            except OSError as exc:
                raise SynthesisError(f"Could not write synthesized audio: {exc}") from exc
            self._report.syntheses += 1
            self._emit("Audio content written to file", str(getattr(self._sink, "path", self._sink)))

    def _check_response_error(self, response: RecognitionResponse) -> None:
        status = response.error
        if status is None:
            return
        if status.stream_limit_exceeded:
            self._warn_stream_limit()
            raise StreamLimitExceededError(f"Could not recognize: {status.message}", code=status.code)
        raise RecognitionError(f"Could not recognize: {status.message}", code=status.code)

    def _warn_stream_limit(self) -> None:
        self._logger.warning("recognition_stream_limit_exceeded")

    def _emit(self, label: str, value: str) -> None:
        self._console.print(f"{label}: {value}", markup=False, highlight=False, soft_wrap=True)
