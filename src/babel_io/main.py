"""CLI startup entrypoint for babel-io.

Pipe 16 kHz mono LINEAR16 audio on stdin, for example::

    gst-launch-1.0 -v pulsesrc ! audioconvert ! audioresample \\
        ! audio/x-raw,channels=1,rate=16000 ! filesink location=/dev/stdout | babel-io stream
"""

from __future__ import annotations

import asyncio
import signal
from dataclasses import asdict
from pathlib import Path

import typer
from rich import print

from babel_io.audio import FileAudioSink, StreamAudioSource, open_stdin_source
from babel_io.config import settings, validate_language_tag
from babel_io.errors import PipelineError, PipelineStopped
from babel_io.models import PipelineReport
from babel_io.pipeline import TranslationPipeline
from babel_io.telemetry import configure_logging

app = typer.Typer(help="Translate live speech from stdin audio into synthesized speech")


def _language_option(value: str | None, fallback: str) -> str:
    if value is None:
        return fallback
    try:
        return validate_language_tag(value)
    except ValueError as exc:
        raise typer.BadParameter(str(exc)) from exc


def _build_backends(*, source_language: str, target_language: str, interim_results: bool):
    from babel_io.speech.google_recognizer import GoogleStreamingRecognizer
    from babel_io.speech.google_translator import GoogleTranslator
    from babel_io.speech.google_tts import GoogleSpeechSynthesizer

    recognizer = GoogleStreamingRecognizer(
        language_code=source_language,
        sample_rate_hertz=settings.sample_rate_hertz,
        enable_automatic_punctuation=settings.enable_automatic_punctuation,
        interim_results=interim_results,
        credentials_file=settings.credentials_file,
    )
    translator = GoogleTranslator(
        source_language=settings.translation_source_language,
        credentials_file=settings.credentials_file,
    )
    synthesizer = GoogleSpeechSynthesizer(
        language_code=settings.voice_language or target_language,
        voice_gender=settings.voice_gender,
        audio_encoding=settings.audio_encoding,
        credentials_file=settings.credentials_file,
    )
    return recognizer, translator, synthesizer


@app.command("config")
def show_config() -> None:
    """Show the effective runtime configuration."""
    print(settings.model_dump(mode="json"))


@app.command()
def stream(
    input_path: Path = typer.Option(None, "--input", help="Raw LINEAR16 audio file (defaults to stdin)"),
    source_language: str = typer.Option(None, help="Language spoken in the audio, e.g. en-US"),
    target_language: str = typer.Option(None, help="Translation target language, e.g. pt-BR"),
    output: Path = typer.Option(None, help="File overwritten with each synthesized utterance"),
    interim_results: bool = typer.Option(False, help="Request non-final results from the recognizer"),
    final_only: bool = typer.Option(False, help="Only translate final recognition results"),
) -> None:
    """Run the recognize → translate → synthesize pipeline until input ends."""
    configure_logging(settings.log_level)
    source_language = _language_option(source_language, settings.source_language)
    target_language = _language_option(target_language, settings.target_language)
    output_path = output or settings.output_path

    try:
        recognizer, translator, synthesizer = _build_backends(
            source_language=source_language,
            target_language=target_language,
            interim_results=interim_results or settings.interim_results,
        )
    except Exception as exc:  # noqa: BLE001
        print({"error": str(exc)})
        raise typer.Exit(code=1)

    if input_path is not None:
        try:
            source = StreamAudioSource.from_path(input_path)
        except OSError as exc:
            print({"error": f"Cannot open audio input: {exc}"})
            raise typer.Exit(code=1)
    else:
        source = open_stdin_source()

    pipeline = TranslationPipeline(
        source,
        recognizer,
        translator,
        synthesizer,
        FileAudioSink(output_path),
        target_language=target_language,
        chunk_size=settings.chunk_size,
        forward_interim_results=settings.forward_interim_results and not final_only,
        max_read_errors=settings.max_read_errors,
    )

    async def _run() -> PipelineReport:
        loop = asyncio.get_running_loop()
        for signum in (signal.SIGINT, signal.SIGTERM):
            try:
                loop.add_signal_handler(signum, pipeline.stop)
            except (NotImplementedError, RuntimeError, ValueError):
                pass
        try:
            return await pipeline.run()
        finally:
            source.close()

    try:
        report = asyncio.run(_run())
    except PipelineStopped:
        print({"stream": "stopped", "report": asdict(pipeline.report)})
        raise typer.Exit(code=130)
    except PipelineError as exc:
        print({"error": str(exc), "report": asdict(pipeline.report)})
        raise typer.Exit(code=1)

    print({"stream": "finished", "output": str(output_path), "report": asdict(report)})


if __name__ == "__main__":
    app()
