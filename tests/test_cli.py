from __future__ import annotations

import importlib
from pathlib import Path

import pytest

from babel_io.models import RecognitionAlternative, RecognitionResponse, RecognitionResult


class _OneShotStream:
    def __init__(self, transcripts: list[str]) -> None:
        self._responses = [
            RecognitionResponse(
                results=[RecognitionResult(alternatives=[RecognitionAlternative(t) for t in transcripts], is_final=True)]
            )
        ]
        self.sent: list[bytes] = []

    def send_audio(self, chunk: bytes) -> None:
        self.sent.append(chunk)

    def close_send(self) -> None:
        pass

    def receive(self) -> RecognitionResponse | None:
        return self._responses.pop(0) if self._responses else None

    def close(self) -> None:
        pass


class _Recognizer:
    def __init__(self, transcripts: list[str]) -> None:
        self.stream = _OneShotStream(transcripts)

    def open_stream(self) -> _OneShotStream:
        return self.stream


class _UpperTranslator:
    def translate(self, text: str, target_language: str) -> str:
        return f"{target_language}:{text.upper()}"


class _Synthesizer:
    def synthesize(self, text: str) -> bytes:
        return text.encode("utf-8")


class _BrokenTranslator:
    def translate(self, text: str, target_language: str) -> str:
        raise RuntimeError("Translation API has not been enabled")


def test_console_entrypoint_exposes_app() -> None:
    pytest.importorskip("typer")

    module = importlib.import_module("babel_io.main")

    assert hasattr(module, "app")
    assert module.app is not None


def test_stream_translates_audio_file(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    captured: dict = {}

    def _fake_backends(**kwargs):
        captured.update(kwargs)
        return _Recognizer(["hello", "world"]), _UpperTranslator(), _Synthesizer()

    monkeypatch.setattr(main, "_build_backends", _fake_backends)
    audio = tmp_path / "speech.raw"
    audio.write_bytes(b"\x00" * 3000)
    output = tmp_path / "speech.mp3"

    result = typer_testing.CliRunner().invoke(
        main.app,
        ["stream", "--input", str(audio), "--output", str(output), "--target-language", "es"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert captured["target_language"] == "es"
    assert "Transcript alternative: hello" in result.stdout
    assert "Translation: es:WORLD" in result.stdout
    assert "finished" in result.stdout
    assert output.read_bytes() == b"es:WORLD"


def test_stream_exits_non_zero_on_stage_failure(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    monkeypatch.setattr(
        main,
        "_build_backends",
        lambda **kwargs: (_Recognizer(["hello"]), _BrokenTranslator(), _Synthesizer()),
    )
    audio = tmp_path / "speech.raw"
    audio.write_bytes(b"\x00" * 10)
    output = tmp_path / "speech.mp3"

    result = typer_testing.CliRunner().invoke(
        main.app,
        ["stream", "--input", str(audio), "--output", str(output)],
        catch_exceptions=False,
    )

    assert result.exit_code == 1
    assert "Translation API has not been enabled" in result.stdout
    assert not output.exists()


def test_stream_reports_missing_backends(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    def _missing(**kwargs):
        raise RuntimeError("Install extras with: pip install 'babel-io[google]'")

    monkeypatch.setattr(main, "_build_backends", _missing)

    result = typer_testing.CliRunner().invoke(main.app, ["stream", "--input", str(tmp_path / "x.raw")])

    assert result.exit_code == 1
    assert "pip install 'babel-io[google]'" in result.stdout


def test_stream_rejects_invalid_language() -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    result = typer_testing.CliRunner().invoke(main.app, ["stream", "--target-language", "pt_BR"])

    assert result.exit_code == 2


def test_config_command_prints_settings() -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    result = typer_testing.CliRunner().invoke(main.app, ["config"])

    assert result.exit_code == 0
    assert "target_language" in result.stdout


def test_stream_reports_backend_construction_errors(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    def _no_credentials(**kwargs):
        raise FileNotFoundError("key.json not found")

    monkeypatch.setattr(main, "_build_backends", _no_credentials)

    result = typer_testing.CliRunner().invoke(main.app, ["stream", "--input", str(tmp_path / "x.raw")])

    assert result.exit_code == 1
    assert "key.json not found" in result.stdout


class _InterimStream(_OneShotStream):
    def __init__(self) -> None:
        super().__init__([])
        self._responses = [
            RecognitionResponse(results=[RecognitionResult(alternatives=[RecognitionAlternative("hel")])]),
            RecognitionResponse(
                results=[RecognitionResult(alternatives=[RecognitionAlternative("hello")], is_final=True)]
            ),
        ]


class _RecordingTranslator:
    def __init__(self) -> None:
        self.calls: list[str] = []

    def translate(self, text: str, target_language: str) -> str:
        self.calls.append(text)
        return text


def test_stream_final_only_skips_interim_results(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main

    recognizer = _Recognizer([])
    recognizer.stream = _InterimStream()
    translator = _RecordingTranslator()
    monkeypatch.setattr(main, "_build_backends", lambda **kwargs: (recognizer, translator, _Synthesizer()))
    audio = tmp_path / "speech.raw"
    audio.write_bytes(b"\x00" * 10)

    result = typer_testing.CliRunner().invoke(
        main.app,
        ["stream", "--input", str(audio), "--output", str(tmp_path / "out.mp3"), "--final-only"],
        catch_exceptions=False,
    )

    assert result.exit_code == 0
    assert translator.calls == ["hello"]


def test_stream_exits_130_when_stopped(monkeypatch, tmp_path: Path) -> None:
    typer_testing = pytest.importorskip("typer.testing")
    from babel_io import main
    from babel_io.errors import PipelineStopped

    async def _stopped(self):
        raise PipelineStopped()

    monkeypatch.setattr(
        main,
        "_build_backends",
        lambda **kwargs: (_Recognizer(["hello"]), _UpperTranslator(), _Synthesizer()),
    )
    monkeypatch.setattr(main.TranslationPipeline, "run", _stopped)
    audio = tmp_path / "speech.raw"
    audio.write_bytes(b"\x00" * 10)

    result = typer_testing.CliRunner().invoke(
        main.app,
        ["stream", "--input", str(audio), "--output", str(tmp_path / "out.mp3")],
        catch_exceptions=False,
    )

    assert result.exit_code == 130
    assert "stopped" in result.stdout
