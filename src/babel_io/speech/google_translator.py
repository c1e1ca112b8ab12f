"""Text translation backend powered by ``google-cloud-translate``."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from babel_io.errors import TranslationError

from .google_recognizer import _load_vendor_module
from .interfaces import Translator


@dataclass(slots=True)
class GoogleTranslator(Translator):
    """Translate plain text with the Cloud Translation v2 API.

    The client is created once and reused for every request.
    """

    source_language: str | None = None
    credentials_file: str | Path | None = None

    def __post_init__(self) -> None:
        translate = _load_vendor_module("google.cloud.translate_v2")
        if self.credentials_file:
            self._client = translate.Client.from_service_account_json(str(self.credentials_file))
        else:
            self._client = translate.Client()

    def translate(self, text: str, target_language: str) -> str:
        try:
            result = self._client.translate(
                text,
                target_language=target_language,
                source_language=self.source_language,
                format_="text",
            )
        except Exception as exc:  # noqa: BLE001
            raise TranslationError(f"Failed to translate text: {exc}") from exc

        try:
            return result["translatedText"]
        except (KeyError, TypeError) as exc:
            raise TranslationError(f"Unexpected translation response: {result!r}") from exc
