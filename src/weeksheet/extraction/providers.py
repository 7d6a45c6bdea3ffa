"""AI provider protocol and its OpenAI / Anthropic adapters.

Adapters only move bytes to the provider and return the text reply; all
timesheet policy lives in ``weeksheet.domain``. Both accept an injected SDK
client so tests never touch the network.
"""
from __future__ import annotations

import base64
import json
import re
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

import anthropic
import openai

from weeksheet.config import Settings, settings as default_settings
from weeksheet.domain.exceptions import ConfigurationError, ExtractionError
from weeksheet.extraction.prompt import inline_document
from weeksheet.logging import logger

_FENCE_RE = re.compile(r"^```(?:json)?\s*\n?([\s\S]*?)\n?\s*```$")


@dataclass(frozen=True)
class UploadedDocument:
    filename: str
    content_type: str
    content: bytes

    @property
    def size_bytes(self) -> int:
        return len(self.content)

    @property
    def is_image(self) -> bool:
        return self.content_type.startswith("image/")

    @property
    def is_pdf(self) -> bool:
        return self.content_type == "application/pdf"

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")

    @property
    def base64(self) -> str:
        return base64.b64encode(self.content).decode("ascii")

    @property
    def data_url(self) -> str:
        return f"data:{self.content_type};base64,{self.base64}"


@runtime_checkable
class ExtractionProvider(Protocol):
    """Send the prompt plus one document; return the model's text reply."""

    name: str

    def complete(self, *, prompt: str, document: UploadedDocument) -> str:
        ...


def parse_model_json(raw: str) -> Any:
    """Parse a JSON reply, tolerating a surrounding Markdown code fence."""
    cleaned = raw.strip()
    fence = _FENCE_RE.match(cleaned)
    if fence:
        cleaned = fence.group(1).strip()
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        raise ExtractionError(f"AI response was not valid JSON: {exc}") from exc


class OpenAIProvider:
    """Chat completions with JSON output mode."""

    name = "openai"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        openai_client: Any | None = None,
    ) -> None:
        self._client = openai_client if openai_client is not None else openai.OpenAI(api_key=api_key)
        self._model = model or default_settings.OPENAI_MODEL_VISION

    @staticmethod
    def build_content(prompt: str, document: UploadedDocument) -> str | list[dict[str, Any]]:
        if document.is_image:
            return [
                {"type": "text", "text": prompt},
                {"type": "image_url", "image_url": {"url": document.data_url}},
            ]
        if document.is_pdf:
            return [
                {"type": "text", "text": prompt},
                {"type": "file", "file": {"filename": document.filename, "file_data": document.data_url}},
            ]
        return inline_document(prompt, document.filename, document.text)

    def complete(self, *, prompt: str, document: UploadedDocument) -> str:
        try:
            response = self._client.chat.completions.create(
                model=self._model,
                messages=[{"role": "user", "content": self.build_content(prompt, document)}],
                temperature=0,
                response_format={"type": "json_object"},
            )
        except openai.OpenAIError as exc:
            raise ExtractionError(f"OpenAI error: {exc}") from exc

        content = response.choices[0].message.content if response.choices else None
        if not content:
            raise ExtractionError("OpenAI returned an empty response")
        return content


class AnthropicProvider:
    """Messages API; images and PDFs go as base64 content blocks."""

    name = "anthropic"

    def __init__(
        self,
        api_key: str | None = None,
        *,
        model: str | None = None,
        max_tokens: int | None = None,
        base_url: str | None = None,
        anthropic_client: Any | None = None,
    ) -> None:
        if anthropic_client is not None:
            self._client = anthropic_client
        else:
            self._client = anthropic.Anthropic(api_key=api_key, base_url=base_url or None)
        self._model = model or default_settings.ANTHROPIC_MODEL
        self._max_tokens = max_tokens or default_settings.ANTHROPIC_MAX_TOKENS

    @staticmethod
    def build_content(prompt: str, document: UploadedDocument) -> list[dict[str, Any]]:
        source = {"type": "base64", "media_type": document.content_type, "data": document.base64}
        if document.is_image:
            return [{"type": "image", "source": source}, {"type": "text", "text": prompt}]
        if document.is_pdf:
            return [{"type": "document", "source": source}, {"type": "text", "text": prompt}]
        return [{"type": "text", "text": inline_document(prompt, document.filename, document.text)}]

    def complete(self, *, prompt: str, document: UploadedDocument) -> str:
        try:
            response = self._client.messages.create(
                model=self._model,
                max_tokens=self._max_tokens,
                temperature=0,
                messages=[{"role": "user", "content": self.build_content(prompt, document)}],
            )
        except anthropic.AnthropicError as exc:
            logger.error("Anthropic request failed: %s", exc)
            raise ExtractionError(f"Anthropic error: {exc}") from exc

        text = next(
            (block.text for block in response.content if getattr(block, "type", None) == "text"),
            None,
        )
        if not text:
            raise ExtractionError("Anthropic returned an empty response")
        return text


def get_provider(cfg: Settings | None = None) -> ExtractionProvider:
    """Build the provider selected by configuration.

    Raises ConfigurationError for an unknown provider name or a missing key.
    """
    cfg = cfg or default_settings
    name = cfg.provider_name
    if name not in ("openai", "anthropic"):
        raise ConfigurationError(f"Unknown AI provider: {name}")

    api_key = cfg.api_key_for(name)
    logger.info("AI provider: %s (api key set: %s)", name, api_key is not None)
    if api_key is None:
        raise ConfigurationError(
            "AI API key not configured. Set AI_API_KEY, ANTHROPIC_API_KEY, "
            "or OPENAI_API_KEY as an environment variable."
        )

    if name == "anthropic":
        return AnthropicProvider(
            api_key,
            model=cfg.ANTHROPIC_MODEL,
            max_tokens=cfg.ANTHROPIC_MAX_TOKENS,
            base_url=cfg.ANTHROPIC_BASE_URL,
        )
    return OpenAIProvider(api_key, model=cfg.OPENAI_MODEL_VISION)
