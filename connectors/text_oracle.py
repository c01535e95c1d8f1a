"""
Module: connectors.text_oracle

Text-generation oracle used for demand forecasting. An oracle takes a prompt
and a target JSON schema and returns a JSON object, reporting failure as an
``OracleResult`` value instead of raising.
"""

from __future__ import annotations

import json
import logging
import os
from dataclasses import dataclass
from typing import Any, Protocol, runtime_checkable

from openai import AsyncOpenAI

from config.config import ForecastOracleConfig
from utils.openai_utils import completion_text, extract_json_object, safe_chat_completion

logger = logging.getLogger(__name__)

__all__ = [
    "OracleUnavailable",
    "OracleResult",
    "TextOracle",
    "OpenAITextOracle",
]


@dataclass(frozen=True)
class OracleUnavailable:
    """Why the oracle could not produce a usable answer."""

    reason: str


@dataclass(frozen=True)
class OracleResult:
    """Either a JSON object from the oracle or the reason it is unavailable."""

    value: dict[str, Any] | None = None
    error: OracleUnavailable | None = None

    @property
    def ok(self) -> bool:
        return self.error is None and self.value is not None

    @classmethod
    def success(cls, value: dict[str, Any]) -> OracleResult:
        return cls(value=value)

    @classmethod
    def unavailable(cls, reason: str) -> OracleResult:
        return cls(error=OracleUnavailable(reason))


@runtime_checkable
class TextOracle(Protocol):
    async def generate_structured(self, prompt: str, schema: dict[str, Any]) -> OracleResult:
        """Return a JSON object conforming to ``schema`` for ``prompt``."""
        ...


class OpenAITextOracle:
    """
    TextOracle backed by OpenAI chat completions in JSON mode.
    Retries transient failures with exponential backoff; anything left over is
    returned as an unavailable result.
    """

    SYSTEM_PROMPT = (
        "You are a structured data generator. Respond ONLY with a single valid JSON "
        "object that conforms to this JSON schema, with no commentary:\n{schema}"
    )

    def __init__(
        self,
        config: ForecastOracleConfig | None = None,
        *,
        client: AsyncOpenAI | None = None,
    ):
        self.config = config or ForecastOracleConfig()
        self.logger = logging.getLogger(__name__)

        if client is not None:
            self.client: AsyncOpenAI | None = client
            return

        resolved_key = self.config.api_key or os.getenv("OPENAI_API_KEY")
        if resolved_key and resolved_key != "YOUR_API_KEY_HERE":
            try:
                self.client = AsyncOpenAI(api_key=resolved_key)
                self.logger.info("AsyncOpenAI client initialized for demand forecasting.")
            except Exception as e:
                self.client = None
                self.logger.error(f"Failed to initialize OpenAI client: {e}")
        else:
            self.client = None
            self.logger.warning(
                "OpenAI API key missing or placeholder. Demand forecasts will use the historical fallback."
            )

    async def generate_structured(self, prompt: str, schema: dict[str, Any]) -> OracleResult:
        if self.client is None:
            return OracleResult.unavailable("OpenAI client not initialised")

        messages = [
            {"role": "system", "content": self.SYSTEM_PROMPT.format(schema=json.dumps(schema))},
            {"role": "user", "content": prompt},
        ]
        try:
            completion = await safe_chat_completion(
                self.client,
                model=self.config.model,
                messages=messages,
                logger=self.logger,
                retry_attempts=self.config.retry_attempts,
                retry_backoff=self.config.retry_backoff,
                response_format={"type": "json_object"},
                temperature=self.config.temperature,
                max_tokens=self.config.max_tokens,
            )
        except Exception as exc:  # noqa: BLE001
            return OracleResult.unavailable(f"OpenAI request failed: {exc}")

        text = completion_text(completion)
        if not text:
            return OracleResult.unavailable("OpenAI returned an empty response")
        payload = extract_json_object(text)
        if payload is None:
            self.logger.debug(f"Unparseable oracle reply: '{text[:100]}...'")
            return OracleResult.unavailable("OpenAI response was not a JSON object")
        return OracleResult.success(payload)
