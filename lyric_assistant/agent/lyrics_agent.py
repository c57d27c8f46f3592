from __future__ import annotations

import json
import logging
import time
from typing import Any

from openai import AsyncOpenAI
from pydantic import ValidationError

from lyric_assistant.agent.debug import (
    trace_final_output,
    trace_model_config,
    trace_prompt,
    trace_raw_output,
)
from lyric_assistant.config import DEFAULT_MODEL_ID
from lyric_assistant.errors import (
    ConfigurationError,
    InvalidModelOutputError,
    MalformedAnalysisError,
)
from lyric_assistant.models.analysis import AnalysisResult

log = logging.getLogger(__name__)

# Gemini through its OpenAI-compatible endpoint, authenticated with GEMINI_API_KEY
GEMINI_OPENAI_BASE_URL = "https://generativelanguage.googleapis.com/v1beta/openai/"
TEMPERATURE = 0.7


def parse_analysis(raw: str) -> AnalysisResult:
    """Parse the model's raw text into a validated AnalysisResult.

    Raises:
        InvalidModelOutputError: the text is not valid JSON.
        MalformedAnalysisError: the JSON is not an object with the four
            required fields in the expected shape.
    """
    json_string = raw.strip()
    try:
        data: Any = json.loads(json_string)
    except json.JSONDecodeError as e:
        log.error("Model returned invalid JSON: %s", json_string)
        raise InvalidModelOutputError(
            f"Model response could not be parsed as JSON: {e}", raw=raw
        ) from e

    if not isinstance(data, dict):
        log.error("Model returned JSON that is not an object: %s", json_string)
        raise MalformedAnalysisError(
            f"Expected a JSON object, got {type(data).__name__}", raw=raw
        )

    try:
        return AnalysisResult.model_validate(data)
    except ValidationError as e:
        log.error("Malformed analysis from model: %s", json_string)
        raise MalformedAnalysisError(f"Malformed analysis: {e}", raw=raw) from e


class LyricsAnalyzer:
    """Single-shot LLM client producing an AnalysisResult from a prompt.

    The SDK client is built on first use so that a missing key surfaces as a
    ConfigurationError at request time rather than at startup.
    """

    def __init__(
        self,
        api_key: str | None,
        model: str = DEFAULT_MODEL_ID,
        base_url: str = GEMINI_OPENAI_BASE_URL,
        client: AsyncOpenAI | None = None,
        debug: bool = False,
    ):
        self.api_key = api_key
        self.model = model
        self.base_url = base_url
        self.debug = debug
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            self._client = AsyncOpenAI(base_url=self.base_url, api_key=self.api_key)
        return self._client

    async def analyze(self, prompt: str) -> AnalysisResult:
        if not self.api_key:
            raise ConfigurationError("GEMINI_API_KEY")

        if self.debug:
            trace_prompt(prompt)
            trace_model_config(self.model, self.base_url, TEMPERATURE)

        start = time.time()
        response = await self._get_client().chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            temperature=TEMPERATURE,
            response_format={"type": "json_object"},
        )
        raw = response.choices[0].message.content or ""
        log.info("Model responded in %.2fs", time.time() - start)

        if self.debug:
            trace_raw_output(raw)

        result = parse_analysis(raw)
        log.info("Model analysis: %s", result.to_payload())

        if self.debug:
            trace_final_output(result.to_payload())

        return result
