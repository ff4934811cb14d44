"""Natural-language summaries of attendance stats.

The summarizer is advisory: any failure turns into a fixed placeholder string
so the audit and roll views keep working without it.
"""

from __future__ import annotations

import json
import logging
from typing import Any, Optional, Protocol, Sequence

from google import genai
from google.genai import types

from ..eligibility.model import StudentStats

logger = logging.getLogger(__name__)

MISSING_KEY_MESSAGE = "AI Insights unavailable: Missing API Key."
ERROR_MESSAGE = "Error generating AI insights."
EMPTY_MESSAGE = "No insights generated."

SYSTEM_INSTRUCTION = "You are an educational consultant. Provide a concise, professional summary and recommendations."
DEFAULT_MODEL = "gemini-2.5-flash"


class AttendanceSummarizer(Protocol):
    def summarize(self, stats: Sequence[StudentStats]) -> str:
        raise NotImplementedError


def build_prompt(stats: Sequence[StudentStats]) -> str:
    data = json.dumps([s.to_dict() for s in stats])
    return (
        "Analyze the following student attendance data and provide a brief summary of how many "
        "students are meeting the 75% requirement and any students at risk. \n"
        f"Data: {data}"
    )


class GeminiSummarizer(AttendanceSummarizer):
    def __init__(
        self,
        api_key: Optional[str],
        *,
        model: str = DEFAULT_MODEL,
        temperature: float = 0.7,
        client: Any = None,
    ):
        self._api_key = api_key
        self._model = model
        self._temperature = float(temperature)
        # No client without a key; summarize() answers with the placeholder instead.
        self._client = client if client is not None else (genai.Client(api_key=api_key) if api_key else None)

    def summarize(self, stats: Sequence[StudentStats]) -> str:
        if not self._api_key or self._client is None:
            return MISSING_KEY_MESSAGE

        try:
            response = self._client.models.generate_content(
                model=self._model,
                contents=build_prompt(stats),
                config=types.GenerateContentConfig(
                    system_instruction=SYSTEM_INSTRUCTION,
                    temperature=self._temperature,
                ),
            )
            text = response.text
        except Exception:
            # Callers always get text back; the cause only goes to the log.
            logger.exception("summarizer request failed (model=%s)", self._model)
            return ERROR_MESSAGE

        return (text or "").strip() or EMPTY_MESSAGE
