"""
Generative-AI helpers: task breakdown and a daily quote.

Both calls are total: any transport, parsing or schema problem is logged and
replaced by static content, so callers never see an exception.
"""

from __future__ import annotations

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from taskmaster.config import SETTINGS, Settings
from taskmaster.domain.entities import Quote

logger = logging.getLogger(__name__)

FALLBACK_STEPS = ["Review the requirements", "Set milestones", "Carry out the steps"]
FALLBACK_QUOTE = Quote(
    quote="The way to get started is to quit talking and begin doing.",
    author="Walt Disney",
)

MIN_STEPS = 3
MAX_STEPS = 5

BREAKDOWN_PROMPT = (
    "Break this task into 3-5 concrete, actionable sub-tasks. "
    'Title: "{title}". Description: "{description}". '
    'Reply with JSON only: {{"subTasks": ["...", "..."]}}. '
    "Each sub-task is one short imperative sentence."
)

QUOTE_PROMPT = (
    "Give one short, highly motivating productivity quote and its author. "
    'Reply with JSON only: {"quote": "...", "author": "..."}.'
)


class AIService:
    """Thin wrapper over an OpenAI-compatible chat completion endpoint."""

    def __init__(self, settings: Settings = SETTINGS, client: Any | None = None) -> None:
        self.model = settings.ai_model
        self.timeout = settings.ai_timeout_seconds
        self.client = client
        if self.client is None and settings.openai_api_key:
            self.client = AsyncOpenAI(
                api_key=settings.openai_api_key,
                base_url=settings.openai_base_url,
                timeout=settings.ai_timeout_seconds,
                max_retries=0,
            )
        self.enabled = self.client is not None
        if not self.enabled:
            logger.warning("AI service disabled (OPENAI_API_KEY is not set), using static content")

    async def breakdown(self, title: str, description: str) -> list[str]:
        if not self.enabled:
            return list(FALLBACK_STEPS)
        try:
            data = await self._complete_json(
                BREAKDOWN_PROMPT.format(title=title, description=description)
            )
            return _parse_steps(data)
        except Exception as exc:  # noqa: BLE001
            logger.warning("AI breakdown failed for %r: %s", title, exc)
            return list(FALLBACK_STEPS)

    async def daily_quote(self) -> Quote:
        if not self.enabled:
            return FALLBACK_QUOTE
        try:
            data = await self._complete_json(QUOTE_PROMPT)
            return _parse_quote(data)
        except Exception as exc:  # noqa: BLE001
            logger.warning("AI daily quote failed: %s", exc)
            return FALLBACK_QUOTE

    async def _complete_json(self, prompt: str) -> Any:
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[{"role": "user", "content": prompt}],
            response_format={"type": "json_object"},
            temperature=0.7,
            timeout=self.timeout,
        )
        content = response.choices[0].message.content
        if not content:
            raise ValueError("empty completion")
        return json.loads(content)


def _parse_steps(data: Any) -> list[str]:
    if not isinstance(data, dict) or not isinstance(data.get("subTasks"), list):
        raise ValueError("response has no subTasks array")
    steps = [item.strip() for item in data["subTasks"] if isinstance(item, str) and item.strip()]
    if len(steps) < MIN_STEPS:
        raise ValueError(f"expected at least {MIN_STEPS} sub-tasks, got {len(steps)}")
    return steps[:MAX_STEPS]


def _parse_quote(data: Any) -> Quote:
    if not isinstance(data, dict):
        raise ValueError("response is not an object")
    quote = data.get("quote")
    author = data.get("author")
    if not isinstance(quote, str) or not isinstance(author, str) or not quote.strip() or not author.strip():
        raise ValueError("response lacks quote/author")
    return Quote(quote=quote.strip(), author=author.strip())
