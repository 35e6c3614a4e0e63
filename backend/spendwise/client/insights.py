from __future__ import annotations

import json
import logging
from typing import Any

from openai import AsyncOpenAI

from ..config import settings
from ..schemas import AIInsight, Category, Transaction

logger = logging.getLogger(__name__)

MIN_RECORDS = 3

SYSTEM_PROMPT = (
    "You are a personal finance assistant. Reply with a JSON object with the keys "
    '"summary" (one paragraph summarizing spending habits), '
    '"recommendations" (a list of specific actionable tips) and '
    '"savingsPotential" (estimated potential monthly savings amount with reasoning).'
)


def _project(records: list[Transaction]) -> list[dict[str, Any]]:
    return [
        {"t": r.title, "a": r.amount, "c": r.category, "d": r.date.isoformat(), "ty": r.type}
        for r in records
    ]


class InsightRequester:
    def __init__(self, client: Any | None = None, model: str | None = None) -> None:
        if client is None and settings.openai_api_key:
            client = AsyncOpenAI(api_key=settings.openai_api_key)
        self.client = client
        self.model = model or settings.llm_model

    @property
    def enabled(self) -> bool:
        return self.client is not None

    async def _complete(self, messages: list[dict[str, str]], json_mode: bool = False) -> str | None:
        kwargs: dict[str, Any] = {"model": self.model, "messages": messages}
        if json_mode:
            kwargs["response_format"] = {"type": "json_object"}
        response = await self.client.chat.completions.create(**kwargs)
        return response.choices[0].message.content

    async def get_insights(self, records: list[Transaction]) -> AIInsight | None:
        if len(records) < MIN_RECORDS:
            return None
        if not self.enabled:
            logger.info("OPENAI_API_KEY is not set, skipping insight request")
            return None
        try:
            content = await self._complete(
                [
                    {"role": "system", "content": SYSTEM_PROMPT},
                    {
                        "role": "user",
                        "content": f"Analyze these financial transactions and provide insights: {json.dumps(_project(records))}",
                    },
                ],
                json_mode=True,
            )
            if not content:
                return None
            return AIInsight.model_validate_json(content)
        except Exception:
            logger.exception("AI insight request failed")
            return None

    async def suggest_category(self, title: str) -> Category:
        if not self.enabled:
            return Category.other
        names = ", ".join(c.value for c in Category)
        try:
            content = await self._complete(
                [
                    {
                        "role": "user",
                        "content": f'Given the transaction title "{title}", categorize it into one of: {names}. Return only the category name.',
                    }
                ]
            )
        except Exception:
            logger.exception("Category suggestion failed for %r", title)
            return Category.other
        suggestion = (content or "").strip()
        try:
            return Category(suggestion)
        except ValueError:
            return Category.other
