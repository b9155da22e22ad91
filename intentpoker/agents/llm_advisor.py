"""
LLM advisor backed by an OpenAI-compatible chat completion API.

The model sees only the summarized request (no hidden cards) and must answer
with a single JSON intent object. Model choice and temperature follow the
table difficulty.
"""

from __future__ import annotations
from typing import Any, Dict, List, Optional
import json
import logging

from openai import AsyncOpenAI, OpenAIError

from intentpoker.agents.base import BaseAdvisor
from intentpoker.agents.intent import AdvisoryRequest
from intentpoker.config import Settings
from intentpoker.core.errors import AdvisoryFailure


logger = logging.getLogger(__name__)


SYSTEM_PROMPT = """You are the strategy controller for every bot at a Texas Hold'em table.

The bots act as one coordinated team. They may share intent, but they never
use hidden information and never cheat.

You do not compute odds, judge exact hand strength, choose bet sizes or see
hidden cards. You only choose STRATEGIC INTENT.

The human acts first. After the human's action you decide how all bots
respond together.

Goals: maximize long-term expected value, coordinate pressure, exploit the
human's tendencies, stay unpredictable and look human.

Difficulty:
EASY: loose play, low coordination, frequent mistakes.
NORMAL: balanced strategy, moderate coordination, occasional bluffs.
HARD: tight coordination, aggressive exploitation, constant pressure.

Answer with STRICT JSON ONLY. No prose, no markdown, no comments.

{
  "globalPlan": "pressure | trap | isolate | pot_control | chaos",
  "aggression": 0.0,
  "bluffFrequency": 0.0,
  "coordination": 0.0,
  "botActions": [
    {"botIndex": 0, "actionBias": "fold | call | raise", "confidence": 0.0}
  ]
}

Rules:
- One botActions entry per bot, botIndex matching its position
- actionBias must be one of legalActions
- All numeric fields lie between 0 and 1"""


class LLMAdvisor(BaseAdvisor):
    """
    Advisor that asks a chat completion model for the bots' intent.

    The client is created lazily so a missing API key only fails the first
    request (which the coordinator turns into the fallback policy).
    """

    def __init__(
        self,
        settings: Optional[Settings] = None,
        client: Optional[AsyncOpenAI] = None,
    ):
        super().__init__("llm")
        self.settings = settings or Settings.from_env()
        self._client = client

    @property
    def client(self) -> AsyncOpenAI:
        if self._client is None:
            if not self.settings.api_key:
                raise AdvisoryFailure("AI_API_KEY is not configured")
            self._client = AsyncOpenAI(
                api_key=self.settings.api_key,
                base_url=self.settings.base_url,
                timeout=self.settings.timeout,
            )
            logger.info(f"Advisory client configured with endpoint: {self.settings.base_url}")
        return self._client

    def build_messages(self, request: AdvisoryRequest) -> List[Dict[str, str]]:
        return [
            {"role": "system", "content": SYSTEM_PROMPT},
            {"role": "user", "content": json.dumps(request.to_payload())},
        ]

    async def advise(self, request: AdvisoryRequest) -> str:
        difficulty = request.difficulty
        params: Dict[str, Any] = {
            "model": self.settings.model_for(difficulty),
            "messages": self.build_messages(request),
            "max_tokens": self.settings.max_tokens,
            "temperature": self.settings.temperature_for(difficulty),
            "top_p": self.settings.top_p,
            "n": 1,
        }

        try:
            response = await self.client.chat.completions.create(**params)
        except OpenAIError as e:
            raise AdvisoryFailure(f"Advisory request failed: {e}") from e

        if not response.choices:
            raise AdvisoryFailure("Advisory response has no choices")

        content = response.choices[0].message.content
        if not content:
            raise AdvisoryFailure("Advisory response is empty")
        return content

    async def aclose(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None
