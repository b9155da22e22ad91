"""
Runtime settings for the advisory collaborator.

Values come from environment variables so the server can be pointed at any
OpenAI-compatible endpoint without code changes.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from typing import Dict, Mapping, Optional
import os

from intentpoker.core.rules import Difficulty


DEFAULT_BASE_URL = "https://inference.api.nscale.com/v1"
DEFAULT_TIMEOUT = 30.0
DEFAULT_MAX_TOKENS = 600
DEFAULT_TOP_P = 0.9

DEFAULT_MODELS = {
    Difficulty.EASY: "Qwen/Qwen3-14B-Instruct",
    Difficulty.NORMAL: "Qwen/Qwen3-72B-Instruct",
    Difficulty.HARD: "Qwen/Qwen3-235B-A22B-Instruct",
}

# Lower temperature plays more focused, higher more erratic
TEMPERATURES = {
    Difficulty.EASY: 0.7,
    Difficulty.NORMAL: 0.5,
    Difficulty.HARD: 0.35,
}


@dataclass
class Settings:
    """Advisory client settings."""
    api_key: Optional[str] = None
    base_url: str = DEFAULT_BASE_URL
    timeout: float = DEFAULT_TIMEOUT
    max_tokens: int = DEFAULT_MAX_TOKENS
    top_p: float = DEFAULT_TOP_P
    models: Dict[Difficulty, str] = field(default_factory=lambda: dict(DEFAULT_MODELS))
    # "llm" or "random"
    advisor: str = "llm"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> Settings:
        """
        Build settings from the environment.

        Reads AI_API_KEY, AI_API_BASE_URL, AI_TIMEOUT, AI_MAX_TOKENS, AI_ADVISOR and
        AI_MODEL_EASY / AI_MODEL_NORMAL / AI_MODEL_HARD.
        """
        env = os.environ if environ is None else environ

        models = dict(DEFAULT_MODELS)
        for difficulty in Difficulty:
            override = env.get(f"AI_MODEL_{difficulty.value}")
            if override:
                models[difficulty] = override

        return cls(
            api_key=env.get("AI_API_KEY") or None,
            base_url=env.get("AI_API_BASE_URL") or DEFAULT_BASE_URL,
            timeout=float(env.get("AI_TIMEOUT") or DEFAULT_TIMEOUT),
            max_tokens=int(env.get("AI_MAX_TOKENS") or DEFAULT_MAX_TOKENS),
            models=models,
            advisor=(env.get("AI_ADVISOR") or "llm").lower(),
        )

    def model_for(self, difficulty: Difficulty) -> str:
        return self.models.get(difficulty, self.models[Difficulty.NORMAL])

    def temperature_for(self, difficulty: Difficulty) -> float:
        return TEMPERATURES.get(difficulty, TEMPERATURES[Difficulty.NORMAL])
