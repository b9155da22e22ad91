"""
Random Advisor Implementation.

An offline advisor that invents a well-formed intent from random draws.
Useful for playing without an API key and as a baseline for evaluation.
"""

from __future__ import annotations
import json
import random
from typing import Optional, get_args

from intentpoker.agents.base import BaseAdvisor
from intentpoker.agents.intent import AdvisoryRequest, GlobalPlan
from intentpoker.core.rules import ActionKind


PLANS = get_args(GlobalPlan)


class RandomAdvisor(BaseAdvisor):
    """
    An advisor that biases each bot toward a random legal action.

    The advisor has configurable tendencies:
    - fold_probability: How likely a bot is biased to fold
    - raise_probability: How likely a bot is biased to raise vs call
    """

    def __init__(
        self,
        fold_probability: float = 0.1,
        raise_probability: float = 0.3,
        rng: Optional[random.Random] = None,
    ):
        """
        Initialize the random advisor.

        Args:
            fold_probability: Probability of a fold bias (0-1)
            raise_probability: Probability of a raise bias (0-1)
            rng: Randomness source
        """
        super().__init__("random")
        self.fold_probability = fold_probability
        self.raise_probability = raise_probability
        self.rng = rng or random.Random()

    async def advise(self, request: AdvisoryRequest) -> str:
        legal = request.legal_actions or [ActionKind.CALL]

        bot_actions = []
        for index in range(request.bot_count):
            bias = self._pick_bias(legal)
            bot_actions.append({
                "botIndex": index,
                "actionBias": bias.value,
                "confidence": round(self.rng.uniform(0.3, 0.9), 2),
            })

        return json.dumps({
            "globalPlan": self.rng.choice(PLANS),
            "aggression": round(self.rng.random(), 2),
            "bluffFrequency": round(self.rng.random(), 2),
            "coordination": round(self.rng.random(), 2),
            "botActions": bot_actions,
        })

    def _pick_bias(self, legal) -> ActionKind:
        roll = self.rng.random()

        # Maybe fold
        if ActionKind.FOLD in legal and roll < self.fold_probability:
            return ActionKind.FOLD

        # Maybe raise
        if ActionKind.RAISE in legal and roll < self.fold_probability + self.raise_probability:
            return ActionKind.RAISE

        if ActionKind.CALL in legal:
            return ActionKind.CALL

        return self.rng.choice(list(legal))
