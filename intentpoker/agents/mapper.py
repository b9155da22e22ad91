"""
Intent-to-action mapping.

Turns each bot's action bias into an action from that bot's legal set. A
legal bias passes through untouched; an illegal one is degraded according to
difficulty and how large the last human bet is relative to the pot.

Randomness comes from an injectable ``random.Random`` so tests can seed it
and assert the exact branch taken.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import random

from intentpoker.agents.intent import AdvisoryRequest, StrategicIntent
from intentpoker.core.rules import ActionKind, Difficulty


FALLBACK_CONFIDENCE = 0.5
# Pot assumed when the pot is empty
DEFAULT_POT = 100


@dataclass
class BotSituation:
    """What one bot can do right now."""
    bot_index: int
    legal_actions: List[ActionKind]
    stack: int
    call_amount: int

    @property
    def can_afford_call(self) -> bool:
        return self.stack >= self.call_amount


@dataclass
class MappingContext:
    """Table context shared by every bot's mapping."""
    difficulty: Difficulty = Difficulty.NORMAL
    pot: int = 0
    last_bet_size: int = 0

    @classmethod
    def from_request(cls, request: AdvisoryRequest) -> MappingContext:
        return cls(
            difficulty=request.difficulty,
            pot=request.pot_size,
            last_bet_size=request.player_bet_size,
        )

    @property
    def effective_pot(self) -> int:
        return self.pot or DEFAULT_POT

    def is_small_bet(self, fraction: float) -> bool:
        """Last bet below the given fraction of the pot."""
        return self.last_bet_size < self.effective_pot * fraction


@dataclass
class ConcreteAction:
    """A bot action ready to hand to the engine."""
    bot_index: int
    action: ActionKind
    confidence: float
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "botIndex": self.bot_index,
            "action": self.action.value,
            "confidence": self.confidence,
            "fallback": self.fallback,
        }


class IntentMapper:
    """
    Maps strategic intent onto legal actions.

    The returned action is always a member of the bot's legal set (the only
    exception is an empty legal set, which maps to CALL).
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def map_intent(
        self,
        intent: StrategicIntent,
        situations: Sequence[BotSituation],
        context: MappingContext,
    ) -> List[ConcreteAction]:
        """Map every bot entry of a validated intent."""
        return [
            self.map_bot_action(
                bot_action.action, bot_action.confidence,
                situations[bot_action.bot_index], context,
            )
            for bot_action in intent.bot_actions
        ]

    def map_bot_action(
        self,
        bias: ActionKind,
        confidence: float,
        situation: BotSituation,
        context: MappingContext,
    ) -> ConcreteAction:
        """
        Resolve one bias into a legal action.

        Degradation table for an illegal bias:
        - raise: call when affordable (HARD keeps more confidence), otherwise
          fold, though HARD may still call a bet under half the pot
        - call: fold
        - fold: HARD calls a bet under 0.4x pot; EASY calls with the
          advisor's confidence
        Anything else takes the first legal action at confidence 0.5.
        """
        index = situation.bot_index
        legal = situation.legal_actions

        if not legal:
            return ConcreteAction(index, ActionKind.CALL, FALLBACK_CONFIDENCE)

        if bias in legal:
            return ConcreteAction(index, bias, confidence)

        hard = context.difficulty == Difficulty.HARD
        can_call = ActionKind.CALL in legal
        can_fold = ActionKind.FOLD in legal

        if bias == ActionKind.RAISE:
            if can_call and situation.can_afford_call:
                if hard and self.rng.random() > 0.3:
                    return ConcreteAction(index, ActionKind.CALL, min(confidence, 0.9))
                return ConcreteAction(index, ActionKind.CALL, min(confidence, 0.8))
            if can_fold:
                if hard and can_call and context.is_small_bet(0.5) and self.rng.random() > 0.3:
                    return ConcreteAction(index, ActionKind.CALL, min(confidence, 0.7))
                return ConcreteAction(index, ActionKind.FOLD, max(confidence, 0.3))

        elif bias == ActionKind.CALL:
            if can_fold:
                return ConcreteAction(index, ActionKind.FOLD, max(confidence, 0.4))

        elif bias == ActionKind.FOLD:
            if can_call:
                if hard and context.is_small_bet(0.4):
                    return ConcreteAction(index, ActionKind.CALL, max(confidence, 0.6))
                if context.difficulty == Difficulty.EASY:
                    return ConcreteAction(index, ActionKind.CALL, confidence)

        return ConcreteAction(index, legal[0], FALLBACK_CONFIDENCE)

    def fallback_actions(self, situations: Sequence[BotSituation]) -> List[ConcreteAction]:
        """
        Safe policy used when no valid intent is available.

        Call if affordable, else fold. Exactly one action per bot, never a
        raise.
        """
        return [
            ConcreteAction(
                situation.bot_index,
                self._fallback_action(situation),
                FALLBACK_CONFIDENCE,
                fallback=True,
            )
            for situation in situations
        ]

    @staticmethod
    def _fallback_action(situation: BotSituation) -> ActionKind:
        legal = situation.legal_actions
        if ActionKind.CALL in legal and situation.can_afford_call:
            return ActionKind.CALL
        if ActionKind.FOLD in legal:
            return ActionKind.FOLD
        passive = [a for a in legal if a != ActionKind.RAISE]
        return passive[0] if passive else ActionKind.CALL
