"""
Table session: one human against coordinated bots.

The human always acts first. Each human action is validated and applied,
then the advisory collaborator is consulted once and every bot still in the
hand responds in seat order. The engine stays the single writer; the only
await point is the advisory call.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Union
import logging

from intentpoker.agents.coordinator import StrategyCoordinator
from intentpoker.agents.intent import (
    DEFAULT_GLOBAL_PLAN, AdvisoryRequest, PlayerProfile, SharedBotState,
)
from intentpoker.agents.mapper import BotSituation
from intentpoker.core.card import Card
from intentpoker.core.game import ActionResult, HandState, HoldemEngine
from intentpoker.core.player import Actor
from intentpoker.core.rules import ActionKind, Street, classify_board_texture


logger = logging.getLogger(__name__)

# Action reported to the advisor at the start of a street
STREET_OPEN_ACTION = "check"


@dataclass
class BotOutcome:
    """What one bot did in response to the human."""
    bot_index: int
    action: ActionKind
    result: ActionResult
    confidence: float
    fallback: bool = False

    def to_dict(self) -> Dict[str, Any]:
        return {
            "bot_index": self.bot_index,
            "action": self.action.value,
            "amount": self.result.amount,
            "remaining_stack": self.result.remaining_stack,
            "confidence": self.confidence,
            "fallback": self.fallback,
        }


class TableSession:
    """
    Drives a hand from human actions to bot responses.

    Usage:
        session = TableSession(coordinator=StrategyCoordinator(RandomAdvisor()))
        session.setup(bots, human)
        outcomes = await session.process_human_action("raise", 40)
    """

    def __init__(
        self,
        engine: Optional[HoldemEngine] = None,
        coordinator: Optional[StrategyCoordinator] = None,
    ):
        self.engine = engine or HoldemEngine()
        self.coordinator = coordinator or StrategyCoordinator()
        self.last_global_plan = DEFAULT_GLOBAL_PLAN
        self.player_folded_to_pressure = False

    def setup(
        self,
        bot_players: Sequence[Mapping[str, Any]],
        human_player: Mapping[str, Any],
    ) -> None:
        """Seat the table and deal the first hand."""
        self.engine.initialize_game(bot_players, human_player)
        self.last_global_plan = DEFAULT_GLOBAL_PLAN
        self.player_folded_to_pressure = False

    def start_hand(self) -> HandState:
        return self.engine.reset_hand()

    async def start_street(
        self,
        street: Union[Street, str],
        board_so_far: Optional[Sequence[Card]] = None,
    ) -> HandState:
        """
        Begin a street and ask the advisor for the round's plan.

        A failed advisory call keeps the previous plan.
        """
        state = self.engine.begin_street(street, board_so_far)
        request = self.build_advisory_request(STREET_OPEN_ACTION, 0)
        intent = await self.coordinator.request_intent(request)
        if intent is not None:
            self.last_global_plan = intent.global_plan
        return state

    async def process_human_action(
        self,
        action: Union[ActionKind, str],
        amount: int = 0,
    ) -> List[BotOutcome]:
        """
        Apply the human's action and let every bot respond.

        Raises:
            IllegalActionError: The human's action is rejected; nothing changes
        """
        human = self.engine.human
        kind = self.engine.ensure_valid(human, action, amount)
        facing_bet = self.engine.call_amount(human) > 0

        result = self.engine.apply_action(human, kind, amount)
        if kind == ActionKind.FOLD and facing_bet:
            self.player_folded_to_pressure = True

        if self.engine.hand_complete():
            return []
        return await self.respond_to(kind, result.amount)

    async def respond_to(self, player_action: ActionKind, player_bet_size: int) -> List[BotOutcome]:
        """Resolve and apply one action for every bot still in the hand."""
        request = self.build_advisory_request(player_action.value, player_bet_size)
        resolution = await self.coordinator.resolve(request, self.bot_situations())
        if resolution.intent is not None:
            self.last_global_plan = resolution.intent.global_plan

        outcomes = []
        for concrete in resolution.actions:
            if self.engine.hand_complete():
                break
            if not 0 <= concrete.bot_index < len(self.engine.bots):
                continue
            bot = self.engine.bots[concrete.bot_index]
            if not bot.in_hand:
                continue

            amount = self.raise_size(bot) if concrete.action == ActionKind.RAISE else 0
            validation = self.engine.validate_action(bot, concrete.action, amount)
            if validation.valid:
                outcome = BotOutcome(
                    concrete.bot_index, concrete.action,
                    self.engine.apply_action(bot, concrete.action, amount),
                    concrete.confidence, concrete.fallback,
                )
            else:
                fallback = self.engine.fallback_action(bot)
                logger.info(
                    f"Bot {concrete.bot_index} {concrete.action.value} rejected "
                    f"({validation.message}), playing {fallback.value}"
                )
                outcome = BotOutcome(
                    concrete.bot_index, fallback,
                    self.engine.apply_action(bot, fallback),
                    0.5, fallback=True,
                )
            outcomes.append(outcome)

        return outcomes

    def raise_size(self, bot: Actor) -> int:
        """Chips a bot raise moves: match the bet, then add the minimum raise."""
        return self.engine.call_amount(bot) + self.engine.minimum_raise()

    def bot_situations(self) -> List[BotSituation]:
        return [
            BotSituation(
                bot_index=index,
                legal_actions=self.engine.legal_actions(bot),
                stack=bot.stack,
                call_amount=self.engine.call_amount(bot),
            )
            for index, bot in enumerate(self.engine.bots)
        ]

    def build_advisory_request(self, player_action: str, player_bet_size: int) -> AdvisoryRequest:
        """Summarize the table for the advisor. No hidden cards are included."""
        engine = self.engine
        human = engine.human
        return AdvisoryRequest(
            difficulty=human.difficulty,
            round=engine.street,
            pot_size=engine.pot,
            player_action=player_action,
            player_bet_size=player_bet_size,
            player_stack=human.stack,
            player_position=human.position,
            player_profile=PlayerProfile(**human.profile),
            board_texture=classify_board_texture(engine.board),
            bot_stacks=[bot.stack for bot in engine.bots],
            bot_positions=[bot.position for bot in engine.bots],
            shared_bot_state=SharedBotState(
                last_global_plan=self.last_global_plan,
                player_folded_to_pressure=self.player_folded_to_pressure,
            ),
            legal_actions=engine.legal_actions(),
        )

    def settle(self) -> List[Dict[str, Any]]:
        return self.engine.settle_hand()

    def get_state(self) -> Dict[str, Any]:
        state = self.engine.get_state()
        state["global_plan"] = self.last_global_plan
        state["player_folded_to_pressure"] = self.player_folded_to_pressure
        return state
