"""
IntentPoker Game Engine - State Machine Implementation.

This module implements the betting/round state machine:
- Table setup with one human and one or more bots
- Street progression (preflop, flop, turn, river) with burn cards
- Action legality checks and application (fold, call, raise)
- Betting round and hand termination
- Pot settlement by hand category

The street/board/hand-number triple is held in an immutable ``HandState``
that is replaced on every transition. Chip state lives on the actors; the pot
is always the sum of what every actor contributed this hand.
"""

from __future__ import annotations
from dataclasses import dataclass, replace
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple, Union
import logging
import random

from intentpoker.core.card import Card, Deck
from intentpoker.core.errors import (
    ActionError, IllegalActionError, ValidationError,
)
from intentpoker.core.hand import determine_winners, evaluate_hand
from intentpoker.core.player import Actor
from intentpoker.core.rules import (
    ActionKind, Difficulty, Street,
    BOARD_BEFORE_STREET, BOARD_SIZE, STREET_CARDS, BURN_CARDS, HOLE_CARDS,
    DEFAULT_STACK, MAX_ACTORS,
    calculate_min_raise, clamp_stack, legal_action_set,
)


logger = logging.getLogger(__name__)

HUMAN_ID = "human"


@dataclass(frozen=True)
class HandState:
    """Immutable snapshot of where the hand is."""
    hand_number: int = 0
    street: Street = Street.PREFLOP
    board: Tuple[Card, ...] = ()
    finished: bool = False

    def advance(self, street: Street, board: Sequence[Card]) -> HandState:
        """Return the state for a new street."""
        return replace(self, street=street, board=tuple(board))

    def finish(self) -> HandState:
        return replace(self, finished=True)


@dataclass
class ValidationResult:
    """Outcome of an action legality check."""
    valid: bool
    message: str
    error: Optional[ActionError] = None

    def __bool__(self) -> bool:
        return self.valid


@dataclass
class ActionResult:
    """Result of applying an action."""
    success: bool
    action: Union[ActionKind, str]
    amount: int = 0
    remaining_stack: int = 0
    error: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        action = self.action.value if isinstance(self.action, ActionKind) else self.action
        result = {
            "success": self.success,
            "action": action,
            "amount": self.amount,
            "remaining_stack": self.remaining_stack,
        }
        if self.error:
            result["error"] = self.error
        return result


class HoldemEngine:
    """
    Single-table Hold'em state machine: one human against N bots.

    Usage:
        engine = HoldemEngine()
        engine.initialize_game(
            [{"name": "Bot1", "startingStack": 2000, "position": "SB"}],
            {"name": "Player", "startingStack": 2000, "difficulty": "HARD"},
        )
        result = engine.apply_action(engine.human, ActionKind.RAISE, 40)
        if engine.betting_round_complete():
            engine.begin_street(Street.FLOP)
    """

    def __init__(self, rng: Optional[random.Random] = None):
        """
        Args:
            rng: Randomness source for shuffling; seed it for reproducible decks
        """
        self.rng = rng or random.Random()
        self.human: Optional[Actor] = None
        self.bots: List[Actor] = []
        self.deck = Deck(shuffle=False, rng=self.rng)
        self.state = HandState()
        self.winners: List[Dict[str, Any]] = []
        self.event_log: List[Dict[str, Any]] = []

    # ------------------------------------------------------------------
    # Table setup
    # ------------------------------------------------------------------

    def initialize_game(
        self,
        bot_players: Sequence[Mapping[str, Any]],
        human_player: Mapping[str, Any],
    ) -> None:
        """
        Seat the bots and the human and start the first hand.

        Stacks are clamped into the legal range; a missing stack defaults to
        DEFAULT_STACK.

        Raises:
            ValidationError: No bots, no human, or more seats than one deck serves
        """
        if not isinstance(bot_players, (list, tuple)) or len(bot_players) == 0:
            raise ValidationError("At least one bot player is required")
        if not isinstance(human_player, Mapping):
            raise ValidationError("Valid human player object is required")
        if len(bot_players) + 1 > MAX_ACTORS:
            raise ValidationError(f"At most {MAX_ACTORS - 1} bots can be seated")

        bots = []
        for index, bot in enumerate(bot_players):
            if not isinstance(bot, Mapping):
                raise ValidationError(f"Bot {index} must be a mapping")
            bots.append(Actor(
                actor_id=str(index),
                name=bot.get("name") or f"Bot{index + 1}",
                stack=clamp_stack(_starting_stack(bot)),
                position=bot.get("position") or f"BOT_{index}",
                is_bot=True,
            ))

        profile = human_player.get("profile") or {}
        self.human = Actor(
            actor_id=HUMAN_ID,
            name=human_player.get("name") or "Player",
            stack=clamp_stack(_starting_stack(human_player)),
            position=human_player.get("position") or "BTN",
            is_bot=False,
            difficulty=Difficulty.parse(human_player.get("difficulty")),
            aggression=profile.get("aggression", 0.5),
            tightness=profile.get("tightness", 0.5),
            bluffing=profile.get("bluffing", 0.3),
        )
        self.bots = bots
        self.state = HandState()
        self.event_log = []

        self.reset_hand()
        self._log_event("Game initialized with players")
        logger.info(f"Seated human and {len(bots)} bots")

    def reset_hand(self) -> HandState:
        """
        Start a new hand: fresh shuffled deck, empty board, preflop.

        Per-hand actor fields are reset and two hole cards are dealt to
        every seat.

        Raises:
            ValidationError: The table has not been initialized
        """
        if self.human is None or not self.bots:
            raise ValidationError("Game needs one human and at least one bot")

        self.deck = Deck(shuffle=True, rng=self.rng)
        self._log_event(f"Deck created with {self.deck.remaining} cards and shuffled")
        self.winners = []

        for actor in self.actors:
            actor.reset_for_new_hand()
        for actor in self.actors:
            actor.deal_cards(self.deck.deal(HOLE_CARDS))

        self.state = HandState(hand_number=self.state.hand_number + 1)
        self._log_event("Round state reset for new hand")
        logger.info(f"Starting hand #{self.state.hand_number}")
        return self.state

    # ------------------------------------------------------------------
    # Read-only views
    # ------------------------------------------------------------------

    @property
    def actors(self) -> List[Actor]:
        """Human first, then bots in index order."""
        if self.human is None:
            return list(self.bots)
        return [self.human] + self.bots

    @property
    def street(self) -> Street:
        return self.state.street

    @property
    def board(self) -> List[Card]:
        return list(self.state.board)

    @property
    def pot(self) -> int:
        """Total chips contributed this hand."""
        return sum(actor.total_contributed for actor in self.actors)

    @property
    def contenders(self) -> List[Actor]:
        """Actors still contesting the pot."""
        return [actor for actor in self.actors if actor.in_hand]

    # ------------------------------------------------------------------
    # Street progression
    # ------------------------------------------------------------------

    def begin_street(
        self,
        street: Union[Street, str],
        board_so_far: Optional[Sequence[Card]] = None,
    ) -> HandState:
        """
        Move to a street.

        Burn and board cards are dealt when the board holds the cards the
        street expects (0 before the flop, 3 before the turn, 4 before the
        river). A board already dealt for the street restarts its betting
        without dealing. Every actor's street bet resets to 0.

        Args:
            street: Target street
            board_so_far: Board to start from (defaults to the current board)

        Raises:
            ValidationError: Unknown street, or a board that does not fit it
            InsufficientCardsError: Deck cannot cover burn + board cards
        """
        street = _parse_street(street)
        board = list(self.state.board if board_so_far is None else board_so_far)

        expected = BOARD_BEFORE_STREET.get(street)
        if len(board) != BOARD_SIZE[street] and len(board) != expected:
            raise ValidationError(
                f"Cannot start {street.value} with {len(board)} board cards"
            )

        if len(board) == expected:
            count = STREET_CARDS[street]
            self.deck.require(BURN_CARDS + count)
            self.deck.burn()
            board.extend(self.deck.deal(count))
            self._log_event(f"{street.value.capitalize()} dealt")

        for actor in self.actors:
            actor.reset_for_new_street()

        self.state = self.state.advance(street, board)
        self._log_event(
            f"Round {street.value} started with "
            f"{sum(1 for bot in self.bots if bot.in_hand)} active bots"
        )
        return self.state

    # ------------------------------------------------------------------
    # Betting
    # ------------------------------------------------------------------

    def legal_actions(self, actor: Optional[Actor] = None) -> List[ActionKind]:
        """
        Legal actions for an actor (the human when omitted).

        Always fold and call; raise only with chips behind.
        """
        actor = actor or self.human
        stack = actor.stack if actor is not None else 0
        return legal_action_set(stack)

    def call_amount(self, actor: Actor) -> int:
        """Chips the actor must add to match the highest unfolded street bet."""
        highest = max(
            (a.current_bet for a in self.actors if not a.folded),
            default=0,
        )
        return max(0, highest - actor.current_bet)

    def minimum_raise(self) -> int:
        """Twice the human's call amount, or the default when nothing is owed."""
        if self.human is None:
            return calculate_min_raise(0)
        return calculate_min_raise(self.call_amount(self.human))

    def validate_action(
        self,
        actor: Actor,
        action: Union[ActionKind, str],
        amount: int = 0,
    ) -> ValidationResult:
        """
        Check whether an action is legal for the actor.

        Calls are always valid for an active actor, including an all-in call
        for less than the full amount owed.
        """
        if not actor.active or actor.folded:
            return ValidationResult(
                False, "Player is not active or has folded", ActionError.INVALID_ACTOR
            )

        legal = self.legal_actions(actor)
        kind = ActionKind.parse(action)
        if kind is None or kind not in legal:
            names = ", ".join(a.value for a in legal)
            return ValidationResult(
                False, f"Invalid action: {action}. Legal actions: {names}",
                ActionError.ILLEGAL_ACTION,
            )

        if kind == ActionKind.RAISE:
            if isinstance(amount, bool) or not isinstance(amount, (int, float)) or amount <= 0:
                return ValidationResult(
                    False, "Raise amount must be a positive number",
                    ActionError.ILLEGAL_ACTION,
                )
            if amount > actor.stack:
                return ValidationResult(
                    False,
                    f"Player does not have enough chips to raise {amount}. "
                    f"Current stack: {actor.stack}",
                    ActionError.INSUFFICIENT_FUNDS,
                )
            min_raise = self.minimum_raise()
            if amount < min_raise:
                return ValidationResult(
                    False, f"Raise amount must be at least {min_raise}",
                    ActionError.BELOW_MINIMUM,
                )

        if kind == ActionKind.CALL and actor.stack < self.call_amount(actor):
            return ValidationResult(True, "Player can go all-in")

        return ValidationResult(True, "Action is valid")

    def ensure_valid(
        self,
        actor: Actor,
        action: Union[ActionKind, str],
        amount: int = 0,
    ) -> ActionKind:
        """
        Validate and return the parsed action.

        Raises:
            IllegalActionError: The action is rejected
        """
        validation = self.validate_action(actor, action, amount)
        if not validation.valid:
            raise IllegalActionError(validation.message, validation.error)
        return ActionKind.parse(action)

    def apply_action(
        self,
        actor: Actor,
        action: Union[ActionKind, str],
        amount: int = 0,
    ) -> ActionResult:
        """
        Apply an action without validating it.

        A raise larger than the stack moves the whole stack (all-in). Call
        ``validate_action`` first when that must be rejected instead.
        Unknown actions and unusable raise amounts are reported in the
        result, never raised.
        """
        kind = ActionKind.parse(action)
        if kind is None:
            message = f"Unknown action: {action}"
            self._log_event(f"Error applying action {action}: {message}")
            logger.warning(message)
            return ActionResult(False, str(action), 0, actor.stack, error=message)

        try:
            if kind == ActionKind.FOLD:
                actor.fold()
                moved = 0
            elif kind == ActionKind.CALL:
                moved = actor.commit(self.call_amount(actor))
                actor.last_action = f"CALL ${moved}"
            else:
                moved = actor.commit(int(amount))
                actor.last_action = f"RAISE ${moved}"
        except (TypeError, ValueError, OverflowError) as e:
            self._log_event(f"Error applying action {kind.value}: {e}")
            logger.warning(f"Could not apply {kind.value} for {actor.name}: {e}")
            return ActionResult(False, kind, 0, actor.stack, error=str(e))

        if actor.stack == 0 and kind != ActionKind.FOLD:
            actor.last_action = f"ALL-IN ${actor.total_contributed}"

        self._log_event(f"{actor.name} {kind.value} with amount {moved}")
        return ActionResult(True, kind, moved, actor.stack)

    def fallback_action(self, actor: Actor) -> ActionKind:
        """Call if the actor can cover the call, otherwise fold."""
        if actor.stack >= self.call_amount(actor):
            return ActionKind.CALL
        return ActionKind.FOLD

    def betting_round_complete(self) -> bool:
        """
        Check if the current betting round is complete.

        Complete when any of these holds:
        1. At most one actor is still in the hand
        2. Every actor in the hand has the same street bet
        3. Every actor in the hand is at the highest bet or all-in
        """
        contenders = self.contenders
        if len(contenders) <= 1:
            return True

        bets = [actor.current_bet for actor in contenders]
        if len(set(bets)) == 1:
            return True

        highest = max(bets)
        return all(a.current_bet == highest or a.stack == 0 for a in contenders)

    def hand_complete(self) -> bool:
        """The hand is over once at most one actor is left in it."""
        return len(self.contenders) <= 1

    # ------------------------------------------------------------------
    # Settlement
    # ------------------------------------------------------------------

    def settle_hand(self) -> List[Dict[str, Any]]:
        """
        Award the pot and finish the hand.

        A lone remaining actor takes the pot without a showdown. Otherwise the
        board is run out and the pot is split evenly among every actor whose
        hand category ties for best; odd chips go to the earliest seats.

        Returns:
            Winner records with actor_id, amount, category and description
        """
        if self.state.finished:
            return self.winners

        pot = self.pot
        contenders = self.contenders

        if not contenders:
            # Nobody left to pay; return what each actor put in
            for actor in self.actors:
                actor.stack += actor.total_contributed
            self.winners = []
            self._log_event("Hand abandoned, contributions returned")
        elif len(contenders) == 1:
            winner = contenders[0]
            winner.stack += pot
            self.winners = [{
                "actor_id": winner.actor_id,
                "amount": pot,
                "category": "win_by_fold",
                "description": "All other players folded",
            }]
            self._log_event(f"{winner.name} wins {pot} uncontested")
        else:
            self._run_out_board()
            board = self.state.board
            indices = determine_winners(
                [{"cards": a.hole_cards, "active": a.in_hand} for a in self.actors],
                board,
            )
            winners = [self.actors[i] for i in indices]
            share, remainder = divmod(pot, len(winners))

            self.winners = []
            for i, winner in enumerate(winners):
                amount = share + (1 if i < remainder else 0)
                winner.stack += amount
                evaluation = evaluate_hand(winner.hole_cards, board)
                self.winners.append({
                    "actor_id": winner.actor_id,
                    "amount": amount,
                    "category": evaluation.category.key,
                    "description": evaluation.description,
                })
            self._log_event(
                "Showdown won by " + ", ".join(w.name for w in winners)
            )

        # The pot has been paid out
        for actor in self.actors:
            actor.clear_contributions()

        self.state = self.state.finish()
        return self.winners

    def _run_out_board(self) -> None:
        """Deal the remaining streets so a showdown sees five board cards."""
        for street in (Street.FLOP, Street.TURN, Street.RIVER):
            if len(self.state.board) == BOARD_BEFORE_STREET[street]:
                count = STREET_CARDS[street]
                self.deck.require(BURN_CARDS + count)
                self.deck.burn()
                board = self.board + self.deck.deal(count)
                self.state = self.state.advance(street, board)

    # ------------------------------------------------------------------
    # Snapshots and logging
    # ------------------------------------------------------------------

    def get_state(self) -> Dict[str, Any]:
        """
        Get the current game state.

        Hole cards are only included for the human.
        """
        return {
            "hand_number": self.state.hand_number,
            "street": self.state.street.value,
            "finished": self.state.finished,
            "pot": self.pot,
            "board": [card.to_dict() for card in self.state.board],
            "minimum_raise": self.minimum_raise(),
            "betting_round_complete": self.betting_round_complete(),
            "hand_complete": self.hand_complete(),
            "human": self.human.to_dict(hide_cards=False) if self.human else None,
            "bots": [bot.to_dict() for bot in self.bots],
            "winners": list(self.winners),
        }

    def get_event_log(self) -> List[Dict[str, Any]]:
        """Return a copy of the event log."""
        return list(self.event_log)

    def _log_event(self, event: str) -> None:
        self.event_log.append({
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "event": event,
            "street": self.state.street.value,
            "pot": self.pot,
        })
        logger.debug(event)


def _starting_stack(player: Mapping[str, Any]):
    for key in ("startingStack", "starting_stack", "stack"):
        if key in player:
            return player[key]
    return DEFAULT_STACK


def _parse_street(street: Union[Street, str]) -> Street:
    if isinstance(street, Street):
        return street
    try:
        return Street(str(street).lower())
    except ValueError:
        names = ", ".join(s.value for s in Street)
        raise ValidationError(f"Invalid round: {street}. Must be one of: {names}")
