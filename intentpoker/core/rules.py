"""
Table rules and constants for the IntentPoker engine.

This is a deliberately simplified rule set:

1. Every actor may fold, call or raise. There is no separate check;
   a call for 0 chips plays as a check.

2. Minimum raise: twice the human's outstanding call amount, or a fixed
   small amount when nothing is owed. Standard rules track the size of the
   last full raise instead.

3. Street transitions burn one card before dealing board cards.

4. Every actor's street bet resets to 0 at the start of each street,
   preflop included.
"""

from __future__ import annotations
import math
from enum import Enum
from typing import List, Optional, Sequence, TYPE_CHECKING

if TYPE_CHECKING:
    from intentpoker.core.card import Card


class Street(Enum):
    """Betting phases of a hand."""
    PREFLOP = "preflop"
    FLOP = "flop"
    TURN = "turn"
    RIVER = "river"


class ActionKind(Enum):
    """Actions an actor can take."""
    FOLD = "fold"
    CALL = "call"
    RAISE = "raise"

    @classmethod
    def parse(cls, value) -> Optional[ActionKind]:
        """Resolve an ActionKind or a case-insensitive string; None if unknown."""
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                return None
        return None


class Difficulty(Enum):
    """Bot difficulty tiers."""
    EASY = "EASY"
    NORMAL = "NORMAL"
    HARD = "HARD"

    @classmethod
    def parse(cls, value, default: Optional[Difficulty] = None) -> Difficulty:
        if isinstance(value, cls):
            return value
        try:
            return cls(str(value).upper())
        except ValueError:
            return default or cls.NORMAL


class BoardTexture(Enum):
    """Coarse board classification sent to the advisory collaborator."""
    UNKNOWN = "unknown"
    WET = "wet"
    DRY = "dry"


# Stack bounds
MIN_STACK = 100
MAX_STACK = 1_000_000
DEFAULT_STACK = 2000

# Raise applied when no bet is outstanding
DEFAULT_MIN_RAISE = 10

# Cards per phase
HOLE_CARDS = 2
FLOP_CARDS = 3
TURN_CARDS = 1
RIVER_CARDS = 1
BURN_CARDS = 1
TOTAL_COMMUNITY_CARDS = 5

# Most seats a single deck can serve: hole cards + 3 burns + 5 board <= 52
MAX_ACTORS = (52 - 3 * BURN_CARDS - TOTAL_COMMUNITY_CARDS) // HOLE_CARDS

# Board length that must already be present before a street deals its cards
BOARD_BEFORE_STREET = {
    Street.FLOP: 0,
    Street.TURN: 3,
    Street.RIVER: 4,
}

# Cards dealt onto the board by each street
STREET_CARDS = {
    Street.FLOP: FLOP_CARDS,
    Street.TURN: TURN_CARDS,
    Street.RIVER: RIVER_CARDS,
}

# Board length once the street has been dealt
BOARD_SIZE = {
    Street.PREFLOP: 0,
    Street.FLOP: 3,
    Street.TURN: 4,
    Street.RIVER: 5,
}

# Largest rank gap that still counts as straight-supporting
STRAIGHT_GAP = 4


def clamp_stack(stack) -> int:
    """
    Clamp a starting stack into [MIN_STACK, MAX_STACK] and floor it.

    Non-numeric and NaN input falls back to MIN_STACK.
    """
    if isinstance(stack, bool) or not isinstance(stack, (int, float)):
        return MIN_STACK
    if isinstance(stack, float) and math.isnan(stack):
        return MIN_STACK
    if stack < MIN_STACK:
        return MIN_STACK
    if stack > MAX_STACK:
        return MAX_STACK
    return int(math.floor(stack))


def calculate_min_raise(reference_call_amount: int) -> int:
    """
    Calculate the minimum raise.

    Args:
        reference_call_amount: What the reference (human) actor owes

    Returns:
        Twice the reference call amount, or DEFAULT_MIN_RAISE with nothing owed
    """
    if reference_call_amount > 0:
        return reference_call_amount * 2
    return DEFAULT_MIN_RAISE


def legal_action_set(stack: int) -> List[ActionKind]:
    """Legal actions for an actor with the given stack, in canonical order."""
    actions = [ActionKind.FOLD, ActionKind.CALL]
    if stack > 0:
        actions.append(ActionKind.RAISE)
    return actions


def classify_board_texture(board: Sequence["Card"]) -> BoardTexture:
    """
    Classify the board for the advisory request.

    Preflop (fewer than 3 cards) is unknown. Otherwise the board is wet when
    two adjacent unique ranks sit within STRAIGHT_GAP of each other or any
    suit appears at least twice, and dry if neither holds.
    """
    if len(board) < FLOP_CARDS:
        return BoardTexture.UNKNOWN

    ranks = sorted({int(card.rank) for card in board})
    straight_draw = any(
        high - low <= STRAIGHT_GAP for low, high in zip(ranks, ranks[1:])
    )

    suit_counts = {}
    for card in board:
        suit_counts[card.suit] = suit_counts.get(card.suit, 0) + 1
    flush_possible = max(suit_counts.values()) >= 2

    if straight_draw or flush_possible:
        return BoardTexture.WET
    return BoardTexture.DRY


def next_street(street: Street) -> Optional[Street]:
    """The street after the given one, or None after the river."""
    order = list(Street)
    index = order.index(street)
    if index + 1 < len(order):
        return order[index + 1]
    return None
