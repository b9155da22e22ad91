"""
Hand Evaluation for the IntentPoker engine.

Evaluates 2 hole cards plus up to 5 board cards into one of ten categories.
Detection runs over the combined card set rather than the best 5-card
subset, so a board with five cards of one suit makes a flush for everyone.

Hand Rankings (best to worst):
10. Royal Flush: A K Q J T of one suit
 9. Straight Flush: 5 consecutive cards of one suit
 8. Four of a Kind
 7. Full House: 3 of a kind + a separate pair
 6. Flush: 5 cards of one suit
 5. Straight: 5 consecutive ranks (A-2-3-4-5 wheel included)
 4. Three of a Kind
 3. Two Pair
 2. One Pair
 1. High Card

Hands are compared by category only. Two hands of the same category tie,
whatever their kickers.
"""

from __future__ import annotations
from collections import Counter
from dataclasses import dataclass, field
from enum import IntEnum
from typing import Dict, List, Optional, Sequence

from intentpoker.core.card import Card, Rank, Suit


class HandCategory(IntEnum):
    """Hand categories, higher value is better."""
    ROYAL_FLUSH = 10
    STRAIGHT_FLUSH = 9
    FOUR_OF_A_KIND = 8
    FULL_HOUSE = 7
    FLUSH = 6
    STRAIGHT = 5
    THREE_OF_A_KIND = 4
    TWO_PAIR = 3
    ONE_PAIR = 2
    HIGH_CARD = 1

    @property
    def key(self) -> str:
        """Snake-case identifier, e.g. 'royal_flush'."""
        return self.name.lower()


HAND_CATEGORY_NAMES = {
    HandCategory.ROYAL_FLUSH: "Royal Flush",
    HandCategory.STRAIGHT_FLUSH: "Straight Flush",
    HandCategory.FOUR_OF_A_KIND: "Four of a Kind",
    HandCategory.FULL_HOUSE: "Full House",
    HandCategory.FLUSH: "Flush",
    HandCategory.STRAIGHT: "Straight",
    HandCategory.THREE_OF_A_KIND: "Three of a Kind",
    HandCategory.TWO_PAIR: "Two Pair",
    HandCategory.ONE_PAIR: "One Pair",
    HandCategory.HIGH_CARD: "High Card",
}

# Value of an evaluation with fewer than 5 cards
INCOMPLETE_VALUE = 0
# Value given to folded hands when picking winners
FOLDED_VALUE = -1

WHEEL = (Rank.ACE, Rank.FIVE, Rank.FOUR, Rank.THREE, Rank.TWO)
ROYAL = (Rank.ACE, Rank.KING, Rank.QUEEN, Rank.JACK, Rank.TEN)


@dataclass(frozen=True)
class HandEvaluation:
    """Result of evaluating a hand."""
    category: HandCategory
    value: int
    description: str
    rank_counts: Dict[Rank, int] = field(default_factory=dict)
    suit_counts: Dict[Suit, int] = field(default_factory=dict)

    @property
    def is_complete(self) -> bool:
        return self.value != INCOMPLETE_VALUE

    def to_dict(self) -> dict:
        return {
            "category": self.category.key,
            "value": self.value,
            "description": self.description,
            "rank_counts": {int(r): c for r, c in self.rank_counts.items()},
            "suit_counts": {s.value: c for s, c in self.suit_counts.items()},
        }


def evaluate_hand(hole_cards: Sequence[Card], board: Sequence[Card] = ()) -> HandEvaluation:
    """
    Evaluate hole cards together with the board.

    Args:
        hole_cards: The actor's 2 hole cards
        board: 0-5 community cards

    Returns:
        HandEvaluation. With fewer than 5 cards in total the result is an
        incomplete high-card hand of value 0.
    """
    cards = list(hole_cards) + list(board)
    rank_counts = Counter(card.rank for card in cards)
    suit_counts = Counter(card.suit for card in cards)

    if len(cards) < 5:
        return HandEvaluation(
            HandCategory.HIGH_CARD, INCOMPLETE_VALUE, "Incomplete hand",
            dict(rank_counts), dict(suit_counts),
        )

    counts = sorted(rank_counts.values(), reverse=True)
    is_straight = _find_straight_high(card.rank for card in cards) is not None

    flush_suit = _find_flush_suit(suit_counts)
    straight_flush_high = None
    if flush_suit is not None:
        straight_flush_high = _find_straight_high(
            card.rank for card in cards if card.suit == flush_suit
        )

    if straight_flush_high == Rank.ACE:
        category = HandCategory.ROYAL_FLUSH
    elif straight_flush_high is not None:
        category = HandCategory.STRAIGHT_FLUSH
    elif counts[0] == 4:
        category = HandCategory.FOUR_OF_A_KIND
    elif counts[0] == 3 and len(counts) > 1 and counts[1] >= 2:
        category = HandCategory.FULL_HOUSE
    elif flush_suit is not None:
        category = HandCategory.FLUSH
    elif is_straight:
        category = HandCategory.STRAIGHT
    elif counts[0] == 3:
        category = HandCategory.THREE_OF_A_KIND
    elif counts[0] == 2 and counts[1] == 2:
        category = HandCategory.TWO_PAIR
    elif counts[0] == 2:
        category = HandCategory.ONE_PAIR
    else:
        category = HandCategory.HIGH_CARD

    return HandEvaluation(
        category, int(category), HAND_CATEGORY_NAMES[category],
        dict(rank_counts), dict(suit_counts),
    )


def _find_flush_suit(suit_counts: Counter) -> Optional[Suit]:
    """Return the suit with at least 5 cards, if any."""
    for suit, count in suit_counts.items():
        if count >= 5:
            return suit
    return None


def _find_straight_high(ranks) -> Optional[Rank]:
    """
    Find the highest straight among the given ranks.

    Returns:
        The top rank of the straight (FIVE for the wheel), or None
    """
    unique = sorted(set(ranks), reverse=True)

    for i in range(len(unique) - 4):
        window = unique[i:i + 5]
        if window[0] - window[4] == 4:
            return window[0]

    if all(rank in unique for rank in WHEEL):
        return Rank.FIVE

    return None


def compare_hands(
    hole_cards1: Sequence[Card],
    board: Sequence[Card],
    hole_cards2: Sequence[Card],
) -> int:
    """
    Compare two hands sharing a board.

    Returns:
        1 if the first hand wins, -1 if the second wins, 0 on a category tie
    """
    value1 = evaluate_hand(hole_cards1, board).value
    value2 = evaluate_hand(hole_cards2, board).value

    if value1 > value2:
        return 1
    if value1 < value2:
        return -1
    return 0


def determine_winners(hands: Sequence[dict], board: Sequence[Card]) -> List[int]:
    """
    Pick the winning hand indices.

    Args:
        hands: One entry per actor, each {"cards": [...], "active": bool}
        board: Shared community cards

    Returns:
        Indices of every hand sharing the best category value
    """
    if not hands:
        return []

    values = []
    for hand in hands:
        if not hand.get("active", True):
            values.append(FOLDED_VALUE)
        else:
            values.append(evaluate_hand(hand["cards"], board).value)

    best = max(values)
    return [i for i, value in enumerate(values) if value == best]


def get_hand_description(hole_cards: Sequence[Card], board: Sequence[Card] = ()) -> str:
    """Get a human-readable description of the hand."""
    return evaluate_hand(hole_cards, board).description
