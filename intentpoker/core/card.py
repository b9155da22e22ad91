"""
Card and Deck classes for the IntentPoker engine.

Ranks carry their poker value directly (2..14, Ace high) so the hand
evaluator can do arithmetic on them without a lookup table.
"""

from __future__ import annotations
import random
from typing import List, Optional
from enum import Enum, IntEnum

from intentpoker.core.errors import InsufficientCardsError


class Suit(Enum):
    """Card suits."""
    HEARTS = "hearts"
    DIAMONDS = "diamonds"
    CLUBS = "clubs"
    SPADES = "spades"


class Rank(IntEnum):
    """Card ranks valued 2 (lowest) to 14 (Ace)."""
    TWO = 2
    THREE = 3
    FOUR = 4
    FIVE = 5
    SIX = 6
    SEVEN = 7
    EIGHT = 8
    NINE = 9
    TEN = 10
    JACK = 11
    QUEEN = 12
    KING = 13
    ACE = 14


# Deck construction order
SUITS = (Suit.HEARTS, Suit.DIAMONDS, Suit.CLUBS, Suit.SPADES)

SUIT_SYMBOLS = {
    Suit.CLUBS: "♣",
    Suit.DIAMONDS: "♦",
    Suit.HEARTS: "♥",
    Suit.SPADES: "♠",
}

SUIT_CHARS = {
    Suit.CLUBS: "c",
    Suit.DIAMONDS: "d",
    Suit.HEARTS: "h",
    Suit.SPADES: "s",
}

RANK_CHARS = {
    Rank.TWO: "2",
    Rank.THREE: "3",
    Rank.FOUR: "4",
    Rank.FIVE: "5",
    Rank.SIX: "6",
    Rank.SEVEN: "7",
    Rank.EIGHT: "8",
    Rank.NINE: "9",
    Rank.TEN: "T",
    Rank.JACK: "J",
    Rank.QUEEN: "Q",
    Rank.KING: "K",
    Rank.ACE: "A",
}

# Reverse mappings
CHAR_TO_RANK = {v: k for k, v in RANK_CHARS.items()}
CHAR_TO_RANK["10"] = Rank.TEN  # Also accept "10"
CHAR_TO_SUIT = {v: k for k, v in SUIT_CHARS.items()}
SYMBOL_TO_SUIT = {v: k for k, v in SUIT_SYMBOLS.items()}
NAME_TO_SUIT = {s.value: s for s in Suit}


class Card:
    """
    An immutable playing card represented as (rank, suit).

    Cards can be created from:
    - Rank and Suit enums: Card(Rank.ACE, Suit.SPADES)
    - String notation: Card.from_string("As"), Card.from_string("A♠"),
      Card.from_string("10s")
    - A plain mapping: Card.from_dict({"rank": "A", "suit": "spades"})
    """

    __slots__ = ("rank", "suit")

    def __init__(self, rank: Rank, suit: Suit):
        object.__setattr__(self, "rank", Rank(rank))
        object.__setattr__(self, "suit", Suit(suit))

    def __setattr__(self, name, value):
        raise AttributeError("Card is immutable")

    def __delattr__(self, name):
        raise AttributeError("Card is immutable")

    @classmethod
    def from_string(cls, s: str) -> Card:
        """
        Create a card from string notation.

        Accepts formats:
        - "As", "Kh", "Td", "2c" (rank + suit char)
        - "A♠", "K♥", "T♦", "2♣" (rank + suit symbol)
        - "10h" (two-character ten)
        """
        s = s.strip()
        if len(s) < 2:
            raise ValueError(f"Invalid card string: {s}")

        if s[:2] == "10":
            rank_part, suit_part = "10", s[2:]
        else:
            rank_part, suit_part = s[0].upper(), s[1:]

        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")
        rank = CHAR_TO_RANK[rank_part]

        # Try suit char first, then symbol
        if suit_part.lower() in CHAR_TO_SUIT:
            suit = CHAR_TO_SUIT[suit_part.lower()]
        elif suit_part in SYMBOL_TO_SUIT:
            suit = SYMBOL_TO_SUIT[suit_part]
        else:
            raise ValueError(f"Invalid suit: {suit_part}")

        return cls(rank, suit)

    @classmethod
    def from_dict(cls, data: dict) -> Card:
        """Create a card from {"rank": "A", "suit": "hearts"}."""
        rank_part = str(data.get("rank", "")).upper()
        suit_part = str(data.get("suit", "")).lower()
        if rank_part not in CHAR_TO_RANK:
            raise ValueError(f"Invalid rank: {rank_part}")
        if suit_part not in NAME_TO_SUIT:
            raise ValueError(f"Invalid suit: {suit_part}")
        return cls(CHAR_TO_RANK[rank_part], NAME_TO_SUIT[suit_part])

    def to_int(self) -> int:
        """Return a dense index 0-51 (rank-major)."""
        return (int(self.rank) - 2) * 4 + SUITS.index(self.suit)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Card):
            return self.rank == other.rank and self.suit == other.suit
        return False

    def __hash__(self) -> int:
        return self.to_int()

    def __lt__(self, other: Card) -> bool:
        """Compare by rank only (for sorting)."""
        return self.rank < other.rank

    def __repr__(self) -> str:
        return f"Card({RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]})"

    def __str__(self) -> str:
        return f"{RANK_CHARS[self.rank]}{SUIT_SYMBOLS[self.suit]}"

    @property
    def short_str(self) -> str:
        """Short string like 'As', 'Kh'."""
        return f"{RANK_CHARS[self.rank]}{SUIT_CHARS[self.suit]}"

    @property
    def color(self) -> str:
        """Return 'red' for hearts/diamonds, 'black' for clubs/spades."""
        return "red" if self.suit in (Suit.HEARTS, Suit.DIAMONDS) else "black"

    def to_dict(self) -> dict:
        """Convert to dictionary for JSON serialization."""
        return {
            "rank": RANK_CHARS[self.rank],
            "suit": self.suit.value,
            "text": str(self),
            "color": self.color,
        }


class Deck:
    """
    A standard 52-card deck, dealt front to back.

    Usage:
        deck = Deck()
        hole_cards = deck.deal(2)
        deck.burn()
        flop = deck.deal(3)
    """

    SIZE = 52

    def __init__(self, shuffle: bool = True, rng: Optional[random.Random] = None):
        """Initialize a new deck, optionally shuffled with the given rng."""
        self._rng = rng or random.Random()
        self.reset()
        if shuffle:
            self.shuffle()

    def reset(self) -> None:
        """Reset the deck to a full 52 cards in canonical order."""
        self._cards: List[Card] = [
            Card(rank, suit)
            for suit in SUITS
            for rank in Rank
        ]
        self._dealt: List[Card] = []

    def shuffle(self) -> None:
        """Shuffle the remaining cards (Fisher-Yates via random.shuffle)."""
        self._rng.shuffle(self._cards)

    def require(self, n: int) -> None:
        """
        Ensure at least n cards remain.

        Raises:
            InsufficientCardsError: If fewer than n cards remain.
        """
        if n > len(self._cards):
            raise InsufficientCardsError(
                f"Cannot deal {n} cards, only {len(self._cards)} remain"
            )

    def deal(self, n: int = 1) -> List[Card]:
        """
        Deal n cards from the top of the deck.

        Raises:
            InsufficientCardsError: If not enough cards remain.
        """
        self.require(n)

        dealt = self._cards[:n]
        self._cards = self._cards[n:]
        self._dealt.extend(dealt)
        return dealt

    def deal_one(self) -> Card:
        """Deal a single card."""
        return self.deal(1)[0]

    def burn(self) -> Card:
        """Burn (discard) the top card."""
        return self.deal_one()

    @property
    def remaining(self) -> int:
        """Number of cards remaining in the deck."""
        return len(self._cards)

    @property
    def dealt_cards(self) -> List[Card]:
        """List of cards that have been dealt (including burns)."""
        return self._dealt.copy()

    def __len__(self) -> int:
        return len(self._cards)

    def __repr__(self) -> str:
        return f"Deck({self.remaining} cards remaining)"


def parse_cards(cards_str: str) -> List[Card]:
    """
    Parse multiple cards from a string.

    Accepts formats:
    - "As Kh Td" (space-separated)
    - "AsKhTd" (no separator, 2 chars each)
    - "A♠ K♥ T♦" (with symbols)
    """
    cards_str = cards_str.strip()
    if not cards_str:
        return []

    if " " in cards_str:
        return [Card.from_string(s) for s in cards_str.split()]

    result = []
    i = 0
    while i < len(cards_str):
        if i + 1 < len(cards_str) and (
            cards_str[i + 1] in SYMBOL_TO_SUIT
            or cards_str[i + 1].lower() in CHAR_TO_SUIT
        ):
            result.append(Card.from_string(cards_str[i:i + 2]))
            i += 2
        else:
            raise ValueError(f"Cannot parse card at position {i}: {cards_str[i:]}")

    return result


def cards_to_string(cards: List[Card]) -> str:
    """Render cards as 'Ah, Ks'."""
    return ", ".join(card.short_str for card in cards)
