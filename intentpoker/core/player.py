"""
Actor class for the IntentPoker engine.

An actor is either the human player or a bot. Actors persist across hands;
only their per-hand and per-street fields are reset.

Manages:
- Stack (chip count)
- Hole cards
- Bet in the current street and total contributed this hand
- Folded / active flags
"""

from __future__ import annotations
from typing import List, Optional, Dict, Any
from dataclasses import dataclass, field

from intentpoker.core.card import Card
from intentpoker.core.rules import Difficulty


@dataclass
class Actor:
    """
    A seat at the table.

    Attributes:
        actor_id: Unique identifier ("human" or the bot index as a string)
        name: Display name
        stack: Current chip count
        position: Table position label ("BTN", "SB", "BOT_0", ...)
        is_bot: True for bots, False for the human
        hole_cards: The actor's private cards
        current_bet: Amount committed in the current street
        total_contributed: Amount committed this hand (sums to the pot)
        folded: Has folded this hand
        active: Still able to act this hand
    """
    actor_id: str
    name: str
    stack: int
    position: str = ""
    is_bot: bool = True
    hole_cards: List[Card] = field(default_factory=list)
    current_bet: int = 0
    total_contributed: int = 0
    folded: bool = False
    active: bool = True

    # Human-only settings, ignored for bots
    difficulty: Difficulty = Difficulty.NORMAL
    aggression: float = 0.5
    tightness: float = 0.5
    bluffing: float = 0.3

    last_action: Optional[str] = None

    def reset_for_new_hand(self) -> None:
        """Reset per-hand state."""
        self.hole_cards = []
        self.current_bet = 0
        self.total_contributed = 0
        self.folded = False
        self.active = True
        self.last_action = None

    def reset_for_new_street(self) -> None:
        """Reset per-street state (flop, turn, river)."""
        self.current_bet = 0

    def clear_contributions(self) -> None:
        """Zero the street bet and hand contribution once the pot is settled."""
        self.current_bet = 0
        self.total_contributed = 0

    def deal_cards(self, cards: List[Card]) -> None:
        """Deal hole cards to the actor."""
        self.hole_cards = list(cards)

    def commit(self, amount: int) -> int:
        """
        Move chips from the stack into the pot.

        Args:
            amount: Requested amount

        Returns:
            Amount actually moved (capped at the stack)
        """
        if amount <= 0:
            return 0

        actual = min(amount, self.stack)
        self.stack -= actual
        self.current_bet += actual
        self.total_contributed += actual
        return actual

    def fold(self) -> None:
        """Fold the hand. A folded actor is never active."""
        self.folded = True
        self.active = False
        self.last_action = "FOLD"

    @property
    def in_hand(self) -> bool:
        """Still contesting the pot."""
        return self.active and not self.folded

    @property
    def is_all_in(self) -> bool:
        return self.in_hand and self.stack == 0

    @property
    def profile(self) -> Dict[str, float]:
        """Behavioural profile sent to the advisory collaborator."""
        return {
            "aggression": self.aggression,
            "tightness": self.tightness,
            "bluffing": self.bluffing,
        }

    def to_dict(self, hide_cards: bool = True) -> Dict[str, Any]:
        """
        Convert to dictionary for JSON serialization.

        Args:
            hide_cards: If True, don't include hole cards
        """
        result = {
            "id": self.actor_id,
            "name": self.name,
            "position": self.position,
            "is_bot": self.is_bot,
            "stack": self.stack,
            "bet": self.current_bet,
            "total_contributed": self.total_contributed,
            "folded": self.folded,
            "active": self.active,
            "last_action": self.last_action,
        }

        if not hide_cards and self.hole_cards:
            result["cards"] = [card.to_dict() for card in self.hole_cards]

        return result

    def __repr__(self) -> str:
        return (
            f"Actor({self.actor_id}, stack={self.stack}, "
            f"bet={self.current_bet}, folded={self.folded})"
        )

    def __str__(self) -> str:
        cards_str = " ".join(str(c) for c in self.hole_cards) if self.hole_cards else "??"
        return f"{self.name} [{cards_str}] ${self.stack}"
