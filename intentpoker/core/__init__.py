"""
IntentPoker Core - Pure Python Hold'em Game Logic

This module contains the card model, hand evaluator and betting state
machine without any network dependencies.
"""

from intentpoker.core.card import Card, Deck, Rank, Suit
from intentpoker.core.errors import (
    ActionError, AdvisoryFailure, IllegalActionError,
    InsufficientCardsError, PokerError, ValidationError,
)
from intentpoker.core.hand import HandCategory, HandEvaluation, evaluate_hand
from intentpoker.core.player import Actor
from intentpoker.core.rules import ActionKind, BoardTexture, Difficulty, Street
from intentpoker.core.game import HoldemEngine, HandState, ActionResult, ValidationResult

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "Actor",
    "HandCategory",
    "HandEvaluation",
    "evaluate_hand",
    "HoldemEngine",
    "HandState",
    "ActionResult",
    "ValidationResult",
    "ActionKind",
    "BoardTexture",
    "Difficulty",
    "Street",
    "ActionError",
    "AdvisoryFailure",
    "IllegalActionError",
    "InsufficientCardsError",
    "PokerError",
    "ValidationError",
]
