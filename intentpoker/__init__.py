"""
IntentPoker - Hold'em Engine Driven by Strategic Intent

A single-table Texas Hold'em engine for one human against coordinated bots:
- Pure Python hand evaluation and betting state machine
- Advisory layer that turns an LLM's strategic intent into legal bot actions
- FastAPI server for a UI or CLI front end

Usage:
    from intentpoker.core import Card, Deck, HoldemEngine
    from intentpoker.agents import StrategyCoordinator, IntentMapper
    from intentpoker.session import TableSession
"""

__version__ = "0.1.0"

from intentpoker.core.card import Card, Deck
from intentpoker.core.player import Actor
from intentpoker.core.game import HoldemEngine
from intentpoker.core.hand import HandCategory, evaluate_hand

__all__ = [
    "Card",
    "Deck",
    "Actor",
    "HoldemEngine",
    "HandCategory",
    "evaluate_hand",
    "__version__",
]
