"""
Pytest configuration and shared fixtures for IntentPoker tests.
"""

import asyncio
import json
import random

import pytest

from intentpoker.agents.base import BaseAdvisor
from intentpoker.agents.intent import AdvisoryRequest
from intentpoker.core.card import Card, Deck, Rank, Suit
from intentpoker.core.game import HoldemEngine
from intentpoker.core.player import Actor
from intentpoker.core.rules import ActionKind, Difficulty, Street


class StaticAdvisor(BaseAdvisor):
    """Advisor that replies with a fixed payload (or raises a fixed error)."""

    def __init__(self, reply=None, error=None, delay=0.0):
        super().__init__("static")
        self.reply = reply
        self.error = error
        self.delay = delay
        self.requests = []
        self.completed = 0

    async def advise(self, request):
        self.requests.append(request)
        if self.delay:
            await asyncio.sleep(self.delay)
        self.completed += 1
        if self.error is not None:
            raise self.error
        if isinstance(self.reply, dict):
            return json.dumps(self.reply)
        return self.reply


def make_intent(biases, plan="pressure", confidence=0.8):
    """Build an intent payload with one bias per bot."""
    return {
        "globalPlan": plan,
        "aggression": 0.6,
        "bluffFrequency": 0.2,
        "coordination": 0.7,
        "botActions": [
            {"botIndex": i, "actionBias": bias, "confidence": confidence}
            for i, bias in enumerate(biases)
        ],
    }


def make_request(bot_count=2, legal=("fold", "call", "raise"), **overrides):
    """Build a minimal advisory request."""
    data = {
        "difficulty": Difficulty.NORMAL,
        "round": Street.PREFLOP,
        "potSize": 0,
        "playerAction": "call",
        "botStacks": [2000] * bot_count,
        "botPositions": [f"BOT_{i}" for i in range(bot_count)],
        "legalActions": [ActionKind(a) for a in legal],
    }
    data.update(overrides)
    return AdvisoryRequest(**data)


@pytest.fixture
def deck():
    """Create a fresh shuffled deck."""
    return Deck(shuffle=True, rng=random.Random(7))


@pytest.fixture
def unshuffled_deck():
    """Create a fresh unshuffled deck."""
    return Deck(shuffle=False)


@pytest.fixture
def sample_actor():
    """Create a sample bot with 1000 chips."""
    return Actor(actor_id="0", name="Bot1", stack=1000)


@pytest.fixture
def engine():
    """Engine with one human and two bots, 2000 chips each."""
    game = HoldemEngine(rng=random.Random(42))
    game.initialize_game(
        [
            {"name": "Bot1", "startingStack": 2000, "position": "SB"},
            {"name": "Bot2", "startingStack": 2000, "position": "BB"},
        ],
        {"name": "Player", "startingStack": 2000, "difficulty": "NORMAL"},
    )
    return game


@pytest.fixture
def heads_up_engine():
    """Engine with one human and one bot."""
    game = HoldemEngine(rng=random.Random(3))
    game.initialize_game(
        [{"name": "Bot1", "startingStack": 1000}],
        {"name": "Player", "startingStack": 1000},
    )
    return game


@pytest.fixture
def royal_flush():
    """Create a royal flush hand."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.KING, Suit.SPADES),
        Card(Rank.QUEEN, Suit.SPADES),
        Card(Rank.JACK, Suit.SPADES),
        Card(Rank.TEN, Suit.SPADES),
    ]


@pytest.fixture
def straight_flush():
    """Create a straight flush (9-high)."""
    return [
        Card(Rank.NINE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.HEARTS),
        Card(Rank.SEVEN, Suit.HEARTS),
        Card(Rank.SIX, Suit.HEARTS),
        Card(Rank.FIVE, Suit.HEARTS),
    ]


@pytest.fixture
def wheel_straight():
    """Create a wheel straight (A-2-3-4-5)."""
    return [
        Card(Rank.ACE, Suit.SPADES),
        Card(Rank.TWO, Suit.HEARTS),
        Card(Rank.THREE, Suit.DIAMONDS),
        Card(Rank.FOUR, Suit.CLUBS),
        Card(Rank.FIVE, Suit.SPADES),
    ]


@pytest.fixture
def intent_payload():
    """Factory for intent payloads."""
    return make_intent


@pytest.fixture
def advisory_request():
    """Factory for advisory requests."""
    return make_request


@pytest.fixture
def static_advisor():
    """Factory for advisors with a canned reply."""
    return StaticAdvisor
