"""
Exception types raised by the IntentPoker engine.

Rejections of player actions are normally reported through result records
(see ``ValidationResult`` and ``ActionResult`` in ``game.py``). The exceptions
here are for callers that want a hard failure instead.
"""

from __future__ import annotations
from enum import Enum
from typing import Optional


class ActionError(Enum):
    """Reasons an action can be rejected."""
    INVALID_ACTOR = "INVALID_ACTOR"            # folded or inactive
    ILLEGAL_ACTION = "ILLEGAL_ACTION"          # not in the legal set
    INSUFFICIENT_FUNDS = "INSUFFICIENT_FUNDS"  # raise larger than stack
    BELOW_MINIMUM = "BELOW_MINIMUM"            # raise smaller than min raise


class PokerError(Exception):
    """Base class for all engine errors."""


class ValidationError(PokerError, ValueError):
    """Malformed initialization input (missing actors, bad street, ...)."""


class IllegalActionError(PokerError):
    """An action was rejected. State is unchanged."""

    def __init__(self, message: str, kind: Optional[ActionError] = None):
        super().__init__(message)
        self.kind = kind or ActionError.ILLEGAL_ACTION


class InsufficientCardsError(PokerError):
    """The deck ran out mid-deal. The current hand must be abandoned."""


class AdvisoryFailure(PokerError):
    """The advisory collaborator timed out or returned an invalid payload."""
