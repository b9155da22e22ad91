"""
IntentPoker Agents - Bot Strategy Layer

This module provides the advisor interface, the advisory payload models,
the intent-to-action mapper and the coordinator that ties them together.
"""

from intentpoker.agents.base import BaseAdvisor
from intentpoker.agents.coordinator import AdvisorMetrics, Resolution, StrategyCoordinator
from intentpoker.agents.intent import (
    AdvisoryRequest, BotIntent, PlayerProfile, SharedBotState, StrategicIntent,
    parse_intent, validate_intent,
)
from intentpoker.agents.llm_advisor import LLMAdvisor
from intentpoker.agents.mapper import (
    BotSituation, ConcreteAction, IntentMapper, MappingContext,
)
from intentpoker.agents.random_advisor import RandomAdvisor

__all__ = [
    "BaseAdvisor",
    "LLMAdvisor",
    "RandomAdvisor",
    "AdvisoryRequest",
    "PlayerProfile",
    "SharedBotState",
    "BotIntent",
    "StrategicIntent",
    "parse_intent",
    "validate_intent",
    "BotSituation",
    "ConcreteAction",
    "IntentMapper",
    "MappingContext",
    "AdvisorMetrics",
    "Resolution",
    "StrategyCoordinator",
]
