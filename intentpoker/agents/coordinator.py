"""
Strategy coordination for the bots.

The coordinator asks an advisor for a strategic intent, bounds the wait with
a timeout, validates the reply and maps it onto legal actions. Any failure
(timeout, transport error, malformed or illegal payload) degrades to the
mapper's fallback policy; ``resolve`` never raises.
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence
import asyncio
import logging
import time

from intentpoker.agents.base import BaseAdvisor
from intentpoker.agents.intent import AdvisoryRequest, StrategicIntent, parse_intent
from intentpoker.agents.mapper import (
    BotSituation, ConcreteAction, IntentMapper, MappingContext,
)
from intentpoker.config import DEFAULT_TIMEOUT
from intentpoker.core.errors import AdvisoryFailure


logger = logging.getLogger(__name__)


@dataclass
class AdvisorMetrics:
    """Request counters; times are in milliseconds."""
    total_requests: int = 0
    successful_requests: int = 0
    failed_requests: int = 0
    average_response_time: float = 0.0
    last_request_time: float = 0.0

    def record_success(self, elapsed_ms: float) -> None:
        self.successful_requests += 1
        self.last_request_time = elapsed_ms
        n = self.successful_requests
        self.average_response_time = (self.average_response_time * (n - 1) + elapsed_ms) / n

    def record_failure(self) -> None:
        self.failed_requests += 1

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalRequests": self.total_requests,
            "successfulRequests": self.successful_requests,
            "failedRequests": self.failed_requests,
            "averageResponseTime": self.average_response_time,
            "lastRequestTime": self.last_request_time,
        }


@dataclass
class Resolution:
    """Bot actions for one decision and the intent they came from."""
    actions: List[ConcreteAction]
    intent: Optional[StrategicIntent] = None

    @property
    def used_fallback(self) -> bool:
        return self.intent is None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "actions": [action.to_dict() for action in self.actions],
            "intent": self.intent.to_payload() if self.intent else None,
            "usedFallback": self.used_fallback,
        }


class StrategyCoordinator:
    """
    Turns advisor replies into bot actions.

    Usage:
        coordinator = StrategyCoordinator(LLMAdvisor(), IntentMapper())
        resolution = await coordinator.resolve(request, situations)
    """

    def __init__(
        self,
        advisor: Optional[BaseAdvisor] = None,
        mapper: Optional[IntentMapper] = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Args:
            advisor: Intent source; None always plays the fallback policy
            mapper: Intent-to-action mapper
            timeout: Seconds to wait for the advisor
        """
        self.advisor = advisor
        self.mapper = mapper or IntentMapper()
        self.timeout = timeout
        self.metrics = AdvisorMetrics()
        self.last_intent: Optional[StrategicIntent] = None

    async def request_intent(self, request: AdvisoryRequest) -> Optional[StrategicIntent]:
        """
        Ask the advisor for a validated intent.

        Returns:
            The intent, or None when the advisor failed in any way
        """
        if self.advisor is None:
            return None

        self.metrics.total_requests += 1
        start = time.monotonic()
        task = asyncio.ensure_future(self.advisor.advise(request))

        try:
            raw = await asyncio.wait_for(asyncio.shield(task), timeout=self.timeout)
            intent = parse_intent(raw, request)
        except asyncio.TimeoutError:
            # The reply may still arrive; it is ignored
            task.add_done_callback(_discard_result)
            self.metrics.record_failure()
            logger.error(f"Advisory request timed out after {self.timeout}s")
            return None
        except AdvisoryFailure as e:
            self.metrics.record_failure()
            logger.warning(f"Advisory reply rejected: {e}")
            return None
        except Exception as e:
            self.metrics.record_failure()
            logger.exception(f"Advisor {self.advisor.name} failed: {e}")
            return None

        self.metrics.record_success((time.monotonic() - start) * 1000)
        self.last_intent = intent
        logger.info(f"Advisor chose plan {intent.global_plan}")
        return intent

    async def resolve(
        self,
        request: AdvisoryRequest,
        situations: Sequence[BotSituation],
    ) -> Resolution:
        """
        Produce one legal action per bot.

        Falls back to the safe policy whenever no valid intent is available.
        """
        intent = await self.request_intent(request)
        if intent is None:
            logger.info("Using fallback bot actions")
            return Resolution(self.mapper.fallback_actions(situations))

        context = MappingContext.from_request(request)
        return Resolution(self.mapper.map_intent(intent, situations, context), intent)

    def get_metrics(self) -> Dict[str, Any]:
        return self.metrics.to_dict()

    def reset_metrics(self) -> None:
        self.metrics = AdvisorMetrics()

    async def aclose(self) -> None:
        if self.advisor is not None:
            await self.advisor.aclose()


def _discard_result(task: asyncio.Future) -> None:
    if not task.cancelled():
        task.exception()
