"""
Base Advisor Interface for IntentPoker.

An advisor is the asynchronous collaborator that proposes strategy for the
bots. It receives a summarized ``AdvisoryRequest`` and returns the raw reply
text; parsing, validation and timeouts are handled by the coordinator.

Usage:
    class MyAdvisor(BaseAdvisor):
        async def advise(self, request):
            return '{"globalPlan": "trap", ...}'
"""

from abc import ABC, abstractmethod
from typing import Optional

from intentpoker.agents.intent import AdvisoryRequest


class BaseAdvisor(ABC):
    """
    Abstract base class for strategy advisors.

    This interface is designed to support:
    - Remote LLM advisors behind an OpenAI-compatible API
    - Local rule-based or random advisors for offline play

    Attributes:
        name: Human-readable name
    """

    def __init__(self, name: Optional[str] = None):
        """
        Initialize the advisor.

        Args:
            name: Optional human-readable name
        """
        self.name = name or self.__class__.__name__

    @abstractmethod
    async def advise(self, request: AdvisoryRequest) -> str:
        """
        Produce a strategic intent for the request.

        Args:
            request: Summarized game state

        Returns:
            Raw reply text expected to hold one JSON intent object

        Raises:
            AdvisoryFailure: The advisor could not produce a reply
        """
        pass

    async def aclose(self) -> None:
        """
        Release any resources held by the advisor.

        Override this method if your advisor keeps connections open.
        """
        pass

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}({self.name})"
