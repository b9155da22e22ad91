"""
Pydantic schemas for API request/response validation.
"""

from typing import List, Optional, Dict, Any
from pydantic import BaseModel, ConfigDict, Field


# ============= Request Schemas =============

class BotSeatSchema(BaseModel):
    """A bot seat at table setup."""
    model_config = ConfigDict(populate_by_name=True)

    name: Optional[str] = None
    starting_stack: Optional[float] = Field(default=None, alias="startingStack")
    position: Optional[str] = None


class HumanSeatSchema(BotSeatSchema):
    """The human seat; difficulty sets how hard the bots play."""
    difficulty: str = Field(default="NORMAL", description="EASY, NORMAL or HARD")
    profile: Optional[Dict[str, float]] = None


class InitGameRequest(BaseModel):
    """Request to initialize a game."""
    bots: List[BotSeatSchema] = Field(min_length=1)
    human: HumanSeatSchema = Field(default_factory=HumanSeatSchema)


class NextStreetRequest(BaseModel):
    """Request to move to a street; omitted means the next one."""
    street: Optional[str] = Field(default=None, description="flop, turn or river")


class ActionRequest(BaseModel):
    """Request to take a human action."""
    action: str = Field(..., description="Action: fold, call or raise")
    amount: int = Field(default=0, ge=0, description="Chips to raise by")


# ============= Response Schemas =============

class BotOutcomeSchema(BaseModel):
    """One bot's response to the human."""
    bot_index: int
    action: str
    amount: int
    remaining_stack: int
    confidence: float
    fallback: bool


class WinnerSchema(BaseModel):
    """A pot winner at hand end."""
    actor_id: str
    amount: int
    category: str
    description: str


class ActionResponse(BaseModel):
    """Result of a human action and the bots' responses."""
    success: bool = True
    action: str
    amount: int
    bot_actions: List[BotOutcomeSchema] = []
    betting_round_complete: bool
    hand_complete: bool
    winners: List[WinnerSchema] = []
    state: Dict[str, Any]


class MetricsSchema(BaseModel):
    """Advisory request metrics; times are in milliseconds."""
    totalRequests: int
    successfulRequests: int
    failedRequests: int
    averageResponseTime: float
    lastRequestTime: float
