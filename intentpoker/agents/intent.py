"""
Advisory payload models.

The advisory collaborator receives an ``AdvisoryRequest`` and answers with a
``StrategicIntent``: a table-wide plan plus one action bias per bot. Both are
exchanged as camelCase JSON.
"""

from __future__ import annotations
from typing import Any, Dict, List, Literal
import json

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError

from intentpoker.core.errors import AdvisoryFailure
from intentpoker.core.rules import ActionKind, BoardTexture, Difficulty, Street


GlobalPlan = Literal["pressure", "trap", "isolate", "pot_control", "chaos"]
ActionBias = Literal["fold", "call", "raise"]

DEFAULT_GLOBAL_PLAN = "pot_control"


# ============= Request Models =============

class PlayerProfile(BaseModel):
    """Observed tendencies of the human player."""
    aggression: float = 0.5
    tightness: float = 0.5
    bluffing: float = 0.3


class SharedBotState(BaseModel):
    """State the bots carry between decisions."""
    model_config = ConfigDict(populate_by_name=True)

    last_global_plan: str = Field(default=DEFAULT_GLOBAL_PLAN, alias="lastGlobalPlan")
    player_folded_to_pressure: bool = Field(default=False, alias="playerFoldedToPressure")


class AdvisoryRequest(BaseModel):
    """Summarized, legal-information-only game state for the advisor."""
    model_config = ConfigDict(populate_by_name=True)

    difficulty: Difficulty
    round: Street
    pot_size: int = Field(alias="potSize", ge=0)
    player_action: str = Field(alias="playerAction")
    player_bet_size: int = Field(default=0, alias="playerBetSize", ge=0)
    player_stack: int = Field(default=0, alias="playerStack", ge=0)
    player_position: str = Field(default="BTN", alias="playerPosition")
    player_profile: PlayerProfile = Field(default_factory=PlayerProfile, alias="playerProfile")
    board_texture: BoardTexture = Field(default=BoardTexture.UNKNOWN, alias="boardTexture")
    bot_stacks: List[int] = Field(default_factory=list, alias="botStacks")
    bot_positions: List[str] = Field(default_factory=list, alias="botPositions")
    shared_bot_state: SharedBotState = Field(default_factory=SharedBotState, alias="sharedBotState")
    legal_actions: List[ActionKind] = Field(alias="legalActions")

    @property
    def bot_count(self) -> int:
        return len(self.bot_stacks)

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready camelCase dict."""
        return self.model_dump(mode="json", by_alias=True)


# ============= Response Models =============

class BotIntent(BaseModel):
    """Suggested action for one bot."""
    model_config = ConfigDict(populate_by_name=True)

    bot_index: int = Field(alias="botIndex", ge=0)
    action_bias: ActionBias = Field(alias="actionBias")
    confidence: float = Field(ge=0.0, le=1.0)

    @property
    def action(self) -> ActionKind:
        return ActionKind(self.action_bias)


class StrategicIntent(BaseModel):
    """Table-wide strategic intent for all bots."""
    model_config = ConfigDict(populate_by_name=True)

    global_plan: GlobalPlan = Field(alias="globalPlan")
    aggression: float = Field(ge=0.0, le=1.0)
    bluff_frequency: float = Field(alias="bluffFrequency", ge=0.0, le=1.0)
    coordination: float = Field(ge=0.0, le=1.0)
    bot_actions: List[BotIntent] = Field(alias="botActions")

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


# ============= Parsing =============

def extract_json_object(raw: str) -> str:
    """
    Pull the outermost JSON object out of a model reply.

    Markdown code fences around the object are tolerated.

    Raises:
        AdvisoryFailure: No object found
    """
    cleaned = raw.strip()

    if cleaned.startswith("```json"):
        cleaned = cleaned[7:]
    if cleaned.startswith("```"):
        cleaned = cleaned[3:]
    if cleaned.endswith("```"):
        cleaned = cleaned[:-3]

    start = cleaned.find("{")
    end = cleaned.rfind("}") + 1
    if start == -1 or end == 0:
        raise AdvisoryFailure("No JSON object found in advisory response")

    return cleaned[start:end]


def parse_intent(raw: Any, request: AdvisoryRequest) -> StrategicIntent:
    """
    Parse and validate an advisory reply against the request it answers.

    Raises:
        AdvisoryFailure: Empty, unparseable or structurally invalid reply
    """
    if not raw or not isinstance(raw, str):
        raise AdvisoryFailure("Empty or invalid advisory response")

    try:
        data = json.loads(extract_json_object(raw))
    except json.JSONDecodeError as e:
        raise AdvisoryFailure(f"Advisory response is not valid JSON: {e}") from e

    try:
        intent = StrategicIntent.model_validate(data)
    except PydanticValidationError as e:
        raise AdvisoryFailure(f"Invalid advisory response structure: {e}") from e

    validate_intent(intent, request)
    return intent


def validate_intent(intent: StrategicIntent, request: AdvisoryRequest) -> None:
    """
    Check the intent covers every bot exactly once with a legal bias.

    Raises:
        AdvisoryFailure: Wrong bot count, misplaced index or illegal bias
    """
    if len(intent.bot_actions) != request.bot_count:
        raise AdvisoryFailure(
            f"botActions length ({len(intent.bot_actions)}) does not match "
            f"bot count ({request.bot_count})"
        )

    for i, bot_action in enumerate(intent.bot_actions):
        if bot_action.bot_index != i:
            raise AdvisoryFailure(
                f"Bot index mismatch: expected {i}, got {bot_action.bot_index}"
            )
        if request.legal_actions and bot_action.action not in request.legal_actions:
            raise AdvisoryFailure(
                f"Bot {i} bias {bot_action.action_bias} is not a legal action"
            )
