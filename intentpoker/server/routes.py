"""
HTTP API Routes for IntentPoker.

These routes drive a single table: setup, street progression, human
actions with the bots' responses, and state queries.
"""

from typing import Dict, Any, Optional
import asyncio
import logging

from fastapi import APIRouter, HTTPException

from intentpoker.agents import IntentMapper, LLMAdvisor, RandomAdvisor, StrategyCoordinator
from intentpoker.config import Settings
from intentpoker.core.errors import IllegalActionError, InsufficientCardsError, ValidationError
from intentpoker.core.rules import Street, next_street
from intentpoker.server.schemas import (
    ActionRequest, ActionResponse, InitGameRequest, MetricsSchema, NextStreetRequest,
)
from intentpoker.session import TableSession

logger = logging.getLogger(__name__)

router = APIRouter()

# Global session for single-table mode
_session: Optional[TableSession] = None

# Bots respond inside the human's request; one writer at a time
_lock = asyncio.Lock()


def build_coordinator(settings: Settings) -> StrategyCoordinator:
    """Pick the advisor named by the settings."""
    if settings.advisor == "random":
        advisor = RandomAdvisor()
    else:
        advisor = LLMAdvisor(settings)
    return StrategyCoordinator(advisor, IntentMapper(), timeout=settings.timeout)


def get_session() -> TableSession:
    """Get the current session."""
    if _session is None:
        raise HTTPException(status_code=400, detail="Game not initialized")
    return _session


async def close_session() -> None:
    global _session
    if _session is not None:
        await _session.coordinator.aclose()
    _session = None


@router.post("/init_game")
async def init_game(req: InitGameRequest) -> Dict[str, Any]:
    """
    Seat one human and the requested bots and deal the first hand.
    """
    global _session

    await close_session()
    session = TableSession(coordinator=build_coordinator(Settings.from_env()))
    try:
        session.setup(
            [bot.model_dump(by_alias=True, exclude_none=True) for bot in req.bots],
            req.human.model_dump(by_alias=True, exclude_none=True),
        )
    except ValidationError as e:
        raise HTTPException(status_code=400, detail=str(e))

    _session = session
    logger.info(f"Table ready with {len(req.bots)} bots")
    return {
        "success": True,
        "message": f"Game initialized with {len(req.bots)} bots",
        "state": session.get_state(),
    }


@router.post("/start_hand")
async def start_hand() -> Dict[str, Any]:
    """
    Start a new hand with a fresh deck.
    """
    session = get_session()

    async with _lock:
        state = session.start_hand()

    return {
        "success": True,
        "message": f"Hand #{state.hand_number} started",
        "hand_number": state.hand_number,
    }


@router.post("/next_street")
async def advance_street(req: NextStreetRequest) -> Dict[str, Any]:
    """
    Deal the next street and refresh the bots' plan.
    """
    session = get_session()

    async with _lock:
        if session.engine.state.finished:
            raise HTTPException(status_code=400, detail="Hand is finished; start a new hand")

        street = req.street
        if street is None:
            following = next_street(session.engine.street)
            if following is None:
                raise HTTPException(status_code=400, detail="Hand is already on the river")
            street = following.value

        try:
            state = await session.start_street(street)
        except (ValidationError, InsufficientCardsError) as e:
            raise HTTPException(status_code=400, detail=str(e))

    return {
        "success": True,
        "street": state.street.value,
        "board": [card.to_dict() for card in state.board],
        "global_plan": session.last_global_plan,
    }


@router.post("/take_action", response_model=ActionResponse)
async def take_action(req: ActionRequest) -> Dict[str, Any]:
    """
    Take the human's action and let the bots respond.

    The hand is settled once one player is left, when the human is out, or
    when betting closes on the river.
    """
    session = get_session()
    engine = session.engine

    async with _lock:
        if engine.state.finished:
            raise HTTPException(status_code=400, detail="Hand is finished; start a new hand")

        try:
            outcomes = await session.process_human_action(req.action, req.amount)
        except IllegalActionError as e:
            kind = e.kind.value if e.kind else None
            raise HTTPException(status_code=400, detail={"error": kind, "message": str(e)})

        round_complete = engine.betting_round_complete()
        winners = []
        human_out = not engine.human.in_hand
        if human_out or engine.hand_complete() or (engine.street == Street.RIVER and round_complete):
            winners = session.settle()

    return {
        "success": True,
        "action": req.action.lower(),
        "amount": req.amount,
        "bot_actions": [outcome.to_dict() for outcome in outcomes],
        "betting_round_complete": round_complete,
        "hand_complete": engine.hand_complete() or engine.state.finished,
        "winners": winners,
        "state": session.get_state(),
    }


@router.get("/get_game_state")
async def get_game_state() -> Dict[str, Any]:
    """
    Get the current game state. Bot hole cards stay hidden.
    """
    return get_session().get_state()


@router.get("/legal_actions")
async def get_legal_actions() -> Dict[str, Any]:
    """
    Get legal actions for the human.
    """
    engine = get_session().engine

    if engine.state.finished:
        return {"actions": [], "message": "No hand in progress"}

    return {
        "actions": [action.value for action in engine.legal_actions()],
        "call_amount": engine.call_amount(engine.human),
        "minimum_raise": engine.minimum_raise(),
    }


@router.get("/event_log")
async def get_event_log() -> Dict[str, Any]:
    return {"events": get_session().engine.get_event_log()}


@router.get("/metrics", response_model=MetricsSchema)
async def get_metrics() -> Dict[str, Any]:
    """
    Advisory request metrics for the current session.
    """
    return get_session().coordinator.get_metrics()


@router.post("/reset_game")
async def reset_game() -> Dict[str, Any]:
    """
    Reset the game (for development/testing).
    """
    await close_session()
    return {"success": True, "message": "Game reset"}
