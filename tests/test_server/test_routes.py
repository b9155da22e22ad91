"""
Tests for the HTTP API, played through a full hand.
"""

import asyncio

import pytest
from fastapi import HTTPException
from fastapi.testclient import TestClient

from intentpoker.agents.coordinator import StrategyCoordinator
from intentpoker.core.rules import Street
from intentpoker.server import app, routes
from intentpoker.server.schemas import ActionRequest, BotSeatSchema, InitGameRequest


TABLE = {
    "bots": [
        {"name": "Bot1", "startingStack": 1000, "position": "SB"},
        {"name": "Bot2", "startingStack": 1000, "position": "BB"},
    ],
    "human": {"name": "Player", "startingStack": 1000, "difficulty": "HARD"},
}


@pytest.fixture
def client(monkeypatch):
    """Client with no API key, so every advisory call falls back."""
    monkeypatch.delenv("AI_API_KEY", raising=False)
    monkeypatch.setenv("AI_ADVISOR", "llm")
    with TestClient(app) as test_client:
        test_client.post("/reset_game")
        yield test_client
        test_client.post("/reset_game")


class TestUninitialized:
    """Tests before a table exists."""

    @pytest.mark.parametrize("method,path", [
        ("get", "/get_game_state"),
        ("get", "/legal_actions"),
        ("get", "/metrics"),
        ("post", "/start_hand"),
    ])
    def test_requires_init(self, client, method, path):
        response = getattr(client, method)(path)
        assert response.status_code == 400
        assert response.json()["detail"] == "Game not initialized"

    def test_action_requires_init(self, client):
        response = client.post("/take_action", json={"action": "call"})
        assert response.status_code == 400


class TestInitGame:
    """Tests for table setup."""

    def test_init(self, client):
        response = client.post("/init_game", json=TABLE)
        assert response.status_code == 200
        data = response.json()
        assert data["success"]
        state = data["state"]
        assert state["hand_number"] == 1
        assert state["street"] == "preflop"
        assert state["pot"] == 0
        assert len(state["human"]["cards"]) == 2
        assert state["global_plan"] == "pot_control"

    def test_bot_cards_hidden(self, client):
        state = client.post("/init_game", json=TABLE).json()["state"]
        assert all("cards" not in bot for bot in state["bots"])

    def test_needs_a_bot(self, client):
        response = client.post("/init_game", json={"bots": [], "human": TABLE["human"]})
        assert response.status_code == 422

    def test_stacks_clamped(self, client):
        table = {"bots": [{"startingStack": 5}], "human": {"startingStack": 10 ** 9}}
        state = client.post("/init_game", json=table).json()["state"]
        assert state["bots"][0]["stack"] == 100
        assert state["human"]["stack"] == 1_000_000


class TestFullHand:
    """Plays one hand end to end with fallback bots."""

    def test_hand(self, client):
        client.post("/init_game", json=TABLE)

        # Below the minimum raise
        response = client.post("/take_action", json={"action": "raise", "amount": 5})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "BELOW_MINIMUM"

        # Unknown action
        response = client.post("/take_action", json={"action": "check"})
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "ILLEGAL_ACTION"

        # Preflop call; bots fall back to calling
        data = client.post("/take_action", json={"action": "call"}).json()
        assert data["action"] == "call"
        assert [b["action"] for b in data["bot_actions"]] == ["call", "call"]
        assert all(b["fallback"] for b in data["bot_actions"])
        assert data["betting_round_complete"]
        assert not data["hand_complete"]
        assert data["winners"] == []

        metrics = client.get("/metrics").json()
        assert metrics["totalRequests"] == 1
        assert metrics["failedRequests"] == 1

        # Flop
        data = client.post("/next_street", json={}).json()
        assert data["street"] == "flop"
        assert len(data["board"]) == 3

        legal = client.get("/legal_actions").json()
        assert legal == {
            "actions": ["fold", "call", "raise"],
            "call_amount": 0,
            "minimum_raise": 10,
        }

        data = client.post("/take_action", json={"action": "raise", "amount": 40}).json()
        assert [b["amount"] for b in data["bot_actions"]] == [40, 40]
        assert data["state"]["pot"] == 120

        # Folding puts the human out, so the bots show down for the pot
        data = client.post("/take_action", json={"action": "fold"}).json()
        assert data["hand_complete"]
        assert sum(w["amount"] for w in data["winners"]) == 120
        assert {w["actor_id"] for w in data["winners"]} <= {"0", "1"}
        assert len(data["state"]["board"]) == 5
        assert data["state"]["pot"] == 0

        total = data["state"]["human"]["stack"] + sum(b["stack"] for b in data["state"]["bots"])
        assert total == 3000

        # The finished hand takes no more actions
        assert client.post("/take_action", json={"action": "call"}).status_code == 400
        assert client.post("/next_street", json={}).status_code == 400
        assert client.get("/legal_actions").json()["actions"] == []

        events = client.get("/event_log").json()["events"]
        assert any("flop" in e["event"].lower() for e in events)

        data = client.post("/start_hand").json()
        assert data["hand_number"] == 2

    def test_river_closes_the_hand(self, client):
        client.post("/init_game", json=TABLE)

        for street in ("flop", "turn", "river"):
            client.post("/take_action", json={"action": "call"})
            assert client.post("/next_street", json={"street": street}).status_code == 200

        data = client.post("/take_action", json={"action": "call"}).json()
        assert data["hand_complete"]
        assert data["winners"]
        assert client.post("/next_street", json={}).status_code == 400

    def test_bad_street(self, client):
        client.post("/init_game", json=TABLE)
        response = client.post("/next_street", json={"street": "fifth"})
        assert response.status_code == 400

    def test_streets_in_order_only(self, client):
        client.post("/init_game", json=TABLE)

        response = client.post("/next_street", json={"street": "river"})
        assert response.status_code == 400
        assert "board cards" in response.json()["detail"]
        assert client.get("/get_game_state").json()["street"] == "preflop"

        client.post("/next_street", json={"street": "flop"})
        assert client.post("/next_street", json={"street": "preflop"}).status_code == 400
        state = client.get("/get_game_state").json()
        assert state["street"] == "flop"
        assert len(state["board"]) == 3


class TestRandomAdvisor:
    def test_bots_follow_random_intent(self, client, monkeypatch):
        monkeypatch.setenv("AI_ADVISOR", "random")
        client.post("/init_game", json=TABLE)

        data = client.post("/take_action", json={"action": "raise", "amount": 40}).json()

        assert len(data["bot_actions"]) >= 1
        assert not any(b["fallback"] for b in data["bot_actions"])
        metrics = client.get("/metrics").json()
        assert metrics["successfulRequests"] == 1


class TestReset:
    def test_reset(self, client):
        client.post("/init_game", json=TABLE)
        assert client.post("/reset_game").json()["success"]
        assert client.get("/get_game_state").status_code == 400


@pytest.fixture
def no_table(monkeypatch):
    """No table is seated before or after the test."""
    monkeypatch.delenv("AI_API_KEY", raising=False)
    monkeypatch.setattr(routes, "_session", None)


class TestConcurrentActions:
    """Tests for requests that overlap on the advisory call."""

    @pytest.mark.asyncio
    async def test_action_waiting_on_a_settling_hand_is_rejected(
        self, no_table, static_advisor, intent_payload,
    ):
        await routes.init_game(InitGameRequest(bots=[BotSeatSchema(name="Bot1")]))
        session = routes.get_session()
        for street in (Street.FLOP, Street.TURN, Street.RIVER):
            session.engine.begin_street(street)
        advisor = static_advisor(intent_payload(["call"]), delay=0.05)
        session.coordinator = StrategyCoordinator(advisor)

        first, second = await asyncio.gather(
            routes.take_action(ActionRequest(action="call")),
            routes.take_action(ActionRequest(action="call")),
            return_exceptions=True,
        )

        assert first["hand_complete"]
        assert first["winners"]
        assert isinstance(second, HTTPException)
        assert second.status_code == 400
        # Only the first action reached the bots
        assert len(advisor.requests) == 1
