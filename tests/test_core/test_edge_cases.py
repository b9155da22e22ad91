"""
Edge case tests: settlement, chip conservation, short stacks and
full tables.
"""

import random

import pytest
from intentpoker.core.card import parse_cards
from intentpoker.core.game import HoldemEngine
from intentpoker.core.rules import ActionKind, MAX_ACTORS, Street


def total_chips(game):
    return sum(actor.stack for actor in game.actors) + game.pot


def rig_river(game, board, hands):
    """Put a known board and known hole cards on the table."""
    game.state = game.state.advance(Street.RIVER, parse_cards(board))
    for actor, cards in zip(game.actors, hands):
        actor.hole_cards = parse_cards(cards)


class TestWinByFold:
    """Tests for winning when everyone else folds."""

    def test_all_fold_preflop_except_one(self, engine):
        engine.apply_action(engine.human, ActionKind.RAISE, 40)
        engine.apply_action(engine.bots[0], ActionKind.FOLD)
        engine.apply_action(engine.bots[1], ActionKind.FOLD)

        winners = engine.settle_hand()

        assert winners == [{
            "actor_id": "human",
            "amount": 40,
            "category": "win_by_fold",
            "description": "All other players folded",
        }]
        assert engine.human.stack == 2000
        assert engine.state.finished
        # No showdown, so no board is dealt
        assert engine.board == []

    def test_all_fold_on_flop(self, engine):
        engine.apply_action(engine.human, ActionKind.RAISE, 40)
        engine.apply_action(engine.bots[0], ActionKind.CALL)
        engine.apply_action(engine.bots[1], ActionKind.CALL)
        engine.begin_street(Street.FLOP)
        engine.apply_action(engine.human, ActionKind.FOLD)
        engine.apply_action(engine.bots[0], ActionKind.FOLD)

        winners = engine.settle_hand()

        assert winners[0]["actor_id"] == "1"
        assert winners[0]["amount"] == 120
        assert engine.bots[1].stack == 2080

    def test_settle_twice_pays_once(self, engine):
        engine.apply_action(engine.human, ActionKind.RAISE, 40)
        engine.apply_action(engine.bots[0], ActionKind.FOLD)
        engine.apply_action(engine.bots[1], ActionKind.FOLD)
        first = engine.settle_hand()
        second = engine.settle_hand()
        assert first == second
        assert engine.human.stack == 2000


class TestShowdown:
    """Tests for showdown settlement."""

    def test_best_category_takes_pot(self, engine):
        for actor in engine.actors:
            actor.commit(100)
        rig_river(engine, "2c 7d 9h Js 4c", ["As Ah", "9s 9d", "3s 5h"])

        winners = engine.settle_hand()

        assert [w["actor_id"] for w in winners] == ["0"]
        assert winners[0]["amount"] == 300
        assert winners[0]["category"] == "three_of_a_kind"
        assert engine.bots[0].stack == 2200
        assert total_chips(engine) == 6000

    def test_folded_actor_excluded(self, engine):
        for actor in engine.actors:
            actor.commit(100)
        engine.apply_action(engine.bots[0], ActionKind.FOLD)
        rig_river(engine, "2c 7d 9h Js 4c", ["As Ah", "9s 9d", "3s 5h"])

        winners = engine.settle_hand()

        assert [w["actor_id"] for w in winners] == ["human"]
        assert engine.human.stack == 2200

    def test_split_pot_odd_chip_to_earliest_seat(self, engine):
        engine.human.commit(100)
        engine.bots[0].commit(100)
        engine.bots[1].commit(1)
        engine.apply_action(engine.bots[1], ActionKind.FOLD)
        rig_river(engine, "2c 7d 9h Js 4c", ["As Ah", "Ks Kh", "3s 5h"])

        winners = engine.settle_hand()

        assert [(w["actor_id"], w["amount"]) for w in winners] == [("human", 101), ("0", 100)]
        assert total_chips(engine) == 6000

    def test_board_run_out_before_showdown(self, engine):
        engine.apply_action(engine.human, ActionKind.RAISE, 40)
        engine.apply_action(engine.bots[0], ActionKind.CALL)
        engine.apply_action(engine.bots[1], ActionKind.CALL)

        winners = engine.settle_hand()

        assert len(engine.board) == 5
        assert engine.street == Street.RIVER
        assert sum(w["amount"] for w in winners) == 120
        assert total_chips(engine) == 6000

    def test_everyone_folded_refunds(self, engine):
        for actor in engine.actors:
            actor.commit(50)
            actor.fold()

        assert engine.settle_hand() == []
        assert all(actor.stack == 2000 for actor in engine.actors)


class TestShortStackScenarios:
    """Tests for short stacks."""

    def test_cannot_cover_call(self, engine):
        engine.apply_action(engine.human, ActionKind.RAISE, 500)
        engine.bots[0].stack = 200
        result = engine.apply_action(engine.bots[0], ActionKind.CALL)
        assert result.amount == 200
        assert engine.bots[0].is_all_in
        assert engine.bots[0].in_hand

    def test_zero_stack_can_only_fold_or_call(self, engine):
        engine.human.stack = 0
        assert ActionKind.RAISE not in engine.legal_actions()
        result = engine.apply_action(engine.human, ActionKind.CALL)
        assert result.amount == 0

    def test_exactly_all_in_accepted(self, engine):
        assert engine.validate_action(engine.human, ActionKind.RAISE, 2000).valid
        engine.apply_action(engine.human, ActionKind.RAISE, 2000)
        assert engine.human.stack == 0
        assert engine.human.last_action == "ALL-IN $2000"


class TestMaxPlayers:
    """Tests for a full table."""

    def test_full_table_runs_out_the_board(self):
        game = HoldemEngine(rng=random.Random(5))
        game.initialize_game([{} for _ in range(MAX_ACTORS - 1)], {})
        for actor in game.actors:
            game.apply_action(actor, ActionKind.CALL)
            actor.commit(10)

        game.settle_hand()

        assert len(game.board) == 5
        assert game.deck.remaining == 0
        assert total_chips(game) == 2000 * MAX_ACTORS


class TestConsecutiveHands:
    """Tests across many hands."""

    def test_chips_conserved_with_random_play(self):
        rng = random.Random(2024)
        game = HoldemEngine(rng=random.Random(8))
        game.initialize_game([{}, {}, {}], {})
        expected = total_chips(game)

        for _ in range(25):
            for street in (Street.PREFLOP, Street.FLOP, Street.TURN, Street.RIVER):
                game.begin_street(street)
                for actor in game.actors:
                    if game.hand_complete():
                        break
                    if not actor.in_hand:
                        continue
                    action = rng.choice(game.legal_actions(actor))
                    amount = game.call_amount(actor) + game.minimum_raise()
                    if not game.validate_action(actor, action, amount):
                        action = game.fallback_action(actor)
                    game.apply_action(actor, action, amount)
                    assert game.pot == sum(a.total_contributed for a in game.actors)
                    assert all(a.stack >= 0 for a in game.actors)
                if game.hand_complete():
                    break

            game.settle_hand()
            assert total_chips(game) == expected
            game.reset_hand()

    def test_cards_different_each_hand(self, engine):
        first = list(engine.human.hole_cards)
        hands = [first]
        for _ in range(5):
            engine.reset_hand()
            hands.append(list(engine.human.hole_cards))
        assert any(hand != first for hand in hands[1:])


class TestInvalidActions:
    """Tests for rejected actions."""

    def test_action_after_fold(self, engine):
        engine.apply_action(engine.human, ActionKind.FOLD)
        assert not engine.validate_action(engine.human, ActionKind.RAISE, 50)

    @pytest.mark.parametrize("action", ["check", "bet", "", None, 3])
    def test_unknown_actions(self, engine, action):
        assert not engine.validate_action(engine.human, action)
        assert not engine.apply_action(engine.human, action).success
