"""Tests for the pure round transitions."""

import pytest
from random import Random

from core.cards import deck_from_strings
from core.errors import DeckExhausted, InvalidAction
from core.game.rules import (
    DEALER_STANDS_ON,
    dealer_steps,
    determine_outcome,
    hit,
    stand,
    start_round,
)
from core.game.state import GameState, Outcome, Phase, is_valid_transition
from core.hand import calculate_score


def _cards_in_play(state: GameState) -> int:
    return len(state.deck) + len(state.player_hand) + len(state.dealer_hand)


class TestStartRound:
    """Tests for dealing a round."""

    def test_deal_alternates_player_and_dealer(self):
        deck = deck_from_strings("2S", "3S", "4S", "5S", "6S", "7S")
        state = start_round(deck)
        assert state.player_hand == (deck[0], deck[2])
        assert state.dealer_hand == (deck[1], deck[3])
        assert state.deck == deck[4:]

    def test_round_starts_in_player_turn(self, rng):
        state = start_round(rng=rng)
        assert state.phase == Phase.PLAYER_TURN
        assert state.outcome is None
        assert len(state.deck) == 48

    def test_seeded_rounds_are_reproducible(self):
        assert start_round(rng=Random(3)) == start_round(rng=Random(3))

    def test_short_deck_cannot_deal(self):
        with pytest.raises(DeckExhausted):
            start_round(deck_from_strings("2S", "3S", "4S"))

    def test_cards_in_play(self, rng):
        assert _cards_in_play(start_round(rng=rng)) == 52


class TestHit:
    """Tests for the player drawing a card."""

    def test_hit_appends_front_card(self, round_from):
        state = round_from("2S", "9H", "3D", "8C", "4H", "KD")
        after = hit(state)
        assert after.player_hand == deck_from_strings("2S", "3D", "4H")
        assert after.deck == deck_from_strings("KD")
        assert after.phase == Phase.PLAYER_TURN
        assert after.outcome is None

    def test_hit_does_not_mutate_state(self, round_from):
        state = round_from("2S", "9H", "3D", "8C", "4H")
        hit(state)
        assert len(state.player_hand) == 2
        assert len(state.deck) == 1

    def test_hit_to_21_keeps_playing(self, round_from):
        state = hit(round_from("10S", "9H", "5D", "8C", "6H"))
        assert state.player_score == 21
        assert state.phase == Phase.PLAYER_TURN

    def test_bust_resolves_round(self, round_from):
        state = hit(round_from("10S", "9H", "6D", "9C", "KH"))
        assert state.player_score == 26
        assert state.outcome == Outcome.PLAYER_BUST
        assert state.phase == Phase.RESOLVED

    def test_soft_hand_does_not_bust(self, round_from):
        state = hit(round_from("AS", "9H", "6D", "9C", "KH"))
        assert state.player_score == 17
        assert state.phase == Phase.PLAYER_TURN

    def test_hit_on_empty_deck_is_noop(self, round_from):
        state = round_from("2S", "9H", "3D", "8C")
        assert hit(state) is state

    def test_hit_after_resolution_rejected(self, round_from):
        state = hit(round_from("10S", "9H", "6D", "9C", "KH"))
        with pytest.raises(InvalidAction) as exc_info:
            hit(state)
        assert exc_info.value.action == "hit"
        assert exc_info.value.phase == Phase.RESOLVED

    def test_card_count_constant_across_hits(self, rng):
        state = start_round(rng=rng)
        while state.phase == Phase.PLAYER_TURN:
            state = hit(state)
            assert _cards_in_play(state) == 52


class TestDealerPlay:
    """Tests for standing and the dealer's draw policy."""

    def test_dealer_stops_at_exactly_17(self, round_from):
        state = stand(round_from("10S", "10H", "9D", "4C", "3H", "5S"))
        assert state.dealer_score == 17
        assert len(state.dealer_hand) == 3
        assert state.deck == deck_from_strings("5S")

    def test_dealer_stands_on_soft_17(self, round_from):
        state = stand(round_from("10S", "AH", "8D", "6C", "5H"))
        assert state.dealer_score == 17
        assert len(state.dealer_hand) == 2
        assert state.outcome == Outcome.PLAYER_WIN

    def test_dealer_draws_several_cards(self, round_from):
        state = stand(round_from("10S", "2H", "9D", "3C", "2D", "4S", "6H", "KC"))
        assert state.dealer_hand == deck_from_strings("2H", "3C", "2D", "4S", "6H")
        assert state.dealer_score == 17

    def test_dealer_never_draws_at_or_above_threshold(self, rng):
        for _ in range(200):
            state = stand(start_round(rng=rng))
            before_last = state.dealer_hand[:-1]
            if len(state.dealer_hand) > 2:
                assert calculate_score(before_last) < DEALER_STANDS_ON
            assert state.dealer_score >= DEALER_STANDS_ON or not state.deck

    def test_player_win(self, round_from):
        """Player stands on 20, dealer resolves to 19."""
        state = stand(round_from("KS", "9H", "QD", "KC"))
        assert state.player_score == 20
        assert state.dealer_score == 19
        assert state.outcome == Outcome.PLAYER_WIN
        assert state.phase == Phase.RESOLVED

    def test_draw(self, round_from):
        """Both resolve to 18."""
        state = stand(round_from("9S", "10H", "9D", "8C"))
        assert state.outcome == Outcome.DRAW

    def test_dealer_win(self, round_from):
        state = stand(round_from("10S", "10H", "7D", "9C"))
        assert state.outcome == Outcome.DEALER_WIN

    def test_dealer_bust(self, round_from):
        state = stand(round_from("10S", "10H", "8D", "6C", "KH"))
        assert state.dealer_score == 26
        assert state.outcome == Outcome.DEALER_BUST

    def test_deck_exhausted_during_dealer_turn(self, round_from):
        """No cards left: the dealer stops and scores are compared as they are."""
        state = stand(round_from("10S", "5H", "8D", "6C"))
        assert state.dealer_score == 11
        assert state.phase == Phase.RESOLVED
        assert state.outcome == Outcome.PLAYER_WIN

    def test_stand_after_resolution_rejected(self, round_from):
        state = stand(round_from("KS", "9H", "QD", "KC"))
        with pytest.raises(InvalidAction):
            stand(state)

    def test_stand_from_dealing_rejected(self):
        with pytest.raises(InvalidAction):
            stand(GameState())


class TestDealerSteps:
    """Tests for the step-by-step dealer reveal."""

    def test_one_step_per_card(self, round_from):
        steps = list(dealer_steps(round_from("10S", "2H", "9D", "3C", "5D", "KS")))
        phases = [s.phase for s in steps]
        assert phases == [
            Phase.DEALER_TURN,
            Phase.DEALER_TURN,
            Phase.DEALER_TURN,
            Phase.RESOLVED,
        ]
        assert [len(s.dealer_hand) for s in steps] == [2, 3, 4, 4]

    def test_first_step_reveals_without_drawing(self, round_from):
        state = round_from("KS", "9H", "QD", "KC")
        first = next(dealer_steps(state))
        assert first.dealer_hand == state.dealer_hand
        assert first.phase == Phase.DEALER_TURN

    def test_steps_match_stand(self, round_from):
        state = round_from("10S", "2H", "9D", "3C", "5D", "KS")
        assert list(dealer_steps(state))[-1] == stand(state)

    def test_steps_are_valid_transitions(self, rng):
        state = start_round(rng=rng)
        previous = state.phase
        for step in dealer_steps(state):
            assert is_valid_transition(previous, step.phase)
            previous = step.phase


class TestDetermineOutcome:
    """Tests for score comparison."""

    @pytest.mark.parametrize(
        "player,dealer,expected",
        [
            (20, 19, Outcome.PLAYER_WIN),
            (17, 20, Outcome.DEALER_WIN),
            (18, 18, Outcome.DRAW),
            (12, 22, Outcome.DEALER_BUST),
            (21, 26, Outcome.DEALER_BUST),
        ],
    )
    def test_outcomes(self, player, dealer, expected):
        assert determine_outcome(player, dealer) == expected

    def test_player_won(self):
        assert Outcome.PLAYER_WIN.player_won
        assert Outcome.DEALER_BUST.player_won
        assert not Outcome.DRAW.player_won
        assert not Outcome.DEALER_WIN.player_won
        assert not Outcome.PLAYER_BUST.player_won
