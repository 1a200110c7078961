"""Pytest fixtures for blackjack tests."""

import pytest
from random import Random

from core.cards import Card, Rank, Suit, create_deck, deck_from_strings
from core.game import BlackjackGame
from core.game.rules import start_round


@pytest.fixture
def rng():
    """Seeded random number generator for reproducible tests."""
    return Random(42)


@pytest.fixture
def deck(rng):
    """A shuffled deck."""
    return create_deck(rng)


@pytest.fixture
def round_from():
    """Deal a round from a pre-ordered deck."""

    def _round(*cards: str):
        return start_round(deck_from_strings(*cards))

    return _round


@pytest.fixture
def game_from():
    """A game whose every round is dealt from the same pre-ordered deck."""

    def _game(*cards: str) -> BlackjackGame:
        deck = deck_from_strings(*cards)
        return BlackjackGame(deck_factory=lambda: deck)

    return _game


@pytest.fixture
def game(rng):
    """A new game instance."""
    return BlackjackGame(rng=rng)


@pytest.fixture
def blackjack_hand():
    """A natural blackjack hand."""
    return (Card(Rank.KING, Suit.HEARTS), Card(Rank.ACE, Suit.SPADES))


@pytest.fixture
def soft_17_hand():
    """A soft 17 hand (A-6)."""
    return (Card(Rank.ACE, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS))


@pytest.fixture
def hard_16_hand():
    """A hard 16 hand (10-6)."""
    return (Card(Rank.TEN, Suit.SPADES), Card(Rank.SIX, Suit.HEARTS))


@pytest.fixture
def bust_hand():
    """A busted hand (10-5-8)."""
    return (
        Card(Rank.TEN, Suit.SPADES),
        Card(Rank.FIVE, Suit.HEARTS),
        Card(Rank.EIGHT, Suit.CLUBS),
    )
