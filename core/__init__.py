"""Core blackjack engine - 100% UI-agnostic."""

from core.cards import Card, Deck, Rank, Suit, create_deck
from core.errors import BlackjackError, DeckExhausted, InvalidAction
from core.hand import Hand, calculate_score

__all__ = [
    "Card",
    "Deck",
    "Rank",
    "Suit",
    "create_deck",
    "BlackjackError",
    "DeckExhausted",
    "InvalidAction",
    "Hand",
    "calculate_score",
]
