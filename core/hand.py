"""Hand scoring for blackjack."""

from typing import Sequence

from core.cards import Card

# A hand only grows by appending the deck's front card.
Hand = tuple[Card, ...]

BLACKJACK = 21


def calculate_score(hand: Sequence[Card]) -> int:
    """
    Calculate the best value of a hand.

    Aces count 11 and are demoted to 1, one at a time, while the total
    is over 21. Returns the highest value that doesn't bust, or the lowest
    bust value.
    """
    total = 0
    aces = 0

    for card in hand:
        if card.is_ace:
            aces += 1
        total += card.value

    while total > BLACKJACK and aces > 0:
        total -= 10
        aces -= 1

    return total


def is_soft(hand: Sequence[Card]) -> bool:
    """
    Check if the hand is soft (has an ace counted as 11).

    A hand is soft if it contains an ace that can be counted as 11
    without busting.
    """
    if not any(card.is_ace for card in hand):
        return False

    total_hard = sum(1 if card.is_ace else card.value for card in hand)
    return total_hard + 10 <= BLACKJACK


def is_busted(hand: Sequence[Card]) -> bool:
    """Check if the hand has busted (value > 21)."""
    return calculate_score(hand) > BLACKJACK


def format_hand(hand: Sequence[Card]) -> str:
    """Render a hand as e.g. 'A♠ 7♡ (soft 18)'."""
    if not hand:
        return "(empty)"
    cards_str = " ".join(str(card) for card in hand)
    value = calculate_score(hand)
    if value > BLACKJACK:
        return f"{cards_str} (BUST {value})"
    if is_soft(hand):
        return f"{cards_str} (soft {value})"
    return f"{cards_str} ({value})"
