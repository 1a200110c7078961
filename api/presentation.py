"""Lookup tables and converters from engine state to API responses."""

from typing import Sequence

from api.schemas import CardResponse, GameStateResponse, HandResponse
from core.cards import Card
from core.game import BlackjackGame, Outcome, Phase
from core.hand import calculate_score, is_busted, is_soft

OUTCOME_MESSAGES: dict[Outcome, str] = {
    Outcome.PLAYER_WIN: "You Win!",
    Outcome.DEALER_BUST: "Dealer Bursted! You Win!",
    Outcome.DEALER_WIN: "You Lose...",
    Outcome.PLAYER_BUST: "Bursted... You Lose...",
    Outcome.DRAW: "Draw!",
}

OUTCOME_COLORS: dict[Outcome, str] = {
    Outcome.PLAYER_WIN: "green",
    Outcome.DEALER_BUST: "green",
    Outcome.DEALER_WIN: "red",
    Outcome.PLAYER_BUST: "red",
    Outcome.DRAW: "yellow",
}

# Shown while no outcome is available yet
PHASE_MESSAGES: dict[Phase, tuple[str, str]] = {
    Phase.DEALER_TURN: ("Dealer's turn...", "blue"),
}


def card_to_response(card: Card) -> CardResponse:
    """Convert a Card to CardResponse."""
    return CardResponse(
        rank=str(card.rank),
        suit=str(card.suit),
        value=card.value,
        color="red" if card.suit.is_red else "black",
    )


def hand_to_response(cards: Sequence[Card], hidden_cards: int = 0) -> HandResponse:
    """Convert the visible cards of a hand to HandResponse."""
    return HandResponse(
        cards=[card_to_response(c) for c in cards],
        score=calculate_score(cards),
        is_soft=is_soft(cards),
        is_busted=is_busted(cards),
        hidden_cards=hidden_cards,
    )


def game_state_response(
    game: BlackjackGame,
    color_scheme: str = "light",
    hide_hole_card: bool = False,
    dealer_steps: list[HandResponse] | None = None,
) -> GameStateResponse:
    """Convert game state to response."""
    visible = game.visible_dealer_hand(hide_hole_card)
    hidden = len(game.dealer_hand) - len(visible)

    message = color = None
    if game.outcome is not None:
        message = OUTCOME_MESSAGES[game.outcome]
        color = OUTCOME_COLORS[game.outcome]
    elif game.phase in PHASE_MESSAGES:
        message, color = PHASE_MESSAGES[game.phase]

    return GameStateResponse(
        phase=game.phase.name,
        player_hand=hand_to_response(game.player_hand),
        dealer_hand=hand_to_response(visible, hidden_cards=hidden),
        outcome=game.outcome.name if game.outcome else None,
        message=message,
        message_color=color,
        cards_remaining=game.cards_remaining,
        can_hit=game.can_hit,
        can_stand=game.can_stand,
        can_restart=game.can_restart,
        color_scheme=color_scheme,
        dealer_steps=dealer_steps or [],
    )
