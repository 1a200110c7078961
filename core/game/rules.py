"""Pure round transitions: each takes a GameState and returns a new one."""

import logging
from dataclasses import replace
from random import Random
from typing import Iterator

from core.cards import Deck, create_deck, draw
from core.errors import DeckExhausted, InvalidAction
from core.game.state import GameState, Outcome, Phase
from core.hand import BLACKJACK, calculate_score

logger = logging.getLogger(__name__)

# Dealer draws while strictly below this score, soft or hard.
DEALER_STANDS_ON = 17


def start_round(deck: Deck | None = None, rng: Random | None = None) -> GameState:
    """
    Deal a fresh round.

    Cards alternate player, dealer, player, dealer from the front of the deck.

    Args:
        deck: Pre-ordered deck to deal from (a new shuffled deck if omitted)
        rng: Random number generator used when building a new deck

    Returns:
        A state in PLAYER_TURN with no outcome
    """
    if deck is None:
        deck = create_deck(rng)
    if len(deck) < 4:
        raise DeckExhausted(f"Need 4 cards to deal a round, deck has {len(deck)}")

    state = GameState(
        deck=deck[4:],
        player_hand=(deck[0], deck[2]),
        dealer_hand=(deck[1], deck[3]),
        outcome=None,
        phase=Phase.PLAYER_TURN,
    )
    logger.debug(
        "Dealt round: player=%s dealer=%s",
        state.player_score,
        state.dealer_score,
    )
    return state


def hit(state: GameState) -> GameState:
    """
    Draw one card onto the player's hand.

    An empty deck leaves the state unchanged.

    Raises:
        InvalidAction: if it is not the player's turn
    """
    if state.phase != Phase.PLAYER_TURN:
        raise InvalidAction("hit", state.phase)

    try:
        card, deck = draw(state.deck)
    except DeckExhausted:
        logger.warning("Player hit on an empty deck; ignoring")
        return state

    player_hand = state.player_hand + (card,)
    if calculate_score(player_hand) > BLACKJACK:
        return replace(
            state,
            deck=deck,
            player_hand=player_hand,
            outcome=Outcome.PLAYER_BUST,
            phase=Phase.RESOLVED,
        )
    return replace(state, deck=deck, player_hand=player_hand)


def dealer_should_draw(state: GameState) -> bool:
    """Determine if the dealer takes another card."""
    return state.dealer_score < DEALER_STANDS_ON


def dealer_steps(state: GameState) -> Iterator[GameState]:
    """
    Stand, then play out the dealer's hand one card at a time.

    Yields the DEALER_TURN state, one DEALER_TURN state per card the dealer
    draws, and finally the RESOLVED state. Running out of cards stops the
    dealer and resolves with the current scores.

    Raises:
        InvalidAction: if it is not the player's turn
    """
    if state.phase != Phase.PLAYER_TURN:
        raise InvalidAction("stand", state.phase)

    state = replace(state, phase=Phase.DEALER_TURN)
    yield state

    while dealer_should_draw(state):
        try:
            card, deck = draw(state.deck)
        except DeckExhausted:
            logger.warning(
                "Deck exhausted during dealer turn at %s; resolving",
                state.dealer_score,
            )
            break
        state = replace(state, deck=deck, dealer_hand=state.dealer_hand + (card,))
        yield state

    yield resolve(state)


def stand(state: GameState) -> GameState:
    """Stand and play the dealer's hand to completion."""
    final = state
    for final in dealer_steps(state):
        pass
    return final


def resolve(state: GameState) -> GameState:
    """Compare final scores and close the round."""
    outcome = determine_outcome(state.player_score, state.dealer_score)
    return replace(state, outcome=outcome, phase=Phase.RESOLVED)


def determine_outcome(player_score: int, dealer_score: int) -> Outcome:
    """
    Compare scores after the dealer has played.

    The player is assumed not to have busted; that ends the round earlier.
    """
    if dealer_score > BLACKJACK:
        return Outcome.DEALER_BUST
    if player_score > dealer_score:
        return Outcome.PLAYER_WIN
    if player_score < dealer_score:
        return Outcome.DEALER_WIN
    return Outcome.DRAW
