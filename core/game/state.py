"""Round phases, outcomes and the immutable game state record."""

from dataclasses import dataclass
from enum import Enum, auto

from core.cards import Deck
from core.hand import Hand, calculate_score


class Phase(Enum):
    """
    Round state machine states.

    Flow: DEALING → PLAYER_TURN → DEALER_TURN → RESOLVED
    """

    # Cards being dealt (transient)
    DEALING = auto()

    # Player may hit or stand
    PLAYER_TURN = auto()

    # Dealer draws; no other action is accepted
    DEALER_TURN = auto()

    # Outcome decided, only a restart is accepted
    RESOLVED = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()


# Valid state transitions
VALID_TRANSITIONS: dict[Phase, list[Phase]] = {
    Phase.DEALING: [Phase.PLAYER_TURN],
    Phase.PLAYER_TURN: [Phase.PLAYER_TURN, Phase.DEALER_TURN, Phase.RESOLVED, Phase.DEALING],
    Phase.DEALER_TURN: [Phase.DEALER_TURN, Phase.RESOLVED],
    Phase.RESOLVED: [Phase.DEALING],
}


def is_valid_transition(from_phase: Phase, to_phase: Phase) -> bool:
    """
    Check if a phase transition is valid.

    Args:
        from_phase: Current phase
        to_phase: Desired phase

    Returns:
        True if the transition is allowed
    """
    return to_phase in VALID_TRANSITIONS.get(from_phase, [])


class Outcome(Enum):
    """How a round ended."""

    PLAYER_WIN = auto()
    DEALER_WIN = auto()
    DRAW = auto()
    PLAYER_BUST = auto()
    DEALER_BUST = auto()

    def __str__(self) -> str:
        return self.name.replace("_", " ").title()

    @property
    def player_won(self) -> bool:
        """Check if the round went to the player."""
        return self in (Outcome.PLAYER_WIN, Outcome.DEALER_BUST)


@dataclass(frozen=True)
class GameState:
    """
    One round of blackjack.

    Transitions never mutate a state; they return a new one.
    """

    deck: Deck = ()
    player_hand: Hand = ()
    dealer_hand: Hand = ()
    outcome: Outcome | None = None
    phase: Phase = Phase.DEALING

    @property
    def player_score(self) -> int:
        """Return the player's current score."""
        return calculate_score(self.player_hand)

    @property
    def dealer_score(self) -> int:
        """Return the dealer's current score."""
        return calculate_score(self.dealer_hand)
