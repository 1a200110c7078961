"""Error types raised by the game core."""


class BlackjackError(Exception):
    """Base class for game errors. None of them are fatal to a session."""


class InvalidAction(BlackjackError):
    """An action was attempted outside the phase that allows it."""

    def __init__(self, action: str, phase: object) -> None:
        self.action = action
        self.phase = phase
        super().__init__(f"Cannot {action} during {phase}")


class DeckExhausted(BlackjackError):
    """A draw was attempted on an empty deck."""
