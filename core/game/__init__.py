"""Game engine and state management."""

from core.game.events import GameEvent, EventType
from core.game.state import GameState, Outcome, Phase
from core.game.engine import BlackjackGame

__all__ = [
    "GameEvent",
    "EventType",
    "GameState",
    "Outcome",
    "Phase",
    "BlackjackGame",
]
