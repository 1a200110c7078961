"""Pydantic schemas for API requests and responses."""

from pydantic import BaseModel, ConfigDict, Field
from typing import Literal


class ActionRequest(BaseModel):
    """Request for player action."""

    action: Literal["hit", "stand", "restart"]


class CardResponse(BaseModel):
    """Card representation."""

    model_config = ConfigDict(from_attributes=True)

    rank: str
    suit: str
    value: int
    color: Literal["red", "black"]


class HandResponse(BaseModel):
    """Hand representation."""

    cards: list[CardResponse]
    score: int
    is_soft: bool
    is_busted: bool
    hidden_cards: int = 0


class GameStateResponse(BaseModel):
    """Current game state."""

    phase: str
    player_hand: HandResponse
    dealer_hand: HandResponse
    outcome: str | None
    message: str | None
    message_color: str | None
    cards_remaining: int
    can_hit: bool
    can_stand: bool
    can_restart: bool
    color_scheme: Literal["light", "dark"]
    dealer_steps: list[HandResponse] = Field(
        default_factory=list,
        description="Dealer hand after each reveal step of the last stand",
    )


class ColorSchemeResponse(BaseModel):
    """Current color scheme preference."""

    color_scheme: Literal["light", "dark"]
