"""Game API endpoints."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, HTTPException, Header

from api.presentation import game_state_response, hand_to_response
from api.schemas import ActionRequest, ColorSchemeResponse, GameStateResponse, HandResponse
from api.session import (
    SESSION_KEY_COLOR_SCHEME,
    create_session,
    get_game,
    get_session,
    start_game,
    update_session,
)
from config import config
from core.game import BlackjackGame, Phase

logger = logging.getLogger(__name__)

router = APIRouter()


async def _load(session_id: str) -> tuple[BlackjackGame, dict[str, Any]]:
    """Get the game and session data, or 404."""
    session_data = await get_session(session_id)
    if session_data is None:
        raise HTTPException(status_code=404, detail="Unknown or expired session")

    game = get_game(session_id)
    if game is None:
        game = start_game(session_id)
    return game, session_data


def _response(
    game: BlackjackGame,
    session_data: dict[str, Any],
    dealer_steps: list[HandResponse] | None = None,
) -> GameStateResponse:
    return game_state_response(
        game,
        color_scheme=session_data.get(SESSION_KEY_COLOR_SCHEME, "light"),
        hide_hole_card=config.game.hide_hole_card,
        dealer_steps=dealer_steps,
    )


@router.post("/new")
async def new_game(
    session_id: Annotated[str | None, Header(alias="X-Session-ID")] = None,
) -> dict[str, str]:
    """Create a new game session, or restart the game on an existing one."""
    if session_id is None or await get_session(session_id) is None:
        session_id = await create_session()

    game = get_game(session_id)
    if game is None:
        start_game(session_id)
    elif not game.restart():
        raise HTTPException(status_code=409, detail=f"Cannot restart now ({game.phase})")
    return {"session_id": session_id}


@router.get("/state")
async def get_state(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Get current game state."""
    game, session_data = await _load(session_id)
    return _response(game, session_data)


@router.post("/action")
async def player_action(
    request: ActionRequest,
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> GameStateResponse:
    """Execute a player action."""
    game, session_data = await _load(session_id)

    if request.action == "stand":
        if not game.can_stand:
            raise HTTPException(status_code=409, detail=f"Cannot stand now ({game.phase})")
        steps = [
            hand_to_response(step.dealer_hand)
            for step in game.stand_steps()
            if step.phase == Phase.DEALER_TURN
        ]
        return _response(game, session_data, dealer_steps=steps)

    actions = {
        "hit": game.hit,
        "restart": game.restart,
    }
    if not actions[request.action]():
        logger.debug("Rejected %s in %s", request.action, game.phase)
        raise HTTPException(
            status_code=409,
            detail=f"Cannot {request.action} now ({game.phase})",
        )

    return _response(game, session_data)


@router.post("/color-scheme")
async def toggle_color_scheme(
    session_id: Annotated[str, Header(alias="X-Session-ID")],
) -> ColorSchemeResponse:
    """Switch between the light and dark color schemes."""
    _, session_data = await _load(session_id)

    current = session_data.get(SESSION_KEY_COLOR_SCHEME, "light")
    toggled = "light" if current == "dark" else "dark"
    session_data[SESSION_KEY_COLOR_SCHEME] = toggled
    await update_session(session_id, session_data)

    return ColorSchemeResponse(color_scheme=toggled)
