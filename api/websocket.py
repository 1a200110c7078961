"""WebSocket play with a paced dealer reveal."""

import asyncio
import logging
from typing import Any

from fastapi import APIRouter, WebSocket, WebSocketDisconnect

from api.presentation import game_state_response, hand_to_response
from api.session import SESSION_KEY_COLOR_SCHEME, get_game, get_session, start_game
from config import config
from core.game import BlackjackGame, Phase

logger = logging.getLogger(__name__)

router = APIRouter()

# Close code for an unknown or expired session
WS_CLOSE_UNKNOWN_SESSION = 4404


class ConnectionManager:
    """Track open WebSocket connections per session."""

    def __init__(self) -> None:
        self._connections: dict[str, WebSocket] = {}

    async def connect(self, websocket: WebSocket, session_id: str) -> None:
        """Accept and register a new connection."""
        await websocket.accept()
        self._connections[session_id] = websocket

    def disconnect(self, session_id: str) -> None:
        """Remove a connection. The game stays available for reconnection."""
        self._connections.pop(session_id, None)

    async def send_message(self, session_id: str, message: dict[str, Any]) -> None:
        """Send a message to a specific session."""
        websocket = self._connections.get(session_id)
        if websocket is not None:
            await websocket.send_json(message)


# Global connection manager
manager = ConnectionManager()


def _state_message(game: BlackjackGame, session_data: dict[str, Any]) -> dict[str, Any]:
    response = game_state_response(
        game,
        color_scheme=session_data.get(SESSION_KEY_COLOR_SCHEME, "light"),
        hide_hole_card=config.game.hide_hole_card,
    )
    return {"type": "state", "data": response.model_dump()}


async def _reveal_dealer(session_id: str, game: BlackjackGame) -> None:
    """Stream the dealer's turn, one message per step."""
    for step in game.stand_steps():
        if step.phase != Phase.DEALER_TURN:
            continue
        await manager.send_message(
            session_id,
            {
                "type": "dealer_step",
                "data": hand_to_response(step.dealer_hand).model_dump(),
            },
        )
        await asyncio.sleep(config.game.reveal_delay)


@router.websocket("/game/{session_id}")
async def game_websocket(websocket: WebSocket, session_id: str) -> None:
    """
    Play a session over a WebSocket.

    Client messages: {"action": "hit" | "stand" | "restart" | "state"}.
    Server messages: {"type": "state" | "dealer_step" | "error", ...}.

    The session's game is looked up on every message, so the socket always
    plays the same game as the HTTP routes.
    """
    session_data = await get_session(session_id)
    if session_data is None:
        await websocket.close(code=WS_CLOSE_UNKNOWN_SESSION)
        return

    await manager.connect(websocket, session_id)

    try:
        game = get_game(session_id) or start_game(session_id)
        await manager.send_message(session_id, _state_message(game, session_data))

        while True:
            message = await websocket.receive_json()
            action = message.get("action")

            session_data = await get_session(session_id)
            if session_data is None:
                await websocket.close(code=WS_CLOSE_UNKNOWN_SESSION)
                break
            game = get_game(session_id) or start_game(session_id)

            if action == "stand" and game.can_stand:
                await _reveal_dealer(session_id, game)
                ok = True
            elif action == "hit":
                ok = game.hit()
            elif action == "restart":
                ok = game.restart()
            elif action == "state":
                ok = True
            else:
                ok = False

            if not ok:
                await manager.send_message(
                    session_id,
                    {"type": "error", "message": f"Cannot {action} now ({game.phase})"},
                )
                continue

            await manager.send_message(session_id, _state_message(game, session_data))
    except WebSocketDisconnect:
        logger.debug("WebSocket for session closed")
    finally:
        manager.disconnect(session_id)
