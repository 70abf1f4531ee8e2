# invaders_server/services/websocket_service.py
"""WebSocket connection management and message handling."""

import logging
from typing import Dict, Optional

from fastapi import WebSocket, WebSocketDisconnect

from invaders_server.config.missions import get_mission_by_id
from invaders_server.config.settings import DEFAULT_CONFIG, GameConfig, get_game_config
from .session import GameSession

logger = logging.getLogger(__name__)


class WebSocketService:
    """Manages WebSocket connections, one game session per connection."""

    def __init__(self, config: GameConfig = DEFAULT_CONFIG):
        self.config = config
        self.sessions: Dict[str, GameSession] = {}

    def create_session(self, websocket: WebSocket, mission_id: Optional[str] = None) -> GameSession:
        """Create a session bound to this socket, tuned for the requested mission."""
        mission = get_mission_by_id(mission_id)
        if mission_id and mission is None:
            logger.warning("Unknown mission %r requested, using defaults", mission_id)
        config = mission.apply(self.config) if mission else self.config
        return GameSession(websocket.send_json, config=config, mission=mission)

    async def handle_connection(self, websocket: WebSocket, mission_id: Optional[str] = None):
        """Handle a new WebSocket connection."""
        logger.info("WebSocket connection attempt from %s", websocket.client)
        await websocket.accept()

        session = self.create_session(websocket, mission_id)
        self.sessions[session.id] = session
        logger.info("Client %s connected as session %s", websocket.client, session.id)

        try:
            await self._send_initial_state(websocket, session)
            session.start()
            await self._handle_client_messages(websocket, session)
        except WebSocketDisconnect:
            logger.info("Session %s disconnected", session.id)
        except Exception:
            logger.exception("WebSocket error for session %s", session.id)
        finally:
            await self._handle_disconnect(session)

    async def _send_initial_state(self, websocket: WebSocket, session: GameSession):
        """Send the session config and the first snapshot."""
        initial_data = {
            "type": "init",
            "sessionId": session.id,
            "config": get_game_config(session.config),
            "mission": session.mission.to_dict() if session.mission else None,
            "state": session.service.get_state(),
        }
        await websocket.send_json(initial_data)

    async def _handle_client_messages(self, websocket: WebSocket, session: GameSession):
        """Feed incoming frames to the session until the client leaves."""
        while True:
            raw = await websocket.receive_text()
            session.handle_text(raw)

    async def _handle_disconnect(self, session: GameSession):
        """Stop the session and forget it."""
        await session.stop()
        self.sessions.pop(session.id, None)

    def get_stats(self) -> dict:
        """Summaries of every live session."""
        return {
            "activeSessions": len(self.sessions),
            "sessions": [
                {
                    "id": session.id,
                    "mission": session.mission.id if session.mission else None,
                    "score": session.state.score,
                    "wave": session.state.wave,
                    "bossPhase": session.state.bossPhase,
                    "gameOver": session.state.gameOver,
                }
                for session in self.sessions.values()
            ],
        }
