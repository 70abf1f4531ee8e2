# invaders_server/api/routes.py
"""API routes for the game server."""

import asyncio
import logging

from fastapi import APIRouter, HTTPException
from pydantic import BaseModel

from invaders_server.config.missions import MISSIONS
from invaders_server.config.settings import get_game_config
from invaders_server.services.load_simulator import simulate_server_load
from invaders_server.services.websocket_service import WebSocketService

logger = logging.getLogger(__name__)


class GameAction(BaseModel):
    action: str = "serverLoad"


class GameAPI:
    """API routes for game-related endpoints."""

    def __init__(self, websocket_service: WebSocketService):
        self.websocket_service = websocket_service
        self.router = APIRouter()
        self._setup_routes()

    def _setup_routes(self):
        """Set up all API routes."""

        @self.router.get("/")
        async def root():
            """Root endpoint."""
            return {"message": "Game Server Running"}

        @self.router.get("/api/game/config")
        async def get_game_config_endpoint():
            """Get the default game configuration."""
            return get_game_config(self.websocket_service.config)

        @self.router.get("/api/missions")
        async def get_missions():
            """List the selectable mission profiles."""
            return {"missions": [mission.to_dict() for mission in MISSIONS]}

        @self.router.get("/api/game/stats")
        async def get_game_stats():
            """Get live session statistics."""
            return self.websocket_service.get_stats()

        @self.router.post("/api/game-action")
        async def game_action(body: GameAction):
            """Run the synthetic server load routine in a worker thread."""
            logger.info("Game action received: %s", body.action)
            try:
                return await asyncio.to_thread(simulate_server_load)
            except Exception as e:
                logger.exception("Error processing game action")
                raise HTTPException(status_code=500, detail=str(e))
