# invaders_server/main.py
"""FastAPI application wiring and server entry point."""

import logging
from typing import Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from invaders_server.api.routes import GameAPI
from invaders_server.config.settings import HOST, LOG_LEVEL, PORT
from invaders_server.services.websocket_service import WebSocketService

logger = logging.getLogger(__name__)


def create_app(websocket_service: Optional[WebSocketService] = None) -> FastAPI:
    """Build the application around a websocket service."""
    websocket_service = websocket_service or WebSocketService()

    app = FastAPI(title="Invaders Game Server")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(GameAPI(websocket_service).router)

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket, mission: Optional[str] = None):
        await websocket_service.handle_connection(websocket, mission)

    app.state.websocket_service = websocket_service
    return app


app = create_app()


def main():
    import uvicorn

    logging.basicConfig(
        level=LOG_LEVEL,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    logger.info("Game server listening on %s:%s", HOST, PORT)
    uvicorn.run(app, host=HOST, port=PORT)


if __name__ == "__main__":
    main()
