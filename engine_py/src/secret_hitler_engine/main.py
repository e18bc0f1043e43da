"""FastAPI main application for the Secret Hitler room engine"""

import logging
import os
from typing import List, Optional

from fastapi import FastAPI, WebSocket
from fastapi.middleware.cors import CORSMiddleware

from .registry import RoomRegistry
from .ws.server import GameServer

# Configure logging
logging.basicConfig(level=os.getenv("LOG_LEVEL", "info").upper())
logger = logging.getLogger(__name__)


def cors_origins() -> List[str]:
    raw = os.getenv("CORS_ORIGINS", "*")
    return [origin.strip() for origin in raw.split(",") if origin.strip()]


def create_app(registry: Optional[RoomRegistry] = None) -> FastAPI:
    server = GameServer(registry)
    app = FastAPI(title="Secret Hitler Room Engine", version="1.0.0")
    app.state.server = server

    app.add_middleware(
        CORSMiddleware,
        allow_origins=cors_origins(),
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    @app.get("/")
    async def root():
        return {"message": "Secret Hitler Room Engine", "version": "1.0.0"}

    @app.get("/health")
    async def health_check():
        return {"status": "healthy", "rooms": server.registry.active_room_count()}

    @app.websocket("/ws")
    async def websocket_endpoint(websocket: WebSocket):
        await server.handle_websocket(websocket)

    return app


app = create_app()

if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
