"""WebSocket connection manager.

Pushes committed game events to every client watching a game. It is one of
the game service's notifiers, and also relays events that other instances
publish through Redis.
"""

import logging
from typing import Any

from fastapi import WebSocket, WebSocketDisconnect

logger = logging.getLogger(__name__)


class ConnectionManager:
    """Manages WebSocket connections per game."""

    def __init__(self) -> None:
        """Initialize the connection manager."""
        # game_id -> connected sockets
        self.active_connections: dict[str, list[WebSocket]] = {}

    async def connect(self, websocket: WebSocket, game_id: str) -> None:
        """Accept a new WebSocket connection for a game.

        Args:
            websocket: WebSocket connection
            game_id: Game code

        """
        await websocket.accept()
        self.active_connections.setdefault(game_id, []).append(websocket)
        logger.info("Client connected to game %s (%d watching)", game_id, self.count(game_id))

    def disconnect(self, websocket: WebSocket, game_id: str) -> None:
        """Forget a connection."""
        sockets = self.active_connections.get(game_id, [])
        if websocket in sockets:
            sockets.remove(websocket)
        if not sockets:
            self.active_connections.pop(game_id, None)

    def count(self, game_id: str) -> int:
        """Get the number of clients watching a game."""
        return len(self.active_connections.get(game_id, []))

    async def broadcast(self, game_id: str, event: dict[str, Any]) -> None:
        """Send an event to every client watching a game.

        Args:
            game_id: Game code
            event: JSON-ready event

        """
        disconnected = []
        for websocket in list(self.active_connections.get(game_id, [])):
            try:
                await websocket.send_json(event)
            except (WebSocketDisconnect, RuntimeError, ConnectionError, OSError):
                logger.warning("Connection lost to a client of game %s", game_id)
                disconnected.append(websocket)

        for websocket in disconnected:
            self.disconnect(websocket, game_id)

    async def listen(self, websocket: WebSocket, game_id: str) -> None:
        """Keep a connection open until the client goes away.

        Clients act through the HTTP endpoints; anything they send here is
        ignored.
        """
        try:
            while True:
                await websocket.receive_text()
        except WebSocketDisconnect:
            logger.info("Client disconnected from game %s", game_id)
        finally:
            self.disconnect(websocket, game_id)


websocket_manager = ConnectionManager()
