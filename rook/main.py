"""FastAPI main application."""

import contextlib
import logging
import sys
from collections.abc import AsyncGenerator
from contextlib import asynccontextmanager

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from pymongo.errors import PyMongoError

from rook.api.routes import register_error_handlers, router
from rook.api.websocket import websocket_manager
from rook.config import settings
from rook.repositories.base import GameStore
from rook.repositories.game_repository import MongoGameRepository
from rook.repositories.memory_repository import InMemoryGameRepository
from rook.services.bot_runner import BotRunner
from rook.services.game_service import GameService
from rook.services.log_service import LogService
from rook.services.publisher_service import CHANNEL_PREFIX, PublisherService

# Configure logging for the app (must be after imports but before app usage)
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s | %(levelname)s | %(name)s | %(message)s",
    datefmt="%H:%M:%S",
    stream=sys.stdout,
)
logging.getLogger("rook").setLevel(logging.INFO)
logger = logging.getLogger(__name__)


async def open_game_store() -> GameStore:
    """Connect the configured game store, falling back to memory."""
    if settings.storage_backend == "memory":
        return InMemoryGameRepository()

    repository = MongoGameRepository()
    try:
        await repository.connect()
    except (ConnectionError, TimeoutError, OSError, PyMongoError):
        logger.warning("MongoDB not available, keeping games in memory")
        return InMemoryGameRepository()
    return repository


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """Lifespan context manager for startup and shutdown events.

    Handles:
    - Game store connection (MongoDB or in-memory)
    - Redis pub/sub for cross-instance event relay
    - Bot runner background task
    - Cleanup on shutdown
    """
    app.state.publisher_service = PublisherService()
    await app.state.publisher_service.connect()

    app.state.game_store = await open_game_store()
    app.state.game_service = GameService(
        app.state.game_store,
        notifiers=[websocket_manager, app.state.publisher_service],
        log_service=LogService(),
    )

    # Events published by other instances go to our own WebSocket clients
    if app.state.publisher_service.is_connected:
        await app.state.publisher_service.subscribe(
            f"{CHANNEL_PREFIX}*", websocket_manager.broadcast
        )
        await app.state.publisher_service.start_subscriber()

    app.state.bot_runner = None
    if settings.enable_bots:
        app.state.bot_runner = BotRunner(app.state.game_service)
        await app.state.bot_runner.start()

    yield

    if app.state.bot_runner:
        await app.state.bot_runner.stop()

    if isinstance(app.state.game_store, MongoGameRepository):
        with contextlib.suppress(PyMongoError):
            await app.state.game_store.disconnect()

    # Close Redis connection
    with contextlib.suppress(Exception):
        await app.state.publisher_service.close()


# Create FastAPI app
app = FastAPI(
    title="Rook API",
    description="Four-player Rook card game server with bot players",
    version="1.0.0",
    lifespan=lifespan,
)

# Configure CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=[settings.frontend_url, "http://localhost:3000", "http://localhost:5173"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

register_error_handlers(app)
app.include_router(router)


@app.get("/")
async def root() -> dict[str, str]:
    """API info."""
    return {
        "message": "Rook API",
        "version": "1.0.0",
        "status": "running",
    }


@app.get("/health")
async def health() -> dict[str, str]:
    """Health check endpoint."""
    return {"status": "healthy"}


def main() -> None:
    """Run the application."""
    uvicorn.run(
        "rook.main:app",
        host=settings.host,
        port=settings.port,
        reload=settings.environment == "development",
        log_level="info",
    )


if __name__ == "__main__":
    main()
