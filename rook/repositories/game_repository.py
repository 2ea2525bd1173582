"""Game repository for MongoDB persistence."""

import logging
from typing import Any

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo import ASCENDING, DESCENDING
from pymongo.errors import DuplicateKeyError, PyMongoError

from rook.config import settings
from rook.errors import NotFound
from rook.models.enums import GameStatus
from rook.models.game import Game
from rook.services.game_serializer import deserialize_game, serialize_game

logger = logging.getLogger(__name__)


class MongoGameRepository:
    """Repository for game persistence using MongoDB.

    Every write is conditional on the stored version, which makes the
    document's ``version`` field the optimistic lock for the whole game.
    """

    def __init__(self) -> None:
        """Initialize repository."""
        self.client: AsyncIOMotorClient[dict[str, Any]] | None = None
        self.db: AsyncIOMotorDatabase[dict[str, Any]] | None = None

    async def connect(self) -> None:
        """Connect to MongoDB and create indexes."""
        try:
            self.client = AsyncIOMotorClient(
                settings.mongodb_uri,
                serverSelectionTimeoutMS=2000,  # 2 second timeout
            )
            self.db = self.client[settings.mongodb_database]

            # Verify connection
            await self.client.admin.command("ping")
            logger.info("Connected to MongoDB: %s", settings.mongodb_database)

            await self._create_indexes()

        except PyMongoError:
            logger.warning("MongoDB not available")
            raise

    async def _create_indexes(self) -> None:
        """Create indexes for efficient queries."""
        if self.db is None:
            return

        try:
            await self.db.games.create_index("status")
            await self.db.games.create_index([("status", ASCENDING), ("updated_at", DESCENDING)])
            logger.info("MongoDB indexes created successfully")
        except PyMongoError:
            logger.exception("Error creating indexes")

    async def disconnect(self) -> None:
        """Disconnect from MongoDB."""
        if self.client:
            self.client.close()
            logger.info("Disconnected from MongoDB")

    def _games(self) -> Any:
        if self.db is None:
            raise RuntimeError("MongoGameRepository is not connected")
        return self.db.games

    async def load(self, game_id: str) -> Game:
        """Load a game by code.

        Args:
            game_id: Game code

        Returns:
            Restored Game instance

        Raises:
            NotFound: If no game has this code
        """
        try:
            result = await self._games().find_one({"_id": game_id})
        except PyMongoError:
            logger.exception("Error finding game %s", game_id)
            raise
        if not result:
            raise NotFound(f"Game {game_id} not found")
        return deserialize_game(result)

    async def conditional_save(self, game: Game, expected_version: int) -> bool:
        """Replace a game only if the stored version is still ``expected_version``.

        Args:
            game: New game state (already carrying the incremented version)
            expected_version: Version the caller read

        Returns:
            True if the write happened, False on a version mismatch
        """
        try:
            result = await self._games().replace_one(
                {"_id": game.id, "version": expected_version},
                serialize_game(game),
            )
        except PyMongoError:
            logger.exception("Error saving game %s", game.id)
            raise

        if result.matched_count == 1:
            logger.debug("Game %s saved at version %d", game.id, game.version)
            return True
        return False

    async def insert(self, game: Game) -> bool:
        """Save a new game.

        Returns:
            True if stored, False if the game code is already in use
        """
        try:
            await self._games().insert_one(serialize_game(game))
        except DuplicateKeyError:
            return False
        except PyMongoError:
            logger.exception("Error creating game %s", game.id)
            raise
        return True

    async def find_active(self, limit: int = 100) -> list[Game]:
        """Find all active (non-finished) games.

        Args:
            limit: Maximum number of games to return

        Returns:
            List of active Game instances
        """
        try:
            cursor = (
                self._games()
                .find({"status": {"$ne": GameStatus.FINISHED.value}})
                .sort("updated_at", DESCENDING)
                .limit(limit)
            )

            games = []
            async for doc in cursor:
                try:
                    games.append(deserialize_game(doc))
                except (KeyError, ValueError) as e:
                    logger.warning("Error deserializing game %s: %s", doc.get("_id"), e)

        except PyMongoError:
            logger.exception("Error finding active games")
            return []
        else:
            return games
