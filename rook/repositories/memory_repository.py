"""In-process game store.

Keeps serialized documents, so callers never share mutable state with the
store. The version check and the write happen with no await in between,
which makes ``conditional_save`` atomic on a single event loop.
"""

import copy
import logging
from typing import Any

from rook.errors import NotFound
from rook.models.enums import GameStatus
from rook.models.game import Game
from rook.services.game_serializer import deserialize_game, serialize_game

logger = logging.getLogger(__name__)


class InMemoryGameRepository:
    """Game store backed by a dict of serialized documents."""

    def __init__(self) -> None:
        """Initialize an empty store."""
        self._documents: dict[str, dict[str, Any]] = {}

    async def load(self, game_id: str) -> Game:
        """Load a game, raising NotFound if absent."""
        document = self._documents.get(game_id)
        if document is None:
            raise NotFound(f"Game {game_id} not found")
        return deserialize_game(copy.deepcopy(document))

    async def conditional_save(self, game: Game, expected_version: int) -> bool:
        """Replace a game if the stored version equals ``expected_version``."""
        current = self._documents.get(game.id)
        if current is None or current["version"] != expected_version:
            return False
        self._documents[game.id] = serialize_game(game)
        return True

    async def insert(self, game: Game) -> bool:
        """Store a new game unless the code is taken."""
        if game.id in self._documents:
            return False
        self._documents[game.id] = serialize_game(game)
        return True

    async def find_active(self, limit: int = 100) -> list[Game]:
        """List unfinished games, most recently updated first."""
        finished = GameStatus.FINISHED.value
        documents = [d for d in self._documents.values() if d["status"] != finished]
        documents.sort(key=lambda d: d["updated_at"], reverse=True)
        return [deserialize_game(copy.deepcopy(d)) for d in documents[:limit]]
