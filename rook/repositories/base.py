"""Persistence contract for game documents."""

from typing import Protocol

from rook.models.game import Game


class GameStore(Protocol):
    """Storage used by the concurrency controller.

    ``conditional_save`` must be atomic: it writes only when the stored
    version still equals ``expected_version``.
    """

    async def load(self, game_id: str) -> Game:
        """Load a game, raising ``NotFound`` if it does not exist."""
        ...

    async def conditional_save(self, game: Game, expected_version: int) -> bool:
        """Replace the stored game if its version matches; report success."""
        ...

    async def insert(self, game: Game) -> bool:
        """Store a new game; return False if the id is already taken."""
        ...

    async def find_active(self, limit: int = 100) -> list[Game]:
        """List games that have not finished, most recently updated first."""
        ...
