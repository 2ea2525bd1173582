"""Optimistic concurrency control for game documents.

Every mutation reads the current document, computes the next one with a
pure apply function and writes it back only if nobody else committed in
between. Losing the race re-reads and recomputes, within a retry policy.
"""

import asyncio
import logging
from collections.abc import Awaitable, Callable
from dataclasses import dataclass
from datetime import UTC, datetime

from rook.config import settings
from rook.errors import ConcurrencyConflict, InvariantViolation
from rook.models.game import Game
from rook.models.state_machine import Outcome
from rook.repositories.base import GameStore

logger = logging.getLogger(__name__)

ApplyFn = Callable[[Game], Outcome]
SleepFn = Callable[[float], Awaitable[None]]


@dataclass(frozen=True)
class RetryPolicy:
    """Bounded retry with linear backoff.

    Attributes:
        max_attempts: Conditional writes tried before giving up
        backoff_seconds: Delay multiplied by the attempt number after a conflict

    """

    max_attempts: int = 3
    backoff_seconds: float = 0.05

    @classmethod
    def from_settings(cls) -> "RetryPolicy":
        """Build the policy from application settings."""
        return cls(
            max_attempts=settings.max_write_attempts,
            backoff_seconds=settings.retry_backoff_seconds,
        )

    def backoff(self, attempt: int) -> float:
        """Get the delay after a failed attempt (1-indexed)."""
        return self.backoff_seconds * attempt


class ConcurrencyController:
    """Applies operations to games through versioned conditional writes.

    Domain errors raised by the apply function propagate immediately and are
    never retried; only version conflicts are.
    """

    def __init__(
        self,
        store: GameStore,
        policy: RetryPolicy | None = None,
        sleep: SleepFn = asyncio.sleep,
    ) -> None:
        """Initialize the controller.

        Args:
            store: Game persistence
            policy: Retry policy (defaults to settings)
            sleep: Awaitable used for backoff

        """
        self.store = store
        self.policy = policy or RetryPolicy.from_settings()
        self._sleep = sleep

    async def mutate(self, game_id: str, apply: ApplyFn) -> Outcome:
        """Apply an operation to a game and commit it.

        Args:
            game_id: Game code
            apply: Pure function from the current game to an Outcome

        Returns:
            The committed outcome; its game carries the new version

        Raises:
            NotFound: If the game does not exist
            ConcurrencyConflict: If every attempt lost the version race
            RookError: Any rules or state error raised by ``apply``

        """
        for attempt in range(1, self.policy.max_attempts + 1):
            current = await self.store.load(game_id)
            outcome = apply(current)

            updated = outcome.game
            updated.version = current.version + 1
            updated.updated_at = datetime.now(UTC)
            self._verify(updated)

            if await self.store.conditional_save(updated, expected_version=current.version):
                return outcome

            logger.info(
                "Version conflict on game %s at v%d (attempt %d/%d)",
                game_id,
                current.version,
                attempt,
                self.policy.max_attempts,
            )
            if attempt < self.policy.max_attempts:
                await self._sleep(self.policy.backoff(attempt))

        logger.warning(
            "Giving up on game %s after %d conflicting writes", game_id, self.policy.max_attempts
        )
        raise ConcurrencyConflict(
            f"Game {game_id} changed concurrently {self.policy.max_attempts} times, try again"
        )

    @staticmethod
    def _verify(game: Game) -> None:
        try:
            game.check_integrity()
        except InvariantViolation:
            logger.error("Refusing to write inconsistent game %s", game.id)
            raise
