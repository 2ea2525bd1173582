"""Tests for optimistic concurrency on game documents.

The interleaving store yields to the event loop inside ``load``, so
concurrent mutations all read the same version before any of them writes.
"""

import asyncio
from unittest.mock import AsyncMock

import pytest

from rook.errors import ConcurrencyConflict, GameFull, IllegalBid, InvariantViolation
from rook.models import state_machine
from rook.models.card import ROOK
from rook.models.state_machine import Outcome
from rook.repositories.memory_repository import InMemoryGameRepository
from rook.services.concurrency import ConcurrencyController, RetryPolicy
from rook.services.game_service import GameService

pytestmark = pytest.mark.anyio

GAME_CODE = "ABCDEF"


class InterleavingStore(InMemoryGameRepository):
    """In-memory store that yields during reads and counts operations."""

    def __init__(self) -> None:
        super().__init__()
        self.loads = 0
        self.writes = 0
        self.conflicts = 0

    async def load(self, game_id):
        self.loads += 1
        game = await super().load(game_id)
        await asyncio.sleep(0)
        return game

    async def conditional_save(self, game, expected_version):
        saved = await super().conditional_save(game, expected_version)
        if saved:
            self.writes += 1
        else:
            self.conflicts += 1
        return saved


class AlwaysStaleStore(InterleavingStore):
    """Store whose every conditional write loses."""

    async def conditional_save(self, game, expected_version):
        self.conflicts += 1
        return False


async def seed(store, game):
    assert await store.insert(game)
    return game


@pytest.fixture
def interleaving_store():
    return InterleavingStore()


def service_for(store, max_attempts=3):
    return GameService(store, policy=RetryPolicy(max_attempts=max_attempts, backoff_seconds=0))


class TestConcurrentMutations:
    """Test racing writers against one game."""

    async def test_two_bots_take_distinct_seats(self, interleaving_store, lobby_game):
        """Two concurrent bot adds at a two-player table fill seats 2 and 3."""
        game = state_machine.join_game(lobby_game, "Alice").game
        await seed(interleaving_store, game)
        service = service_for(interleaving_store)

        await asyncio.gather(service.add_bot(GAME_CODE), service.add_bot(GAME_CODE))

        stored = await interleaving_store.load(GAME_CODE)
        bots = [p for p in stored.players if p.is_bot]
        assert sorted(p.seat for p in bots) == [2, 3]
        assert len({p.name for p in bots}) == 2
        assert stored.version == game.version + 2
        assert interleaving_store.conflicts >= 1

    async def test_last_seat_goes_to_one_bot(self, interleaving_store, lobby_game):
        """With one seat open, exactly one concurrent bot add fails with GameFull."""
        game = lobby_game
        for name in ("Alice", "Bob"):
            game = state_machine.join_game(game, name).game
        await seed(interleaving_store, game)
        service = service_for(interleaving_store)

        results = await asyncio.gather(
            service.add_bot(GAME_CODE), service.add_bot(GAME_CODE), return_exceptions=True
        )

        errors = [r for r in results if isinstance(r, Exception)]
        assert len(errors) == 1
        assert isinstance(errors[0], GameFull)
        stored = await interleaving_store.load(GAME_CODE)
        assert len(stored.players) == 4
        assert stored.version == game.version + 1

    async def test_versions_count_successful_writes(self, interleaving_store, lobby_game):
        """The final version is the initial one plus every committed write."""
        await seed(interleaving_store, lobby_game)
        service = service_for(interleaving_store, max_attempts=10)

        results = await asyncio.gather(
            *(service.join_game(GAME_CODE, name) for name in ("Alice", "Bob", "Carol")),
            return_exceptions=True,
        )

        successes = [r for r in results if not isinstance(r, Exception)]
        stored = await interleaving_store.load(GAME_CODE)
        assert len(successes) == interleaving_store.writes
        assert stored.version == lobby_game.version + interleaving_store.writes
        assert sorted(r.version for r in successes) == list(
            range(lobby_game.version + 1, stored.version + 1)
        )
        assert len({p.name for p in stored.players}) == len(stored.players)

    async def test_conflict_recomputes_from_fresh_state(self, interleaving_store, bidding_game):
        """A losing bid is recomputed against the winner's state and rejected."""
        await seed(interleaving_store, bidding_game)
        service = service_for(interleaving_store)

        results = await asyncio.gather(
            service.place_bid(GAME_CODE, 0, 50),
            service.place_bid(GAME_CODE, 0, 60),
            return_exceptions=True,
        )

        assert sum(1 for r in results if isinstance(r, Exception)) == 1
        stored = await interleaving_store.load(GAME_CODE)
        assert stored.turn == 1
        assert stored.version == bidding_game.version + 1


class TestRetryPolicy:
    """Test bounded retries and error propagation."""

    def test_linear_backoff(self):
        """Backoff grows with the attempt number."""
        policy = RetryPolicy(max_attempts=3, backoff_seconds=0.05)
        assert policy.backoff(1) == 0.05
        assert policy.backoff(2) == 0.1

    async def test_retries_exhausted(self, lobby_game):
        """After the last conflicting attempt the caller gets ConcurrencyConflict."""
        store = AlwaysStaleStore()
        await seed(store, lobby_game)
        sleep = AsyncMock()
        controller = ConcurrencyController(
            store, RetryPolicy(max_attempts=3, backoff_seconds=0.05), sleep=sleep
        )

        with pytest.raises(ConcurrencyConflict):
            await controller.mutate(GAME_CODE, state_machine.add_bot)

        assert store.loads == 3
        assert store.conflicts == 3
        assert [c.args[0] for c in sleep.await_args_list] == [0.05, 0.1]

    async def test_domain_errors_not_retried(self, interleaving_store, bidding_game):
        """Rules errors propagate on the first attempt without writing."""
        await seed(interleaving_store, bidding_game)
        controller = ConcurrencyController(interleaving_store, RetryPolicy(3, 0))

        with pytest.raises(IllegalBid):
            await controller.mutate(GAME_CODE, lambda g: state_machine.place_bid(g, 0, 45))

        assert interleaving_store.loads == 1
        assert interleaving_store.writes == 0
        assert interleaving_store.conflicts == 0

    async def test_corrupt_result_not_written(self, interleaving_store, bidding_game):
        """A result that breaks deck integrity is refused before the write."""
        await seed(interleaving_store, bidding_game)
        controller = ConcurrencyController(interleaving_store, RetryPolicy(3, 0))

        def duplicate_rook(game):
            game.phase.kitty.append(ROOK)
            return Outcome(game)

        with pytest.raises(InvariantViolation):
            await controller.mutate(GAME_CODE, duplicate_rook)

        assert interleaving_store.writes == 0
        stored = await interleaving_store.load(GAME_CODE)
        assert stored.version == bidding_game.version
