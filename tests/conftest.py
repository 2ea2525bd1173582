"""Shared fixtures for the test suite."""

import pytest

from rook.bots import RuleBasedBot
from rook.models import state_machine
from rook.models.game import Game
from rook.repositories.memory_repository import InMemoryGameRepository
from rook.services.concurrency import RetryPolicy
from rook.services.game_service import GameService

GAME_CODE = "ABCDEF"
SEED = "fixture-seed"


@pytest.fixture
def anyio_backend():
    """Configure anyio to use asyncio backend."""
    return "asyncio"


@pytest.fixture
def lobby_game() -> Game:
    """A freshly created game with only the host seated."""
    return state_machine.new_game(GAME_CODE, "Host", SEED).game


@pytest.fixture
def full_game(lobby_game) -> Game:
    """A game with all four seats taken by humans."""
    game = lobby_game
    for name in ("Alice", "Bob", "Carol"):
        game = state_machine.join_game(game, name).game
    return game


@pytest.fixture
def bidding_game(full_game) -> Game:
    """Round 1 dealt, host partnered with seat 2; seat 0 to bid."""
    game = state_machine.choose_partner(full_game, 2).game
    return state_machine.deal(game).game


@pytest.fixture
def trump_game(bidding_game) -> Game:
    """Seat 0 won the auction at 50 after everyone else passed."""
    game = state_machine.place_bid(bidding_game, 0, 50).game
    for seat in (1, 2, 3):
        game = state_machine.pass_bid(game, seat).game
    return game


@pytest.fixture
def playing_game(trump_game) -> Game:
    """Seat 0 chose trump and discarded like a rule-based bot would."""
    phase = trump_game.phase
    suit, discards = RuleBasedBot(0).choose_trump(phase.hands[0] + phase.kitty)
    return state_machine.choose_trump(trump_game, 0, suit, discards).game


@pytest.fixture
def store() -> InMemoryGameRepository:
    """Empty in-memory game store."""
    return InMemoryGameRepository()


@pytest.fixture
def fast_policy() -> RetryPolicy:
    """Retry policy without backoff delays."""
    return RetryPolicy(max_attempts=3, backoff_seconds=0)


@pytest.fixture
def game_service(store, fast_policy) -> GameService:
    """Game service over the in-memory store, without notifiers."""
    return GameService(store, policy=fast_policy, auto_deal=True)
