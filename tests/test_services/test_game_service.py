"""Tests for the game service operation surface."""

from unittest.mock import AsyncMock

import pytest

from rook.constants import GAME_CODE_ALPHABET
from rook.errors import ConcurrencyConflict, InvalidTransition, NotFound, ValidationError
from rook.models.enums import EventType, GameStatus
from rook.services.concurrency import RetryPolicy
from rook.services.game_service import GameService, generate_game_code, normalize_game_code

pytestmark = pytest.mark.anyio


def codes(*values):
    """Code factory that hands out the given codes in order."""
    iterator = iter(values)
    return lambda: next(iterator)


async def full_table(service):
    game = await service.create_game("Host")
    for name in ("Alice", "Bob", "Carol"):
        await service.join_game(game.id, name)
    return game.id


class TestGameCodes:
    """Test code generation and normalization."""

    def test_generated_code_format(self):
        """Codes are six characters from the unambiguous alphabet."""
        for _ in range(50):
            code = generate_game_code()
            assert len(code) == 6
            assert all(c in GAME_CODE_ALPHABET for c in code)
            assert not set(code) & {"I", "O"}

    def test_normalize(self):
        """Codes are trimmed and upper-cased."""
        assert normalize_game_code(" abcdef ") == "ABCDEF"

    @pytest.mark.parametrize("code", ["ABC", "ABCDEFG", "ABCDE0", "ABCDEI", 123456])
    def test_malformed_codes(self, code):
        """Bad lengths and characters are rejected."""
        with pytest.raises(ValidationError):
            normalize_game_code(code)

    async def test_code_collision_retries(self, store, fast_policy):
        """A taken code is skipped in favor of a fresh one."""
        service = GameService(store, policy=fast_policy, code_factory=codes("AAAAAA", "AAAAAA", "BBBBBB"))
        first = await service.create_game("Host")
        second = await service.create_game("Other")
        assert first.id == "AAAAAA"
        assert second.id == "BBBBBB"

    async def test_code_space_exhausted(self, store, fast_policy):
        """After five collisions creation gives up."""
        service = GameService(store, policy=fast_policy, code_factory=lambda: "AAAAAA")
        await service.create_game("Host")
        with pytest.raises(ConcurrencyConflict):
            await service.create_game("Other")


class TestOperations:
    """Test operations through the service."""

    async def test_create_game(self, game_service, store):
        """Creating a game stores version 1 with the host at seat 0."""
        game = await game_service.create_game("Host")
        stored = await store.load(game.id)
        assert stored.version == 1
        assert stored.status == GameStatus.LOBBY
        assert stored.players[0].name == "Host"
        assert len(stored.shuffle_seed) == 32

    async def test_create_game_bad_name(self, game_service):
        """Host names are validated."""
        with pytest.raises(ValidationError):
            await game_service.create_game("   ")

    async def test_unknown_game(self, game_service):
        """Operations on a missing game raise NotFound."""
        with pytest.raises(NotFound):
            await game_service.join_game("ZZZZZZ", "Alice")
        with pytest.raises(NotFound):
            await game_service.get_game("zzzzzz")

    async def test_join_bumps_version(self, game_service):
        """Each committed operation bumps the version by one."""
        game = await game_service.create_game("Host")
        joined = await game_service.join_game(game.id.lower(), "Alice")
        assert joined.version == 2
        assert joined.players[-1].name == "Alice"

    async def test_choose_partner_deals(self, game_service):
        """With auto-deal the first round is dealt right away."""
        game_id = await full_table(game_service)
        game = await game_service.choose_partner(game_id, 2)
        assert game.status == GameStatus.BIDDING
        assert game.round_number == 1

    async def test_choose_partner_without_auto_deal(self, store, fast_policy):
        """Without auto-deal the game waits in partner selection."""
        service = GameService(store, policy=fast_policy, auto_deal=False)
        game_id = await full_table(service)
        game = await service.choose_partner(game_id, 3)
        assert game.status == GameStatus.PARTNER_SELECTION
        game = await service.deal(game_id)
        assert game.status == GameStatus.BIDDING

    async def test_card_strings_are_parsed(self, game_service):
        """Cards arrive in wire form; malformed ones are rejected before loading."""
        game_id = await full_table(game_service)
        await game_service.choose_partner(game_id, 2)
        await game_service.place_bid(game_id, 0, 50)
        for seat in (1, 2, 3):
            await game_service.pass_bid(game_id, seat)
        with pytest.raises(ValidationError):
            await game_service.choose_trump(game_id, 0, "Red", ["Red1", "Red2", "Red3", "Red4", "Blue5"])

        game = await game_service.get_game(game_id)
        pool = game.phase.hands[0] + game.phase.kitty
        discards = [str(card) for card in game.phase.kitty]
        game = await game_service.choose_trump(game_id, 0, "Red", discards)
        assert game.status == GameStatus.PLAYING
        assert sorted(map(str, game.hand_of(0))) == sorted(
            str(c) for c in pool if str(c) not in discards
        )
        with pytest.raises(ValidationError):
            await game_service.play_card(game_id, 1, "Purple3")


class TestNotifications:
    """Test event delivery to notifiers."""

    async def test_events_broadcast(self, store, fast_policy):
        """Committed events reach every notifier with the committed version."""
        notifier = AsyncMock()
        service = GameService(store, notifiers=[notifier], policy=fast_policy)
        game = await service.create_game("Host")
        await service.add_bot(game.id)

        messages = [c.args[1] for c in notifier.broadcast.await_args_list]
        assert [m["event"] for m in messages] == [
            EventType.GAME_CREATED.value,
            EventType.BOT_ADDED.value,
        ]
        assert [m["version"] for m in messages] == [1, 2]
        assert all(c.args[0] == game.id for c in notifier.broadcast.await_args_list)

    async def test_broadcast_failure_is_swallowed(self, store, fast_policy):
        """A failing notifier never fails the committed operation."""
        broken = AsyncMock()
        broken.broadcast.side_effect = ConnectionError("redis down")
        healthy = AsyncMock()
        service = GameService(store, notifiers=[broken, healthy], policy=fast_policy)

        game = await service.create_game("Host")
        joined = await service.join_game(game.id, "Alice")

        assert joined.version == 2
        assert (await store.load(game.id)).version == 2
        assert healthy.broadcast.await_count == 2

    async def test_rejected_operation_not_broadcast(self, store):
        """Failed operations produce no events."""
        notifier = AsyncMock()
        service = GameService(store, notifiers=[notifier], policy=RetryPolicy(3, 0))
        game = await service.create_game("Host")
        notifier.reset_mock()

        with pytest.raises(ValidationError):
            await service.join_game(game.id, "")
        notifier.broadcast.assert_not_awaited()


class DealingNotifier:
    """Notifier that deals the game as soon as partners are chosen, like a bot runner tick."""

    def __init__(self):
        self.service = None

    async def broadcast(self, game_id, event):
        if event["event"] == EventType.PARTNER_CHOSEN.value:
            await self.service.deal(game_id)


class TestAutoDealRace:
    """Test auto-deal when another actor deals first."""

    async def test_choose_partner_succeeds_when_dealt_concurrently(self, store, fast_policy):
        """A committed partner choice is reported as success even if someone else dealt."""
        notifier = DealingNotifier()
        service = GameService(store, notifiers=[notifier], policy=fast_policy, auto_deal=True)
        notifier.service = service
        game_id = await full_table(service)

        game = await service.choose_partner(game_id, 2)

        assert game.status == GameStatus.BIDDING
        assert game.round_number == 1
        assert game.teams.team0 == (0, 2)
        assert (await store.load(game_id)).version == game.version

    async def test_deal_rejected_before_partner_choice(self, store, fast_policy):
        """Dealing a lobby game is still an invalid transition."""
        service = GameService(store, policy=fast_policy, auto_deal=True)
        game_id = await full_table(service)
        with pytest.raises(InvalidTransition):
            await service.deal(game_id)
