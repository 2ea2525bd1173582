"""End-to-end test: a whole game from lobby to final score.

The host's decisions come from a rule-based bot submitted through the same
path the bot runner uses, so the game runs to completion without a client.
"""

import pytest

from rook.bots import RuleBasedBot
from rook.models.enums import EventType, GameStatus
from rook.services.bot_runner import BotRunner
from rook.services.game_service import GameService

pytestmark = pytest.mark.anyio

MAX_HOST_ACTIONS = 5_000


class RecordingNotifier:
    """Notifier that keeps every broadcast event."""

    def __init__(self):
        self.events = []

    async def broadcast(self, game_id, event):
        self.events.append(event)


async def play_to_the_end(service, runner, game_id):
    host = RuleBasedBot(0)
    game = await service.get_game(game_id)
    for _ in range(MAX_HOST_ACTIONS):
        if not game.is_active():
            return game
        game = await runner.run_until_human(game_id)
        if game.is_active() and game.acting_seat() == 0:
            await runner.submit(game_id, 0, host.decide(game))
            game = await service.get_game(game_id)
    pytest.fail(f"Game {game_id} did not finish: {game}")


async def test_full_game(store, fast_policy):
    """Three bots and a bot-driven host play until one team reaches 200."""
    notifier = RecordingNotifier()
    service = GameService(store, notifiers=[notifier], policy=fast_policy, auto_deal=True)
    runner = BotRunner(service, poll_interval=0, think_time=0)

    game = await service.create_game("Host")
    for _ in range(3):
        await service.add_bot(game.id)
    await service.choose_partner(game.id, 2)

    game = await play_to_the_end(service, runner, game.id)

    assert game.status == GameStatus.FINISHED
    assert max(game.scores) >= 200
    assert game.scores[game.winner] > game.scores[1 - game.winner]
    assert game.hand_history
    for result in game.hand_history:
        assert sum(result.team_points) + result.kitty_points == 180
        assert min(result.scores) >= 0
    assert game.hand_history[-1].scores == game.scores

    versions = [event["version"] for event in notifier.events]
    assert versions == sorted(versions)
    assert versions[-1] == game.version
    assert notifier.events[-1]["event"] == EventType.GAME_OVER.value
    assert sum(1 for e in notifier.events if e["event"] == EventType.TRICK_WON.value) == (
        13 * len(game.hand_history)
    )
