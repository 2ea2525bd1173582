"""Background worker that plays bot seats.

On each tick the runner looks at every active game and, where the seat
entitled to act is a bot, submits that bot's decision through the game
service like any other client would.
"""

import asyncio
import contextlib
import logging
from collections.abc import Callable

from rook.bots import BaseBot, BotAction, BotActionKind, RuleBasedBot
from rook.config import settings
from rook.errors import ConcurrencyConflict, InvalidTransition, InvalidTurn, RookError
from rook.models.enums import GameStatus
from rook.models.game import Game
from rook.services.game_service import GameService

logger = logging.getLogger(__name__)

BotFactory = Callable[[int], BaseBot]

# Errors that mean another actor got there first
LOST_RACE_ERRORS = (InvalidTurn, InvalidTransition, ConcurrencyConflict)


class BotRunner:
    """Service that drives bot seats from a background task."""

    def __init__(
        self,
        game_service: GameService,
        bot_factory: BotFactory = RuleBasedBot,
        poll_interval: float | None = None,
        think_time: float | None = None,
    ) -> None:
        """Initialize the bot runner.

        Args:
            game_service: Service used to submit bot actions
            bot_factory: Builds the bot for a seat
            poll_interval: Seconds between ticks (defaults to settings)
            think_time: Pause before each action (defaults to settings)
        """
        self.game_service = game_service
        self.bot_factory = bot_factory
        self.poll_interval = settings.bot_poll_interval if poll_interval is None else poll_interval
        self.think_time = settings.bot_think_time if think_time is None else think_time
        self._running = False
        self._task: asyncio.Task[None] | None = None

    async def start(self) -> None:
        """Start the background bot task."""
        if self._running:
            return

        self._running = True
        self._task = asyncio.create_task(self._run_loop())
        logger.info("Bot runner started (interval: %.2fs)", self.poll_interval)

    async def stop(self) -> None:
        """Stop the background bot task."""
        self._running = False
        if self._task:
            self._task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._task
        logger.info("Bot runner stopped")

    async def _run_loop(self) -> None:
        """Background loop that lets bots act."""
        while self._running:
            try:
                await self.tick()
                await asyncio.sleep(self.poll_interval)
            except asyncio.CancelledError:
                break
            except Exception:
                logger.exception("Error in bot loop")
                await asyncio.sleep(5)  # Brief pause before retry

    async def tick(self) -> int:
        """Give every active game one chance to advance.

        Returns:
            Number of actions submitted
        """
        games = await self.game_service.store.find_active()
        acted = 0
        for game in games:
            try:
                if await self.act(game):
                    acted += 1
            except Exception:
                logger.exception("Bot turn failed in game %s", game.id)
        return acted

    async def act(self, game: Game) -> bool:
        """Submit one bot action for a game, if a bot is expected to act.

        Args:
            game: Game as last read

        Returns:
            True if an action was committed
        """
        try:
            if game.status == GameStatus.PARTNER_SELECTION:
                await self.game_service.deal(game.id)
                return True

            seat = game.acting_seat()
            player = game.get_player(seat) if seat is not None else None
            if player is None or not player.is_bot:
                return False

            action = self.bot_factory(seat).decide(game)
            if action is None:
                return False

            if self.think_time > 0:
                await asyncio.sleep(self.think_time)
            await self.submit(game.id, seat, action)
        except LOST_RACE_ERRORS as e:
            logger.debug("Bot action in game %s superseded: %s", game.id, e)
            return False
        except RookError:
            logger.exception("Bot action rejected in game %s", game.id)
            return False
        return True

    async def run_until_human(self, game_id: str, max_actions: int = 10_000) -> Game:
        """Keep acting in one game until a human must act or the game ends.

        Args:
            game_id: Game code
            max_actions: Safety bound on the number of actions

        Returns:
            The game as last read
        """
        game = await self.game_service.get_game(game_id)
        for _ in range(max_actions):
            if not await self.act(game):
                break
            game = await self.game_service.get_game(game_id)
        return game

    async def submit(self, game_id: str, seat: int, action: BotAction) -> None:
        """Submit a bot decision through the game service."""
        service = self.game_service
        if action.kind == BotActionKind.BID:
            await service.place_bid(game_id, seat, action.amount)
        elif action.kind == BotActionKind.PASS:
            await service.pass_bid(game_id, seat)
        elif action.kind == BotActionKind.TRUMP:
            await service.choose_trump(game_id, seat, action.suit, action.discards)
        else:
            await service.play_card(game_id, seat, action.card)
