"""Game service: the inbound operation surface.

Each operation runs a state machine function through the concurrency
controller and, once the write is committed, hands the resulting events to
the notifiers. Humans (through the API) and bots (through the bot runner)
use exactly the same methods.
"""

import logging
import secrets
from collections.abc import Callable, Sequence

from rook.config import settings
from rook.constants import GAME_CODE_ALPHABET, GAME_CODE_LENGTH, MAX_CODE_ATTEMPTS
from rook.errors import ConcurrencyConflict, InvalidTransition, ValidationError
from rook.models import state_machine
from rook.models.card import Card
from rook.models.enums import GameStatus, Suit
from rook.models.game import Game
from rook.models.state_machine import Outcome
from rook.repositories.base import GameStore
from rook.services.concurrency import ConcurrencyController, RetryPolicy
from rook.services.log_service import LogService
from rook.services.notifier import Notifier

logger = logging.getLogger(__name__)


def generate_game_code() -> str:
    """Draw a random game code from the unambiguous alphabet."""
    return "".join(secrets.choice(GAME_CODE_ALPHABET) for _ in range(GAME_CODE_LENGTH))


def normalize_game_code(game_id: str) -> str:
    """Trim and upper-case a game code, rejecting malformed ones.

    Raises:
        ValidationError: If the code has the wrong length or characters

    """
    if not isinstance(game_id, str):
        raise ValidationError("Game code must be a string")
    code = game_id.strip().upper()
    if len(code) != GAME_CODE_LENGTH or any(c not in GAME_CODE_ALPHABET for c in code):
        raise ValidationError(f"Invalid game code: {game_id!r}")
    return code


def _to_card(value: Card | str) -> Card:
    return value if isinstance(value, Card) else Card.parse(value)


class GameService:
    """Runs game operations with optimistic concurrency and notifications."""

    def __init__(
        self,
        store: GameStore,
        notifiers: Sequence[Notifier] = (),
        policy: RetryPolicy | None = None,
        log_service: LogService | None = None,
        code_factory: Callable[[], str] = generate_game_code,
        auto_deal: bool | None = None,
    ) -> None:
        """Initialize the service.

        Args:
            store: Game persistence
            notifiers: Event sinks called after each committed mutation
            policy: Retry policy for conflicting writes
            log_service: Structured action log
            code_factory: Game code generator
            auto_deal: Deal right after partner selection (defaults to settings)

        """
        self.store = store
        self.notifiers = list(notifiers)
        self.controller = ConcurrencyController(store, policy)
        self.log_service = log_service or LogService()
        self._code_factory = code_factory
        self.auto_deal = settings.auto_deal if auto_deal is None else auto_deal

    async def get_game(self, game_id: str) -> Game:
        """Load a game by code."""
        return await self.store.load(normalize_game_code(game_id))

    async def create_game(self, host_name: str) -> Game:
        """Create a game with the host at seat 0.

        Raises:
            ValidationError: If the host name is invalid
            ConcurrencyConflict: If no free game code was found

        """
        for _ in range(MAX_CODE_ATTEMPTS):
            outcome = state_machine.new_game(
                self._code_factory(), host_name, shuffle_seed=secrets.token_hex(16)
            )
            if await self.store.insert(outcome.game):
                await self._publish(outcome)
                return outcome.game
            logger.info("Game code %s already in use, drawing another", outcome.game.id)
        raise ConcurrencyConflict("Could not allocate a free game code")

    async def join_game(self, game_id: str, player_name: str) -> Game:
        """Seat a human player; the new player is the last in ``players``."""
        return await self._commit(game_id, lambda g: state_machine.join_game(g, player_name))

    async def add_bot(self, game_id: str) -> Game:
        """Seat a bot; the new bot is the last in ``players``."""
        return await self._commit(game_id, state_machine.add_bot)

    async def choose_partner(self, game_id: str, partner_seat: int) -> Game:
        """Form teams, then deal the first round when auto-deal is on."""
        game = await self._commit(
            game_id, lambda g: state_machine.choose_partner(g, partner_seat)
        )
        if self.auto_deal:
            try:
                game = await self._commit(game_id, state_machine.deal)
            except InvalidTransition:
                # The bot runner may deal first
                game = await self.get_game(game_id)
                if game.status == GameStatus.PARTNER_SELECTION:
                    raise
        return game

    async def deal(self, game_id: str) -> Game:
        """Deal the first round."""
        return await self._commit(game_id, state_machine.deal)

    async def place_bid(self, game_id: str, seat: int, amount: int) -> Game:
        """Place a bid for the seat holding the turn."""
        return await self._commit(game_id, lambda g: state_machine.place_bid(g, seat, amount))

    async def pass_bid(self, game_id: str, seat: int) -> Game:
        """Pass for the seat holding the turn."""
        return await self._commit(game_id, lambda g: state_machine.pass_bid(g, seat))

    async def choose_trump(
        self, game_id: str, seat: int, suit: Suit | str, discards: Sequence[Card | str]
    ) -> Game:
        """Bury the discards and name trump for the contract holder."""
        cards = [_to_card(card) for card in discards]
        return await self._commit(
            game_id, lambda g: state_machine.choose_trump(g, seat, suit, cards)
        )

    async def play_card(self, game_id: str, seat: int, card: Card | str) -> Game:
        """Play a card for the seat holding the turn."""
        parsed = _to_card(card)
        return await self._commit(game_id, lambda g: state_machine.play_card(g, seat, parsed))

    async def _commit(self, game_id: str, apply: Callable[[Game], Outcome]) -> Game:
        outcome = await self.controller.mutate(normalize_game_code(game_id), apply)
        await self._publish(outcome)
        return outcome.game

    async def _publish(self, outcome: Outcome) -> None:
        """Log and broadcast events of a committed outcome.

        Notifier failures are logged and swallowed.
        """
        game = outcome.game
        for event in outcome.events:
            self.log_service.game_action(
                game.id, game.version, event.event_type.value, event.seat, event.data
            )
            message = event.to_dict(game.id, game.version)
            for notifier in self.notifiers:
                try:
                    await notifier.broadcast(game.id, message)
                except Exception:
                    logger.exception(
                        "Broadcast of %s for game %s failed", event.event_type.value, game.id
                    )
