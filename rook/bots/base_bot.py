"""Base class for all bot strategies."""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum

from rook.models import rules
from rook.models.card import Card
from rook.models.enums import Suit
from rook.models.game import Game
from rook.models.phases import BiddingPhase, PlayingPhase, TrumpSelectionPhase
from rook.models.player import Teams
from rook.models.trick import Trick


class BotDifficulty(str, Enum):
    """Bot difficulty levels."""

    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class BotActionKind(str, Enum):
    """Operations a bot can submit."""

    BID = "bid"
    PASS = "pass"
    TRUMP = "trump"
    PLAY = "play"


@dataclass(frozen=True)
class BotAction:
    """A decision, submitted through the same operations humans use."""

    kind: BotActionKind
    amount: int | None = None
    suit: Suit | None = None
    discards: list[Card] = field(default_factory=list)
    card: Card | None = None


class BaseBot(ABC):
    """Abstract base class for bot AI strategies.

    All bot implementations must inherit from this class and implement
    make_bid(), choose_trump() and pick_card().
    """

    def __init__(self, seat: int, difficulty: BotDifficulty = BotDifficulty.MEDIUM) -> None:
        """Initialize the bot.

        Args:
            seat: Seat this bot controls
            difficulty: Bot difficulty level

        """
        self.seat = seat
        self.difficulty = difficulty

    @abstractmethod
    def make_bid(self, hand: list[Card], high_bid: int | None) -> int | None:
        """Decide on a bid.

        Args:
            hand: Bot's 13 cards
            high_bid: Standing high bid, if any

        Returns:
            Bid amount, or None to pass

        """

    @abstractmethod
    def choose_trump(self, cards: list[Card]) -> tuple[Suit, list[Card]]:
        """Name trump and pick the five discards.

        Args:
            cards: Hand plus kitty (18 cards)

        Returns:
            Trump suit and the cards to discard

        """

    @abstractmethod
    def pick_card(
        self,
        hand: list[Card],
        trick: Trick,
        trump: Suit,
        teams: Teams | None = None,
    ) -> Card:
        """Pick a card to play in the current trick.

        Args:
            hand: Bot's remaining cards
            trick: Trick in progress
            trump: Trump suit
            teams: Partnerships, if known

        Returns:
            Card to play (always one of the legal plays)

        """

    def decide(self, game: Game) -> BotAction | None:
        """Decide what to do in the current game state.

        Returns:
            The action to submit, or None if this seat is not expected to act

        """
        phase = game.phase
        if isinstance(phase, BiddingPhase) and phase.turn == self.seat:
            amount = self.make_bid(phase.hands[self.seat], phase.high_bid)
            if amount is None:
                return BotAction(BotActionKind.PASS)
            return BotAction(BotActionKind.BID, amount=amount)

        if isinstance(phase, TrumpSelectionPhase) and phase.contract.bidder == self.seat:
            suit, discards = self.choose_trump(phase.hands[self.seat] + phase.kitty)
            return BotAction(BotActionKind.TRUMP, suit=suit, discards=discards)

        if isinstance(phase, PlayingPhase) and phase.turn == self.seat:
            card = self.pick_card(phase.hands[self.seat], phase.trick, phase.trump, phase.teams)
            return BotAction(BotActionKind.PLAY, card=card)

        return None

    @staticmethod
    def _legal(hand: list[Card], trick: Trick, trump: Suit) -> list[Card]:
        return rules.legal_plays(hand, trick.led_suit(trump), trump)

    def __str__(self) -> str:
        """Return string representation."""
        return f"{self.__class__.__name__} seat {self.seat} ({self.difficulty.value})"
