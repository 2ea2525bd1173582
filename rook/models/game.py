"""Game aggregate."""

from collections import Counter
from dataclasses import dataclass, field
from datetime import UTC, datetime

from rook.constants import NUM_SEATS
from rook.errors import InvariantViolation
from rook.models.card import Card, full_deck
from rook.models.enums import GameStatus, Suit
from rook.models.phases import (
    BiddingPhase,
    FinishedPhase,
    LobbyPhase,
    PartnerSelectionPhase,
    Phase,
    PlayingPhase,
    TrumpSelectionPhase,
)
from rook.models.player import Player, Teams
from rook.models.round import Contract, HandResult


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


@dataclass
class Game:
    """Represents a complete Rook game.

    The game document is the unit of optimistic concurrency: every accepted
    mutation produces a new document whose version is one higher.

    Attributes:
        id: Six-letter game code
        host_name: Name of the player who created the game (seat 0)
        shuffle_seed: Secret seed that makes each round's deal reproducible
        players: Seated players in join order
        phase: Status-specific payload
        scores: Cumulative team scores
        round_number: Current round (0 before the first deal)
        hand_history: Results of completed rounds
        version: Optimistic lock version
        created_at: Creation time
        updated_at: Time of the last accepted mutation

    """

    id: str
    host_name: str
    shuffle_seed: str
    players: list[Player] = field(default_factory=list)
    phase: Phase = field(default_factory=LobbyPhase)
    scores: tuple[int, int] = (0, 0)
    round_number: int = 0
    hand_history: list[HandResult] = field(default_factory=list)
    version: int = 1
    created_at: datetime = field(default_factory=_utc_now)
    updated_at: datetime = field(default_factory=_utc_now)

    @property
    def status(self) -> GameStatus:
        """Current lifecycle status."""
        if isinstance(self.phase, LobbyPhase):
            return GameStatus.FULL if self.is_full() else GameStatus.LOBBY
        return self.phase.status

    @property
    def teams(self) -> Teams | None:
        """Partnerships, once the host has chosen a partner."""
        if isinstance(self.phase, LobbyPhase):
            return None
        return self.phase.teams

    @property
    def trump(self) -> Suit | None:
        """Trump suit while tricks are being played."""
        if isinstance(self.phase, PlayingPhase):
            return self.phase.trump
        return None

    @property
    def contract(self) -> Contract | None:
        """Winning bid of the current round."""
        if isinstance(self.phase, (TrumpSelectionPhase, PlayingPhase)):
            return self.phase.contract
        return None

    @property
    def dealer(self) -> int | None:
        """Dealer seat of the current round."""
        if isinstance(self.phase, (BiddingPhase, TrumpSelectionPhase, PlayingPhase)):
            return self.phase.dealer
        return None

    @property
    def turn(self) -> int | None:
        """Seat holding the turn while bidding or playing."""
        if isinstance(self.phase, (BiddingPhase, PlayingPhase)):
            return self.phase.turn
        return None

    @property
    def winner(self) -> int | None:
        """Winning team index once finished."""
        if isinstance(self.phase, FinishedPhase):
            return self.phase.winner
        return None

    def acting_seat(self) -> int | None:
        """Get the seat expected to act next, if any seat is."""
        if isinstance(self.phase, (BiddingPhase, PlayingPhase)):
            return self.phase.turn
        if isinstance(self.phase, TrumpSelectionPhase):
            return self.phase.contract.bidder
        return None

    def is_full(self) -> bool:
        """Check if all seats are taken."""
        return len(self.players) >= NUM_SEATS

    def is_active(self) -> bool:
        """Check if the game has not finished."""
        return not isinstance(self.phase, FinishedPhase)

    def get_player(self, seat: int) -> Player | None:
        """Get player by seat."""
        for player in self.players:
            if player.seat == seat:
                return player
        return None

    def has_name(self, name: str) -> bool:
        """Check if a player name is taken, ignoring case."""
        folded = name.casefold()
        return any(p.name.casefold() == folded for p in self.players)

    def hand_of(self, seat: int) -> list[Card]:
        """Get a seat's hand in the current round (empty outside a round)."""
        if isinstance(self.phase, (BiddingPhase, TrumpSelectionPhase, PlayingPhase)):
            return list(self.phase.hands[seat])
        return []

    def check_integrity(self) -> None:
        """Verify structural invariants of the document.

        Raises:
            InvariantViolation: If cards are missing or duplicated, seats are
                inconsistent, or the turn is out of range

        """
        seats = [p.seat for p in self.players]
        if len(seats) > NUM_SEATS or sorted(seats) != list(range(len(seats))):
            raise InvariantViolation(f"Bad seating {seats} in game {self.id}")

        if isinstance(self.phase, (LobbyPhase, PartnerSelectionPhase, FinishedPhase)):
            return

        if self.turn is not None and not 0 <= self.turn < NUM_SEATS:
            raise InvariantViolation(f"Turn {self.turn} out of range in game {self.id}")

        held: list[Card] = [card for hand in self.phase.hands for card in hand]
        if isinstance(self.phase, (BiddingPhase, TrumpSelectionPhase)):
            held += self.phase.kitty
        else:
            held += self.phase.discards + self.phase.captured + self.phase.trick.cards()

        if Counter(held) != Counter(full_deck()):
            duplicates = sorted(str(c) for c, n in Counter(held).items() if n > 1)
            raise InvariantViolation(
                f"Deck integrity broken in game {self.id}: {len(held)} cards, duplicates {duplicates}"
            )

    def __str__(self) -> str:
        """Return string representation."""
        return f"Game {self.id} ({self.status.value}, v{self.version}, {len(self.players)} players)"
