"""Status-specific payloads of a game.

A game's status is carried by exactly one of these payload classes, so
fields only exist in the statuses where they mean something: there is no
trump while bidding and no hands in the lobby.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from rook.models.card import Card
from rook.models.enums import GameStatus, Suit
from rook.models.player import Teams
from rook.models.round import Contract
from rook.models.trick import Trick


@dataclass
class LobbyPhase:
    """Seats are filling up. The status is LOBBY or FULL by player count."""


@dataclass
class PartnerSelectionPhase:
    """Host has picked a partner; waiting for the first deal."""

    status: ClassVar[GameStatus] = GameStatus.PARTNER_SELECTION

    teams: Teams


@dataclass
class BiddingPhase:
    """Auction for the round's contract.

    Attributes:
        teams: Partnerships
        dealer: Dealer seat for the round
        hands: Hands indexed by seat
        kitty: Cards set aside for the auction winner
        turn: Seat that must bid or pass
        high_bid: Standing high bid
        high_bidder: Seat holding the high bid
        passed: Seats out of the auction, in the order they passed

    """

    status: ClassVar[GameStatus] = GameStatus.BIDDING

    teams: Teams
    dealer: int
    hands: list[list[Card]]
    kitty: list[Card]
    turn: int
    high_bid: int | None = None
    high_bidder: int | None = None
    passed: list[int] = field(default_factory=list)


@dataclass
class TrumpSelectionPhase:
    """Contract holder takes the kitty, discards and names trump."""

    status: ClassVar[GameStatus] = GameStatus.TRUMP_SELECTION

    teams: Teams
    dealer: int
    hands: list[list[Card]]
    kitty: list[Card]
    contract: Contract


@dataclass
class PlayingPhase:
    """Trick play.

    Attributes:
        teams: Partnerships
        dealer: Dealer seat for the round
        hands: Hands indexed by seat
        contract: Winning bid
        trump: Trump suit for the round
        discards: Cards the contract holder buried, scored for the bid team
        trick: Trick in progress
        turn: Seat that must play
        tricks_won: Completed tricks per team
        points_captured: Trick points per team
        captured: Cards of every completed trick
        tricks_played: Completed tricks this round

    """

    status: ClassVar[GameStatus] = GameStatus.PLAYING

    teams: Teams
    dealer: int
    hands: list[list[Card]]
    contract: Contract
    trump: Suit
    discards: list[Card]
    trick: Trick
    turn: int
    tricks_won: list[int] = field(default_factory=lambda: [0, 0])
    points_captured: list[int] = field(default_factory=lambda: [0, 0])
    captured: list[Card] = field(default_factory=list)
    tricks_played: int = 0


@dataclass
class FinishedPhase:
    """Game over."""

    status: ClassVar[GameStatus] = GameStatus.FINISHED

    teams: Teams
    winner: int


Phase = (
    LobbyPhase
    | PartnerSelectionPhase
    | BiddingPhase
    | TrumpSelectionPhase
    | PlayingPhase
    | FinishedPhase
)

# Phases that hold a dealt round
RoundPhase = BiddingPhase | TrumpSelectionPhase | PlayingPhase
