"""Round-level records: the contract and the scored result of a hand."""

from dataclasses import dataclass


@dataclass(frozen=True)
class Contract:
    """The winning bid of an auction.

    Attributes:
        bidder: Seat that won the auction
        amount: Points the bidder's team must capture

    """

    bidder: int
    amount: int


@dataclass(frozen=True)
class HandResult:
    """Scored outcome of one completed round.

    Attributes:
        round_number: Round this result belongs to (1-indexed)
        dealer: Dealer seat for the round
        bidder: Seat holding the contract
        bid: Contract amount
        bid_team: Team index of the bidder
        team_points: Points captured in tricks per team
        kitty_points: Points in the discarded kitty, credited to the bid team
        made: Whether the bid team reached the contract
        sweep: Whether the bid team took every point
        score_deltas: Change applied to each team's score
        scores: Cumulative team scores after this round

    """

    round_number: int
    dealer: int
    bidder: int
    bid: int
    bid_team: int
    team_points: tuple[int, int]
    kitty_points: int
    made: bool
    sweep: bool
    score_deltas: tuple[int, int]
    scores: tuple[int, int]
