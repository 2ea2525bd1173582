"""Rules engine: card ordering, legal plays, bidding and scoring.

Everything here is a pure function of its arguments.
"""

from rook.constants import (
    BID_INCREMENT,
    BID_MAX,
    BID_MIN,
    NUM_SEATS,
    SWEEP_SCORE,
    WINNING_SCORE,
)
from rook.errors import IllegalBid, InvariantViolation, ValidationError
from rook.models.card import DECK_POINTS, Card, face_value
from rook.models.enums import Suit
from rook.models.player import Teams
from rook.models.round import Contract, HandResult
from rook.models.trick import Play

TRUMP_BASE = 100
OFF_SUIT_VALUE = -1


def play_value(card: Card, trump: Suit | None, led_suit: Suit | None) -> int:
    """Get the strength of a card within one trick.

    Values only order cards inside a single trick. Trump cards rank above
    everything else, the Rook being the weakest trump. Led-suit cards rank
    by face value, and off-suit cards cannot win.

    Args:
        card: Card to value
        trump: Trump suit for the round
        led_suit: Suit led in the trick

    Returns:
        Ordering value for the card

    """
    if card.is_rook():
        return TRUMP_BASE
    if trump is not None and card.suit == trump:
        return TRUMP_BASE + face_value(card)
    if led_suit is not None and card.suit == led_suit:
        return face_value(card)
    return OFF_SUIT_VALUE


def winner_of(plays: list[Play], trump: Suit | None, led_suit: Suit | None) -> Play:
    """Determine the winning play of a trick.

    Args:
        plays: Plays in the trick, in order
        trump: Trump suit for the round
        led_suit: Suit led in the trick

    Returns:
        The play with the highest play value

    Raises:
        InvariantViolation: If the trick is empty or two plays tie for the lead

    """
    if not plays:
        raise InvariantViolation("Cannot determine the winner of an empty trick")

    values = [play_value(play.card, trump, led_suit) for play in plays]
    best = max(values)
    if values.count(best) > 1:
        raise InvariantViolation(f"Tied trick: {[str(p.card) for p in plays]}")
    return plays[values.index(best)]


def follows_suit(card: Card, led_suit: Suit, trump: Suit | None) -> bool:
    """Check if a card follows the led suit (the Rook follows a trump lead)."""
    if card.suit == led_suit:
        return True
    return card.is_rook() and led_suit == trump


def legal_plays(hand: list[Card], led_suit: Suit | None, trump: Suit | None) -> list[Card]:
    """Get the cards a player may play.

    Args:
        hand: Player's current hand
        led_suit: Suit led in the trick, ``None`` when leading
        trump: Trump suit for the round

    Returns:
        Legal cards, in hand order

    """
    if led_suit is None:
        return list(hand)

    following = [card for card in hand if follows_suit(card, led_suit, trump)]
    return following or list(hand)


def validate_bid(amount: int, high_bid: int | None) -> None:
    """Check a bid against the current high bid.

    Raises:
        ValidationError: If the amount is not an integer
        IllegalBid: If the amount breaks the bidding rules

    """
    if isinstance(amount, bool) or not isinstance(amount, int):
        raise ValidationError("Bid amount must be an integer")
    if amount % BID_INCREMENT != 0:
        raise IllegalBid(f"Bid must be a multiple of {BID_INCREMENT}")
    if amount > BID_MAX:
        raise IllegalBid(f"Bid cannot exceed {BID_MAX}")
    if high_bid is None:
        if amount < BID_MIN:
            raise IllegalBid(f"Opening bid must be at least {BID_MIN}")
    elif amount <= high_bid:
        raise IllegalBid(f"Bid must be higher than {high_bid}")


def min_legal_bid(high_bid: int | None) -> int | None:
    """Get the smallest legal bid, or ``None`` if the auction is at the ceiling."""
    if high_bid is None:
        return BID_MIN
    amount = high_bid + BID_INCREMENT
    return amount if amount <= BID_MAX else None


def next_seat(seat: int, skip: set[int] | frozenset[int] = frozenset()) -> int | None:
    """Get the next seat clockwise that is not skipped.

    Returns:
        The next active seat, or ``None`` if every other seat is skipped

    """
    for offset in range(1, NUM_SEATS):
        candidate = (seat + offset) % NUM_SEATS
        if candidate not in skip:
            return candidate
    return None


def resolve_auction(passed: set[int], high_bid: int | None, high_bidder: int | None) -> Contract | None:
    """Award the contract once only one seat has not passed.

    Args:
        passed: Seats that have passed
        high_bid: Standing high bid, if any
        high_bidder: Seat holding the high bid

    Returns:
        The contract, or ``None`` while more than one seat is still bidding

    """
    remaining = [seat for seat in range(NUM_SEATS) if seat not in passed]
    if len(remaining) != 1:
        return None
    bidder = remaining[0]
    if high_bidder is not None and high_bidder != bidder:
        raise InvariantViolation(f"High bidder {high_bidder} passed but holds the bid")
    return Contract(bidder=bidder, amount=high_bid if high_bid is not None else BID_MIN)


def score_round(
    *,
    round_number: int,
    dealer: int,
    contract: Contract,
    teams: Teams,
    team_points: tuple[int, int],
    kitty_points: int,
    previous_scores: tuple[int, int],
) -> HandResult:
    """Score a completed round.

    The bid team is credited with the kitty. A made bid scores the team's
    total (SWEEP_SCORE when it took every point), a failed bid costs the bid
    amount. Defenders always keep what they captured. Cumulative scores never
    drop below zero.

    Args:
        round_number: Round being scored
        dealer: Dealer seat of the round
        contract: Winning bid
        teams: Partnerships
        team_points: Points captured in tricks per team
        kitty_points: Points in the discarded kitty
        previous_scores: Cumulative scores before this round

    Returns:
        The scored hand result

    """
    bid_team = teams.team_of(contract.bidder)
    defend_team = 1 - bid_team

    bid_total = team_points[bid_team] + kitty_points
    defender_total = team_points[defend_team]
    if bid_total + defender_total != DECK_POINTS:
        raise InvariantViolation(f"Round points {bid_total + defender_total} != {DECK_POINTS}")

    made = bid_total >= contract.amount
    sweep = made and defender_total == 0

    deltas = [0, 0]
    if sweep:
        deltas[bid_team] = SWEEP_SCORE
    elif made:
        deltas[bid_team] = bid_total
    else:
        deltas[bid_team] = -contract.amount
    deltas[defend_team] = defender_total

    scores = (
        max(0, previous_scores[0] + deltas[0]),
        max(0, previous_scores[1] + deltas[1]),
    )

    return HandResult(
        round_number=round_number,
        dealer=dealer,
        bidder=contract.bidder,
        bid=contract.amount,
        bid_team=bid_team,
        team_points=team_points,
        kitty_points=kitty_points,
        made=made,
        sweep=sweep,
        score_deltas=(deltas[0], deltas[1]),
        scores=scores,
    )


def game_winner(scores: tuple[int, int]) -> int | None:
    """Get the winning team once the game is over.

    Returns:
        Team index, or ``None`` if play continues (including a tie above the threshold)

    """
    if max(scores) < WINNING_SCORE or scores[0] == scores[1]:
        return None
    return 0 if scores[0] > scores[1] else 1
