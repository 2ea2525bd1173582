"""Trick model for a single trick within a round."""

from dataclasses import dataclass, field

from rook.constants import NUM_SEATS
from rook.models.card import Card
from rook.models.enums import Suit


@dataclass(frozen=True)
class Play:
    """A card played by a seat."""

    seat: int
    card: Card


@dataclass
class Trick:
    """Cards played so far in the current trick, in play order.

    Attributes:
        leader: Seat that led the trick
        plays: Plays made so far (0-4)

    """

    leader: int
    plays: list[Play] = field(default_factory=list)

    def led_suit(self, trump: Suit | None) -> Suit | None:
        """Get the suit subsequent players must follow.

        A led Rook makes the trump suit the led suit.
        """
        if not self.plays:
            return None
        first = self.plays[0].card
        if first.is_rook():
            return trump
        return first.suit

    def cards(self) -> list[Card]:
        """Get all cards played in this trick."""
        return [play.card for play in self.plays]

    def is_complete(self) -> bool:
        """Check if every seat has played."""
        return len(self.plays) == NUM_SEATS

    def has_played(self, seat: int) -> bool:
        """Check if a seat already played to this trick."""
        return any(play.seat == seat for play in self.plays)
