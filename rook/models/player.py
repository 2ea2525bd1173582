"""Player and team models."""

from dataclasses import dataclass

from rook.constants import HOST_SEAT, NUM_SEATS
from rook.errors import ValidationError


@dataclass(frozen=True)
class Player:
    """Represents a seated player.

    Attributes:
        seat: Table position (0-3), also the join order
        name: Display name, unique within the game ignoring case
        is_bot: Whether this seat is driven by the bot worker

    """

    seat: int
    name: str
    is_bot: bool = False

    def __str__(self) -> str:
        """Return string representation."""
        bot_str = " (Bot)" if self.is_bot else ""
        return f"{self.name}{bot_str} - Seat {self.seat}"


@dataclass(frozen=True)
class Teams:
    """Partition of the four seats into two partnerships.

    Team 0 is always the host and the chosen partner.
    """

    team0: tuple[int, int]
    team1: tuple[int, int]

    @classmethod
    def with_partner(cls, partner_seat: int) -> "Teams":
        """Build teams from the host's partner choice.

        Args:
            partner_seat: Seat the host partners with (1-3)

        Returns:
            Teams with {host, partner} against the remaining two seats

        Raises:
            ValidationError: If the partner seat is not another seat at the table

        """
        if isinstance(partner_seat, bool) or not isinstance(partner_seat, int):
            raise ValidationError("Partner seat must be an integer")
        if not HOST_SEAT < partner_seat < NUM_SEATS:
            raise ValidationError(f"Partner seat must be 1-{NUM_SEATS - 1}")
        others = tuple(s for s in range(NUM_SEATS) if s not in (HOST_SEAT, partner_seat))
        return cls(team0=(HOST_SEAT, partner_seat), team1=(others[0], others[1]))

    def team_of(self, seat: int) -> int:
        """Get the team index (0 or 1) for a seat."""
        return 0 if seat in self.team0 else 1

    def partner_of(self, seat: int) -> int:
        """Get the partner seat of a seat."""
        team = self.team0 if seat in self.team0 else self.team1
        return team[1] if team[0] == seat else team[0]

    def as_lists(self) -> list[list[int]]:
        """Return both teams as plain lists."""
        return [list(self.team0), list(self.team1)]
