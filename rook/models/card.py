"""Card model and point values."""

import re
from dataclasses import dataclass

from rook.errors import ValidationError
from rook.models.enums import Suit

ROOK_RANK = 0
MIN_RANK = 1
MAX_RANK = 14

# Card points by rank. The Rook is worth ROOK_POINTS.
RANK_POINTS: dict[int, int] = {1: 15, 5: 5, 10: 10, 14: 10}
ROOK_POINTS = 20

_CARD_PATTERN = re.compile(r"^(Red|Green|Yellow|Black)(1[0-4]|[1-9])$")


@dataclass(frozen=True)
class Card:
    """Represents a Rook card.

    Attributes:
        suit: One of the four colours, or Suit.ROOK for the Rook card
        rank: 1-14 for suited cards, 0 for the Rook

    """

    suit: Suit
    rank: int

    def is_rook(self) -> bool:
        """Check if card is the Rook."""
        return self.suit == Suit.ROOK

    def is_trump(self, trump: Suit | None) -> bool:
        """Check if card belongs to the trump tier (the Rook always does)."""
        return self.is_rook() or (trump is not None and self.suit == trump)

    def __str__(self) -> str:
        """Return wire representation, e.g. ``Red5`` or ``Rook``."""
        if self.is_rook():
            return Suit.ROOK.value
        return f"{self.suit.value}{self.rank}"

    @classmethod
    def parse(cls, text: str) -> "Card":
        """Parse a card from its wire representation.

        Args:
            text: Card text such as ``Green14`` or ``Rook``

        Returns:
            The parsed card

        Raises:
            ValidationError: If the text does not name a card

        """
        if not isinstance(text, str):
            raise ValidationError(f"Card must be a string, got {type(text).__name__}")
        value = text.strip()
        if value == Suit.ROOK.value:
            return ROOK
        match = _CARD_PATTERN.match(value)
        if not match:
            raise ValidationError(f"Unknown card: {text!r}")
        return cls(Suit(match.group(1)), int(match.group(2)))


ROOK = Card(Suit.ROOK, ROOK_RANK)


def suit_of(card: Card) -> Suit:
    """Get the suit of a card (Suit.ROOK for the Rook)."""
    return card.suit


def rank_of(card: Card) -> int:
    """Get the rank of a card (0 for the Rook)."""
    return card.rank


def point_value(card: Card) -> int:
    """Get the point value of a card."""
    if card.is_rook():
        return ROOK_POINTS
    return RANK_POINTS.get(card.rank, 0)


def face_value(card: Card) -> int:
    """Get the within-suit strength of a card.

    Rank 1 is the highest card of a suit and maps to 15; every other rank
    keeps its number. The Rook has no face value.
    """
    if card.is_rook():
        return 0
    if card.rank == 1:
        return 15
    return card.rank


def hand_points(cards: list[Card]) -> int:
    """Sum the point values of a collection of cards."""
    return sum(point_value(card) for card in cards)


def sort_key(card: Card) -> tuple[int, int]:
    """Sort key that groups a hand by suit with high cards first."""
    suit_order = list(Suit).index(card.suit)
    return suit_order, -face_value(card)


def sort_hand(cards: list[Card]) -> list[Card]:
    """Return cards sorted for display."""
    return sorted(cards, key=sort_key)


# All cards in the deck (57 total)
_DECK: tuple[Card, ...] = tuple(
    Card(suit, rank) for suit in Suit.colors() for rank in range(MIN_RANK, MAX_RANK + 1)
) + (ROOK,)

DECK_SIZE = len(_DECK)
DECK_POINTS = sum(point_value(card) for card in _DECK)


def full_deck() -> list[Card]:
    """Get all cards in canonical order."""
    return list(_DECK)


def parse_cards(values: list[str]) -> list[Card]:
    """Parse a list of card strings."""
    return [Card.parse(value) for value in values]
