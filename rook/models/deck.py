"""Deck model for shuffling and dealing cards."""

import random
from dataclasses import dataclass

from rook.constants import HAND_SIZE, KITTY_SIZE, NUM_SEATS
from rook.models.card import Card, full_deck, sort_hand


@dataclass
class Deal:
    """Cards dealt for one round.

    Attributes:
        hands: Four 13-card hands indexed by seat
        kitty: The 5 cards set aside for the bid winner

    """

    hands: list[list[Card]]
    kitty: list[Card]


class Deck:
    """Represents a Rook deck of 57 cards.

    Shuffling is driven by a seeded ``random.Random``, so the same seed always
    produces the same deal. Recomputing a deal after a write conflict therefore
    gives identical hands.
    """

    def __init__(self, seed: str | int | None = None) -> None:
        """Initialize the deck.

        Args:
            seed: Shuffle seed; ``None`` seeds from system entropy

        """
        self._rng = random.Random(seed)
        self.cards: list[Card] = []

    def fill(self) -> None:
        """Fill the deck with all 57 cards."""
        self.cards = full_deck()

    def shuffle(self) -> None:
        """Fill and shuffle the deck."""
        self.fill()
        self._rng.shuffle(self.cards)

    def deal(self) -> Deal:
        """Deal 13 cards to each seat and 5 to the kitty."""
        if not self.cards:
            self.shuffle()

        hands = [
            sort_hand(self.cards[seat * HAND_SIZE : (seat + 1) * HAND_SIZE])
            for seat in range(NUM_SEATS)
        ]
        kitty_start = NUM_SEATS * HAND_SIZE
        kitty = self.cards[kitty_start : kitty_start + KITTY_SIZE]
        return Deal(hands=hands, kitty=kitty)


def deal_round(shuffle_seed: str, round_number: int) -> Deal:
    """Deal the given round of a game deterministically."""
    deck = Deck(seed=f"{shuffle_seed}:{round_number}")
    deck.shuffle()
    return deck.deal()
