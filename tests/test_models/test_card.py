"""Tests for the Card model and point values."""

import pytest
from hypothesis import given
from hypothesis import strategies as st

from rook.errors import ValidationError
from rook.models.card import (
    DECK_POINTS,
    DECK_SIZE,
    ROOK,
    Card,
    face_value,
    full_deck,
    hand_points,
    point_value,
    rank_of,
    sort_hand,
    suit_of,
)
from rook.models.enums import Suit


class TestCard:
    """Test Card model."""

    def test_suited_card(self):
        """Suited cards expose suit and rank."""
        card = Card(Suit.RED, 5)
        assert suit_of(card) == Suit.RED
        assert rank_of(card) == 5
        assert not card.is_rook()

    def test_rook_is_its_own_suit(self):
        """The Rook has its own suit and rank 0."""
        assert suit_of(ROOK) == Suit.ROOK
        assert rank_of(ROOK) == 0
        assert ROOK.is_rook()

    def test_rook_is_always_trump(self):
        """The Rook belongs to the trump tier whatever trump is."""
        for trump in Suit.colors():
            assert ROOK.is_trump(trump)
        assert Card(Suit.GREEN, 3).is_trump(Suit.GREEN)
        assert not Card(Suit.RED, 3).is_trump(Suit.GREEN)

    def test_cards_are_values(self):
        """Equal suit and rank means equal, hashable cards."""
        assert Card(Suit.BLACK, 14) == Card(Suit.BLACK, 14)
        assert len({Card(Suit.BLACK, 14), Card(Suit.BLACK, 14)}) == 1


class TestPointValues:
    """Test the fixed point table."""

    @pytest.mark.parametrize(
        ("card", "points"),
        [
            (ROOK, 20),
            (Card(Suit.RED, 1), 15),
            (Card(Suit.GREEN, 5), 5),
            (Card(Suit.YELLOW, 10), 10),
            (Card(Suit.BLACK, 14), 10),
            (Card(Suit.RED, 2), 0),
            (Card(Suit.RED, 9), 0),
            (Card(Suit.RED, 13), 0),
        ],
    )
    def test_point_table(self, card, points):
        """Each rank is worth its table value."""
        assert point_value(card) == points

    def test_deck_points_total(self):
        """The whole deck is worth 180 points."""
        assert DECK_POINTS == 180
        assert hand_points(full_deck()) == 180

    @given(st.sampled_from(full_deck()))
    def test_point_value_range(self, card):
        """Every card is worth 0, 5, 10, 15 or 20."""
        assert point_value(card) in {0, 5, 10, 15, 20}

    @given(st.sampled_from(full_deck()))
    def test_point_value_is_stable(self, card):
        """Point values have no hidden state."""
        assert point_value(card) == point_value(card)


class TestFaceValue:
    """Test within-suit strength."""

    def test_one_is_highest(self):
        """Rank 1 outranks 14."""
        assert face_value(Card(Suit.RED, 1)) == 15
        assert face_value(Card(Suit.RED, 14)) == 14
        assert face_value(Card(Suit.RED, 7)) == 7


class TestDeck:
    """Test deck composition."""

    def test_deck_size(self):
        """Four suits of 14 plus the Rook."""
        deck = full_deck()
        assert DECK_SIZE == 57
        assert len(deck) == 57
        assert len(set(deck)) == 57
        assert deck.count(ROOK) == 1

    def test_sort_hand_groups_suits(self):
        """Sorted hands group suits with high cards first."""
        hand = [Card(Suit.GREEN, 2), ROOK, Card(Suit.RED, 14), Card(Suit.RED, 1)]
        assert sort_hand(hand) == [Card(Suit.RED, 1), Card(Suit.RED, 14), Card(Suit.GREEN, 2), ROOK]


class TestParse:
    """Test wire representation."""

    @pytest.mark.parametrize("text", ["Red5", "Green14", "Yellow1", "Black10", "Rook"])
    def test_parse_str_round_trip(self, text):
        """Parsing then printing gives the same text."""
        assert str(Card.parse(text)) == text

    def test_parse_strips_whitespace(self):
        """Surrounding whitespace is ignored."""
        assert Card.parse(" Red5 ") == Card(Suit.RED, 5)

    @pytest.mark.parametrize("text", ["", "Red0", "Red15", "Blue5", "red5", "Rook1", "5Red"])
    def test_parse_rejects_malformed(self, text):
        """Malformed card text is a validation error."""
        with pytest.raises(ValidationError):
            Card.parse(text)

    def test_parse_rejects_non_string(self):
        """Non-string input is a validation error."""
        with pytest.raises(ValidationError):
            Card.parse(5)
