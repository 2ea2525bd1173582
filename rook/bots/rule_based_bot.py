"""Rule-based bot with deterministic heuristics."""

from collections import Counter

from rook.bots.base_bot import BaseBot, BotDifficulty
from rook.constants import BID_INCREMENT, BID_MAX, KITTY_SIZE
from rook.models import rules
from rook.models.card import Card, face_value, hand_points, point_value
from rook.models.enums import Suit
from rook.models.player import Teams
from rook.models.trick import Trick

# Hand strength bonuses on top of the points held
ACE_BONUS = 10
FOURTEEN_BONUS = 5
ROOK_BONUS = 10
LONG_SUIT_BONUS = 5
LONG_SUIT_LENGTH = 4

# Adjustment of the bidding ceiling by difficulty
DIFFICULTY_MARGIN = {
    BotDifficulty.EASY: -10,
    BotDifficulty.MEDIUM: 0,
    BotDifficulty.HARD: 10,
}


class RuleBasedBot(BaseBot):
    """Bot that plays by simple card-counting heuristics.

    Bidding Strategy:
    - Value the hand by its points plus bonuses for 1s, 14s, the Rook and a long suit
    - Keep bidding the minimum raise until it passes that ceiling

    Trump Strategy:
    - Longest suit in hand plus kitty, ties broken by points in the suit
    - Bury short off-suits so they can be trumped later

    Playing Strategy:
    - Lead an off-suit 1 when holding one, otherwise the cheapest card
    - Follow with the cheapest card that takes the trick, unless the partner already has it
    - Otherwise throw the card worth the least
    """

    def estimate_strength(self, hand: list[Card]) -> int:
        """Estimate how many points this hand can bid for."""
        ones = sum(1 for card in hand if card.rank == 1 and not card.is_rook())
        fourteens = sum(1 for card in hand if card.rank == 14)
        has_rook = any(card.is_rook() for card in hand)
        lengths = Counter(card.suit for card in hand if not card.is_rook())
        longest = max(lengths.values(), default=0)

        return (
            hand_points(hand)
            + ones * ACE_BONUS
            + fourteens * FOURTEEN_BONUS
            + (ROOK_BONUS if has_rook else 0)
            + max(0, longest - LONG_SUIT_LENGTH) * LONG_SUIT_BONUS
        )

    def bid_ceiling(self, hand: list[Card]) -> int:
        """Highest amount this bot is willing to bid."""
        strength = self.estimate_strength(hand) + DIFFICULTY_MARGIN[self.difficulty]
        return min(BID_MAX, strength // BID_INCREMENT * BID_INCREMENT)

    def make_bid(self, hand: list[Card], high_bid: int | None) -> int | None:
        """Bid the minimum raise while it stays under the ceiling, else pass."""
        amount = rules.min_legal_bid(high_bid)
        if amount is None or amount > self.bid_ceiling(hand):
            return None
        return amount

    def choose_trump(self, cards: list[Card]) -> tuple[Suit, list[Card]]:
        """Pick the longest suit as trump and bury five cards."""
        colors = Suit.colors()

        def suit_key(suit: Suit) -> tuple[int, int, int]:
            in_suit = [card for card in cards if card.suit == suit]
            return len(in_suit), hand_points(in_suit), -colors.index(suit)

        trump = max(colors, key=suit_key)
        return trump, self._pick_discards(cards, trump)

    def _pick_discards(self, cards: list[Card], trump: Suit) -> list[Card]:
        lengths = Counter(card.suit for card in cards)

        def keep_priority(card: Card) -> tuple[int, int, int]:
            # Rook, trumps and off-suit 1s are buried last
            protected = card.is_trump(trump) or card.rank == 1
            return int(protected), lengths[card.suit], face_value(card)

        return sorted(cards, key=keep_priority)[:KITTY_SIZE]

    def pick_card(
        self,
        hand: list[Card],
        trick: Trick,
        trump: Suit,
        teams: Teams | None = None,
    ) -> Card:
        """Pick a legal card for the current trick."""
        legal = self._legal(hand, trick, trump)

        if not trick.plays:
            aces = [c for c in legal if c.rank == 1 and not c.is_trump(trump)]
            if aces:
                return aces[0]
            return min(legal, key=lambda c: self._cheapness(c, trump, None))

        led_suit = trick.led_suit(trump)
        winning_play = rules.winner_of(trick.plays, trump, led_suit)
        partner_winning = teams is not None and teams.partner_of(self.seat) == winning_play.seat

        if not partner_winning:
            to_beat = rules.play_value(winning_play.card, trump, led_suit)
            winners = [c for c in legal if rules.play_value(c, trump, led_suit) > to_beat]
            if winners:
                return min(winners, key=lambda c: rules.play_value(c, trump, led_suit))

        return min(legal, key=lambda c: self._cheapness(c, trump, led_suit))

    @staticmethod
    def _cheapness(card: Card, trump: Suit, led_suit: Suit | None) -> tuple[int, int, int]:
        """Order cards from least to most valuable to give away."""
        value = rules.play_value(card, trump, led_suit or card.suit)
        return int(card.is_trump(trump)), point_value(card), value
