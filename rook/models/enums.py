"""Enums for the game."""

from enum import Enum


class Suit(str, Enum):
    """Card suits. The Rook card is its own suit."""

    RED = "Red"
    GREEN = "Green"
    YELLOW = "Yellow"
    BLACK = "Black"
    ROOK = "Rook"

    @classmethod
    def colors(cls) -> tuple["Suit", ...]:
        """Return the four ordinary suits in canonical order."""
        return (cls.RED, cls.GREEN, cls.YELLOW, cls.BLACK)


class GameStatus(str, Enum):
    """Game states during the lifecycle."""

    LOBBY = "LOBBY"
    FULL = "FULL"
    PARTNER_SELECTION = "PARTNER_SELECTION"
    BIDDING = "BIDDING"
    TRUMP_SELECTION = "TRUMP_SELECTION"
    PLAYING = "PLAYING"
    FINISHED = "FINISHED"


class EventType(str, Enum):
    """Events broadcast after a committed mutation."""

    GAME_CREATED = "GAME_CREATED"
    PLAYER_JOINED = "PLAYER_JOINED"
    BOT_ADDED = "BOT_ADDED"
    PARTNER_CHOSEN = "PARTNER_CHOSEN"
    HAND_DEALT = "HAND_DEALT"
    BID_PLACED = "BID_PLACED"
    PLAYER_PASSED = "PLAYER_PASSED"
    BIDDING_WON = "BIDDING_WON"
    TRUMP_CHOSEN = "TRUMP_CHOSEN"
    CARD_PLAYED = "CARD_PLAYED"
    TRICK_WON = "TRICK_WON"
    HAND_COMPLETE = "HAND_COMPLETE"
    GAME_OVER = "GAME_OVER"
