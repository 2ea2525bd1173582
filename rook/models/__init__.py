"""Game domain models."""

from rook.models.card import ROOK, Card
from rook.models.deck import Deal, Deck
from rook.models.enums import EventType, GameStatus, Suit
from rook.models.game import Game
from rook.models.player import Player, Teams
from rook.models.round import Contract, HandResult
from rook.models.trick import Play, Trick

__all__ = [
    "ROOK",
    "Card",
    "Contract",
    "Deal",
    "Deck",
    "EventType",
    "Game",
    "GameStatus",
    "HandResult",
    "Play",
    "Player",
    "Suit",
    "Teams",
    "Trick",
]
