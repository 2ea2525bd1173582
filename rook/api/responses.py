"""Request and response models."""

from typing import Any

from pydantic import BaseModel, Field

from rook.errors import ErrorCode

__all__ = [
    "BidRequest",
    "CardListResponse",
    "ChoosePartnerRequest",
    "ChooseTrumpRequest",
    "CreateGameRequest",
    "CreateGameResponse",
    "ErrorCode",
    "ErrorResponse",
    "JoinGameRequest",
    "PassRequest",
    "PlayCardRequest",
    "SeatResponse",
]


class CreateGameRequest(BaseModel):
    """Request to create a new game."""

    host_name: str


class JoinGameRequest(BaseModel):
    """Request to take a seat."""

    player_name: str


class ChoosePartnerRequest(BaseModel):
    """Host's partner choice."""

    partner_seat: int


class BidRequest(BaseModel):
    """Bid for the seat holding the turn."""

    seat: int
    amount: int


class PassRequest(BaseModel):
    """Pass for the seat holding the turn."""

    seat: int


class ChooseTrumpRequest(BaseModel):
    """Contract holder's trump and discards."""

    seat: int
    suit: str
    discards: list[str] = Field(default_factory=list)


class PlayCardRequest(BaseModel):
    """Card play for the seat holding the turn."""

    seat: int
    card: str


class CreateGameResponse(BaseModel):
    """Response for game creation."""

    game_id: str
    seat: int = 0
    game: dict[str, Any]


class SeatResponse(BaseModel):
    """Response for joining or adding a bot."""

    seat: int
    game: dict[str, Any]


class CardListResponse(BaseModel):
    """Response for card list endpoint."""

    cards: list[dict[str, Any]]
    total_points: int


class ErrorResponse(BaseModel):
    """Error response."""

    error: ErrorCode
    message: str
