"""API routes."""

import logging
from typing import Annotated, Any

from fastapi import APIRouter, Depends, FastAPI, Query, Request, WebSocket
from fastapi.responses import JSONResponse

from rook.api.responses import (
    BidRequest,
    CardListResponse,
    ChoosePartnerRequest,
    ChooseTrumpRequest,
    CreateGameRequest,
    CreateGameResponse,
    ErrorResponse,
    JoinGameRequest,
    PassRequest,
    PlayCardRequest,
    SeatResponse,
)
from rook.api.websocket import websocket_manager
from rook.errors import InvariantViolation, RookError
from rook.models.card import DECK_POINTS, face_value, full_deck, point_value
from rook.services.game_serializer import public_view
from rook.services.game_service import GameService

logger = logging.getLogger(__name__)

router = APIRouter()


def get_game_service(request: Request) -> GameService:
    """Get the game service configured on the application."""
    return request.app.state.game_service


GameServiceDep = Annotated[GameService, Depends(get_game_service)]
SeatQuery = Annotated[int | None, Query(ge=0, le=3, description="Viewing seat")]


async def rook_error_handler(_request: Request, exc: RookError) -> JSONResponse:
    """Render a game error as JSON with its HTTP status."""
    if isinstance(exc, InvariantViolation):
        logger.error("Invariant violation surfaced to client: %s", exc.message)
    body = ErrorResponse(error=exc.code, message=exc.message)
    return JSONResponse(status_code=exc.status_code, content=body.model_dump(mode="json"))


def register_error_handlers(app: FastAPI) -> None:
    """Install the game error handler on an application."""
    app.add_exception_handler(RookError, rook_error_handler)


@router.post("/games", status_code=201)
async def create_game(request: CreateGameRequest, service: GameServiceDep) -> CreateGameResponse:
    """Create a new game with the caller as host (seat 0)."""
    game = await service.create_game(request.host_name)
    return CreateGameResponse(game_id=game.id, seat=0, game=public_view(game, seat=0))


@router.get("/cards")
async def get_cards() -> CardListResponse:
    """Get all cards in the deck.

    Returns:
        List of all card definitions

    """
    cards = [
        {
            "card": str(card),
            "suit": card.suit.value,
            "rank": card.rank,
            "points": point_value(card),
            "face_value": face_value(card),
        }
        for card in full_deck()
    ]
    return CardListResponse(cards=cards, total_points=DECK_POINTS)


@router.get("/games/{game_id}")
async def get_game(game_id: str, service: GameServiceDep, seat: SeatQuery = None) -> dict[str, Any]:
    """Get game state as seen by a seat.

    Args:
        game_id: Game code
        service: Game service
        seat: Viewing seat; its hand and legal plays are included

    Returns:
        Public game view

    """
    game = await service.get_game(game_id)
    return public_view(game, seat=seat)


@router.post("/games/{game_id}/players")
async def join_game(game_id: str, request: JoinGameRequest, service: GameServiceDep) -> SeatResponse:
    """Take the next open seat."""
    game = await service.join_game(game_id, request.player_name)
    seat = game.players[-1].seat
    return SeatResponse(seat=seat, game=public_view(game, seat=seat))


@router.post("/games/{game_id}/bots")
async def add_bot(game_id: str, service: GameServiceDep) -> SeatResponse:
    """Fill the next open seat with a bot."""
    game = await service.add_bot(game_id)
    return SeatResponse(seat=game.players[-1].seat, game=public_view(game))


@router.post("/games/{game_id}/partner")
async def choose_partner(
    game_id: str, request: ChoosePartnerRequest, service: GameServiceDep
) -> dict[str, Any]:
    """Host picks a partner seat."""
    game = await service.choose_partner(game_id, request.partner_seat)
    return public_view(game, seat=0)


@router.post("/games/{game_id}/deal")
async def deal(game_id: str, service: GameServiceDep) -> dict[str, Any]:
    """Deal the first round after partner selection."""
    game = await service.deal(game_id)
    return public_view(game)


@router.post("/games/{game_id}/bid")
async def place_bid(game_id: str, request: BidRequest, service: GameServiceDep) -> dict[str, Any]:
    """Place a bid."""
    game = await service.place_bid(game_id, request.seat, request.amount)
    return public_view(game, seat=request.seat)


@router.post("/games/{game_id}/pass")
async def pass_bid(game_id: str, request: PassRequest, service: GameServiceDep) -> dict[str, Any]:
    """Pass in the auction."""
    game = await service.pass_bid(game_id, request.seat)
    return public_view(game, seat=request.seat)


@router.post("/games/{game_id}/trump")
async def choose_trump(
    game_id: str, request: ChooseTrumpRequest, service: GameServiceDep
) -> dict[str, Any]:
    """Discard to 13 cards and name trump."""
    game = await service.choose_trump(game_id, request.seat, request.suit, request.discards)
    return public_view(game, seat=request.seat)


@router.post("/games/{game_id}/play")
async def play_card(game_id: str, request: PlayCardRequest, service: GameServiceDep) -> dict[str, Any]:
    """Play a card to the current trick."""
    game = await service.play_card(game_id, request.seat, request.card)
    return public_view(game, seat=request.seat)


@router.websocket("/games/{game_id}/ws")
async def watch_game(websocket: WebSocket, game_id: str) -> None:
    """WebSocket endpoint streaming a game's events.

    Args:
        websocket: WebSocket connection
        game_id: Game to watch

    """
    service: GameService = websocket.app.state.game_service
    try:
        game = await service.get_game(game_id)
    except RookError:
        # Must accept before closing to avoid HTTP 403
        await websocket.accept()
        await websocket.close(code=4004, reason="Game not found")
        return

    await websocket_manager.connect(websocket, game.id)
    await websocket.send_json({"event": "INIT", "game_id": game.id, "data": public_view(game)})
    await websocket_manager.listen(websocket, game.id)
