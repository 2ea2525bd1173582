"""Game serialization for persistence and the public API.

Handles conversion between Game objects and MongoDB documents, and renders
the per-seat public view that clients see.
"""

from datetime import datetime
from typing import Any

from rook.models import rules
from rook.models.card import Card, parse_cards
from rook.models.enums import GameStatus, Suit
from rook.models.game import Game
from rook.models.phases import (
    BiddingPhase,
    FinishedPhase,
    LobbyPhase,
    PartnerSelectionPhase,
    Phase,
    PlayingPhase,
    TrumpSelectionPhase,
)
from rook.models.player import Player, Teams
from rook.models.round import Contract, HandResult
from rook.models.trick import Play, Trick


def _cards(cards: list[Card]) -> list[str]:
    return [str(card) for card in cards]


def serialize_player(player: Player) -> dict[str, Any]:
    """Serialize a Player to a dictionary."""
    return {"seat": player.seat, "name": player.name, "is_bot": player.is_bot}


def deserialize_player(data: dict[str, Any]) -> Player:
    """Deserialize a Player from a dictionary."""
    return Player(seat=data["seat"], name=data["name"], is_bot=data.get("is_bot", False))


def serialize_teams(teams: Teams) -> list[list[int]]:
    """Serialize Teams as two seat lists."""
    return teams.as_lists()


def deserialize_teams(data: list[list[int]]) -> Teams:
    """Deserialize Teams from two seat lists."""
    return Teams(team0=(data[0][0], data[0][1]), team1=(data[1][0], data[1][1]))


def serialize_trick(trick: Trick) -> dict[str, Any]:
    """Serialize a Trick to a dictionary."""
    return {
        "leader": trick.leader,
        "plays": [{"seat": p.seat, "card": str(p.card)} for p in trick.plays],
    }


def deserialize_trick(data: dict[str, Any]) -> Trick:
    """Deserialize a Trick from a dictionary."""
    return Trick(
        leader=data["leader"],
        plays=[Play(seat=p["seat"], card=Card.parse(p["card"])) for p in data.get("plays", [])],
    )


def serialize_contract(contract: Contract) -> dict[str, int]:
    """Serialize a Contract to a dictionary."""
    return {"bidder": contract.bidder, "amount": contract.amount}


def deserialize_contract(data: dict[str, int]) -> Contract:
    """Deserialize a Contract from a dictionary."""
    return Contract(bidder=data["bidder"], amount=data["amount"])


def serialize_hand_result(result: HandResult) -> dict[str, Any]:
    """Serialize a HandResult to a dictionary."""
    return {
        "round_number": result.round_number,
        "dealer": result.dealer,
        "bidder": result.bidder,
        "bid": result.bid,
        "bid_team": result.bid_team,
        "team_points": list(result.team_points),
        "kitty_points": result.kitty_points,
        "made": result.made,
        "sweep": result.sweep,
        "score_deltas": list(result.score_deltas),
        "scores": list(result.scores),
    }


def deserialize_hand_result(data: dict[str, Any]) -> HandResult:
    """Deserialize a HandResult from a dictionary."""
    return HandResult(
        round_number=data["round_number"],
        dealer=data["dealer"],
        bidder=data["bidder"],
        bid=data["bid"],
        bid_team=data["bid_team"],
        team_points=(data["team_points"][0], data["team_points"][1]),
        kitty_points=data["kitty_points"],
        made=data["made"],
        sweep=data["sweep"],
        score_deltas=(data["score_deltas"][0], data["score_deltas"][1]),
        scores=(data["scores"][0], data["scores"][1]),
    )


def serialize_phase(phase: Phase) -> dict[str, Any]:
    """Serialize a status payload, tagged with its kind."""
    if isinstance(phase, LobbyPhase):
        return {"kind": "LOBBY"}
    if isinstance(phase, PartnerSelectionPhase):
        return {"kind": phase.status.value, "teams": serialize_teams(phase.teams)}
    if isinstance(phase, FinishedPhase):
        return {
            "kind": phase.status.value,
            "teams": serialize_teams(phase.teams),
            "winner": phase.winner,
        }

    data: dict[str, Any] = {
        "kind": phase.status.value,
        "teams": serialize_teams(phase.teams),
        "dealer": phase.dealer,
        "hands": [_cards(hand) for hand in phase.hands],
    }
    if isinstance(phase, BiddingPhase):
        data.update(
            kitty=_cards(phase.kitty),
            turn=phase.turn,
            high_bid=phase.high_bid,
            high_bidder=phase.high_bidder,
            passed=list(phase.passed),
        )
    elif isinstance(phase, TrumpSelectionPhase):
        data.update(kitty=_cards(phase.kitty), contract=serialize_contract(phase.contract))
    else:
        data.update(
            contract=serialize_contract(phase.contract),
            trump=phase.trump.value,
            discards=_cards(phase.discards),
            trick=serialize_trick(phase.trick),
            turn=phase.turn,
            tricks_won=list(phase.tricks_won),
            points_captured=list(phase.points_captured),
            captured=_cards(phase.captured),
            tricks_played=phase.tricks_played,
        )
    return data


def deserialize_phase(data: dict[str, Any]) -> Phase:
    """Deserialize a status payload from its tagged dictionary.

    Raises:
        ValueError: If the kind tag is unknown

    """
    kind = data["kind"]
    if kind == "LOBBY":
        return LobbyPhase()

    teams = deserialize_teams(data["teams"])
    if kind == GameStatus.PARTNER_SELECTION.value:
        return PartnerSelectionPhase(teams=teams)
    if kind == GameStatus.FINISHED.value:
        return FinishedPhase(teams=teams, winner=data["winner"])

    hands = [parse_cards(hand) for hand in data["hands"]]
    if kind == GameStatus.BIDDING.value:
        return BiddingPhase(
            teams=teams,
            dealer=data["dealer"],
            hands=hands,
            kitty=parse_cards(data["kitty"]),
            turn=data["turn"],
            high_bid=data.get("high_bid"),
            high_bidder=data.get("high_bidder"),
            passed=list(data.get("passed", [])),
        )
    if kind == GameStatus.TRUMP_SELECTION.value:
        return TrumpSelectionPhase(
            teams=teams,
            dealer=data["dealer"],
            hands=hands,
            kitty=parse_cards(data["kitty"]),
            contract=deserialize_contract(data["contract"]),
        )
    if kind == GameStatus.PLAYING.value:
        return PlayingPhase(
            teams=teams,
            dealer=data["dealer"],
            hands=hands,
            contract=deserialize_contract(data["contract"]),
            trump=Suit(data["trump"]),
            discards=parse_cards(data["discards"]),
            trick=deserialize_trick(data["trick"]),
            turn=data["turn"],
            tricks_won=list(data["tricks_won"]),
            points_captured=list(data["points_captured"]),
            captured=parse_cards(data.get("captured", [])),
            tricks_played=data.get("tricks_played", 0),
        )
    raise ValueError(f"Unknown phase kind: {kind}")


def serialize_game(game: Game) -> dict[str, Any]:
    """Serialize a complete Game to a MongoDB document.

    Args:
        game: Game instance to serialize

    Returns:
        Dictionary suitable for MongoDB storage
    """
    return {
        "_id": game.id,
        "host_name": game.host_name,
        "shuffle_seed": game.shuffle_seed,
        "status": game.status.value,
        "players": [serialize_player(p) for p in game.players],
        "phase": serialize_phase(game.phase),
        "scores": list(game.scores),
        "round_number": game.round_number,
        "hand_history": [serialize_hand_result(r) for r in game.hand_history],
        "version": game.version,
        "created_at": game.created_at.isoformat(),
        "updated_at": game.updated_at.isoformat(),
    }


def deserialize_game(data: dict[str, Any]) -> Game:
    """Deserialize a Game from a MongoDB document.

    Args:
        data: MongoDB document

    Returns:
        Game instance with full state restored
    """
    return Game(
        id=data["_id"],
        host_name=data["host_name"],
        shuffle_seed=data["shuffle_seed"],
        players=[deserialize_player(p) for p in data.get("players", [])],
        phase=deserialize_phase(data["phase"]),
        scores=(data["scores"][0], data["scores"][1]),
        round_number=data.get("round_number", 0),
        hand_history=[deserialize_hand_result(r) for r in data.get("hand_history", [])],
        version=data["version"],
        created_at=datetime.fromisoformat(data["created_at"]),
        updated_at=datetime.fromisoformat(data["updated_at"]),
    )


def public_view(game: Game, seat: int | None = None) -> dict[str, Any]:
    """Render the game as seen by one seat (or a spectator when ``seat`` is None).

    Other players' hands, the undiscarded kitty and the shuffle seed are never
    included. The viewing seat sees its own hand and legal plays, and the
    contract holder sees the kitty while choosing trump.

    Args:
        game: Game to render
        seat: Viewing seat, if any

    Returns:
        JSON-ready dictionary
    """
    phase = game.phase
    teams = game.teams
    view: dict[str, Any] = {
        "game_id": game.id,
        "host_name": game.host_name,
        "status": game.status.value,
        "version": game.version,
        "players": [serialize_player(p) for p in game.players],
        "teams": serialize_teams(teams) if teams else None,
        "scores": list(game.scores),
        "round_number": game.round_number,
        "hand_history": [serialize_hand_result(r) for r in game.hand_history],
        "dealer": game.dealer,
        "turn": game.turn,
        "trump": game.trump.value if game.trump else None,
        "contract": serialize_contract(game.contract) if game.contract else None,
        "winner": game.winner,
    }

    if isinstance(phase, (BiddingPhase, TrumpSelectionPhase, PlayingPhase)):
        view["hand_counts"] = [len(hand) for hand in phase.hands]

    if isinstance(phase, BiddingPhase):
        view["bidding"] = {
            "high_bid": phase.high_bid,
            "high_bidder": phase.high_bidder,
            "passed": list(phase.passed),
            "min_bid": rules.min_legal_bid(phase.high_bid),
        }

    if isinstance(phase, PlayingPhase):
        led_suit = phase.trick.led_suit(phase.trump)
        view["trick"] = serialize_trick(phase.trick)
        view["led_suit"] = led_suit.value if led_suit else None
        view["tricks_won"] = list(phase.tricks_won)
        view["points_captured"] = list(phase.points_captured)
        view["tricks_played"] = phase.tricks_played

    if seat is not None and game.get_player(seat) is not None:
        view["seat"] = seat
        hand = game.hand_of(seat)
        view["hand"] = _cards(hand)
        if isinstance(phase, TrumpSelectionPhase) and phase.contract.bidder == seat:
            view["kitty"] = _cards(phase.kitty)
        if isinstance(phase, PlayingPhase) and phase.turn == seat:
            led_suit = phase.trick.led_suit(phase.trump)
            view["legal_plays"] = _cards(rules.legal_plays(hand, led_suit, phase.trump))

    return view
