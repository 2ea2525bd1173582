"""Game state machine.

Each operation takes the current game document and validated input and
returns an ``Outcome`` holding a new document plus the events it produced.
Operations never modify their argument, so the concurrency controller can
recompute them freely after losing a write race.
"""

import copy
from dataclasses import dataclass, field

from rook.constants import (
    BOT_NAME_PREFIX,
    HAND_SIZE,
    HOST_SEAT,
    KITTY_SIZE,
    MAX_NAME_LENGTH,
    NUM_SEATS,
)
from rook.errors import (
    GameFull,
    IllegalPlay,
    InvalidTransition,
    InvalidTurn,
    InvariantViolation,
    NameTaken,
    ValidationError,
)
from rook.models import rules
from rook.models.card import Card, hand_points, sort_hand
from rook.models.deck import deal_round
from rook.models.enums import EventType, GameStatus, Suit
from rook.models.game import Game
from rook.models.game_event import GameEvent
from rook.models.phases import (
    BiddingPhase,
    FinishedPhase,
    PartnerSelectionPhase,
    PlayingPhase,
    TrumpSelectionPhase,
)
from rook.models.player import Player, Teams
from rook.models.trick import Play, Trick


@dataclass
class Outcome:
    """Result of applying an operation to a game."""

    game: Game
    events: list[GameEvent] = field(default_factory=list)


def validate_player_name(name: str) -> str:
    """Normalize and validate a display name.

    Returns:
        The trimmed name

    Raises:
        ValidationError: If the name is empty or too long

    """
    if not isinstance(name, str):
        raise ValidationError("Player name must be a string")
    trimmed = name.strip()
    if not 1 <= len(trimmed) <= MAX_NAME_LENGTH:
        raise ValidationError(f"Player name must be 1-{MAX_NAME_LENGTH} characters")
    return trimmed


def _check_seat(seat: int) -> None:
    if isinstance(seat, bool) or not isinstance(seat, int) or not 0 <= seat < NUM_SEATS:
        raise ValidationError(f"Seat must be 0-{NUM_SEATS - 1}")


def _require(game: Game, action: str, *allowed: GameStatus) -> None:
    if game.status not in allowed:
        raise InvalidTransition(f"Cannot {action} while game is {game.status.value}")


def _require_open_seat(game: Game, action: str) -> None:
    if game.status == GameStatus.FULL:
        raise GameFull(f"Game {game.id} is full")
    _require(game, action, GameStatus.LOBBY)


def _parse_trump(suit: Suit | str) -> Suit:
    try:
        parsed = Suit(suit)
    except ValueError as e:
        raise ValidationError(f"Unknown suit: {suit!r}") from e
    if parsed == Suit.ROOK:
        raise ValidationError("Rook is not a trump suit")
    return parsed


def new_game(game_id: str, host_name: str, shuffle_seed: str) -> Outcome:
    """Create a game with the host seated at seat 0."""
    name = validate_player_name(host_name)
    game = Game(
        id=game_id,
        host_name=name,
        shuffle_seed=shuffle_seed,
        players=[Player(seat=HOST_SEAT, name=name)],
    )
    event = GameEvent(EventType.GAME_CREATED, seat=HOST_SEAT, data={"host_name": name})
    return Outcome(game, [event])


def join_game(game: Game, player_name: str) -> Outcome:
    """Seat a human player at the next open seat."""
    name = validate_player_name(player_name)
    _require_open_seat(game, "join")
    if game.has_name(name):
        raise NameTaken(f"Name {name!r} is already taken")

    game = copy.deepcopy(game)
    seat = len(game.players)
    game.players.append(Player(seat=seat, name=name))
    event = GameEvent(
        EventType.PLAYER_JOINED,
        seat=seat,
        data={"name": name, "status": game.status.value},
    )
    return Outcome(game, [event])


def add_bot(game: Game) -> Outcome:
    """Seat a bot at the next open seat, named ``Bot N``."""
    _require_open_seat(game, "add a bot")

    game = copy.deepcopy(game)
    number = 1
    while game.has_name(f"{BOT_NAME_PREFIX} {number}"):
        number += 1
    name = f"{BOT_NAME_PREFIX} {number}"
    seat = len(game.players)
    game.players.append(Player(seat=seat, name=name, is_bot=True))
    event = GameEvent(
        EventType.BOT_ADDED,
        seat=seat,
        data={"name": name, "status": game.status.value},
    )
    return Outcome(game, [event])


def choose_partner(game: Game, partner_seat: int) -> Outcome:
    """Form teams from the host's partner choice."""
    _require(game, "choose a partner", GameStatus.FULL)
    teams = Teams.with_partner(partner_seat)

    game = copy.deepcopy(game)
    game.phase = PartnerSelectionPhase(teams=teams)
    event = GameEvent(
        EventType.PARTNER_CHOSEN,
        seat=HOST_SEAT,
        data={"partner_seat": partner_seat, "teams": teams.as_lists()},
    )
    return Outcome(game, [event])


def _start_round(game: Game, teams: Teams) -> GameEvent:
    """Deal the next round into ``game`` (already a private copy)."""
    game.round_number += 1
    dealer = (game.round_number - 1) % NUM_SEATS
    first_bidder = dealer if game.round_number == 1 else (dealer + 1) % NUM_SEATS

    dealt = deal_round(game.shuffle_seed, game.round_number)
    game.phase = BiddingPhase(
        teams=teams,
        dealer=dealer,
        hands=dealt.hands,
        kitty=dealt.kitty,
        turn=first_bidder,
    )
    return GameEvent(
        EventType.HAND_DEALT,
        data={"round_number": game.round_number, "dealer": dealer, "turn": first_bidder},
    )


def deal(game: Game) -> Outcome:
    """Deal the first round once partners are chosen."""
    _require(game, "deal", GameStatus.PARTNER_SELECTION)

    game = copy.deepcopy(game)
    event = _start_round(game, game.phase.teams)
    return Outcome(game, [event])


def _bidding_turn(game: Game, seat: int) -> BiddingPhase:
    _require(game, "bid", GameStatus.BIDDING)
    _check_seat(seat)
    phase = game.phase
    if seat != phase.turn:
        raise InvalidTurn(f"Seat {seat} cannot bid, it is seat {phase.turn}'s turn")
    return phase


def _award_contract(game: Game, phase: BiddingPhase) -> GameEvent | None:
    contract = rules.resolve_auction(set(phase.passed), phase.high_bid, phase.high_bidder)
    if contract is None:
        return None
    game.phase = TrumpSelectionPhase(
        teams=phase.teams,
        dealer=phase.dealer,
        hands=phase.hands,
        kitty=phase.kitty,
        contract=contract,
    )
    return GameEvent(
        EventType.BIDDING_WON,
        seat=contract.bidder,
        data={"bidder": contract.bidder, "amount": contract.amount},
    )


def place_bid(game: Game, seat: int, amount: int) -> Outcome:
    """Raise the high bid."""
    _bidding_turn(game, seat)
    rules.validate_bid(amount, game.phase.high_bid)

    game = copy.deepcopy(game)
    phase = game.phase
    phase.high_bid = amount
    phase.high_bidder = seat
    events = [GameEvent(EventType.BID_PLACED, seat=seat, data={"amount": amount})]

    next_turn = rules.next_seat(seat, skip=set(phase.passed))
    if next_turn is None:
        awarded = _award_contract(game, phase)
        if awarded is None:
            raise InvariantViolation(f"Auction in game {game.id} has no next bidder")
        events.append(awarded)
    else:
        phase.turn = next_turn
    return Outcome(game, events)


def pass_bid(game: Game, seat: int) -> Outcome:
    """Drop out of the auction."""
    _bidding_turn(game, seat)

    game = copy.deepcopy(game)
    phase = game.phase
    phase.passed.append(seat)
    events = [GameEvent(EventType.PLAYER_PASSED, seat=seat)]

    awarded = _award_contract(game, phase)
    if awarded is not None:
        events.append(awarded)
    else:
        phase.turn = rules.next_seat(seat, skip=set(phase.passed))
    return Outcome(game, events)


def choose_trump(game: Game, seat: int, suit: Suit | str, discards: list[Card]) -> Outcome:
    """Take the kitty, bury five cards and name trump."""
    _require(game, "choose trump", GameStatus.TRUMP_SELECTION)
    _check_seat(seat)
    phase = game.phase
    if seat != phase.contract.bidder:
        raise InvalidTurn(f"Only seat {phase.contract.bidder} may choose trump")

    trump = _parse_trump(suit)
    if len(discards) != KITTY_SIZE or len(set(discards)) != KITTY_SIZE:
        raise ValidationError(f"Exactly {KITTY_SIZE} distinct cards must be discarded")

    pool = phase.hands[seat] + phase.kitty
    missing = [str(card) for card in discards if card not in pool]
    if missing:
        raise IllegalPlay(f"Cannot discard cards not in hand: {', '.join(missing)}")

    game = copy.deepcopy(game)
    phase = game.phase
    hands = phase.hands
    hands[seat] = sort_hand([card for card in pool if card not in discards])
    leader = (phase.dealer + 1) % NUM_SEATS
    game.phase = PlayingPhase(
        teams=phase.teams,
        dealer=phase.dealer,
        hands=hands,
        contract=phase.contract,
        trump=trump,
        discards=list(discards),
        trick=Trick(leader=leader),
        turn=leader,
    )
    event = GameEvent(EventType.TRUMP_CHOSEN, seat=seat, data={"trump": trump.value, "leader": leader})
    return Outcome(game, [event])


def _finish_round(game: Game, phase: PlayingPhase) -> list[GameEvent]:
    result = rules.score_round(
        round_number=game.round_number,
        dealer=phase.dealer,
        contract=phase.contract,
        teams=phase.teams,
        team_points=(phase.points_captured[0], phase.points_captured[1]),
        kitty_points=hand_points(phase.discards),
        previous_scores=game.scores,
    )
    game.hand_history.append(result)
    game.scores = result.scores
    events = [
        GameEvent(
            EventType.HAND_COMPLETE,
            seat=phase.contract.bidder,
            data={
                "round_number": result.round_number,
                "bid": result.bid,
                "made": result.made,
                "sweep": result.sweep,
                "team_points": list(result.team_points),
                "kitty_points": result.kitty_points,
                "score_deltas": list(result.score_deltas),
                "scores": list(result.scores),
            },
        )
    ]

    winner = rules.game_winner(game.scores)
    if winner is not None:
        game.phase = FinishedPhase(teams=phase.teams, winner=winner)
        events.append(
            GameEvent(EventType.GAME_OVER, data={"winner": winner, "scores": list(game.scores)})
        )
    else:
        events.append(_start_round(game, phase.teams))
    return events


def play_card(game: Game, seat: int, card: Card) -> Outcome:
    """Play a card to the current trick."""
    _require(game, "play a card", GameStatus.PLAYING)
    _check_seat(seat)
    phase = game.phase
    if seat != phase.turn:
        raise InvalidTurn(f"Seat {seat} cannot play, it is seat {phase.turn}'s turn")

    hand = phase.hands[seat]
    if card not in hand:
        raise IllegalPlay(f"{card} is not in seat {seat}'s hand")
    led_suit = phase.trick.led_suit(phase.trump)
    if card not in rules.legal_plays(hand, led_suit, phase.trump):
        raise IllegalPlay(f"{card} does not follow {led_suit.value if led_suit else 'the lead'}")

    game = copy.deepcopy(game)
    phase = game.phase
    phase.hands[seat].remove(card)
    phase.trick.plays.append(Play(seat=seat, card=card))
    events = [
        GameEvent(
            EventType.CARD_PLAYED,
            seat=seat,
            data={"card": str(card), "trick_number": phase.tricks_played + 1},
        )
    ]

    if not phase.trick.is_complete():
        phase.turn = (seat + 1) % NUM_SEATS
        return Outcome(game, events)

    led_suit = phase.trick.led_suit(phase.trump)
    winning = rules.winner_of(phase.trick.plays, phase.trump, led_suit)
    cards = phase.trick.cards()
    team = phase.teams.team_of(winning.seat)
    points = hand_points(cards)
    phase.tricks_won[team] += 1
    phase.points_captured[team] += points
    phase.captured.extend(cards)
    phase.tricks_played += 1
    events.append(
        GameEvent(
            EventType.TRICK_WON,
            seat=winning.seat,
            data={
                "card": str(winning.card),
                "team": team,
                "points": points,
                "cards": [str(c) for c in cards],
                "trick_number": phase.tricks_played,
            },
        )
    )

    if phase.tricks_played == HAND_SIZE:
        events.extend(_finish_round(game, phase))
    else:
        phase.trick = Trick(leader=winning.seat)
        phase.turn = winning.seat
    return Outcome(game, events)
