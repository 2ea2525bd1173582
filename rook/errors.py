"""Typed failures raised by the rules engine, state machine and services.

Every failure is detected before a write is attempted. Only
``ConcurrencyConflict`` comes out of the persistence boundary, after the
retry budget is spent.
"""

from enum import StrEnum


class ErrorCode(StrEnum):
    """Error codes for i18n translation on the frontend."""

    VALIDATION = "error.validation"
    GAME_NOT_FOUND = "error.gameNotFound"
    INVALID_TRANSITION = "error.invalidTransition"
    NOT_YOUR_TURN = "error.notYourTurn"
    ILLEGAL_PLAY = "error.illegalPlay"
    ILLEGAL_BID = "error.illegalBid"
    GAME_IS_FULL = "error.gameIsFull"
    NAME_TAKEN = "error.nameTaken"
    CONCURRENCY_CONFLICT = "error.concurrencyConflict"
    INVARIANT_VIOLATION = "error.invariantViolation"


class RookError(Exception):
    """Base class for all game errors.

    Attributes:
        code: Frontend error code
        status_code: HTTP status used when surfaced by the API
    """

    code: ErrorCode = ErrorCode.VALIDATION
    status_code: int = 400

    def __init__(self, message: str = "") -> None:
        super().__init__(message or self.code.value)
        self.message = message or self.code.value


class ValidationError(RookError):
    """Malformed input."""

    code = ErrorCode.VALIDATION
    status_code = 422


class NotFound(RookError):
    """Unknown game id."""

    code = ErrorCode.GAME_NOT_FOUND
    status_code = 404


class InvalidTransition(RookError):
    """Operation is not valid for the game's current status."""

    code = ErrorCode.INVALID_TRANSITION
    status_code = 409


class InvalidTurn(RookError):
    """Actor is not the seat entitled to act."""

    code = ErrorCode.NOT_YOUR_TURN
    status_code = 409


class IllegalPlay(RookError):
    """Card play or discard breaks the rules."""

    code = ErrorCode.ILLEGAL_PLAY
    status_code = 400


class IllegalBid(RookError):
    """Bid amount breaks the bidding rules."""

    code = ErrorCode.ILLEGAL_BID
    status_code = 400


class GameFull(RookError):
    """All four seats are taken."""

    code = ErrorCode.GAME_IS_FULL
    status_code = 409


class NameTaken(RookError):
    """Another player already uses this name."""

    code = ErrorCode.NAME_TAKEN
    status_code = 409


class ConcurrencyConflict(RookError):
    """Conditional write kept losing races until the retry budget ran out."""

    code = ErrorCode.CONCURRENCY_CONFLICT
    status_code = 503


class InvariantViolation(RookError):
    """Internal consistency check failed."""

    code = ErrorCode.INVARIANT_VIOLATION
    status_code = 500
