"""Game events emitted by state machine operations.

Events describe what a committed mutation did and are handed to the
notifiers after the write succeeds.
"""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any

from rook.models.enums import EventType


def _utc_now() -> datetime:
    """Return current UTC time (timezone-aware)."""
    return datetime.now(UTC)


@dataclass
class GameEvent:
    """Represents a single game event."""

    event_type: EventType
    seat: int | None = None
    data: dict[str, Any] = field(default_factory=dict)
    timestamp: datetime = field(default_factory=_utc_now)

    def to_dict(self, game_id: str, version: int) -> dict[str, Any]:
        """Convert to dictionary for transmission."""
        return {
            "event": self.event_type.value,
            "game_id": game_id,
            "version": version,
            "seat": self.seat,
            "data": self.data,
            "timestamp": self.timestamp.isoformat(),
        }
