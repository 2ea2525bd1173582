"""Notification contract for committed game events."""

from typing import Any, Protocol


class Notifier(Protocol):
    """Fire-and-forget sink for game events.

    A failing notifier never undoes a committed mutation; the game service
    logs the failure and moves on.
    """

    async def broadcast(self, game_id: str, event: dict[str, Any]) -> None:
        """Deliver one event for a game."""
        ...
