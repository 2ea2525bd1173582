"""Logging service."""

import logging
from typing import Any

logger = logging.getLogger(__name__)


class LogService:
    """Service for structured logging.

    Renders key-value pairs as ``key=value | key=value`` lines.
    """

    @staticmethod
    def _format(data: dict[str, Any]) -> str:
        return " | ".join(f"{k}={v}" for k, v in data.items())

    def info(self, data: dict[str, Any]) -> None:
        """Log info message.

        Args:
            data: Log data as key-value pairs

        """
        logger.info(self._format(data))

    def game_action(self, game_id: str, version: int, event: str, seat: int | None, detail: Any) -> None:
        """Log one committed game event."""
        self.info(
            {"event": event, "game": game_id, "version": version, "seat": seat, "detail": detail}
        )
