"""Bot AI players for Rook.

Available bots:
- RuleBasedBot: Deterministic heuristic play with difficulty levels (easy/medium/hard)
"""

from rook.bots.base_bot import BaseBot, BotAction, BotActionKind, BotDifficulty
from rook.bots.rule_based_bot import RuleBasedBot

__all__ = ["BaseBot", "BotAction", "BotActionKind", "BotDifficulty", "RuleBasedBot"]
