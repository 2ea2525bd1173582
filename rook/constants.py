"""Game rule constants.

These values define the Rook variant played by this server and are not
configurable at runtime.
"""

# Table
NUM_SEATS = 4
HOST_SEAT = 0
HAND_SIZE = 13
KITTY_SIZE = 5

# Bidding
BID_MIN = 50
BID_MAX = 180
BID_INCREMENT = 5

# Scoring
WINNING_SCORE = 200
SWEEP_SCORE = 200

# Game codes (no I or O, they read like 1 and 0)
GAME_CODE_ALPHABET = "ABCDEFGHJKLMNPQRSTUVWXYZ"
GAME_CODE_LENGTH = 6
MAX_CODE_ATTEMPTS = 5

# Players
MAX_NAME_LENGTH = 20
BOT_NAME_PREFIX = "Bot"
