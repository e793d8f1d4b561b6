import os

from .game_logic import FIRST, SECOND

# -----------------------------------------------------------------------------
# GAME
# -----------------------------------------------------------------------------

FIRST_MARK = FIRST          # who opens every game
HUMAN_MARK = FIRST          # vs computer: human side
AI_MARK = SECOND            # vs computer: computer side

# -----------------------------------------------------------------------------
# ONLINE SYNC
# -----------------------------------------------------------------------------

STORE_PATH = os.environ.get("TICTACTOE_STORE", "tictactoe_moves.db")
POLL_INTERVAL_MS = int(os.environ.get("TICTACTOE_POLL_MS", "1000"))

# -----------------------------------------------------------------------------
# LOGGING
# -----------------------------------------------------------------------------

LOG_LEVEL = os.environ.get("TICTACTOE_LOG_LEVEL", "INFO").upper()
LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"
