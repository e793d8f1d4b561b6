"""
game session: one board, turn order, terminal checks, optional computer side
"""
import logging
import threading
from dataclasses import dataclass, field
from typing import Tuple

from .game_logic import (
    BoardState, CELL_COUNT, DRAW, EMPTY, FIRST, MARKS, WON, Outcome,
    is_terminal, legal_moves, other, outcome, winner,
)
from .search import best_move

logger = logging.getLogger(__name__)


@dataclass
class Scoreboard:
    """
    running tallies that outlive single games
    """
    wins: dict = field(default_factory=lambda: {m: 0 for m in MARKS})
    draws: int = 0

    def record(self, result):
        # count finished games only
        if result.status == WON:
            self.wins[result.mark] += 1
        elif result.status == DRAW:
            self.draws += 1

    def snapshot(self):
        """
        (x wins, o wins, draws)
        """
        return tuple(self.wins[m] for m in MARKS) + (self.draws,)


@dataclass(frozen=True)
class MoveResult:
    """
    what a mutating call did, handed back to the shell
    """
    accepted: bool
    moves: Tuple[Tuple[int, str], ...]
    board: BoardState
    turn: str
    outcome: Outcome
    score: Tuple[int, int, int]


class GameSession:
    """
    InProgress -> Won(mark) | Draw state machine over a single board
    """

    def __init__(self, scoreboard=None, first_mark=FIRST, ai_mark=None):
        if first_mark not in MARKS:
            raise ValueError(f"bad first mark: {first_mark!r}")
        if ai_mark is not None and ai_mark not in MARKS:
            raise ValueError(f"bad ai mark: {ai_mark!r}")
        self.scoreboard = scoreboard if scoreboard is not None else Scoreboard()
        self.first_mark = first_mark
        self.ai_mark = ai_mark
        self._lock = threading.Lock()   # one application at a time
        self._board = BoardState.empty()
        self._turn = first_mark
        self._outcome = Outcome()

    @property
    def board(self):
        return self._board

    @property
    def turn(self):
        return self._turn

    @property
    def outcome(self):
        return self._outcome

    def legal_moves(self):
        return legal_moves(self._board)

    def winner(self):
        return winner(self._board)

    def is_terminal(self):
        return is_terminal(self._board)

    def _result(self, accepted, moves=()):
        return MoveResult(accepted, tuple(moves), self._board, self._turn,
                          self._outcome, self.scoreboard.snapshot())

    def _apply(self, index, mark):
        """
        single validated placement, caller holds the lock
        """
        if self._outcome.is_over:
            logger.debug("rejected %s@%s: game already over", mark, index)
            return False
        if mark != self._turn:
            logger.debug("rejected %s@%s: %s to move", mark, index, self._turn)
            return False
        if not isinstance(index, int) or not 0 <= index < CELL_COUNT \
           or self._board[index] != EMPTY:
            logger.debug("rejected %s@%s: cell not free", mark, index)
            return False

        self._board = self._board.place(index, mark)
        self._turn = other(self._turn)
        self._outcome = outcome(self._board)
        logger.debug("applied %s@%d -> %s", mark, index, self._board)
        if self._outcome.is_over:
            self.scoreboard.record(self._outcome)
            logger.info("game over: %s %s, score %s", self._outcome.status,
                        self._outcome.mark or "", self.scoreboard.snapshot())
        return True

    def apply_move(self, index, mark):
        """
        place mark at index if legal; computer replies in the same call
        """
        with self._lock:
            if not self._apply(index, mark):
                return self._result(False)
            moves = [(index, mark)]
            if self.ai_mark is not None and mark != self.ai_mark \
               and not self._outcome.is_over and self._turn == self.ai_mark:
                reply = best_move(self._board, self.ai_mark)
                self._apply(reply, self.ai_mark)
                moves.append((reply, self.ai_mark))
            return self._result(True, moves)

    def reset(self, only_if_over=False):
        """
        fresh board and first mark, scores kept
        only_if_over: refuse while the game is still running (online play,
        where the other board cannot be reset with ours)
        """
        with self._lock:
            if only_if_over and not self._outcome.is_over:
                logger.debug("reset refused: game still in progress")
                return self._result(False)
            self._board = BoardState.empty()
            self._turn = self.first_mark
            self._outcome = Outcome()
            return self._result(True)
