from dataclasses import dataclass
from typing import Optional, Tuple

EMPTY = ''
FIRST = 'X'
SECOND = 'O'
MARKS = (FIRST, SECOND)

BOARD_SIZE = 3
CELL_COUNT = BOARD_SIZE * BOARD_SIZE

# rows top-down, cols left-right, then both diagonals
WIN_LINES = (
    (0, 1, 2), (3, 4, 5), (6, 7, 8),
    (0, 3, 6), (1, 4, 7), (2, 5, 8),
    (0, 4, 8), (2, 4, 6),
)

IN_PROGRESS = "in_progress"
WON = "won"
DRAW = "draw"


class InvalidStateError(ValueError):
    """
    board or search used outside its contract
    """


def other(mark):
    """
    the opposing mark
    """
    if mark == FIRST:
        return SECOND
    if mark == SECOND:
        return FIRST
    raise InvalidStateError(f"not a player mark: {mark!r}")


@dataclass(frozen=True)
class BoardState:
    """
    immutable 3x3 grid, row-major cells 0-8
    """
    cells: Tuple[str, ...] = (EMPTY,) * CELL_COUNT

    def __post_init__(self):
        if len(self.cells) != CELL_COUNT:
            raise InvalidStateError(f"board needs {CELL_COUNT} cells, got {len(self.cells)}")
        for c in self.cells:
            if c != EMPTY and c not in MARKS:
                raise InvalidStateError(f"bad cell mark: {c!r}")

    @classmethod
    def empty(cls):
        return cls()

    @classmethod
    def from_string(cls, layout):
        """
        build from 9 chars, '.' or ' ' for empty ("XO.X.....")
        """
        cells = tuple(EMPTY if ch in ". " else ch for ch in layout)
        return cls(cells)

    def __getitem__(self, index):
        return self.cells[index]

    def __iter__(self):
        return iter(self.cells)

    def __str__(self):
        return "".join(c or "." for c in self.cells)

    def place(self, index, mark):
        """
        new board with mark written at index
        """
        if not 0 <= index < CELL_COUNT:
            raise InvalidStateError(f"cell {index} out of range")
        if mark not in MARKS:
            raise InvalidStateError(f"not a player mark: {mark!r}")
        if self.cells[index] != EMPTY:
            raise InvalidStateError(f"cell {index} already holds {self.cells[index]}")
        cells = list(self.cells)
        cells[index] = mark
        return BoardState(tuple(cells))

    def empty_cells(self):
        # ascending index order
        return [i for i, c in enumerate(self.cells) if c == EMPTY]


@dataclass(frozen=True)
class Outcome:
    """
    derived game result; mark only set when won
    """
    status: str = IN_PROGRESS
    mark: Optional[str] = None

    @property
    def is_over(self):
        return self.status != IN_PROGRESS


def winning_line(state):
    """
    first line fully held by one mark, or None
    """
    for a, b, c in WIN_LINES:
        m = state[a]
        if m != EMPTY and m == state[b] == state[c]:
            return (a, b, c)
    return None


def winner(state):
    line = winning_line(state)
    return state[line[0]] if line else None


def is_full(state):
    return EMPTY not in state.cells


def is_terminal(state):
    return winner(state) is not None or is_full(state)


def legal_moves(state):
    """
    set of empty cells, empty once the game is decided
    """
    if is_terminal(state):
        return set()
    return set(state.empty_cells())


def outcome(state):
    w = winner(state)
    if w is not None:
        return Outcome(WON, w)
    if is_full(state):
        return Outcome(DRAW)
    return Outcome()
