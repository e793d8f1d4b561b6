import pytest
from PySide6.QtCore import QCoreApplication

from tictactoe.game_logic import BoardState
from tictactoe.store import MoveStore


def board(layout):
    """
    '.' marks an empty cell, e.g. board("XO..X....")
    """
    return BoardState.from_string(layout)


@pytest.fixture(scope="session")
def qapp():
    # timers and signals want an application object
    return QCoreApplication.instance() or QCoreApplication([])


@pytest.fixture
def store_path(tmp_path):
    return str(tmp_path / "moves.db")


@pytest.fixture
def store(store_path):
    s = MoveStore(store_path)
    yield s
    s.close()
