import threading

import pytest

from conftest import board
from tictactoe.game_logic import DRAW, EMPTY, IN_PROGRESS, WON, BoardState
from tictactoe.search import best_move
from tictactoe.session import GameSession, Scoreboard


def play(session, *cells):
    """
    alternate marks starting from whoever is to move
    """
    result = None
    for i in cells:
        result = session.apply_move(i, session.turn)
        assert result.accepted
    return result


def test_centre_opening():
    session = GameSession()
    result = session.apply_move(4, 'X')
    assert result.accepted
    assert result.moves == ((4, 'X'),)
    assert result.board[4] == 'X'
    assert result.turn == 'O'
    assert result.outcome.status == IN_PROGRESS
    assert session.winner() is None
    assert session.turn == 'O'


def test_turn_alternates():
    session = GameSession()
    for i in (0, 4, 8, 2):
        before = session.turn
        session.apply_move(i, before)
        assert session.turn != before


@pytest.mark.parametrize("index, mark", [
    (4, 'X'),    # occupied
    (0, 'X'),    # wrong turn
    (9, 'O'),    # off the board
    (-1, 'O'),
    (0, ''),     # not a mark
])
def test_illegal_moves_change_nothing(index, mark):
    session = GameSession()
    session.apply_move(4, 'X')
    board_before, turn_before = session.board, session.turn
    result = session.apply_move(index, mark)
    assert not result.accepted
    assert result.moves == ()
    assert session.board == board_before
    assert session.turn == turn_before
    assert session.outcome.status == IN_PROGRESS


def test_no_moves_after_win():
    session = GameSession()
    result = play(session, 0, 3, 1, 4, 2)
    assert result.outcome.status == WON
    assert result.outcome.mark == 'X'
    assert session.is_terminal()
    assert session.legal_moves() == set()
    late = session.apply_move(5, 'O')
    assert not late.accepted
    assert session.board == board("XXXOO....")


def test_win_and_draw_are_scored():
    scores = Scoreboard()
    session = GameSession(scores)
    assert play(session, 0, 3, 1, 4, 2).score == (1, 0, 0)
    session.reset()
    # X O X / X O O / O X X
    result = play(session, 0, 1, 2, 4, 3, 5, 7, 6, 8)
    assert result.outcome.status == DRAW
    assert result.score == (1, 0, 1)
    assert scores.snapshot() == (1, 0, 1)


def test_reset_keeps_score():
    session = GameSession()
    play(session, 3, 0, 4, 1, 8, 2)  # O takes the top row
    assert session.winner() == 'O'
    result = session.reset()
    assert result.board == BoardState.empty()
    assert result.outcome.status == IN_PROGRESS
    assert result.turn == 'X'
    assert result.score == (0, 1, 0)
    assert all(c == EMPTY for c in session.board)


def test_reset_restores_configured_first_mark():
    session = GameSession(first_mark='O')
    assert session.turn == 'O'
    session.apply_move(0, 'O')
    session.reset()
    assert session.turn == 'O'


def test_guarded_reset_waits_for_the_end():
    session = GameSession()
    play(session, 0, 4)
    result = session.reset(only_if_over=True)
    assert not result.accepted
    assert str(result.board) == "X...O...."
    assert session.turn == 'X'

    play(session, 1, 5, 2)  # X takes the top row
    result = session.reset(only_if_over=True)
    assert result.accepted
    assert result.board == BoardState.empty()
    assert result.score == (1, 0, 0)


def test_scoreboard_outlives_sessions():
    scores = Scoreboard()
    play(GameSession(scores), 0, 3, 1, 4, 2)
    play(GameSession(scores), 0, 3, 1, 4, 2)
    assert scores.wins == {'X': 2, 'O': 0}


def test_bad_configuration():
    with pytest.raises(ValueError):
        GameSession(first_mark='Z')
    with pytest.raises(ValueError):
        GameSession(ai_mark='')


def test_computer_replies_in_the_same_call():
    session = GameSession(ai_mark='O')
    result = session.apply_move(0, 'X')
    expected = best_move(board("X........"), 'O')
    assert result.moves == ((0, 'X'), (expected, 'O'))
    assert result.board[expected] == 'O'
    assert result.turn == 'X'


def test_computer_side_cannot_be_moved_by_hand():
    session = GameSession(ai_mark='O')
    assert not session.apply_move(0, 'O').accepted
    assert session.board == BoardState.empty()


def test_naive_play_never_beats_the_computer():
    session = GameSession(ai_mark='O')
    for _ in range(5):
        free = min(session.legal_moves())
        result = session.apply_move(free, 'X')
        if result.outcome.status != IN_PROGRESS:
            break
    assert result.outcome.status in (WON, DRAW)
    assert result.outcome.mark != 'X'
    assert session.apply_move(0, 'X').accepted is False


def test_concurrent_moves_apply_once():
    session = GameSession()
    results = []
    barrier = threading.Barrier(9)

    def click(i):
        barrier.wait()
        results.append(session.apply_move(i, 'X'))

    threads = [threading.Thread(target=click, args=(i,)) for i in range(9)]
    for t in threads: t.start()
    for t in threads: t.join()
    assert sum(r.accepted for r in results) == 1
    assert list(session.board).count('X') == 1
    assert session.turn == 'O'
