import logging

from .game_logic import InvalidStateError, is_full, legal_moves, other, winner

logger = logging.getLogger(__name__)


def terminal_score(state, me):
    """
    +1 win, -1 loss, 0 draw for `me`; None while undecided
    """
    w = winner(state)
    if w == me:
        return 1
    if w is not None:
        return -1
    if is_full(state):
        return 0
    return None


class _Counter:
    # positions visited during one best_move call
    def __init__(self):
        self.nodes = 0


def minimax(state, to_move, me, _counter=None):
    """
    exhaustive minimax value of state for `me`, no pruning
    """
    if _counter is not None:
        _counter.nodes += 1
    score = terminal_score(state, me)
    if score is not None:
        return score

    nxt = other(to_move)
    values = (minimax(state.place(i, to_move), nxt, me, _counter)
              for i in state.empty_cells())
    # maximize on our own turn, minimize on the opponent's
    return max(values) if to_move == me else min(values)


def best_move(state, mark):
    """
    optimal cell for `mark`; ties go to the lowest index
    """
    moves = sorted(legal_moves(state))
    if not moves:
        raise InvalidStateError(f"no legal move for {mark} on {state}")

    counter = _Counter()
    best_index, best_score = None, None
    for i in moves:
        score = minimax(state.place(i, mark), other(mark), mark, counter)
        if best_score is None or score > best_score:
            best_index, best_score = i, score

    logger.debug("search for %s on %s: %d positions, best cell %d (score %d)",
                 mark, state, counter.nodes, best_index, best_score)
    return best_index
