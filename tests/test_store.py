import pytest

from tictactoe.store import MoveRecord, MoveStore, StoreError


def test_append_and_read_in_order(store):
    first = store.append(4, 'X')
    second = store.append(0, 'O')
    assert second > first
    assert store.read_all() == [MoveRecord(first, 4, 'X'), MoveRecord(second, 0, 'O')]


def test_clear_and_remove(store):
    seq = store.append(4, 'X')
    store.append(0, 'O')
    store.remove(seq)
    assert [r.mark for r in store.read_all()] == ['O']
    store.clear()
    assert store.read_all() == []


def test_sequence_ids_are_not_reused(store):
    seq = store.append(4, 'X')
    store.clear()
    assert store.append(4, 'X') > seq


def test_two_connections_share_the_log(store, store_path):
    other = MoveStore(store_path)
    try:
        store.append(2, 'X')
        assert [(r.index, r.mark) for r in other.read_all()] == [(2, 'X')]
        other.clear()
        assert store.read_all() == []
    finally:
        other.close()


def test_unreachable_store(tmp_path):
    with pytest.raises(StoreError):
        MoveStore(str(tmp_path / "missing" / "dir" / "moves.db"))


def test_closed_store_raises(store_path):
    s = MoveStore(store_path)
    s.close()
    with pytest.raises(StoreError):
        s.read_all()
