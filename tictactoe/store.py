"""
shared move log backed by sqlite; both players point at the same file
"""
import logging
import sqlite3
import threading
from typing import NamedTuple

logger = logging.getLogger(__name__)

SCHEMA = """
CREATE TABLE IF NOT EXISTS moves (
    seq  INTEGER PRIMARY KEY AUTOINCREMENT,
    cell INTEGER NOT NULL,
    sign TEXT NOT NULL
)
"""


class StoreError(RuntimeError):
    """
    store unreachable or query failed
    """


class MoveRecord(NamedTuple):
    seq: int
    index: int
    mark: str


class MoveStore:
    """
    append/read/clear over the moves table
    """

    def __init__(self, path, timeout=5.0):
        self.path = path
        self._lock = threading.Lock()
        try:
            # poller thread and gui thread share this connection
            self.conn = sqlite3.connect(path, timeout=timeout, check_same_thread=False)
            with self.conn:
                self.conn.execute(SCHEMA)
        except sqlite3.Error as e:
            raise StoreError(f"cannot open move store {path}: {e}") from e
        logger.debug("move store ready at %s", path)

    def _execute(self, query, params=()):
        with self._lock:
            try:
                with self.conn:
                    cur = self.conn.execute(query, params)
                    return cur.lastrowid, cur.fetchall()
            except sqlite3.Error as e:
                raise StoreError(f"move store query failed: {e}") from e

    def append(self, index, mark):
        seq, _ = self._execute("INSERT INTO moves (cell, sign) VALUES (?, ?)", (index, mark))
        return seq

    def read_all(self):
        """
        every record, oldest first
        """
        _, rows = self._execute("SELECT seq, cell, sign FROM moves ORDER BY seq")
        return [MoveRecord(*row) for row in rows]

    def remove(self, seq):
        self._execute("DELETE FROM moves WHERE seq = ?", (seq,))

    def clear(self):
        self._execute("DELETE FROM moves")

    def close(self):
        with self._lock:
            self.conn.close()
