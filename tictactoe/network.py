import logging

from PySide6.QtCore import QObject, QTimer, Signal, Slot

from .game_logic import CELL_COUNT, MARKS
from .store import StoreError

logger = logging.getLogger(__name__)


class SyncChannel:
    """
    shares single moves between two sessions through the move store

    only one unconsumed record is expected at a time: play alternates and
    both sides poll faster than anyone can move twice
    """

    def __init__(self, store, deliver):
        self.store = store
        self.deliver = deliver        # callable(index, mark) on the local side
        self.last_mark = None         # mark most recently applied here
        self.last_seq = None          # seq of the last consumed record

    def publish(self, index, mark):
        """
        append a locally applied move; false if the store is down
        """
        self.last_mark = mark
        try:
            self.store.append(index, mark)
        except StoreError as e:
            logger.error("could not publish %s@%s: %s", mark, index, e)
            return False
        logger.debug("published %s@%s", mark, index)
        return True

    def poll(self):
        """
        one tick: hand the newest remote record to deliver()
        returns (index, mark) when a move went out, else None
        """
        try:
            records = self.store.read_all()
        except StoreError as e:
            logger.warning("poll skipped: %s", e)
            return None
        if not records:
            return None

        rec = records[-1]
        if rec.mark == self.last_mark or rec.seq == self.last_seq:
            return None  # our own echo, left for the other side

        if rec.mark not in MARKS or not isinstance(rec.index, int) \
           or not 0 <= rec.index < CELL_COUNT:
            logger.warning("discarding malformed record %s", rec)
            try:
                self.store.remove(rec.seq)
            except StoreError as e:
                logger.warning("could not discard record %s: %s", rec.seq, e)
            return None

        logger.debug("remote move %s@%s (seq %s)", rec.mark, rec.index, rec.seq)
        self.last_mark, self.last_seq = rec.mark, rec.seq
        self.deliver(rec.index, rec.mark)
        try:
            self.store.clear()
        except StoreError as e:
            logger.warning("consumed record %s not cleared: %s", rec.seq, e)
        return rec.index, rec.mark

    def reset_channel(self):
        """
        empty log for a new game
        """
        self.last_mark = self.last_seq = None
        try:
            self.store.clear()
        except StoreError as e:
            logger.error("could not reset move log: %s", e)
            return False
        return True


class SyncWorker(QObject):
    """
    qt worker: polls the channel on a timer inside its own thread
    """
    move_received = Signal(int, str)
    status_update = Signal(str)
    error_occurred = Signal(str)

    def __init__(self, store, interval_ms=1000):
        super().__init__()
        self.channel = SyncChannel(store, self.move_received.emit)
        self.interval_ms = interval_ms
        self.timer = None
        self._running = False

    @Slot()
    def start(self):
        """
        begin polling; call from the worker thread (QThread.started)
        """
        if self._running: return
        self._running = True
        self.timer = QTimer(self)
        self.timer.setInterval(self.interval_ms)
        self.timer.timeout.connect(self.poll)
        self.timer.start()
        self.status_update.emit("waiting for opponent moves...")
        self.poll()  # first tick right away

    @Slot()
    def poll(self):
        if not self._running:
            if self.timer: self.timer.stop()
            return
        try:
            self.channel.poll()
        except Exception as e:
            # a broken tick must not kill the timer
            logger.exception("poll tick failed")
            self.error_occurred.emit(f"sync error: {e}")

    @Slot(int, str)
    def publish(self, index, mark):
        if not self.channel.publish(index, mark):
            self.error_occurred.emit("could not send move, store unavailable")

    @Slot()
    def reset_channel(self):
        if not self.channel.reset_channel():
            self.error_occurred.emit("could not reset shared move log")

    @Slot()
    def stop(self):
        """
        stop polling; the timer halts on its next tick
        """
        self._running = False
