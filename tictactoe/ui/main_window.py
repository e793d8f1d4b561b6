import logging

from ..config import AI_MARK, FIRST_MARK, HUMAN_MARK, POLL_INTERVAL_MS, STORE_PATH
from ..game_logic import DRAW, MARKS, WON, other, winning_line
from ..network import SyncWorker
from ..session import GameSession, Scoreboard
from ..store import MoveStore, StoreError
from ..ui.board_widget import BoardWidget

from PySide6.QtWidgets import (
    QMainWindow, QWidget, QVBoxLayout, QHBoxLayout,
    QPushButton, QLabel, QMenuBar, QMenu, QComboBox,
    QRadioButton, QGroupBox, QMessageBox, QSizePolicy
)
from PySide6.QtGui import QAction, QFont
from PySide6.QtCore import Qt, QThread, Signal, Slot

logger = logging.getLogger(__name__)


class TicTacToeWindow(QMainWindow):
    """
    lobby + board window; the only place that talks to the core
    """
    publish_requested = Signal(int, str)     # queued into the sync thread
    channel_reset_requested = Signal()

    def __init__(self, store_path=STORE_PATH, poll_ms=POLL_INTERVAL_MS):
        """
        init state, ui widgets, signals
        """
        super().__init__()
        self.store_path = store_path; self.poll_ms = poll_ms
        # tallies survive every new game in this window
        self.scoreboard = Scoreboard()
        self.session = GameSession(self.scoreboard, first_mark=FIRST_MARK)
        self.board_widget = BoardWidget(parent=self)
        # sync thread + worker placeholders
        self.sync_thread = None; self.sync_worker = None; self.store = None
        self.game_mode = "local"; self.my_mark = FIRST_MARK

        self._setup_ui()
        self._render(self.session.reset())

    def _setup_ui(self):
        '''window look + layout'''
        self.setStyleSheet("QMainWindow { background-color: #222; }")
        self.central_widget = QWidget()
        self.setCentralWidget(self.central_widget)
        self.main_layout = QVBoxLayout(self.central_widget)

        self._create_menu_bar()            # top menu
        self._create_mode_controls()       # lobby
        self.main_layout.addWidget(self.mode_group)
        self.main_layout.addWidget(self.board_widget, 1)
        self.board_widget.cell_clicked.connect(self._on_cell_clicked)

        self._create_bottom_controls()     # status + score + reset
        self.main_layout.addWidget(self.controls_bottom_widget)

    def _create_menu_bar(self):
        '''game menu actions'''
        menu_bar = QMenuBar()
        game_menu = QMenu("Game", self)
        self.new_action = QAction("New Game", self)
        self.new_action.triggered.connect(self.new_game)
        quit_action = QAction("Quit", self)
        quit_action.triggered.connect(self.close)
        game_menu.addAction(self.new_action)
        game_menu.addSeparator(); game_menu.addAction(quit_action)
        menu_bar.addMenu(game_menu)
        self.setMenuBar(menu_bar)

    def _create_mode_controls(self):
        '''choose a game mode'''
        self.mode_group = QGroupBox("Choose a game mode")
        layout = QHBoxLayout()
        self.mode_radios = {
            "local": QRadioButton("Human"),
            "computer": QRadioButton("Computer"),
            "online": QRadioButton("Online"),
        }
        self.mode_radios["local"].setChecked(True)
        for radio in self.mode_radios.values():
            layout.addWidget(radio)
        layout.addWidget(QLabel("Your sign:"))
        self.mark_input = QComboBox()
        self.mark_input.addItems(list(MARKS))
        layout.addWidget(self.mark_input)
        # the computer game fixes the signs
        self.mode_radios["computer"].toggled.connect(lambda on: self.mark_input.setEnabled(not on))
        layout.addStretch()
        self.start_button = QPushButton("Start")
        self.start_button.clicked.connect(self._start_selected_mode)
        layout.addWidget(self.start_button, alignment=Qt.AlignRight)
        self.mode_group.setLayout(layout)

    def _create_bottom_controls(self):
        # status + score + reset
        self.controls_bottom_widget = QWidget()
        hl = QHBoxLayout(self.controls_bottom_widget)
        self.message_label = QLabel("")
        f = QFont(); f.setPointSize(12); self.message_label.setFont(f)
        self.message_label.setAlignment(Qt.AlignLeft | Qt.AlignVCenter)
        self.message_label.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Preferred)
        self.message_label.setWordWrap(True)
        self.score_label = QLabel("")
        self.reset_button = QPushButton("Reset"); self.reset_button.clicked.connect(self.new_game)
        for w in (self.message_label, None, self.score_label, self.reset_button):
            if w: hl.addWidget(w)
            else: hl.addStretch(1)

    @Slot(str)
    def _update_message(self, text, is_error=False,
                         is_success=False, is_turn=False):
        # set message text + style
        style = "color: #eee;"
        if is_error:   style = "color: #ff8a8a; font-weight: bold;"
        elif is_success: style = "color: lime; font-weight: bold;"
        elif is_turn:    style = "color: #8acaff; font-weight: bold;"
        self.message_label.setStyleSheet(style)
        self.message_label.setText(text)

    def _selected_mode(self):
        return next(m for m, radio in self.mode_radios.items() if radio.isChecked())

    def _online_in_progress(self):
        return self.game_mode == "online" and not self.session.outcome.is_over

    @Slot()
    def _start_selected_mode(self):
        # new session for the chosen mode, scoreboard carried over
        mode = self._selected_mode()
        # restarting online would empty the log under the running game
        if mode == "online" and self._online_in_progress():
            self._update_message("finish the current online game first", is_error=True)
            return
        self._stop_sync_worker()
        if mode == "online" and not self._start_sync_worker():
            mode = "local"
            self.mode_radios["local"].setChecked(True)
        self.game_mode = mode
        if mode == "computer":
            self.my_mark = HUMAN_MARK
            self.session = GameSession(self.scoreboard, first_mark=FIRST_MARK, ai_mark=AI_MARK)
        else:
            self.my_mark = self.mark_input.currentText()
            self.session = GameSession(self.scoreboard, first_mark=FIRST_MARK)
        logger.info("starting %s game", mode)
        self._render(self.session.reset())

    def _start_sync_worker(self):
        # open the shared store, then thread + worker + signals
        try:
            self.store = MoveStore(self.store_path)
        except StoreError as e:
            QMessageBox.critical(self, "Online Error", str(e))
            return False
        self.sync_thread = QThread(self)
        self.sync_worker = SyncWorker(self.store, self.poll_ms)
        self.sync_worker.moveToThread(self.sync_thread)
        self.sync_worker.move_received.connect(self._on_move_received)
        self.sync_worker.status_update.connect(self._update_message)
        self.sync_worker.error_occurred.connect(self._on_sync_error)
        self.publish_requested.connect(self.sync_worker.publish)
        self.channel_reset_requested.connect(self.sync_worker.reset_channel)
        self.sync_thread.started.connect(self.sync_worker.reset_channel)
        self.sync_thread.started.connect(self.sync_worker.start)
        self.sync_thread.finished.connect(self.sync_worker.deleteLater)
        self.sync_thread.start()
        return True

    def _stop_sync_worker(self):
        # stop polling, join thread, close store
        if self.sync_worker:
            self.publish_requested.disconnect(self.sync_worker.publish)
            self.channel_reset_requested.disconnect(self.sync_worker.reset_channel)
            self.sync_worker.stop()
        if self.sync_thread and self.sync_thread.isRunning():
            self.sync_thread.quit()
            if not self.sync_thread.wait(2000):
                logger.warning("sync thread did not stop in time")
        if self.store:
            self.store.close()
        self.sync_thread = None; self.sync_worker = None; self.store = None

    @Slot(str)
    def _on_sync_error(self, err):
        # transient; the move just shows up later
        logger.warning(err)
        self._update_message(err, is_error=True)

    def _render(self, result):
        """
        paint whatever the core handed back
        """
        self.board_widget.set_board(result.board, winning_line(result.board))
        online = self.game_mode == "online"
        # online: clicks only on our turn, or on a finished board to restart
        self.board_widget.set_accept_clicks(
            not online or result.outcome.is_over or result.turn == self.my_mark)
        running = online and not result.outcome.is_over
        self.reset_button.setEnabled(not running); self.new_action.setEnabled(not running)
        x_wins, o_wins, draws = result.score
        self.score_label.setText(f"X: {x_wins}   O: {o_wins}   draws: {draws}")
        who = f"You are {self.my_mark}" if self.game_mode == "online" else self.game_mode.title()
        self.setWindowTitle(f"Tic-Tac-Toe | {who} | X won {x_wins}, O won {o_wins}")

        if result.outcome.status == WON:
            mark = result.outcome.mark
            ok = self.game_mode == "local" or mark == self.my_mark
            self._update_message(f"{mark} has won, click to reset", is_success=ok, is_error=not ok)
        elif result.outcome.status == DRAW:
            self._update_message("draw, click to reset", is_success=True)
        elif self.game_mode == "online" and result.turn != self.my_mark:
            self._update_message(f"waiting for opponent ('{other(self.my_mark)}') move...")
        else:
            self._update_message(f"player {result.turn}'s turn", is_turn=True)

    @Slot(int)
    def _on_cell_clicked(self, index):
        # click on a finished board starts the next one
        if self.session.is_terminal():
            self.new_game()
            return

        if self.game_mode == "online":
            res = self.session.apply_move(index, self.my_mark)
            if res.accepted:
                self.publish_requested.emit(index, self.my_mark)
        else:
            res = self.session.apply_move(index, self.session.turn)

        if not res.accepted:
            self._update_message("cell taken", is_error=True)
            return
        self._render(res)

    @Slot(int, str)
    def _on_move_received(self, index, mark):
        # opponent move, delivered on the gui thread
        if self.game_mode != "online" or mark == self.my_mark: return
        res = self.session.apply_move(index, mark)
        if not res.accepted:
            logger.warning("remote move %s@%s rejected on board %s", mark, index, res.board)
            return
        self._render(res)

    @Slot()
    def new_game(self):
        # online boards only restart together, once the game is decided
        online = self.game_mode == "online"
        res = self.session.reset(only_if_over=online)
        if not res.accepted:
            self._update_message("finish the current online game first", is_error=True)
            return
        if online:
            self.channel_reset_requested.emit()
        self._render(res)

    def closeEvent(self, event):
        # ensure cleanup on close
        self._stop_sync_worker()
        event.accept()
