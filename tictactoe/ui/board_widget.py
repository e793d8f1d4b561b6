from PySide6.QtWidgets import QWidget, QSizePolicy
from PySide6.QtCore import Qt, QSize, Signal, QPointF
from PySide6.QtGui import QPainter, QColor, QPen

from ..game_logic import BOARD_SIZE, BoardState, FIRST

X_COLOR = "#8acaff"
O_COLOR = "#ff8a8a"


class BoardWidget(QWidget):
    """
    draws a BoardState and turns clicks into cell indices
    """
    cell_clicked = Signal(int)  # emits 0-8 on click

    def __init__(self, parent=None):
        super().__init__(parent)
        self.board = BoardState.empty()   # last board handed in by the window
        self.highlight = None             # winning line, if any
        self.setSizePolicy(QSizePolicy.Ignored, QSizePolicy.Ignored)
        self.setMinimumSize(QSize(150, 150))
        self._accept_clicks = True      # toggle click handling

    def set_board(self, board, highlight=None):
        self.board = board; self.highlight = highlight
        self.update()

    def set_accept_clicks(self, accept):
        # enable/disable user input
        self._accept_clicks = accept

    def heightForWidth(self, width):
        # keep square shape
        return width

    def hasHeightForWidth(self):
        return True

    def _geometry(self):
        # square board centred in the widget
        w, h = self.width(), self.height()
        side = min(w, h)
        return (w - side) / 2, (h - side) / 2, side, side / BOARD_SIZE

    def paintEvent(self, event):
        """
        draw grid, X/O marks, and the winning line
        """
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing, True)
        ox, oy, side, cell = self._geometry()
        painter.fillRect(self.rect(), QColor("#333"))
        # grid lines
        painter.setPen(QPen(QColor("#555"), 2))
        for i in range(1, BOARD_SIZE):
            x = ox + i*cell
            painter.drawLine(int(x), int(oy), int(x), int(oy+side))
            y = oy + i*cell
            painter.drawLine(int(ox), int(y), int(ox+side), int(y))
        # marks
        rad = cell/2 * 0.7
        for index, sym in enumerate(self.board):
            if not sym: continue
            cx, cy = self._center(index)
            if sym == FIRST:
                painter.setPen(QPen(QColor(X_COLOR), 4))
                painter.drawLine(QPointF(cx-rad, cy-rad), QPointF(cx+rad, cy+rad))
                painter.drawLine(QPointF(cx+rad, cy-rad), QPointF(cx-rad, cy+rad))
            else:
                painter.setPen(QPen(QColor(O_COLOR), 4))
                painter.drawEllipse(QPointF(cx, cy), rad, rad)
        # strike through the winning line
        if self.highlight:
            win = self.board[self.highlight[0]]
            color = QColor(X_COLOR) if win == FIRST else QColor(O_COLOR)
            painter.setPen(QPen(color, 10, Qt.SolidLine, Qt.RoundCap, Qt.RoundJoin))
            start, end = self._center(self.highlight[0]), self._center(self.highlight[-1])
            painter.drawLine(QPointF(*start), QPointF(*end))
        painter.end()

    def _center(self, index):
        ox, oy, _, cell = self._geometry()
        r, c = divmod(index, BOARD_SIZE)
        return ox + c*cell + cell/2, oy + r*cell + cell/2

    def mouseReleaseEvent(self, event):
        """
        map click coords to a cell index and emit
        """
        if not self._accept_clicks:
            return
        ox, oy, side, cell = self._geometry()
        x, y = event.position().x(), event.position().y()
        # only inside grid
        if cell <= 0 or not (ox <= x < ox+side and oy <= y < oy+side):
            return
        col = min(int((x-ox)//cell), BOARD_SIZE-1)
        row = min(int((y-oy)//cell), BOARD_SIZE-1)
        self.cell_clicked.emit(row*BOARD_SIZE + col)  # notify main window
