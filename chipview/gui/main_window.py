import sys
from pathlib import Path
from typing import Optional

from PyQt5.QtCore import QTimer, pyqtSignal
from PyQt5.QtGui import QPainter
from PyQt5.QtWidgets import (QApplication, QFileDialog, QLabel, QMainWindow,
                             QPushButton, QVBoxLayout, QWidget)

from chipview.config import ViewerConfig
from chipview.coordinator import OutcomeStatus, ParseOutcome
from chipview.gui.surface import QtSurface
from chipview.layout.transform import Rectangle
from chipview.logging import logger
from chipview.viewer import Frame, Viewer

LAYOUT_FILTER = 'Layout files (*.gds *.oas);;All files (*)'


class LayoutWidget(QWidget):
    """
    Paints the viewer into the widget area.

    A timer polls the coordinator and repaints whenever the outcome differs
    from the one last painted. Outcomes compare by status, path, error
    message and database identity, so a second file finishing as READY
    after the first one still triggers a repaint.
    """

    outcomeChanged = pyqtSignal(object)

    def __init__(self, viewer: Viewer, parent: Optional[QWidget] = None):
        super().__init__(parent)
        self.viewer = viewer
        self.setMinimumSize(420, 420)
        self.frame: Optional[Frame] = None
        self._shown: Optional[ParseOutcome] = None

        # The parse runs on a worker thread; poll instead of blocking
        self._poll_timer = QTimer(self)
        self._poll_timer.setInterval(viewer.config.poll_interval_ms)
        self._poll_timer.timeout.connect(self.refresh)
        self._poll_timer.start()

    def refresh(self) -> bool:
        """Schedule a repaint if the outcome changed. Returns True if it did."""
        outcome = self.viewer.coordinator.poll()
        if outcome == self._shown:
            return False
        self._shown = outcome
        self.outcomeChanged.emit(outcome)
        self.update()
        return True

    def paintEvent(self, event):
        painter = QPainter(self)
        painter.setRenderHint(QPainter.Antialiasing)
        try:
            viewport = Rectangle(0.0, 0.0, float(self.width()), float(self.height()))
            self.frame = self.viewer.draw(viewport, QtSurface(painter))
        finally:
            painter.end()
        if self.frame.outcome != self._shown:
            self._shown = self.frame.outcome
            self.outcomeChanged.emit(self.frame.outcome)


def status_text(outcome: ParseOutcome) -> str:
    if outcome.status is OutcomeStatus.NOT_STARTED:
        return 'No layout loaded'
    if outcome.status is OutcomeStatus.PENDING:
        return f'Parsing {outcome.path.name}...'
    if outcome.status is OutcomeStatus.READY:
        return f'{outcome.path.name}: {outcome.database.shape_count()} shapes'
    return f'Error: {outcome.error}'


class ViewerWindow(QMainWindow):
    """Main window: open button, status line and the layout viewport."""

    def __init__(self, viewer: Viewer):
        super().__init__()
        self.viewer = viewer
        self.setWindowTitle('chipview')

        # Set the central widget and the general layout
        self.generalLayout = QVBoxLayout()
        self._centralWidget = QWidget(self)
        self.setCentralWidget(self._centralWidget)
        self._centralWidget.setLayout(self.generalLayout)

        self.openButton = QPushButton('Open layout...')
        self.openButton.clicked.connect(self._choose_file)
        self.generalLayout.addWidget(self.openButton)

        self.layoutWidget = LayoutWidget(viewer)
        self.generalLayout.addWidget(self.layoutWidget, stretch=1)

        self.statusLabel = QLabel()
        self.generalLayout.addWidget(self.statusLabel)

        self.layoutWidget.outcomeChanged.connect(self._show_status)
        self.layoutWidget.refresh()

    def open(self, path: str | Path) -> None:
        self.viewer.open(path)
        self.layoutWidget.refresh()

    def _choose_file(self):
        path, _ = QFileDialog.getOpenFileName(self, 'Open layout', '', LAYOUT_FILTER)
        if path:
            self.open(path)

    def _show_status(self, outcome: ParseOutcome):
        self.statusLabel.setText(status_text(outcome))


def run(path: Optional[str | Path] = None, config: Optional[ViewerConfig] = None) -> int:
    """Show the viewer window, optionally opening *path*. Returns the exit code."""
    app = QApplication.instance() or QApplication(sys.argv)
    window = ViewerWindow(Viewer(config=config))
    if path is not None:
        window.open(path)
    window.show()
    logger.debug('Entering Qt event loop')
    return app.exec_()
