from typing import Sequence, Tuple

from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QColor, QPainter, QPainterPath

from chipview.backends.base import Color, Surface
from chipview.layout.transform import Rectangle


def _qcolor(color: Color) -> QColor:
    return QColor.fromRgbF(*color)


class QtSurface(Surface):
    """Surface drawing through an active QPainter (widget or QImage)."""

    def __init__(self, painter: QPainter):
        self.painter = painter
        self.painter.setPen(Qt.NoPen)

    def fill_rounded_rect(self, bounds: Rectangle, corner_radius: float,
                          color: Color) -> None:
        self.painter.setBrush(_qcolor(color))
        self.painter.drawRoundedRect(
            QRectF(bounds.x, bounds.y, bounds.width, bounds.height),
            corner_radius, corner_radius,
        )

    def fill_rect(self, bounds: Rectangle, color: Color) -> None:
        self.painter.fillRect(QRectF(bounds.x, bounds.y, bounds.width, bounds.height),
                              _qcolor(color))

    def fill_path(self, vertices: Sequence[Tuple[float, float]],
                  color: Color) -> None:
        path = QPainterPath()
        first, *rest = vertices
        path.moveTo(QPointF(*first))
        for x, y in rest:
            path.lineTo(QPointF(x, y))
        path.closeSubpath()
        self.painter.fillPath(path, _qcolor(color))
