# snapshotstack/utils/rotation_helpers.py
from __future__ import annotations
from contextlib import contextmanager

from PySide6.QtCore import QPointF, QRectF
from PySide6.QtGui import QTransform, QPainter

from snapshotstack.models.stack_geometry import Rect

_ZERO_ANGLE = 1e-7


def _as_qrectf(rect) -> QRectF:
    return rect.to_qrectf() if isinstance(rect, Rect) else QRectF(rect)


def rotation_transform(rect, degrees: float) -> QTransform:
    """Transform that rotates by ``degrees`` (clockwise in Qt's y-down space) about the rect's centre."""
    t = QTransform()
    if abs(degrees) < _ZERO_ANGLE:
        return t
    pivot = QPointF(_as_qrectf(rect).center())
    t.translate(pivot.x(), pivot.y())
    t.rotate(degrees)
    t.translate(-pivot.x(), -pivot.y())
    return t


def rotated_bounding_rect(rect, degrees: float) -> QRectF:
    r = _as_qrectf(rect)
    return rotation_transform(r, degrees).mapRect(r)


@contextmanager
def rotated_paint(painter: QPainter, rect, degrees: float):
    """
    Paint unrotated content inside the block; it lands rotated about the
    rect's centre:

    with rotated_paint(painter, placement.matte_rect, placement.angle):
        painter.drawRect(...)
    """
    painter.save()
    if abs(degrees) >= _ZERO_ANGLE:
        painter.setWorldTransform(rotation_transform(rect, degrees), True)
    try:
        yield
    finally:
        painter.restore()
