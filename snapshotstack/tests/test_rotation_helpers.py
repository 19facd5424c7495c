import os
import sys
import pytest

# Offscreen platform for Qt
os.environ['QT_QPA_PLATFORM'] = 'offscreen'
from PySide6.QtCore import QRectF
from PySide6.QtGui import QImage, QPainter, QTransform
from PySide6.QtWidgets import QApplication

from snapshotstack.models.stack_geometry import Rect, StackConfiguration, compute_layout
from snapshotstack.utils.rotation_helpers import rotated_bounding_rect, rotated_paint, rotation_transform

app = QApplication.instance() or QApplication(sys.argv)


def test_zero_angle_is_identity():
    assert rotation_transform(QRectF(0, 0, 10, 20), 0.0) == QTransform()


def test_rotation_keeps_centre_fixed():
    rect = QRectF(10, 20, 100, 60)
    t = rotation_transform(rect, 33.0)
    centre = t.map(rect.center())
    assert centre.x() == pytest.approx(rect.center().x())
    assert centre.y() == pytest.approx(rect.center().y())


@pytest.mark.parametrize("angle", [-45.0, -4.0, 3.0, 20.0, 90.0])
def test_layout_bounding_sizes_match_qt(angle):
    cfg = StackConfiguration.from_size(300, 240, 1.5, stroke_width=10,
                                       display_as_stack=True, stack_angles=(angle,))
    for p in compute_layout(cfg):
        qt_rect = rotated_bounding_rect(p.matte_rect, p.angle)
        assert qt_rect.width() == pytest.approx(p.position.bounding_rect_size.width, abs=1e-6)
        assert qt_rect.height() == pytest.approx(p.position.bounding_rect_size.height, abs=1e-6)
        assert QRectF(0, 0, 300, 240).adjusted(-1e-6, -1e-6, 1e-6, 1e-6).contains(qt_rect)


def test_rotated_paint_restores_painter_state():
    image = QImage(50, 50, QImage.Format_ARGB32)
    painter = QPainter(image)
    try:
        before = painter.worldTransform()
        with rotated_paint(painter, Rect(0, 0, 50, 50), 12.0):
            assert painter.worldTransform() != before
        assert painter.worldTransform() == before
    finally:
        painter.end()
