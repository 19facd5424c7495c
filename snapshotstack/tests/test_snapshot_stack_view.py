import os
import sys
import pytest

# Headless Qt for widgets
os.environ['QT_QPA_PLATFORM'] = 'offscreen'
from PySide6.QtCore import QRectF
from PySide6.QtGui import QColor, QImage
from PySide6.QtWidgets import QApplication

from snapshotstack.models.stack_geometry import Rect
from snapshotstack.services.stack_paint import SnapshotStyle, paint_stack
from snapshotstack.views.snapshot_stack_view import SnapshotStackView

_app = QApplication.instance() or QApplication(sys.argv)


def solid_image(width, height, color="red"):
    image = QImage(width, height, QImage.Format_ARGB32)
    image.fill(QColor(color))
    return image


class RecordingSink:
    """Stands in for the painter; remembers what it was asked to draw."""
    def __init__(self):
        self.calls = []

    def draw_snapshot(self, placement, style, image):
        self.calls.append((placement, image))


@pytest.fixture
def view():
    v = SnapshotStackView(style=SnapshotStyle(shadow_blur=0, shadow_offset=(0.0, 0.0)))
    v.resize(300, 300)
    v.image = solid_image(600, 400)
    return v


def test_image_frame_is_top_placement(view):
    frame = view.imageFrame
    assert frame.width() == pytest.approx(280.0)
    assert frame.height() == pytest.approx(280.0 / 1.5)
    assert frame.center().x() == pytest.approx(150.0)
    assert frame.center().y() == pytest.approx(150.0)


def test_stack_switch_changes_layer_count(view):
    assert len(view.layout_placements()) == 1
    view.displayAsStack = True
    placements = view.layout_placements()
    assert len(placements) == 3
    assert placements[-1].angle == 0.0


def test_stack_angles_property(view):
    view.displayAsStack = True
    view.stackAngles = [-6, 2, -3]
    assert view.stackAngles == [-6.0, 2.0, -3.0]
    assert [p.angle for p in view.layout_placements()] == [-6.0, 2.0, -3.0, 0.0]


def test_configuration_reads_current_properties(view):
    view.strokeWidth = 4
    view.displayAsStack = True
    cfg = view.stack_configuration()
    assert cfg.frame == Rect(0.0, 0.0, 300.0, 300.0)
    assert cfg.image_aspect == pytest.approx(1.5)
    assert cfg.stroke_width == 4.0
    assert cfg.display_as_stack is True


def test_setters_signal_only_on_change(view):
    seen = []
    view.displayAsStackChanged.connect(seen.append)
    view.strokeWidthChanged.connect(seen.append)
    view.strokeColorChanged.connect(lambda c: seen.append(c.name()))

    view.displayAsStack = True
    view.displayAsStack = True
    view.strokeWidth = 12
    view.strokeWidth = 12.0
    view.strokeColor = QColor("#FFFFFF")      # already the default matte colour
    view.strokeColor = "#FFEEDD"
    assert seen == [True, 12.0, "#ffeedd"]


def test_invalid_frame_skips_layout(view):
    view.setContentsMargins(150, 150, 150, 150)
    assert view.layout_placements() == ()
    assert view.imageFrame == QRectF()
    # painting an empty frame must not raise
    view.repaint()


def test_missing_image_lays_out_square():
    v = SnapshotStackView()
    v.resize(200, 100)
    frame = v.imageFrame
    assert frame.width() == pytest.approx(frame.height())


def test_paint_stack_hands_image_to_top_only(view):
    view.displayAsStack = True
    sink = RecordingSink()
    drawn = paint_stack(sink, view.layout_placements(), view.snapshot_style(), view.image)
    assert drawn == 3
    assert [img is None for _, img in sink.calls] == [True, True, False]
    assert [p.index for p, _ in sink.calls] == [0, 1, 2]


def test_widget_grab_renders(view):
    view.displayAsStack = True
    pixmap = view.grab()
    assert pixmap.width() == 300
    image = pixmap.toImage()
    assert image.pixelColor(150, 150).name() == "#ff0000"
