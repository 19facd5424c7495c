# snapshotstack/services/stack_paint.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Optional, Protocol, Tuple

from PySide6.QtCore import Qt, QRectF
from PySide6.QtGui import QColor, QImage, QPainter, QPen

from snapshotstack import config
from snapshotstack.models.stack_geometry import LayerPlacement
from snapshotstack.utils.rotation_helpers import rotated_paint


def qcolor(value) -> QColor:
    """Accept a QColor or any string QColor understands ("#AARRGGBB", "white")."""
    color = QColor(value)
    if not color.isValid():
        raise ValueError(f"Invalid colour: {value!r}")
    return color


@dataclass(frozen=True)
class SnapshotStyle:
    stroke_color: QColor = field(default_factory=lambda: qcolor(config.STROKE_COLOR))
    stroke_width: float = config.DEFAULT_STROKE_WIDTH
    outline_color: QColor = field(default_factory=lambda: qcolor(config.OUTLINE_COLOR))
    underlay_color: QColor = field(default_factory=lambda: qcolor(config.UNDERLAY_COLOR))
    shadow_color: QColor = field(default_factory=lambda: qcolor(config.SHADOW_COLOR))
    shadow_offset: Tuple[float, float] = config.SHADOW_OFFSET
    shadow_blur: int = config.SHADOW_BLUR
    shadow_alpha: int = config.SHADOW_ALPHA

    @property
    def shadow_margin(self) -> float:
        """Border the drop shadow needs outside the matte."""
        dx, dy = self.shadow_offset
        return float(self.shadow_blur) + max(abs(dx), abs(dy))


class RenderSink(Protocol):
    def draw_snapshot(
        self,
        placement: LayerPlacement,
        style: SnapshotStyle,
        image: Optional[QImage],
    ) -> None:
        ...


class QPainterSink:
    """Draws snapshots with a QPainter: shadow, matte, then image or underlay."""

    def __init__(self, painter: QPainter):
        self.painter = painter
        painter.setRenderHint(QPainter.Antialiasing, True)
        painter.setRenderHint(QPainter.SmoothPixmapTransform, True)

    def draw_snapshot(self, placement: LayerPlacement, style: SnapshotStyle, image: Optional[QImage]) -> None:
        matte = placement.matte_rect.to_qrectf()
        with rotated_paint(self.painter, matte, placement.angle):
            self._draw_shadow(matte, style)
            self._draw_matte(matte, style)
            target = placement.draw_rect.to_qrectf()
            if image is None or image.isNull():
                self.painter.fillRect(target, style.underlay_color)
            else:
                self.painter.drawImage(target, image, QRectF(image.rect()))

    def _draw_shadow(self, matte: QRectF, style: SnapshotStyle) -> None:
        steps = max(0, int(style.shadow_blur))
        dx, dy = style.shadow_offset
        base = matte.translated(dx, dy)
        color = QColor(style.shadow_color)
        # rings overlap, so each one carries a share of the final alpha
        color.setAlpha(max(1, style.shadow_alpha // (steps + 1)))
        self.painter.setPen(Qt.NoPen)
        self.painter.setBrush(color)
        for i in range(steps, -1, -1):
            self.painter.drawRect(base.adjusted(-i, -i, i, i))

    def _draw_matte(self, matte: QRectF, style: SnapshotStyle) -> None:
        pen = QPen(style.outline_color)
        pen.setWidthF(1.0)
        pen.setCosmetic(True)
        self.painter.setPen(pen)
        self.painter.setBrush(style.stroke_color)
        self.painter.drawRect(matte)


def paint_stack(
    sink: RenderSink,
    placements: Iterable[LayerPlacement],
    style: SnapshotStyle,
    image: Optional[QImage],
) -> int:
    """Issue one draw per placement, bottom first; only the top layer gets ``image``."""
    count = 0
    for placement in placements:
        sink.draw_snapshot(placement, style, image if placement.is_top else None)
        count += 1
    return count
