# snapshotstack/views/snapshot_stack_view.py
from __future__ import annotations

import logging
from dataclasses import replace
from typing import Optional, Tuple

from PySide6.QtCore import Property, QRectF, QSize, Signal
from PySide6.QtGui import QColor, QImage, QPainter
from PySide6.QtWidgets import QSizePolicy, QWidget

from snapshotstack import config
from snapshotstack.models.stack_geometry import (
    InvalidConfiguration,
    LayerPlacement,
    Rect,
    StackConfiguration,
    compute_layout,
    top_placement,
)
from snapshotstack.services.stack_paint import QPainterSink, SnapshotStyle, paint_stack, qcolor

logger = logging.getLogger(__name__)


class SnapshotStackView(QWidget):
    """
    Shows an image inside a matte with a drop shadow, optionally on top of a
    stack of rotated snapshots.

    Properties are read fresh on every paint; nothing about the layout is kept
    between passes.
    """
    displayAsStackChanged = Signal(bool)
    imageChanged = Signal(QImage)
    strokeColorChanged = Signal(QColor)
    strokeWidthChanged = Signal(float)
    stackAnglesChanged = Signal(object)

    def __init__(self, parent: Optional[QWidget] = None, style: Optional[SnapshotStyle] = None):
        super().__init__(parent)
        self._style = style or SnapshotStyle()
        self._display_as_stack = False
        self._image = QImage()
        self._stack_angles: Tuple[float, ...] = config.DEFAULT_STACK_ANGLES
        self.setSizePolicy(QSizePolicy.Expanding, QSizePolicy.Expanding)

    def sizeHint(self) -> QSize:
        return QSize(300, 300)

    # ---- Properties ----
    @Property(bool, notify=displayAsStackChanged)
    def displayAsStack(self):
        return self._display_as_stack

    @displayAsStack.setter
    def displayAsStack(self, value):
        value = bool(value)
        if value == self._display_as_stack:
            return
        self._display_as_stack = value
        self.displayAsStackChanged.emit(value)
        self.update()

    @Property(QImage, notify=imageChanged)
    def image(self):
        return self._image

    @image.setter
    def image(self, new):
        new = QImage(new) if new is not None else QImage()
        if new == self._image:
            return
        self._image = new
        self.imageChanged.emit(new)
        self.update()

    @Property(QColor, notify=strokeColorChanged)
    def strokeColor(self):
        return QColor(self._style.stroke_color)

    @strokeColor.setter
    def strokeColor(self, color):
        color = qcolor(color)
        if color == self._style.stroke_color:
            return
        self._style = replace(self._style, stroke_color=color)
        self.strokeColorChanged.emit(color)
        self.update()

    @Property(float, notify=strokeWidthChanged)
    def strokeWidth(self):
        return self._style.stroke_width

    @strokeWidth.setter
    def strokeWidth(self, width):
        width = float(width)
        if width == self._style.stroke_width:
            return
        self._style = replace(self._style, stroke_width=width)
        self.strokeWidthChanged.emit(width)
        self.update()

    @Property(object, notify=stackAnglesChanged)
    def stackAngles(self):
        return list(self._stack_angles)

    @stackAngles.setter
    def stackAngles(self, angles):
        angles = tuple(float(a) for a in angles)
        if angles == self._stack_angles:
            return
        self._stack_angles = angles
        self.stackAnglesChanged.emit(list(angles))
        self.update()

    @Property(QRectF)
    def imageFrame(self):
        """Where the top image lands inside the view; empty when nothing can be drawn."""
        top = top_placement(self.layout_placements())
        return top.draw_rect.to_qrectf() if top else QRectF()

    # ---- Layout ----
    def snapshot_style(self) -> SnapshotStyle:
        return self._style

    def set_snapshot_style(self, style: SnapshotStyle) -> None:
        self._style = style
        self.update()

    def image_aspect(self) -> float:
        if self._image.isNull():
            return 1.0
        return self._image.width() / self._image.height()

    def stack_configuration(self) -> StackConfiguration:
        return StackConfiguration(
            frame=Rect.from_qrectf(QRectF(self.contentsRect())),
            image_aspect=self.image_aspect(),
            display_as_stack=self._display_as_stack,
            stroke_width=self._style.stroke_width,
            stack_angles=self._stack_angles,
            shadow_margin=self._style.shadow_margin,
        )

    def layout_placements(self) -> Tuple[LayerPlacement, ...]:
        try:
            return compute_layout(self.stack_configuration())
        except InvalidConfiguration:
            return ()

    # ---- Painting ----
    def paintEvent(self, event):
        try:
            placements = compute_layout(self.stack_configuration())
        except InvalidConfiguration as e:
            logger.debug("Skipping snapshot draw pass: %s", e)
            return
        painter = QPainter(self)
        try:
            paint_stack(QPainterSink(painter), placements, self._style, self._image)
        finally:
            painter.end()
