# snapshotstack/services/export_manager.py
from __future__ import annotations

import logging
import math
from dataclasses import replace
from pathlib import Path
from typing import Optional, Union

from PySide6.QtCore import Qt
from PySide6.QtGui import QImage, QPainter

from snapshotstack.models.stack_geometry import compute_layout
from snapshotstack.services.preset_loader import StackPreset
from snapshotstack.services.stack_paint import QPainterSink, SnapshotStyle, paint_stack, qcolor
from snapshotstack.utils.valid_path import ValidPath

logger = logging.getLogger(__name__)


class ExportError(RuntimeError):
    """The rendered stack could not be written."""


class ExportManager:
    """Offscreen rendering of a snapshot stack to a transparent image."""

    def __init__(self, style: Optional[SnapshotStyle] = None):
        self.style = style or SnapshotStyle()

    def style_for(self, preset: StackPreset) -> SnapshotStyle:
        return replace(
            self.style,
            stroke_color=qcolor(preset.stroke_color),
            stroke_width=preset.stroke_width,
            shadow_blur=preset.shadow_blur,
        )

    def render(self, preset: StackPreset, image: Optional[QImage] = None) -> QImage:
        """
        Paint the stack described by ``preset`` onto a frame-sized ARGB image.

        InvalidConfiguration propagates before anything is allocated.
        """
        style = self.style_for(preset)
        aspect = 1.0 if image is None or image.isNull() else image.width() / image.height()
        placements = compute_layout(preset.stack_configuration(aspect, shadow_margin=style.shadow_margin))

        w, h = preset.frame_size
        canvas = QImage(max(1, math.ceil(w)), max(1, math.ceil(h)), QImage.Format_ARGB32_Premultiplied)
        canvas.fill(Qt.transparent)
        painter = QPainter(canvas)
        try:
            drawn = paint_stack(QPainterSink(painter), placements, style, image)
        finally:
            painter.end()
        logger.debug("Rendered %d snapshot(s) into %dx%d", drawn, canvas.width(), canvas.height())
        return canvas

    def export_png(self, path: Union[str, Path], preset: StackPreset, image: Optional[QImage] = None) -> Path:
        target = ValidPath.output_file(path, "png")
        if target is None:
            raise ExportError(f"Export path must be a .png in an existing directory: {path}")
        canvas = self.render(preset, image)
        if not canvas.save(str(target), "PNG"):
            raise ExportError(f"Failed to write {target}")
        logger.info("Exported %s", target)
        return target
