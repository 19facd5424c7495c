# snapshotstack/services/image_source.py
from __future__ import annotations

import logging
from pathlib import Path
from typing import Dict, Optional, Union

from PySide6.QtCore import QPointF, QRectF, Qt
from PySide6.QtGui import QColor, QImage, QImageReader, QLinearGradient, QPainter, QRadialGradient

from snapshotstack import config
from snapshotstack.utils.valid_path import ValidPath

logger = logging.getLogger(__name__)


def load_image(path: Union[str, Path]) -> Optional[QImage]:
    """Read an image file, honouring EXIF orientation. Returns None if it can't be read."""
    p = ValidPath.image_file(path, must_exist=True)
    if p is None:
        logger.warning("Not a readable image file: %s", path)
        return None
    reader = QImageReader(str(p))
    reader.setAutoTransform(True)
    image = reader.read()
    if image.isNull():
        logger.warning("Failed to decode %s: %s", p, reader.errorString())
        return None
    logger.debug("Loaded %s (%dx%d)", p, image.width(), image.height())
    return image


def sample_image(width: int, height: int, hue: int = 200) -> QImage:
    """A stand-in photograph: sky gradient, a sun and a horizon band."""
    image = QImage(width, height, QImage.Format_ARGB32_Premultiplied)
    image.fill(Qt.transparent)
    painter = QPainter(image)
    try:
        painter.setRenderHint(QPainter.Antialiasing, True)
        sky = QLinearGradient(0, 0, 0, height)
        sky.setColorAt(0.0, QColor.fromHsv(hue, 160, 235))
        sky.setColorAt(1.0, QColor.fromHsv(hue, 40, 255))
        painter.fillRect(QRectF(0, 0, width, height), sky)

        radius = min(width, height) * 0.12
        centre = QPointF(width * 0.72, height * 0.3)
        sun = QRadialGradient(centre, radius)
        sun.setColorAt(0.0, QColor("#FFF6C8"))
        sun.setColorAt(1.0, QColor("#FFC940"))
        painter.setPen(Qt.NoPen)
        painter.setBrush(sun)
        painter.drawEllipse(centre, radius, radius)

        ground = QLinearGradient(0, height * 0.65, 0, height)
        ground.setColorAt(0.0, QColor.fromHsv((hue + 240) % 360, 150, 150))
        ground.setColorAt(1.0, QColor.fromHsv((hue + 240) % 360, 200, 90))
        painter.fillRect(QRectF(0, height * 0.65, width, height * 0.35), ground)
    finally:
        painter.end()
    return image


def sample_images() -> Dict[str, QImage]:
    """The demo's built-in choices, keyed by label."""
    images = {}
    for i, (label, (w, h)) in enumerate(config.SAMPLE_IMAGES.items()):
        images[label] = sample_image(w, h, hue=(200 + 50 * i) % 360)
    return images
