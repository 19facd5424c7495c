# snapshotstack/models/stack_geometry.py
"""
Layout of a snapshot stack.

Given the target frame, the source image's aspect ratio and the rotation
angles of the underlying snapshots, work out where each snapshot is drawn so
that its matte, once rotated about its centre, never leaves the frame.

Everything here is plain float math. The Qt adapters (``to_qrectf`` and
friends) import PySide6 lazily so the layout can be used and tested without a
QApplication.
"""
from __future__ import annotations

import math
from dataclasses import dataclass, field
from typing import Iterable, Optional, Tuple

from snapshotstack.config import DEFAULT_STACK_ANGLES, DEFAULT_STROKE_WIDTH

_ZERO_ANGLE = 1e-7
# share of the frame left for a layer whose rotated border had to be thinned
_THIN_BORDER_SHARE = 0.5


class InvalidConfiguration(ValueError):
    """Raised when a stack configuration cannot be laid out."""


# ——— Value types ———
@dataclass(frozen=True)
class Size:
    width: float
    height: float

    @property
    def aspect(self) -> float:
        return self.width / self.height

    def scaled(self, k: float) -> "Size":
        return Size(self.width * k, self.height * k)

    def to_qsizef(self):
        from PySide6.QtCore import QSizeF
        return QSizeF(self.width, self.height)


@dataclass(frozen=True)
class Rect:
    x: float
    y: float
    width: float
    height: float

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)

    @property
    def center(self) -> Tuple[float, float]:
        return (self.x + self.width / 2.0, self.y + self.height / 2.0)

    @property
    def aspect(self) -> float:
        return self.width / self.height

    @property
    def right(self) -> float:
        return self.x + self.width

    @property
    def bottom(self) -> float:
        return self.y + self.height

    def inflated(self, d: float) -> "Rect":
        """Grow (or shrink, for negative ``d``) by ``d`` on every side."""
        return Rect(self.x - d, self.y - d, self.width + 2 * d, self.height + 2 * d)

    def centered_in(self, other: "Rect") -> "Rect":
        cx, cy = other.center
        return Rect(cx - self.width / 2.0, cy - self.height / 2.0, self.width, self.height)

    def contains(self, other: "Rect", tolerance: float = 1e-9) -> bool:
        return (
            other.x >= self.x - tolerance
            and other.y >= self.y - tolerance
            and other.right <= self.right + tolerance
            and other.bottom <= self.bottom + tolerance
        )

    @classmethod
    def from_size(cls, size: Size, x: float = 0.0, y: float = 0.0) -> "Rect":
        return cls(x, y, size.width, size.height)

    @classmethod
    def from_qrectf(cls, rect) -> "Rect":
        return cls(float(rect.x()), float(rect.y()), float(rect.width()), float(rect.height()))

    def to_qrectf(self):
        from PySide6.QtCore import QRectF
        return QRectF(self.x, self.y, self.width, self.height)


@dataclass(frozen=True)
class SnapshotPosition:
    """
    Angle of a snapshot and the size of its matte once rotated.

    ``angle_rotation`` is in degrees, positive clockwise. ``bounding_rect_size``
    is the axis-aligned box that exactly contains the matte rectangle after
    rotation about its centre.
    """
    angle_rotation: float
    bounding_rect_size: Size


@dataclass(frozen=True)
class LayerPlacement:
    index: int
    position: SnapshotPosition
    draw_rect: Rect
    matte_rect: Rect
    scale: float
    is_top: bool

    @property
    def angle(self) -> float:
        return self.position.angle_rotation

    @property
    def bounding_rect(self) -> Rect:
        """The rotated matte's axis-aligned box, centred on the layer."""
        return Rect.from_size(self.position.bounding_rect_size).centered_in(self.draw_rect)


@dataclass(frozen=True)
class StackConfiguration:
    frame: Rect
    image_aspect: float
    display_as_stack: bool = False
    stroke_width: float = DEFAULT_STROKE_WIDTH
    stack_angles: Tuple[float, ...] = field(default=DEFAULT_STACK_ANGLES)
    shadow_margin: float = 0.0

    def __post_init__(self):
        # accept any iterable of angles but store a hashable tuple
        object.__setattr__(self, "stack_angles", tuple(float(a) for a in self.stack_angles))

    @property
    def stack_depth(self) -> int:
        return len(self.stack_angles) + 1 if self.display_as_stack else 1

    @property
    def border(self) -> float:
        return self.stroke_width + self.shadow_margin

    def layer_angles(self) -> Tuple[float, ...]:
        """Angles bottom-most first; the top snapshot (0°) is always last."""
        if not self.display_as_stack:
            return (0.0,)
        return self.stack_angles + (0.0,)

    @classmethod
    def from_size(cls, width: float, height: float, image_aspect: float, **kwargs) -> "StackConfiguration":
        return cls(frame=Rect(0.0, 0.0, float(width), float(height)), image_aspect=image_aspect, **kwargs)

    @classmethod
    def from_image_size(
        cls,
        frame: Rect,
        image_width: float,
        image_height: float,
        **kwargs,
    ) -> "StackConfiguration":
        return cls(frame=frame, image_aspect=aspect_ratio(image_width, image_height), **kwargs)


# ——— Geometry ———
def aspect_ratio(width: float, height: float) -> float:
    if not (width > 0 and height > 0):
        raise InvalidConfiguration(f"Image dimensions must be positive, got {width}x{height}")
    return float(width) / float(height)


def _abs_cos_sin(degrees: float) -> Tuple[float, float]:
    theta = math.radians(degrees)
    return abs(math.cos(theta)), abs(math.sin(theta))


def rotated_bounding_size(size: Size, degrees: float) -> Size:
    """Size of the box containing ``size`` rotated by ``degrees`` about its centre."""
    if abs(degrees) < _ZERO_ANGLE:
        return size
    c, s = _abs_cos_sin(degrees)
    return Size(
        size.width * c + size.height * s,
        size.width * s + size.height * c,
    )


def fit_scale(content: Size, bounds: Size) -> float:
    """Uniform scale that fits ``content`` inside ``bounds`` (fit, not fill)."""
    return min(bounds.width / content.width, bounds.height / content.height)


def validate(config: StackConfiguration) -> None:
    frame = config.frame
    if not all(math.isfinite(v) for v in (frame.x, frame.y, frame.width, frame.height)):
        raise InvalidConfiguration(f"Frame must be finite, got {frame}")
    if not (frame.width > 0 and frame.height > 0):
        raise InvalidConfiguration(f"Frame must have a positive size, got {frame.width}x{frame.height}")
    if not (config.image_aspect > 0 and math.isfinite(config.image_aspect)):
        raise InvalidConfiguration(f"Image aspect ratio must be positive, got {config.image_aspect}")
    if not (config.stroke_width >= 0 and math.isfinite(config.stroke_width)):
        raise InvalidConfiguration(f"Stroke width must be a finite non-negative number, got {config.stroke_width}")
    if not (config.shadow_margin >= 0 and math.isfinite(config.shadow_margin)):
        raise InvalidConfiguration(f"Shadow margin must be a finite non-negative number, got {config.shadow_margin}")
    if not all(math.isfinite(a) for a in config.stack_angles):
        raise InvalidConfiguration(f"Stack angles must be finite, got {config.stack_angles}")


def _layer_cos_sin(degrees: float) -> Tuple[float, float]:
    return _abs_cos_sin(degrees) if abs(degrees) >= _ZERO_ANGLE else (1.0, 0.0)


def _layer_border(config: StackConfiguration, degrees: float) -> float:
    """
    Border (matte plus shadow margin) a layer at ``degrees`` can afford.

    Normally the configured border. When its rotated width alone would use up
    the frame, the border of that layer is thinned so the rotated border takes
    at most half of the frame's smaller side. The unrotated layer never thins:
    a border that doesn't fit at 0° is an invalid configuration.
    """
    b = config.border
    c, s = _layer_cos_sin(degrees)
    side = min(config.frame.width, config.frame.height)
    if side - 2.0 * b * (c + s) > 0:
        return b
    if abs(degrees) < _ZERO_ANGLE:
        raise InvalidConfiguration(
            f"Frame {config.frame.width}x{config.frame.height} leaves no room inside a {b} border"
        )
    return side * (1.0 - _THIN_BORDER_SHARE) / (2.0 * (c + s))


def _layer_scale_limit(config: StackConfiguration, degrees: float, border: float) -> float:
    """
    Largest unit-height scale k for which the image rect (k*aspect x k),
    inflated by ``border``, still fits the frame after rotating by ``degrees``.

    The border keeps a fixed width while the image shrinks, so the rotated
    outer width is k*(a*c + s) + 2*b*(c + s), which is solved directly for k.
    """
    a = config.image_aspect
    c, s = _layer_cos_sin(degrees)
    room_w = config.frame.width - 2.0 * border * (c + s)
    room_h = config.frame.height - 2.0 * border * (c + s)
    return min(room_w / (a * c + s), room_h / (a * s + c))


def compute_layout(config: StackConfiguration) -> Tuple[LayerPlacement, ...]:
    """
    Place every snapshot of the stack, bottom-most first.

    The top snapshot keeps the image's aspect ratio and is fitted into the
    frame inset by the matte (and shadow margin). Each rotated snapshot uses
    the same rectangle, shrunk only as far as needed for its rotated matte to
    stay inside the frame; in a frame too tight for a rotated matte, that
    layer's matte is thinned instead.
    """
    validate(config)
    base_k = _layer_scale_limit(config, 0.0, _layer_border(config, 0.0))
    angles = config.layer_angles()
    top = len(angles) - 1

    placements = []
    for index, angle in enumerate(angles):
        stroke = config.stroke_width
        if index == top:
            k = base_k
        else:
            border = _layer_border(config, angle)
            if border < config.border:
                stroke *= border / config.border
            k = min(base_k, _layer_scale_limit(config, angle, border))
        image_size = Size(k * config.image_aspect, k)
        draw_rect = Rect.from_size(image_size).centered_in(config.frame)
        matte_rect = draw_rect.inflated(stroke)
        position = SnapshotPosition(
            angle_rotation=angle,
            bounding_rect_size=rotated_bounding_size(matte_rect.size, angle),
        )
        placements.append(
            LayerPlacement(
                index=index,
                position=position,
                draw_rect=draw_rect,
                matte_rect=matte_rect,
                scale=k / base_k,
                is_top=index == top,
            )
        )
    return tuple(placements)


def top_placement(placements: Iterable[LayerPlacement]) -> Optional[LayerPlacement]:
    for placement in placements:
        if placement.is_top:
            return placement
    return None
