# snapshotstack/services/preset_loader.py
from __future__ import annotations

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional, Tuple, Union

from jsonschema import Draft7Validator
from jsonschema.exceptions import ValidationError

from snapshotstack import config
from snapshotstack.models.stack_geometry import Rect, StackConfiguration

logger = logging.getLogger(__name__)

SCHEMA_DIR = Path(__file__).resolve().parent.parent / "schemas"
PRESET_SCHEMA = "stack_preset.json"


class PresetError(ValueError):
    """A preset file is not valid JSON or does not match the preset schema."""


@dataclass(frozen=True)
class StackPreset:
    frame_size: Tuple[float, float] = (300.0, 300.0)
    stroke_width: float = config.DEFAULT_STROKE_WIDTH
    stroke_color: str = config.STROKE_COLOR
    display_as_stack: bool = False
    stack_angles: Tuple[float, ...] = field(default=config.DEFAULT_STACK_ANGLES)
    shadow_blur: int = config.SHADOW_BLUR
    image: Optional[Path] = None

    def stack_configuration(self, image_aspect: float, shadow_margin: float = 0.0) -> StackConfiguration:
        w, h = self.frame_size
        return StackConfiguration(
            frame=Rect(0.0, 0.0, w, h),
            image_aspect=image_aspect,
            display_as_stack=self.display_as_stack,
            stroke_width=self.stroke_width,
            stack_angles=self.stack_angles,
            shadow_margin=shadow_margin,
        )

    @classmethod
    def from_dict(cls, data: Dict[str, Any], base_dir: Optional[Path] = None) -> "StackPreset":
        """Build from already-validated preset data; relative image paths resolve against base_dir."""
        kwargs: Dict[str, Any] = {}
        frame = data.get("frame")
        if frame:
            kwargs["frame_size"] = (float(frame["width"]), float(frame["height"]))
        if "stroke_width" in data:
            kwargs["stroke_width"] = float(data["stroke_width"])
        if "stroke_color" in data:
            kwargs["stroke_color"] = data["stroke_color"]
        if "display_as_stack" in data:
            kwargs["display_as_stack"] = bool(data["display_as_stack"])
        if "stack_angles" in data:
            kwargs["stack_angles"] = tuple(float(a) for a in data["stack_angles"])
        if "shadow_blur" in data:
            kwargs["shadow_blur"] = int(data["shadow_blur"])
        if data.get("image"):
            image = Path(data["image"]).expanduser()
            if not image.is_absolute() and base_dir is not None:
                image = base_dir / image
            kwargs["image"] = image
        return cls(**kwargs)


def load_schema(name: str = PRESET_SCHEMA) -> Dict[str, Any]:
    return json.loads((SCHEMA_DIR / name).read_text(encoding="utf-8"))


def validate_preset(data: Any, source: str = "<preset>") -> None:
    validator = Draft7Validator(load_schema())
    try:
        validator.validate(data)
    except ValidationError as e:
        where = "/".join(str(p) for p in e.absolute_path) or "<root>"
        raise PresetError(f"{source}: {where}: {e.message}") from e


def load_preset(path: Union[str, Path]) -> StackPreset:
    p = Path(path)
    try:
        data = json.loads(p.read_text(encoding="utf-8"))
    except json.JSONDecodeError as e:
        raise PresetError(f"{p.name}: invalid JSON ({e})") from e
    except OSError as e:
        raise PresetError(f"{p.name}: cannot read preset ({e.strerror})") from e
    validate_preset(data, source=p.name)
    preset = StackPreset.from_dict(data, base_dir=p.resolve().parent)
    logger.info("Loaded preset %s", p)
    return preset
