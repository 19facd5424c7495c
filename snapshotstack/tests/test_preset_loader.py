import json
import pytest
from pathlib import Path

from snapshotstack.config import DEFAULT_STACK_ANGLES, DEFAULT_STROKE_WIDTH
from snapshotstack.models.stack_geometry import Rect, compute_layout
from snapshotstack.services.preset_loader import PresetError, StackPreset, load_preset, validate_preset


def write_preset(tmp_path: Path, data, name="preset.json") -> Path:
    path = tmp_path / name
    path.write_text(data if isinstance(data, str) else json.dumps(data), encoding="utf-8")
    return path


def test_full_preset_round_trips_into_configuration(tmp_path):
    path = write_preset(tmp_path, {
        "frame": {"width": 320, "height": 240},
        "stroke_width": 6,
        "stroke_color": "#F0F0F0",
        "display_as_stack": True,
        "stack_angles": [-5, 2.5, -1],
        "shadow_blur": 4,
        "image": "photos/beach.jpg",
    })
    preset = load_preset(path)
    assert preset.frame_size == (320.0, 240.0)
    assert preset.stroke_width == 6.0
    assert preset.stroke_color == "#F0F0F0"
    assert preset.stack_angles == (-5.0, 2.5, -1.0)
    assert preset.shadow_blur == 4
    assert preset.image == tmp_path.resolve() / "photos" / "beach.jpg"

    cfg = preset.stack_configuration(image_aspect=4 / 3)
    assert cfg.frame == Rect(0.0, 0.0, 320.0, 240.0)
    assert cfg.stack_depth == 4
    assert len(compute_layout(cfg)) == 4


def test_empty_preset_uses_defaults(tmp_path):
    preset = load_preset(write_preset(tmp_path, {}))
    assert preset == StackPreset()
    assert preset.stroke_width == DEFAULT_STROKE_WIDTH
    assert preset.stack_angles == DEFAULT_STACK_ANGLES
    assert preset.image is None


@pytest.mark.parametrize("data", [
    {"frame": {"width": 0, "height": 100}},
    {"frame": {"width": 100}},
    {"stroke_width": -2},
    {"stroke_color": "white"},
    {"stroke_color": "#12345"},
    {"stack_angles": [120]},
    {"shadow_blur": 1.5},
    {"display_as_stack": "yes"},
    {"unknown": 1},
    [1, 2, 3],
])
def test_schema_violations_are_rejected(tmp_path, data):
    with pytest.raises(PresetError):
        load_preset(write_preset(tmp_path, data))


def test_error_names_file_and_field(tmp_path):
    with pytest.raises(PresetError) as err:
        load_preset(write_preset(tmp_path, {"stroke_width": -2}, name="bad.json"))
    assert "bad.json" in str(err.value)
    assert "stroke_width" in str(err.value)


def test_invalid_json(tmp_path):
    with pytest.raises(PresetError, match="invalid JSON"):
        load_preset(write_preset(tmp_path, "{ not json"))


def test_missing_file(tmp_path):
    with pytest.raises(PresetError):
        load_preset(tmp_path / "missing.json")


def test_validate_preset_accepts_argb_colour():
    validate_preset({"stroke_color": "#80FFFFFF"})
