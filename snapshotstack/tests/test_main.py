import os
import sys
import json
import argparse
import pytest

# Offscreen platform for Qt
os.environ['QT_QPA_PLATFORM'] = 'offscreen'
from PySide6.QtGui import QColor, QImage
from PySide6.QtWidgets import QApplication

from snapshotstack.main import _frame_size, build_parser, main, resolve_preset

_app = QApplication.instance() or QApplication(sys.argv)


def test_headless_requires_export(capsys):
    with pytest.raises(SystemExit) as exc:
        main(["--headless"])
    assert exc.value.code == 2
    assert "requires --export" in capsys.readouterr().err


def test_frame_size_parsing():
    assert _frame_size("300x200") == (300.0, 200.0)
    assert _frame_size("12.5X4") == (12.5, 4.0)
    for bad in ("300", "0x10", "ax5", "10x"):
        with pytest.raises(argparse.ArgumentTypeError):
            _frame_size(bad)


def test_flags_override_preset(tmp_path):
    preset_path = tmp_path / "p.json"
    preset_path.write_text(json.dumps({"stroke_width": 3, "display_as_stack": False}), encoding="utf-8")
    args = build_parser().parse_args(["-p", str(preset_path), "--stack", "--size", "200x100"])
    preset = resolve_preset(args)
    assert preset.stroke_width == 3.0
    assert preset.display_as_stack is True
    assert preset.frame_size == (200.0, 100.0)


def test_bad_preset_exits(tmp_path, capsys):
    preset_path = tmp_path / "p.json"
    preset_path.write_text(json.dumps({"stroke_width": -3}), encoding="utf-8")
    with pytest.raises(SystemExit) as exc:
        main(["-H", "-e", str(tmp_path / "out.png"), "-p", str(preset_path)])
    assert exc.value.code == 2
    assert "stroke_width" in capsys.readouterr().err


def test_headless_export_writes_png(tmp_path):
    source = tmp_path / "photo.png"
    image = QImage(400, 300, QImage.Format_ARGB32)
    image.fill(QColor("blue"))
    assert image.save(str(source))

    out = tmp_path / "out.png"
    assert main(["-H", "-e", str(out), "--stack", "--size", "160x120", str(source)]) == 0
    saved = QImage(str(out))
    assert (saved.width(), saved.height()) == (160, 120)
    assert saved.pixelColor(80, 60).name() == "#0000ff"


def test_headless_export_reports_invalid_frame(tmp_path, capsys):
    with pytest.raises(SystemExit) as exc:
        main(["-H", "-e", str(tmp_path / "out.png"), "--size", "30x30", "--stroke-width", "20"])
    assert exc.value.code == 2
    assert "no room" in capsys.readouterr().err


def test_missing_image_exits(tmp_path):
    with pytest.raises(SystemExit):
        main(["-H", "-e", str(tmp_path / "out.png"), str(tmp_path / "nope.png")])
