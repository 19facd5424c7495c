#!/usr/bin/env python3
import os
import sys
import argparse
import logging
from dataclasses import replace
from typing import TYPE_CHECKING, Optional, Tuple

from snapshotstack.models.stack_geometry import InvalidConfiguration
from snapshotstack.services.preset_loader import PresetError, StackPreset, load_preset
from snapshotstack.utils.logging_setup import configure_logging
from snapshotstack.utils.valid_path import ValidPath

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("snapshotstack")

# --- Helpers ---------------------------------------------------------------

def _die(msg: str, code: int = 2):
    print(f"Error: {msg}", file=sys.stderr)
    sys.exit(code)

def _frame_size(text: str) -> Tuple[float, float]:
    """Parse 'WxH' (e.g. 300x200) for argparse."""
    try:
        w, h = (float(v) for v in text.lower().split("x", 1))
    except ValueError:
        raise argparse.ArgumentTypeError(f"expected WIDTHxHEIGHT, got {text!r}")
    if w <= 0 or h <= 0:
        raise argparse.ArgumentTypeError(f"frame size must be positive, got {text!r}")
    return w, h


# --- Argparse --------------------------------------------------------------

def build_parser():
    p = argparse.ArgumentParser(
        prog="snapshotstack",
        description="Snapshot stack view demo and PNG renderer"
    )
    p.add_argument("images", nargs="*", help="image files to show (first one is exported)")

    # Headless toggle (don't use -h because argparse reserves it for help)
    p.add_argument("--headless", "-H", action="store_true", dest="is_headless",
                   help="Run without GUI (requires --export)")
    p.add_argument("--export", "-e", dest="export_path",
                   help="PNG file to render the stack into")
    p.add_argument("--preset", "-p", dest="preset_path",
                   help="JSON preset with frame, stroke and stack settings")

    p.add_argument("--stack", action=argparse.BooleanOptionalAction, dest="display_as_stack",
                   default=None, help="Display as a stack of snapshots")
    p.add_argument("--size", type=_frame_size, dest="frame_size",
                   help="Frame size as WIDTHxHEIGHT")
    p.add_argument("--stroke-width", type=float, dest="stroke_width",
                   help="Matte thickness in px")

    p.add_argument("--verbose", "-v", action="store_true", help="Debug logging")
    p.add_argument("--log-file", dest="log_file", help="Also log to this file")
    return p


def resolve_preset(args) -> StackPreset:
    """Preset file first, then explicit flags on top."""
    preset = StackPreset()
    if args.preset_path:
        path = ValidPath.check(args.preset_path, must_exist=True, require_file=True, has_ext="json")
        if path is None:
            _die(f"preset does not exist or is not a .json file: {args.preset_path}")
        try:
            preset = load_preset(path)
        except PresetError as e:
            _die(str(e))

    overrides = {}
    if args.display_as_stack is not None:
        overrides["display_as_stack"] = args.display_as_stack
    if args.frame_size is not None:
        overrides["frame_size"] = args.frame_size
    if args.stroke_width is not None:
        if args.stroke_width < 0:
            _die(f"stroke width must not be negative: {args.stroke_width}")
        overrides["stroke_width"] = args.stroke_width
    return replace(preset, **overrides) if overrides else preset


def _image_paths(args, preset: StackPreset) -> list["Path"]:
    paths = []
    candidates = list(args.images)
    if preset.image is not None:
        candidates.insert(0, preset.image)
    for s in candidates:
        p = ValidPath.image_file(s)
        if p is None:
            _die(f"image does not exist or is not a supported image file: {s}")
        paths.append(p)
    return paths


def run_headless(args, preset: StackPreset, image_paths: list["Path"]) -> int:
    from snapshotstack.services.export_manager import ExportError, ExportManager
    from snapshotstack.services.image_source import load_image

    image = None
    if image_paths:
        image = load_image(image_paths[0])
        if image is None:
            _die(f"could not read image: {image_paths[0]}")
    try:
        ExportManager().export_png(args.export_path, preset, image)
    except (InvalidConfiguration, ExportError) as e:
        _die(str(e))
    return 0


# --- Main ------------------------------------------------------------------

def main(argv: Optional[list] = None):
    parser = build_parser()
    args = parser.parse_args(argv)
    configure_logging(level=logging.DEBUG if args.verbose else logging.INFO, log_file=args.log_file)

    if args.is_headless and not args.export_path:
        _die("Headless mode requires --export")

    preset = resolve_preset(args)
    image_paths = _image_paths(args, preset)
    logger.debug("Using %s with %d image(s)", preset, len(image_paths))

    if args.is_headless:
        os.environ.setdefault("QT_QPA_PLATFORM", "offscreen")
    from PySide6.QtWidgets import QApplication
    app = QApplication.instance() or QApplication(sys.argv[:1])

    # HEADLESS MODE ----------------------------------------------------------
    if args.is_headless:
        return run_headless(args, preset, image_paths)

    # GUI MODE ---------------------------------------------------------------
    from snapshotstack.views.demo_window import DemoWindow
    from snapshotstack.services.stack_paint import qcolor

    mw = DemoWindow(image_paths=image_paths, display_as_stack=preset.display_as_stack)
    mw.snapshot_view.strokeWidth = preset.stroke_width
    mw.snapshot_view.strokeColor = qcolor(preset.stroke_color)
    mw.snapshot_view.stackAngles = preset.stack_angles
    mw.snapshot_view.set_snapshot_style(
        replace(mw.snapshot_view.snapshot_style(), shadow_blur=preset.shadow_blur))
    mw.show()
    return app.exec()

if __name__ == "__main__":
    sys.exit(main())
