# snapshotstack/config.py

# Rotation (degrees, clockwise positive) of the snapshots beneath the top
# image, bottom-most first. The top image is always drawn unrotated.
DEFAULT_STACK_ANGLES = (-4.0, 3.0)

DEFAULT_STROKE_WIDTH = 10.0

# Colours are "#RRGGBB" / "#AARRGGBB" strings so they stay Qt-free here.
STROKE_COLOR = "#FFFFFF"
OUTLINE_COLOR = "#33000000"    # hairline around the matte
UNDERLAY_COLOR = "#E4E4E4"     # fill of the snapshots beneath the top one
SHADOW_COLOR = "#000000"

SHADOW_OFFSET = (0.0, 2.0)
SHADOW_BLUR = 6
SHADOW_ALPHA = 90              # alpha of the darkest shadow ring

# Demo window
FRAME_MIN_PERCENT = 20
FRAME_MAX_PERCENT = 100
FRAME_MAX_SIZE = (480, 480)
DEMO_BACKGROUND = "#6C7A89"

SAMPLE_IMAGES = {
    "Landscape": (600, 400),
    "Portrait":  (400, 600),
    "Square":    (500, 500),
}

IMAGE_EXTENSIONS = [".png", ".jpg", ".jpeg", ".bmp", ".gif"]
