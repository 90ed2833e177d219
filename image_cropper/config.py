"""
Widget constants and configuration.

The preview box, zoom range and overlay colours are fixed for every
``ImageCropper`` instance.  DEFAULT_RATIOS feeds the demo window's ratio
selector; the widget itself accepts any positive ratio.
"""

# =============================================================================
# APP IDENTITY
# =============================================================================
APP_NAME = "image-cropper"

# =============================================================================
# PREVIEW GEOMETRY
# =============================================================================
# Fixed bounding box the source image is scaled to fit into
PREVIEW_WIDTH = 580
PREVIEW_HEIGHT = 400

# Outer layout of the widget
LAYOUT_SPACING = 10
LAYOUT_MARGIN = 10

# =============================================================================
# ZOOM
# =============================================================================
# Slider range; value v maps to scale 1 + v / 100 (1.0 .. 2.0)
ZOOM_MIN = 0
ZOOM_MAX = 100
ZOOM_DEFAULT = 0

# Slider steps per mouse-wheel notch
ZOOM_WHEEL_STEP = 5

# Nudge amounts (preview units)
NUDGE_SMALL = 1
NUDGE_LARGE = 10

# =============================================================================
# OVERLAY
# =============================================================================
# Black at ~60% opacity (RGBA, 0-255)
MASK_COLOR = (0, 0, 0, 153)
STROKE_COLOR = (255, 255, 255)
STROKE_WIDTH = 2

# =============================================================================
# RATIOS — presets offered by the demo window
# =============================================================================
DEFAULT_RATIOS = [
    {"name": "1:1", "ratio_w": 1, "ratio_h": 1},
    {"name": "4:3", "ratio_w": 4, "ratio_h": 3},
    {"name": "3:2", "ratio_w": 3, "ratio_h": 2},
    {"name": "16:9", "ratio_w": 16, "ratio_h": 9},
    {"name": "16:10", "ratio_w": 16, "ratio_h": 10},
    {"name": "9:16", "ratio_w": 9, "ratio_h": 16},
    {"name": "21:9", "ratio_w": 21, "ratio_h": 9},
]

# =============================================================================
# FILE HANDLING
# =============================================================================
# PNG compression level (0-9, 9 = maximum compression)
PNG_COMPRESS_LEVEL = 9

# Supported image extensions for the demo's open dialog
IMAGE_EXTENSIONS = {".png", ".jpg", ".jpeg", ".bmp", ".tiff", ".tif", ".webp", ".psd"}
