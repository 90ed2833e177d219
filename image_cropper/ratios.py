"""
Aspect-ratio helpers: parse, normalize and validate crop ratios.

Ratios are given as ``"16:9"``, ``"16x9"`` or a single number such as
``"1.5"`` (meaning 1.5:1).  The preset list in ``config.DEFAULT_RATIOS`` is
validated here before the demo window offers it.  This module is Qt-free.
"""

import logging
import math
import re
from copy import deepcopy
from math import gcd

from image_cropper.config import DEFAULT_RATIOS

logger = logging.getLogger(__name__)

_RATIO_RE = re.compile(r"^\s*([0-9]*\.?[0-9]+)\s*[:x/]\s*([0-9]*\.?[0-9]+)\s*$", re.IGNORECASE)

_PRESET_REQUIRED_KEYS = {"name", "ratio_w", "ratio_h"}


# =============================================================================
# Aspect-ratio helpers
# =============================================================================
def normalize_ratio(w: int, h: int) -> tuple[int, int]:
    """Reduce ratio to simplest form via GCD. (21, 9) → (7, 3)"""
    g = gcd(w, h)
    return w // g, h // g


def aspect_key(w: float, h: float) -> str:
    """Display key for a ratio. (21, 9) → '7:3', (1.5, 1) → '1.5:1'"""
    if float(w).is_integer() and float(h).is_integer():
        nw, nh = normalize_ratio(int(w), int(h))
        return f"{nw}:{nh}"
    return f"{w:g}:{h:g}"


def parse_ratio(text: str) -> tuple[float, float]:
    """
    Parse a ratio string into ``(ratio_w, ratio_h)``.

    Raises ValueError for malformed, zero, or negative ratios.
    """
    if not isinstance(text, str) or not text.strip():
        raise ValueError("ratio must be a non-empty string")

    match = _RATIO_RE.match(text)
    if match:
        ratio_w, ratio_h = float(match.group(1)), float(match.group(2))
    else:
        try:
            ratio_w, ratio_h = float(text), 1.0
        except ValueError:
            raise ValueError(f"invalid ratio {text!r}, expected W:H") from None

    if not (math.isfinite(ratio_w) and math.isfinite(ratio_h)) or ratio_w <= 0 or ratio_h <= 0:
        raise ValueError(f"ratio components must be positive, got {text!r}")
    return ratio_w, ratio_h


# =============================================================================
# Presets
# =============================================================================
def validate_presets(data: object) -> list[str]:
    """
    Validate a list of ratio presets.

    Returns a list of error strings (empty means valid).
    """
    errors: list[str] = []

    if not isinstance(data, list):
        errors.append("Ratio presets must be a list")
        return errors

    keys_seen: dict[str, str] = {}  # aspect_key -> preset name

    for i, preset in enumerate(data):
        prefix = f"Ratio #{i + 1}"

        if not isinstance(preset, dict):
            errors.append(f"{prefix}: must be a dict")
            continue

        missing = _PRESET_REQUIRED_KEYS - preset.keys()
        if missing:
            errors.append(f"{prefix}: missing keys: {', '.join(sorted(missing))}")
            continue

        name = preset["name"]
        if not isinstance(name, str) or not name.strip():
            errors.append(f"{prefix}: name must be a non-empty string")

        ratio_w, ratio_h = preset["ratio_w"], preset["ratio_h"]
        valid = True
        for key, val in (("ratio_w", ratio_w), ("ratio_h", ratio_h)):
            if not isinstance(val, (int, float)) or isinstance(val, bool) or val <= 0:
                errors.append(f"{prefix}: {key} must be a positive number, got {val!r}")
                valid = False

        if valid:
            akey = aspect_key(ratio_w, ratio_h)
            if akey in keys_seen:
                errors.append(
                    f"{prefix} ('{name}'): aspect ratio {akey} duplicates '{keys_seen[akey]}'"
                )
            else:
                keys_seen[akey] = name

    return errors


def load_presets() -> list[dict]:
    """Return a copy of the built-in ratio presets, dropping any invalid set."""
    errors = validate_presets(DEFAULT_RATIOS)
    if errors:
        logger.warning("Ratio presets invalid:\n  %s", "\n  ".join(errors))
        return [{"name": "1:1", "ratio_w": 1, "ratio_h": 1}]
    return deepcopy(DEFAULT_RATIOS)
