import numpy as np
from skimage.color import rgb2lab
from typing import List, Tuple


def _as_colors(colors) -> np.ndarray:
    return np.clip(np.asarray(colors, dtype=np.float64).reshape(-1, 3), 0.0, 1.0)


def hue_of(colors) -> np.ndarray:
    """
    CIE LCh(ab) hue angle in degrees, [0, 360), for R/G/B colors in [0, 1].

    Args:
        colors: (k, 3) array-like of sRGB colors.

    Returns:
        np.ndarray: (k,) hue angles. Neutral colors (a* = b* = 0) report 0.
    """
    rgb = _as_colors(colors)
    if len(rgb) == 0:
        return np.empty(0, dtype=np.float64)
    lab = rgb2lab(rgb[np.newaxis, :, :])[0]  # D65 white point
    hue = np.degrees(np.arctan2(lab[:, 2], lab[:, 1]))
    return np.where(hue < 0.0, hue + 360.0, hue)


def sort_by_hue(colors) -> np.ndarray:
    """Return the colors ordered by ascending hue. Equal hues keep their order."""
    rgb = np.asarray(colors, dtype=np.float64).reshape(-1, 3)
    order = np.argsort(hue_of(rgb), kind="stable")
    return rgb[order]


def to_rgb255(color) -> Tuple[int, int, int]:
    """Round one [0, 1] color to 8-bit channels."""
    r, g, b = (min(255, max(0, int(c * 255.0 + 0.5))) for c in np.asarray(color, dtype=np.float64))
    return r, g, b


def to_hex(color) -> str:
    r, g, b = to_rgb255(color)
    return f"#{r:02x}{g:02x}{b:02x}"


def format_palette_lines(colors) -> List[str]:
    """One "<rank> <hex>" line per color, rank starting at 0."""
    return [f"{idx} {to_hex(color)}" for idx, color in enumerate(np.asarray(colors).reshape(-1, 3))]
