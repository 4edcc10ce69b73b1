"""
Deficit heatmap overlay.

Converts a 2D deficit grid into an RGBA raster using a two-stop color
scale over a fixed domain, and encodes it as a PNG data URI that a map
can place over the grid's bounding box.
"""

from __future__ import annotations

import base64
import io
from typing import Dict, Optional, Sequence, Tuple

import numpy as np
from matplotlib.colors import to_rgb
from PIL import Image

from ..analysis.grid import as_float_grid
from ..config import DEFICIT_COLORS, DEFICIT_DOMAIN
from ..errors import NotFound


def _stop_rgb(color) -> np.ndarray:
    """Color stop (name, hex or RGB tuple) as a 0-255 float RGB vector."""
    return np.array(to_rgb(color), dtype=float) * 255.0


def colorize(
    matrix,
    domain: Tuple[float, float] = DEFICIT_DOMAIN,
    colors: Sequence = DEFICIT_COLORS
) -> np.ndarray:
    """
    Maps a value grid to RGBA pixels.

    Row r of the output holds source row (height - 1 - r), so the top of
    the image is the northernmost grid row. Values are interpolated
    linearly between the two color stops across the domain and clamped
    outside it. Absent or non-numeric cells are fully transparent.

    Args:
        matrix: 2D nested list or array, [row][col].
        domain: (min, max) mapped onto the first and second stop.
        colors: Two color stops.

    Returns:
        uint8 array of shape (height, width, 4).
    """
    values = as_float_grid(matrix)
    if values.ndim != 2 or values.size == 0:
        raise ValueError(f"Expected a non-empty 2D grid, got shape {values.shape}")

    lo, hi = float(domain[0]), float(domain[1])
    if hi <= lo:
        raise ValueError(f"Invalid color domain {domain}")

    start = _stop_rgb(colors[0])
    end = _stop_rgb(colors[1])

    flipped = values[::-1]
    valid = ~np.isnan(flipped)

    t = np.clip((np.where(valid, flipped, lo) - lo) / (hi - lo), 0.0, 1.0)
    rgb = start + t[..., np.newaxis] * (end - start)

    rgba = np.zeros(flipped.shape + (4,), dtype=np.uint8)
    rgba[..., :3] = np.where(valid[..., np.newaxis], np.rint(rgb), 0).astype(np.uint8)
    rgba[..., 3] = np.where(valid, 255, 0).astype(np.uint8)
    return rgba


def encode_png(rgba: np.ndarray) -> bytes:
    """Lossless PNG encoding of an RGBA array."""
    buf = io.BytesIO()
    Image.fromarray(rgba).save(buf, format='PNG')
    return buf.getvalue()


def rasterize(
    matrix,
    domain: Tuple[float, float] = DEFICIT_DOMAIN,
    colors: Sequence = DEFICIT_COLORS
) -> bytes:
    """PNG bytes of colorize(matrix, domain, colors). Deterministic."""
    return encode_png(colorize(matrix, domain, colors))


def to_data_uri(png_bytes: bytes) -> str:
    return "data:image/png;base64," + base64.b64encode(png_bytes).decode('ascii')


def create_pixel_map(pixels_data: dict, date: str, domain=DEFICIT_DOMAIN, colors=DEFICIT_COLORS) -> str:
    """
    Deficit overlay data URI for one day of the pixel analytics.

    Raises:
        NotFound: if no analytics entry has `time` equal to date.
    """
    for day in pixels_data.get('analytics', []):
        if day.get('time') == date:
            return to_data_uri(rasterize(day['deficit'], domain, colors))
    raise NotFound(f"No pixel analytics for {date}")


class HeatmapRasterizer:
    """
    Memoizing overlay builder.

    The overlay only depends on the day's grid and the color scale, not on
    the selection, so each (dataset, date) pair is rasterized once.
    """

    def __init__(self, domain: Tuple[float, float] = DEFICIT_DOMAIN, colors: Sequence = DEFICIT_COLORS):
        self.domain = tuple(domain)
        self.colors = tuple(colors)
        self._cache: Dict[str, Tuple[dict, str]] = {}
        self.renders = 0

    def overlay(self, pixels_data: dict, date: str) -> str:
        """Data URI of the deficit overlay for date (cached)."""
        cached = self._cache.get(date)
        if cached is not None and cached[0] is pixels_data:
            return cached[1]

        uri = create_pixel_map(pixels_data, date, self.domain, self.colors)
        self.renders += 1
        self._cache[date] = (pixels_data, uri)
        return uri

    def rgba(self, pixels_data: dict, date: str) -> Optional[np.ndarray]:
        """RGBA array of the overlay for direct display, or None without data."""
        for day in pixels_data.get('analytics', []):
            if day.get('time') == date:
                return colorize(day['deficit'], self.domain, self.colors)
        return None
