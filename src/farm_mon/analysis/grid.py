"""
Pixel grid geometry.

Coordinate math for the uniform analytics grid embedded in the farm's
bounding box: cell sizes, reference grid lines, cell polygons, cell
centers and click resolution.

Rows count northwards from the southern edge (row 0 = lat_start) and
columns count eastwards from the western edge (col 0 = lng_start).
Geometries follow GeoJSON axis order (x = longitude, y = latitude).
"""

import math
from numbers import Real
from typing import List, NamedTuple, Optional, Sequence, Tuple

import numpy as np
from pyproj import Geod
from shapely.geometry import LineString, Polygon

from ..errors import DegenerateGrid, IndexOutOfRange

_GEOD = Geod(ellps="WGS84")


def cell_value(value) -> Optional[float]:
    """Numeric cell value as float; None for absent, non-numeric or NaN cells."""
    if isinstance(value, bool) or not isinstance(value, Real):
        return None
    value = float(value)
    return None if math.isnan(value) else value


def as_float_grid(matrix: Sequence[Sequence]) -> np.ndarray:
    """
    Converts a nested-list matrix into a 2D float array.

    Absent and non-numeric cells become NaN.
    """
    if isinstance(matrix, np.ndarray) and matrix.dtype.kind in "fiu":
        return matrix.astype(float)
    rows = []
    for row in matrix:
        values = [cell_value(cell) for cell in row]
        rows.append([np.nan if v is None else v for v in values])
    if not rows:
        return np.empty((0, 0), dtype=float)
    return np.array(rows, dtype=float)


def normalize_bounds(
    corner1: Sequence[float],
    corner2: Sequence[float]
) -> Tuple[float, float, float, float]:
    """
    Sorts each axis of two (lng, lat) corners independently.

    Args:
        corner1: (lng, lat) of the first corner.
        corner2: (lng, lat) of the opposite corner.

    Returns:
        (lat_start, lat_end, lng_start, lng_end) with start < end.

    Raises:
        DegenerateGrid: if either axis has zero length.
    """
    lng1, lat1 = float(corner1[0]), float(corner1[1])
    lng2, lat2 = float(corner2[0]), float(corner2[1])

    lat_start, lat_end = sorted((lat1, lat2))
    lng_start, lng_end = sorted((lng1, lng2))

    if lat_start == lat_end:
        raise DegenerateGrid(f"Bounding box has zero latitude extent ({lat_start})")
    if lng_start == lng_end:
        raise DegenerateGrid(f"Bounding box has zero longitude extent ({lng_start})")

    return lat_start, lat_end, lng_start, lng_end


class PixelGrid(NamedTuple):
    width: int
    height: int
    lat_start: float
    lat_end: float
    lng_start: float
    lng_end: float

    @classmethod
    def from_bounding_box(cls, bounding_box: Sequence[float], width: int, height: int) -> "PixelGrid":
        """
        Builds a grid from a [lng1, lat1, lng2, lat2] box and its dimensions.

        Raises:
            DegenerateGrid: on a zero-extent box or non-positive dimensions.
        """
        if len(bounding_box) != 4:
            raise DegenerateGrid(f"Bounding box needs 4 values, got {len(bounding_box)}")
        width, height = int(width), int(height)
        if width <= 0 or height <= 0:
            raise DegenerateGrid(f"Grid dimensions must be positive, got {width}x{height}")

        lat_start, lat_end, lng_start, lng_end = normalize_bounds(bounding_box[:2], bounding_box[2:])
        return cls(width, height, lat_start, lat_end, lng_start, lng_end)

    @classmethod
    def from_pixels_data(cls, pixels_data: dict) -> "PixelGrid":
        """Builds the grid from a pixels dataset (`dimensions` is [width, height])."""
        try:
            width, height = pixels_data["dimensions"]
            bounding_box = pixels_data["boundingBox"]
        except (KeyError, TypeError, ValueError) as e:
            raise DegenerateGrid(f"Pixels data lacks usable dimensions/boundingBox: {e}") from e
        return cls.from_bounding_box(bounding_box, width, height)

    @property
    def lat_step(self) -> float:
        return (self.lat_end - self.lat_start) / self.height

    @property
    def lng_step(self) -> float:
        return (self.lng_end - self.lng_start) / self.width

    @property
    def bounds(self) -> Tuple[float, float, float, float]:
        """[min_lng, min_lat, max_lng, max_lat], the usual bbox order."""
        return self.lng_start, self.lat_start, self.lng_end, self.lat_end

    @property
    def center(self) -> Tuple[float, float]:
        """(lat, lng) of the middle of the bounding box."""
        return (self.lat_start + self.lat_end) / 2, (self.lng_start + self.lng_end) / 2

    def cell_size(self) -> Tuple[float, float]:
        """Returns (lat_step, lng_step), both strictly positive."""
        return self.lat_step, self.lng_step

    def grid_lats(self) -> List[float]:
        # height + 1 values, last one pinned to lat_end to avoid drift
        return [self.lat_start + i * self.lat_step for i in range(self.height)] + [self.lat_end]

    def grid_lngs(self) -> List[float]:
        return [self.lng_start + i * self.lng_step for i in range(self.width)] + [self.lng_end]

    def grid_lines(self) -> List[LineString]:
        """
        Reference grid drawn over the raster overlay.

        Returns:
            height + 1 east-west lines followed by width + 1 north-south
            lines, each spanning the full extent of the grid.
        """
        lines = [
            LineString([(self.lng_start, lat), (self.lng_end, lat)])
            for lat in self.grid_lats()
        ]
        lines.extend(
            LineString([(lng, self.lat_start), (lng, self.lat_end)])
            for lng in self.grid_lngs()
        )
        return lines

    def contains_index(self, row: int, col: int) -> bool:
        return 0 <= row < self.height and 0 <= col < self.width

    def _check_index(self, row: int, col: int):
        if not self.contains_index(row, col):
            raise IndexOutOfRange(
                f"Pixel ({row}, {col}) outside grid of {self.height} rows x {self.width} cols"
            )

    def pixel_polygon(self, row: int, col: int) -> Polygon:
        """
        Unit cell of a pixel as a closed polygon.

        The origin corner is (lat_start + row * lat_step, lng_start + col * lng_step);
        the other three corners are offset by one step on each axis.

        Raises:
            IndexOutOfRange: if row or col lies outside the grid.
        """
        self._check_index(row, col)
        lat1 = self.lat_start + row * self.lat_step
        lat2 = lat1 + self.lat_step
        lng1 = self.lng_start + col * self.lng_step
        lng2 = lng1 + self.lng_step
        return Polygon([(lng1, lat1), (lng2, lat1), (lng2, lat2), (lng1, lat2)])

    def pixel_center(self, row: int, col: int) -> Tuple[float, float]:
        """
        (lat, lng) of the true centroid of a pixel cell.

        The centroid sits half a step past the origin corner, so
        resolve_click(*pixel_center(row, col)) always returns (row, col).

        Raises:
            IndexOutOfRange: if row or col lies outside the grid.
        """
        self._check_index(row, col)
        return (
            self.lat_start + (row + 0.5) * self.lat_step,
            self.lng_start + (col + 0.5) * self.lng_step,
        )

    def resolve_click(self, lat: float, lng: float) -> Optional[Tuple[int, int]]:
        """
        Maps a geographic point to the (row, col) of the cell containing it.

        Returns:
            (row, col), or None when the point lies outside the grid.
        """
        if not (self.lat_start <= lat <= self.lat_end and self.lng_start <= lng <= self.lng_end):
            return None

        row = math.floor((lat - self.lat_start) / self.lat_step)
        col = math.floor((lng - self.lng_start) / self.lng_step)
        # The northern and eastern edges belong to the last row/column
        return min(row, self.height - 1), min(col, self.width - 1)

    def pixel_area_ha(self, row: int, col: int) -> float:
        """Geodesic area of a pixel cell in hectares (WGS84 ellipsoid)."""
        area_m2, _ = _GEOD.geometry_area_perimeter(self.pixel_polygon(row, col))
        return abs(area_m2) / 10000.0
