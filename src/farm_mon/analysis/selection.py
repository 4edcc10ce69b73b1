"""
Spatial selection resolution.

Turns route state (selection type + selection id) into exactly one of
no selection, a plot selection or a pixel selection. Resolution is purely
syntactic; whether the plot or pixel exists is checked separately by
check_selection / validate_selection against the loaded dataset.
"""

from typing import NamedTuple, Optional, Tuple

from ..errors import InvalidSelection, NotFound

NONE = "none"
PLOT = "plot"
PIXEL = "pixel"

ROUTE_PREFIX = "/map"


class Selection(NamedTuple):
    """
    Tagged union of the three selection states.

    Use the Selection.none / for_plot / for_pixel constructors;
    they guarantee that plot_id and pixel are never both set.
    """
    kind: str = NONE
    plot_id: Optional[str] = None
    pixel: Optional[Tuple[int, int]] = None

    @classmethod
    def none(cls) -> "Selection":
        return cls(NONE)

    @classmethod
    def for_plot(cls, plot_id: str) -> "Selection":
        return cls(PLOT, plot_id=plot_id)

    @classmethod
    def for_pixel(cls, row: int, col: int) -> "Selection":
        return cls(PIXEL, pixel=(int(row), int(col)))

    @property
    def is_none(self) -> bool:
        return self.kind == NONE

    @property
    def identity(self):
        """
        Key used for sprinkling overrides: the plotId for plots and the
        (row, col) tuple for pixels, so the two can never collide.
        """
        if self.kind == PLOT:
            return self.plot_id
        if self.kind == PIXEL:
            return self.pixel
        return None

    @property
    def route_id(self) -> Optional[str]:
        if self.kind == PLOT:
            return self.plot_id
        if self.kind == PIXEL:
            return f"{self.pixel[0]}-{self.pixel[1]}"
        return None


def parse_pixel_id(selection_id: str) -> Tuple[int, int]:
    """
    Parses a dash-joined 'row-col' pixel id.

    Raises:
        InvalidSelection: on a wrong token count or non-integer tokens.
    """
    tokens = str(selection_id).split("-")
    if len(tokens) != 2:
        raise InvalidSelection(f"Pixel id must be 'row-col', got {selection_id!r}")
    try:
        return int(tokens[0], 10), int(tokens[1], 10)
    except ValueError:
        raise InvalidSelection(f"Pixel id must contain two integers, got {selection_id!r}") from None


def resolve_selection(selection_type: Optional[str], selection_id: Optional[str]) -> Selection:
    """
    Normalizes route input into a Selection.

    Args:
        selection_type: 'plot', 'pixel' or None.
        selection_id: plotId, 'row-col' or None.

    Returns:
        Selection.none() when either part is absent, otherwise a plot or
        pixel selection. Plot ids are not checked against the dataset here.

    Raises:
        InvalidSelection: for an unknown type or a malformed pixel id.
    """
    if not selection_id or not selection_type:
        return Selection.none()

    if selection_type == PLOT:
        return Selection.for_plot(selection_id)
    if selection_type == PIXEL:
        row, col = parse_pixel_id(selection_id)
        return Selection.for_pixel(row, col)

    raise InvalidSelection(f"Unknown selection type {selection_type!r}")


def check_selection(selection: Selection, farmer_data) -> Tuple[bool, Optional[str]]:
    """
    Checks that a selection refers to something in the dataset.

    Returns:
        tuple: (is_valid: bool, error_message: str or None)
    """
    if selection.kind == PLOT:
        if farmer_data.find_plot(selection.plot_id) is None:
            return False, f"Plot {selection.plot_id} not found."
        if selection.plot_id not in farmer_data.plots_analytics:
            return False, f"No analytics for plot {selection.plot_id}."
    elif selection.kind == PIXEL:
        row, col = selection.pixel
        if not farmer_data.grid.contains_index(row, col):
            grid = farmer_data.grid
            return False, f"Pixel {row}-{col} outside grid of {grid.height}x{grid.width}."
    return True, None


def validate_selection(selection: Selection, farmer_data) -> Selection:
    """
    Returns the selection unchanged if it exists in the dataset.

    Raises:
        NotFound: for an unknown plot or an out-of-grid pixel.
    """
    is_valid, error_msg = check_selection(selection, farmer_data)
    if not is_valid:
        raise NotFound(error_msg)
    return selection


def center_of(selection: Selection, farmer_data) -> Optional[Tuple[float, float]]:
    """
    Representative (lat, lng) of a selection for centering the map.

    Plots use the area centroid of the polygon, not the middle of its
    bounding box; the two differ for concave plots.

    Returns:
        Plot polygon centroid, pixel cell center, or None when nothing is
        selected (the caller keeps its current view).

    Raises:
        NotFound: for an unknown plot.
    """
    if selection.kind == PLOT:
        plot = farmer_data.find_plot(selection.plot_id)
        if plot is None:
            raise NotFound(f"Plot {selection.plot_id} not found.")
        c = plot.geometry.centroid
        return c.y, c.x
    if selection.kind == PIXEL:
        return farmer_data.grid.pixel_center(*selection.pixel)
    return None


def selection_route(date: str, selection: Selection = None) -> str:
    """Route for a date and selection, e.g. /map/2019-07-04/pixel/3-7."""
    if selection is None or selection.is_none:
        return f"{ROUTE_PREFIX}/{date}"
    return f"{ROUTE_PREFIX}/{date}/{selection.kind}/{selection.route_id}"


def parse_route(path: str) -> Tuple[Optional[str], Optional[str], Optional[str]]:
    """
    Splits /map/:date?/:selectionType?/:selectionId? into its parts.

    Returns:
        (date, selection_type, selection_id), absent parts as None.

    Raises:
        InvalidSelection: if the path is not under /map or has extra parts.
    """
    parts = [p for p in (path or "").split("/") if p]
    if not parts or "/" + parts[0] != ROUTE_PREFIX:
        raise InvalidSelection(f"Not a map route: {path!r}")
    params = parts[1:]
    if len(params) > 3:
        raise InvalidSelection(f"Too many route parts: {path!r}")
    params += [None] * (3 - len(params))
    return params[0], params[1], params[2]


def selection_details(selection: Selection, farmer_data) -> dict:
    """
    Header information shown above the analytics chart.

    Returns:
        dict with label, crop_type, soil_type and area_ha.

    Raises:
        NotFound: for an unknown plot.
    """
    if selection.kind == PLOT:
        plot = farmer_data.find_plot(selection.plot_id)
        if plot is None:
            raise NotFound(f"Plot {selection.plot_id} not found.")
        return {
            "label": f"Plot {plot.plot_id}",
            "crop_type": plot.crop_type,
            "soil_type": plot.soil_type,
            "area_ha": plot.area_ha,
        }
    if selection.kind == PIXEL:
        row, col = selection.pixel
        grid = farmer_data.grid
        land_use = farmer_data.land_use
        soil_map = farmer_data.soil_map
        return {
            "label": f"Pixel {row:03d}{col:03d}",
            "crop_type": land_use[row][col] if land_use else None,
            "soil_type": soil_map[row][col] if soil_map else None,
            "area_ha": round(grid.pixel_area_ha(row, col), 2),
        }
    return {"label": "All pixels", "crop_type": None, "soil_type": None, "area_ha": None}


# Crop names as they appear in the plot registry
_CROP_CATEGORIES = {
    "Snijmais": "corn",
    "Mais CCM": "corn",
    "Cons. en industrieaardappelen.": "potato",
    "Luzerne.": "alfalfa",
    "Winter Tarwe": "wheat",
}


def crop_category(crop_type: Optional[str]) -> str:
    """Icon category for a crop name; 'generic' for anything unknown."""
    if not crop_type:
        return "generic"
    return _CROP_CATEGORIES.get(str(crop_type).strip(), "generic")
