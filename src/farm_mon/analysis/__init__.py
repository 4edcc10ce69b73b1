from .grid import PixelGrid, normalize_bounds, as_float_grid, cell_value
from .selection import (
    Selection,
    resolve_selection,
    parse_pixel_id,
    check_selection,
    validate_selection,
    center_of,
    selection_route,
    parse_route,
    selection_details,
    crop_category
)
from .overrides import SprinklingOverrideStore, override_key
from .projector import (
    DayPoint,
    format_day,
    project_series,
    snapshot,
    current_values,
    plot_summary_table,
    summarize_pixels
)
