"""
Analytics projection for a selected plot or pixel.

Builds the per-day series shown in the analytics chart, with sprinkling
values taken from the override store, and the single-day snapshot for the
currently displayed date. Dates are compared at day precision on their
DAY_FORMAT rendering, since the source data is daily.
"""

from collections import namedtuple
from datetime import date as date_type, datetime
from typing import Dict, List, Optional, Union

import numpy as np

from .grid import as_float_grid, cell_value
from .overrides import SprinklingOverrideStore, override_key
from .selection import PIXEL, PLOT, Selection, validate_selection
from ..config import DAY_FORMAT

DayPoint = namedtuple(
    'DayPoint',
    ['date', 'rainfall', 'sprinkling', 'moisture', 'desired_moisture', 'evapotranspiration', 'deficit']
)

# DayPoint field -> analytics field
METRIC_FIELDS = {
    'rainfall': 'measuredPrecipitation',
    'moisture': 'availableSoilWater',
    'desired_moisture': 'desiredSoilWater',
    'evapotranspiration': 'evapotranspiration',
    'deficit': 'deficit',
}

CURRENT_FIELDS = ['rainfall', 'sprinkling', 'evapotranspiration', 'deficit']

DateLike = Union[str, date_type, datetime]


def format_day(value: DateLike) -> str:
    """
    Renders a date, datetime or ISO string at day precision (dd/mm/yyyy).

    Time of day and timezone are ignored; the calendar date as written is kept.
    """
    # datetime is a date subclass
    if isinstance(value, date_type):
        return value.strftime(DAY_FORMAT)

    text = str(value).strip()
    if 'T' in text:
        parsed = datetime.fromisoformat(text.replace('Z', '+00:00'))
    else:
        parsed = datetime.strptime(text[:10], '%Y-%m-%d')
    return parsed.strftime(DAY_FORMAT)


def _plot_series(farmer_data, selection: Selection, overrides: SprinklingOverrideStore) -> List[DayPoint]:
    identity = selection.identity
    series = []
    for index, day in enumerate(farmer_data.plots_analytics[selection.plot_id]):
        metrics = {name: cell_value(day.get(field)) for name, field in METRIC_FIELDS.items()}
        series.append(DayPoint(
            date=format_day(day['date']),
            sprinkling=overrides.get(override_key(identity, index)),
            **metrics
        ))
    return series


def _pixel_value(day: dict, field: str, row: int, col: int) -> Optional[float]:
    grid = day.get(field)
    if grid is None:
        return None
    return cell_value(grid[row][col])


def _pixel_series(farmer_data, selection: Selection, overrides: SprinklingOverrideStore) -> List[DayPoint]:
    identity = selection.identity
    row, col = selection.pixel
    series = []
    for index, day in enumerate(farmer_data.pixel_analytics):
        metrics = {name: _pixel_value(day, field, row, col) for name, field in METRIC_FIELDS.items()}
        series.append(DayPoint(
            date=format_day(day['time']),
            sprinkling=overrides.get(override_key(identity, index)),
            **metrics
        ))
    return series


def project_series(
    farmer_data,
    selection: Selection,
    overrides: SprinklingOverrideStore = None
) -> List[DayPoint]:
    """
    Per-day analytics of a plot or pixel in stored (chronological) order.

    Args:
        farmer_data: Loaded FarmerData.
        selection: Plot or pixel selection.
        overrides: Sprinkling values; every day defaults to 0 without one.

    Returns:
        List of DayPoint, one per stored day.

    Raises:
        ValueError: for an empty selection (use summarize_pixels instead).
        NotFound: if the plot or pixel is not in the dataset.
    """
    if overrides is None:
        overrides = SprinklingOverrideStore()

    if selection.kind not in (PLOT, PIXEL):
        raise ValueError("project_series needs a plot or pixel selection")

    validate_selection(selection, farmer_data)

    if selection.kind == PLOT:
        return _plot_series(farmer_data, selection, overrides)
    return _pixel_series(farmer_data, selection, overrides)


def snapshot(series: List[DayPoint], day: DateLike) -> Optional[DayPoint]:
    """The series entry for a day, or None if that day has no sample."""
    wanted = format_day(day)
    for point in series:
        if point.date == wanted:
            return point
    return None


def current_values(series: List[DayPoint], day: DateLike) -> Dict[str, float]:
    """
    Values shown in the 'current' badges for a day.

    Returns:
        dict with rainfall, sprinkling, evapotranspiration and deficit;
        each is 0 when the day has no sample or the value is absent.
    """
    point = snapshot(series, day)
    values = {}
    for field in CURRENT_FIELDS:
        value = getattr(point, field) if point is not None else None
        values[field] = value if value is not None else 0
    return values


def plot_summary_table(farmer_data, day: DateLike, overrides: SprinklingOverrideStore = None) -> List[dict]:
    """
    One row per plot with its values for a day (the plot list view).

    Plots without analytics for that day keep None metrics and 0 sprinkling.
    """
    if overrides is None:
        overrides = SprinklingOverrideStore()
    wanted = format_day(day)

    rows = []
    for plot in farmer_data.plots:
        analytics = None
        sprinkling = 0
        for index, entry in enumerate(farmer_data.plots_analytics.get(plot.plot_id) or []):
            if format_day(entry['date']) == wanted:
                analytics = entry
                sprinkling = overrides.get(override_key(plot.plot_id, index))
                break
        analytics = analytics or {}
        rows.append({
            'plot_id': plot.plot_id,
            'farmer_name': plot.farmer_name,
            'crop_type': plot.crop_type,
            'moisture': cell_value(analytics.get('availableSoilWater')),
            'deficit': cell_value(analytics.get('deficit')),
            'evapotranspiration': cell_value(analytics.get('evapotranspiration')),
            'sprinkling': sprinkling,
        })
    return rows


def summarize_pixels(farmer_data, day: DateLike) -> Optional[Dict[str, dict]]:
    """
    Whole-grid statistics for the unselected view.

    Returns:
        metric -> {mean, min, max, count} over cells with data, or None
        when the dataset has no pixel analytics for the day.
    """
    wanted = format_day(day)
    entry = None
    for candidate in farmer_data.pixel_analytics:
        if format_day(candidate['time']) == wanted:
            entry = candidate
            break
    if entry is None:
        return None

    summary = {}
    for name, field in METRIC_FIELDS.items():
        if entry.get(field) is None:
            continue
        values = as_float_grid(entry[field])
        valid = values[~np.isnan(values)]
        if valid.size == 0:
            summary[name] = {'mean': None, 'min': None, 'max': None, 'count': 0}
            continue
        summary[name] = {
            'mean': float(np.mean(valid)),
            'min': float(np.min(valid)),
            'max': float(np.max(valid)),
            'count': int(valid.size),
        }
    return summary
