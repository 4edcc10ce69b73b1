import matplotlib.pyplot as plt
import numpy as np
import contextily as cx
from typing import List, Optional, Tuple

from ..analysis.projector import DayPoint
from ..analysis.selection import PIXEL, PLOT, Selection

# Chart palette
RAINFALL_COLOR = '#64b5f6'
SPRINKLING_COLOR = '#1565c0'
MOISTURE_COLOR = '#fb8c00'
DESIRED_MOISTURE_COLOR = '#00acc1'

# Map palette
GRID_COLOR = '#e0e0e0'
PLOT_COLOR = '#64b5f6'
SELECTED_COLOR = '#1976d2'
PLOT_FILL = '#80deea'

OSM_TILES = "https://tile.openstreetmap.org/{z}/{x}/{y}.png"


def _values(series: List[DayPoint], field: str) -> np.ndarray:
    return np.array([getattr(p, field) for p in series], dtype=float)


def plot_analytics(
    series: List[DayPoint],
    ax: Optional[plt.Axes] = None,
    title: str = None,
    figsize: Tuple[int, int] = (14, 4),
    save_path: str = None
) -> plt.Figure:
    """
    Draws the per-day analytics chart of a selection.

    Left axis: rainfall and sprinkling bars (mm), sprinkling bars labelled.
    Right axis: soil moisture (filled) and desired soil moisture (line).

    Args:
        series: DayPoint list from project_series().
        ax: Optional axes to draw into; a new figure is created otherwise.
        title: Optional chart title.
        figsize: Figure size when creating a new figure.
        save_path: Optional path to save the figure.

    Returns:
        The matplotlib Figure object.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    x = np.arange(len(series))
    labels = [p.date for p in series]

    rainfall = np.nan_to_num(_values(series, 'rainfall'))
    sprinkling = np.nan_to_num(_values(series, 'sprinkling'))

    ax.bar(x, rainfall, width=0.6, color=RAINFALL_COLOR, alpha=0.8, label='Rainfall (mm)')
    bars = ax.bar(x, sprinkling, width=0.4, color=SPRINKLING_COLOR, alpha=0.8, label='Sprinkling (mm)')
    for bar, value in zip(bars, sprinkling):
        ax.annotate(
            f'{value:g} mm',
            (bar.get_x() + bar.get_width() / 2, bar.get_height()),
            ha='center', va='bottom', fontsize=8, color=SPRINKLING_COLOR
        )
    ax.set_ylabel('mm', color=SPRINKLING_COLOR)
    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha='right', fontsize=8)
    ax.grid(True, alpha=0.3)

    moisture_ax = ax.twinx()
    moisture = _values(series, 'moisture')
    desired = _values(series, 'desired_moisture')
    moisture_ax.fill_between(x, moisture, color=MOISTURE_COLOR, alpha=0.3)
    moisture_ax.plot(x, moisture, color=MOISTURE_COLOR, label='Soil moisture (mm)')
    moisture_ax.plot(x, desired, color=DESIRED_MOISTURE_COLOR, label='Desired soil moisture (mm)')
    moisture_ax.set_ylabel('Soil moisture (mm)', color=MOISTURE_COLOR)

    handles, names = ax.get_legend_handles_labels()
    more_handles, more_names = moisture_ax.get_legend_handles_labels()
    ax.legend(handles + more_handles, names + more_names, loc='upper left', fontsize=8, ncol=4)

    if title:
        ax.set_title(title, fontsize=12, fontweight='bold')

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"[plot_analytics] Saved chart to {save_path}")

    return fig


def _draw_polygon(ax, polygon, **kwargs):
    xs, ys = polygon.exterior.xy
    return ax.fill(xs, ys, **kwargs)


def plot_deficit_map(
    farmer_data,
    rgba: Optional[np.ndarray],
    selection: Selection = None,
    ax: Optional[plt.Axes] = None,
    pixel_mode: bool = True,
    basemap: bool = False,
    figsize: Tuple[int, int] = (10, 10),
    save_path: str = None
) -> plt.Figure:
    """
    Draws plots, the deficit overlay and the reference grid.

    The overlay and grid are shown in pixel mode only, as in the web map.

    Args:
        farmer_data: Loaded FarmerData.
        rgba: Overlay from HeatmapRasterizer.rgba() (north-up), or None.
        selection: Current selection, highlighted on the map.
        ax: Optional axes to draw into.
        pixel_mode: Show overlay and grid lines.
        basemap: Fetch OpenStreetMap tiles underneath.
        save_path: Optional path to save the figure.
    """
    if ax is None:
        fig, ax = plt.subplots(figsize=figsize)
    else:
        fig = ax.figure

    grid = farmer_data.grid
    extent = [grid.lng_start, grid.lng_end, grid.lat_start, grid.lat_end]

    for plot in farmer_data.plots:
        selected = selection is not None and selection.kind == PLOT and selection.plot_id == plot.plot_id
        polygons = getattr(plot.geometry, 'geoms', [plot.geometry])
        for polygon in polygons:
            _draw_polygon(
                ax, polygon,
                facecolor=PLOT_FILL,
                edgecolor=SELECTED_COLOR if selected else PLOT_COLOR,
                linewidth=2 if selected else 1,
                alpha=0.6,
                zorder=2
            )

    if pixel_mode and rgba is not None:
        ax.imshow(rgba, extent=extent, origin='upper', alpha=0.5, zorder=3, interpolation='nearest')

    if pixel_mode:
        for line in grid.grid_lines():
            xs, ys = line.xy
            ax.plot(xs, ys, color=GRID_COLOR, linewidth=0.5, zorder=4)

    if selection is not None and selection.kind == PIXEL and grid.contains_index(*selection.pixel):
        xs, ys = grid.pixel_polygon(*selection.pixel).exterior.xy
        ax.plot(xs, ys, color=SELECTED_COLOR, linewidth=2, zorder=5)

    min_lng, min_lat, max_lng, max_lat = grid.bounds
    for plot in farmer_data.plots:
        x0, y0, x1, y1 = plot.geometry.bounds
        min_lng, min_lat = min(min_lng, x0), min(min_lat, y0)
        max_lng, max_lat = max(max_lng, x1), max(max_lat, y1)
    ax.set_xlim(min_lng, max_lng)
    ax.set_ylim(min_lat, max_lat)
    ax.set_xlabel('Longitude')
    ax.set_ylabel('Latitude')

    if basemap:
        _add_basemap(ax)

    if save_path:
        fig.savefig(save_path, dpi=150, bbox_inches='tight')
        print(f"[plot_deficit_map] Saved map to {save_path}")

    return fig


def _add_basemap(ax):
    """Add OpenStreetMap tiles underneath (axes are in WGS84)."""
    try:
        cx.add_basemap(
            ax,
            source=OSM_TILES,
            crs="EPSG:4326",
            attribution="© OpenStreetMap contributors",
            zorder=0
        )
    except Exception as e:
        print(f"Warning: Could not load basemap: {e}")
