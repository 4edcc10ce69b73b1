"""
GUI orchestrator - connects navigation to the analytics view.

Flow:
1) A route (/map/<date>/<type>/<id>) arrives from a click or the CLI
2) The route is resolved into a selection, falling back to the
   unselected view on malformed or unknown selections
3) The view exposes overlay, series, current values and plot table
4) Sprinkling edits go through the dialog and replace the override store
"""

from __future__ import annotations

from concurrent.futures import Future
from typing import Any, Callable, Dict, List, Optional, Tuple

from .raster_overlay import HeatmapRasterizer
from .sprinkling_dialog import SprinklingDialog, validate_sprinkling
from ..analysis.overrides import SprinklingOverrideStore, override_key
from ..analysis.projector import (
    DayPoint,
    current_values,
    plot_summary_table,
    project_series,
    summarize_pixels,
)
from ..analysis.selection import (
    Selection,
    center_of,
    check_selection,
    parse_route,
    resolve_selection,
    selection_details,
    selection_route,
)
from ..errors import InvalidSelection


def run_gui_mode(data_dir: str, route: str = None):
    """Entry point called by app.py."""
    from .map_window import MapWindow
    from ..data.dataset import load_farmer_data

    farmer_data = load_farmer_data(data_dir)
    view = MapAndAnalytics(farmer_data)
    if route:
        view.navigate(route)

    window = MapWindow(view)
    window.create_window()
    window.setup_controls()
    window.show()
    return view


class MapAndAnalytics:
    """Orchestrates route → selection → analytics for one loaded dataset."""

    def __init__(
        self,
        farmer_data,
        rasterizer: Optional[HeatmapRasterizer] = None,
        dialog: Optional[SprinklingDialog] = None
    ):
        self.farmer_data = farmer_data
        self.rasterizer = rasterizer or HeatmapRasterizer()
        self.dialog = dialog or SprinklingDialog()
        self.overrides = SprinklingOverrideStore()

        self.date: str = farmer_data.default_date
        self.selection: Selection = Selection.none()
        self.route: str = selection_route(self.date)

        self._listeners: List[Callable[["MapAndAnalytics"], None]] = []

    def subscribe(self, callback: Callable[["MapAndAnalytics"], None]):
        """Registers a callback run after every navigation or edit."""
        self._listeners.append(callback)

    def _notify(self):
        for callback in self._listeners:
            callback(self)

    def _show(self, date: str, selection: Selection) -> str:
        self.date = date
        self.selection = selection
        self.route = selection_route(date, selection)
        self._notify()
        return self.route

    def navigate(self, path: str) -> str:
        """
        Moves the view to a route.

        Returns:
            The route actually shown. Routes for another date redirect to
            the loaded date; malformed or unknown selections redirect to
            the unselected view.
        """
        default_date = self.farmer_data.default_date
        try:
            date, selection_type, selection_id = parse_route(path)
        except InvalidSelection as e:
            print(f"[navigate] {e}. Showing {default_date}.")
            return self._show(default_date, Selection.none())

        if not self.farmer_data.is_date_loaded(date):
            if date:
                print(f"[navigate] Date {date} not loaded. Redirecting to {default_date}.")
            return self._show(default_date, Selection.none())

        try:
            selection = resolve_selection(selection_type, selection_id)
        except InvalidSelection as e:
            print(f"[navigate] Invalid selection: {e}")
            return self._show(date, Selection.none())

        is_valid, error_msg = check_selection(selection, self.farmer_data)
        if not is_valid:
            print(f"[navigate] {error_msg}")
            return self._show(date, Selection.none())

        return self._show(date, selection)

    def select(self, selection: Selection) -> str:
        """Navigates to a selection on the current date."""
        return self.navigate(selection_route(self.date, selection))

    def overlay(self) -> str:
        """Deficit overlay data URI for the current date."""
        return self.rasterizer.overlay(self.farmer_data.pixels_data, self.date)

    def center(self) -> Optional[Tuple[float, float]]:
        return center_of(self.selection, self.farmer_data)

    def details(self) -> Dict[str, Any]:
        return selection_details(self.selection, self.farmer_data)

    def series(self) -> List[DayPoint]:
        if self.selection.is_none:
            return []
        return project_series(self.farmer_data, self.selection, self.overrides)

    def current(self) -> Dict[str, float]:
        return current_values(self.series(), self.date)

    def plot_table(self) -> List[dict]:
        return plot_summary_table(self.farmer_data, self.date, self.overrides)

    def summary(self) -> Optional[Dict[str, dict]]:
        return summarize_pixels(self.farmer_data, self.date)

    def _check_day_index(self, day_index: int):
        days = len(self.series())
        if not 0 <= day_index < days:
            raise ValueError(f"Day index {day_index} outside series of {days} days")

    def set_sprinkling(self, day_index: int, value: float):
        """
        Stores a sprinkling value for the current selection.

        Raises:
            ValueError: when nothing is selected, the day index is outside
                the selection's series, or the value is not a finite
                amount >= 0.
        """
        if self.selection.is_none:
            raise ValueError("Select a plot or pixel before editing sprinkling")
        self._check_day_index(day_index)
        value = validate_sprinkling(value)
        key = override_key(self.selection.identity, day_index)
        self.overrides = self.overrides.set(key, value)
        self._notify()

    def request_sprinkling_edit(self, day_index: int) -> Future:
        """
        Opens the sprinkling dialog for one day of the current selection.

        The override store is replaced when the returned future resolves
        with a changed value; a cancelled edit leaves it untouched.

        Raises:
            ValueError: when nothing is selected or the day index is outside
                the selection's series.
            RuntimeError: if another edit is still open.
        """
        if self.selection.is_none:
            raise ValueError("Select a plot or pixel before editing sprinkling")
        self._check_day_index(day_index)

        key = override_key(self.selection.identity, day_index)
        previous = self.overrides.get(key)
        future = self.dialog.request(previous)

        def _apply(done: Future):
            value = done.result()
            if value == previous:
                return
            self.overrides = self.overrides.set(key, value)
            self._notify()

        future.add_done_callback(_apply)
        return future
