"""
Interactive map window for plot and pixel selection.

This module provides a Matplotlib-based window showing the farm's plots,
the deficit overlay and the pixel grid above the analytics chart of the
current selection. Clicking a plot or (in pixel mode) a grid cell
navigates to it; clicking a sprinkling bar opens the edit panel.
"""

import matplotlib.pyplot as plt
from matplotlib.widgets import Button, TextBox
from shapely.geometry import Point

from ..analysis.selection import Selection
from ..visualization.plots import plot_analytics, plot_deficit_map


class MapWindow:
    """
    Main window class for the map and analytics panels.

    Attributes:
        view: MapAndAnalytics controller
        fig: Matplotlib figure object
        ax: Map axes
        chart_ax: Analytics chart axes
        pixel_mode: Whether clicks select pixels instead of plots
    """

    # Figure-relative [left, bottom, width, height]
    MAP_RECT = [0.08, 0.38, 0.84, 0.58]
    CHART_RECT = [0.08, 0.08, 0.84, 0.22]

    def __init__(self, view, pixel_mode=False, basemap=False):
        """
        Initialize the map window.

        Args:
            view: MapAndAnalytics controller holding the loaded dataset
            pixel_mode: Start with the pixel overlay and grid visible
            basemap: Fetch OpenStreetMap tiles underneath the plots
        """
        self.view = view
        self.pixel_mode = pixel_mode
        self.basemap = basemap

        # Will be set in create_window()
        self.fig = None
        self.ax = None
        self.chart_ax = None
        self._chart_axes = []

        # Controls
        self.pixel_button = None
        self.clear_button = None
        self._editor_axes = []
        self._editor_widgets = {}

    def create_window(self):
        """
        Create the Matplotlib figure with map and chart axes.

        Returns:
            tuple: (fig, ax) Matplotlib figure and map axes
        """
        self.fig = plt.figure(figsize=(12, 12))
        self.ax = self.fig.add_axes(self.MAP_RECT)

        self.view.subscribe(self._on_view_change)
        self.render()
        return self.fig, self.ax

    def render(self):
        """Redraw map and chart for the current route."""
        self.ax.clear()
        rgba = None
        if self.pixel_mode:
            rgba = self.view.rasterizer.rgba(self.view.farmer_data.pixels_data, self.view.date)
        plot_deficit_map(
            self.view.farmer_data,
            rgba,
            selection=self.view.selection,
            ax=self.ax,
            pixel_mode=self.pixel_mode,
            basemap=self.basemap
        )
        details = self.view.details()
        self.ax.set_title(f"{details['label']} - {self.view.date}", fontsize=14)

        # The chart adds a twin axis, so rebuild the chart axes each time
        for chart_ax in self._chart_axes:
            chart_ax.remove()
        self.chart_ax = self.fig.add_axes(self.CHART_RECT)
        existing = set(self.fig.axes)
        if self.view.selection.is_none:
            self.chart_ax.axis('off')
            self.chart_ax.text(
                0.5, 0.5, f"{len(self.view.farmer_data.plots)} plots - select a plot or pixel",
                ha='center', va='center', transform=self.chart_ax.transAxes
            )
        else:
            plot_analytics(self.view.series(), ax=self.chart_ax)
        self._chart_axes = [self.chart_ax] + [a for a in self.fig.axes if a not in existing]

        self.fig.canvas.draw_idle()

    def setup_controls(self):
        """
        Add control widgets and event handlers.

        Creates:
        - Pixel mode toggle button
        - Clear button to drop the selection
        - Click handler for map and chart
        """
        pixel_ax = self.fig.add_axes([0.80, 0.965, 0.12, 0.03])
        self.pixel_button = Button(pixel_ax, self._pixel_label(), color='white')
        self.pixel_button.on_clicked(self._on_pixel_toggle)

        clear_ax = self.fig.add_axes([0.66, 0.965, 0.12, 0.03])
        self.clear_button = Button(clear_ax, 'Clear', color='lightcoral')
        self.clear_button.on_clicked(self._on_clear_click)

        self._click_cid = self.fig.canvas.mpl_connect('button_press_event', self._on_click)
        self._close_cid = self.fig.canvas.mpl_connect('close_event', self._on_close)

    def _pixel_label(self):
        return 'Grid off' if self.pixel_mode else 'Grid on'

    def _on_pixel_toggle(self, event):
        """Switch between plot and pixel selection."""
        self.pixel_mode = not self.pixel_mode
        if self.pixel_button is not None:
            self.pixel_button.label.set_text(self._pixel_label())
        self.render()

    def _on_clear_click(self, event):
        """Return to the unselected view."""
        self.view.select(Selection.none())

    def _on_view_change(self, view):
        if self.fig is not None:
            self.render()

    def _on_click(self, event):
        """Route clicks on the map or chart."""
        if event.inaxes is self.ax:
            self._on_map_click(event.ydata, event.xdata)
        elif event.inaxes in self._chart_axes and not self.view.selection.is_none:
            self._on_chart_click(event.xdata)

    def _on_map_click(self, lat, lng):
        """
        Select the pixel (pixel mode) or plot under a map click.

        In pixel mode a click inside the grid selects the cell; a click
        outside it still selects a plot there.
        """
        if lat is None or lng is None:
            return
        if self.pixel_mode:
            index = self.view.farmer_data.grid.resolve_click(lat, lng)
            if index is not None:
                self.view.select(Selection.for_pixel(*index))
                return

        point = Point(lng, lat)
        for plot in self.view.farmer_data.plots:
            if plot.geometry.covers(point):
                self.view.select(Selection.for_plot(plot.plot_id))
                return

    def _on_chart_click(self, x):
        """Open the sprinkling editor for the day bar nearest to x."""
        if x is None or self.view.dialog.is_open:
            return
        series = self.view.series()
        day_index = int(round(x))
        if not 0 <= day_index < len(series):
            return
        self.view.request_sprinkling_edit(day_index)
        self._show_sprinkling_editor(series[day_index].date)

    def _show_sprinkling_editor(self, day_label):
        """Display the sprinkling edit panel."""
        self._hide_sprinkling_editor()

        panel_ax = self.fig.add_axes([0.3, 0.4, 0.4, 0.16])
        panel_ax.set_xlim(0, 1)
        panel_ax.set_ylim(0, 1)
        panel_ax.axis('off')
        rect = plt.Rectangle((0, 0), 1, 1, transform=panel_ax.transAxes,
                             facecolor='white', edgecolor='#1565c0', linewidth=2)
        panel_ax.add_patch(rect)
        panel_ax.text(0.5, 0.8, f"Sprinkling on {day_label}", fontsize=12,
                      fontweight='bold', ha='center', color='#1565c0')

        text_ax = self.fig.add_axes([0.45, 0.47, 0.15, 0.04])
        text_box = TextBox(text_ax, 'mm ', initial=str(self.view.dialog.value))

        ok_ax = self.fig.add_axes([0.36, 0.415, 0.12, 0.04])
        ok_button = Button(ok_ax, 'Update', color='lightgreen')
        ok_button.on_clicked(self._on_editor_confirm)

        cancel_ax = self.fig.add_axes([0.52, 0.415, 0.12, 0.04])
        cancel_button = Button(cancel_ax, 'Cancel')
        cancel_button.on_clicked(self._on_editor_cancel)

        self._editor_axes = [panel_ax, text_ax, ok_ax, cancel_ax]
        self._editor_widgets = {'text': text_box, 'ok': ok_button, 'cancel': cancel_button}
        self.fig.canvas.draw_idle()

    def _hide_sprinkling_editor(self):
        for editor_ax in self._editor_axes:
            editor_ax.remove()
        self._editor_axes = []
        self._editor_widgets = {}
        if self.fig is not None:
            self.fig.canvas.draw_idle()

    def _on_editor_confirm(self, event):
        text_box = self._editor_widgets.get('text')
        try:
            if text_box is not None:
                self.view.dialog.set_value(text_box.text)
        except ValueError as e:
            print(f"[MapWindow] Invalid sprinkling value: {e}")
            return
        self._hide_sprinkling_editor()
        self.view.dialog.confirm()

    def _on_editor_cancel(self, event):
        self._hide_sprinkling_editor()
        self.view.dialog.cancel()

    def _on_close(self, event):
        """Figure close handler: resolve any open edit as cancelled."""
        self.view.dialog.cancel()

    def show(self):
        """Display the map window."""
        plt.show()
