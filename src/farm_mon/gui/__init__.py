"""GUI module for the interactive deficit map and analytics view."""

from .map_window import MapWindow
from .orchestrator import MapAndAnalytics
from .raster_overlay import HeatmapRasterizer
from .sprinkling_dialog import SprinklingDialog

__all__ = ['MapWindow', 'MapAndAnalytics', 'HeatmapRasterizer', 'SprinklingDialog']
