"""
Dataset model and loading for farm_mon.

This module provides:
- FarmerData / PlotFeature records (dataset.py)
- Local JSON dataset loading (dataset.py)
"""

from .dataset import (
    FarmerData,
    PlotFeature,
    PIXEL_METRICS,
    build_farmer_data,
    load_farmer_data,
    plot_feature_from_geojson,
)

__all__ = [
    'FarmerData',
    'PlotFeature',
    'PIXEL_METRICS',
    'build_farmer_data',
    'load_farmer_data',
    'plot_feature_from_geojson',
]
