"""
Farm dataset model and local loader.

A dataset is loaded once per session and treated as read-only afterwards:
land use and soil grids, per-day pixel analytics, the plot polygons and the
per-plot analytics, all for a single loaded date.
"""

import json
import os
from typing import Any, Dict, List, NamedTuple, Optional

from shapely.geometry import shape
from shapely.geometry.base import BaseGeometry

from ..analysis.grid import PixelGrid
from ..config import DATA_FILES

PIXEL_METRICS = [
    "measuredPrecipitation",
    "availableSoilWater",
    "desiredSoilWater",
    "evapotranspiration",
    "deficit",
]


class PlotFeature(NamedTuple):
    plot_id: str
    crop_type: Optional[str]
    soil_type: Optional[str]
    area_ha: Optional[float]
    farmer_name: Optional[str]
    geometry: BaseGeometry


def plot_feature_from_geojson(feature: dict) -> Optional[PlotFeature]:
    """
    Converts a GeoJSON feature into a PlotFeature.

    Returns:
        PlotFeature, or None if the feature carries no plotId.
    """
    props = feature.get("properties") or {}
    plot_id = props.get("plotId")
    if not plot_id:
        return None

    return PlotFeature(
        plot_id=str(plot_id),
        crop_type=props.get("cropTypes"),
        soil_type=props.get("soilType"),
        area_ha=props.get("plotSizeHa"),
        farmer_name=props.get("farmerName"),
        geometry=shape(feature["geometry"]),
    )


class FarmerData:
    """
    Read-only view over one farm's dataset for its single loaded date.

    Attributes:
        default_date: ISO date (YYYY-MM-DD) the dataset was produced for
        pixels_data: dict with dimensions, boundingBox, analytics, landUse, soilMap
        plots: PlotFeature list, in file order
        plots_analytics: plotId -> list of per-day analytics dicts
        grid: PixelGrid derived from pixels_data
    """

    def __init__(
        self,
        default_date: str,
        pixels_data: Dict[str, Any],
        plots: List[PlotFeature],
        plots_analytics: Dict[str, List[dict]]
    ):
        self.default_date = default_date
        self.pixels_data = pixels_data
        self.plots = list(plots)
        self.plots_analytics = plots_analytics
        self.grid = PixelGrid.from_pixels_data(pixels_data)
        self._plots_by_id = {p.plot_id: p for p in self.plots}

    @property
    def pixel_analytics(self) -> List[dict]:
        return self.pixels_data.get("analytics", [])

    @property
    def land_use(self) -> Optional[list]:
        return self.pixels_data.get("landUse")

    @property
    def soil_map(self) -> Optional[list]:
        return self.pixels_data.get("soilMap")

    def is_date_loaded(self, date: Optional[str]) -> bool:
        """True only for the dataset's own date; routing redirects otherwise."""
        return bool(date) and date == self.default_date

    def find_plot(self, plot_id: str) -> Optional[PlotFeature]:
        return self._plots_by_id.get(plot_id)

    def pixel_analytics_for(self, date: str) -> Optional[dict]:
        """Day entry of the pixel analytics whose `time` equals date."""
        for day in self.pixel_analytics:
            if day.get("time") == date:
                return day
        return None


def build_farmer_data(
    defaults: dict,
    land_use: list,
    soil_map: list,
    pixels_data: dict,
    plots_analytics: dict,
    plots_geojson: dict
) -> FarmerData:
    """
    Assembles a FarmerData from already-parsed dataset documents.

    Features without a plotId are dropped. Land use and soil map are
    attached to the pixels data so pixel lookups find them in one place.

    Raises:
        ValueError: if defaults has no defaultDate.
        DegenerateGrid: if the pixel grid has zero extent.
    """
    default_date = defaults.get("defaultDate")
    if not default_date:
        raise ValueError("defaults is missing 'defaultDate'")

    pixels_data = dict(pixels_data)
    pixels_data["landUse"] = land_use
    pixels_data["soilMap"] = soil_map

    plots = []
    skipped = 0
    for feature in plots_geojson.get("features", []):
        plot = plot_feature_from_geojson(feature)
        if plot is None:
            skipped += 1
            continue
        plots.append(plot)

    if skipped:
        print(f"[build_farmer_data] Skipped {skipped} features without plotId")

    return FarmerData(
        default_date=default_date,
        pixels_data=pixels_data,
        plots=plots,
        plots_analytics=plots_analytics or {},
    )


def _read_json(path: str) -> Any:
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def load_farmer_data(data_dir: str) -> FarmerData:
    """
    Loads a dataset from a local directory.

    The directory holds defaults.json plus the land use, soil map, pixels,
    plot analytics and plot GeoJSON documents named after the default date
    (see config.DATA_FILES).

    Args:
        data_dir: Directory containing the dataset files.

    Returns:
        FarmerData for the date named in defaults.json.
    """
    defaults = _read_json(os.path.join(data_dir, DATA_FILES["defaults"]))
    default_date = defaults.get("defaultDate")
    if not default_date:
        raise ValueError(f"{DATA_FILES['defaults']} is missing 'defaultDate'")
    date_token = default_date.replace("-", "")

    docs = {}
    for key in ["landUse", "soilMap", "pixelsData", "plotsAnalytics", "plotsGeoJSON"]:
        path = os.path.join(data_dir, DATA_FILES[key].format(date=date_token))
        docs[key] = _read_json(path)

    print(f"[load_farmer_data] Loaded dataset for {default_date} from {data_dir}")
    return build_farmer_data(
        defaults,
        docs["landUse"],
        docs["soilMap"],
        docs["pixelsData"],
        docs["plotsAnalytics"],
        docs["plotsGeoJSON"],
    )
