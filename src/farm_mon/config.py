import os

# Configuration
DATA_DIR_ENV = "FARM_MON_DATA_DIR"
DEFAULT_DATA_DIR = "data"

# Deficit overlay: light blue (no deficit) -> blue (500 mm deficit)
DEFICIT_DOMAIN = (0.0, 500.0)
DEFICIT_COLORS = ("#e3f2fd", "#2196f3")

# Day-precision format used to compare sample dates
DAY_FORMAT = "%d/%m/%Y"

# {date} is the loaded date without dashes, e.g. 20190704
DATA_FILES = {
    "defaults": "defaults.json",
    "landUse": "gwtf-land-use.json",
    "soilMap": "gwtf-soil-map.json",
    "pixelsData": "gwtf-pixels-{date}.json",
    "plotsAnalytics": "gwtf-plot-analytics-{date}.json",
    "plotsGeoJSON": "gwtf-plots-{date}.json",
}

LAND_USE_ORDER = [
    "gras",
    "mais",
    "aardappelen",
    "bieten",
    "granen",
    "overige landbouwgew",
    "boomteelt",
    "glastuinbouw",
    "boomgaard",
    "bollen",
    "loofbos",
    "naaldbos",
    "natte natuur",
    "droge natuur",
    "kale grond",
    "zoet water",
    "zout water",
    "stedelijk bebouwd",
    "donker naaldbos",
]


def get_data_dir():
    """Returns the dataset directory, overridable via FARM_MON_DATA_DIR."""
    return os.environ.get(DATA_DIR_ENV, DEFAULT_DATA_DIR)
