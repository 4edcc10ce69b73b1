"""Shared test fixtures: a small synthetic farm dataset."""

import copy
import json

import pytest

DEFAULT_DATE = "2019-07-04"
DAYS = ["2019-07-02", "2019-07-03", "2019-07-04"]

# 2 rows (lat) x 3 cols (lng), 0.01 degree cells
BOUNDING_BOX = [5.03, 52.0, 5.0, 52.02]
WIDTH, HEIGHT = 3, 2


def _day_grid(offset):
    return [
        [offset + 0, offset + 1, None],
        [offset + 3, offset + 4, offset + 5],
    ]


def _square(lng, lat, size=0.01):
    return {
        "type": "Polygon",
        "coordinates": [[
            [lng, lat], [lng + size, lat], [lng + size, lat + size], [lng, lat + size], [lng, lat]
        ]],
    }


SAMPLE_DOCS = {
    "defaults": {"defaultDate": DEFAULT_DATE},
    "landUse": [["gras", "mais", "bieten"], ["granen", "gras", "mais"]],
    "soilMap": [["zand", "klei", "veen"], ["zand", "zand", "klei"]],
    "pixelsData": {
        "dimensions": [WIDTH, HEIGHT],
        "boundingBox": BOUNDING_BOX,
        "analytics": [
            {
                "time": day,
                "measuredPrecipitation": _day_grid(i),
                "availableSoilWater": _day_grid(100 + i),
                "desiredSoilWater": _day_grid(200 + i),
                "evapotranspiration": _day_grid(300 + i),
                "deficit": _day_grid(10 * (i + 1)),
            }
            for i, day in enumerate(DAYS)
        ],
    },
    "plotsAnalytics": {
        "P1": [
            {
                "date": day,
                "measuredPrecipitation": [1.0, 0.0, 2.5][i],
                "availableSoilWater": [80.0, 75.0, 70.0][i],
                "desiredSoilWater": [90.0, 90.0, 90.0][i],
                "evapotranspiration": [3.0, 4.0, 5.0][i],
                "deficit": [10, 20, 30][i],
            }
            for i, day in enumerate(DAYS)
        ],
        "P2": [
            {
                "date": day,
                "measuredPrecipitation": 0.0,
                "availableSoilWater": 60.0,
                "desiredSoilWater": 85.0,
                "evapotranspiration": 4.5,
                "deficit": 25.0,
            }
            for day in DAYS[:2]
        ],
    },
    "plotsGeoJSON": {
        "type": "FeatureCollection",
        "features": [
            {
                "type": "Feature",
                "properties": {
                    "plotId": "P1",
                    "cropTypes": "Snijmais",
                    "soilType": "Zand",
                    "plotSizeHa": 7.5,
                    "farmerName": "Jansen",
                },
                "geometry": _square(5.0, 52.0),
            },
            {
                "type": "Feature",
                "properties": {
                    "plotId": "P2",
                    "cropTypes": "Winter Tarwe",
                    "soilType": "Klei",
                    "plotSizeHa": 3.2,
                    "farmerName": "de Vries",
                },
                "geometry": _square(5.02, 52.01),
            },
            {
                "type": "Feature",
                "properties": {"cropTypes": "Gras"},
                "geometry": _square(5.01, 52.01),
            },
        ],
    },
}


@pytest.fixture
def sample_docs():
    return copy.deepcopy(SAMPLE_DOCS)


@pytest.fixture
def farmer_data(sample_docs):
    from farm_mon.data.dataset import build_farmer_data
    return build_farmer_data(
        sample_docs["defaults"],
        sample_docs["landUse"],
        sample_docs["soilMap"],
        sample_docs["pixelsData"],
        sample_docs["plotsAnalytics"],
        sample_docs["plotsGeoJSON"],
    )


@pytest.fixture
def data_dir(tmp_path, sample_docs):
    """Dataset written to disk with the file names load_farmer_data expects."""
    from farm_mon.config import DATA_FILES
    token = DEFAULT_DATE.replace("-", "")
    for key, doc in sample_docs.items():
        path = tmp_path / DATA_FILES[key].format(date=token)
        path.write_text(json.dumps(doc), encoding="utf-8")
    return tmp_path
