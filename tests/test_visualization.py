import matplotlib
matplotlib.use('Agg')  # Non-interactive backend
import matplotlib.pyplot as plt
import pytest
from unittest.mock import patch

from farm_mon.analysis.projector import project_series
from farm_mon.analysis.selection import Selection
from farm_mon.gui.orchestrator import MapAndAnalytics
from farm_mon.gui.raster_overlay import HeatmapRasterizer
from farm_mon.visualization.plots import plot_analytics, plot_deficit_map
from farm_mon.visualization.reports import generate_report


def test_plot_analytics(farmer_data, tmp_path):
    series = project_series(farmer_data, Selection.for_plot("P1"))
    out = tmp_path / "chart.png"
    fig = plot_analytics(series, title="Plot P1", save_path=str(out))

    assert out.exists()
    # Bars on the main axes, moisture on a twin axis
    assert len(fig.axes) == 2
    labels = [t.get_text() for t in fig.axes[0].get_xticklabels()]
    assert labels == ["02/07/2019", "03/07/2019", "04/07/2019"]
    plt.close(fig)


def test_plot_analytics_with_absent_values(farmer_data):
    series = project_series(farmer_data, Selection.for_pixel(0, 2))
    fig = plot_analytics(series)
    plt.close(fig)


def test_plot_deficit_map(farmer_data, tmp_path):
    rgba = HeatmapRasterizer().rgba(farmer_data.pixels_data, "2019-07-04")
    out = tmp_path / "map.png"
    fig = plot_deficit_map(farmer_data, rgba, selection=Selection.for_pixel(1, 2), save_path=str(out))

    ax = fig.axes[0]
    assert out.exists()
    assert len(ax.get_images()) == 1
    assert ax.get_xlim() == pytest.approx((5.0, 5.03))
    assert ax.get_ylim() == pytest.approx((52.0, 52.02))
    plt.close(fig)


def test_plot_deficit_map_without_pixels(farmer_data):
    fig = plot_deficit_map(farmer_data, None, selection=Selection.for_plot("P1"), pixel_mode=False)
    assert len(fig.axes[0].get_images()) == 0
    plt.close(fig)


def test_basemap_failure_is_reported(farmer_data, capsys):
    with patch('farm_mon.visualization.plots.cx.add_basemap', side_effect=Exception("offline")):
        fig = plot_deficit_map(farmer_data, None, basemap=True)
    assert "Could not load basemap: offline" in capsys.readouterr().out
    plt.close(fig)


def test_generate_report_unselected(farmer_data, capsys):
    view = MapAndAnalytics(farmer_data)
    generate_report(view)
    out = capsys.readouterr().out
    assert "ALL PIXELS" in out
    assert "2 PLOTS" in out


def test_generate_report_plot(farmer_data, capsys):
    view = MapAndAnalytics(farmer_data)
    view.navigate("/map/2019-07-04/plot/P1")
    generate_report(view)
    out = capsys.readouterr().out
    assert "PLOT P1" in out
    assert "Snijmais" in out
    assert "04/07/2019" in out


def test_plot_deficit_map_extent_covers_outer_plots(sample_docs):
    from farm_mon.data.dataset import build_farmer_data

    sample_docs["plotsGeoJSON"]["features"][1]["geometry"] = {
        "type": "Polygon",
        "coordinates": [[[5.04, 52.0], [5.05, 52.0], [5.05, 52.01], [5.04, 52.01], [5.04, 52.0]]],
    }
    data = build_farmer_data(
        sample_docs["defaults"], sample_docs["landUse"], sample_docs["soilMap"],
        sample_docs["pixelsData"], sample_docs["plotsAnalytics"], sample_docs["plotsGeoJSON"],
    )
    fig = plot_deficit_map(data, None)
    assert fig.axes[0].get_xlim() == pytest.approx((5.0, 5.05))
    assert fig.axes[0].get_ylim() == pytest.approx((52.0, 52.02))
    plt.close(fig)
