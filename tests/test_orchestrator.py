"""Tests for the map and analytics orchestrator."""

import pytest

from farm_mon.analysis.selection import Selection
from farm_mon.gui.orchestrator import MapAndAnalytics


@pytest.fixture
def view(farmer_data):
    return MapAndAnalytics(farmer_data)


def test_initial_state(view):
    assert view.date == "2019-07-04"
    assert view.selection.is_none
    assert view.route == "/map/2019-07-04"
    assert view.series() == []


def test_navigate_to_plot(view):
    assert view.navigate("/map/2019-07-04/plot/P1") == "/map/2019-07-04/plot/P1"
    assert view.selection == Selection.for_plot("P1")
    assert len(view.series()) == 3
    assert view.details()["label"] == "Plot P1"


def test_navigate_to_pixel(view):
    view.navigate("/map/2019-07-04/pixel/1-2")
    assert view.selection.pixel == (1, 2)
    assert view.current()["deficit"] == 35.0
    lat, lng = view.center()
    assert lat == pytest.approx(52.015)
    assert lng == pytest.approx(5.025)


@pytest.mark.parametrize("path", ["/map", "/map/2019-07-03/plot/P1", "/elsewhere"])
def test_other_dates_redirect_to_loaded_date(view, path):
    assert view.navigate(path) == "/map/2019-07-04"
    assert view.selection.is_none


@pytest.mark.parametrize("path", [
    "/map/2019-07-04/pixel/abc",
    "/map/2019-07-04/field/P1",
    "/map/2019-07-04/plot/P9",
    "/map/2019-07-04/pixel/5-5",
])
def test_bad_selections_fall_back_to_unselected(view, path, capsys):
    view.navigate("/map/2019-07-04/plot/P1")
    assert view.navigate(path) == "/map/2019-07-04"
    assert view.selection.is_none
    assert "[navigate]" in capsys.readouterr().out


def test_listeners_are_notified(view):
    seen = []
    view.subscribe(lambda v: seen.append(v.route))
    view.select(Selection.for_plot("P2"))
    assert seen == ["/map/2019-07-04/plot/P2"]


def test_overlay_is_data_uri(view):
    assert view.overlay().startswith("data:image/png;base64,")
    view.overlay()
    assert view.rasterizer.renders == 1


def test_set_sprinkling(view):
    view.select(Selection.for_plot("P1"))
    view.set_sprinkling(1, 5)
    assert [p.sprinkling for p in view.series()] == [0, 5, 0]
    assert [p.deficit for p in view.series()] == [10, 20, 30]


def test_set_sprinkling_requires_selection(view):
    with pytest.raises(ValueError):
        view.set_sprinkling(0, 5)
    with pytest.raises(ValueError):
        view.request_sprinkling_edit(0)


def test_sprinkling_edit_confirm(view):
    view.select(Selection.for_plot("P1"))
    store = view.overrides
    notified = []
    view.subscribe(lambda v: notified.append(True))

    future = view.request_sprinkling_edit(2)
    view.dialog.confirm(8)

    assert future.result() == 8
    assert view.overrides is not store
    assert view.current()["sprinkling"] == 8
    assert notified == [True]


def test_sprinkling_edit_cancel_keeps_store(view):
    view.select(Selection.for_pixel(0, 0))
    store = view.overrides
    view.request_sprinkling_edit(0)
    view.dialog.cancel()
    assert view.overrides is store


def test_sprinkling_follows_selection(view):
    view.select(Selection.for_plot("P1"))
    view.set_sprinkling(0, 3)
    view.select(Selection.for_plot("P2"))
    assert [p.sprinkling for p in view.series()] == [0, 0]
    view.select(Selection.for_plot("P1"))
    assert view.series()[0].sprinkling == 3


def test_plot_table_and_summary(view):
    rows = view.plot_table()
    assert [r["plot_id"] for r in rows] == ["P1", "P2"]
    assert view.summary()["deficit"]["count"] == 5


@pytest.mark.parametrize("value", [-5, float("nan"), float("inf"), "abc"])
def test_set_sprinkling_rejects_invalid_values(view, value):
    view.select(Selection.for_plot("P1"))
    with pytest.raises(ValueError):
        view.set_sprinkling(0, value)
    assert len(view.overrides) == 0


@pytest.mark.parametrize("day_index", [-1, 3, 99])
def test_set_sprinkling_rejects_days_outside_series(view, day_index):
    view.select(Selection.for_plot("P1"))
    assert len(view.series()) == 3
    with pytest.raises(ValueError):
        view.set_sprinkling(day_index, 7)
    assert len(view.overrides) == 0
    assert [p.sprinkling for p in view.series()] == [0, 0, 0]


def test_sprinkling_edit_rejects_days_outside_series(view):
    view.select(Selection.for_plot("P2"))
    with pytest.raises(ValueError):
        view.request_sprinkling_edit(2)
    assert not view.dialog.is_open
