import pytest

from farm_mon.gui.sprinkling_dialog import SprinklingDialog, validate_sprinkling


def test_confirm_resolves_with_new_value():
    dialog = SprinklingDialog()
    future = dialog.request(0)
    assert dialog.is_open
    assert dialog.value == 0

    dialog.confirm("12.5")
    assert not dialog.is_open
    assert future.done()
    assert future.result() == 12.5


def test_cancel_resolves_with_original_value():
    dialog = SprinklingDialog()
    future = dialog.request(7)
    dialog.set_value(20)
    dialog.cancel()
    assert future.result() == 7
    assert not dialog.is_open


def test_integral_values_become_int():
    dialog = SprinklingDialog()
    assert dialog.set_value("5.0") == 5
    assert isinstance(dialog.value, int)


@pytest.mark.parametrize("bad", ["-1", -0.5, "abc", "", "nan", "inf", float("-inf")])
def test_invalid_values(bad):
    dialog = SprinklingDialog()
    dialog.request(3)
    with pytest.raises(ValueError):
        dialog.set_value(bad)
    # Dialog stays open with the previous value
    assert dialog.is_open
    assert dialog.value == 3


def test_single_open_edit():
    dialog = SprinklingDialog()
    dialog.request(0)
    with pytest.raises(RuntimeError):
        dialog.request(1)


def test_confirm_when_closed():
    dialog = SprinklingDialog()
    with pytest.raises(RuntimeError):
        dialog.confirm()
    # Cancel on a closed dialog is a no-op
    dialog.cancel()


def test_reopen_after_close():
    dialog = SprinklingDialog()
    dialog.request(0)
    dialog.confirm(4)
    second = dialog.request(4)
    dialog.confirm()
    assert second.result() == 4


def test_validate_sprinkling():
    assert validate_sprinkling(" 2.50 ") == 2.5
    assert validate_sprinkling(0) == 0
    for bad in ["nan", float("inf"), -1]:
        with pytest.raises(ValueError):
            validate_sprinkling(bad)
