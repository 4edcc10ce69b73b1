import matplotlib
matplotlib.use('Agg')

import pytest
from PIL import Image

import app


def test_parse_sprinkling():
    assert app.parse_sprinkling(["1=5", "2=0.5"]) == [(1, 5.0), (2, 0.5)]
    with pytest.raises(ValueError):
        app.parse_sprinkling(["1:5"])


def test_main_report(data_dir, capsys):
    app.main(['/map/2019-07-04/plot/P1', '--data-dir', str(data_dir), '--sprinkling', '2=5'])
    out = capsys.readouterr().out
    assert "Route: /map/2019-07-04/plot/P1" in out
    assert "Sprinkling (mm):         5" in out


def test_main_redirects_unknown_plot(data_dir, capsys):
    app.main(['/map/2019-07-04/plot/P9', '--data-dir', str(data_dir)])
    out = capsys.readouterr().out
    assert "Route: /map/2019-07-04\n" in out


def test_main_writes_files(data_dir, tmp_path):
    overlay = tmp_path / "overlay.png"
    chart = tmp_path / "chart.png"
    app.main([
        '/map/2019-07-04/pixel/1-2', '--data-dir', str(data_dir),
        '--save-overlay', str(overlay), '--save-chart', str(chart),
    ])
    assert Image.open(overlay).size == (3, 2)
    assert chart.exists()


def test_main_uses_env_data_dir(data_dir, monkeypatch, capsys):
    monkeypatch.setenv('FARM_MON_DATA_DIR', str(data_dir))
    app.main([])
    assert "Route: /map/2019-07-04" in capsys.readouterr().out


@pytest.mark.parametrize("edit,message", [
    ('0=-5', 'finite amount >= 0'),
    ('0=nan', 'finite amount >= 0'),
    ('3=5', 'outside series'),
    ('-1=5', 'outside series'),
    ('1:5', 'expected DAY=MM'),
])
def test_main_rejects_invalid_sprinkling(data_dir, capsys, edit, message):
    with pytest.raises(SystemExit) as exc:
        app.main(['/map/2019-07-04/plot/P1', '--data-dir', str(data_dir), f'--sprinkling={edit}'])
    assert exc.value.code == 2
    captured = capsys.readouterr()
    assert message in captured.err
    assert "Route:" not in captured.out


def test_main_rejects_sprinkling_without_selection(data_dir, capsys):
    with pytest.raises(SystemExit):
        app.main(['/map', '--data-dir', str(data_dir), '--sprinkling', '0=5'])
    assert "Select a plot or pixel" in capsys.readouterr().err
