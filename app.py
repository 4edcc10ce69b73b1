#!/usr/bin/env python3
"""
Farm Monitoring App - Main Application
======================================
"""

import sys
import os
import argparse

# Ensure src is in python path
sys.path.append(os.path.join(os.path.dirname(__file__), 'src'))

from farm_mon.config import get_data_dir
from farm_mon.data.dataset import load_farmer_data
from farm_mon.gui.orchestrator import MapAndAnalytics, run_gui_mode
from farm_mon.gui.raster_overlay import encode_png
from farm_mon.visualization.reports import generate_report
from farm_mon.visualization.plots import plot_analytics, plot_deficit_map


def build_parser():
    """Command line parser."""
    parser = argparse.ArgumentParser(description='Farm soil moisture and irrigation deficit monitor')
    parser.add_argument('route', nargs='?', default='/map',
                        help='Map route, e.g. /map/2019-07-04/plot/123 or /map/2019-07-04/pixel/3-7')
    parser.add_argument('--data-dir', type=str, default=None,
                        help='Dataset directory (default: $FARM_MON_DATA_DIR or ./data)')
    parser.add_argument('--gui', action='store_true',
                        help='Open the interactive map window')
    parser.add_argument('--sprinkling', action='append', default=[], metavar='DAY=MM',
                        help='Sprinkling value for a day index of the selection (repeatable)')
    parser.add_argument('--save-overlay', type=str,
                        help='Write the deficit overlay PNG to this path')
    parser.add_argument('--save-map', type=str,
                        help='Write a rendered map figure to this path')
    parser.add_argument('--save-chart', type=str,
                        help='Write the analytics chart of the selection to this path')
    return parser


def parse_sprinkling(values):
    """Parse DAY=MM pairs into (day_index, value) tuples."""
    edits = []
    for item in values:
        try:
            day, mm = item.split('=', 1)
            edits.append((int(day), float(mm)))
        except ValueError:
            raise ValueError(f"Invalid --sprinkling value {item!r}, expected DAY=MM") from None
    return edits


def apply_sprinkling(view, values):
    """
    Apply DAY=MM edits to the current selection.

    Raises:
        ValueError: for malformed pairs, a missing selection, a day outside
            the series or a negative or non-finite amount.
    """
    for day_index, value in parse_sprinkling(values):
        view.set_sprinkling(day_index, value)


def run_report(view, args):
    """Print the report and write requested files."""
    generate_report(view)

    if args.save_overlay:
        rgba = view.rasterizer.rgba(view.farmer_data.pixels_data, view.date)
        if rgba is None:
            print(f"[app] No pixel analytics for {view.date}; overlay not written.")
        else:
            with open(args.save_overlay, 'wb') as f:
                f.write(encode_png(rgba))
            print(f"[app] Saved overlay to {args.save_overlay}")

    if args.save_map:
        rgba = view.rasterizer.rgba(view.farmer_data.pixels_data, view.date)
        plot_deficit_map(view.farmer_data, rgba, selection=view.selection, save_path=args.save_map)

    if args.save_chart:
        if view.selection.is_none:
            print("[app] No plot or pixel selected; chart not written.")
        else:
            plot_analytics(view.series(), title=view.details()['label'], save_path=args.save_chart)


def main(argv=None):
    parser = build_parser()
    args = parser.parse_args(argv)
    data_dir = args.data_dir or get_data_dir()

    if args.gui:
        run_gui_mode(data_dir, route=args.route)
        return

    farmer_data = load_farmer_data(data_dir)
    view = MapAndAnalytics(farmer_data)
    view.navigate(args.route)
    try:
        apply_sprinkling(view, args.sprinkling)
    except ValueError as e:
        parser.error(str(e))
    run_report(view, args)


if __name__ == "__main__":
    main()
