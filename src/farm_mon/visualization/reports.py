def _fmt(value, digits=0):
    if value is None:
        return "-"
    return f"{value:.{digits}f}"


def print_selection_report(details, current, date):
    """Prints the header and current-day badges of a selection."""
    print(f"\n=== {details['label'].upper()} - {date} ===")
    print(f"Crop:      {details.get('crop_type') or 'N/A'}")
    print(f"Soil:      {details.get('soil_type') or 'N/A'}")
    print(f"Area (ha): {_fmt(details.get('area_ha'), 2)}")
    print("--- CURRENT ---")
    print(f"Rainfall (mm):           {abs(current['rainfall']):.0f}")
    print(f"Evapotranspiration (mm): {abs(current['evapotranspiration']):.0f}")
    print(f"Deficit (mm):            {abs(current['deficit']):.0f}")
    print(f"Sprinkling (mm):         {abs(current['sprinkling']):.0f}")
    print("---------------")


def print_series(series):
    """Prints the per-day series of a selection."""
    if not series:
        return
    print(f"\n{'Date':<12} | {'Rain':>6} | {'Sprinkl.':>8} | {'Moisture':>8} | {'Desired':>8} | {'ET':>6} | {'Deficit':>8}")
    print("-" * 78)
    for p in series:
        print(
            f"{p.date:<12} | {_fmt(p.rainfall, 1):>6} | {_fmt(p.sprinkling, 1):>8} | "
            f"{_fmt(p.moisture, 1):>8} | {_fmt(p.desired_moisture, 1):>8} | "
            f"{_fmt(p.evapotranspiration, 1):>6} | {_fmt(p.deficit, 1):>8}"
        )


def print_plot_table(rows):
    """Prints the plot list for a date."""
    print(f"\n--- {len(rows)} PLOTS ---")
    print(f"{'ID':<10} | {'Farmer':<18} | {'Crop':<24} | {'Moisture':>8} | {'Deficit':>7} | {'ET':>5} | {'Sprinkl.':>8}")
    print("-" * 96)
    for r in rows:
        print(
            f"{r['plot_id']:<10} | {str(r['farmer_name'] or '')[:18]:<18} | {str(r['crop_type'] or '')[:24]:<24} | "
            f"{_fmt(r['moisture']):>8} | {_fmt(r['deficit']):>7} | {_fmt(r['evapotranspiration']):>5} | "
            f"{r['sprinkling']:>8}"
        )


def print_pixel_summary(summary, date):
    """Prints whole-grid statistics for the unselected view."""
    print(f"\n=== ALL PIXELS - {date} ===")
    if not summary:
        print("No pixel analytics for this date.")
        return
    print(f"{'Metric':<20} | {'Mean':>8} | {'Min':>8} | {'Max':>8} | {'Cells':>6}")
    print("-" * 62)
    for name, stats in summary.items():
        print(
            f"{name:<20} | {_fmt(stats['mean'], 1):>8} | {_fmt(stats['min'], 1):>8} | "
            f"{_fmt(stats['max'], 1):>8} | {stats['count']:>6}"
        )


def generate_report(view):
    """Prints the console report for the view's current route."""
    print(f"\nRoute: {view.route}")
    if view.selection.is_none:
        print_pixel_summary(view.summary(), view.date)
    else:
        print_selection_report(view.details(), view.current(), view.date)
        print_series(view.series())
    print_plot_table(view.plot_table())
    print("=======================\n")
