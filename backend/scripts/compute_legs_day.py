import logging
import sys
from datetime import datetime

from flights.config import SegmentationConfig, default_emissions_table, settings
from flights.emissions import legs_frame, summarize_day
from flights.errors import FlightsError
from flights.segmenter import legs
from flights.storage import legs_name, load_json, points_name, save_csv, trace_name
from flights.trace import parse_trace, trace_frame

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)


def compute_day(icao: str, date_yyyymmdd: str):
    day = datetime.strptime(date_yyyymmdd, "%Y-%m-%d").date()
    points = parse_trace(load_json(trace_name(icao, day)))

    found = legs(points, SegmentationConfig(), strict=settings.strict_order)
    points_path = save_csv(trace_frame(points), points_name(icao, day))
    print(f"Saved {len(points):,} trace points -> {points_path}")
    summary = summarize_day(found, default_emissions_table())

    df = legs_frame(summary.legs, summary.estimates)
    path = save_csv(df, legs_name(icao, day))

    print(f"Found {len(found):,} legs for {icao.lower()} on {date_yyyymmdd} -> {path}")
    for _, row in df.iterrows():
        print(
            f"  {row['start_time']:%H:%M} ({row['start_lat']:.3f}, {row['start_lon']:.3f})"
            f" -> {row['end_time']:%H:%M} ({row['end_lat']:.3f}, {row['end_lon']:.3f})"
            f"  {row['distance_km']:,.0f} km  {row['co2_kg']:,.0f} kg CO2e"
            f" (first class: {row['commercial_co2_kg']:,.0f} kg)"
        )
    print(f"Total CO2e (kg): {summary.total_actual_co2e_kg:,.0f}")
    print(f"Commercial first class CO2e (kg): {summary.total_commercial_co2e_kg:,.0f}")
    print(f"Years of a Dane's emissions: {summary.dane_years:.2f}")
    print(f"Legs < 300 km: {summary.short_legs}, legs >= 300 km: {summary.long_legs}")
    return summary


def main(argv) -> int:
    if len(argv) != 3:
        print("Usage: python scripts/compute_legs_day.py ICAO YYYY-MM-DD")
        return 1

    icao, date_str = argv[1], argv[2]
    try:
        compute_day(icao, date_str)
    except FileNotFoundError:
        print(f"✗ No trace of {icao} on {date_str}; run scripts/ingest_trace.py first")
        return 1
    except FlightsError as e:
        print(f"✗ Error processing {date_str}: {e}")
        return 1
    return 0

if __name__ == "__main__":
    sys.exit(main(sys.argv))
