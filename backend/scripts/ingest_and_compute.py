#!/usr/bin/env python3
"""
Helper script to ingest the trace of an aircraft and compute its legs and
emissions for a single date.
Usage:
    python scripts/ingest_and_compute.py 45d2ed 2023-10-05
"""
import sys

from ingest_trace import ingest_trace
from compute_legs_day import compute_day

from flights.errors import FlightsError

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage:")
        print("  python scripts/ingest_and_compute.py ICAO YYYY-MM-DD")
        sys.exit(1)

    icao, date_str = sys.argv[1], sys.argv[2]

    print(f"\n[1/2] Ingesting trace of {icao} for {date_str}...")
    ingest_trace(icao, date_str)

    print(f"\n[2/2] Computing legs and emissions for {date_str}...")
    try:
        compute_day(icao, date_str)
    except FlightsError as e:
        print(f"\n✗ Error processing {date_str}: {e}")
        sys.exit(1)

    print(f"\n✓ Successfully processed {date_str}")
