import logging
import sys
from datetime import datetime

from flights.adsbx_client import AdsbExchangeClient
from flights.config import settings
from flights.storage import cached_trace

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)


def ingest_trace(icao: str, date_yyyymmdd: str):
    # date_yyyymmdd like "2023-10-05"
    day = datetime.strptime(date_yyyymmdd, "%Y-%m-%d").date()

    client = AdsbExchangeClient()
    payload = cached_trace(icao, day, client.trace_full)

    print(f"{icao.lower()} on {date_yyyymmdd}: {len(payload.get('trace') or []):,} trace points")
    return payload

if __name__ == "__main__":
    if len(sys.argv) != 3:
        print("Usage: python scripts/ingest_trace.py ICAO YYYY-MM-DD")
        sys.exit(1)
    ingest_trace(sys.argv[1], sys.argv[2])
