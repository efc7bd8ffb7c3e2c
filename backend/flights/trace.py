"""Reading trace points out of adsbexchange ``trace_full`` documents."""

from __future__ import annotations

import logging
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

import pandas as pd

from flights.errors import OutOfOrderTimestamp
from flights.models import TracePoint

logger = logging.getLogger("flights.trace")


def _to_float(value: Any) -> Optional[float]:
    # booleans are ints in Python but never a valid coordinate or altitude
    if value is None or isinstance(value, bool):
        return None
    try:
        return float(value)
    except (TypeError, ValueError):
        return None


def _parse_entry(base: float, entry: Sequence[Any]) -> Optional[TracePoint]:
    """
    A trace entry is a list:
      0 -> seconds after the document timestamp
      1 -> latitude
      2 -> longitude
      3 -> barometric altitude in feet, or "ground"
      4 -> ground speed in knots
    Further fields (track, flags, vertical rate...) are ignored.
    """
    if not isinstance(entry, (list, tuple)) or len(entry) < 3:
        return None
    offset = _to_float(entry[0])
    if offset is None:
        return None

    raw_altitude = entry[3] if len(entry) > 3 else None
    on_ground = True if raw_altitude == "ground" else None
    altitude = None if on_ground else _to_float(raw_altitude)

    return TracePoint(
        timestamp=base + offset,
        latitude=_to_float(entry[1]),
        longitude=_to_float(entry[2]),
        altitude=altitude,
        ground_speed=_to_float(entry[4]) if len(entry) > 4 else None,
        on_ground=on_ground,
    )


def parse_trace(payload: Dict[str, Any]) -> Tuple[TracePoint, ...]:
    """Convert a ``trace_full`` JSON document into trace points."""
    base = _to_float(payload.get("timestamp")) or 0.0
    points: List[TracePoint] = []
    for entry in payload.get("trace") or []:
        point = _parse_entry(base, entry)
        if point is None:
            logger.debug("Dropping malformed trace entry %r", entry)
            continue
        points.append(point)
    return tuple(points)


def ordered_points(
    points: Iterable[TracePoint], strict: bool = False
) -> List[TracePoint]:
    """
    Return the points up to the first one older than its predecessor.
    With ``strict`` the violation raises ``OutOfOrderTimestamp`` instead.
    """
    out: List[TracePoint] = []
    for index, point in enumerate(points):
        if out and point.timestamp < out[-1].timestamp:
            if strict:
                raise OutOfOrderTimestamp(index, out[-1].timestamp, point.timestamp)
            logger.warning(
                "Trace out of order at index %d (%s < %s); keeping %d points",
                index,
                point.timestamp,
                out[-1].timestamp,
                len(out),
            )
            break
        out.append(point)
    return out


def trace_frame(points: Iterable[TracePoint]) -> pd.DataFrame:
    columns = ["timestamp", "latitude", "longitude", "altitude", "ground_speed", "on_ground"]
    df = pd.DataFrame(
        [[getattr(p, c) for c in columns] for p in points], columns=columns
    )
    df["time"] = pd.to_datetime(df["timestamp"], unit="s", utc=True)
    return df
