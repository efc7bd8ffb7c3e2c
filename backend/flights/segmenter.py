"""Cutting one day of trace points into legs.

The segmenter is a two state machine (ground / airborne) run over the points
in time order. A leg runs from the last ground point before a takeoff to the
first ground point after the landing, i.e. it joins two ground situations.
Its distance is the great-circle distance between those two points, not the
length of the path flown.

Two kinds of noise are absorbed:

- a landing followed by a climb less than ``min_ground_duration_s`` later is
  a dip (a bad altitude sample, a touch-and-go) and does not split the leg;
- a candidate leg shorter than ``min_leg_duration_s`` or
  ``min_leg_distance_km``, or with less than ``min_leg_duration_s`` between
  consecutive airborne samples, is dropped.
"""

from __future__ import annotations

import enum
import logging
from typing import Iterable, Iterator, List, Optional

from flights.config import SegmentationConfig
from flights.errors import NoTraceData
from flights.models import Leg, TracePoint
from flights.trace import ordered_points

logger = logging.getLogger("flights.segmenter")


class Phase(enum.Enum):
    GROUND = "ground"
    AIRBORNE = "airborne"


def classify(point: TracePoint, config: SegmentationConfig) -> Optional[Phase]:
    """Return the phase of a point, or None when the point is unusable.

    The reported ground flag and the altitude threshold are combined: either
    one is enough to put the point on the ground. Some transponders never
    report the flag, so a low altitude wins over ``on_ground=False``.
    """
    if not point.has_position:
        return None
    if point.on_ground:
        return Phase.GROUND
    if point.altitude is None:
        return None
    if point.altitude < config.ground_altitude_ft:
        return Phase.GROUND
    return Phase.AIRBORNE


def _accept(leg: Leg, airborne_s: float, config: SegmentationConfig) -> bool:
    if leg.duration <= 0 or leg.duration < config.min_leg_duration_s:
        logger.debug("Discarding leg of %.0f s", leg.duration)
        return False
    # isolated airborne samples chained by absorbed dips never fly
    if airborne_s < config.min_leg_duration_s:
        logger.debug(
            "Discarding leg of %.0f s with %.0f s in the air", leg.duration, airborne_s
        )
        return False
    if leg.distance_km < config.min_leg_distance_km:
        logger.debug("Discarding leg of %.1f km", leg.distance_km)
        return False
    return True


def segment(
    points: Iterable[TracePoint], config: Optional[SegmentationConfig] = None
) -> Iterator[Leg]:
    """Yield the legs of time-ordered ``points`` in chronological order."""
    config = config or SegmentationConfig()

    last_ground: Optional[TracePoint] = None
    last_airborne: Optional[TracePoint] = None
    start: Optional[TracePoint] = None  # start of the open leg
    landing: Optional[TracePoint] = None  # first ground point after the open leg
    airborne_s = 0.0  # time between consecutive airborne samples of the open leg
    was_airborne = False

    for point in points:
        phase = classify(point, config)
        if phase is None:
            continue

        if phase is Phase.GROUND:
            if start is not None and landing is None:
                landing = point
            last_ground = point
            was_airborne = False
            continue

        if was_airborne:
            airborne_s += point.timestamp - last_airborne.timestamp
        was_airborne = True

        if start is None:
            start = last_ground or point
            airborne_s = 0.0
        elif landing is not None:
            if point.timestamp - landing.timestamp < config.min_ground_duration_s:
                logger.debug(
                    "Ignoring %.0f s on the ground at %s",
                    point.timestamp - landing.timestamp,
                    landing.position,
                )
            else:
                leg = Leg(start, landing)
                if _accept(leg, airborne_s, config):
                    yield leg
                start = last_ground
                airborne_s = 0.0
            landing = None
        last_airborne = point

    if start is None:
        return
    # the day may end while still in the air
    leg = Leg(start, landing or last_airborne)
    if _accept(leg, airborne_s, config):
        yield leg


def legs(
    points: Iterable[TracePoint],
    config: Optional[SegmentationConfig] = None,
    strict: bool = False,
) -> List[Leg]:
    """
    Returns the legs flown in one day of trace points.

    Raises ``NoTraceData`` when the trace is empty or has no usable point and,
    with ``strict``, ``OutOfOrderTimestamp`` when the points are not in time
    order. Without ``strict`` the trace is only trusted up to the first point
    out of order. A day spent on the ground returns no legs.
    """
    config = config or SegmentationConfig()
    points = ordered_points(points, strict=strict)
    if not points:
        raise NoTraceData("the trace has no points")
    if all(classify(p, config) is None for p in points):
        raise NoTraceData(f"none of the {len(points)} trace points is usable")

    result = list(segment(points, config))
    logger.info("Found %d legs in %d trace points", len(result), len(points))
    return result
