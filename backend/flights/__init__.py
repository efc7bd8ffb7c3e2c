from flights.errors import (
    FlightsError,
    MissingEmissionsFactor,
    NoTraceData,
    OutOfOrderTimestamp,
)
from flights.models import DayEmissions, EmissionsEstimate, Leg, TracePoint
from flights.segmenter import legs, segment
from flights.emissions import estimate, summarize_day

__all__ = [
    "DayEmissions",
    "EmissionsEstimate",
    "FlightsError",
    "Leg",
    "MissingEmissionsFactor",
    "NoTraceData",
    "OutOfOrderTimestamp",
    "TracePoint",
    "estimate",
    "legs",
    "segment",
    "summarize_day",
]
