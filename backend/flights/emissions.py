"""Emissions of private jet legs against a commercial first class trip.

Rates per distance bracket come from an ``EmissionsTable`` (see
``flights.config``); the default table follows the myclimate.org flight
emissions methodology for first class, with private jets emitting 10 times
as much per passenger (transportenvironment.org).
"""

from __future__ import annotations

import logging
from typing import Iterable, List, Optional, Sequence

import pandas as pd

from flights.config import SHORT_LEG_KM, EmissionsTable, default_emissions_table
from flights.models import DayEmissions, EmissionsEstimate, Leg

logger = logging.getLogger("flights.emissions")


def co2_from_distance_km(distance_km: float, kg_per_km: float, detour_km: float) -> float:
    """
    co2_kg = kg_per_km * (distance_km + detour_km)
    The detour constant covers holding, routing and taxiing. A leg that does
    not go anywhere emits nothing.
    """
    if distance_km <= 0:
        return 0.0
    return kg_per_km * (distance_km + detour_km)


def estimate(leg: Leg, table: Optional[EmissionsTable] = None) -> EmissionsEstimate:
    table = table or default_emissions_table()
    distance = leg.distance_km
    factor = table.factor_for(distance)
    return EmissionsEstimate(
        distance_km=distance,
        actual_co2e_kg=co2_from_distance_km(
            distance, factor.private_kg_per_km, factor.detour_km
        ),
        commercial_co2e_kg=co2_from_distance_km(
            distance, factor.commercial_kg_per_km, factor.detour_km
        ),
        bracket=factor.bracket,
    )


def summarize_day(
    legs: Iterable[Leg],
    table: Optional[EmissionsTable] = None,
    short_leg_km: float = SHORT_LEG_KM,
) -> DayEmissions:
    """Estimate every leg of a day and aggregate them.

    Any leg without a factor fails the whole day with
    ``MissingEmissionsFactor``; no partial total is returned.
    """
    table = table or default_emissions_table()
    legs = tuple(legs)
    estimates = tuple(estimate(leg, table) for leg in legs)
    day = DayEmissions(
        legs=legs,
        estimates=estimates,
        annual_co2_per_dane_kg=table.annual_co2_per_dane_kg,
        short_leg_km=short_leg_km,
    )
    logger.info(
        "%d legs emitted %.0f kg CO2e (%.0f kg in first class)",
        len(legs),
        day.total_actual_co2e_kg,
        day.total_commercial_co2e_kg,
    )
    return day


def legs_frame(legs: Sequence[Leg], estimates: Sequence[EmissionsEstimate]) -> pd.DataFrame:
    rows: List[dict] = []
    for leg, e in zip(legs, estimates):
        rows.append({
            "start_time": pd.Timestamp(leg.start.timestamp, unit="s", tz="UTC"),
            "end_time": pd.Timestamp(leg.end.timestamp, unit="s", tz="UTC"),
            "start_lat": leg.start.latitude,
            "start_lon": leg.start.longitude,
            "end_lat": leg.end.latitude,
            "end_lon": leg.end.longitude,
            "duration_s": leg.duration,
            "distance_km": e.distance_km,
            "bracket": e.bracket,
            "co2_kg": e.actual_co2e_kg,
            "commercial_co2_kg": e.commercial_co2e_kg,
        })
    columns = [
        "start_time", "end_time", "start_lat", "start_lon", "end_lat", "end_lon",
        "duration_s", "distance_km", "bracket", "co2_kg", "commercial_co2_kg",
    ]
    return pd.DataFrame(rows, columns=columns)
