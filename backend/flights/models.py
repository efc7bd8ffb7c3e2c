"""Plain data types shared by the segmenter and the emissions calculator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Optional, Tuple

from flights.config import SHORT_LEG_KM
from flights.geometry import distance_km


@dataclass(frozen=True)
class TracePoint:
    """One reported aircraft state.

    ``altitude`` is the barometric altitude in feet and is ``None`` when the
    transponder reported nothing usable. ``on_ground`` is the reported ground
    flag; ``None`` means the flag was not reported.
    """

    timestamp: float
    latitude: Optional[float]
    longitude: Optional[float]
    altitude: Optional[float] = None
    ground_speed: Optional[float] = None
    on_ground: Optional[bool] = None

    @property
    def has_position(self) -> bool:
        return self.latitude is not None and self.longitude is not None

    @property
    def position(self) -> Tuple[float, float]:
        return (self.latitude, self.longitude)


@dataclass(frozen=True)
class Leg:
    """One takeoff-to-landing interval."""

    start: TracePoint
    end: TracePoint

    @property
    def distance_km(self) -> float:
        return distance_km(self.start, self.end)

    @property
    def duration(self) -> float:
        """Duration in seconds."""
        return self.end.timestamp - self.start.timestamp


@dataclass(frozen=True)
class EmissionsEstimate:
    distance_km: float
    actual_co2e_kg: float
    commercial_co2e_kg: float
    bracket: Optional[str] = None


@dataclass(frozen=True)
class DayEmissions:
    """Legs of one day, their estimates and the day totals."""

    legs: Tuple[Leg, ...]
    estimates: Tuple[EmissionsEstimate, ...]
    annual_co2_per_dane_kg: float
    short_leg_km: float = SHORT_LEG_KM
    total_actual_co2e_kg: float = field(init=False)
    total_commercial_co2e_kg: float = field(init=False)

    def __post_init__(self):
        object.__setattr__(
            self,
            "total_actual_co2e_kg",
            sum(e.actual_co2e_kg for e in self.estimates),
        )
        object.__setattr__(
            self,
            "total_commercial_co2e_kg",
            sum(e.commercial_co2e_kg for e in self.estimates),
        )

    @property
    def dane_years(self) -> float:
        """How many years of a Dane's emissions the day's legs emitted."""
        return self.total_actual_co2e_kg / self.annual_co2_per_dane_kg

    @property
    def short_legs(self) -> int:
        return sum(1 for e in self.estimates if e.distance_km < self.short_leg_km)

    @property
    def long_legs(self) -> int:
        return len(self.estimates) - self.short_legs
