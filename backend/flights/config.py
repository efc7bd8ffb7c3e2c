"""Configuration: runtime settings and the reference constants of a run."""

from __future__ import annotations

import logging
import math
import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional, Tuple

import pandas as pd

from flights.errors import MissingEmissionsFactor

logger = logging.getLogger("flights.config")

DEFAULT_EMISSIONS_TABLE = os.path.join(
    os.path.dirname(__file__), "data", "emissions_factors.csv"
)

# A Dane emitted 5.1 t CO2/person/year in 2019 (ourworldindata.org)
ANNUAL_CO2_PER_DANE_KG = 5100.0

# below this distance a leg usually has a train alternative
SHORT_LEG_KM = 300.0


def _get_bool(env_var: str, default: bool = False) -> bool:
    value = os.getenv(env_var)
    if value is None:
        return default

    return value.lower() in {"1", "true", "yes", "on"}


@dataclass
class Settings:
    """Application configuration loaded from environment variables."""

    flights_env: str = os.getenv("FLIGHTS_ENV", "local")
    log_level: str = os.getenv("FLIGHTS_LOG_LEVEL", "INFO")
    data_dir: str = os.getenv(
        "FLIGHTS_DATA_DIR", os.path.join(os.path.dirname(__file__), "..", "data")
    )

    # adsbexchange.com trace archive
    adsbx_base_url: str = os.getenv(
        "ADSBX_BASE_URL", "https://globe.adsbexchange.com"
    )
    # the archive only answers with cookies taken from a browser session
    adsbx_cookie: Optional[str] = os.getenv("ADSBX_COOKIE")
    adsbx_timeout: float = float(os.getenv("ADSBX_TIMEOUT", "60.0"))

    strict_order: bool = _get_bool("FLIGHTS_STRICT_ORDER")
    emissions_table: str = os.getenv("FLIGHTS_EMISSIONS_TABLE", DEFAULT_EMISSIONS_TABLE)


settings = Settings()


@dataclass(frozen=True)
class SegmentationConfig:
    """Thresholds used to cut a trace into legs.

    A point is on the ground below ``ground_altitude_ft``. A candidate leg is
    kept only if it lasts at least ``min_leg_duration_s``, spends as long in
    the air between consecutive airborne samples, and covers at least
    ``min_leg_distance_km``. A landing followed by a new climb less than
    ``min_ground_duration_s`` later is treated as a dip and does not split
    the leg.
    """

    ground_altitude_ft: float = 1000.0
    min_leg_duration_s: float = 300.0
    min_leg_distance_km: float = 0.0
    min_ground_duration_s: float = 300.0


@dataclass(frozen=True)
class EmissionsFactor:
    """Emissions rates of one distance bracket.

    ``max_km`` is the exclusive upper bound of the bracket, ``None`` for an
    unbounded bracket. Rates are kg CO2e per km of detoured distance.
    """

    bracket: str
    max_km: Optional[float]
    detour_km: Optional[float]
    private_kg_per_km: Optional[float]
    commercial_kg_per_km: Optional[float]

    def validate(self) -> "EmissionsFactor":
        for name in ("detour_km", "private_kg_per_km", "commercial_kg_per_km"):
            value = getattr(self, name)
            if value is None or math.isnan(value) or value < 0:
                raise MissingEmissionsFactor(
                    f"bracket {self.bracket!r} has no valid {name} ({value!r})"
                )
        return self


@dataclass(frozen=True)
class EmissionsTable:
    factors: Tuple[EmissionsFactor, ...]
    annual_co2_per_dane_kg: float = ANNUAL_CO2_PER_DANE_KG

    def __post_init__(self):
        # brackets are looked up in increasing order, the unbounded one last
        ordered = sorted(
            self.factors,
            key=lambda f: math.inf if f.max_km is None else f.max_km,
        )
        object.__setattr__(self, "factors", tuple(ordered))

    def factor_for(self, distance_km: float) -> EmissionsFactor:
        """Return the validated factor of the bracket containing ``distance_km``.

        Distances beyond the last bounded bracket use the last bracket.
        """
        if not self.factors:
            raise MissingEmissionsFactor("the emissions table has no bracket")

        for factor in self.factors:
            if factor.max_km is None or distance_km < factor.max_km:
                return factor.validate()
        return self.factors[-1].validate()


def _optional(row, column: str) -> Optional[float]:
    value = row[column]
    if value is None or pd.isna(value):
        return None
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        raise MissingEmissionsFactor(
            f"bracket {row['bracket']!r} has a non-numeric {column} ({value!r})"
        ) from exc


def load_emissions_table(
    path: str, annual_co2_per_dane_kg: float = ANNUAL_CO2_PER_DANE_KG
) -> EmissionsTable:
    """
    Loads a curated emissions factor CSV with columns
      bracket, max_km, detour_km, private_kg_per_km, commercial_kg_per_km
    An empty ``max_km`` marks the unbounded bracket.
    """
    try:
        df = pd.read_csv(path)
    except (OSError, pd.errors.EmptyDataError) as exc:
        raise MissingEmissionsFactor(f"cannot read emissions table {path}") from exc

    expected = ["bracket", "max_km", "detour_km", "private_kg_per_km", "commercial_kg_per_km"]
    missing = [column for column in expected if column not in df.columns]
    if missing:
        raise MissingEmissionsFactor(
            f"emissions table {path} lacks columns {', '.join(missing)}"
        )

    factors = tuple(
        EmissionsFactor(
            bracket=str(row["bracket"]).strip(),
            max_km=_optional(row, "max_km"),
            detour_km=_optional(row, "detour_km"),
            private_kg_per_km=_optional(row, "private_kg_per_km"),
            commercial_kg_per_km=_optional(row, "commercial_kg_per_km"),
        )
        for row in df.to_dict(orient="records")
    )
    logger.debug("Loaded %d emissions brackets from %s", len(factors), path)
    return EmissionsTable(factors, annual_co2_per_dane_kg=annual_co2_per_dane_kg)


@lru_cache(maxsize=1)
def default_emissions_table() -> EmissionsTable:
    """The table named by the settings, loaded once per process."""
    return load_emissions_table(settings.emissions_table)


__all__ = [
    "ANNUAL_CO2_PER_DANE_KG",
    "SHORT_LEG_KM",
    "EmissionsFactor",
    "EmissionsTable",
    "SegmentationConfig",
    "Settings",
    "default_emissions_table",
    "load_emissions_table",
    "settings",
]
