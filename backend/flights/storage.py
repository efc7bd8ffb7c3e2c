import json
import logging
import os
from datetime import date, datetime, timezone
from typing import Any, Callable, Dict, Optional

import pandas as pd

from flights.config import settings

logger = logging.getLogger("flights.storage")


def data_dir() -> str:
    return settings.data_dir


def ensure_data_dir():
    os.makedirs(data_dir(), exist_ok=True)


def trace_name(icao: str, day: date) -> str:
    return f"trace_{icao.lower()}_{day.strftime('%Y%m%d')}"


def points_name(icao: str, day: date) -> str:
    return f"points_{icao.lower()}_{day.strftime('%Y%m%d')}"


def legs_name(icao: str, day: date) -> str:
    return f"legs_{icao.lower()}_{day.strftime('%Y%m%d')}"


def save_json(payload: Dict[str, Any], name: str) -> str:
    ensure_data_dir()
    path = os.path.join(data_dir(), f"{name}.json")
    with open(path, "w", encoding="utf-8") as f:
        json.dump(payload, f)
    return path


def load_json(name: str) -> Dict[str, Any]:
    path = os.path.join(data_dir(), f"{name}.json")
    with open(path, "r", encoding="utf-8") as f:
        return json.load(f)


def save_csv(df: pd.DataFrame, name: str) -> str:
    ensure_data_dir()
    path = os.path.join(data_dir(), f"{name}.csv")
    df.to_csv(path, index=False)
    return path


def cached_trace(
    icao: str,
    day: date,
    fetch: Callable[[str, date], Dict[str, Any]],
    today: Optional[date] = None,
) -> Dict[str, Any]:
    """
    Returns the trace document of ``icao`` on ``day``, calling ``fetch`` on a
    cache miss. Past days never change so they are kept forever; the current
    day is still being recorded and is never written to the cache.
    """
    name = trace_name(icao, day)
    try:
        payload = load_json(name)
        logger.debug("Cache hit for %s", name)
        return payload
    except FileNotFoundError:
        pass

    payload = fetch(icao, day)
    today = today or datetime.now(timezone.utc).date()
    if day < today:
        path = save_json(payload, name)
        logger.info("Cached %s", path)
    return payload
