import logging
from datetime import date, datetime

from fastapi import FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware

from flights.config import SegmentationConfig, default_emissions_table, settings
from flights.emissions import legs_frame, summarize_day
from flights.errors import MissingEmissionsFactor, NoTraceData, OutOfOrderTimestamp
from flights.segmenter import legs
from flights.storage import load_json, trace_name
from flights.trace import parse_trace

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s - %(message)s",
)
logger = logging.getLogger("flights")

app = FastAPI(title="Private Jet Legs")

app.add_middleware(
    CORSMiddleware,
    allow_origins=["http://localhost:3000"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


def _parse_day(date_yyyymmdd: str) -> date:
    try:
        return datetime.strptime(date_yyyymmdd, "%Y-%m-%d").date()
    except ValueError:
        raise HTTPException(status_code=400, detail=f"Invalid date {date_yyyymmdd}, expected YYYY-MM-DD")


def _day_legs(icao: str, date_yyyymmdd: str):
    day = _parse_day(date_yyyymmdd)
    try:
        payload = load_json(trace_name(icao, day))
    except FileNotFoundError:
        raise HTTPException(status_code=404, detail=f"Trace of {icao} on {date_yyyymmdd} not ingested")

    try:
        return legs(parse_trace(payload), SegmentationConfig(), strict=settings.strict_order)
    except NoTraceData as e:
        raise HTTPException(status_code=404, detail=str(e))
    except OutOfOrderTimestamp as e:
        raise HTTPException(status_code=422, detail=str(e))


def _leg_payload(leg):
    return {
        "start": {"timestamp": leg.start.timestamp, "lat": leg.start.latitude, "lon": leg.start.longitude},
        "end": {"timestamp": leg.end.timestamp, "lat": leg.end.latitude, "lon": leg.end.longitude},
        "duration_s": leg.duration,
        "distance_km": leg.distance_km,
    }


@app.get("/")
def root():
    return {"message": "Private Jet Legs API is running. Try /health or /co2/summary/{icao}/YYYY-MM-DD"}


@app.get("/health")
def health():
    return {"ok": True, "env": settings.flights_env}


@app.get("/legs/{icao}/{date_yyyymmdd}")
def day_legs(icao: str, date_yyyymmdd: str):
    found = _day_legs(icao, date_yyyymmdd)
    return {
        "icao": icao.lower(),
        "date": date_yyyymmdd,
        "legs": [_leg_payload(leg) for leg in found],
    }


@app.get("/co2/summary/{icao}/{date_yyyymmdd}")
def co2_summary(icao: str, date_yyyymmdd: str):
    found = _day_legs(icao, date_yyyymmdd)

    try:
        day = summarize_day(found, default_emissions_table())
    except MissingEmissionsFactor as e:
        logger.error("Emissions table is incomplete: %s", e)
        raise HTTPException(status_code=500, detail=str(e))

    df = legs_frame(day.legs, day.estimates)
    df["start_time"] = df["start_time"].astype(str)
    df["end_time"] = df["end_time"].astype(str)

    return {
        "icao": icao.lower(),
        "date": date_yyyymmdd,
        "legs": df.to_dict(orient="records"),
        "total_co2_kg": day.total_actual_co2e_kg,
        "total_co2_tons": day.total_actual_co2e_kg / 1000.0,
        "total_commercial_co2_kg": day.total_commercial_co2e_kg,
        "dane_years": day.dane_years,
        "legs_less_300km": day.short_legs,
        "legs_more_300km": day.long_legs,
    }
