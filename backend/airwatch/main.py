# backend/airwatch/main.py
from fastapi.middleware.cors import CORSMiddleware
from typing import List, Optional
import logging
from fastapi import Depends, FastAPI, HTTPException, Path, Query, status
from .models import AQIResult, Alert, CountryAirSummary, ForecastPoint, PollutantReading, RegionSummary, StateAQI, Station
from .aqi import (
    DEFAULT_AQI_POLLUTANTS,
    aqi_color,
    aqi_description,
    aqi_level,
    dominant_pollutant,
    overall_aqi,
    pollutant_sub_indices,
    recommended_actions,
)
from .aggregation import compute_region_summaries
from .anomaly_detection import evaluate_alerts
from .breakpoints import BREAKPOINT_TABLES
from .dummy_data import fallback_stations, state_aqi_levels
from .forecast import generate_forecast
from . import sources
from .config import get_settings

settings = get_settings()

# Setup logging
logging.basicConfig(level=settings.log_level, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)

app = FastAPI(
    title="AirWatch API",
    description="Air Quality Index computation, station normalization, regional summaries and synthetic forecasts.",
    version="0.1.0",
)

# --- CORS Configuration ---
origins = [
    "http://localhost:3000",
    "http://localhost:5173",
    "http://127.0.0.1:5173",
]
app.add_middleware(
    CORSMiddleware,
    allow_origins=origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

API_PREFIX = "/api/v1"


def get_stations() -> List[Station]:
    """Current working station set. Overridden in tests."""
    return sources.fetch_realtime_stations()


@app.get(
    f"{API_PREFIX}/stations",
    response_model=List[Station],
    summary="List Current Stations",
    description="Fetches OpenAQ, EPA AirNow and TolNet data, normalizes it into stations, and falls back to the built-in stations if nothing is available."
)
def list_stations(stations: List[Station] = Depends(get_stations)):
    logger.info(f"Returning {len(stations)} stations.")
    return stations


@app.get(
    f"{API_PREFIX}/stations/fallback",
    response_model=List[Station],
    summary="List Built-in Stations",
)
def list_fallback_stations():
    return fallback_stations()


@app.get(
    f"{API_PREFIX}/stations/{{station_id}}/forecast",
    response_model=List[ForecastPoint],
    summary="Synthetic Forecast for a Station",
    description="Generates a fresh hourly forecast around the station's current AQI. Values differ between calls."
)
def station_forecast(
    station_id: str = Path(..., description="Station id, e.g. '1', 'epa-0' or 'tolnet-2'."),
    stations: List[Station] = Depends(get_stations)
):
    station = next((s for s in stations if s.id == station_id), None)
    if station is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Station '{station_id}' not found."
        )
    logger.info(f"Request for forecast of station {station_id} (current AQI {station.aqi}).")
    return generate_forecast(station.aqi)


@app.get(
    f"{API_PREFIX}/regions",
    response_model=List[RegionSummary],
    summary="Regional Summaries",
    description="Averages the current stations over the four US bounding-box regions. Regions without stations report the default AQI."
)
def list_regions(stations: List[Station] = Depends(get_stations)):
    summaries = compute_region_summaries(stations)
    logger.info(f"Returning {len(summaries)} region summaries from {len(stations)} stations.")
    return summaries


@app.get(f"{API_PREFIX}/states", response_model=List[StateAQI], summary="State-level AQI Averages")
def list_states():
    return state_aqi_levels()


@app.get(
    f"{API_PREFIX}/countries",
    response_model=List[CountryAirSummary],
    summary="Global Air Report",
    description="Per-country averages from the OpenAQ global snapshot, worst AQI first. Empty if OpenAQ is unavailable."
)
def list_countries(limit: int = Query(2000, ge=1, le=10000, description="Maximum OpenAQ locations to request.")):
    report = sources.fetch_global_report(limit)
    logger.info(f"Returning {len(report)} country summaries.")
    return report


@app.get(
    f"{API_PREFIX}/forecast",
    response_model=List[ForecastPoint],
    summary="Synthetic Forecast from an AQI value",
)
def forecast(aqi: float = Query(..., ge=0, le=500, description="Current AQI to forecast around.")):
    return generate_forecast(aqi)


@app.get(
    f"{API_PREFIX}/aqi",
    response_model=AQIResult,
    summary="Compute AQI from Concentrations",
    description="Breakpoint AQI of the given concentrations. By default only PM2.5 and PM10 contribute; pass `include` to widen the set."
)
def compute_aqi(
    pm25: float = Query(0.0, ge=0, description="PM2.5 in µg/m³"),
    pm10: float = Query(0.0, ge=0, description="PM10 in µg/m³"),
    o3: float = Query(0.0, ge=0, description="O3 in ppb"),
    no2: float = Query(0.0, ge=0, description="NO2 in ppb"),
    so2: float = Query(0.0, ge=0, description="SO2 in ppb"),
    co: float = Query(0.0, ge=0, description="CO in ppm"),
    include: List[str] = Query(list(DEFAULT_AQI_POLLUTANTS), description="Pollutants that contribute to the overall AQI.")
):
    unknown = [name for name in include if name not in BREAKPOINT_TABLES]
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown pollutant(s) {', '.join(unknown)}. Valid pollutants are: {', '.join(BREAKPOINT_TABLES)}"
        )
    reading = PollutantReading(pm25=pm25, pm10=pm10, o3=o3, no2=no2, so2=so2, co=co)
    value = overall_aqi(reading, include)
    return AQIResult(
        aqi=value,
        level=aqi_level(value),
        dominant_pollutant=dominant_pollutant(reading, include),
        sub_indices=pollutant_sub_indices(reading, include),
        color=aqi_color(value),
        description=aqi_description(value),
        actions=recommended_actions(value),
    )


@app.get(
    f"{API_PREFIX}/alerts",
    response_model=List[Alert],
    summary="Evaluate PM2.5 Alerts",
    description="Raises an alert for each station whose PM2.5 exceeds the threshold now or in its synthetic forecast window."
)
def list_alerts(
    pm25_threshold: Optional[float] = Query(None, ge=0, description="PM2.5 alert threshold in µg/m³. Defaults to the configured threshold."),
    window_hours: Optional[int] = Query(None, ge=1, le=24, description="Forecast window in hours."),
    stations: List[Station] = Depends(get_stations)
):
    alerts = evaluate_alerts(stations, pm25_threshold=pm25_threshold, window_hours=window_hours)
    logger.info(f"Returning {len(alerts)} alerts for {len(stations)} stations.")
    return alerts


# --- Basic Root Endpoint ---
@app.get("/", summary="Root Endpoint", description="Basic API information.")
def read_root():
    return {"message": "Welcome to the AirWatch API. See /docs for endpoints."}
