# backend/airwatch/sources.py
"""
HTTP collectors for OpenAQ and EPA AirNow, plus the simulated TolNet feed.

Every fetcher returns an empty list on failure (network, HTTP status, bad
JSON or unexpected payload) and logs why. Nothing here retries.
"""
import logging
import requests
from datetime import datetime, timezone
from typing import List, Optional

from .aggregation import aggregate_by_country
from .config import get_settings
from .dummy_data import fallback_stations, simulate_tolnet_sites
from .models import AirNowObservation, CountryAirSummary, OpenAQMeasurement, Station, TolNetSite
from .normalization import coerce_models, normalize_sources

logger = logging.getLogger(__name__)

OPENAQ_PARAMETERS = "pm25,pm10,o3,no2"
OPENAQ_GLOBAL_PARAMETERS = "pm25,pm10,o3,no2,so2,co"


def _get_json(url: str, params: dict):
    settings = get_settings()
    response = requests.get(url, params=params, timeout=settings.request_timeout_seconds)
    response.raise_for_status()
    return response.json()


def fetch_openaq_measurements(country: Optional[str] = None, limit: Optional[int] = None) -> List[OpenAQMeasurement]:
    """Latest measurements for one country from OpenAQ /measurements."""
    settings = get_settings()
    params = {
        "country": country or settings.openaq_country,
        "limit": limit or settings.openaq_limit,
        "order_by": "datetime",
        "sort": "desc",
        "parameter": OPENAQ_PARAMETERS,
    }
    try:
        data = _get_json(f"{settings.openaq_base_url}/measurements", params)
        measurements = coerce_models(OpenAQMeasurement, data.get("results") or [])
        logger.info(f"OpenAQ returned {len(measurements)} measurements for {params['country']}.")
        return measurements
    except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
        logger.error(f"OpenAQ measurements request failed: {e}", exc_info=True)
        return []


def fetch_global_openaq(limit: int = 1000) -> List[OpenAQMeasurement]:
    """
    Global snapshot from OpenAQ /latest, flattened to one record per measurement.

    /latest nests a measurements[] array inside each location result; the
    location's id, name, country, city and coordinates are copied onto every
    flattened record.
    """
    settings = get_settings()
    params = {
        "limit": limit,
        "order_by": "lastUpdated",
        "sort": "desc",
        "parameter": OPENAQ_GLOBAL_PARAMETERS,
    }
    try:
        data = _get_json(f"{settings.openaq_base_url}/latest", params)
        flattened: List[OpenAQMeasurement] = []
        for result in data.get("results") or []:
            if not result or not result.get("measurements"):
                continue
            for m in result["measurements"]:
                updated = m.get("lastUpdated") or datetime.now(timezone.utc).isoformat()
                flattened.append(OpenAQMeasurement(
                    location_id=result.get("id") or 0,
                    location=result.get("location") or m.get("parameter") or "Unknown",
                    parameter=m.get("parameter"),
                    value=m.get("value"),
                    unit=m.get("unit") or "",
                    country=result.get("country") or "US",
                    city=result.get("city") or "",
                    coordinates=result.get("coordinates") or {"latitude": 0, "longitude": 0},
                    date={"utc": updated, "local": updated},
                ))
        logger.info(f"OpenAQ /latest flattened into {len(flattened)} measurements.")
        return flattened
    except (requests.exceptions.RequestException, ValueError, AttributeError) as e:
        logger.error(f"OpenAQ global request failed: {e}", exc_info=True)
        return []


def fetch_airnow_observations(api_key: Optional[str] = None) -> List[AirNowObservation]:
    """Current observations around each configured zip code. Requires an API key."""
    settings = get_settings()
    key = api_key or settings.airnow_api_key
    if not key:
        logger.warning("EPA AirNow API key not configured, skipping AirNow.")
        return []

    observations: List[AirNowObservation] = []
    for zip_code in settings.airnow_zip_codes:
        params = {
            "format": "application/json",
            "zipCode": zip_code,
            "distance": settings.airnow_distance_miles,
            "API_KEY": key,
        }
        try:
            data = _get_json(f"{settings.airnow_base_url}/observation/zipCode/current/", params)
        except (requests.exceptions.RequestException, ValueError) as e:
            # One bad zip code does not spoil the rest
            logger.error(f"AirNow request failed for zip {zip_code}: {e}")
            continue
        if not isinstance(data, list):
            logger.warning(f"AirNow returned a non-list payload for zip {zip_code}, ignoring it.")
            continue
        for item in data:
            try:
                observations.append(AirNowObservation.model_validate(item))
            except ValueError as e:
                logger.warning(f"Skipping malformed AirNow observation for zip {zip_code}: {e}")
    logger.info(f"AirNow returned {len(observations)} observations.")
    return observations


def fetch_tolnet_sites() -> List[TolNetSite]:
    """TolNet has no public real-time endpoint; the feed is simulated."""
    return simulate_tolnet_sites()


def fetch_realtime_stations(api_key: Optional[str] = None) -> List[Station]:
    """
    Collects all three feeds and normalizes them into the working station set.

    Falls back to the built-in stations if everything comes back empty or
    normalization itself fails.
    """
    logger.info("Fetching real-time data from OpenAQ, EPA AirNow and NASA TolNet...")
    try:
        stations = normalize_sources(
            measurements=fetch_openaq_measurements(),
            observations=fetch_airnow_observations(api_key),
            sites=fetch_tolnet_sites(),
        )
    except ValueError as e:
        logger.error(f"Failed to normalize real-time data, using fallback stations: {e}", exc_info=True)
        return fallback_stations()
    logger.info(f"Fetched {len(stations)} real-time stations.")
    return stations


def fetch_global_report(limit: int = 2000) -> List[CountryAirSummary]:
    """Per-country summaries from the global OpenAQ snapshot, worst AQI first."""
    measurements = fetch_global_openaq(limit)
    if not measurements:
        return []
    return aggregate_by_country(measurements)
