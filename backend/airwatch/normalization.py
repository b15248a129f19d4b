# backend/airwatch/normalization.py
"""
Turns the three upstream payload shapes into uniform Station records.

Each source keeps its own AQI pathway (see AQIStrategy). They are calibrated
differently and are deliberately not unified:

* OpenAQ measurements   -> LINEAR_APPROXIMATION (cheap per-pollutant factors)
* AirNow observations   -> REPORTED (upstream AQI passed through)
* TolNet column sites   -> SATELLITE_PROXY (ozone column offset)
* built-in stations     -> AQI values baked into the list
"""
import enum
import logging
from typing import Dict, Iterable, List, Optional, Tuple, Type, TypeVar, Union

from pydantic import BaseModel

from .aqi import aqi_level
from .breakpoints import MAX_AQI, round_half_up
from .config import get_settings
from .dummy_data import fallback_stations
from .models import (
    AirNowObservation,
    OpenAQMeasurement,
    POLLUTANT_FIELDS,
    PollutantReading,
    SourceKind,
    Station,
    TolNetSite,
    WeatherSnapshot,
)

logger = logging.getLogger(__name__)


class AQIStrategy(str, enum.Enum):
    BREAKPOINT = "breakpoint"                      # EPA piecewise-linear interpolation
    LINEAR_APPROXIMATION = "linear_approximation"  # fixed factors per pollutant, max wins
    REPORTED = "reported"                          # AQI supplied by the upstream feed
    SATELLITE_PROXY = "satellite_proxy"            # derived from ozone column density
    REGION_MEAN = "region_mean"                    # mean of member station AQIs


SOURCE_STRATEGIES: Dict[SourceKind, AQIStrategy] = {
    SourceKind.BUILTIN: AQIStrategy.BREAKPOINT,
    SourceKind.OPENAQ: AQIStrategy.LINEAR_APPROXIMATION,
    SourceKind.AIRNOW: AQIStrategy.REPORTED,
    SourceKind.TOLNET: AQIStrategy.SATELLITE_PROXY,
}

# Linear approximation factors (AQI per unit concentration)
LINEAR_AQI_FACTORS = {"pm25": 4.17, "o3": 1.28, "no2": 0.53}

# Placeholder pollutant estimates for AirNow, as fractions of the reported AQI.
# These are not measurements.
AIRNOW_POLLUTANT_FRACTIONS = {"pm25": 0.4, "pm10": 0.6, "o3": 0.5, "no2": 0.3, "so2": 0.2, "co": 0.01}

# Satellite proxy constants
OZONE_COLUMN_BASELINE = 250.0
OZONE_COLUMN_DIVISOR = 10.0
NO2_COLUMN_DIVISOR = 1e13

ModelT = TypeVar("ModelT", bound=BaseModel)


def coerce_models(model_cls: Type[ModelT], items: Iterable[Union[ModelT, dict]]) -> List[ModelT]:
    """Accepts either parsed models or raw upstream dicts."""
    return [item if isinstance(item, model_cls) else model_cls.model_validate(item) for item in items or []]


def linear_approximation_aqi(reading: PollutantReading) -> int:
    """Largest factor-weighted concentration, floored at 1 and rounded. Not capped."""
    candidates = [getattr(reading, name) * factor for name, factor in LINEAR_AQI_FACTORS.items()]
    return round_half_up(max(*candidates, 1))


def satellite_proxy_aqi(ozone_column: float) -> int:
    """Rough surface AQI from an ozone column density (DU). Not a validated retrieval."""
    return round_half_up((ozone_column - OZONE_COLUMN_BASELINE) / 2)


# --- OpenAQ ---

def convert_openaq_to_stations(measurements: Iterable[Union[OpenAQMeasurement, dict]]) -> List[Station]:
    """
    Groups per-pollutant OpenAQ measurements into one Station per
    (location, latitude, longitude).

    Records without usable coordinates are dropped. Within a station the last
    record for a given parameter wins; unknown parameters are ignored.
    """
    grouped: Dict[Tuple[Optional[str], float, float], dict] = {}

    for m in coerce_models(OpenAQMeasurement, measurements):
        coords = m.coordinates
        if not coords or not coords.latitude or not coords.longitude:
            continue

        key = (m.location, coords.latitude, coords.longitude)
        entry = grouped.get(key)
        if entry is None:
            entry = {
                "id": str(m.location_id),
                "name": m.location or "Unknown Station",
                "location": f"{m.city or 'Unknown'}, {m.country or 'US'}",
                "coordinates": (coords.latitude, coords.longitude),
                "pollutants": {},
                "last_updated": m.date.utc if m.date else None,
            }
            grouped[key] = entry

        if m.parameter in POLLUTANT_FIELDS:
            entry["pollutants"][m.parameter] = max(0.0, m.value or 0.0)

    stations: List[Station] = []
    for entry in grouped.values():
        pollutants = PollutantReading(**entry["pollutants"])
        raw_aqi = linear_approximation_aqi(pollutants)
        stations.append(Station(
            id=entry["id"],
            name=entry["name"],
            location=entry["location"],
            coordinates=entry["coordinates"],
            pollutants=pollutants,
            aqi=min(MAX_AQI, raw_aqi),
            level=aqi_level(raw_aqi),
            weather=WeatherSnapshot(),
            source=SourceKind.OPENAQ,
            last_updated=entry["last_updated"],
        ))

    logger.debug(f"Normalized OpenAQ measurements into {len(stations)} stations.")
    return stations


# --- EPA AirNow ---

def convert_airnow_to_stations(observations: Iterable[Union[AirNowObservation, dict]]) -> List[Station]:
    """One Station per observation; AQI and category are taken as reported."""
    stations: List[Station] = []
    for idx, obs in enumerate(coerce_models(AirNowObservation, observations)):
        # AirNow uses negative AQI for "not available"
        aqi = max(0, obs.aqi)
        pollutants = PollutantReading(**{
            name: obs.aqi * fraction for name, fraction in AIRNOW_POLLUTANT_FRACTIONS.items()
        })
        stations.append(Station(
            id=f"epa-{idx}",
            name=obs.reporting_area,
            location=f"{obs.reporting_area}, {obs.state_code}",
            coordinates=(obs.latitude, obs.longitude),
            pollutants=pollutants,
            aqi=aqi,
            level=obs.category_name or aqi_level(aqi),
            weather=WeatherSnapshot(),
            source=SourceKind.AIRNOW,
        ))
    return stations


# --- NASA TolNet ---

def convert_tolnet_to_stations(sites: Iterable[Union[TolNetSite, dict]]) -> List[Station]:
    """One Station per lidar site, AQI and ppb-equivalents derived from column densities."""
    stations: List[Station] = []
    for idx, site in enumerate(coerce_models(TolNetSite, sites)):
        aqi = satellite_proxy_aqi(site.ozone_column)
        stations.append(Station(
            id=f"tolnet-{idx}",
            name=f"NASA TolNet {site.site}",
            location=f"{site.site} Observatory",
            coordinates=(site.latitude, site.longitude),
            pollutants=PollutantReading(
                o3=site.ozone_column / OZONE_COLUMN_DIVISOR,
                no2=site.no2_column / NO2_COLUMN_DIVISOR,
            ),
            aqi=max(0, aqi),
            level=aqi_level(aqi),
            weather=WeatherSnapshot(),
            source=SourceKind.TOLNET,
            last_updated=site.date,
        ))
    return stations


# --- Merge ---

def merge_station_sources(
    openaq: List[Station],
    airnow: List[Station],
    tolnet: List[Station],
    openaq_cap: Optional[int] = None,
    airnow_cap: Optional[int] = None
) -> List[Station]:
    """
    Concatenates per-source station lists, each capped, with no deduplication.

    An empty result degrades to the built-in fallback stations.
    """
    settings = get_settings()
    if openaq_cap is None:
        openaq_cap = settings.openaq_station_cap
    if airnow_cap is None:
        airnow_cap = settings.airnow_station_cap

    merged = list(openaq[:openaq_cap]) + list(airnow[:airnow_cap]) + list(tolnet)
    if not merged:
        logger.warning("No stations from any source, using built-in fallback stations.")
        return fallback_stations()

    logger.info(f"Merged {len(merged)} stations (openaq={min(len(openaq), openaq_cap)}, "
                f"airnow={min(len(airnow), airnow_cap)}, tolnet={len(tolnet)}).")
    return merged


def normalize_sources(
    measurements: Iterable[Union[OpenAQMeasurement, dict]] = (),
    observations: Iterable[Union[AirNowObservation, dict]] = (),
    sites: Iterable[Union[TolNetSite, dict]] = ()
) -> List[Station]:
    """Normalizes all three payload batches and merges them into the working station set."""
    return merge_station_sources(
        convert_openaq_to_stations(measurements),
        convert_airnow_to_stations(observations),
        convert_tolnet_to_stations(sites),
    )
