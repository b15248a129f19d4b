# backend/airwatch/aggregation.py
import logging
import math
from collections import defaultdict
from typing import Dict, Iterable, List, NamedTuple, Optional, Tuple, Union

from .aqi import aqi_level, overall_aqi
from .breakpoints import round_half_up
from .config import get_settings
from .models import (
    CountryAirSummary,
    OpenAQMeasurement,
    POLLUTANT_FIELDS,
    PollutantReading,
    RegionSummary,
    Station,
    WeatherSnapshot,
)
from .normalization import coerce_models

logger = logging.getLogger(__name__)

# Pollutants reported in the global per-country summary
COUNTRY_POLLUTANTS = ("pm25", "pm10", "o3", "no2")


class RegionBounds(NamedTuple):
    """Inclusive latitude/longitude box plus a representative point for display."""
    name: str
    lat_min: float
    lat_max: float
    lon_min: float
    lon_max: float
    coordinates: Tuple[float, float]

    def contains(self, lat: float, lon: float) -> bool:
        return self.lat_min <= lat <= self.lat_max and self.lon_min <= lon <= self.lon_max


# Rough continental US regions. Boxes overlap; declaration order breaks ties.
US_REGIONS: Tuple[RegionBounds, ...] = (
    RegionBounds("West", 32, 49, -125, -102, (37.7749, -122.4194)),
    RegionBounds("Midwest", 36, 49, -103, -84, (41.8781, -87.6298)),
    RegionBounds("Northeast", 40, 47, -80, -66, (40.7128, -74.0060)),
    RegionBounds("South", 24, 37.5, -100, -75, (29.7604, -95.3698)),
)


# Internal accumulator for one region (sums and a member count)
class AggregatedData:
    def __init__(self):
        self.count = 0
        self.aqi_sum = 0
        self.pollutant_sums: Dict[str, float] = {name: 0.0 for name in POLLUTANT_FIELDS}
        self.temperature_sum = 0.0
        self.humidity_sum = 0.0
        self.wind_speed_sum = 0.0

    def add_station(self, station: Station):
        self.count += 1
        self.aqi_sum += station.aqi
        for name in POLLUTANT_FIELDS:
            self.pollutant_sums[name] += getattr(station.pollutants, name)
        self.temperature_sum += station.weather.temperature
        self.humidity_sum += station.weather.humidity
        self.wind_speed_sum += station.weather.wind_speed

    def get_summary(self, region: RegionBounds, default_aqi: int) -> RegionSummary:
        """Averages the accumulated sums. An empty region gets `default_aqi`, not a computed value."""
        if self.count == 0:
            return RegionSummary(
                name=region.name,
                coordinates=region.coordinates,
                count=0,
                aqi=default_aqi,
                level=aqi_level(default_aqi),
            )

        # Mean of member AQIs, not an AQI of the mean pollutants.
        avg_aqi = round_half_up(self.aqi_sum / self.count)
        pollutants = PollutantReading(**{
            name: round(total / self.count, 2) for name, total in self.pollutant_sums.items()
        })
        weather = WeatherSnapshot(
            temperature=round(self.temperature_sum / self.count, 1),
            humidity=float(round_half_up(self.humidity_sum / self.count)),
            wind_speed=round(self.wind_speed_sum / self.count, 1),
        )
        return RegionSummary(
            name=region.name,
            coordinates=region.coordinates,
            count=self.count,
            pollutants=pollutants,
            weather=weather,
            aqi=avg_aqi,
            level=aqi_level(avg_aqi),
        )


def find_region(lat: float, lon: float, regions: Iterable[RegionBounds] = US_REGIONS) -> Optional[RegionBounds]:
    """First region (in declaration order) whose box contains the point."""
    for region in regions:
        if region.contains(lat, lon):
            return region
    return None


def compute_region_summaries(
    stations: Iterable[Station],
    regions: Tuple[RegionBounds, ...] = US_REGIONS,
    default_aqi: Optional[int] = None
) -> List[RegionSummary]:
    """
    Buckets stations into bounding-box regions and averages them.

    A station counts toward the first matching region only. Stations with
    non-finite coordinates, or outside every box, are left out without error.

    Args:
        stations: Stations to bucket.
        regions: Region boxes, in tie-break order.
        default_aqi: AQI reported for regions without members. Defaults to
                     the `default_region_aqi` setting.

    Returns:
        One RegionSummary per region, in the order of `regions`.
    """
    if default_aqi is None:
        default_aqi = get_settings().default_region_aqi

    aggregated: Dict[str, AggregatedData] = {region.name: AggregatedData() for region in regions}
    skipped = 0

    for station in stations:
        lat, lon = station.coordinates
        if not (math.isfinite(lat) and math.isfinite(lon)):
            skipped += 1
            continue
        region = find_region(lat, lon, regions)
        if region is None:
            skipped += 1
            continue
        aggregated[region.name].add_station(station)

    if skipped:
        logger.debug(f"{skipped} stations fell outside every region and were not counted.")

    return [aggregated[region.name].get_summary(region, default_aqi) for region in regions]


def aggregate_by_country(measurements: Iterable[Union[OpenAQMeasurement, dict]]) -> List[CountryAirSummary]:
    """
    Builds the global report: one summary per upper-cased country code.

    Each pollutant average divides by the country's total record count (all
    parameters), and the AQI is recomputed from those averages with the
    breakpoint method. Results are sorted worst AQI first.
    """
    counts: Dict[str, int] = defaultdict(int)
    sums: Dict[str, Dict[str, float]] = defaultdict(lambda: {name: 0.0 for name in COUNTRY_POLLUTANTS})

    for m in coerce_models(OpenAQMeasurement, measurements):
        country = (m.country or "Unknown").upper()
        counts[country] += 1
        if m.parameter in COUNTRY_POLLUTANTS:
            sums[country][m.parameter] += m.value or 0.0

    summaries: List[CountryAirSummary] = []
    for country, count in counts.items():
        averages = {name: sums[country][name] / count for name in COUNTRY_POLLUTANTS}
        aqi = overall_aqi(PollutantReading(**averages))
        summaries.append(CountryAirSummary(
            country=country,
            count=count,
            avg_pm25=round(averages["pm25"], 2),
            avg_pm10=round(averages["pm10"], 2),
            avg_o3=round(averages["o3"], 2),
            avg_no2=round(averages["no2"], 2),
            aqi=aqi,
            level=aqi_level(aqi),
        ))

    summaries.sort(key=lambda s: s.aqi, reverse=True)
    logger.info(f"Aggregated {sum(counts.values())} measurements into {len(summaries)} country summaries.")
    return summaries
