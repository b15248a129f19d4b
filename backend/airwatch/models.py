# backend/airwatch/models.py
import enum
import math
from pydantic import BaseModel, ConfigDict, Field, field_validator
from typing import Dict, List, Optional, Tuple, Union
from datetime import datetime, timezone

from .breakpoints import round_half_up

POLLUTANT_FIELDS = ("pm25", "pm10", "o3", "no2", "so2", "co")


def _to_float(value, default: Optional[float]) -> Optional[float]:
    """Numeric value of `value`, or `default` when it is missing, unparseable or not finite."""
    if value is None:
        return default
    try:
        value = float(value)
    except (TypeError, ValueError):
        return default
    return value if math.isfinite(value) else default


class SourceKind(str, enum.Enum):
    """Where a Station came from. Each kind has its own AQI pathway (see normalization)."""
    BUILTIN = "builtin"
    OPENAQ = "openaq"
    AIRNOW = "airnow"
    TOLNET = "tolnet"


# --- Value Models ---

class PollutantReading(BaseModel):
    """Concentrations for the six tracked pollutants. Missing or negative values become 0."""
    model_config = ConfigDict(frozen=True, extra='ignore')

    pm25: float = Field(0.0, example=20.5, ge=0, description="PM2.5 in µg/m³")
    pm10: float = Field(0.0, example=45.2, ge=0, description="PM10 in µg/m³")
    o3: float = Field(0.0, example=42.5, ge=0, description="Ozone in ppb")
    no2: float = Field(0.0, example=25.3, ge=0, description="NO2 in ppb")
    so2: float = Field(0.0, example=8.5, ge=0, description="SO2 in ppb")
    co: float = Field(0.0, example=0.8, ge=0, description="CO in ppm")

    @field_validator(*POLLUTANT_FIELDS, mode='before')
    def default_and_clamp(cls, value):
        value = _to_float(value, 0.0)
        return value if value > 0 else 0.0


class WeatherSnapshot(BaseModel):
    """Weather at a station. The defaults (20 °C, 50 %, 3 m/s) mean "no data", not a measurement."""
    model_config = ConfigDict(frozen=True, extra='ignore', populate_by_name=True)

    temperature: float = Field(20.0, example=22.5, description="Air temperature in °C")
    humidity: float = Field(50.0, example=65, ge=0, le=100, description="Relative humidity in %")
    wind_speed: float = Field(3.0, example=3.2, ge=0, alias="windSpeed", description="Wind speed in m/s")


class Station(BaseModel):
    """A single monitoring location, rebuilt from scratch on every refresh."""
    model_config = ConfigDict(frozen=True)

    id: str = Field(..., example="1")
    name: str = Field(..., example="NYC Central")
    location: str = Field(..., example="New York City, NY")
    coordinates: Tuple[float, float] = Field(..., example=(40.7128, -74.0060), description="(latitude, longitude) in WGS84 degrees.")
    pollutants: PollutantReading = Field(default_factory=PollutantReading)
    aqi: int = Field(..., example=68, ge=0)
    level: str = Field(..., example="Moderate")
    weather: WeatherSnapshot = Field(default_factory=WeatherSnapshot)
    source: SourceKind = Field(SourceKind.BUILTIN, description="Which feed produced this station.")
    last_updated: Optional[datetime] = Field(None, description="Timestamp of the newest contributing measurement, if known.")


class RegionSummary(BaseModel):
    """Averages over the stations of one named region. With count == 0 the aqi is a fixed default."""
    model_config = ConfigDict(frozen=True)

    name: str = Field(..., example="West")
    coordinates: Tuple[float, float] = Field(..., example=(37.7749, -122.4194))
    count: int = Field(..., example=3, ge=0, description="Number of stations that contributed.")
    pollutants: PollutantReading = Field(default_factory=PollutantReading)
    weather: WeatherSnapshot = Field(default_factory=WeatherSnapshot)
    aqi: int = Field(..., example=63)
    level: str = Field(..., example="Moderate")


class CountryAirSummary(BaseModel):
    """One row of the global per-country report."""
    country: str = Field(..., example="IN")
    count: int = Field(..., example=120, description="Number of measurement records for the country.")
    avg_pm25: float = Field(0.0, example=48.12)
    avg_pm10: float = Field(0.0, example=71.03)
    avg_o3: float = Field(0.0, example=12.4)
    avg_no2: float = Field(0.0, example=9.87)
    aqi: int = Field(..., example=133)
    level: str = Field(..., example="Unhealthy for Sensitive Groups")


class StateAQI(BaseModel):
    """Pre-computed state-level AQI average."""
    name: str = Field(..., example="California")
    aqi: int = Field(..., example=78)
    level: str = Field(..., example="Moderate")
    coordinates: Tuple[float, float] = Field(..., example=(36.116203, -119.681564))


class ForecastPoint(BaseModel):
    timestamp: datetime = Field(..., description="Forecast hour (UTC).")
    aqi: int = Field(..., ge=0, le=500)
    pm25: float = Field(..., ge=0)
    o3: float = Field(..., ge=0)
    no2: float = Field(..., ge=0)


class Alert(BaseModel):
    """A PM2.5 exceedance raised for one station."""
    id: str = Field(..., example="1-1697630400000")
    station_id: str = Field(..., example="1")
    station_name: str = Field(..., example="NYC Central")
    aqi: int = Field(..., example=102)
    level: str = Field(..., example="Unhealthy for Sensitive Groups")
    timestamp: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))
    trigger: str = Field(..., example="nowcast", description="'nowcast' for a current exceedance, 'forecast' for a predicted one.")
    actions: List[str] = Field(default_factory=list)


# --- Raw Upstream Payloads ---
# Field aliases are the upstream names; unknown fields are dropped.

class GeoPoint(BaseModel):
    model_config = ConfigDict(extra='ignore')

    latitude: Optional[float] = None
    longitude: Optional[float] = None

    @field_validator("latitude", "longitude", mode="before")
    def finite_or_none(cls, value):
        return _to_float(value, None)


class MeasurementDate(BaseModel):
    model_config = ConfigDict(extra='ignore')

    utc: Optional[datetime] = None
    local: Optional[str] = None


class OpenAQMeasurement(BaseModel):
    """One pollutant measurement as returned by OpenAQ /measurements (or flattened /latest)."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    location_id: Union[int, str] = Field(0, alias="locationId")
    location: Optional[str] = None
    parameter: Optional[str] = None
    value: Optional[float] = None
    unit: Optional[str] = None
    country: Optional[str] = None
    city: Optional[str] = None
    coordinates: Optional[GeoPoint] = None
    date: Optional[MeasurementDate] = None

    @field_validator("location_id", mode="before")
    def default_location_id(cls, value):
        return 0 if value is None else value

    @field_validator("value", mode="before")
    def finite_value(cls, value):
        # Infinity and NaN are valid JSON to requests but not usable measurements
        return _to_float(value, None)


class AirNowObservation(BaseModel):
    """One current observation from EPA AirNow, AQI already computed upstream."""
    model_config = ConfigDict(extra='ignore', populate_by_name=True)

    reporting_area: str = Field("Unknown", alias="ReportingArea")
    state_code: str = Field("", alias="StateCode")
    latitude: float = Field(math.nan, alias="Latitude")
    longitude: float = Field(math.nan, alias="Longitude")
    aqi: int = Field(0, alias="AQI")
    category_name: Optional[str] = Field(None, alias="CategoryName")
    parameter_name: Optional[str] = Field(None, alias="ParameterName")
    date_observed: Optional[str] = Field(None, alias="DateObserved")
    hour_observed: Optional[int] = Field(None, alias="HourObserved")

    @field_validator("reporting_area", mode="before")
    def default_reporting_area(cls, value):
        return value or "Unknown"

    @field_validator("state_code", mode="before")
    def default_state_code(cls, value):
        return value or ""

    @field_validator("latitude", "longitude", mode="before")
    def nan_when_missing(cls, value):
        # NaN keeps the station listed but out of regional aggregation
        return _to_float(value, math.nan)

    @field_validator("aqi", mode="before")
    def default_aqi(cls, value):
        return round_half_up(_to_float(value, 0.0))


class TolNetSite(BaseModel):
    """Column densities for one TolNet lidar site (ozone in DU, NO2 in molecules/cm²)."""
    model_config = ConfigDict(extra='ignore')

    site: str = "Unknown"
    latitude: float = math.nan
    longitude: float = math.nan
    ozone_column: float = 0.0
    no2_column: float = 0.0
    date: Optional[datetime] = None

    @field_validator("site", mode="before")
    def default_site(cls, value):
        return value or "Unknown"

    @field_validator("latitude", "longitude", mode="before")
    def nan_when_missing(cls, value):
        return _to_float(value, math.nan)

    @field_validator("ozone_column", "no2_column", mode="before")
    def zero_when_missing(cls, value):
        return _to_float(value, 0.0)


# --- Response Models for Specific Endpoints ---

class AQIResult(BaseModel):
    """Breakpoint AQI of a single reading, with its category details."""
    aqi: int = Field(..., example=80)
    level: str = Field(..., example="Moderate")
    dominant_pollutant: str = Field(..., example="pm25", description="Pollutant with the highest sub-index.")
    sub_indices: Dict[str, int] = Field(default_factory=dict, example={"pm25": 80, "pm10": 40})
    color: str = Field(..., example="#eab308")
    description: str
    actions: List[str] = Field(default_factory=list)
