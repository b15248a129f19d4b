# backend/airwatch/config.py
from pydantic_settings import BaseSettings, SettingsConfigDict
from pydantic import Field
from functools import lru_cache
from typing import List, Optional
import logging

class Settings(BaseSettings):
    # Env var names are given explicitly through each field alias.
    model_config = SettingsConfigDict(env_file='.env', env_file_encoding='utf-8', extra='ignore', populate_by_name=True)

    # Upstream APIs (only used by the sources module)
    openaq_base_url: str = Field("https://api.openaq.org/v2", alias="OPENAQ_BASE_URL")
    openaq_country: str = Field("US", alias="OPENAQ_COUNTRY")
    openaq_limit: int = Field(100, alias="OPENAQ_LIMIT")
    airnow_base_url: str = Field("https://www.airnowapi.org/aq", alias="AIRNOW_BASE_URL")
    airnow_api_key: Optional[str] = Field(None, alias="AIRNOW_API_KEY")
    airnow_zip_codes: List[str] = Field(["10001", "90210", "60601", "77001", "85001"], alias="AIRNOW_ZIP_CODES")
    airnow_distance_miles: int = Field(50, alias="AIRNOW_DISTANCE")
    request_timeout_seconds: float = Field(10.0, alias="REQUEST_TIMEOUT_SECONDS")

    # Merge caps per source when building the working station set
    openaq_station_cap: int = Field(15, alias="OPENAQ_STATION_CAP")
    airnow_station_cap: int = Field(10, alias="AIRNOW_STATION_CAP")

    # Aggregation
    default_region_aqi: int = Field(63, alias="DEFAULT_REGION_AQI")

    # Forecast
    forecast_hours: int = Field(24, alias="FORECAST_HOURS")
    forecast_variance: float = Field(10.0, alias="FORECAST_VARIANCE")

    # Alerting thresholds
    alert_pm25_threshold: float = Field(35.0, alias="ALERT_PM25_THRESHOLD")
    alert_forecast_window_hours: int = Field(24, alias="ALERT_FORECAST_WINDOW_HOURS")

    log_level: str = Field("INFO", alias="LOG_LEVEL")

@lru_cache()
def get_settings() -> Settings:
    logger = logging.getLogger(__name__)
    logger.info("Loading settings...")
    return Settings()
