# backend/airwatch/forecast.py
import random
from datetime import datetime, timedelta, timezone
from typing import List, Optional

from .breakpoints import MAX_AQI, round_half_up
from .config import get_settings
from .models import ForecastPoint


def generate_forecast(
    current_aqi: float,
    now: Optional[datetime] = None,
    hours: Optional[int] = None,
    variance: Optional[float] = None
) -> List[ForecastPoint]:
    """
    Synthetic hourly forecast around `current_aqi`, for display only.

    Each hour draws an independent variance in [-variance, +variance]; the AQI
    is clamped to [0, 500] and the pollutant estimates are fixed proportions of
    the current AQI plus a share of the variance. Output is intentionally not
    reproducible.
    """
    settings = get_settings()
    if now is None:
        now = datetime.now(timezone.utc)
    if hours is None:
        hours = settings.forecast_hours
    if variance is None:
        variance = settings.forecast_variance

    forecasts: List[ForecastPoint] = []
    for i in range(1, hours + 1):
        delta = random.uniform(-variance, variance)
        predicted = max(0, min(MAX_AQI, round_half_up(current_aqi + delta)))
        forecasts.append(ForecastPoint(
            timestamp=now + timedelta(hours=i),
            aqi=predicted,
            pm25=max(0.0, current_aqi * 0.3 + delta * 0.5),
            o3=max(0.0, current_aqi * 0.4 + delta * 0.3),
            no2=max(0.0, current_aqi * 0.25 + delta * 0.4),
        ))
    return forecasts
