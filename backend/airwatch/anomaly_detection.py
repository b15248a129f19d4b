# backend/airwatch/anomaly_detection.py
import logging
from .models import Alert, Station
from .aqi import recommended_actions
from .config import get_settings
from .forecast import generate_forecast
from datetime import datetime, timedelta, timezone
from typing import Dict, Iterable, List, Optional

logger = logging.getLogger(__name__)

NOWCAST = "nowcast"
FORECAST = "forecast"


def check_station(
    station: Station,
    pm25_threshold: Optional[float] = None,
    window_hours: Optional[int] = None,
    now: Optional[datetime] = None
) -> Optional[Alert]:
    """
    Checks one station for a PM2.5 exceedance, now or within the forecast window.

    The forecast check draws a fresh synthetic forecast, so the same station can
    alert on one call and not on the next when it sits near the threshold.
    """
    settings = get_settings()
    if pm25_threshold is None:
        pm25_threshold = settings.alert_pm25_threshold
    if window_hours is None:
        window_hours = settings.alert_forecast_window_hours
    if now is None:
        now = datetime.now(timezone.utc)

    trigger = None
    if station.pollutants.pm25 > pm25_threshold:
        trigger = NOWCAST
    else:
        window_end = now + timedelta(hours=window_hours)
        forecasts = generate_forecast(station.aqi, now=now)
        if any(f.timestamp <= window_end and f.pm25 > pm25_threshold for f in forecasts):
            trigger = FORECAST

    if trigger is None:
        return None

    alert = Alert(
        id=f"{station.id}-{int(now.timestamp() * 1000)}",
        station_id=station.id,
        station_name=station.name,
        aqi=station.aqi,
        level=station.level,
        timestamp=now,
        trigger=trigger,
        actions=recommended_actions(station.aqi),
    )
    logger.warning(f"Alert ({trigger}): {station.name} PM2.5 over {pm25_threshold:.1f}, AQI {station.aqi} at {station.coordinates}")
    return alert


def evaluate_alerts(
    stations: Iterable[Station],
    pm25_threshold: Optional[float] = None,
    window_hours: Optional[int] = None,
    now: Optional[datetime] = None
) -> List[Alert]:
    """Alerts for every station that triggers, keeping only the latest per station name."""
    alerts: Dict[str, Alert] = {}
    for station in stations:
        alert = check_station(station, pm25_threshold=pm25_threshold, window_hours=window_hours, now=now)
        if alert:
            alerts[alert.station_name] = alert
    return list(alerts.values())
