from datetime import datetime, timezone

from airwatch.anomaly_detection import FORECAST, NOWCAST, check_station, evaluate_alerts

NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)


def test_high_pm25_now_triggers_nowcast_alert(station_factory):
    station = station_factory(id="la", name="LA Downtown", pm25=40.0, aqi=112, level="Unhealthy for Sensitive Groups")
    alert = check_station(station, now=NOW)
    assert alert is not None
    assert alert.trigger == NOWCAST
    assert alert.station_id == "la"
    assert alert.station_name == "LA Downtown"
    assert alert.aqi == 112
    assert alert.level == "Unhealthy for Sensitive Groups"
    assert alert.id == f"la-{int(NOW.timestamp() * 1000)}"
    assert alert.timestamp == NOW
    assert alert.actions


def test_high_aqi_triggers_forecast_alert(station_factory):
    # forecast pm25 is at least 200 * 0.3 - 5 = 55
    alert = check_station(station_factory(pm25=5.0, aqi=200), now=NOW)
    assert alert is not None
    assert alert.trigger == FORECAST


def test_clean_station_does_not_alert(station_factory):
    assert check_station(station_factory(pm25=5.0, aqi=20), now=NOW) is None


def test_threshold_is_strictly_greater(station_factory):
    assert check_station(station_factory(pm25=35.0, aqi=20), now=NOW) is None
    assert check_station(station_factory(pm25=10.0, aqi=20), pm25_threshold=9.9, now=NOW).trigger == NOWCAST


def test_evaluate_alerts_keeps_one_per_station_name(station_factory):
    stations = [
        station_factory(id="a", name="Same Place", pm25=50.0),
        station_factory(id="b", name="Same Place", pm25=60.0),
        station_factory(id="c", name="Elsewhere", pm25=80.0),
        station_factory(id="d", name="Clean", pm25=1.0, aqi=10),
    ]
    alerts = evaluate_alerts(stations, now=NOW)
    assert sorted(a.station_name for a in alerts) == ["Elsewhere", "Same Place"]
    assert next(a for a in alerts if a.station_name == "Same Place").station_id == "b"
