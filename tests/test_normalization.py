import math

import pytest

from airwatch.aggregation import compute_region_summaries
from airwatch.dummy_data import FALLBACK_STATIONS, fallback_stations
from airwatch.models import PollutantReading, SourceKind, TolNetSite
from airwatch.normalization import (
    AQIStrategy,
    SOURCE_STRATEGIES,
    convert_airnow_to_stations,
    convert_openaq_to_stations,
    convert_tolnet_to_stations,
    linear_approximation_aqi,
    merge_station_sources,
    normalize_sources,
    satellite_proxy_aqi,
)


def _measurement(location, parameter, value, lat=40.0, lon=-74.0, location_id=1, **extra):
    record = {
        "locationId": location_id,
        "location": location,
        "parameter": parameter,
        "value": value,
        "unit": "µg/m³",
        "country": "US",
        "city": "New York",
        "coordinates": {"latitude": lat, "longitude": lon},
        "date": {"utc": "2024-05-01T12:00:00Z", "local": "2024-05-01T08:00:00-04:00"},
    }
    record.update(extra)
    return record


def test_every_source_has_a_distinct_strategy():
    assert len(set(SOURCE_STRATEGIES.values())) == len(SOURCE_STRATEGIES)
    assert SOURCE_STRATEGIES[SourceKind.OPENAQ] is AQIStrategy.LINEAR_APPROXIMATION
    assert SOURCE_STRATEGIES[SourceKind.AIRNOW] is AQIStrategy.REPORTED
    assert SOURCE_STRATEGIES[SourceKind.TOLNET] is AQIStrategy.SATELLITE_PROXY


def test_linear_approximation_takes_max_and_floors_at_one():
    assert linear_approximation_aqi(PollutantReading()) == 1
    # pm25 10 -> 41.7, o3 50 -> 64.0, no2 20 -> 10.6
    assert linear_approximation_aqi(PollutantReading(pm25=10, o3=50, no2=20)) == 64
    # differs from the breakpoint pathway on purpose
    assert linear_approximation_aqi(PollutantReading(pm25=12.0)) == 50
    assert linear_approximation_aqi(PollutantReading(pm25=20.0)) == 83


def test_openaq_groups_records_into_stations():
    measurements = [
        _measurement("Midtown", "pm25", 10.0),
        _measurement("Midtown", "o3", 50.0),
        _measurement("Midtown", "no2", -5.0),
        _measurement("Midtown", "bc", 99.0),
        _measurement("Harbor", "pm25", 200.0, lat=40.7, lon=-74.1, location_id=2),
    ]
    stations = convert_openaq_to_stations(measurements)
    assert len(stations) == 2

    midtown, harbor = stations
    assert midtown.id == "1"
    assert midtown.name == "Midtown"
    assert midtown.location == "New York, US"
    assert midtown.coordinates == (40.0, -74.0)
    assert midtown.pollutants.pm25 == 10.0
    assert midtown.pollutants.o3 == 50.0
    assert midtown.pollutants.no2 == 0.0
    assert midtown.aqi == 64
    assert midtown.level == "Moderate"
    assert midtown.source is SourceKind.OPENAQ
    assert midtown.last_updated is not None
    assert midtown.weather.temperature == 20.0

    # 200 * 4.17 = 834, capped
    assert harbor.aqi == 500
    assert harbor.level == "Hazardous"


def test_openaq_drops_records_without_coordinates():
    measurements = [
        _measurement("Nowhere", "pm25", 10.0, lat=0, lon=0),
        {"locationId": 3, "location": "Missing", "parameter": "pm25", "value": 5.0},
    ]
    assert convert_openaq_to_stations(measurements) == []


def test_openaq_same_name_different_coordinates_are_separate_stations():
    stations = convert_openaq_to_stations([
        _measurement("Twin", "pm25", 10.0, lat=40.0),
        _measurement("Twin", "pm25", 20.0, lat=41.0),
    ])
    assert len(stations) == 2


def test_openaq_missing_city_and_country():
    record = _measurement("Anon", "pm25", 1.0, city=None, country=None)
    record["location"] = None
    stations = convert_openaq_to_stations([record])
    assert stations[0].name == "Unknown Station"
    assert stations[0].location == "Unknown, US"


def test_airnow_passes_reported_values_through():
    stations = convert_airnow_to_stations([{
        "DateObserved": "2024-05-01",
        "HourObserved": 12,
        "ReportingArea": "Boston",
        "StateCode": "MA",
        "Latitude": 42.36,
        "Longitude": -71.06,
        "ParameterName": "PM2.5",
        "AQI": 80,
        "CategoryName": "Moderate",
    }])
    station = stations[0]
    assert station.id == "epa-0"
    assert station.name == "Boston"
    assert station.location == "Boston, MA"
    assert station.aqi == 80
    assert station.level == "Moderate"
    assert station.source is SourceKind.AIRNOW
    p = station.pollutants
    assert (p.pm25, p.pm10, p.o3, p.no2, p.so2) == pytest.approx((32.0, 48.0, 40.0, 24.0, 16.0))
    assert p.co == pytest.approx(0.8)


def test_airnow_category_is_not_recomputed():
    stations = convert_airnow_to_stations([
        {"ReportingArea": "A", "StateCode": "CA", "Latitude": 34.0, "Longitude": -118.0, "AQI": 40, "CategoryName": "Custom"},
        {"ReportingArea": "B", "StateCode": "CA", "Latitude": 34.1, "Longitude": -118.1, "AQI": 40},
    ])
    assert stations[0].level == "Custom"
    assert stations[1].level == "Good"
    assert stations[1].id == "epa-1"


def test_tolnet_uses_satellite_proxy():
    assert satellite_proxy_aqi(330.0) == 40
    stations = convert_tolnet_to_stations([
        TolNetSite(site="GSFC", latitude=38.9967, longitude=-76.8397, ozone_column=330.0, no2_column=2e15),
    ])
    station = stations[0]
    assert station.id == "tolnet-0"
    assert station.name == "NASA TolNet GSFC"
    assert station.location == "GSFC Observatory"
    assert station.aqi == 40
    assert station.level == "Good"
    assert station.pollutants.o3 == pytest.approx(33.0)
    assert station.pollutants.no2 == pytest.approx(200.0)
    assert station.pollutants.pm25 == 0.0


def test_merge_caps_each_source_without_deduplication(station_factory):
    openaq = [station_factory(id=f"o{i}") for i in range(20)]
    airnow = [station_factory(id=f"e{i}") for i in range(12)]
    tolnet = [station_factory(id=f"t{i}") for i in range(4)]

    merged = merge_station_sources(openaq, airnow, tolnet)
    assert len(merged) == 15 + 10 + 4
    assert [s.id for s in merged[:15]] == [f"o{i}" for i in range(15)]
    assert merged[15].id == "e0"
    assert merged[-1].id == "t3"
    # all stations share coordinates and are still kept
    assert len({s.coordinates for s in merged}) == 1


def test_merge_custom_caps(station_factory):
    merged = merge_station_sources([station_factory(id="a"), station_factory(id="b")], [], [], openaq_cap=1)
    assert [s.id for s in merged] == ["a"]


def test_empty_sources_fall_back_to_builtin_stations():
    stations = normalize_sources([], [], [])
    assert stations == fallback_stations()
    assert len(stations) == len(FALLBACK_STATIONS) == 8
    assert all(s.source is SourceKind.BUILTIN for s in stations)


def test_fallback_list_is_a_fresh_copy():
    stations = fallback_stations()
    stations.clear()
    assert len(fallback_stations()) == 8


def test_partial_airnow_observation_is_kept_without_coordinates():
    stations = convert_airnow_to_stations([{"ReportingArea": "X", "AQI": 50}])
    assert len(stations) == 1
    station = stations[0]
    assert station.name == "X"
    assert station.aqi == 50
    assert station.level == "Good"
    assert all(math.isnan(c) for c in station.coordinates)


def test_airnow_null_fields_get_defaults():
    stations = convert_airnow_to_stations([{"ReportingArea": None, "Latitude": None, "Longitude": None, "AQI": None}])
    assert stations[0].name == "Unknown"
    assert stations[0].aqi == 0


def test_partial_tolnet_sites_get_defaults():
    stations = convert_tolnet_to_stations([
        {"site": "GSFC", "latitude": 38.9967, "longitude": -76.8397, "ozone_column": 330.0},
        {},
    ])
    assert stations[0].aqi == 40
    assert stations[0].pollutants.no2 == 0.0
    assert stations[1].name == "NASA TolNet Unknown"
    assert stations[1].aqi == 0
    assert stations[1].level == "Good"


def test_openaq_null_location_id():
    stations = convert_openaq_to_stations([_measurement("Midtown", "pm25", 10.0, location_id=None)])
    assert stations[0].id == "0"


def test_openaq_infinite_value_is_treated_as_missing():
    stations = convert_openaq_to_stations([_measurement("Midtown", "pm25", float("inf"))])
    assert stations[0].pollutants.pm25 == 0.0
    assert stations[0].aqi == 1


def test_partial_record_does_not_lose_other_sources():
    stations = normalize_sources([_measurement("Midtown", "pm25", 10.0)], [{"ReportingArea": "X", "AQI": 50}], [])
    assert [s.source for s in stations] == [SourceKind.OPENAQ, SourceKind.AIRNOW]
    summaries = compute_region_summaries(stations)
    assert sum(s.count for s in summaries) == 1
