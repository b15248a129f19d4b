import pytest
import requests
from fastapi.testclient import TestClient

from airwatch.dummy_data import fallback_stations
from airwatch.main import app, get_stations
from airwatch.models import PollutantReading, SourceKind, Station, WeatherSnapshot


def make_station(id="s1", name=None, coordinates=(40.0, -100.0), aqi=50, level="Good", weather=None, **pollutants):
    return Station(
        id=id,
        name=name or f"Station {id}",
        location="Testville, US",
        coordinates=coordinates,
        pollutants=PollutantReading(**pollutants),
        aqi=aqi,
        level=level,
        weather=weather or WeatherSnapshot(),
        source=SourceKind.BUILTIN,
    )


class FakeResponse:
    def __init__(self, payload, status_code=200):
        self._payload = payload
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.exceptions.HTTPError(f"{self.status_code} Error")

    def json(self):
        if isinstance(self._payload, Exception):
            raise self._payload
        return self._payload


@pytest.fixture()
def station_factory():
    return make_station


@pytest.fixture()
def client():
    app.dependency_overrides[get_stations] = fallback_stations
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()
