# backend/airwatch/dummy_data.py
import random
from datetime import datetime, timezone
from typing import List, Optional

from .models import PollutantReading, SourceKind, StateAQI, Station, TolNetSite, WeatherSnapshot
from .aqi import aqi_level


def _station(id, name, location, coordinates, aqi, level, pollutants, weather) -> Station:
    return Station(
        id=id,
        name=name,
        location=location,
        coordinates=coordinates,
        aqi=aqi,
        level=level,
        pollutants=PollutantReading(**pollutants),
        weather=WeatherSnapshot(**weather),
        source=SourceKind.BUILTIN,
    )


# Baked-in readings for eight US cities, served whenever live data is unavailable.
FALLBACK_STATIONS: List[Station] = [
    _station("1", "NYC Central", "New York City, NY", (40.7128, -74.0060), 68, "Moderate",
             dict(pm25=20.5, pm10=45.2, o3=42.5, no2=25.3, so2=8.5, co=0.8),
             dict(temperature=22.5, humidity=65, wind_speed=3.2)),
    _station("2", "LA Downtown", "Los Angeles, CA", (34.0522, -118.2437), 102, "Unhealthy for Sensitive Groups",
             dict(pm25=35.2, pm10=68.5, o3=58.3, no2=38.5, so2=12.3, co=1.2),
             dict(temperature=26.8, humidity=55, wind_speed=2.8)),
    _station("3", "Chicago Loop", "Chicago, IL", (41.8781, -87.6298), 45, "Good",
             dict(pm25=12.8, pm10=28.3, o3=35.2, no2=18.2, so2=6.5, co=0.5),
             dict(temperature=18.3, humidity=72, wind_speed=4.5)),
    _station("4", "Houston Central", "Houston, TX", (29.7604, -95.3698), 58, "Moderate",
             dict(pm25=18.3, pm10=38.7, o3=48.7, no2=28.7, so2=9.8, co=0.9),
             dict(temperature=28.2, humidity=78, wind_speed=2.3)),
    _station("5", "Phoenix Metro", "Phoenix, AZ", (33.4484, -112.0740), 89, "Moderate",
             dict(pm25=28.7, pm10=55.2, o3=52.8, no2=32.4, so2=8.9, co=1.0),
             dict(temperature=32.5, humidity=25, wind_speed=3.8)),
    _station("6", "Denver Mile High", "Denver, CO", (39.7392, -104.9903), 52, "Moderate",
             dict(pm25=15.4, pm10=32.8, o3=38.5, no2=22.8, so2=7.2, co=0.7),
             dict(temperature=20.8, humidity=45, wind_speed=5.2)),
    _station("7", "Seattle Downtown", "Seattle, WA", (47.6062, -122.3321), 38, "Good",
             dict(pm25=10.2, pm10=22.5, o3=28.3, no2=15.2, so2=5.8, co=0.4),
             dict(temperature=16.5, humidity=82, wind_speed=3.5)),
    _station("8", "SF Bay Area", "San Francisco, CA", (37.7749, -122.4194), 55, "Moderate",
             dict(pm25=16.8, pm10=35.4, o3=32.7, no2=18.9, so2=6.8, co=0.6),
             dict(temperature=19.2, humidity=68, wind_speed=4.2)),
]

# State-level AQI averages: (state, aqi, (lat, lon))
STATE_AQI_DATA = [
    ("Alabama", 52, (32.806671, -86.791130)),
    ("Alaska", 28, (61.370716, -152.404419)),
    ("Arizona", 89, (33.729759, -111.431221)),
    ("Arkansas", 48, (34.969704, -92.373123)),
    ("California", 78, (36.116203, -119.681564)),
    ("Colorado", 52, (39.059811, -105.311104)),
    ("Connecticut", 61, (41.597782, -72.755371)),
    ("Delaware", 58, (39.318523, -75.507141)),
    ("Florida", 55, (27.766279, -81.686783)),
    ("Georgia", 54, (33.040619, -83.643074)),
    ("Hawaii", 32, (21.094318, -157.498337)),
    ("Idaho", 41, (44.240459, -114.478828)),
    ("Illinois", 62, (40.349457, -88.986137)),
    ("Indiana", 65, (39.849426, -86.258278)),
    ("Iowa", 48, (42.011539, -93.210526)),
    ("Kansas", 46, (38.526600, -96.726486)),
    ("Kentucky", 58, (37.668140, -84.670067)),
    ("Louisiana", 64, (31.169546, -91.867805)),
    ("Maine", 42, (44.693947, -69.381927)),
    ("Maryland", 67, (39.063946, -76.802101)),
    ("Massachusetts", 59, (42.230171, -71.530106)),
    ("Michigan", 56, (43.326618, -84.536095)),
    ("Minnesota", 44, (45.694454, -93.900192)),
    ("Mississippi", 49, (32.741646, -89.678696)),
    ("Missouri", 53, (38.456085, -92.288368)),
    ("Montana", 38, (47.052952, -110.454353)),
    ("Nebraska", 43, (41.125370, -98.268082)),
    ("Nevada", 72, (38.313515, -117.055374)),
    ("New Hampshire", 45, (43.452492, -71.563896)),
    ("New Jersey", 71, (40.298904, -74.521011)),
    ("New Mexico", 56, (34.840515, -106.248482)),
    ("New York", 68, (42.165726, -74.948051)),
    ("North Carolina", 51, (35.630066, -79.806419)),
    ("North Dakota", 39, (47.528912, -99.784012)),
    ("Ohio", 63, (40.388783, -82.764915)),
    ("Oklahoma", 47, (35.565342, -96.928917)),
    ("Oregon", 49, (44.931109, -120.767178)),
    ("Pennsylvania", 66, (40.590752, -77.209755)),
    ("Rhode Island", 57, (41.680893, -71.511780)),
    ("South Carolina", 50, (33.856892, -80.945007)),
    ("South Dakota", 41, (44.299782, -99.438828)),
    ("Tennessee", 56, (35.747845, -86.692345)),
    ("Texas", 61, (31.054487, -97.563461)),
    ("Utah", 68, (40.150032, -111.862434)),
    ("Vermont", 40, (44.045876, -72.710686)),
    ("Virginia", 54, (37.769337, -78.169968)),
    ("Washington", 43, (47.400902, -121.490494)),
    ("West Virginia", 59, (38.491226, -80.954570)),
    ("Wisconsin", 47, (44.268543, -89.616508)),
    ("Wyoming", 35, (42.755966, -107.302490)),
]

# TolNet lidar sites: (site, lat, lon, ozone base DU, ozone spread, NO2 base, NO2 spread)
TOLNET_SITES = [
    ("GSFC", 38.9967, -76.8397, 320.0, 40.0, 2.1, 0.5),
    ("JPL", 34.2048, -118.1712, 310.0, 30.0, 1.8, 0.4),
    ("Huntsville", 34.7304, -86.5861, 315.0, 35.0, 1.9, 0.3),
    ("Boulder", 40.0150, -105.2705, 325.0, 25.0, 2.0, 0.6),
]


def fallback_stations() -> List[Station]:
    """The built-in station list. Touches no I/O, so it always succeeds."""
    return list(FALLBACK_STATIONS)


def simulate_tolnet_sites(now: Optional[datetime] = None) -> List[TolNetSite]:
    """Generates one simulated TolNet reading per site."""
    if now is None:
        now = datetime.now(timezone.utc)
    return [
        TolNetSite(
            site=site,
            latitude=lat,
            longitude=lon,
            date=now,
            ozone_column=ozone_base + random.random() * ozone_spread,
            no2_column=(no2_base + random.random() * no2_spread) * 1e15,
        )
        for site, lat, lon, ozone_base, ozone_spread, no2_base, no2_spread in TOLNET_SITES
    ]


def state_aqi_levels() -> List[StateAQI]:
    """State AQI table with the category label filled in."""
    return [
        StateAQI(name=name, aqi=aqi, level=aqi_level(aqi), coordinates=coords)
        for name, aqi, coords in STATE_AQI_DATA
    ]
