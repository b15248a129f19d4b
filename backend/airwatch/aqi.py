# backend/airwatch/aqi.py
import enum
from typing import Dict, Iterable, List, NamedTuple

from .breakpoints import BREAKPOINT_TABLES, sub_index
from .models import PollutantReading

# Pollutants that make up the overall station index by default.
DEFAULT_AQI_POLLUTANTS = ("pm25", "pm10")


class AQICategory(str, enum.Enum):
    GOOD = "Good"
    MODERATE = "Moderate"
    UNHEALTHY_SENSITIVE = "Unhealthy for Sensitive Groups"
    UNHEALTHY = "Unhealthy"
    VERY_UNHEALTHY = "Very Unhealthy"
    HAZARDOUS = "Hazardous"


class CategoryInfo(NamedTuple):
    upper_bound: float  # inclusive
    category: AQICategory
    color: str
    description: str
    actions: List[str]


# Ordered by upper bound; the last band is open-ended.
CATEGORY_BANDS: List[CategoryInfo] = [
    CategoryInfo(50, AQICategory.GOOD, "#16a34a",
                 "Air quality is satisfactory, and air pollution poses little or no risk.",
                 ["Air quality is good, no special precautions needed."]),
    CategoryInfo(100, AQICategory.MODERATE, "#eab308",
                 "Air quality is acceptable. However, there may be a risk for some people.",
                 ["Some people may be sensitive, consider reducing prolonged outdoor exertion."]),
    CategoryInfo(150, AQICategory.UNHEALTHY_SENSITIVE, "#fb923c",
                 "Members of sensitive groups may experience health effects.",
                 ["Sensitive groups should reduce outdoor exertion.",
                  "Consider wearing masks outdoors."]),
    CategoryInfo(200, AQICategory.UNHEALTHY, "#ef4444",
                 "Some members of the general public may experience health effects.",
                 ["Reduce prolonged outdoor exertion.",
                  "Keep windows closed if possible.",
                  "Consider N95 masks."]),
    CategoryInfo(300, AQICategory.VERY_UNHEALTHY, "#7c3aed",
                 "Health alert: The risk of health effects is increased for everyone.",
                 ["Avoid outdoor exertion.",
                  "Use air purifiers indoors.",
                  "Follow local health guidance."]),
    CategoryInfo(float("inf"), AQICategory.HAZARDOUS, "#7f1d1d",
                 "Health warning of emergency conditions: everyone is more likely to be affected.",
                 ["Health warning: everyone should avoid outdoor activity.",
                  "Seek medical advice if symptoms occur."]),
]


def category_info(aqi: float) -> CategoryInfo:
    for band in CATEGORY_BANDS:
        if aqi <= band.upper_bound:
            return band
    return CATEGORY_BANDS[-1]


def aqi_category(aqi: float) -> AQICategory:
    return category_info(aqi).category


def aqi_level(aqi: float) -> str:
    """Human-readable category label, e.g. 50 -> 'Good', 51 -> 'Moderate'."""
    return category_info(aqi).category.value


def aqi_color(aqi: float) -> str:
    return category_info(aqi).color


def aqi_description(aqi: float) -> str:
    return category_info(aqi).description


def recommended_actions(aqi: float) -> List[str]:
    """Advisories for the band of `aqi`. Returns a fresh list each call."""
    return list(category_info(aqi).actions)


def pollutant_sub_indices(
    reading: PollutantReading,
    pollutants: Iterable[str] = DEFAULT_AQI_POLLUTANTS
) -> Dict[str, int]:
    """Breakpoint sub-index for each requested pollutant. Unknown names are skipped."""
    indices: Dict[str, int] = {}
    for name in pollutants:
        table = BREAKPOINT_TABLES.get(name)
        if table is None:
            continue
        indices[name] = sub_index(getattr(reading, name), table)
    return indices


def overall_aqi(
    reading: PollutantReading,
    pollutants: Iterable[str] = DEFAULT_AQI_POLLUTANTS
) -> int:
    """
    Overall AQI of a reading: the highest sub-index among `pollutants`.

    The dominant pollutant decides the index; sub-indices are never averaged.
    """
    indices = pollutant_sub_indices(reading, pollutants)
    if not indices:
        return 0
    return max(indices.values())


def dominant_pollutant(
    reading: PollutantReading,
    pollutants: Iterable[str] = DEFAULT_AQI_POLLUTANTS
) -> str:
    indices = pollutant_sub_indices(reading, pollutants)
    if not indices:
        return ""
    return max(indices, key=indices.get)
