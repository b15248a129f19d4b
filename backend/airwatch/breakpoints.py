# backend/airwatch/breakpoints.py
"""
EPA breakpoint tables and the piecewise-linear sub-index interpolation.

    I = ((I_hi - I_lo) / (C_hi - C_lo)) * (C - C_lo) + I_lo

A table is an ordered tuple of Breakpoint rows covering 0 up to the top of the
scale. Concentrations above the last row are capped at MAX_AQI rather than
extrapolated.
"""
import math
from typing import Dict, NamedTuple, Tuple

MAX_AQI = 500


class Breakpoint(NamedTuple):
    c_low: float
    c_high: float
    i_low: int
    i_high: int


BreakpointTable = Tuple[Breakpoint, ...]

# PM2.5, µg/m³ (24-hour)
PM25_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0.0, 12.0, 0, 50),
    Breakpoint(12.1, 35.4, 51, 100),
    Breakpoint(35.5, 55.4, 101, 150),
    Breakpoint(55.5, 150.4, 151, 200),
    Breakpoint(150.5, 250.4, 201, 300),
    Breakpoint(250.5, 350.4, 301, 400),
    Breakpoint(350.5, 500.4, 401, 500),
)

# PM10, µg/m³ (24-hour)
PM10_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0, 54, 0, 50),
    Breakpoint(55, 154, 51, 100),
    Breakpoint(155, 254, 101, 150),
    Breakpoint(255, 354, 151, 200),
    Breakpoint(355, 424, 201, 300),
    Breakpoint(425, 504, 301, 400),
    Breakpoint(505, 604, 401, 500),
)

# O3, ppb (8-hour). EPA defines no 8-hour rows above 200 ppb.
O3_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0, 54, 0, 50),
    Breakpoint(55, 70, 51, 100),
    Breakpoint(71, 85, 101, 150),
    Breakpoint(86, 105, 151, 200),
    Breakpoint(106, 200, 201, 300),
)

# NO2, ppb (1-hour)
NO2_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0, 53, 0, 50),
    Breakpoint(54, 100, 51, 100),
    Breakpoint(101, 360, 101, 150),
    Breakpoint(361, 649, 151, 200),
    Breakpoint(650, 1249, 201, 300),
    Breakpoint(1250, 1649, 301, 400),
    Breakpoint(1650, 2049, 401, 500),
)

# SO2, ppb (1-hour)
SO2_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0, 35, 0, 50),
    Breakpoint(36, 75, 51, 100),
    Breakpoint(76, 185, 101, 150),
    Breakpoint(186, 304, 151, 200),
    Breakpoint(305, 604, 201, 300),
    Breakpoint(605, 804, 301, 400),
    Breakpoint(805, 1004, 401, 500),
)

# CO, ppm (8-hour)
CO_BREAKPOINTS: BreakpointTable = (
    Breakpoint(0.0, 4.4, 0, 50),
    Breakpoint(4.5, 9.4, 51, 100),
    Breakpoint(9.5, 12.4, 101, 150),
    Breakpoint(12.5, 15.4, 151, 200),
    Breakpoint(15.5, 30.4, 201, 300),
    Breakpoint(30.5, 40.4, 301, 400),
    Breakpoint(40.5, 50.4, 401, 500),
)

BREAKPOINT_TABLES: Dict[str, BreakpointTable] = {
    "pm25": PM25_BREAKPOINTS,
    "pm10": PM10_BREAKPOINTS,
    "o3": O3_BREAKPOINTS,
    "no2": NO2_BREAKPOINTS,
    "so2": SO2_BREAKPOINTS,
    "co": CO_BREAKPOINTS,
}


def round_half_up(value: float) -> int:
    """Rounds halves upward (2.5 -> 3, 3.5 -> 4), unlike the built-in round()."""
    return int(math.floor(value + 0.5))


def sub_index(concentration: float, table: BreakpointTable) -> int:
    """
    Interpolates one pollutant concentration to its AQI sub-index.

    Args:
        concentration: Concentration in the table's unit. Negative values are
                       treated as 0.
        table: Ordered breakpoint rows for the pollutant.

    Returns:
        Integer sub-index within the matching row's [i_low, i_high], or
        MAX_AQI when the concentration is above the table.
    """
    c = max(0.0, concentration)
    for bp in table:
        if c <= bp.c_high:
            # Values in the gap between two published rows (e.g. 12.05) sit on the next row's lower edge.
            c = max(c, bp.c_low)
            slope = (bp.i_high - bp.i_low) / (bp.c_high - bp.c_low)
            return round_half_up(slope * (c - bp.c_low) + bp.i_low)
    return MAX_AQI
