import pytest

from airwatch.breakpoints import (
    BREAKPOINT_TABLES,
    MAX_AQI,
    PM10_BREAKPOINTS,
    PM25_BREAKPOINTS,
    round_half_up,
    sub_index,
)


@pytest.mark.parametrize("name", sorted(BREAKPOINT_TABLES))
def test_bracket_edges_map_exactly(name):
    table = BREAKPOINT_TABLES[name]
    for bp in table:
        assert sub_index(bp.c_low, table) == bp.i_low
        assert sub_index(bp.c_high, table) == bp.i_high


@pytest.mark.parametrize("table", [PM25_BREAKPOINTS, PM10_BREAKPOINTS])
def test_sub_index_is_monotonic(table):
    top = table[-1].c_high + 50
    previous = -1
    steps = int(top / 0.05)
    for step in range(steps + 1):
        value = sub_index(step * 0.05, table)
        assert value >= previous
        previous = value


def test_pm25_good_moderate_boundary():
    assert sub_index(12.0, PM25_BREAKPOINTS) == 50
    assert sub_index(12.1, PM25_BREAKPOINTS) == 51


def test_interpolates_inside_bracket():
    # (35.5, 55.4) -> (101, 150): 45.0 sits just under the midpoint
    assert sub_index(45.0, PM25_BREAKPOINTS) == 124
    assert sub_index(0.0, PM25_BREAKPOINTS) == 0


def test_values_between_published_rows_use_next_row():
    assert sub_index(12.05, PM25_BREAKPOINTS) == 51
    assert sub_index(54.5, PM10_BREAKPOINTS) == 51


def test_above_table_is_capped_not_extrapolated():
    assert sub_index(500.5, PM25_BREAKPOINTS) == MAX_AQI
    assert sub_index(10_000, PM10_BREAKPOINTS) == MAX_AQI


def test_negative_concentration_treated_as_zero():
    assert sub_index(-3.0, PM25_BREAKPOINTS) == 0


def test_round_half_up():
    assert round_half_up(0.5) == 1
    assert round_half_up(2.5) == 3
    assert round_half_up(2.49) == 2
