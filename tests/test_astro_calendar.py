from __future__ import annotations

from datetime import date, datetime

import pytest

from fourpillars.astro_calendar import (
    FIXED_TERM_DATES,
    CalendarConverter,
    FixedSolarTermTable,
    LunarDate,
    LunarSolarTermTable,
    SolarTerm,
    apply_lmt,
    lmt_correction,
    lunar_date_for,
)
from fourpillars.errors import CalendarRangeError
from fourpillars.symbols import EarthlyBranch


@pytest.fixture(scope="module")
def converter() -> CalendarConverter:
    return CalendarConverter()


def test_lmt_correction_for_nanning() -> None:
    assert lmt_correction(108.37) == pytest.approx(-46.52)
    assert lmt_correction(120.0) == 0.0
    shifted = apply_lmt(datetime(2000, 1, 1, 14, 5), 108.37)
    assert (shifted.hour, shifted.minute) == (13, 18)


def test_fixed_table_has_every_term_once() -> None:
    dates = FixedSolarTermTable().term_dates(2024)
    assert len(dates) == 24
    assert {term for _, term in dates} == set(SolarTerm)
    assert [d for d, _ in dates] == sorted(d for d, _ in dates)
    assert sum(1 for _, term in dates if term.is_jie) == 12


def test_day_before_start_of_spring_stays_in_previous_year(converter) -> None:
    ctx = converter.to_lunar_and_solar_context(date(2024, 2, 3))
    assert ctx.solar_year == 2023
    assert ctx.solar_month_index == 11
    assert ctx.month_branch is EarthlyBranch.CHOU
    assert ctx.solar_term is SolarTerm.DA_HAN


def test_start_of_spring_opens_the_new_year(converter) -> None:
    """A date on a boundary belongs to the new period."""
    ctx = converter.to_lunar_and_solar_context(date(2024, 2, 4))
    assert ctx.solar_year == 2024
    assert ctx.solar_month_index == 0
    assert ctx.month_branch is EarthlyBranch.YIN
    assert ctx.solar_term is SolarTerm.LI_CHUN


def test_early_january_uses_previous_years_terms(converter) -> None:
    ctx = converter.to_lunar_and_solar_context(date(2024, 1, 5))
    assert ctx.solar_year == 2023
    assert ctx.solar_month_index == 10
    assert ctx.month_branch is EarthlyBranch.ZI
    assert ctx.solar_term is SolarTerm.DONG_ZHI

    ctx = converter.to_lunar_and_solar_context(date(2024, 1, 6))
    assert ctx.solar_month_index == 11
    assert ctx.solar_term is SolarTerm.XIAO_HAN


def test_accepts_datetime(converter) -> None:
    ctx = converter.to_lunar_and_solar_context(datetime(2024, 2, 4, 23, 59))
    assert ctx.gregorian == date(2024, 2, 4)
    assert ctx.solar_year == 2024


@pytest.mark.parametrize("day", [date(1899, 12, 31), date(2101, 1, 1)])
def test_out_of_range_dates_raise(converter, day) -> None:
    with pytest.raises(CalendarRangeError) as excinfo:
        converter.to_lunar_and_solar_context(day)
    assert excinfo.value.value == day
    assert "1900-01-01" in str(excinfo.value)


@pytest.mark.parametrize("day", [date(1900, 1, 1), date(2100, 12, 31)])
def test_range_endpoints_are_supported(converter, day) -> None:
    ctx = converter.to_lunar_and_solar_context(day)
    assert ctx.gregorian == day


def test_lunar_new_year() -> None:
    assert lunar_date_for(date(2024, 2, 10)) == LunarDate(2024, 1, 1, False)
    assert str(LunarDate(2024, 1, 1, False)) == "2024-1-1"


def test_leap_month_is_flagged_but_does_not_shift_solar_month(converter) -> None:
    """2023 had a leap second month; the solar month follows the Jie terms only."""
    lunar = lunar_date_for(date(2023, 4, 1))
    assert lunar.year == 2023
    assert lunar.month == 2
    assert lunar.is_leap_month
    assert str(lunar).startswith("2023-leap 2-")

    assert converter.to_lunar_and_solar_context(date(2023, 4, 1)).solar_month_index == 1
    assert converter.to_lunar_and_solar_context(date(2023, 4, 5)).solar_month_index == 2


def test_custom_table_moves_the_year_boundary() -> None:
    shifted = tuple(
        (term, month, 5 if term is SolarTerm.LI_CHUN else day)
        for term, month, day in FIXED_TERM_DATES
    )
    converter = CalendarConverter(FixedSolarTermTable(shifted))
    ctx = converter.to_lunar_and_solar_context(date(2024, 2, 4))
    assert ctx.solar_year == 2023
    assert ctx.solar_month_index == 11


def test_lunar_python_term_table() -> None:
    dates = dict((term, d) for d, term in LunarSolarTermTable().term_dates(2024))
    assert len(dates) == 24
    assert dates[SolarTerm.LI_CHUN] == date(2024, 2, 4)
    assert dates[SolarTerm.JING_ZHE] == date(2024, 3, 5)
    assert dates[SolarTerm.DONG_ZHI] == date(2024, 12, 21)


def test_lunar_python_table_drives_the_converter() -> None:
    converter = CalendarConverter(LunarSolarTermTable())
    # Awakening of Insects fell on March 5 in 2024, a day before the fixed date
    ctx = converter.to_lunar_and_solar_context(date(2024, 3, 5))
    assert ctx.solar_month_index == 1
    assert ctx.solar_term is SolarTerm.JING_ZHE
