from __future__ import annotations

from datetime import date

import pytest

from fourpillars.astro_calendar import CalendarConverter
from fourpillars.sexagenary import (
    Pillar,
    PillarPosition,
    calculate_four_pillars,
    day_cycle_index,
    hour_cycle_index,
    hour_slot,
    month_cycle_index,
    sexagenary_index,
    year_cycle_index,
)
from fourpillars.symbols import EarthlyBranch, HeavenlyStem


def _label(index: int) -> str:
    return Pillar.from_index(index, PillarPosition.YEAR).label()


def test_sexagenary_index_roundtrip() -> None:
    assert sexagenary_index(HeavenlyStem.JIA, EarthlyBranch.ZI) == 0
    assert sexagenary_index(HeavenlyStem.GUI, EarthlyBranch.HAI) == 59
    assert sexagenary_index(HeavenlyStem.GENG, EarthlyBranch.CHEN) == 16


def test_sexagenary_index_rejects_mixed_polarity() -> None:
    with pytest.raises(ValueError):
        sexagenary_index(HeavenlyStem.JIA, EarthlyBranch.CHOU)


def test_every_index_pairs_matching_polarity() -> None:
    for idx in range(60):
        pillar = Pillar.from_index(idx, PillarPosition.DAY)
        assert pillar.stem.polarity is pillar.branch.polarity
        assert pillar.cycle_number == idx + 1


@pytest.mark.parametrize("year, expected", [
    (1984, "甲子"),
    (1990, "庚午"),
    (2000, "庚辰"),
    (2024, "甲辰"),
])
def test_year_pillar(year, expected) -> None:
    assert _label(year_cycle_index(year)) == expected


@pytest.mark.parametrize("year, tiger_month", [
    (1984, "丙寅"),  # Jia year
    (1985, "戊寅"),  # Yi year
    (1986, "庚寅"),  # Bing year
    (1987, "壬寅"),  # Ding year
    (1988, "甲寅"),  # Wu year
    (1989, "丙寅"),  # Ji year
])
def test_five_tigers(year, tiger_month) -> None:
    assert _label(month_cycle_index(year, 0)) == tiger_month


def test_month_after_ox_rolls_into_next_year() -> None:
    assert _label(month_cycle_index(1984, 11)) == "丁丑"
    assert month_cycle_index(1984, 12) == month_cycle_index(1985, 0)


@pytest.mark.parametrize("day, expected", [
    (date(1949, 10, 1), "甲子"),
    (date(2000, 1, 1), "戊午"),
    (date(1999, 12, 31), "丁巳"),
    (date(1990, 5, 15), "庚辰"),
    (date(2024, 2, 10), "甲辰"),
])
def test_day_pillar(day, expected) -> None:
    assert _label(day_cycle_index(day)) == expected


def test_day_pillar_advances_by_one() -> None:
    assert day_cycle_index(date(1900, 3, 1)) == (day_cycle_index(date(1900, 2, 28)) + 1) % 60


@pytest.mark.parametrize("hour, slot", [
    (23, 0), (0, 0), (1, 1), (2, 1), (3, 2), (11, 6), (12, 6), (13, 7), (21, 11), (22, 11),
])
def test_hour_slot(hour, slot) -> None:
    assert hour_slot(hour) == slot


@pytest.mark.parametrize("day_pillar, rat_hour", [
    ("甲子", "甲子"),
    ("乙丑", "丙子"),
    ("丙寅", "戊子"),
    ("丁卯", "庚子"),
    ("戊辰", "壬子"),
    ("己巳", "甲子"),
])
def test_five_rats(day_pillar, rat_hour) -> None:
    day_index = next(i for i in range(60) if _label(i) == day_pillar)
    assert _label(hour_cycle_index(day_index, 0)) == rat_hour


def test_calculate_four_pillars() -> None:
    context = CalendarConverter().to_lunar_and_solar_context(date(1990, 5, 15))
    pillars = calculate_four_pillars(context, 10)
    assert pillars.label() == "庚午 辛巳 庚辰 辛巳"
    assert pillars.day_master is HeavenlyStem.GENG
    assert pillars[PillarPosition.MONTH] is pillars.month
    assert [p.position for p in pillars] == list(PillarPosition)
    assert pillars.month.branch is context.month_branch


def test_late_rat_hour_keeps_the_calendar_day() -> None:
    context = CalendarConverter().to_lunar_and_solar_context(date(1999, 12, 31))
    pillars = calculate_four_pillars(context, 23)
    assert pillars.day.label() == "丁巳"
    assert pillars.hour.label() == "庚子"


def test_pillar_to_dict() -> None:
    data = Pillar.from_index(16, PillarPosition.DAY).to_dict()
    assert data["combined"] == "庚辰"
    assert data["pinyin"] == "Geng Chen"
    assert data["stem"]["element"] == "metal"
    assert data["branch"]["animal"] == "Dragon"
    assert data["cycle_number"] == 17
