from __future__ import annotations

import pytest

from fourpillars.hidden_stems import hidden_stems_for
from fourpillars.sexagenary import FourPillars, Pillar, PillarPosition
from fourpillars.strength import (
    SCORE_MAX,
    SCORE_MIN,
    StrengthCategory,
    categorize,
    element_preferences,
    score,
    seasonal_influence,
)
from fourpillars.symbols import Element, HeavenlyStem


def _pillars(year: int, month: int, day: int, hour: int) -> FourPillars:
    return FourPillars(*(
        Pillar.from_index(i, pos) for i, pos in zip((year, month, day, hour), PillarPosition)
    ))


def _score(pillars: FourPillars):
    return score(pillars, hidden_stems_for(pillars), pillars.month.branch.element)


@pytest.mark.parametrize("dm, month, in_season, bonus", [
    (Element.WOOD, Element.WOOD, True, 30),
    (Element.WOOD, Element.WATER, True, 20),
    (Element.WOOD, Element.METAL, False, -30),
    (Element.WOOD, Element.FIRE, False, -10),
    (Element.WOOD, Element.EARTH, False, 0),
])
def test_seasonal_influence(dm, month, in_season, bonus) -> None:
    influence = seasonal_influence(dm, month)
    assert influence.season_element is month
    assert influence.in_season is in_season
    assert influence.bonus == bonus


@pytest.mark.parametrize("value, category", [
    (100, StrengthCategory.VERY_STRONG),
    (60, StrengthCategory.VERY_STRONG),
    (59, StrengthCategory.STRONG),
    (20, StrengthCategory.STRONG),
    (19, StrengthCategory.BALANCED),
    (0, StrengthCategory.BALANCED),
    (-20, StrengthCategory.BALANCED),
    (-21, StrengthCategory.WEAK),
    (-60, StrengthCategory.WEAK),
    (-61, StrengthCategory.VERY_WEAK),
    (-100, StrengthCategory.VERY_WEAK),
])
def test_categorize_thresholds(value, category) -> None:
    assert categorize(value, support_weight=3.0, drain_weight=3.0) is category


def test_follow_patterns_need_an_unrooted_opposition() -> None:
    assert categorize(80, support_weight=5.0, drain_weight=0.5) is StrengthCategory.FOLLOW_STRONG
    assert categorize(80, support_weight=5.0, drain_weight=1.5) is StrengthCategory.VERY_STRONG
    assert categorize(-80, support_weight=0.5, drain_weight=5.0) is StrengthCategory.FOLLOW_WEAK
    assert categorize(-80, support_weight=1.5, drain_weight=5.0) is StrengthCategory.VERY_WEAK


def test_every_score_has_a_category() -> None:
    for value in range(SCORE_MIN, SCORE_MAX + 1):
        assert isinstance(categorize(value, 2.0, 2.0), StrengthCategory)


def test_chart_strength(chart_1990) -> None:
    """A Geng day master born in a Fire month is controlled by the season."""
    dm = chart_1990.day_master
    assert dm.stem is HeavenlyStem.GENG
    assert dm.element is Element.METAL
    assert dm.seasonal_influence.bonus == -30
    assert not dm.seasonal_influence.in_season
    assert dm.strength_score == -17
    assert dm.category is StrengthCategory.BALANCED
    assert dm.support_weight == pytest.approx(5.5)
    assert dm.drain_weight == pytest.approx(4.6)


def test_follow_strong_chart() -> None:
    """壬子 in every pillar: nothing but Water."""
    dm = _score(_pillars(48, 48, 48, 48))
    assert dm.strength_score == SCORE_MAX
    assert dm.drain_weight == 0
    assert dm.category is StrengthCategory.FOLLOW_STRONG

    prefs = element_preferences(dm)
    assert prefs.favorable == (Element.WATER, Element.METAL)
    assert prefs.unfavorable == (Element.EARTH, Element.FIRE)
    assert prefs.neutral == (Element.WOOD,)


def test_follow_weak_chart() -> None:
    """A Ren day master surrounded by 戊午 pillars has no Water or Metal root."""
    dm = _score(_pillars(54, 54, 18, 54))
    assert dm.stem is HeavenlyStem.REN
    assert dm.strength_score == -73
    assert dm.support_weight == 0
    assert dm.category is StrengthCategory.FOLLOW_WEAK

    prefs = element_preferences(dm)
    assert prefs.favorable == (Element.EARTH, Element.WOOD, Element.FIRE)
    assert prefs.unfavorable == (Element.WATER, Element.METAL)


def test_score_is_clamped() -> None:
    for indices in [(0, 2, 0, 0), (48, 48, 48, 48), (54, 54, 18, 54), (6, 17, 16, 17)]:
        dm = _score(_pillars(*indices))
        assert SCORE_MIN <= dm.strength_score <= SCORE_MAX


def test_preferences_for_weak_and_strong(chart_1990) -> None:
    weak = element_preferences(chart_1990.day_master)
    assert weak.favorable == (Element.METAL, Element.EARTH)
    assert weak.unfavorable == (Element.FIRE, Element.WOOD)
    assert weak.neutral == (Element.WATER,)

    prefs = element_preferences(_score(_pillars(0, 2, 0, 0)))
    # every element lands in exactly one bucket
    everything = prefs.favorable + prefs.unfavorable + prefs.neutral
    assert sorted(e.value for e in everything) == sorted(e.value for e in Element)
