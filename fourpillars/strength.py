"""
Day Master strength scoring and favorable elements.

Factors:
1. Month season (月令): is the Day Master in season?
2. Support from the other stems, the branches and the hidden stems
3. Drain from officers, output and wealth elements

Every contributor's base weight matches the Wu Xing distribution; the
pillar weight favors the month and day, which sit closest to the Day Master.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from enum import Enum
from types import MappingProxyType

from fourpillars.hidden_stems import HiddenStems
from fourpillars.sexagenary import FourPillars, PillarPosition
from fourpillars.symbols import Element, HeavenlyStem, Polarity
from fourpillars.ten_gods import TenGodFamily, element_relationship
from fourpillars.wuxing import BRANCH_WEIGHT, STEM_WEIGHT

SCORE_MIN = -100
SCORE_MAX = 100

POINTS_PER_WEIGHT = 10.0

PILLAR_WEIGHTS = MappingProxyType({
    PillarPosition.YEAR: 0.8,
    PillarPosition.MONTH: 1.5,
    PillarPosition.DAY: 1.2,
    PillarPosition.HOUR: 1.0,
})

RELATION_FACTORS = MappingProxyType({
    TenGodFamily.PARALLEL: 1.0,
    TenGodFamily.RESOURCE: 0.8,
    TenGodFamily.OFFICER: -0.9,
    TenGodFamily.OUTPUT: -0.6,
    TenGodFamily.WEALTH: -0.5,
})

# Month element relative to the Day Master
SEASON_BONUSES = MappingProxyType({
    TenGodFamily.PARALLEL: 30,   # in season (当令)
    TenGodFamily.RESOURCE: 20,   # season produces the DM (相生)
    TenGodFamily.OFFICER: -30,   # season controls the DM (受克)
    TenGodFamily.OUTPUT: -10,    # DM drains into the season (泄气)
    TenGodFamily.WEALTH: 0,
})

FOLLOW_SCORE = 70
ROOT_THRESHOLD = 1.0


class StrengthCategory(Enum):
    FOLLOW_STRONG = ("从强", "Follow Strong")
    VERY_STRONG = ("极旺", "Very Strong")
    STRONG = ("旺", "Strong")
    BALANCED = ("中和", "Balanced")
    WEAK = ("弱", "Weak")
    VERY_WEAK = ("极弱", "Very Weak")
    FOLLOW_WEAK = ("从弱", "Follow Weak")

    def __init__(self, chinese: str, english: str):
        self.chinese = chinese
        self.english = english


# (minimum score, category), strongest first; anything lower is Very Weak.
CATEGORY_THRESHOLDS = (
    (60, StrengthCategory.VERY_STRONG),
    (20, StrengthCategory.STRONG),
    (-20, StrengthCategory.BALANCED),
    (-60, StrengthCategory.WEAK),
)


@dataclass(frozen=True)
class SeasonalInfluence:
    season_element: Element
    in_season: bool
    bonus: int


@dataclass(frozen=True)
class DayMasterStrength:
    stem: HeavenlyStem
    element: Element
    polarity: Polarity
    strength_score: int
    category: StrengthCategory
    seasonal_influence: SeasonalInfluence
    support_weight: float
    drain_weight: float

    def to_dict(self):
        return {
            "stem": self.stem.pinyin,
            "element": self.element.value,
            "polarity": self.polarity.value,
            "strength_score": self.strength_score,
            "category": self.category.english,
            "seasonal_influence": {
                "season_element": self.seasonal_influence.season_element.value,
                "in_season": self.seasonal_influence.in_season,
                "bonus": self.seasonal_influence.bonus,
            },
            "support_weight": self.support_weight,
            "drain_weight": self.drain_weight,
        }


def seasonal_influence(day_master_element: Element, month_element: Element) -> SeasonalInfluence:
    relation = element_relationship(day_master_element, month_element)
    return SeasonalInfluence(
        season_element=month_element,
        in_season=relation in (TenGodFamily.PARALLEL, TenGodFamily.RESOURCE),
        bonus=SEASON_BONUSES[relation],
    )


def _contributors(four_pillars: FourPillars, hidden: Mapping[PillarPosition, HiddenStems]):
    """(position, element, base weight) for everything except the day stem."""
    for pillar in four_pillars:
        if pillar.position is not PillarPosition.DAY:
            yield pillar.position, pillar.stem.element, STEM_WEIGHT
        yield pillar.position, pillar.branch.element, BRANCH_WEIGHT
        for stem, weight in hidden[pillar.position].weighted():
            yield pillar.position, stem.element, weight


def categorize(score: int, support_weight: float, drain_weight: float) -> StrengthCategory:
    """
    Bucket a score into one of the seven categories.

    The follow (从) patterns apply when one side overwhelms and the other
    has essentially no root.
    """
    if score >= FOLLOW_SCORE and drain_weight < ROOT_THRESHOLD:
        return StrengthCategory.FOLLOW_STRONG
    if score <= -FOLLOW_SCORE and support_weight < ROOT_THRESHOLD:
        return StrengthCategory.FOLLOW_WEAK
    for minimum, category in CATEGORY_THRESHOLDS:
        if score >= minimum:
            return category
    return StrengthCategory.VERY_WEAK


def score(four_pillars: FourPillars, hidden: Mapping[PillarPosition, HiddenStems],
          month_element: Element) -> DayMasterStrength:
    day_master = four_pillars.day_master
    dm_element = day_master.element

    season = seasonal_influence(dm_element, month_element)
    raw_score = float(season.bonus)
    support = 0.0
    drain = 0.0

    for position, element, weight in _contributors(four_pillars, hidden):
        relation = element_relationship(dm_element, element)
        factor = RELATION_FACTORS[relation]
        raw_score += POINTS_PER_WEIGHT * weight * PILLAR_WEIGHTS[position] * factor
        if factor > 0:
            support += weight
        else:
            drain += weight

    strength_score = max(SCORE_MIN, min(SCORE_MAX, round(raw_score)))

    return DayMasterStrength(
        stem=day_master,
        element=dm_element,
        polarity=day_master.polarity,
        strength_score=strength_score,
        category=categorize(strength_score, support, drain),
        seasonal_influence=season,
        support_weight=round(support, 2),
        drain_weight=round(drain, 2),
    )


# ============================================================
# FAVORABLE ELEMENTS (喜用神)
# ============================================================

@dataclass(frozen=True)
class ElementPreferences:
    favorable: tuple[Element, ...]
    unfavorable: tuple[Element, ...]
    neutral: tuple[Element, ...]

    def to_dict(self):
        return {
            "favorable": [e.value for e in self.favorable],
            "unfavorable": [e.value for e in self.unfavorable],
            "neutral": [e.value for e in self.neutral],
        }


def element_preferences(strength: DayMasterStrength) -> ElementPreferences:
    """
    Favorable and unfavorable elements for the Day Master.

    A weak Day Master wants its own element and its resource; a strong one
    wants officers, output and wealth to drain or restrain it.
    """
    dm = strength.element
    resource = dm.generated_by
    officer = dm.controlled_by
    output = dm.generates
    wealth = dm.controls

    if strength.category is StrengthCategory.FOLLOW_STRONG:
        return ElementPreferences((dm, resource), (officer, wealth), (output,))
    if strength.category is StrengthCategory.FOLLOW_WEAK:
        return ElementPreferences((officer, output, wealth), (dm, resource), ())
    if strength.strength_score < -10:
        return ElementPreferences((dm, resource), (officer, wealth), (output,))
    if strength.strength_score > 10:
        return ElementPreferences((officer, output, wealth), (resource,), (dm,))
    return ElementPreferences((officer,), (wealth,), (dm, resource, output))
