"""
Five Element (Wu Xing) distribution analysis.

Weighted element presence across all pillars, expressed as whole
percentages:
- Visible stems: weight 1.0
- Branch own element: weight 0.8
- Hidden stems: main qi 0.6, middle qi 0.3, residual qi 0.1
- Season: the element ruling the birth season gets a flat bonus (Wood for
  the three spring months, Fire for summer, Metal for autumn, Water for
  winter); Chen, Wei, Xu and Chou months credit their season, not Earth
- Time of day: the hour branch reinforces the element of its part of the day

Rounding residue goes to the largest bucket, so the five percentages
always sum to exactly 100.
"""

from collections.abc import Mapping
from dataclasses import dataclass
from types import MappingProxyType

from fourpillars.hidden_stems import HiddenStems
from fourpillars.sexagenary import FourPillars, PillarPosition
from fourpillars.symbols import EarthlyBranch, Element

STEM_WEIGHT = 1.0
BRANCH_WEIGHT = 0.8
SEASONAL_BONUS = 1.0
DIURNAL_BONUS = 0.5

DOMINANT_THRESHOLD = 25  # percent
WEAK_THRESHOLD = 15

# Solar month index (0 = Tiger month) // 3 gives the season.
SEASON_ELEMENTS = (Element.WOOD, Element.FIRE, Element.METAL, Element.WATER)

# Inclusive clock-hour ranges; the remaining hours (21-2) are night.
DIURNAL_PERIODS = (
    (3, 8, Element.WOOD),     # early morning
    (9, 14, Element.FIRE),    # midday
    (15, 20, Element.METAL),  # afternoon
)
NIGHT_ELEMENT = Element.WATER


def diurnal_element(hour: int) -> Element:
    """Element reinforced at a clock hour (0-23)."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be in 0-23, got {hour}")
    for start, end, element in DIURNAL_PERIODS:
        if start <= hour <= end:
            return element
    return NIGHT_ELEMENT


def diurnal_element_for_branch(branch: EarthlyBranch) -> Element:
    return diurnal_element(branch.first_hour)


def season_element(month_branch: EarthlyBranch) -> Element:
    """Element of the season a month branch falls in; Yin opens spring."""
    solar_month_index = (month_branch.index - 2) % 12
    return SEASON_ELEMENTS[solar_month_index // 3]


@dataclass(frozen=True)
class WuXingDistribution:
    wood: int
    fire: int
    earth: int
    metal: int
    water: int
    raw: Mapping[Element, float]

    def __getitem__(self, element: Element) -> int:
        return getattr(self, element.value)

    def items(self):
        return [(e, self[e]) for e in Element]

    @property
    def total(self) -> int:
        return sum(pct for _, pct in self.items())

    def sorted_percentages(self) -> list[tuple[Element, int]]:
        """Elements by descending percentage; ties keep the cycle order."""
        return sorted(self.items(), key=lambda x: -x[1])

    def dominant_elements(self) -> list[Element]:
        return [e for e, pct in self.items() if pct > DOMINANT_THRESHOLD]

    def weak_elements(self) -> list[Element]:
        return [e for e, pct in self.items() if pct < WEAK_THRESHOLD]

    def to_dict(self):
        return {e.value: pct for e, pct in self.items()}


def weighted_counts(four_pillars: FourPillars,
                    hidden: Mapping[PillarPosition, HiddenStems]) -> dict[Element, float]:
    counts = {e: 0.0 for e in Element}

    for pillar in four_pillars:
        counts[pillar.stem.element] += STEM_WEIGHT
        counts[pillar.branch.element] += BRANCH_WEIGHT
        for stem, weight in hidden[pillar.position].weighted():
            counts[stem.element] += weight

    counts[season_element(four_pillars.month.branch)] += SEASONAL_BONUS
    counts[diurnal_element_for_branch(four_pillars.hour.branch)] += DIURNAL_BONUS
    return counts


def distribution(four_pillars: FourPillars,
                 hidden: Mapping[PillarPosition, HiddenStems]) -> WuXingDistribution:
    counts = weighted_counts(four_pillars, hidden)
    total = sum(counts.values())

    percentages = {e: round(counts[e] / total * 100) for e in Element}
    residue = 100 - sum(percentages.values())
    if residue:
        largest = max(Element, key=lambda e: percentages[e])
        percentages[largest] += residue

    return WuXingDistribution(
        wood=percentages[Element.WOOD],
        fire=percentages[Element.FIRE],
        earth=percentages[Element.EARTH],
        metal=percentages[Element.METAL],
        water=percentages[Element.WATER],
        raw=MappingProxyType({e: round(counts[e], 4) for e in Element}),
    )
