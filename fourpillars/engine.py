"""
BaZi chart engine.

Computes a full Four Pillars chart from birth data and projects it into
short display strings and descriptive rollups.

Design principle: this module COMPUTES and FLAGS. It does not interpret.
Every output is a pure function of the inputs; there are no timestamps,
no randomness and no caches, so equal inputs give equal charts.

Usage:
    from fourpillars.engine import BaZiEngine
    result = BaZiEngine().calculate("1990-05-15T10:30", birth_hour=10)
    result.formatted.four_pillars   # '庚午 辛巳 庚辰 辛巳'
"""

import logging
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from datetime import date, datetime
from types import MappingProxyType
from typing import Optional, Union

from fourpillars.astro_calendar import CalendarContext, CalendarConverter, LunarDate, SolarTerm, SolarTermTable
from fourpillars.errors import ValidationError
from fourpillars.hidden_stems import HiddenStems, hidden_stems_for
from fourpillars.location import Location, local_mean_time
from fourpillars.sexagenary import FourPillars, PillarPosition, calculate_four_pillars
from fourpillars.strength import (
    DayMasterStrength,
    ElementPreferences,
    StrengthCategory,
    element_preferences,
    score,
)
from fourpillars.symbols import HeavenlyStem
from fourpillars.ten_gods import TenGodsAnalysis, calculate_ten_gods
from fourpillars.wuxing import WuXingDistribution, distribution

LOG = logging.getLogger(__name__)

ENGINE_VERSION = "1.0.0"
DEFAULT_BIRTH_HOUR = 12  # noon: a neutral, Fire-leaning hour branch

DAY_MASTER_DESCRIPTIONS = MappingProxyType({
    HeavenlyStem.JIA: "Towering tree: upright, steadfast, a natural leader",
    HeavenlyStem.YI: "Climbing vine: supple, adaptable, resilient",
    HeavenlyStem.BING: "Midday sun: warm, open, generous",
    HeavenlyStem.DING: "Candle flame: gentle, perceptive, attentive to detail",
    HeavenlyStem.WU: "Mountain: stable, dependable, accommodating",
    HeavenlyStem.JI: "Garden soil: practical, nurturing, grounded",
    HeavenlyStem.GENG: "Blade: decisive, resolute, driven to execute",
    HeavenlyStem.XIN: "Jewel: refined, sensitive, exacting",
    HeavenlyStem.REN: "Ocean: deep, resourceful, ever-changing",
    HeavenlyStem.GUI: "Dew: subtle, clever, quietly sustaining",
})

STRENGTH_DESCRIPTIONS = MappingProxyType({
    StrengthCategory.FOLLOW_STRONG: "Follows its strength; go with the dominant flow, avoid restraint",
    StrengthCategory.VERY_STRONG: "Very strong; needs outlets, suits pioneering work",
    StrengthCategory.STRONG: "Strong; ample energy that wants draining to balance",
    StrengthCategory.BALANCED: "Balanced; flexible and even-tempered",
    StrengthCategory.WEAK: "Weak; needs support, favors steady progress",
    StrengthCategory.VERY_WEAK: "Very weak; go with circumstances, avoid overextension",
    StrengthCategory.FOLLOW_WEAK: "Follows the dominant forces; borrow strength rather than resist",
})


# ============================================================
# RESULT STRUCTURES
# ============================================================

@dataclass(frozen=True)
class BaZiChart:
    birth_date: date
    birth_hour: int  # hour the pillars were computed for
    location: Optional[Location]
    calendar: CalendarContext
    four_pillars: FourPillars
    hidden_stems: Mapping[PillarPosition, HiddenStems]
    day_master: DayMasterStrength
    ten_gods: TenGodsAnalysis
    wuxing: WuXingDistribution
    element_preferences: ElementPreferences
    lmt_correction_minutes: Optional[float] = None
    version: str = ENGINE_VERSION

    @property
    def lunar_date(self) -> LunarDate:
        return self.calendar.lunar_date

    @property
    def solar_term(self) -> SolarTerm:
        return self.calendar.solar_term

    def to_dict(self):
        return {
            "birth_date": self.birth_date.isoformat(),
            "birth_hour": self.birth_hour,
            "location": self.location.to_dict() if self.location else None,
            "lunar_date": {
                "year": self.lunar_date.year,
                "month": self.lunar_date.month,
                "day": self.lunar_date.day,
                "is_leap_month": self.lunar_date.is_leap_month,
            },
            "solar_term": self.solar_term.english,
            "pillars": {p.position.value: p.to_dict() for p in self.four_pillars},
            "hidden_stems": {pos.value: h.to_dict() for pos, h in self.hidden_stems.items()},
            "day_master": self.day_master.to_dict(),
            "ten_gods": self.ten_gods.to_dict(),
            "wuxing": self.wuxing.to_dict(),
            "element_preferences": self.element_preferences.to_dict(),
            "lmt_correction_minutes": self.lmt_correction_minutes,
            "version": self.version,
        }


@dataclass(frozen=True)
class FormattedChart:
    four_pillars: str
    year_pillar: str
    month_pillar: str
    day_pillar: str
    hour_pillar: str
    day_master: str
    day_master_element: str
    day_master_strength: str
    zodiac_animal: str
    solar_term: str
    lunar_date: str


@dataclass(frozen=True)
class ChartSummary:
    day_master_description: str
    strength_description: str
    favorable_elements: tuple[str, ...]
    unfavorable_elements: tuple[str, ...]
    dominant_elements: tuple[str, ...]
    weak_elements: tuple[str, ...]
    element_percentages: tuple[tuple[str, int], ...]  # descending


@dataclass(frozen=True)
class BaZiResult:
    chart: BaZiChart
    formatted: FormattedChart
    summary: ChartSummary

    def to_dict(self):
        return {
            "chart": self.chart.to_dict(),
            "formatted": asdict(self.formatted),
            "summary": asdict(self.summary),
        }


# ============================================================
# INPUT NORMALIZATION
# ============================================================

def _coerce_birth_datetime(birth_date: Union[date, datetime, str]) -> datetime:
    """Naive wall-clock datetime for a date, datetime or ISO-8601 string."""
    if isinstance(birth_date, str):
        try:
            birth_date = datetime.fromisoformat(birth_date)
        except ValueError as exc:
            raise ValidationError(f"Unparsable birth date {birth_date!r}") from exc
    if isinstance(birth_date, datetime):
        return birth_date.replace(tzinfo=None)
    if isinstance(birth_date, date):
        return datetime(birth_date.year, birth_date.month, birth_date.day)
    raise ValidationError(f"birth_date must be a date, datetime or ISO string, got {type(birth_date).__name__}")


def _coerce_birth_hour(birth_hour: Optional[int]) -> int:
    if birth_hour is None:
        return DEFAULT_BIRTH_HOUR
    if isinstance(birth_hour, bool) or not isinstance(birth_hour, int):
        raise ValidationError(f"birth_hour must be an integer 0-23, got {birth_hour!r}")
    if not 0 <= birth_hour <= 23:
        raise ValidationError(f"birth_hour must be in 0-23, got {birth_hour}")
    return birth_hour


def _coerce_location(location) -> Optional[Location]:
    if location is None or isinstance(location, Location):
        return location
    if isinstance(location, Mapping):
        try:
            return Location(**location)
        except TypeError as exc:
            raise ValidationError(f"Bad location {dict(location)!r}: {exc}") from exc
    raise ValidationError(f"location must be a Location or mapping, got {type(location).__name__}")


# ============================================================
# ENGINE
# ============================================================

class BaZiEngine:
    """
    Facade over the calendar, pillar, ten-god, element and strength steps.

    Args:
        solar_terms: solar-term table for year/month boundaries; the fixed
            conventional-date table when omitted
    """

    def __init__(self, solar_terms: Optional[SolarTermTable] = None):
        self.converter = CalendarConverter(solar_terms)

    def calculate(self, birth_date: Union[date, datetime, str],
                  birth_hour: Optional[int] = None,
                  location: Optional[Union[Location, Mapping]] = None,
                  *, true_solar_time: bool = False) -> BaZiResult:
        """
        Compute a full chart.

        Args:
            birth_date: date, datetime or ISO-8601 string; a datetime's
                minutes are used only for the LMT correction
            birth_hour: 0-23, defaults to noon
            location: Location or {latitude, longitude, name?, timezone?}
            true_solar_time: shift the clock time to Local Mean Time at the
                location before resolving the pillars

        Raises:
            ValidationError: bad hour, date or location
            CalendarRangeError: date outside the supported calendar range
        """
        birth_dt = _coerce_birth_datetime(birth_date)
        hour = _coerce_birth_hour(birth_hour)
        location = _coerce_location(location)

        effective_date = birth_dt.date()
        correction = None
        if true_solar_time:
            if location is None:
                raise ValidationError("true_solar_time requires a location")
            clock_time = birth_dt.replace(hour=hour, second=0, microsecond=0)
            lmt, correction = local_mean_time(clock_time, location)
            effective_date, hour = lmt.date(), lmt.hour

        context = self.converter.to_lunar_and_solar_context(effective_date)
        four_pillars = calculate_four_pillars(context, hour)
        hidden = hidden_stems_for(four_pillars)

        day_master = score(four_pillars, hidden, four_pillars.month.branch.element)

        chart = BaZiChart(
            birth_date=birth_dt.date(),
            birth_hour=hour,
            location=location,
            calendar=context,
            four_pillars=four_pillars,
            hidden_stems=hidden,
            day_master=day_master,
            ten_gods=calculate_ten_gods(four_pillars, hidden),
            wuxing=distribution(four_pillars, hidden),
            element_preferences=element_preferences(day_master),
            lmt_correction_minutes=round(correction, 2) if correction is not None else None,
        )
        LOG.debug("Chart for %s hour %d: %s, day master %s (%s, %d)",
                  effective_date, hour, four_pillars.label(), day_master.stem.pinyin,
                  day_master.category.english, day_master.strength_score)

        return BaZiResult(chart=chart, formatted=self.format_chart(chart), summary=self.summarize(chart))

    @staticmethod
    def format_chart(chart: BaZiChart) -> FormattedChart:
        pillars = chart.four_pillars
        dm = chart.day_master
        return FormattedChart(
            four_pillars=pillars.label(),
            year_pillar=pillars.year.label(),
            month_pillar=pillars.month.label(),
            day_pillar=pillars.day.label(),
            hour_pillar=pillars.hour.label(),
            day_master=f"{dm.stem.chinese} ({dm.stem.pinyin})",
            day_master_element=f"{dm.element.chinese} ({dm.element.english})",
            day_master_strength=dm.category.english,
            zodiac_animal=pillars.year.branch.animal,
            solar_term=chart.solar_term.english,
            lunar_date=str(chart.lunar_date),
        )

    @staticmethod
    def summarize(chart: BaZiChart) -> ChartSummary:
        dm = chart.day_master
        prefs = chart.element_preferences
        wx = chart.wuxing
        return ChartSummary(
            day_master_description=DAY_MASTER_DESCRIPTIONS[dm.stem],
            strength_description=STRENGTH_DESCRIPTIONS[dm.category],
            favorable_elements=tuple(e.english for e in prefs.favorable),
            unfavorable_elements=tuple(e.english for e in prefs.unfavorable),
            dominant_elements=tuple(e.english for e in wx.dominant_elements()),
            weak_elements=tuple(e.english for e in wx.weak_elements()),
            element_percentages=tuple((e.english, pct) for e, pct in wx.sorted_percentages()),
        )

    def quick_info(self, birth_date: Union[date, datetime, str],
                   birth_hour: Optional[int] = None) -> dict:
        """Day master, element, strength and animal, for previews."""
        formatted = self.calculate(birth_date, birth_hour).formatted
        return {
            "day_master": formatted.day_master,
            "element": formatted.day_master_element,
            "strength": formatted.day_master_strength,
            "animal": formatted.zodiac_animal,
        }
