"""
Birth location and Local Mean Time correction.

Timezone is auto-detected from coordinates (or taken from the location when
given) and the zone's standard offset, with any DST stripped, gives the
standard meridian the clock time is measured against. BaZi hours follow
local solar time, so a birth far from the zone meridian can land in a
different two-hour slot once corrected.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from timezonefinder import TimezoneFinder

from fourpillars.astro_calendar import apply_lmt, lmt_correction
from fourpillars.errors import ValidationError

LOG = logging.getLogger(__name__)

_tf = TimezoneFinder()


@dataclass(frozen=True)
class Location:
    latitude: float
    longitude: float
    name: Optional[str] = None
    timezone: Optional[str] = None  # IANA name; looked up from coordinates when None

    def __post_init__(self):
        for label, value, bound in (("latitude", self.latitude, 90.0),
                                    ("longitude", self.longitude, 180.0)):
            if isinstance(value, bool) or not isinstance(value, (int, float)):
                raise ValidationError(f"{label} must be a number, got {value!r}")
            if not -bound <= value <= bound:
                raise ValidationError(f"{label} {value} outside [-{bound:g}, {bound:g}]")

    def to_dict(self):
        return {
            "latitude": self.latitude,
            "longitude": self.longitude,
            "name": self.name,
            "timezone": self.timezone,
        }


def timezone_name_for(location: Location) -> str:
    if location.timezone:
        return location.timezone
    tz_name = _tf.timezone_at(lat=location.latitude, lng=location.longitude)
    if tz_name is None:
        raise ValidationError(
            f"Could not determine timezone for ({location.latitude}, {location.longitude})"
        )
    return tz_name


def standard_meridian_for(location: Location, clock_time: datetime) -> float:
    """
    Standard meridian (degrees east) of the zone in force at ``clock_time``.

    Uses the zone's standard offset, not the clock offset: a DST clock is an
    hour ahead of the zone meridian, and the LMT correction must not absorb it.
    """
    tz_name = timezone_name_for(location)
    try:
        tz = ZoneInfo(tz_name)
    except (ZoneInfoNotFoundError, ValueError) as exc:
        raise ValidationError(f"Unknown timezone {tz_name!r}") from exc

    local_dt = clock_time.replace(tzinfo=tz)
    standard_offset = local_dt.utcoffset() - (local_dt.dst() or timedelta(0))
    return standard_offset.total_seconds() / 3600 * 15


def local_mean_time(clock_time: datetime, location: Location) -> tuple[datetime, float]:
    """
    Convert a naive wall-clock birth time to Local Mean Time.

    Returns:
        (lmt_datetime, correction_minutes)
    """
    meridian = standard_meridian_for(location, clock_time)
    correction = lmt_correction(location.longitude, meridian)
    lmt = apply_lmt(clock_time, location.longitude, meridian)
    LOG.debug("LMT correction %.2f min at %s (meridian %.1f°): %s → %s",
              correction, location.name or (location.latitude, location.longitude),
              meridian, clock_time, lmt)
    return lmt, correction
