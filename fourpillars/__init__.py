"""
BaZi (Four Pillars of Destiny) computation engine.

Handles:
- Gregorian to BaZi pillar conversion (solar-term year and month boundaries)
- Hidden stem extraction
- Ten Gods relationship mapping
- Element distribution analysis
- Day Master strength scoring and favorable elements

This package COMPUTES and FLAGS. It does not interpret.
"""

from fourpillars.engine import BaZiChart, BaZiEngine, BaZiResult
from fourpillars.errors import BaziError, CalendarRangeError, ValidationError
from fourpillars.location import Location

__version__ = "1.0.0"

__all__ = [
    "BaZiChart",
    "BaZiEngine",
    "BaZiResult",
    "BaziError",
    "CalendarRangeError",
    "Location",
    "ValidationError",
]
