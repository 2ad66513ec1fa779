from __future__ import annotations

import pytest

from fourpillars.engine import BaZiEngine


@pytest.fixture(scope="module")
def engine() -> BaZiEngine:
    return BaZiEngine()


@pytest.fixture(scope="module")
def chart_1990(engine):
    """庚午 辛巳 庚辰 辛巳: a Geng Metal day master born in the Snake month."""
    return engine.calculate("1990-05-15T10:30", birth_hour=10).chart
