"""Exceptions raised by the Four Pillars engine."""


class BaziError(ValueError):
    """Base class for every error the engine reports to its caller."""


class ValidationError(BaziError):
    """Malformed input: bad birth hour, unparsable date, bad location."""


class CalendarRangeError(BaziError):
    """Birth date lies outside the supported calendar table range."""

    def __init__(self, value, earliest, latest):
        self.value = value
        self.earliest = earliest
        self.latest = latest
        super().__init__(
            f"{value} is outside the supported calendar range "
            f"{earliest.isoformat()} to {latest.isoformat()}"
        )
