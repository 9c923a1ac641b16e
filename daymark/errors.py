"""
Errors raised by the score ledger.

None of these are fatal. A caller recovers by fixing its input
or by treating the store as empty.
"""


class DaymarkError(ValueError):
    """Base class for every error the ledger raises on bad input."""


class InvalidDayKey(DaymarkError):
    """A date that is not a real calendar day (month 13, April 31st, ...)."""


class DeserializeError(DaymarkError):
    """A persisted payload that does not parse into a day -> score mapping."""
