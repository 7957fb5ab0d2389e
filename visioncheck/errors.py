"""Screening input errors.

Degenerate clinical outcomes (failing the largest row, a screen too small for
the requested optotype) are results, not exceptions. Everything here signals a
caller programming error.
"""


class ScreeningError(Exception):
    """Base class for screening core errors."""
    pass


class InvalidResponseError(ScreeningError, ValueError):
    """Malformed or empty user responses, or invalid numeric input."""
    pass


class UnknownPlateError(ScreeningError, KeyError):
    """Plate id not present in the catalogue."""
    pass


class InvalidMeridianError(ScreeningError, ValueError):
    """Angle does not fall on the astigmatic dial."""
    pass


class SessionFinishedError(ScreeningError, RuntimeError):
    """Transition requested on a session that already finished."""
    pass


class ChartError(ScreeningError, ValueError):
    """Chart catalogue violates its ordering or alphabet invariants."""
    pass
