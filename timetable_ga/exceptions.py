# timetable_ga/exceptions.py


class TimetableError(Exception):
    """Base class for all timetable-ga errors."""


class ConfigError(TimetableError, ValueError):
    """Raised when the problem inputs or GA parameters are invalid."""


class ScheduleError(TimetableError):
    """Raised when a candidate reaches an invalid state during a run."""
