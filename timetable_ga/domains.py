# timetable_ga/domains.py
import random
import re
from dataclasses import dataclass
from typing import List, Sequence, Tuple, Union

from .exceptions import ConfigError
from .model import IntervalPlacement, Minutes, SlotPlacement, TemporalPlacement

TIME_PATTERN = re.compile(r"^\d{1,2}:\d{2}$")
DEFAULT_DURATIONS: Tuple[Minutes, ...] = (60, 90)
MINUTES_PER_DAY = 24 * 60


def parse_time_to_minutes(value: Union[str, int]) -> Minutes:
    """Accepts "HH:MM" or an int number of minutes since midnight."""
    if isinstance(value, bool):
        raise ConfigError(f"Invalid time value: {value!r}")
    if isinstance(value, int):
        minutes = value
    else:
        text = str(value).strip()
        if not TIME_PATTERN.match(text):
            raise ConfigError(f"Time must be in HH:MM 24-hour format, got {value!r}")
        hours, mins = text.split(":")
        if int(mins) >= 60:
            raise ConfigError(f"Invalid minutes in time {value!r}")
        minutes = int(hours) * 60 + int(mins)
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ConfigError(f"Time out of range: {value!r}")
    return minutes


@dataclass(frozen=True)
class SlotDomain:
    """Finite ordered domain of abstract time slots 0..n_slots-1."""
    n_slots: int

    def validate(self) -> None:
        if isinstance(self.n_slots, bool) or not isinstance(self.n_slots, int) or self.n_slots < 1:
            raise ConfigError("The time domain needs at least one slot")

    def sample(self, rng: random.Random) -> TemporalPlacement:
        return SlotPlacement(rng.randrange(self.n_slots))


@dataclass(frozen=True)
class IntervalDomain:
    """Candidate start times plus a small set of class durations (minutes)."""
    start_times: Tuple[Minutes, ...]
    durations: Tuple[Minutes, ...] = DEFAULT_DURATIONS

    @classmethod
    def from_values(
        cls,
        start_times: Sequence[Union[str, int]],
        durations: Sequence[int] = DEFAULT_DURATIONS,
    ) -> "IntervalDomain":
        starts = tuple(parse_time_to_minutes(t) for t in start_times)
        return cls(start_times=starts, durations=tuple(int(d) for d in durations))

    def validate(self) -> None:
        if not self.start_times:
            raise ConfigError("The time domain needs at least one start time")
        if not self.durations:
            raise ConfigError("The time domain needs at least one duration")
        if any(d <= 0 for d in self.durations):
            raise ConfigError("Class durations must be positive")

    def sample(self, rng: random.Random) -> TemporalPlacement:
        start = rng.choice(self.start_times)
        duration = rng.choice(self.durations)
        return IntervalPlacement(start, start + duration)


TimeDomain = Union[SlotDomain, IntervalDomain]


def build_time_domain(value) -> TimeDomain:
    """
    Normalizes the caller's time description:
    an int is a slot count, a sequence is a list of start times.
    """
    if isinstance(value, (SlotDomain, IntervalDomain)):
        return value
    if isinstance(value, bool):
        raise ConfigError(f"Unsupported time domain: {value!r}")
    if isinstance(value, int):
        return SlotDomain(value)
    if isinstance(value, (list, tuple)):
        return IntervalDomain.from_values(value)
    raise ConfigError(f"Unsupported time domain: {value!r}")


@dataclass(frozen=True)
class ProblemInputs:
    courses: List[str]
    instructors: List[str]
    rooms: List[str]
    time_domain: TimeDomain

    def validate(self) -> "ProblemInputs":
        for name, pool in (
            ("course", self.courses),
            ("instructor", self.instructors),
            ("room", self.rooms),
        ):
            if not pool:
                raise ConfigError(f"The {name} list must not be empty")
        # repeated course ids are allowed: one entry per weekly session
        self.time_domain.validate()
        return self
