# timetable_ga/model.py
from dataclasses import dataclass, field, replace
from enum import Enum
from typing import List, Tuple, Union

from .exceptions import ScheduleError

SlotIdx = int
Minutes = int


def minutes_to_time(value: Minutes) -> str:
    hours = value // 60
    minutes = value % 60
    return f"{hours:02d}:{minutes:02d}"


@dataclass(frozen=True)
class SlotPlacement:
    """Abstract time slot: an index into a finite ordered domain."""
    index: SlotIdx

    def __post_init__(self):
        if isinstance(self.index, bool) or not isinstance(self.index, int) or self.index < 0:
            raise ScheduleError(f"Slot index must be a non-negative integer, got {self.index!r}")

    def overlaps(self, other: "TemporalPlacement") -> bool:
        return isinstance(other, SlotPlacement) and self.index == other.index

    def same_slot(self, other: "TemporalPlacement") -> bool:
        return self.overlaps(other)

    def label(self) -> str:
        return f"slot {self.index}"


@dataclass(frozen=True)
class IntervalPlacement:
    """Continuous placement, minutes since midnight. Half-open [start, end)."""
    start: Minutes
    end: Minutes

    @property
    def duration(self) -> Minutes:
        return self.end - self.start

    def overlaps(self, other: "TemporalPlacement") -> bool:
        if not isinstance(other, IntervalPlacement):
            return False
        return self.start < other.end and other.start < self.end

    def same_slot(self, other: "TemporalPlacement") -> bool:
        return (
            isinstance(other, IntervalPlacement)
            and self.start == other.start
            and self.end == other.end
        )

    def label(self) -> str:
        return f"{minutes_to_time(self.start)}-{minutes_to_time(self.end)}"


TemporalPlacement = Union[SlotPlacement, IntervalPlacement]


@dataclass(frozen=True)
class ClassAssignment:
    # One "gene": a course placed with an instructor, a room and a time
    course: str
    instructor: str
    room: str
    placement: TemporalPlacement

    def with_changes(self, **changes) -> "ClassAssignment":
        return replace(self, **changes)


@dataclass
class Schedule:
    assignments: List[ClassAssignment]
    conflict_count: int = 0
    fitness: float = 0.0

    def __len__(self) -> int:
        return len(self.assignments)

    def copy(self) -> "Schedule":
        # assignments are frozen, a new list is enough
        return Schedule(
            assignments=list(self.assignments),
            conflict_count=self.conflict_count,
            fitness=self.fitness,
        )

    @property
    def courses(self) -> Tuple[str, ...]:
        return tuple(a.course for a in self.assignments)


class ConflictKind(str, Enum):
    ROOM = "RoomConflict"
    INSTRUCTOR = "InstructorConflict"
    COURSE = "CourseConflict"


@dataclass(frozen=True)
class Conflict:
    kind: ConflictKind
    resource: str
    placement: TemporalPlacement
    courses: Tuple[str, ...] = field(default_factory=tuple)

    def describe(self) -> str:
        implicated = " and ".join(self.courses)
        if self.kind is ConflictKind.ROOM:
            return f"Room {self.resource} is double-booked for {implicated} at {self.placement.label()}"
        if self.kind is ConflictKind.INSTRUCTOR:
            return f"Instructor {self.resource} has overlapping classes {implicated} at {self.placement.label()}"
        return f"Course {self.resource} is scheduled twice at {self.placement.label()}"
