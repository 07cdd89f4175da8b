# timetable_ga/evaluation.py
import math
from collections import Counter
from dataclasses import dataclass, field
from itertools import combinations
from typing import Dict, List, Tuple

import numpy as np

from .exceptions import ScheduleError
from .model import (
    ClassAssignment,
    Conflict,
    ConflictKind,
    IntervalPlacement,
    Schedule,
    SlotPlacement,
)

# dimension -> attribute of ClassAssignment holding the contested resource
DIMENSIONS: Tuple[Tuple[ConflictKind, str], ...] = (
    (ConflictKind.ROOM, "room"),
    (ConflictKind.INSTRUCTOR, "instructor"),
    (ConflictKind.COURSE, "course"),
)


@dataclass
class ConflictReport:
    count: int
    conflicts: List[Conflict] = field(default_factory=list)

    def by_kind(self) -> Dict[ConflictKind, int]:
        counts = Counter(c.kind for c in self.conflicts)
        return {kind: counts.get(kind, 0) for kind, _ in DIMENSIONS}

    def descriptions(self) -> List[str]:
        return [c.describe() for c in self.conflicts]


def _slot_conflicts(assignments: List[ClassAssignment]) -> List[Conflict]:
    """
    One pass per dimension over an occupancy matrix [resource][slot].
    Every insertion into an already occupied cell is one conflict.
    Only the slots in use get a column.
    """
    slots = sorted({a.placement.index for a in assignments})
    slot_idx = {s: i for i, s in enumerate(slots)}
    conflicts: List[Conflict] = []

    for kind, attr in DIMENSIONS:
        resources = sorted({getattr(a, attr) for a in assignments})
        res_idx = {r: i for i, r in enumerate(resources)}
        occupancy = np.zeros((len(resources), len(slots)), dtype=int)
        first_course: Dict[Tuple[int, int], str] = {}

        for a in assignments:
            r = res_idx[getattr(a, attr)]
            s = slot_idx[a.placement.index]
            occupancy[r, s] += 1
            if occupancy[r, s] > 1:
                conflicts.append(
                    Conflict(
                        kind=kind,
                        resource=getattr(a, attr),
                        placement=a.placement,
                        courses=(first_course[(r, s)], a.course),
                    )
                )
            else:
                first_course[(r, s)] = a.course

    return conflicts


def _interval_conflicts(assignments: List[ClassAssignment]) -> List[Conflict]:
    conflicts: List[Conflict] = []
    for a, b in combinations(assignments, 2):
        if a.instructor == b.instructor and a.placement.overlaps(b.placement):
            conflicts.append(
                Conflict(ConflictKind.INSTRUCTOR, a.instructor, a.placement, (a.course, b.course))
            )
        if a.room == b.room and a.placement.overlaps(b.placement):
            conflicts.append(
                Conflict(ConflictKind.ROOM, a.room, a.placement, (a.course, b.course))
            )
        if a.course == b.course and a.placement.same_slot(b.placement):
            conflicts.append(
                Conflict(ConflictKind.COURSE, a.course, a.placement, (a.course, b.course))
            )
    return conflicts


def detect_conflicts(schedule: Schedule) -> ConflictReport:
    """Pure detection: no output, the schedule is left untouched."""
    assignments = schedule.assignments
    if not assignments:
        return ConflictReport(count=0)

    kinds = {type(a.placement) for a in assignments}
    if kinds == {SlotPlacement}:
        conflicts = _slot_conflicts(assignments)
    elif kinds == {IntervalPlacement}:
        conflicts = _interval_conflicts(assignments)
    else:
        raise ScheduleError(f"Schedule mixes placement kinds: {sorted(k.__name__ for k in kinds)}")

    return ConflictReport(count=len(conflicts), conflicts=conflicts)


def fitness_from_conflicts(conflict_count: int) -> float:
    if isinstance(conflict_count, bool) or not isinstance(conflict_count, (int, np.integer)):
        raise ScheduleError(f"Conflict count must be an integer, got {conflict_count!r}")
    if conflict_count < 0:
        raise ScheduleError(f"Conflict count must be >= 0, got {conflict_count}")
    return 1.0 / (1.0 + conflict_count)


def evaluate(schedule: Schedule) -> ConflictReport:
    report = detect_conflicts(schedule)
    schedule.conflict_count = report.count
    schedule.fitness = fitness_from_conflicts(report.count)
    return report


def _check_orderable(schedule: Schedule) -> None:
    f = schedule.fitness
    if not isinstance(f, float) or math.isnan(f) or not 0.0 < f <= 1.0:
        raise ScheduleError(f"Candidate fitness cannot be ordered: {f!r}")


def rank_population(population: List[Schedule]) -> List[Schedule]:
    """Best first. Stable, so ties keep insertion order."""
    for ind in population:
        _check_orderable(ind)
    return sorted(population, key=lambda ind: ind.conflict_count)
