"""Genetic-algorithm timetable search: courses onto instructors, rooms and times."""
import random
from dataclasses import replace
from typing import Optional, Sequence

from .config import GAConfig
from .domains import ProblemInputs, build_time_domain
from .evaluation import ConflictReport, detect_conflicts, evaluate, fitness_from_conflicts
from .exceptions import ConfigError, ScheduleError, TimetableError
from .ga import GeneticSolver, SolverState
from .model import ClassAssignment, Conflict, ConflictKind, Schedule

__all__ = [
    "run",
    "GAConfig",
    "GeneticSolver",
    "SolverState",
    "ProblemInputs",
    "Schedule",
    "ClassAssignment",
    "Conflict",
    "ConflictKind",
    "ConflictReport",
    "detect_conflicts",
    "evaluate",
    "fitness_from_conflicts",
    "TimetableError",
    "ConfigError",
    "ScheduleError",
]


def run(
    courses: Sequence[str],
    instructors: Sequence[str],
    rooms: Sequence[str],
    time_domain,
    population_size: int,
    generations: int,
    cfg: Optional[GAConfig] = None,
    rng: Optional[random.Random] = None,
) -> Schedule:
    """
    Runs the search and returns the best schedule found.

    ``time_domain`` is a slot count, a sequence of start times ("HH:MM" or
    minutes since midnight) or a prepared time domain. Call
    ``detect_conflicts`` on the result for the full conflict report.
    """
    problem = ProblemInputs(
        courses=list(courses),
        instructors=list(instructors),
        rooms=list(rooms),
        time_domain=build_time_domain(time_domain),
    )
    base = cfg if cfg is not None else GAConfig()
    settings = replace(base, population_size=population_size, generations=generations)
    return GeneticSolver(problem, settings, rng=rng).evolve()
