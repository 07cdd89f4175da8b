import random
from typing import Sequence

from .domains import ProblemInputs
from .evaluation import evaluate
from .exceptions import ConfigError, ScheduleError
from .model import Schedule

CROSSOVER_METHODS = ("uniform", "single_point")
MUTABLE_FIELDS = ("room", "placement", "instructor")


def _check_parents(p1: Schedule, p2: Schedule) -> None:
    if len(p1) != len(p2):
        raise ScheduleError(f"Parents differ in length: {len(p1)} != {len(p2)}")
    if p1.courses != p2.courses:
        raise ScheduleError("Parents do not schedule the same courses")


def single_point_crossover(p1: Schedule, p2: Schedule, rng: random.Random) -> Schedule:
    """Prefix of p1 up to a random cut, suffix of p2 from it."""
    _check_parents(p1, p2)
    cut = rng.randrange(len(p1)) if len(p1) else 0
    child = Schedule(assignments=p1.assignments[:cut] + p2.assignments[cut:])
    evaluate(child)
    return child


def uniform_crossover(p1: Schedule, p2: Schedule, rng: random.Random) -> Schedule:
    """Each position is taken from either parent with equal probability."""
    _check_parents(p1, p2)
    genes = [g1 if rng.random() < 0.5 else g2 for g1, g2 in zip(p1.assignments, p2.assignments)]
    child = Schedule(assignments=genes)
    evaluate(child)
    return child


def crossover(p1: Schedule, p2: Schedule, rng: random.Random, method: str = "uniform") -> Schedule:
    if method == "uniform":
        return uniform_crossover(p1, p2, rng)
    if method == "single_point":
        return single_point_crossover(p1, p2, rng)
    raise ConfigError(f"Unknown crossover method {method!r}, expected one of {CROSSOVER_METHODS}")


def mutate(
    ind: Schedule,
    problem: ProblemInputs,
    rng: random.Random,
    fields: Sequence[str] = MUTABLE_FIELDS,
) -> int:
    """
    Resamples the given fields of one random assignment and re-scores.
    Returns the mutated position.
    """
    unknown = set(fields) - set(MUTABLE_FIELDS)
    if unknown:
        raise ConfigError(f"Unknown mutation fields: {sorted(unknown)}")
    if not ind.assignments:
        raise ScheduleError("Cannot mutate an empty schedule")

    idx = rng.randrange(len(ind.assignments))
    changes = {}
    if "room" in fields:
        changes["room"] = rng.choice(problem.rooms)
    if "placement" in fields:
        changes["placement"] = problem.time_domain.sample(rng)
    if "instructor" in fields:
        changes["instructor"] = rng.choice(problem.instructors)

    ind.assignments[idx] = ind.assignments[idx].with_changes(**changes)
    evaluate(ind)
    return idx
