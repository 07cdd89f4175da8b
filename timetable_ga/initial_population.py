# timetable_ga/initial_population.py
import random
from typing import List

from .domains import ProblemInputs
from .evaluation import evaluate
from .model import ClassAssignment, Schedule


def random_assignment(course: str, problem: ProblemInputs, rng: random.Random) -> ClassAssignment:
    # independent uniform draws, clashes are left to selection
    return ClassAssignment(
        course=course,
        instructor=rng.choice(problem.instructors),
        room=rng.choice(problem.rooms),
        placement=problem.time_domain.sample(rng),
    )


def build_random_schedule(problem: ProblemInputs, rng: random.Random) -> Schedule:
    problem.validate()
    assignments = [random_assignment(course, problem, rng) for course in problem.courses]
    schedule = Schedule(assignments=assignments)
    evaluate(schedule)
    return schedule


def build_initial_population(
    problem: ProblemInputs,
    pop_size: int,
    rng: random.Random,
) -> List[Schedule]:
    return [build_random_schedule(problem, rng) for _ in range(pop_size)]
