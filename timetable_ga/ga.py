import logging
import random
from enum import Enum
from typing import Dict, List, Optional

import numpy as np

from .config import GAConfig
from .domains import ProblemInputs
from .evaluation import rank_population
from .initial_population import build_initial_population
from .model import Schedule
from .operators import crossover, mutate

logger = logging.getLogger(__name__)


class SolverState(str, Enum):
    INITIALIZING = "initializing"
    EVOLVING = "evolving"
    TERMINATED = "terminated"


class GeneticSolver:
    def __init__(self, problem: ProblemInputs, cfg: GAConfig, rng: Optional[random.Random] = None):
        self.problem = problem.validate()
        self.cfg = cfg.validate()
        self.rng = rng if rng is not None else random.Random(cfg.seed)
        self.state = SolverState.INITIALIZING
        self.population: List[Schedule] = []
        self.history: List[Dict] = []

    def select_parents(self, ranked: List[Schedule]) -> List[Schedule]:
        if self.cfg.selection == "top_k":
            k = self.cfg.parent_pool_size
        else:
            k = max(2, len(ranked) // 2)
        return ranked[: min(k, len(ranked))]

    def _pick_pair(self, parents: List[Schedule]):
        # the pool always holds at least two candidates
        p1, p2 = self.rng.sample(parents, 2)
        return p1, p2

    def _next_generation(self, parents: List[Schedule]) -> List[Schedule]:
        size = self.cfg.population_size
        new_pop: List[Schedule] = []

        # Elitism: survivors pass through unmutated, at least one slot left for a child
        if self.cfg.carry_parents:
            for p in parents[: size - 1]:
                new_pop.append(p.copy())

        while len(new_pop) < size:
            p1, p2 = self._pick_pair(parents)
            child = crossover(p1, p2, self.rng, self.cfg.crossover)
            if self.rng.random() < self.cfg.mutation_rate:
                mutate(child, self.problem, self.rng, self.cfg.mutate_fields)
            new_pop.append(child)

        return new_pop

    def _record(self, gen: int, ranked: List[Schedule]) -> Dict:
        counts = np.array([ind.conflict_count for ind in ranked])
        entry = {
            "gen": gen,
            "best_conflicts": int(counts.min()),
            "avg_conflicts": float(counts.mean()),
            "worst_conflicts": int(counts.max()),
            "best_fitness": ranked[0].fitness,
        }
        self.history.append(entry)
        return entry

    def evolve(self) -> Schedule:
        self.state = SolverState.INITIALIZING
        self.history = []
        self.population = build_initial_population(self.problem, self.cfg.population_size, self.rng)
        ranked = rank_population(self.population)
        best_global = ranked[0].copy()
        logger.info(
            "GA start | courses=%s population=%s generations=%s initial_best=%s",
            len(self.problem.courses),
            self.cfg.population_size,
            self.cfg.generations,
            best_global.conflict_count,
        )

        self.state = SolverState.EVOLVING
        generations = self.cfg.generations
        for gen in range(generations):
            ranked = rank_population(self.population)
            if ranked[0].conflict_count < best_global.conflict_count:
                best_global = ranked[0].copy()

            entry = self._record(gen, ranked)
            if gen % self.cfg.log_every == 0 or gen == generations - 1:
                logger.info(
                    "Gen %s: best conflicts=%s avg=%.2f",
                    gen,
                    entry["best_conflicts"],
                    entry["avg_conflicts"],
                )
            else:
                logger.debug("Gen %s: %s", gen, entry)

            if self.cfg.stop_on_zero and best_global.conflict_count == 0:
                logger.info("Conflict-free schedule found at generation %s", gen)
                break

            parents = self.select_parents(ranked)
            self.population = self._next_generation(parents)

        self.state = SolverState.TERMINATED
        final_best = rank_population(self.population)[0]
        if final_best.conflict_count <= best_global.conflict_count:
            best_global = final_best.copy()
        logger.info(
            "GA done | best conflicts=%s fitness=%.5f",
            best_global.conflict_count,
            best_global.fitness,
        )
        return best_global
