"""
Genetic algorithm configuration.

Parameters live in a YAML file so runs are reproducible. Any key left
out falls back to the dataclass default, and unknown keys are ignored.
An optional ``problem`` section replaces the built-in demo timetable.
"""
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple

import yaml

from .domains import DEFAULT_DURATIONS, IntervalDomain, ProblemInputs, SlotDomain
from .exceptions import ConfigError
from .operators import CROSSOVER_METHODS, MUTABLE_FIELDS

SELECTION_POLICIES = ("top_half", "top_k")

DEFAULT_COURSES: List[str] = ["Math", "Science", "History", "English"]
DEFAULT_INSTRUCTORS: List[str] = ["Alice", "Bob", "Charlie"]
DEFAULT_ROOMS: List[str] = ["Room 101", "Room 102", "Room 103"]
DEFAULT_START_TIMES: List[str] = ["08:00", "09:30", "11:00"]


@dataclass
class GAConfig:
    # Genetic algorithm
    population_size: int = 10
    generations: int = 50
    mutation_rate: float = 0.1
    seed: Optional[int] = 42

    # Selection and reproduction policy
    selection: str = "top_half"
    parent_pool_size: int = 2   # only used by "top_k"
    carry_parents: bool = True
    crossover: str = "uniform"
    mutate_fields: Tuple[str, ...] = MUTABLE_FIELDS
    stop_on_zero: bool = False

    # Diagnostics
    log_every: int = 5

    # Problem inputs (see problem_from_config)
    problem: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "GAConfig":
        merged = asdict(cls())
        for k, v in data.items():
            if k in merged:
                merged[k] = v
        fields = merged["mutate_fields"]
        if isinstance(fields, str):
            merged["mutate_fields"] = (fields,)
        elif isinstance(fields, (list, tuple)):
            merged["mutate_fields"] = tuple(fields)
        return cls(**merged)

    def validate(self) -> "GAConfig":
        for name in ("population_size", "generations", "parent_pool_size", "log_every"):
            if not _is_int(getattr(self, name)):
                raise ConfigError(f"{name} must be an integer, got {getattr(self, name)!r}")
        if self.population_size < 2:
            raise ConfigError("population_size must be at least 2 (crossover needs two parents)")
        if self.generations < 0:
            raise ConfigError("generations must be >= 0")
        rate = self.mutation_rate
        if isinstance(rate, bool) or not isinstance(rate, (int, float)) or not 0.0 <= rate <= 1.0:
            raise ConfigError(f"mutation_rate must be a number within [0, 1], got {rate!r}")
        if self.selection not in SELECTION_POLICIES:
            raise ConfigError(f"selection must be one of {SELECTION_POLICIES}, got {self.selection!r}")
        if self.parent_pool_size < 2:
            raise ConfigError("parent_pool_size must be at least 2")
        if self.crossover not in CROSSOVER_METHODS:
            raise ConfigError(f"crossover must be one of {CROSSOVER_METHODS}, got {self.crossover!r}")
        if (
            not isinstance(self.mutate_fields, tuple)
            or not self.mutate_fields
            or not all(isinstance(f, str) for f in self.mutate_fields)
            or not set(self.mutate_fields) <= set(MUTABLE_FIELDS)
        ):
            raise ConfigError(f"mutate_fields must be a non-empty subset of {MUTABLE_FIELDS}")
        if self.log_every < 1:
            raise ConfigError("log_every must be >= 1")
        return self


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _load_yaml(path: Path) -> Dict[str, Any]:
    if not path.exists():
        return {}
    text = path.read_text(encoding="utf-8")
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise ConfigError(f"Could not parse {path}: {exc}") from exc
    return data or {}


def load_config(path: str = "config.yaml") -> GAConfig:
    data = _load_yaml(Path(path))
    if not isinstance(data, dict):
        raise ConfigError(f"{path} must contain a mapping")
    return GAConfig.from_dict(data)


def problem_from_config(cfg: GAConfig) -> ProblemInputs:
    """
    Builds the problem inputs from the ``problem`` section.
    ``n_slots`` selects a discrete slot domain, otherwise ``start_times``
    (plus optional ``durations``) builds an interval domain.
    """
    section = cfg.problem or {}
    if not isinstance(section, dict):
        raise ConfigError("problem must be a mapping")

    if "n_slots" in section:
        time_domain = SlotDomain(section["n_slots"])
    else:
        time_domain = IntervalDomain.from_values(
            section.get("start_times", DEFAULT_START_TIMES),
            section.get("durations", DEFAULT_DURATIONS),
        )

    problem = ProblemInputs(
        courses=[str(c) for c in section.get("courses", DEFAULT_COURSES)],
        instructors=[str(i) for i in section.get("instructors", DEFAULT_INSTRUCTORS)],
        rooms=[str(r) for r in section.get("rooms", DEFAULT_ROOMS)],
        time_domain=time_domain,
    )
    return problem.validate()
