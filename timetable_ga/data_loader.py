# timetable_ga/data_loader.py
from pathlib import Path
from typing import List

import pandas as pd

from .domains import DEFAULT_DURATIONS, IntervalDomain, ProblemInputs
from .exceptions import ConfigError


def _read_column(path: Path, column: str) -> pd.Series:
    if not path.exists():
        raise ConfigError(f"Missing input file: {path}")
    df = pd.read_csv(path)
    if column not in df.columns:
        raise ConfigError(f"{path.name} must have a '{column}' column")
    return df[column]


def _as_ids(series: pd.Series) -> List[str]:
    return series.dropna().astype(str).str.strip().loc[lambda s: s != ""].tolist()


def load_problem(data_dir: str) -> ProblemInputs:
    """
    Reads courses.csv, instructors.csv, rooms.csv and times.csv.
    times.csv holds ``start_time`` (HH:MM) and optionally ``duration`` (minutes).
    """
    base = Path(data_dir)
    courses = _as_ids(_read_column(base / "courses.csv", "course"))
    instructors = _as_ids(_read_column(base / "instructors.csv", "instructor"))
    rooms = _as_ids(_read_column(base / "rooms.csv", "room"))

    times_path = base / "times.csv"
    starts = _as_ids(_read_column(times_path, "start_time"))
    times = pd.read_csv(times_path)
    if "duration" in times.columns:
        durations = sorted({int(d) for d in times["duration"].dropna()})
    else:
        durations = list(DEFAULT_DURATIONS)

    problem = ProblemInputs(
        courses=courses,
        instructors=instructors,
        rooms=rooms,
        time_domain=IntervalDomain.from_values(starts, durations),
    )
    return problem.validate()
