import argparse
import logging
import sys
import time
from dataclasses import replace
from pathlib import Path

import pandas as pd

from timetable_ga.config import GAConfig, load_config, problem_from_config
from timetable_ga.data_loader import load_problem
from timetable_ga.evaluation import ConflictReport, detect_conflicts
from timetable_ga.exceptions import TimetableError
from timetable_ga.ga import GeneticSolver
from timetable_ga.model import Schedule

logger = logging.getLogger("timetable_ga.run")


def schedule_to_dataframe(best: Schedule) -> pd.DataFrame:
    data = []
    for a in best.assignments:
        data.append(
            {
                "Course": a.course,
                "Instructor": a.instructor,
                "Room": a.room,
                "Time": a.placement.label(),
            }
        )
    return pd.DataFrame(data)


def conflicts_to_dataframe(report: ConflictReport) -> pd.DataFrame:
    rows = [
        {
            "kind": c.kind.value,
            "resource": c.resource,
            "time": c.placement.label(),
            "courses": " | ".join(c.courses),
            "description": c.describe(),
        }
        for c in report.conflicts
    ]
    return pd.DataFrame(rows, columns=["kind", "resource", "time", "courses", "description"])


def print_report(best: Schedule, report: ConflictReport, elapsed: float):
    print("\n--- OPTIMIZED SCHEDULE ---")
    print(schedule_to_dataframe(best).to_string(index=False))
    print(f"\nFitness: {best.fitness:.5f} | Time: {elapsed:.2f}s")
    for line in report.descriptions():
        print(f"Conflict: {line}")
    by_kind = ", ".join(f"{k.value}={v}" for k, v in report.by_kind().items())
    print(f"Total Conflicts: {report.count} ({by_kind})")


def export_outputs(best: Schedule, report: ConflictReport, solver: GeneticSolver, out_dir: Path):
    out_dir.mkdir(parents=True, exist_ok=True)
    schedule_to_dataframe(best).to_csv(out_dir / "schedule.csv", index=False)
    conflicts_to_dataframe(report).to_csv(out_dir / "conflicts.csv", index=False)
    if solver.history:
        pd.DataFrame(solver.history).to_csv(out_dir / "history.csv", index=False)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Genetic-algorithm class timetable search")
    parser.add_argument("--config", default="config.yaml", help="Path to the YAML configuration")
    parser.add_argument("--data-dir", default=None, help="Directory with courses/instructors/rooms/times CSVs")
    parser.add_argument("--out", default=None, help="Write schedule, conflicts and history CSVs here")
    parser.add_argument("--seed", type=int, default=None)
    parser.add_argument("--generations", type=int, default=None)
    parser.add_argument("--population", type=int, default=None)
    parser.add_argument("-v", "--verbose", action="store_true", help="Log every generation")
    return parser


def main(argv=None) -> int:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    try:
        cfg: GAConfig = load_config(args.config)
        overrides = {
            "seed": args.seed,
            "generations": args.generations,
            "population_size": args.population,
        }
        cfg = replace(cfg, **{k: v for k, v in overrides.items() if v is not None})
        problem = load_problem(args.data_dir) if args.data_dir else problem_from_config(cfg)

        solver = GeneticSolver(problem, cfg)
        start = time.perf_counter()
        best = solver.evolve()
        elapsed = time.perf_counter() - start
    except TimetableError as exc:
        logger.error("Run aborted: %s", exc)
        return 2

    report = detect_conflicts(best)
    print_report(best, report, elapsed)
    if args.out:
        export_outputs(best, report, solver, Path(args.out))
        print(f"Results saved to {args.out}/schedule.csv and {args.out}/conflicts.csv")
    return 0


if __name__ == "__main__":
    sys.exit(main())
