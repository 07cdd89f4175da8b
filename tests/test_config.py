import tempfile
import unittest
from pathlib import Path

import pandas as pd

import run
from timetable_ga.config import GAConfig, load_config, problem_from_config
from timetable_ga.data_loader import load_problem
from timetable_ga.domains import IntervalDomain, SlotDomain, parse_time_to_minutes
from timetable_ga.exceptions import ConfigError


class ConfigTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)

    def tearDown(self):
        self._tmp.cleanup()

    def test_missing_file_uses_defaults(self):
        cfg = load_config(str(self.tmp / "nope.yaml"))
        self.assertEqual(cfg, GAConfig())

    def test_yaml_merges_over_defaults(self):
        path = self.tmp / "config.yaml"
        path.write_text(
            "population_size: 20\n"
            "selection: top_k\n"
            "mutate_fields: [room]\n"
            "unknown_key: 1\n",
            encoding="utf-8",
        )
        cfg = load_config(str(path))
        self.assertEqual(cfg.population_size, 20)
        self.assertEqual(cfg.selection, "top_k")
        self.assertEqual(cfg.mutate_fields, ("room",))
        self.assertEqual(cfg.generations, GAConfig().generations)
        cfg.validate()

    def test_non_mapping_rejected(self):
        path = self.tmp / "config.yaml"
        path.write_text("- 1\n- 2\n", encoding="utf-8")
        with self.assertRaises(ConfigError):
            load_config(str(path))

    def test_non_numeric_fields_rejected(self):
        for bad in (
            {"mutation_rate": "high"},
            {"mutation_rate": True},
            {"parent_pool_size": "two"},
            {"log_every": "often"},
            {"population_size": 10.5},
            {"mutate_fields": 5},
            {"mutate_fields": [["room"]]},
        ):
            with self.assertRaises(ConfigError):
                GAConfig.from_dict(bad).validate()
        self.assertEqual(GAConfig.from_dict({"mutate_fields": "room"}).validate().mutate_fields, ("room",))

    def test_default_problem_is_interval_based(self):
        problem = problem_from_config(GAConfig())
        self.assertEqual(problem.courses, ["Math", "Science", "History", "English"])
        self.assertIsInstance(problem.time_domain, IntervalDomain)
        self.assertEqual(problem.time_domain.start_times, (480, 570, 660))
        self.assertEqual(problem.time_domain.durations, (60, 90))

    def test_problem_section_with_slots(self):
        cfg = GAConfig(problem={"courses": ["A", "B"], "instructors": ["X"], "rooms": ["R"], "n_slots": 4})
        problem = problem_from_config(cfg)
        self.assertEqual(problem.time_domain, SlotDomain(4))
        self.assertEqual(problem.rooms, ["R"])

    def test_problem_section_empty_pool(self):
        with self.assertRaises(ConfigError):
            problem_from_config(GAConfig(problem={"rooms": []}))

    def test_parse_time(self):
        self.assertEqual(parse_time_to_minutes("09:30"), 570)
        self.assertEqual(parse_time_to_minutes(60), 60)
        for bad in ("9h30", "10:75", "24:00", -5):
            with self.assertRaises(ConfigError):
                parse_time_to_minutes(bad)


class DataLoaderTests(unittest.TestCase):
    def setUp(self):
        self._tmp = tempfile.TemporaryDirectory()
        self.tmp = Path(self._tmp.name)
        pd.DataFrame({"course": ["Math", "Science"]}).to_csv(self.tmp / "courses.csv", index=False)
        pd.DataFrame({"instructor": ["Alice", "Bob"]}).to_csv(self.tmp / "instructors.csv", index=False)
        pd.DataFrame({"room": ["Room 101"]}).to_csv(self.tmp / "rooms.csv", index=False)
        pd.DataFrame({"start_time": ["08:00", "09:30"], "duration": [60, 90]}).to_csv(
            self.tmp / "times.csv", index=False
        )

    def tearDown(self):
        self._tmp.cleanup()

    def test_load_problem(self):
        problem = load_problem(str(self.tmp))
        self.assertEqual(problem.courses, ["Math", "Science"])
        self.assertEqual(problem.instructors, ["Alice", "Bob"])
        self.assertEqual(problem.rooms, ["Room 101"])
        self.assertEqual(problem.time_domain.start_times, (480, 570))
        self.assertEqual(problem.time_domain.durations, (60, 90))

    def test_missing_column(self):
        pd.DataFrame({"name": ["Room 101"]}).to_csv(self.tmp / "rooms.csv", index=False)
        with self.assertRaises(ConfigError):
            load_problem(str(self.tmp))

    def test_missing_file(self):
        (self.tmp / "instructors.csv").unlink()
        with self.assertRaises(ConfigError):
            load_problem(str(self.tmp))


class CliTests(unittest.TestCase):
    def test_main_writes_outputs(self):
        with tempfile.TemporaryDirectory() as tmp:
            out = Path(tmp) / "outputs"
            code = run.main([
                "--config", str(Path(tmp) / "missing.yaml"),
                "--generations", "5",
                "--population", "6",
                "--out", str(out),
            ])
            self.assertEqual(code, 0)
            schedule = pd.read_csv(out / "schedule.csv")
            self.assertEqual(list(schedule["Course"]), ["Math", "Science", "History", "English"])
            self.assertTrue((out / "conflicts.csv").exists())
            self.assertEqual(len(pd.read_csv(out / "history.csv")), 5)

    def test_main_reports_bad_config(self):
        with tempfile.TemporaryDirectory() as tmp:
            code = run.main(["--config", str(Path(tmp) / "missing.yaml"), "--population", "1"])
            self.assertEqual(code, 2)

    def test_main_reports_malformed_yaml_value(self):
        with tempfile.TemporaryDirectory() as tmp:
            path = Path(tmp) / "config.yaml"
            path.write_text("mutation_rate: high\n", encoding="utf-8")
            self.assertEqual(run.main(["--config", str(path)]), 2)


if __name__ == "__main__":
    unittest.main()
