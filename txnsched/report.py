"""Evaluation runs that compare solvers and write their summaries as CSV files."""

from __future__ import annotations

import random
import time
from pathlib import Path

from txnsched.evaluation import EvaluatorInput, Summary, run_solvers, summarize
from txnsched.output import SolverType
from txnsched.problem import ProbabilityDistribution, Problem

_FIXED_COLUMNS = ("ES", "DPE", "DPA", "MIP")


def format_header(evaluator_input: EvaluatorInput) -> str:
    """Column names: the exact solvers followed by one column per annealing setting."""
    columns = list(_FIXED_COLUMNS)
    for kind, parameter in evaluator_input.sa_decrement_types_and_parameters:
        for temperature in evaluator_input.sa_max_temperatures:
            columns.append(f"SA_{kind.value}_{parameter:.2f}_{temperature:.2f}")
    return ",".join(columns)


def _cells(values: list[float]) -> str:
    return ",".join(f"{value:f}" for value in values)


def format_rows(summary: Summary) -> list[str]:
    """The runtime, makespan, match-rate and relative-gap rows of a summary."""
    s = summary
    times = _cells([s.es_time, s.dpe_time, s.dpa_time, s.mip_time, *s.sa_times])
    values = _cells([s.es_value, s.dpe_value, s.dpa_value, s.mip_value, *s.sa_values])
    matches = "1," + _cells([s.dpe_match, s.dpa_match, s.mip_match, *s.sa_matches])
    diffs = "0," + _cells([s.dpe_diff, s.dpa_diff, s.mip_diff, *s.sa_diffs])
    return [times, values, matches, diffs]


def _write(path: Path, header: str, summary: Summary) -> Path:
    with path.open("w", newline="") as file:
        file.write(header + "\n")
        for row in format_rows(summary):
            file.write(row + "\n")
    return path


class Evaluator:
    """Runs the selected solvers on preset or random problems and reports the averages."""

    def evaluate(self, evaluator_input: EvaluatorInput) -> list[Path]:
        """Evaluate and return the paths of the CSV files written."""
        if evaluator_input.baseline is SolverType.SA:
            raise ValueError("simulated annealing solutions cannot be used as baselines")
        if evaluator_input.preset:
            return [self.evaluate_preset(evaluator_input)]
        return self.evaluate_random(evaluator_input)

    def evaluate_preset(self, evaluator_input: EvaluatorInput) -> Path:
        """Evaluate the problems given in the input and write one summary file."""
        inp = evaluator_input
        if not inp.problems:
            raise ValueError("no preset problems given")
        results = run_solvers(inp.problems, inp)
        summary = summarize(results, inp.baseline)
        path = Path(inp.directory) / f"preset{time.time_ns()}.csv"
        return _write(path, format_header(inp), summary)

    def evaluate_random(self, evaluator_input: EvaluatorInput) -> list[Path]:
        """Generate random problems for every configuration and write one file per configuration."""
        inp = evaluator_input
        if inp.problem_number < 1:
            raise ValueError("at least one problem per configuration is required")
        rng = random.Random(inp.seed)
        configurations: list[tuple[int, int, float, ProbabilityDistribution, float, float]] = []
        for n in inp.job_numbers:
            for m in inp.machine_numbers:
                for parity in inp.conflict_parities:
                    for p1, p2 in inp.uniform_parameters:
                        configurations.append(
                            (n, m, parity, ProbabilityDistribution.UNIFORM, p1, p2)
                        )
                    for p1, p2 in inp.normal_parameters:
                        configurations.append(
                            (n, m, parity, ProbabilityDistribution.NORMAL, p1, p2)
                        )
        if not configurations:
            raise ValueError("no problem configurations given")

        count = inp.problem_number
        problems: list[Problem] = [
            Problem.random(n, m, dist, p1, p2, parity, rng)
            for n, m, parity, dist, p1, p2 in configurations
            for _ in range(count)
        ]
        results = run_solvers(problems, inp)
        header = format_header(inp)
        directory = Path(inp.directory)

        paths = []
        for position, (n, m, parity, dist, p1, p2) in enumerate(configurations):
            chunk = results[position * count:(position + 1) * count]
            summary = summarize(chunk, inp.baseline)
            kind = "n" if dist is ProbabilityDistribution.NORMAL else "u"
            name = f"{n}_{m}_{kind}_{p1:.2f}_{p2:.2f}_{parity:.2f}_{count}.csv"
            paths.append(_write(directory / name, header, summary))
        return paths