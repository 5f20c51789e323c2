"""Search-space analysis: how many job orders land close to the optimum."""

from __future__ import annotations

import math
import random
from collections import Counter
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass
from pathlib import Path

from txnsched.problem import ProbabilityDistribution, Problem
from txnsched.schedule import Schedule

_MARGINS = (1.01, 1.05, 1.1, 1.2)


@dataclass
class AnalyzerInput:
    """Parameters of a search-space analysis run."""

    job_number: int
    machine_number: int
    distribution: ProbabilityDistribution
    distribution_parameter1: float
    distribution_parameter2: float
    conflict_parity_step_size: float
    problem_number: int
    thread_count: int = 1
    directory: str = ""
    seed: int | None = None


@dataclass
class ProblemAnalysis:
    """Counts of permutations by makespan for one problem."""

    optimum: float
    space_size: int
    optimum_count: int
    within_1: int
    within_5: int
    within_10: int
    within_20: int


def _truncate(value: float) -> float:
    return math.floor(value * 1_000_000) / 1_000_000


def analyze_problem(problem: Problem) -> ProblemAnalysis:
    """Schedule every permutation and count how many are within 1, 5, 10 and 20 % of the best."""
    counts = Counter(
        _truncate(Schedule.from_index(problem, index).makespan) for index in range(problem.size)
    )
    optimum = min(counts)
    within = [
        sum(count for value, count in counts.items() if value < optimum * margin)
        for margin in _MARGINS
    ]
    return ProblemAnalysis(optimum, len(counts), counts[optimum], *within)


def _conflict_parities(step: float) -> list[float]:
    parities = []
    parity = 0.0
    while parity <= 1:
        parities.append(parity)
        parity += step
        if 1 < parity < 1.000001:
            parity = 1.0
    return parities


class Analyzer:
    """Analyses random problems over a range of conflict parities and writes a CSV summary."""

    def analyze(self, analyzer_input: AnalyzerInput) -> Path:
        """Run the analysis and return the path of the written CSV file."""
        inp = analyzer_input
        step = inp.conflict_parity_step_size
        if not 0 < step <= 1:
            raise ValueError("conflict parity step must lie in (0, 1]")
        if inp.problem_number < 1:
            raise ValueError("at least one problem per parity is required")
        if inp.thread_count < 1:
            raise ValueError("at least one thread is required")

        rng = random.Random(inp.seed)
        parities = _conflict_parities(step)
        problems = [
            Problem.random(
                inp.job_number,
                inp.machine_number,
                inp.distribution,
                inp.distribution_parameter1,
                inp.distribution_parameter2,
                parity,
                rng,
            )
            for parity in parities
            for _ in range(inp.problem_number)
        ]
        with ThreadPoolExecutor(max_workers=inp.thread_count) as pool:
            analyses = list(pool.map(analyze_problem, problems))

        space = float(math.factorial(inp.job_number))
        kind = "n" if inp.distribution is ProbabilityDistribution.NORMAL else "u"
        path = Path(
            f"{inp.directory}{inp.job_number}_{inp.machine_number}_{kind}_"
            f"{inp.distribution_parameter1:.2f}_{inp.distribution_parameter2:.2f}_"
            f"{step:.2f}_{inp.problem_number}_.csv"
        )
        with path.open("w", newline="") as file:
            for position, parity in enumerate(parities):
                chunk = analyses[
                    position * inp.problem_number:(position + 1) * inp.problem_number
                ]
                averages = [
                    sum(getattr(item, name) for item in chunk) / inp.problem_number
                    for name in (
                        "space_size",
                        "optimum_count",
                        "within_1",
                        "within_5",
                        "within_10",
                        "within_20",
                    )
                ]
                cells = [f"{parity:.3f}"]
                for average in averages:
                    cells.append(f"{average:.3f}")
                    cells.append(f"{average / space:.6f}")
                file.write(",".join(cells) + "\n")
        return path