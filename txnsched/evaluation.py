"""Running several solvers over the same problems and comparing their results."""

from __future__ import annotations

import math
import random
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field
from typing import Sequence

from txnsched.dp import DPSolver
from txnsched.es import ESSolver
from txnsched.mip import MIPSolver
from txnsched.output import (
    SolutionType,
    SolverInput,
    SolverOutput,
    SolverType,
    TemperatureEvolution,
)
from txnsched.problem import Problem
from txnsched.sa import SASolver

_MATCH_TOLERANCE = 0.000001


@dataclass
class EvaluatorInput:
    """Which solvers to run, on which problems, and how to report them."""

    job_numbers: list[int] = field(default_factory=list)
    machine_numbers: list[int] = field(default_factory=list)
    conflict_parities: list[float] = field(default_factory=list)
    uniform_parameters: list[tuple[float, float]] = field(default_factory=list)
    normal_parameters: list[tuple[float, float]] = field(default_factory=list)
    problem_number: int = 1
    problems: list[Problem] = field(default_factory=list)
    thread_count: int = 1
    sa_decrement_types_and_parameters: list[tuple[TemperatureEvolution, float]] = field(
        default_factory=list
    )
    sa_max_temperatures: list[float] = field(default_factory=list)
    baseline: SolverType = SolverType.ES
    es: bool = True
    mip: bool = False
    dp_exact: bool = True
    dp_approximate: bool = True
    preset: bool = False
    directory: str = "."
    seed: int | None = None


@dataclass
class SolverResults:
    """Runtimes and makespans every solver reached on one problem; disabled solvers stay zero."""

    es_time: float = 0.0
    es_value: float = 0.0
    dpe_time: float = 0.0
    dpe_value: float = 0.0
    dpa_time: float = 0.0
    dpa_value: float = 0.0
    mip_time: float = 0.0
    mip_value: float = 0.0
    sa_times: list[float] = field(default_factory=list)
    sa_values: list[float] = field(default_factory=list)


@dataclass
class Summary:
    """Averages over many problems with match rates and relative gaps to the baseline."""

    es_time: float
    es_value: float
    dpe_time: float
    dpe_value: float
    dpe_match: float
    dpe_diff: float
    dpa_time: float
    dpa_value: float
    dpa_match: float
    dpa_diff: float
    mip_time: float
    mip_value: float
    mip_match: float
    mip_diff: float
    sa_times: list[float]
    sa_values: list[float]
    sa_matches: list[float]
    sa_diffs: list[float]


def _sa_settings(
    evaluator_input: EvaluatorInput,
) -> list[tuple[TemperatureEvolution, float, float]]:
    return [
        (kind, parameter, temperature)
        for kind, parameter in evaluator_input.sa_decrement_types_and_parameters
        for temperature in evaluator_input.sa_max_temperatures
    ]


def _chunks(problems: Sequence[Problem], count: int) -> list[list[Problem]]:
    step = len(problems) // count
    chunks = [list(problems[i * step:(i + 1) * step]) for i in range(count - 1)]
    chunks.append(list(problems[(count - 1) * step:]))
    return chunks


def _run_chunk(
    problems: list[Problem], evaluator_input: EvaluatorInput, rng: random.Random
) -> list[SolverResults]:
    inp = evaluator_input
    results = [SolverResults() for _ in problems]
    dp = DPSolver()
    es = ESSolver()
    mip = MIPSolver()
    sa = SASolver(rng)

    def record(output: SolverOutput | None, name: str) -> tuple[float, float]:
        if output is None:
            raise RuntimeError(f"{name} solver found no optimal solution")
        return output.runtime, output.makespan

    if inp.es:
        for problem, result in zip(problems, results):
            result.es_time, result.es_value = record(
                es.solve(SolverInput(problem)), "ES"
            )
    if inp.mip:
        for problem, result in zip(problems, results):
            result.mip_time, result.mip_value = record(
                mip.solve(SolverInput(problem)), "MIP"
            )
    if inp.dp_exact:
        for problem, result in zip(problems, results):
            result.dpe_time, result.dpe_value = record(
                dp.solve(SolverInput(problem, dp_solution_type=SolutionType.EXACT)), "DP"
            )
    if inp.dp_approximate:
        for problem, result in zip(problems, results):
            result.dpa_time, result.dpa_value = record(
                dp.solve(SolverInput(problem, dp_solution_type=SolutionType.APPROXIMATE)),
                "DP",
            )
    for kind, parameter, temperature in _sa_settings(inp):
        for problem, result in zip(problems, results):
            output = sa.solve(
                SolverInput(
                    problem,
                    sa_decrement_type=kind,
                    sa_decrement_parameter=parameter,
                    sa_max_temperature=temperature,
                )
            )
            result.sa_times.append(output.runtime)
            result.sa_values.append(output.makespan)
    return results


def run_solvers(
    problems: Sequence[Problem], evaluator_input: EvaluatorInput
) -> list[SolverResults]:
    """Run the enabled solvers on every problem, split over threads; results keep problem order."""
    count = evaluator_input.thread_count
    if count < 1:
        raise ValueError("at least one thread is required")
    seed = evaluator_input.seed
    rngs = [
        random.Random(None if seed is None else seed + index) for index in range(count)
    ]
    chunks = _chunks(problems, count)
    with ThreadPoolExecutor(max_workers=count) as pool:
        parts = list(
            pool.map(lambda args: _run_chunk(args[0], evaluator_input, args[1]), zip(chunks, rngs))
        )
    return [result for part in parts for result in part]


def _baseline_value(result: SolverResults | Summary, baseline: SolverType) -> float:
    if baseline is SolverType.DP:
        return result.dpe_value
    if baseline is SolverType.ES:
        return result.es_value
    if baseline is SolverType.MIP:
        return result.mip_value
    raise ValueError("simulated annealing solutions cannot be used as baselines")


def _matches(value: float, base: float) -> bool:
    return abs(value - base) < _MATCH_TOLERANCE


def _relative(value: float, base: float) -> float:
    if base == 0:
        return math.nan if value == base else math.copysign(math.inf, value - base)
    return (value - base) / base


def _mean(values: Sequence[float]) -> float:
    return sum(values) / len(values)


def summarize(results: Sequence[SolverResults], baseline: SolverType) -> Summary:
    """Average the results and compare every solver with the baseline solver."""
    if not results:
        raise ValueError("nothing to summarize")
    if baseline is SolverType.SA:
        raise ValueError("simulated annealing solutions cannot be used as baselines")
    bases = [_baseline_value(result, baseline) for result in results]
    sa_count = len(results[0].sa_values)
    if any(len(r.sa_values) != sa_count or len(r.sa_times) != sa_count for r in results):
        raise ValueError("every problem must have the same simulated annealing runs")

    def match_rate(values: Sequence[float]) -> float:
        return _mean([1.0 if _matches(v, b) else 0.0 for v, b in zip(values, bases)])

    dpe_values = [r.dpe_value for r in results]
    dpa_values = [r.dpa_value for r in results]
    mip_values = [r.mip_value for r in results]
    sa_columns = [[r.sa_values[k] for r in results] for k in range(sa_count)]

    es_value = _mean([r.es_value for r in results])
    dpe_value = _mean(dpe_values)
    dpa_value = _mean(dpa_values)
    mip_value = _mean(mip_values)
    sa_values = [_mean(column) for column in sa_columns]
    base = {SolverType.DP: dpe_value, SolverType.ES: es_value, SolverType.MIP: mip_value}[
        baseline
    ]

    return Summary(
        es_time=_mean([r.es_time for r in results]),
        es_value=es_value,
        dpe_time=_mean([r.dpe_time for r in results]),
        dpe_value=dpe_value,
        dpe_match=match_rate(dpe_values),
        dpe_diff=_relative(dpe_value, base),
        dpa_time=_mean([r.dpa_time for r in results]),
        dpa_value=dpa_value,
        dpa_match=match_rate(dpa_values),
        dpa_diff=_relative(dpa_value, base),
        mip_time=_mean([r.mip_time for r in results]),
        mip_value=mip_value,
        mip_match=match_rate(mip_values),
        mip_diff=_relative(mip_value, base),
        sa_times=[_mean([r.sa_times[k] for r in results]) for k in range(sa_count)],
        sa_values=sa_values,
        sa_matches=[match_rate(column) for column in sa_columns],
        sa_diffs=[_relative(value, base) for value in sa_values],
    )