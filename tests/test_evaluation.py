import random

import pytest

from txnsched.es import ESSolver
from txnsched.evaluation import EvaluatorInput, SolverResults, run_solvers, summarize
from txnsched.output import SolverInput, SolverType, TemperatureEvolution
from txnsched.problem import ProbabilityDistribution, Problem


def _problems(count, jobs=4, machines=2, seed=7):
    rng = random.Random(seed)
    return [
        Problem.random(jobs, machines, ProbabilityDistribution.UNIFORM, 1.0, 5.0, 0.5, rng)
        for _ in range(count)
    ]


def _fixed_problem():
    conflicts = [
        [False, True, False, True],
        [True, False, True, False],
        [False, True, False, False],
        [True, False, False, False],
    ]
    return Problem(2, [3.0, 2.0, 4.0, 1.0], conflicts)


def test_es_values_match_direct_solver_and_keep_order():
    problems = _problems(5)
    inp = EvaluatorInput(thread_count=2, dp_exact=False, dp_approximate=False)
    results = run_solvers(problems, inp)
    assert len(results) == len(problems)
    expected = [ESSolver().solve(SolverInput(p)).makespan for p in problems]
    assert [r.es_value for r in results] == pytest.approx(expected)


def test_disabled_solvers_stay_zero():
    inp = EvaluatorInput(es=False, dp_exact=False, dp_approximate=True)
    results = run_solvers(_problems(2), inp)
    for result in results:
        assert result.es_value == 0.0
        assert result.dpe_value == 0.0
        assert result.mip_value == 0.0
        assert result.dpa_value > 0.0


def test_exact_dp_not_worse_than_approximate():
    inp = EvaluatorInput(es=False)
    for result in run_solvers(_problems(4), inp):
        assert result.dpe_value <= result.dpa_value + 1e-9


def test_sa_runs_per_setting():
    inp = EvaluatorInput(
        es=False,
        dp_exact=False,
        dp_approximate=False,
        sa_decrement_types_and_parameters=[
            (TemperatureEvolution.EXPONENTIAL, 0.9),
            (TemperatureEvolution.LINEAR, 5.0),
        ],
        sa_max_temperatures=[10.0, 20.0, 30.0],
        seed=3,
    )
    results = run_solvers(_problems(3), inp)
    for result in results:
        assert len(result.sa_values) == 6
        assert len(result.sa_times) == 6
        assert all(value > 0 for value in result.sa_values)


def test_mip_not_worse_than_exhaustive_search():
    inp = EvaluatorInput(mip=True, dp_exact=False, dp_approximate=False)
    (result,) = run_solvers([_fixed_problem()], inp)
    assert result.mip_value > 0
    assert result.mip_value <= result.es_value + 1e-6


def test_invalid_thread_count():
    with pytest.raises(ValueError):
        run_solvers(_problems(1), EvaluatorInput(thread_count=0))


def test_summary_baseline_matches_itself():
    results = run_solvers(_problems(4), EvaluatorInput())
    summary = summarize(results, SolverType.DP)
    assert summary.dpe_match == 1.0
    assert summary.dpe_diff == 0.0
    assert 0.0 <= summary.dpa_match <= 1.0
    assert summary.dpa_diff >= -1e-12


def test_summary_averages_and_match_rate():
    results = [
        SolverResults(es_time=2.0, es_value=10.0, dpe_value=10.0, sa_times=[1.0], sa_values=[10.0]),
        SolverResults(es_time=2.0, es_value=20.0, dpe_value=22.0, sa_times=[1.0], sa_values=[20.0]),
    ]
    summary = summarize(results, SolverType.ES)
    assert summary.es_time == 2.0
    assert summary.sa_times == [1.0]
    assert summary.dpe_match == 0.5
    assert summary.sa_matches == [1.0]
    assert summary.sa_diffs == [0.0]
    assert summary.dpe_diff > 0


def test_summary_rejects_sa_baseline():
    with pytest.raises(ValueError):
        summarize([SolverResults(es_value=1.0)], SolverType.SA)


def test_summary_rejects_empty():
    with pytest.raises(ValueError):
        summarize([], SolverType.ES)


def test_summary_rejects_uneven_sa_runs():
    results = [SolverResults(sa_times=[1.0], sa_values=[1.0]), SolverResults()]
    with pytest.raises(ValueError):
        summarize(results, SolverType.ES)