import random

import pytest

from txnsched.es import ESSolver
from txnsched.output import SolverInput
from txnsched.problem import ProbabilityDistribution, Problem
from txnsched.schedule import Schedule

EPS = 1e-6


def random_problem(seed, n=5, m=2, parity=0.5):
    return Problem.random(
        n, m, ProbabilityDistribution.UNIFORM, 1.0, 10.0, parity, random.Random(seed)
    )


@pytest.mark.parametrize("seed", [11, 12, 13])
def test_result_is_minimum_over_all_permutations(seed):
    problem = random_problem(seed)
    out = ESSolver().solve(SolverInput(problem))
    best = min(Schedule.from_index(problem, i).makespan for i in range(problem.size))
    assert out.makespan == pytest.approx(best)


@pytest.mark.parametrize("seed", [21, 22])
def test_no_permutation_beats_result(seed):
    problem = random_problem(seed, n=4, m=3)
    out = ESSolver().solve(SolverInput(problem))
    for index in range(problem.size):
        assert Schedule.from_index(problem, index).makespan >= out.makespan - EPS


def test_fully_conflicting_jobs_run_one_after_another():
    lengths = [1.0, 2.0, 3.0, 4.0, 5.0]
    conflicts = [[i != j for j in range(5)] for i in range(5)]
    out = ESSolver().solve(SolverInput(Problem(3, lengths, conflicts)))
    assert out.makespan == pytest.approx(sum(lengths))


def test_every_job_is_scheduled_once():
    problem = random_problem(31, n=6, m=2)
    out = ESSolver().solve(SolverInput(problem))
    assert sorted(j for js in out.jobs for j in js) == list(range(6))
    assert out.makespan == pytest.approx(max(out.ending_times))
    assert out.runtime >= 0


def test_no_more_jobs_than_machines_is_trivial():
    problem = random_problem(32, n=3, m=3)
    out = ESSolver().solve(SolverInput(problem))
    assert out.jobs == [[0], [1], [2]]
    assert out.assignments == [0, 1, 2]