import random

import pytest

from txnsched.output import (
    SchedulerSettings,
    Solver,
    SolverInput,
    SolverOutput,
    SolverType,
)
from txnsched.problem import ProbabilityDistribution, Problem
from txnsched.schedule import Schedule


def _random_problem(n, m, seed, parity=0.5):
    return Problem.random(n, m, ProbabilityDistribution.UNIFORM, 1.0, 10.0, parity, random.Random(seed))


def _check_consistency(problem, out):
    assert sorted(job for jobs in out.jobs for job in jobs) == list(range(problem.job_number))
    for machine, jobs in enumerate(out.jobs):
        for job in jobs:
            assert out.assignments[job] == machine
        for before, after in zip(jobs, jobs[1:]):
            assert out.ending_times[before] <= out.starting_times[after] + 1e-9
        if jobs:
            assert out.processing_times[machine] == pytest.approx(out.ending_times[jobs[-1]])
    for job in range(problem.job_number):
        assert out.ending_times[job] == pytest.approx(out.starting_times[job] + problem.lengths[job])
    for i, row in enumerate(problem.conflicts):
        for j in range(i + 1, problem.job_number):
            if row[j]:
                assert (
                    out.ending_times[i] <= out.starting_times[j] + 1e-9
                    or out.ending_times[j] <= out.starting_times[i] + 1e-9
                )
    for i, earlier in enumerate(out.conflicts):
        for j in earlier:
            assert problem.conflicts[i][j]
            assert out.starting_times[j] < out.starting_times[i]


@pytest.mark.parametrize("seed", [1, 2, 3, 4])
def test_from_state_matches_schedule(seed):
    problem = _random_problem(6, 2, seed)
    state = list(range(6))
    random.Random(seed).shuffle(state)
    schedule = Schedule.from_state(problem, state)
    out = SolverOutput.from_state(problem, state, 0.25)
    assert out.jobs == schedule.machines
    assert out.makespan == pytest.approx(schedule.makespan)
    assert out.minimum_time == pytest.approx(schedule.minimum_time)
    assert max(out.ending_times) == pytest.approx(out.makespan)
    assert out.runtime == 0.25
    _check_consistency(problem, out)


def test_from_state_rejects_non_permutation():
    problem = _random_problem(4, 2, 9)
    with pytest.raises(ValueError):
        SolverOutput.from_state(problem, [0, 1, 1, 2], 0.0)


@pytest.mark.parametrize("index", [0, 17, 55, 119])
def test_from_schedule_replays_index_schedule(index):
    problem = _random_problem(5, 2, index)
    schedule = Schedule.from_index(problem, index)
    out = SolverOutput.from_schedule(problem, schedule, 0.5)
    assert out.jobs == schedule.machines
    assert max(out.ending_times) == pytest.approx(schedule.makespan)
    assert out.makespan == schedule.makespan
    assert out.runtime == 0.5
    _check_consistency(problem, out)


def test_from_schedule_replays_incremental_schedule():
    problem = _random_problem(6, 3, 11)
    schedule = Schedule.single(problem, 4)
    for job in [2, 0, 5, 1, 3]:
        schedule = schedule.with_job(problem, job)
    out = SolverOutput.from_schedule(problem, schedule, 0.0)
    assert out.jobs == schedule.machines
    assert max(out.ending_times) == pytest.approx(schedule.makespan)
    _check_consistency(problem, out)


def test_from_schedule_rejects_incomplete_schedule():
    problem = _random_problem(4, 2, 5)
    schedule = Schedule.single(problem, 0)
    with pytest.raises(ValueError):
        SolverOutput.from_schedule(problem, schedule, 0.0)


def test_trivial_without_conflicts_starts_everything_at_zero():
    problem = Problem(4, [2.0, 3.0, 1.0], [[False] * 3 for _ in range(3)])
    out = SolverOutput.trivial(problem, 0.1)
    assert out.starting_times == [0.0, 0.0, 0.0]
    assert out.assignments == [0, 1, 2]
    assert out.makespan == max(problem.lengths)
    assert out.runtime == 0.1


def test_trivial_waits_for_conflicts():
    problem = Problem(2, [2.0, 3.0], [[False, True], [True, False]])
    out = SolverOutput.trivial(problem, 0.0)
    assert out.starting_times[1] == out.ending_times[0]
    assert out.conflicts == [[], [0]]
    assert out.makespan == out.ending_times[1]


def test_trivial_rejects_too_many_jobs():
    problem = _random_problem(3, 2, 1)
    with pytest.raises(ValueError):
        SolverOutput.trivial(problem, 0.0)


def test_from_assignment_orders_jobs_by_start():
    problem = Problem(2, [2.0, 3.0, 4.0], [[False] * 3 for _ in range(3)])
    out = SolverOutput.from_assignment(problem, [0, 1, 0], [0.0, 0.0, 2.0], 0.0)
    assert out.jobs == [[0, 2], [1]]
    assert out.makespan == 6.0
    assert out.minimum_time == out.processing_times[1]
    assert out.ending_times[2] == out.makespan


def test_from_assignment_reversed_starts():
    problem = Problem(2, [1.0, 1.0], [[False, True], [True, False]])
    out = SolverOutput.from_assignment(problem, [0, 0], [5.0, 1.0], 0.0)
    assert out.jobs[0] == [1, 0]
    assert out.jobs[1] == []
    assert out.processing_times[1] == 0.0
    assert out.conflicts == [[1], [0]]


def test_from_assignment_rejects_bad_lengths():
    problem = _random_problem(3, 2, 2)
    with pytest.raises(ValueError):
        SolverOutput.from_assignment(problem, [0, 1], [0.0, 0.0, 0.0], 0.0)


def test_from_assignment_rejects_bad_machine():
    problem = _random_problem(2, 2, 2)
    with pytest.raises(ValueError):
        SolverOutput.from_assignment(problem, [0, 2], [0.0, 0.0], 0.0)


def test_solver_is_abstract():
    with pytest.raises(TypeError):
        Solver()


def test_solver_subclass_solves():
    class Trivial(Solver):
        def solve(self, solver_input):
            return SolverOutput.trivial(solver_input.problem, 0.0)

    problem = Problem(3, [1.0, 2.0], [[False, False], [False, False]])
    out = Trivial().solve(SolverInput(problem))
    assert out.makespan == max(problem.lengths)


def test_scheduler_settings_keep_given_method():
    settings = SchedulerSettings(optimization_method=SolverType.SA, permuted=False)
    assert settings.optimization_method is SolverType.SA
    assert settings.permuted is False