"""Solver inputs, settings and the detailed timetable a solver returns."""

from __future__ import annotations

import bisect
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from enum import Enum
from itertools import chain
from typing import Sequence

from txnsched.problem import Problem
from txnsched.schedule import Schedule


class SolverType(Enum):
    """Available solving methods."""

    DP = 0
    ES = 1
    MIP = 2
    SA = 3


class SolutionType(Enum):
    """Whether the dynamic-programming solver keeps every candidate or only the best."""

    EXACT = 0
    APPROXIMATE = 1


class TemperatureEvolution(Enum):
    """Cooling schedules for simulated annealing."""

    EXPONENTIAL = 0
    LINEAR = 1
    SLOW = 2


@dataclass
class SolverInput:
    """A problem together with the options the solvers read."""

    problem: Problem
    dp_solution_type: SolutionType = SolutionType.EXACT
    sa_decrement_type: TemperatureEvolution = TemperatureEvolution.EXPONENTIAL
    sa_decrement_parameter: float = 0.99
    sa_max_temperature: float = 100.0


@dataclass
class SchedulerSettings:
    """How a transaction scheduler plans its batches."""

    sa_decrement_parameter: float = 0.99
    sa_max_temperature: float = 100.0
    dp_solution_type: SolutionType = SolutionType.EXACT
    sa_decrement_type: TemperatureEvolution = TemperatureEvolution.EXPONENTIAL
    optimization_method: SolverType = SolverType.DP
    optimized: bool = True
    permuted: bool = True


class Solver(ABC):
    """Common interface of every scheduling solver."""

    @abstractmethod
    def solve(self, solver_input: SolverInput) -> "SolverOutput | None":
        """Solve the problem held by solver_input."""


def _start_time(
    problem: Problem,
    machines: list[list[int]],
    times: list[float],
    job: int,
    floor: float,
) -> float:
    row = problem.conflicts[job]
    return max(
        [floor] + [time for jobs, time in zip(machines, times) if jobs and row[jobs[-1]]]
    )


def _earlier_conflicts(problem: Problem, starts: Sequence[float]) -> list[list[int]]:
    return [
        [other for other, flag in enumerate(row) if flag and starts[other] < starts[job]]
        for job, row in enumerate(problem.conflicts)
    ]


def _first_minimum(times: Sequence[float]) -> int:
    return min(range(len(times)), key=times.__getitem__)


class _Timeline:
    """Mutable record of where and when each job runs while a solution is rebuilt."""

    def __init__(self, problem: Problem) -> None:
        self.problem = problem
        n = problem.job_number
        m = problem.machine_number
        self.machines: list[list[int]] = [[] for _ in range(m)]
        self.times = [0.0] * m
        self.starts = [0.0] * n
        self.ends = [0.0] * n
        self.assignments = [0] * n

    def place(self, target: int, job: int, floor: float) -> None:
        start = _start_time(self.problem, self.machines, self.times, job, floor)
        self.machines[target].append(job)
        self.starts[job] = start
        self.ends[job] = start + self.problem.lengths[job]
        self.times[target] = self.ends[job]
        self.assignments[job] = target


def _require_permutation(jobs: Sequence[int], job_number: int) -> None:
    if sorted(jobs) != list(range(job_number)):
        raise ValueError("every job must appear exactly once")


@dataclass
class SolverOutput:
    """A complete timetable: jobs per machine with start and end times."""

    job_number: int
    machine_number: int
    makespan: float
    minimum_time: float
    jobs: list[list[int]]
    processing_times: list[float]
    starting_times: list[float]
    ending_times: list[float]
    assignments: list[int]
    conflicts: list[list[int]] = field(default_factory=list)
    runtime: float = 0.0

    @staticmethod
    def trivial(problem: Problem, runtime: float) -> "SolverOutput":
        """One job per machine, each waiting for conflicting jobs with lower numbers."""
        n = problem.job_number
        m = problem.machine_number
        if n > m:
            raise ValueError("more jobs than machines")
        jobs: list[list[int]] = [[] for _ in range(m)]
        times = [0.0] * m
        starts: list[float] = []
        ends: list[float] = []
        for job, row in enumerate(problem.conflicts):
            start = max((ends[other] for other in range(job) if row[other]), default=0.0)
            starts.append(start)
            ends.append(start + problem.lengths[job])
            jobs[job].append(job)
            times[job] = ends[job]
        return SolverOutput(
            job_number=n,
            machine_number=m,
            makespan=max(ends, default=0.0),
            minimum_time=min(ends, default=0.0),
            jobs=jobs,
            processing_times=times,
            starting_times=starts,
            ending_times=ends,
            assignments=list(range(n)),
            conflicts=_earlier_conflicts(problem, starts),
            runtime=runtime,
        )

    @staticmethod
    def from_state(problem: Problem, state: Sequence[int], runtime: float) -> "SolverOutput":
        """Timetable of a job permutation scheduled greedily."""
        state = list(state)
        _require_permutation(state, problem.job_number)
        m = problem.machine_number
        timeline = _Timeline(problem)
        times = timeline.times
        order: list[int] = []
        head = state[:m]
        for target, job in enumerate(head):
            timeline.place(target, job, 0.0)
            bisect.insort(order, target, key=times.__getitem__)
        for target in range(len(head), m):
            bisect.insort(order, target, key=times.__getitem__)
        for job in state[m:]:
            target = order.pop(0)
            timeline.place(target, job, times[target])
            bisect.insort(order, target, key=times.__getitem__)
        return SolverOutput(
            job_number=problem.job_number,
            machine_number=m,
            makespan=times[order[-1]],
            minimum_time=times[order[0]],
            jobs=timeline.machines,
            processing_times=times,
            starting_times=timeline.starts,
            ending_times=timeline.ends,
            assignments=timeline.assignments,
            conflicts=_earlier_conflicts(problem, timeline.starts),
            runtime=runtime,
        )

    @staticmethod
    def from_schedule(problem: Problem, schedule: Schedule, runtime: float) -> "SolverOutput":
        """Timetable obtained by replaying a complete schedule machine by machine."""
        planned = schedule.machines
        _require_permutation(list(chain.from_iterable(planned)), problem.job_number)
        if len(planned) != problem.machine_number:
            raise ValueError("schedule and problem disagree on the machine count")
        timeline = _Timeline(problem)
        positions = [0] * len(planned)
        placed = 0
        for target, jobs in enumerate(planned):
            if jobs:
                timeline.place(target, jobs[0], 0.0)
                positions[target] = 1
                placed += 1
        while placed < problem.job_number:
            target = _first_minimum(timeline.times)
            if positions[target] >= len(planned[target]):
                raise ValueError("schedule does not follow the greedy placement order")
            job = planned[target][positions[target]]
            timeline.place(target, job, timeline.times[target])
            positions[target] += 1
            placed += 1
        return SolverOutput(
            job_number=problem.job_number,
            machine_number=problem.machine_number,
            makespan=schedule.makespan,
            minimum_time=schedule.minimum_time,
            jobs=[list(jobs) for jobs in planned],
            processing_times=timeline.times,
            starting_times=timeline.starts,
            ending_times=timeline.ends,
            assignments=timeline.assignments,
            conflicts=_earlier_conflicts(problem, timeline.starts),
            runtime=runtime,
        )

    @staticmethod
    def from_assignment(
        problem: Problem,
        assignments: Sequence[int],
        starts: Sequence[float],
        runtime: float,
    ) -> "SolverOutput":
        """Timetable from a machine and a start time given for every job."""
        n = problem.job_number
        m = problem.machine_number
        if len(assignments) != n or len(starts) != n:
            raise ValueError("one machine and one start time are needed per job")
        if any(not 0 <= machine < m for machine in assignments):
            raise ValueError("machine index out of range")
        jobs: list[list[int]] = [[] for _ in range(m)]
        for job in sorted(range(n), key=lambda j: starts[j]):
            jobs[assignments[job]].append(job)
        lengths = problem.lengths
        times = [starts[js[-1]] + lengths[js[-1]] if js else 0.0 for js in jobs]
        return SolverOutput(
            job_number=n,
            machine_number=m,
            makespan=max([0.0] + times),
            minimum_time=min(times),
            jobs=jobs,
            processing_times=times,
            starting_times=[float(start) for start in starts],
            ending_times=[start + length for start, length in zip(starts, lengths)],
            assignments=list(assignments),
            conflicts=[
                [other for other, flag in enumerate(row) if flag] for row in problem.conflicts
            ],
            runtime=runtime,
        )