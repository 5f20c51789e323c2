"""Greedy list schedules of conflicting jobs on parallel machines."""

from __future__ import annotations

import bisect
from dataclasses import dataclass
from typing import Sequence

from txnsched.problem import Problem, permutation_from_index

_TOLERANCE = 0.00001


def _first_minimum(times: Sequence[float]) -> int:
    return min(range(len(times)), key=times.__getitem__)


def _place(
    problem: Problem,
    machines: list[list[int]],
    times: list[float],
    target: int,
    job: int,
    floor: float,
) -> None:
    """Append job to a machine, starting after every conflicting last job."""
    row = problem.conflicts[job]
    start = max(
        [floor]
        + [time for jobs, time in zip(machines, times) if jobs and row[jobs[-1]]]
    )
    machines[target].append(job)
    times[target] = start + problem.lengths[job]


@dataclass
class Schedule:
    """Jobs per machine with each machine's finishing time."""

    machines: list[list[int]]
    processing_times: list[float]
    makespan: float
    minimum_time: float
    minimum_machine: int

    @property
    def machine_number(self) -> int:
        return len(self.machines)

    @property
    def size(self) -> int:
        """Number of jobs placed so far."""
        return sum(len(jobs) for jobs in self.machines)

    @property
    def last_jobs(self) -> list[int | None]:
        return [jobs[-1] if jobs else None for jobs in self.machines]

    @staticmethod
    def single(problem: Problem, job: int) -> "Schedule":
        """A schedule holding one job on the first machine."""
        m = problem.machine_number
        machines: list[list[int]] = [[] for _ in range(m)]
        machines[0].append(job)
        times = [0.0] * m
        times[0] = problem.lengths[job]
        minimum_machine = _first_minimum(times)
        return Schedule(machines, times, times[0], times[minimum_machine], minimum_machine)

    @staticmethod
    def from_index(problem: Problem, index: int) -> "Schedule":
        """Schedule the permutation at a lexicographic index greedily."""
        order = permutation_from_index(index, problem.job_number)
        m = problem.machine_number
        machines: list[list[int]] = [[] for _ in range(m)]
        times = [0.0] * m
        for target, job in enumerate(order[:m]):
            _place(problem, machines, times, target, job, 0.0)
        for job in order[m:]:
            target = _first_minimum(times)
            _place(problem, machines, times, target, job, times[target])
        minimum_machine = _first_minimum(times)
        return Schedule(machines, times, max(times), times[minimum_machine], minimum_machine)

    @staticmethod
    def from_state(problem: Problem, state: Sequence[int]) -> "Schedule":
        """Schedule a job permutation greedily, keeping machines ordered by finishing time."""
        state = list(state)
        if sorted(state) != list(range(problem.job_number)):
            raise ValueError("state must be a permutation of all jobs")
        m = problem.machine_number
        machines: list[list[int]] = [[] for _ in range(m)]
        times = [0.0] * m
        order: list[int] = []
        head = state[:m]
        for target, job in enumerate(head):
            _place(problem, machines, times, target, job, 0.0)
            bisect.insort(order, target, key=times.__getitem__)
        for target in range(len(head), m):
            bisect.insort(order, target, key=times.__getitem__)
        for job in state[m:]:
            target = order.pop(0)
            _place(problem, machines, times, target, job, times[target])
            bisect.insort(order, target, key=times.__getitem__)
        return Schedule(machines, times, times[order[-1]], times[order[0]], order[0])

    def with_job(self, problem: Problem, job: int) -> "Schedule":
        """A new schedule with job appended to the machine that frees up first."""
        result = self.copy()
        target = self.minimum_machine
        _place(problem, result.machines, result.processing_times, target, job, self.minimum_time)
        result.makespan = max(self.makespan, result.processing_times[target])
        result.minimum_machine = _first_minimum(result.processing_times)
        result.minimum_time = result.processing_times[result.minimum_machine]
        return result

    def copy(self) -> "Schedule":
        return Schedule(
            [list(jobs) for jobs in self.machines],
            list(self.processing_times),
            self.makespan,
            self.minimum_time,
            self.minimum_machine,
        )

    def is_equivalent(self, other: "Schedule") -> bool:
        """True when both start the same jobs first and those machines finish at the same times."""
        mine = {jobs[0]: time for jobs, time in zip(self.machines, self.processing_times) if jobs}
        theirs = {jobs[0]: time for jobs, time in zip(other.machines, other.processing_times) if jobs}
        if mine.keys() != theirs.keys():
            return False
        return all(abs(mine[job] - time) < _TOLERANCE for job, time in theirs.items())