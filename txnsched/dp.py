"""Dynamic programming over job subsets for the transaction scheduling problem."""

from __future__ import annotations

import math
import time

from txnsched.output import SolutionType, Solver, SolverInput, SolverOutput
from txnsched.problem import Problem
from txnsched.schedule import Schedule
from txnsched.subset import Subset, combination, decode_subset, encode_subset


def _members(flags: list[bool]) -> list[int]:
    return [job for job, flag in enumerate(flags) if flag]


def _rank_without(flags: list[bool], job: int, size: int) -> int:
    """Rank of the subset obtained by removing job from the subset given by flags."""
    reduced = list(flags)
    reduced[job] = False
    return encode_subset(reduced, size - 1)


class DPSolver(Solver):
    """Builds schedules for ever larger job subsets from those of the subsets one job smaller."""

    def solve(self, solver_input: SolverInput) -> SolverOutput:
        if solver_input.dp_solution_type is SolutionType.APPROXIMATE:
            return self.solve_approximate(solver_input.problem)
        return self.solve_exact(solver_input.problem)

    def solve_exact(self, problem: Problem) -> SolverOutput:
        """Keep every schedule that may still lead to the best makespan."""
        begin = time.perf_counter()
        n = problem.job_number
        if n <= problem.machine_number:
            return SolverOutput.trivial(problem, time.perf_counter() - begin)

        level = [Subset(n, 1, [Schedule.single(problem, job)]) for job in range(n)]
        for size in range(2, n + 1):
            level = [
                self._exact_subset(problem, level, size, index)
                for index in range(combination(n, size))
            ]
        best = level[0][0]
        return SolverOutput.from_schedule(problem, best, time.perf_counter() - begin)

    def solve_approximate(self, problem: Problem) -> SolverOutput:
        """Keep only the best schedule for every subset."""
        begin = time.perf_counter()
        n = problem.job_number
        if n <= problem.machine_number:
            return SolverOutput.trivial(problem, time.perf_counter() - begin)

        level = [Subset(n, 1, [Schedule.single(problem, job)]) for job in range(n)]
        for size in range(2, n + 1):
            level = [
                self._approximate_subset(problem, level, size, index)
                for index in range(combination(n, size))
            ]
        best = level[0][0]
        return SolverOutput.from_schedule(problem, best, time.perf_counter() - begin)

    @staticmethod
    def _exact_subset(problem: Problem, level: list[Subset], size: int, index: int) -> Subset:
        n = problem.job_number
        flags = decode_subset(index, n, size)
        minimax = math.inf
        candidates: list[Schedule] = []
        for job in _members(flags):
            previous = level[_rank_without(flags, job, size)]
            for schedule in previous:
                extended = schedule.with_job(problem, job)
                if extended.makespan < minimax:
                    minimax = extended.makespan
                    candidates.append(extended)
                elif extended.minimum_time < minimax:
                    candidates.append(extended)
        return Subset(n, size, candidates, minimax)

    @staticmethod
    def _approximate_subset(
        problem: Problem, level: list[Subset], size: int, index: int
    ) -> Subset:
        n = problem.job_number
        flags = decode_subset(index, n, size)
        extensions = (
            level[_rank_without(flags, job, size)][0].with_job(problem, job)
            for job in _members(flags)
        )
        best = min(extensions, key=lambda schedule: schedule.makespan)
        return Subset(n, size, [best])