"""Exhaustive search over every job permutation."""

from __future__ import annotations

import time

from txnsched.output import Solver, SolverInput, SolverOutput
from txnsched.schedule import Schedule


class ESSolver(Solver):
    """Schedules every permutation greedily and keeps the first with the smallest makespan."""

    def solve(self, solver_input: SolverInput) -> SolverOutput:
        begin = time.perf_counter()
        problem = solver_input.problem
        if problem.job_number <= problem.machine_number:
            return SolverOutput.trivial(problem, time.perf_counter() - begin)

        best = Schedule.from_index(problem, 0)
        for index in range(1, problem.size):
            candidate = Schedule.from_index(problem, index)
            if candidate.makespan < best.makespan:
                best = candidate
        return SolverOutput.from_schedule(problem, best, time.perf_counter() - begin)