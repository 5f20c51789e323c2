"""Mixed-integer programming formulation of the transaction scheduling problem."""

from __future__ import annotations

import time

import numpy as np
from scipy.optimize import Bounds, LinearConstraint, milp
from scipy.sparse import coo_matrix

from txnsched.output import Solver, SolverInput, SolverOutput


class _Model:
    """Sparse constraint rows collected before handing them to the solver."""

    def __init__(self, variable_count: int) -> None:
        self.variable_count = variable_count
        self.rows: list[int] = []
        self.cols: list[int] = []
        self.values: list[float] = []
        self.lower: list[float] = []
        self.upper: list[float] = []

    def add(self, terms: list[tuple[int, float]], low: float, high: float) -> None:
        row = len(self.lower)
        for column, value in terms:
            self.rows.append(row)
            self.cols.append(column)
            self.values.append(value)
        self.lower.append(low)
        self.upper.append(high)

    def constraint(self) -> LinearConstraint:
        matrix = coo_matrix(
            (self.values, (self.rows, self.cols)),
            shape=(len(self.lower), self.variable_count),
        ).tocsr()
        return LinearConstraint(matrix, np.array(self.lower), np.array(self.upper))


class MIPSolver(Solver):
    """Minimises the makespan over start times, machine assignments and precedences."""

    def solve(self, solver_input: SolverInput) -> SolverOutput | None:
        """Return the optimal timetable, or None when no optimum was proven."""
        begin = time.perf_counter()
        problem = solver_input.problem
        n = problem.job_number
        m = problem.machine_number
        if n <= m:
            return SolverOutput.trivial(problem, time.perf_counter() - begin)

        lengths = problem.lengths
        conflicts = problem.conflicts
        big_m = max(lengths) * n

        def s(i: int) -> int:
            return 1 + i

        def x(i: int, j: int) -> int:
            return 1 + n + i * m + j

        def pre(i: int, k: int) -> int:
            return 1 + n + n * m + i * n + k

        count = 1 + n + n * m + n * n
        model = _Model(count)
        for i in range(n):
            model.add([(0, 1.0), (s(i), -1.0)], lengths[i], np.inf)
            model.add([(x(i, j), 1.0) for j in range(m)], 1.0, 1.0)
            for k in range(n):
                model.add(
                    [(s(i), 1.0), (pre(i, k), -big_m), (s(k), -1.0)],
                    lengths[k] - big_m,
                    np.inf,
                )
                if i > k:
                    for j in range(m):
                        model.add(
                            [(pre(i, k), 1.0), (pre(k, i), 1.0), (x(i, j), -1.0), (x(k, j), -1.0)],
                            -1.0,
                            np.inf,
                        )
                    if conflicts[i][k]:
                        model.add([(pre(i, k), 1.0), (pre(k, i), 1.0)], 1.0, 1.0)

        objective = np.zeros(count)
        objective[0] = 1.0
        integrality = np.zeros(count)
        integrality[1 + n:] = 1
        upper = np.full(count, np.inf)
        upper[1 + n:] = 1.0

        result = milp(
            c=objective,
            constraints=model.constraint(),
            integrality=integrality,
            bounds=Bounds(np.zeros(count), upper),
        )
        if result.status != 0 or result.x is None:
            return None

        values = result.x
        assignments = [
            max((j for j in range(m) if values[x(i, j)] + 0.5 > 1), default=0)
            for i in range(n)
        ]
        starts = [float(values[s(i)]) for i in range(n)]
        return SolverOutput.from_assignment(
            problem, assignments, starts, time.perf_counter() - begin
        )