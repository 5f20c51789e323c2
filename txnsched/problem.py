"""Transaction scheduling problems: job lengths, machines and pairwise conflicts."""

from __future__ import annotations

import math
import random
from enum import Enum
from typing import Sequence

from txnsched.randomgen import NormalRandomNumberGenerator, UniformRandomDoubleGenerator


class ProbabilityDistribution(Enum):
    """Distribution used to draw job lengths for random problems."""

    NORMAL = "normal"
    UNIFORM = "uniform"


class Problem:
    """A set of jobs with lengths, a machine count and a symmetric conflict relation."""

    def __init__(
        self,
        machine_number: int,
        lengths: Sequence[float],
        conflicts: Sequence[Sequence[bool]],
    ) -> None:
        if machine_number < 1:
            raise ValueError("at least one machine is required")
        self._lengths = tuple(float(length) for length in lengths)
        job_number = len(self._lengths)
        rows = [[bool(flag) for flag in row] for row in conflicts]
        if len(rows) != job_number or any(len(row) != job_number for row in rows):
            raise ValueError("conflict matrix must be square with one row per job")
        self._machine_number = int(machine_number)
        self._conflicts = rows

    @staticmethod
    def random(
        job_number: int,
        machine_number: int,
        distribution: ProbabilityDistribution,
        parameter1: float,
        parameter2: float,
        conflict_parity: float,
        rng: random.Random | None = None,
    ) -> "Problem":
        """Build a random problem; each job pair conflicts with probability conflict_parity."""
        rng = rng if rng is not None else random.Random()
        if distribution is ProbabilityDistribution.NORMAL:
            length_gen = NormalRandomNumberGenerator(parameter1, parameter2, rng)
        else:
            length_gen = UniformRandomDoubleGenerator(parameter1, parameter2, rng)
        unit = UniformRandomDoubleGenerator(0.0, 1.0, rng)

        lengths: list[float] = []
        conflicts = [[False] * job_number for _ in range(job_number)]
        for i, row in enumerate(conflicts):
            length = length_gen.generate()
            while length < 0:
                length = length_gen.generate()
            lengths.append(length)
            for j in range(i):
                row[j] = unit.generate() < conflict_parity

        problem = Problem(machine_number, lengths, conflicts)
        problem.arrange_conflicts()
        return problem

    @property
    def job_number(self) -> int:
        return len(self._lengths)

    @property
    def machine_number(self) -> int:
        return self._machine_number

    @property
    def lengths(self) -> tuple[float, ...]:
        return self._lengths

    @property
    def conflicts(self) -> list[list[bool]]:
        return self._conflicts

    @property
    def size(self) -> int:
        """Number of job permutations, i.e. the size of the search space."""
        return math.factorial(self.job_number)

    def arrange_conflicts(self) -> None:
        """Clear the diagonal and mirror the lower triangle into the upper one."""
        for i, row in enumerate(self._conflicts):
            row[i] = False
            for j in range(i + 1, self.job_number):
                row[j] = self._conflicts[j][i]


def permutation_from_index(index: int, job_number: int) -> list[int]:
    """Return the permutation of range(job_number) at a lexicographic index."""
    if not 0 <= index < math.factorial(job_number):
        raise ValueError("permutation index out of range")
    remaining = list(range(job_number))
    permutation = []
    for position in range(job_number):
        digit, index = divmod(index, math.factorial(job_number - 1 - position))
        permutation.append(remaining.pop(digit))
    return permutation