"""Sets of jobs with the candidate schedules that place exactly those jobs."""

from __future__ import annotations

from math import comb
from typing import Iterable, Iterator, Sequence

from txnsched.schedule import Schedule


def combination(n: int, k: int) -> int:
    """Number of ways to choose k items out of n; zero when k is out of range."""
    if n < 0:
        raise ValueError("n must not be negative")
    return comb(n, k) if 0 <= k <= n else 0


def encode_subset(flags: Sequence[bool], size: int) -> int:
    """Rank a subset, given as membership flags, among all subsets of the same size."""
    positions = [position for position, flag in enumerate(flags) if flag]
    if len(positions) != size:
        raise ValueError("number of selected jobs does not match the subset size")
    return sum(comb(position, rank) for rank, position in enumerate(positions, start=1))


def decode_subset(index: int, job_number: int, size: int) -> list[bool]:
    """Membership flags of the subset of the given size at a rank."""
    if not 0 <= size <= job_number:
        raise ValueError("subset size out of range")
    if not 0 <= index < comb(job_number, size):
        raise ValueError("subset index out of range")
    flags = [False] * job_number
    candidate = job_number
    for rank in range(size, 0, -1):
        candidate -= 1
        while comb(candidate, rank) > index:
            candidate -= 1
        flags[candidate] = True
        index -= comb(candidate, rank)
    return flags


class Subset:
    """A subset of jobs and the schedules still worth extending from it."""

    def __init__(
        self,
        problem_size: int,
        size: int,
        schedules: Iterable[Schedule],
        makespan: float | None = None,
    ) -> None:
        self.problem_size = problem_size
        self.size = size
        self.schedules = list(schedules)
        if not self.schedules:
            raise ValueError("a subset needs at least one schedule")
        if makespan is None:
            return
        if size == problem_size:
            self.finalize()
        else:
            self.eliminate(makespan)

    def __len__(self) -> int:
        return len(self.schedules)

    def __getitem__(self, index: int) -> Schedule:
        return self.schedules[index]

    def __iter__(self) -> Iterator[Schedule]:
        return iter(self.schedules)

    def finalize(self) -> None:
        """Keep only the first schedule with the smallest makespan."""
        best = min(self.schedules, key=lambda schedule: schedule.makespan)
        self.schedules = [best]

    def eliminate(self, makespan: float) -> None:
        """Drop schedules whose machines are all busy past makespan, keeping at least one."""
        total = len(self.schedules)
        dropped = 0
        kept: list[Schedule] = []
        for schedule in self.schedules:
            if schedule.minimum_time >= makespan and dropped < total - 1:
                dropped += 1
            else:
                kept.append(schedule)
        self.schedules = kept
        if self.size <= self.schedules[0].machine_number:
            self.check_equivalency()

    def check_equivalency(self) -> None:
        """Remove schedules equivalent to one that comes before them."""
        kept: list[Schedule] = []
        for schedule in self.schedules:
            if not any(earlier.is_equivalent(schedule) for earlier in kept):
                kept.append(schedule)
        self.schedules = kept