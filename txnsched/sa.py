"""Simulated annealing over job permutations."""

from __future__ import annotations

import math
import random
import time
from typing import Callable

from txnsched.output import Solver, SolverInput, SolverOutput, TemperatureEvolution
from txnsched.randomgen import UniformRandomDoubleGenerator, UniformRandomIntGenerator
from txnsched.schedule import Schedule

_FREEZING_POINT = 0.000001


def _cooling(kind: TemperatureEvolution, parameter: float) -> Callable[[float], float]:
    if kind is TemperatureEvolution.EXPONENTIAL:
        if not 0 <= parameter < 1:
            raise ValueError("exponential cooling needs a factor in [0, 1)")
        return lambda temperature: temperature * parameter
    if kind is TemperatureEvolution.LINEAR:
        if parameter <= 0:
            raise ValueError("linear cooling needs a positive step")
        return lambda temperature: temperature - parameter
    if parameter <= 0:
        raise ValueError("slow cooling needs a positive parameter")
    return lambda temperature: temperature / (1 + parameter * temperature)


def _pick_pair(picker: UniformRandomIntGenerator) -> tuple[int, int]:
    first = picker.generate()
    second = picker.generate()
    while second == first:
        second = picker.generate()
    return first, second


class SASolver(Solver):
    """Swaps pairs of jobs, accepting worse orders with a probability that shrinks as it cools."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng if rng is not None else random.Random()

    def solve(self, solver_input: SolverInput) -> SolverOutput:
        begin = time.perf_counter()
        problem = solver_input.problem
        n = problem.job_number
        if n <= problem.machine_number:
            return SolverOutput.trivial(problem, time.perf_counter() - begin)

        cool = _cooling(solver_input.sa_decrement_type, solver_input.sa_decrement_parameter)
        picker = UniformRandomIntGenerator(0, n - 1, self._rng)
        chance = UniformRandomDoubleGenerator(0.0, 1.0, self._rng)

        state = list(range(n))
        for _ in range(3 * n):
            a, b = _pick_pair(picker)
            state[a], state[b] = state[b], state[a]

        best_state = list(state)
        cost = Schedule.from_state(problem, state).makespan
        best_cost = cost
        temperature = solver_input.sa_max_temperature

        while temperature > _FREEZING_POINT:
            a, b = _pick_pair(picker)
            state[a], state[b] = state[b], state[a]
            candidate = Schedule.from_state(problem, state).makespan
            if candidate < cost:
                cost = candidate
                if cost < best_cost:
                    best_cost = cost
                    best_state = list(state)
            elif chance.generate() < math.exp((cost - candidate) / temperature):
                cost = candidate
            else:
                state[a], state[b] = state[b], state[a]
            temperature = cool(temperature)

        return SolverOutput.from_state(problem, best_state, time.perf_counter() - begin)