"""Seedable random number generators used to build random problems and drive annealing."""

from __future__ import annotations

import random


def _resolve(rng: random.Random | None) -> random.Random:
    return rng if rng is not None else random.Random()


class NormalRandomNumberGenerator:
    """Draws floats from a normal distribution."""

    def __init__(self, mean: float, std: float, rng: random.Random | None = None) -> None:
        self._rng = _resolve(rng)
        self.change_parameters(mean, std)

    def generate(self) -> float:
        return self._rng.gauss(self.mean, self.std)

    def change_parameters(self, mean: float, std: float) -> None:
        if std < 0:
            raise ValueError("standard deviation must not be negative")
        self.mean = float(mean)
        self.std = float(std)


class UniformRandomIntGenerator:
    """Draws integers uniformly from the closed range [low, high]."""

    def __init__(self, low: int, high: int, rng: random.Random | None = None) -> None:
        self._rng = _resolve(rng)
        self.change_parameters(low, high)

    def generate(self) -> int:
        return self._rng.randint(self.low, self.high)

    def change_parameters(self, low: int, high: int) -> None:
        if low > high:
            raise ValueError("lower bound exceeds upper bound")
        self.low = int(low)
        self.high = int(high)


class UniformRandomDoubleGenerator:
    """Draws floats uniformly from the half-open range [low, high)."""

    def __init__(self, low: float, high: float, rng: random.Random | None = None) -> None:
        self._rng = _resolve(rng)
        self.change_parameters(low, high)

    def generate(self) -> float:
        return self.low + (self.high - self.low) * self._rng.random()

    def change_parameters(self, low: float, high: float) -> None:
        if low > high:
            raise ValueError("lower bound exceeds upper bound")
        self.low = float(low)
        self.high = float(high)