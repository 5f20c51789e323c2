"""Scheduling of conflicting transactions on parallel machines, with solvers and experiment tools."""

__version__ = "1.0.0"