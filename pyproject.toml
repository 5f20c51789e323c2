[build-system]
requires = ["hatchling"]
build-backend = "hatchling.build"

[project]
name = "txnsched"
version = "1.0.0"
description = "Scheduling of conflicting transactions on parallel machines with exhaustive, dynamic-programming, annealing and MIP solvers"
requires-python = ">=3.10"
keywords = [
    "scheduling",
    "makespan",
    "transactions",
    "dynamic programming",
    "simulated annealing",
    "mixed integer programming",
]
classifiers = [
    "Development Status :: 4 - Beta",
    "Intended Audience :: Science/Research",
    "Intended Audience :: Developers",
    "Operating System :: OS Independent",
    "Programming Language :: Python :: 3",
    "Programming Language :: Python :: 3 :: Only",
    "Programming Language :: Python :: 3.10",
    "Programming Language :: Python :: 3.11",
    "Programming Language :: Python :: 3.12",
    "Programming Language :: Python :: 3.13",
    "Topic :: Scientific/Engineering :: Mathematics",
]
dependencies = [
    "numpy",
    "scipy",
]

[project.optional-dependencies]
test = [
    "pytest",
]

[tool.hatch.build.targets.wheel]
packages = ["txnsched"]

[tool.pytest.ini_options]
testpaths = ["tests"]
addopts = "-ra"
