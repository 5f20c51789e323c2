# txnsched

Tools for scheduling transactions that may conflict with one another on a fixed
number of parallel machines, with the aim of keeping the makespan small.
Two conflicting transactions may not run at the same time: a job starts only
after every conflicting job that is currently last on another machine has
finished.

## Installation

```
pip install .
```

For running the tests:

```
pip install .[test]
pytest
```

## Problems and schedules

A `Problem` (in `txnsched.problem`) holds the number of machines, the length of
each job and a square conflict matrix. Problems can be given directly or drawn
at random with `Problem.random`, using a uniform or normal
`ProbabilityDistribution` for the lengths (negative draws are redrawn) and a
conflict parity for the chance that two jobs conflict. `Problem.size` is the
number of job permutations, and `permutation_from_index` returns the
permutation at a lexicographic index.

A `Schedule` (in `txnsched.schedule`) assigns jobs to machines and records each
machine's finishing time, the makespan and the machine that frees up first.
Schedules are built from a single job (`Schedule.single`), by adding a job to
the machine that frees up first (`Schedule.with_job`), from a permutation index
(`Schedule.from_index`) or from an explicit ordering of all jobs
(`Schedule.from_state`).

`txnsched.subset` holds `Subset`, the candidate schedules for one set of jobs,
together with `combination`, `encode_subset` and `decode_subset` for ranking
subsets of a given size.

## Solvers

Every solver takes a `SolverInput` (in `txnsched.output`) and returns a
`SolverOutput`, which lists the jobs per machine, the start and end time of
every job, the machine of every job, machine finishing times, the makespan,
the conflicting jobs that started earlier, and the runtime in seconds. When
there are no more jobs than machines, every solver puts one job on each machine.

- `ESSolver` (`txnsched.es`): exhaustive search over all job permutations.
- `DPSolver` (`txnsched.dp`): dynamic programming over job subsets, either
  exact or approximate, chosen by `SolutionType`.
- `SASolver` (`txnsched.sa`): simulated annealing over job orders with an
  exponential, linear or slow `TemperatureEvolution`; it accepts a
  `random.Random` for reproducible runs.
- `MIPSolver` (`txnsched.mip`): a mixed-integer programming formulation solved
  with `scipy.optimize.milp`; it returns `None` when no optimum is found.

`SchedulerSettings` collects the same options for choosing a method
(`SolverType`) and its parameters.

```python
from txnsched.problem import Problem
from txnsched.output import SolverInput, SolutionType
from txnsched.dp import DPSolver

problem = Problem(
    2,
    [3.0, 2.0, 4.0, 1.0],
    [
        [False, True, False, False],
        [True, False, False, True],
        [False, False, False, False],
        [False, True, False, False],
    ],
)
result = DPSolver().solve(SolverInput(problem=problem, dp_solution_type=SolutionType.EXACT))
print(result.makespan, result.jobs)
```

## Experiments

`txnsched.analyzer` studies the whole solution space of random problems.
`analyze_problem` schedules every permutation of one problem and returns a
`ProblemAnalysis` with the optimum, the number of distinct makespans, how many
permutations reach the optimum and how many come within 1, 5, 10 and 20 percent
of it. `Analyzer.analyze` does this for random problems over a range of
conflict parities, given by an `AnalyzerInput`, and writes the averages to a
CSV file whose name starts with `directory` as a prefix; it returns the path.

`txnsched.evaluation` runs the solvers selected in an `EvaluatorInput` over
many problems (`run_solvers`, giving one `SolverResults` per problem) and
compares them to a baseline solver (`summarize`, giving a `Summary` of average
runtimes, makespans, match rates and relative gaps). Simulated annealing cannot
serve as the baseline.

`txnsched.report.Evaluator` does this for preset problems (one file) or for
randomly generated problems (one file per configuration of job count, machine
count, conflict parity and distribution) and writes the comparison as CSV
files into `directory`, returning their paths. `format_header` and
`format_rows` produce the lines of those files.

## Engine data types

`txnsched.memory` provides `Memory`, an ordered list of tuples whose element
types can be checked on retrieval, along with `Message`, `TransactionResult`,
`generate_memory` and `generate_message`. `txnsched.engine_types` holds the
enumerations that go with them, such as `TransactionStatus` and `PluginType`.

## What this package does not do

There is no command-line program; experiments are run by calling the classes
above from Python. The engine data types stand alone: the package contains no
transaction engine, agents or plugins that would use them, and it defines no
engine-specific exception classes.