"""Culprit is a toolkit for automated debugging and regression hunting.

It contains three searching algorithms, each driven by a user-supplied oracle:

  1. delta debugging minimizes the failure-inducing input to its 1-minimal reproducer,
  2. bisection finds the first bad commit of the linear history,
  3. differential analysis detects functional and performance regressions between variants.

Each finding is scored by the confidence model, which aggregates four evidence axes into a
single score and priority tier.
"""

__version__ = "0.1.0"
