"""Collective package for regression checks.

Contains the differential analysis of variants for functional and performance regressions,
and the statistical helpers it is built upon."""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach_stub(__name__, __file__)
