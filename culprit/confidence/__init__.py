"""Collective package for the confidence model.

Contains the aggregation of the evidence axes into the confidence score and priority,
which is shared by all the producers of findings."""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach_stub(__name__, __file__)
