"""Collective package for bisection of the commit history

Contains the binary search for the boundary between the last good and the first bad commit
of the ordered history, driven by the user supplied oracle."""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach_stub(__name__, __file__)
