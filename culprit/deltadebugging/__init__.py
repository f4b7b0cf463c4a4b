"""Collective package for delta debugging

Contains the core delta debugging algorithm for various types of inputs (lines, tokens,
characters and hierarchical nodes) minimizing failure-inducing inputs to their simplest forms."""

import lazy_loader as lazy

__getattr__, __dir__, __all__ = lazy.attach_stub(__name__, __file__)
