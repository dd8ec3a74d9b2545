# File: backend/app/core/errors.py
# Version: v0.1.0
"""
Error types shared by the barrier forest core.

Everything here is offline and deterministic, so there is no retry policy:
an error always means a violated precondition and is propagated to the caller.
"""

from __future__ import annotations


class BarrierError(RuntimeError):
    pass


class ForestConstructionError(BarrierError):
    """Malformed forest: inconsistent weights, non-monotone values, bad JSON shape."""


class PreconditionError(BarrierError, ValueError):
    """An absent (None) argument was handed to a structuring or coloring operation."""


__all__ = ["BarrierError", "ForestConstructionError", "PreconditionError"]
