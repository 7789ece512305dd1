"""
Core type definitions for eventual.

Aliases shared by Option, Result and Future.
"""

from __future__ import annotations

from collections.abc import Callable

# ============================================================================
# Type aliases
# ============================================================================

# Predicate = function that tests a value
type Predicate[T] = Callable[[T], bool]

# SettleOk / SettleErr = the two callbacks handed to a Future executor
type SettleOk[T] = Callable[[T], None]
type SettleErr[E] = Callable[[E], None]

# Executor = function that drives a Future to settlement via the two callbacks
# NOTE: called once, synchronously, inside Future.__init__.
type Executor[T, E] = Callable[[SettleOk[T], SettleErr[E]], None]

__all__ = (
    "Predicate",
    "SettleOk",
    "SettleErr",
    "Executor",
)
