"""
Algebraic result types for async Python.

- Option[T]: Some(value) or Nothing
- Result[T, E]: Ok(value) or Err(error)
- Future[T, E]: awaitable that always settles to a Result, never raises
  for a domain failure

Architecture:
- option / result are pure, synchronous and immutable
- future adapts asyncio awaitables into the Result channel
- lift bridges exception-based code and the kungfu library
"""

import logging

# Core types
from ._types import Executor, Predicate, SettleErr, SettleOk

# Option
from .option import NOTHING, Nothing, Option, Some, nothing

# Result
from .result import Err, Ok, Result, err, ok

# Future
from .future import Future
from .policy import SettlePolicy

# Lift helpers
from . import lift

# Errors
from ._errors import EventualError, UnwrapError

# Library-level NullHandler: stay silent unless the consumer configures logging.
logging.getLogger("eventual").addHandler(logging.NullHandler())

__all__ = (
    # Types
    "Executor",
    "Predicate",
    "SettleErr",
    "SettleOk",
    # Option
    "NOTHING",
    "Nothing",
    "Option",
    "Some",
    "nothing",
    # Result
    "Err",
    "Ok",
    "Result",
    "err",
    "ok",
    # Future
    "Future",
    "SettlePolicy",
    # Lift module
    "lift",
    # Errors
    "EventualError",
    "UnwrapError",
)
