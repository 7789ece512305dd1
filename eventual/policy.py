"""Policies for Future settlement."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


@dataclass(frozen=True, slots=True)
class SettlePolicy:
    """
    What to do with native failures that bypass the Result channel.

    - "propagate": the Future fails natively; awaiting it re-raises.
    - "fold": the exception becomes the Err payload (or joins the
      error list in Future.join, at its input position).
    """

    native_failures: Literal["propagate", "fold"] = "propagate"

    def __post_init__(self) -> None:
        if self.native_failures not in ("propagate", "fold"):
            raise ValueError("SettlePolicy.native_failures must be 'propagate' or 'fold'")

    @property
    def folds(self) -> bool:
        return self.native_failures == "fold"


__all__ = ("SettlePolicy",)
