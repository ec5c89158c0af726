"""Capability contracts shared by every lattice and by the valuation engine."""

from __future__ import annotations

from typing import Callable, Protocol, runtime_checkable

import numpy as np

from ..errors import InfeasibleCalibrationError

__all__ = [
    "TreeModel",
    "ApproximatingTreeModel",
    "ScalarFunction",
    "check_time_index",
    "check_probabilities",
]

ScalarFunction = Callable[[float], float]


@runtime_checkable
class TreeModel(Protocol):
    """A recombining discrete-time lattice.

    States at a time index are ordered from the most-up node (ordinal 0) to
    the most-down node; the ordinal counts down-moves.
    """

    def values_at(self, time_index: int) -> np.ndarray:
        """All reachable underlying values at `time_index`."""

    def transformed_values_at(self, time_index: int, fn: ScalarFunction) -> np.ndarray:
        """`fn` applied pointwise to `values_at(time_index)`."""

    def conditional_expectation(self, values_next: np.ndarray, time_index: int) -> np.ndarray:
        """Discounted one-step expectation of values living at `time_index + 1`."""


@runtime_checkable
class ApproximatingTreeModel(TreeModel, Protocol):
    """A lattice approximating a continuous-time model on a uniform time grid."""

    @property
    def initial_price(self) -> float: ...

    @property
    def time_step(self) -> float: ...

    @property
    def last_time(self) -> float: ...

    @property
    def number_of_times(self) -> int: ...

    def values_at_time(self, time: float) -> np.ndarray:
        """Values at the grid index nearest to `time`."""

    def transformed_values_at_time(self, time: float, fn: ScalarFunction) -> np.ndarray:
        """`fn` applied pointwise to `values_at_time(time)`."""


def check_time_index(time_index: int, number_of_times: int) -> int:
    n = int(time_index)
    if n < 0 or n >= number_of_times:
        raise IndexError(f"time index {time_index} outside [0, {number_of_times - 1}]")
    return n


def check_probabilities(probabilities: dict[str, float], validate: bool, logger) -> None:
    """
    Raise (validate=True) or warn (validate=False) when a branch probability
    falls outside [0, 1]. The warning path keeps the recursion running, so the
    resulting price carries no financial meaning.
    """
    bad = {k: v for k, v in probabilities.items() if not 0.0 <= v <= 1.0}
    if not bad:
        return
    if validate:
        raise InfeasibleCalibrationError(probabilities)
    logger.warning("Infeasible lattice calibration %s; pricing will continue.", probabilities)
