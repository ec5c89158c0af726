# barrier_tree/models/approximating.py
from __future__ import annotations

import logging
import threading

import numpy as np

from .lattice import ScalarFunction, TreeModel
from .params import ContinuousModelParams
from .strategies import CoxRossRubinstein, LatticeStrategy

__all__ = ["BlackScholesTreeModel"]

logger = logging.getLogger(__name__)


class BlackScholesTreeModel:
    """
    Lattice approximation of Black-Scholes on 0 = t_0 < ... < t_n = last_time.

    The concrete lattice is produced by `strategy` on the first query and then
    reused; every lattice query is delegated to it. Continuous times resolve
    to the nearest grid index, round(time / time_step), so an off-grid time
    is silently moved to its neighbour.

    Examples
    --------
    >>> model = BlackScholesTreeModel.from_number_of_times(100.0, 0.0, 0.3, 2.0, 261)
    >>> model.values_at(0)
    array([100.])
    """

    def __init__(
        self,
        params: ContinuousModelParams,
        strategy: LatticeStrategy | None = None,
        *,
        validate: bool = False,
    ):
        self.params = params
        self.strategy = strategy if strategy is not None else CoxRossRubinstein()
        self.validate = bool(validate)
        self._tree: TreeModel | None = None
        self._lock = threading.Lock()

    @classmethod
    def from_time_step(
        cls,
        initial_price: float,
        risk_free_rate: float,
        volatility: float,
        last_time: float,
        time_step: float,
        strategy: LatticeStrategy | None = None,
        *,
        validate: bool = False,
    ) -> "BlackScholesTreeModel":
        params = ContinuousModelParams.from_time_step(
            initial_price, risk_free_rate, volatility, last_time, time_step
        )
        return cls(params, strategy, validate=validate)

    @classmethod
    def from_number_of_times(
        cls,
        initial_price: float,
        risk_free_rate: float,
        volatility: float,
        last_time: float,
        number_of_times: int,
        strategy: LatticeStrategy | None = None,
        *,
        validate: bool = False,
    ) -> "BlackScholesTreeModel":
        params = ContinuousModelParams.from_number_of_times(
            initial_price, risk_free_rate, volatility, last_time, number_of_times
        )
        return cls(params, strategy, validate=validate)

    def __repr__(self) -> str:
        return f"BlackScholesTreeModel({self.params!r}, strategy={self.strategy!r})"

    # ---- lazy lattice ----
    @property
    def tree(self) -> TreeModel:
        """The underlying lattice, built exactly once."""
        if self._tree is None:
            with self._lock:
                if self._tree is None:
                    tree = self.strategy.build(self.params, validate=self.validate)
                    logger.debug("Built %r from %r", tree, self.strategy)
                    self._tree = tree
        return self._tree

    # ---- read-only accessors ----
    @property
    def initial_price(self) -> float:
        return self.params.initial_price

    @property
    def risk_free_rate(self) -> float:
        return self.params.risk_free_rate

    @property
    def volatility(self) -> float:
        return self.params.volatility

    @property
    def time_step(self) -> float:
        return self.params.time_step

    @property
    def last_time(self) -> float:
        return self.params.last_time

    @property
    def number_of_times(self) -> int:
        return self.params.number_of_times

    def time_index(self, time: float) -> int:
        return self.params.time_index(time)

    # ---- delegated queries ----
    def values_at(self, time_index: int) -> np.ndarray:
        return self.tree.values_at(time_index)

    def values_at_time(self, time: float) -> np.ndarray:
        return self.tree.values_at(self.time_index(time))

    def transformed_values_at(self, time_index: int, fn: ScalarFunction) -> np.ndarray:
        return self.tree.transformed_values_at(time_index, fn)

    def transformed_values_at_time(self, time: float, fn: ScalarFunction) -> np.ndarray:
        return self.tree.transformed_values_at(self.time_index(time), fn)

    def conditional_expectation(self, values_next: np.ndarray, time_index: int) -> np.ndarray:
        return self.tree.conditional_expectation(values_next, time_index)
