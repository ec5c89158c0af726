# barrier_tree/pricing/barrier_tree.py
from __future__ import annotations

import logging
import math
from dataclasses import dataclass

import numpy as np

from ..models.lattice import ApproximatingTreeModel
from ..models.params import round_half_up
from ..utils.arrays import mult_arrays
from .vanilla import normalize_option_type, vanilla_payoff

__all__ = ["BarrierOptionTree"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BarrierOptionTree:
    """
    European call/put that pays only if the underlying stays strictly inside
    (lower_barrier, upper_barrier) at every lattice time up to maturity.

    A barrier left as None is unconstrained on that side, so a single barrier
    option sets just one of them. Knock-in values come from in/out parity:

        knock_in = value_without_barrier - value

    Conventions:
      - barriers are monitored at lattice times only (discrete monitoring)
      - maturity resolves to floor(maturity / time_step + 0.5); an off-grid
        maturity shifts the price instead of raising and halves round up
    """

    maturity: float
    strike: float
    lower_barrier: float | None = None
    upper_barrier: float | None = None
    option_type: str = "call"

    def __post_init__(self) -> None:
        object.__setattr__(self, "option_type", normalize_option_type(self.option_type))
        if self.maturity < 0:
            raise ValueError("maturity must be non-negative")

    @property
    def lower(self) -> float:
        return -math.inf if self.lower_barrier is None else float(self.lower_barrier)

    @property
    def upper(self) -> float:
        return math.inf if self.upper_barrier is None else float(self.upper_barrier)

    def payoff(self, s: float | np.ndarray) -> float | np.ndarray:
        return vanilla_payoff(s, self.strike, self.option_type)

    def barrier_indicator(self, s: float | np.ndarray) -> float | np.ndarray:
        """1 inside the open corridor (lower, upper), 0 otherwise."""
        if np.ndim(s) == 0:
            return 1.0 if self.lower < s < self.upper else 0.0
        arr = np.asarray(s, dtype=float)
        return ((arr > self.lower) & (arr < self.upper)).astype(float)

    def number_of_steps(self, model: ApproximatingTreeModel) -> int:
        return round_half_up(self.maturity / model.time_step)

    # ---- backward induction ----
    def _backward(self, model: ApproximatingTreeModel, with_barrier: bool) -> float:
        n_steps = self.number_of_steps(model)

        # ---- terminal layer ----
        option_values = self.payoff(model.values_at(n_steps))
        if with_barrier:
            inside = self.barrier_indicator(model.values_at(n_steps))
            option_values = mult_arrays(option_values, inside)

        # ---- roll back to the root ----
        for time_index in range(n_steps - 1, -1, -1):
            expectation = model.conditional_expectation(option_values, time_index)
            if with_barrier:
                inside = self.barrier_indicator(model.values_at(time_index))
                expectation = mult_arrays(expectation, inside)
            option_values = expectation

        price = float(option_values[0])
        logger.debug(
            "%s %s K=%s barriers=(%s, %s) steps=%d -> %.10g",
            "knock-out" if with_barrier else "vanilla",
            self.option_type, self.strike, self.lower_barrier, self.upper_barrier,
            n_steps, price,
        )
        return price

    def value(self, model: ApproximatingTreeModel) -> float:
        """Knock-out value on `model`."""
        return self._backward(model, with_barrier=True)

    def value_without_barrier(self, model: ApproximatingTreeModel) -> float:
        """Vanilla value on the same lattice, for in/out parity."""
        return self._backward(model, with_barrier=False)

    def value_knock_in(self, model: ApproximatingTreeModel) -> float:
        return self.value_without_barrier(model) - self.value(model)

    def price(self, model: ApproximatingTreeModel, inout: str = "out") -> float:
        io = inout.lower()
        if io == "out":
            return self.value(model)
        if io == "in":
            return self.value_knock_in(model)
        raise ValueError("inout must be 'out' or 'in'")
