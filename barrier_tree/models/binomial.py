# barrier_tree/models/binomial.py
from __future__ import annotations

import logging
import threading

import numpy as np

from ..errors import LengthMismatchError
from ..utils.arrays import apply_function, as_array
from .lattice import ScalarFunction, check_probabilities, check_time_index

__all__ = ["BinomialLattice"]

logger = logging.getLogger(__name__)


class BinomialLattice:
    """
    Recombining two-branch lattice.

    Node (n, i) holds  initial * up**(n-i) * down**i,  i.e. ordinal i counts
    the down-moves, so ordinal 0 is the all-up node. The risk-neutral
    probabilities make the discounted process a martingale:

        prob_up = (1 + rf - down) / (up - down),   prob_down = 1 - prob_up

    which lies in [0, 1] only when  down < 1 + rf < up.

    Node values and node probabilities are generated on first access and kept
    for the lifetime of the object; the factors are fixed so they are never
    rebuilt.
    """

    def __init__(
        self,
        up: float,
        down: float,
        risk_free_factor: float,
        initial_value: float,
        number_of_times: int,
        *,
        validate: bool = False,
    ):
        if int(number_of_times) < 1:
            raise ValueError("number_of_times must be >= 1")
        self.up = float(up)
        self.down = float(down)
        self.risk_free_factor = float(risk_free_factor)
        self.initial_value = float(initial_value)
        self.number_of_times = int(number_of_times)
        if self.up == self.down:
            raise ValueError("up and down factors must differ")

        self.prob_up = (1.0 + self.risk_free_factor - self.down) / (self.up - self.down)
        self.prob_down = 1.0 - self.prob_up
        # a single time point has no transitions, so there is nothing to calibrate
        if self.number_of_times > 1:
            check_probabilities(
                {"prob_up": self.prob_up, "prob_down": self.prob_down}, validate, logger
            )

        self._values: list[np.ndarray] | None = None
        self._probabilities: list[np.ndarray] | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"BinomialLattice(up={self.up!r}, down={self.down!r}, "
            f"risk_free_factor={self.risk_free_factor!r}, "
            f"initial_value={self.initial_value!r}, number_of_times={self.number_of_times})"
        )

    # ---- table generation ----
    def _generate_values(self) -> list[np.ndarray]:
        layers = []
        for n in range(self.number_of_times):
            downs = np.arange(n + 1)
            layers.append(self.initial_value * self.up ** (n - downs) * self.down ** downs)
        logger.debug("Generated binomial values for %d times", self.number_of_times)
        return layers

    def _generate_probabilities(self) -> list[np.ndarray]:
        # layer n+1 = layer n convolved with the one-step law (up first)
        step = np.array([self.prob_up, self.prob_down])
        layers = [np.ones(1)]
        for _ in range(1, self.number_of_times):
            layers.append(np.convolve(layers[-1], step))
        return layers

    def _value_table(self) -> list[np.ndarray]:
        if self._values is None:
            with self._lock:
                if self._values is None:
                    self._values = self._generate_values()
        return self._values

    def _probability_table(self) -> list[np.ndarray]:
        if self._probabilities is None:
            with self._lock:
                if self._probabilities is None:
                    self._probabilities = self._generate_probabilities()
        return self._probabilities

    # ---- queries ----
    def values_at(self, time_index: int) -> np.ndarray:
        n = check_time_index(time_index, self.number_of_times)
        return self._value_table()[n].copy()

    def transformed_values_at(self, time_index: int, fn: ScalarFunction) -> np.ndarray:
        return apply_function(self.values_at(time_index), fn)

    def probabilities_at(self, time_index: int) -> np.ndarray:
        """Risk-neutral probability of reaching each node at `time_index`."""
        n = check_time_index(time_index, self.number_of_times)
        return self._probability_table()[n].copy()

    def up_and_down_probabilities(self) -> tuple[float, float]:
        return self.prob_up, self.prob_down

    def conditional_expectation(self, values_next: np.ndarray, time_index: int) -> np.ndarray:
        """
        E[i] = (v[i] * prob_up + v[i+1] * prob_down) / (1 + rf),  i = 0..n

        v[i] is reached from (n, i) by one more up-move, v[i+1] by one more
        down-move.
        """
        n = check_time_index(time_index, self.number_of_times - 1)
        v = as_array(values_next)
        if v.shape[0] != n + 2:
            raise LengthMismatchError(
                f"expected {n + 2} values at time index {n + 1}, got {v.shape[0]}"
            )
        return (v[:-1] * self.prob_up + v[1:] * self.prob_down) / (1.0 + self.risk_free_factor)
