# barrier_tree/models/trinomial.py
from __future__ import annotations

import logging
import threading

import numpy as np

from ..errors import LengthMismatchError
from ..utils.arrays import apply_function, as_array
from .lattice import ScalarFunction, check_probabilities, check_time_index

__all__ = ["TrinomialLattice"]

logger = logging.getLogger(__name__)


class TrinomialLattice:
    """
    Recombining three-branch lattice with factors (up, 1, 1/up).

    Time index n carries 2n+1 states; ordinal i (0 = all-up) holds

        initial * up**(2n - i) * down**n,     down = 1 / up

    The up-probability is an input. The stay-probability is solved so the
    discounted chain is a martingale, and the down-probability closes the
    distribution:

        prob_stay = (1 + rf - down - prob_up * (up - down)) / (1 - down)
        prob_down = 1 - prob_up - prob_stay

    An up factor below one mirrors the grid (ordinal 0 is then the lowest
    node); up == 1 collapses it and is rejected.
    """

    def __init__(
        self,
        prob_up: float,
        up: float,
        risk_free_factor: float,
        initial_value: float,
        number_of_times: int,
        *,
        validate: bool = False,
    ):
        if int(number_of_times) < 1:
            raise ValueError("number_of_times must be >= 1")
        if not float(up) > 0.0 or float(up) == 1.0:
            raise ValueError("up factor must be positive and different from 1")
        self.up = float(up)
        self.down = 1.0 / self.up
        self.risk_free_factor = float(risk_free_factor)
        self.initial_value = float(initial_value)
        self.number_of_times = int(number_of_times)

        self.prob_up = float(prob_up)
        self.prob_stay = (
            1.0 + self.risk_free_factor - self.down - self.prob_up * (self.up - self.down)
        ) / (1.0 - self.down)
        self.prob_down = 1.0 - self.prob_up - self.prob_stay
        if self.number_of_times > 1:
            check_probabilities(
                {"prob_up": self.prob_up, "prob_stay": self.prob_stay, "prob_down": self.prob_down},
                validate,
                logger,
            )

        self._values: list[np.ndarray] | None = None
        self._probabilities: list[np.ndarray] | None = None
        self._lock = threading.Lock()

    def __repr__(self) -> str:
        return (
            f"TrinomialLattice(prob_up={self.prob_up!r}, up={self.up!r}, "
            f"risk_free_factor={self.risk_free_factor!r}, "
            f"initial_value={self.initial_value!r}, number_of_times={self.number_of_times})"
        )

    def _generate_values(self) -> list[np.ndarray]:
        layers = []
        for n in range(self.number_of_times):
            exponent = 2 * n - np.arange(2 * n + 1)
            layers.append(self.initial_value * self.up ** exponent * self.down ** n)
        logger.debug("Generated trinomial values for %d times", self.number_of_times)
        return layers

    def _generate_probabilities(self) -> list[np.ndarray]:
        step = np.array([self.prob_up, self.prob_stay, self.prob_down])
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

    def values_at(self, time_index: int) -> np.ndarray:
        n = check_time_index(time_index, self.number_of_times)
        return self._value_table()[n].copy()

    def transformed_values_at(self, time_index: int, fn: ScalarFunction) -> np.ndarray:
        return apply_function(self.values_at(time_index), fn)

    def probabilities_at(self, time_index: int) -> np.ndarray:
        n = check_time_index(time_index, self.number_of_times)
        return self._probability_table()[n].copy()

    def branch_probabilities(self) -> tuple[float, float, float]:
        """(prob_up, prob_stay, prob_down)"""
        return self.prob_up, self.prob_stay, self.prob_down

    def conditional_expectation(self, values_next: np.ndarray, time_index: int) -> np.ndarray:
        # E[i] = (v[i] pu + v[i+1] ps + v[i+2] pd) / (1 + rf),  i = 0..2n
        n = check_time_index(time_index, self.number_of_times - 1)
        v = as_array(values_next)
        if v.shape[0] != 2 * n + 3:
            raise LengthMismatchError(
                f"expected {2 * n + 3} values at time index {n + 1}, got {v.shape[0]}"
            )
        return (
            v[:-2] * self.prob_up + v[1:-1] * self.prob_stay + v[2:] * self.prob_down
        ) / (1.0 + self.risk_free_factor)
