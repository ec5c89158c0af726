# barrier_tree/errors.py
from __future__ import annotations

__all__ = ["LengthMismatchError", "InfeasibleCalibrationError"]


class LengthMismatchError(ValueError):
    """Elementwise operation on arrays of different lengths."""


class InfeasibleCalibrationError(ValueError):
    """Branch probabilities outside [0, 1]: the lattice admits arbitrage."""

    def __init__(self, probabilities: dict[str, float]):
        self.probabilities = dict(probabilities)
        shown = ", ".join(f"{k}={v:.6g}" for k, v in self.probabilities.items())
        super().__init__(f"Infeasible lattice calibration ({shown}); "
                         "check volatility, rate and time step.")
