# barrier_tree/models/params.py
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Any, Dict

__all__ = ["ContinuousModelParams", "PARAMETERS", "param_assign", "round_half_up"]


def round_half_up(x: float) -> int:
    """Nearest integer, halves rounded towards +inf (2.5 -> 3, -2.5 -> -2)."""
    return int(math.floor(x + 0.5))


@dataclass(frozen=True)
class ContinuousModelParams:
    """
    Black-Scholes inputs discretised on the uniform grid 0 = t_0 < ... < t_n = last_time.

    Build with `from_time_step` (number_of_times = round_half_up(last_time/time_step) + 1)
    or `from_number_of_times` (time_step = last_time / (number_of_times - 1)).
    """

    initial_price: float
    risk_free_rate: float
    volatility: float
    last_time: float
    time_step: float
    number_of_times: int

    @classmethod
    def from_time_step(
        cls,
        initial_price: float,
        risk_free_rate: float,
        volatility: float,
        last_time: float,
        time_step: float,
    ) -> "ContinuousModelParams":
        if time_step <= 0:
            raise ValueError("time_step must be positive")
        if last_time < 0:
            raise ValueError("last_time must be non-negative")
        return cls(
            initial_price=float(initial_price),
            risk_free_rate=float(risk_free_rate),
            volatility=float(volatility),
            last_time=float(last_time),
            time_step=float(time_step),
            number_of_times=round_half_up(last_time / time_step) + 1,
        )

    @classmethod
    def from_number_of_times(
        cls,
        initial_price: float,
        risk_free_rate: float,
        volatility: float,
        last_time: float,
        number_of_times: int,
    ) -> "ContinuousModelParams":
        if int(number_of_times) < 1:
            raise ValueError("number_of_times must be >= 1")
        if last_time < 0:
            raise ValueError("last_time must be non-negative")
        n = int(number_of_times)
        # a single time point has no step: every finite time resolves to index 0
        step = last_time / (n - 1) if n > 1 else math.inf
        return cls(
            initial_price=float(initial_price),
            risk_free_rate=float(risk_free_rate),
            volatility=float(volatility),
            last_time=float(last_time),
            time_step=float(step),
            number_of_times=n,
        )

    @property
    def number_of_steps(self) -> int:
        return self.number_of_times - 1

    @property
    def risk_free_factor(self) -> float:
        """One-step growth minus one: exp(r * dt) - 1."""
        if self.number_of_steps == 0:
            return 0.0
        return math.expm1(self.risk_free_rate * self.time_step)

    def time_index(self, time: float) -> int:
        """Nearest grid index to `time` (rounding, never an error)."""
        return round_half_up(time / self.time_step)

    def with_number_of_times(self, number_of_times: int) -> "ContinuousModelParams":
        return ContinuousModelParams.from_number_of_times(
            self.initial_price, self.risk_free_rate, self.volatility, self.last_time, number_of_times
        )


# Named scenarios. Model part: S0, r, sigma, T; option part: K, lower, upper, type.
PARAMETERS: Dict[str, Dict[str, Any]] = {
    # down-and-out call with Boyle-Lau friendly grid (barrier 4 down-moves away)
    "DOWN_OUT_CALL": dict(
        initial_price=100.0, risk_free_rate=0.0, volatility=0.3, last_time=2.0,
        number_of_times=260,
        strike=100.0, lower_barrier=90.0, upper_barrier=None, option_type="call",
    ),
    "UP_OUT_PUT": dict(
        initial_price=100.0, risk_free_rate=0.05, volatility=0.2, last_time=1.0,
        number_of_times=201,
        strike=100.0, lower_barrier=None, upper_barrier=120.0, option_type="put",
    ),
    "DOUBLE_OUT_CALL": dict(
        initial_price=100.0, risk_free_rate=0.02, volatility=0.25, last_time=1.0,
        number_of_times=201,
        strike=100.0, lower_barrier=80.0, upper_barrier=130.0, option_type="call",
    ),
}

_MODEL_KEYS = ("initial_price", "risk_free_rate", "volatility", "last_time", "number_of_times")


def param_assign(name: str, **overrides: Any) -> tuple[ContinuousModelParams, Dict[str, Any]]:
    """
    Fetch scenario `name` and apply overrides (any key of the scenario).

    Returns (model parameters, option keyword arguments). The option kwargs
    carry maturity = last_time and feed `BarrierOptionTree(**kwargs)`.
    """
    key = name.upper()
    if key not in PARAMETERS:
        raise ValueError(f"Scenario '{name}' not supported.")
    p = dict(PARAMETERS[key])
    unknown = set(overrides) - set(p)
    if unknown:
        raise ValueError(f"Unknown parameter(s) for '{name}': {sorted(unknown)}")
    p.update(overrides)

    model = ContinuousModelParams.from_number_of_times(*(p[k] for k in _MODEL_KEYS))
    option = {k: v for k, v in p.items() if k not in _MODEL_KEYS}
    option["maturity"] = model.last_time
    return model, option

