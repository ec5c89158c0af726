"""
strategies.py

Parametrization strategies: map continuous Black-Scholes inputs and the time
step to the structural factors of a lattice, then build that lattice.

Adding a calibration means adding a strategy; neither the adapter nor the
lattices change.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from typing import Protocol, runtime_checkable

from .binomial import BinomialLattice
from .lattice import TreeModel
from .params import ContinuousModelParams
from .trinomial import TrinomialLattice

__all__ = [
    "BinomialFactors",
    "TrinomialFactors",
    "LatticeStrategy",
    "BinomialStrategy",
    "TrinomialStrategy",
    "CoxRossRubinstein",
    "JarrowRudd",
    "FixedTrinomial",
    "KamradRitchken",
    "build_binomial",
    "build_trinomial",
]


@dataclass(frozen=True)
class BinomialFactors:
    up: float
    down: float


@dataclass(frozen=True)
class TrinomialFactors:
    prob_up: float
    up: float


@runtime_checkable
class LatticeStrategy(Protocol):
    def build(self, params: ContinuousModelParams, *, validate: bool = False) -> TreeModel:
        """Return the lattice approximating `params`."""


@runtime_checkable
class BinomialStrategy(LatticeStrategy, Protocol):
    def factors(self, params: ContinuousModelParams) -> BinomialFactors: ...


@runtime_checkable
class TrinomialStrategy(LatticeStrategy, Protocol):
    def factors(self, params: ContinuousModelParams) -> TrinomialFactors: ...


def build_binomial(
    factors: BinomialFactors, params: ContinuousModelParams, *, validate: bool = False
) -> BinomialLattice:
    return BinomialLattice(
        factors.up,
        factors.down,
        params.risk_free_factor,
        params.initial_price,
        params.number_of_times,
        validate=validate,
    )


def build_trinomial(
    factors: TrinomialFactors, params: ContinuousModelParams, *, validate: bool = False
) -> TrinomialLattice:
    return TrinomialLattice(
        factors.prob_up,
        factors.up,
        params.risk_free_factor,
        params.initial_price,
        params.number_of_times,
        validate=validate,
    )


# ---------------------------------------------------------------------------
# Binomial calibrations
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class CoxRossRubinstein:
    """up = exp(sigma * sqrt(dt)), down = 1 / up."""

    def factors(self, params: ContinuousModelParams) -> BinomialFactors:
        up = math.exp(params.volatility * math.sqrt(params.time_step))
        return BinomialFactors(up=up, down=1.0 / up)

    def build(self, params: ContinuousModelParams, *, validate: bool = False) -> BinomialLattice:
        return build_binomial(self.factors(params), params, validate=validate)


@dataclass(frozen=True)
class JarrowRudd:
    """Equal-probability tree: up/down = exp((r - sigma^2/2) dt +/- sigma sqrt(dt))."""

    def factors(self, params: ContinuousModelParams) -> BinomialFactors:
        dt = params.time_step
        drift = (params.risk_free_rate - 0.5 * params.volatility ** 2) * dt
        diffusion = params.volatility * math.sqrt(dt)
        return BinomialFactors(up=math.exp(drift + diffusion), down=math.exp(drift - diffusion))

    def build(self, params: ContinuousModelParams, *, validate: bool = False) -> BinomialLattice:
        return build_binomial(self.factors(params), params, validate=validate)


# ---------------------------------------------------------------------------
# Trinomial calibrations
# ---------------------------------------------------------------------------
@dataclass(frozen=True)
class FixedTrinomial:
    """Externally chosen (prob_up, up) pair, independent of the grid."""

    prob_up: float
    up: float

    def factors(self, params: ContinuousModelParams) -> TrinomialFactors:
        return TrinomialFactors(prob_up=self.prob_up, up=self.up)

    def build(self, params: ContinuousModelParams, *, validate: bool = False) -> TrinomialLattice:
        return build_trinomial(self.factors(params), params, validate=validate)


@dataclass(frozen=True)
class KamradRitchken:
    """
    up = exp(stretch * sigma * sqrt(dt)),
    prob_up = 1 / (2 stretch^2) + (r - sigma^2/2) sqrt(dt) / (2 stretch sigma)

    The lattice then solves the stay-probability from the martingale
    condition. stretch = sqrt(3) matches the first four moments of the normal
    increment to leading order.
    """

    stretch: float = math.sqrt(3.0)

    def __post_init__(self) -> None:
        if self.stretch < 1.0:
            raise ValueError("stretch must be >= 1")

    def factors(self, params: ContinuousModelParams) -> TrinomialFactors:
        sigma = params.volatility
        if sigma <= 0:
            raise ValueError("volatility must be positive")
        sqrt_dt = math.sqrt(params.time_step)
        lam = self.stretch
        prob_up = 1.0 / (2.0 * lam * lam) + (
            (params.risk_free_rate - 0.5 * sigma * sigma) * sqrt_dt / (2.0 * lam * sigma)
        )
        return TrinomialFactors(prob_up=prob_up, up=math.exp(lam * sigma * sqrt_dt))

    def build(self, params: ContinuousModelParams, *, validate: bool = False) -> TrinomialLattice:
        return build_trinomial(self.factors(params), params, validate=validate)
