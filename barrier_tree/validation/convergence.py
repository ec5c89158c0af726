"""
convergence.py

Convergence and parity diagnostics for lattice barrier prices against the
continuous-monitoring closed forms.
"""
from __future__ import annotations

import logging
import math
from typing import Iterable

import pandas as pd

from ..models.approximating import BlackScholesTreeModel
from ..models.lattice import ApproximatingTreeModel
from ..models.params import ContinuousModelParams
from ..models.strategies import LatticeStrategy
from ..pricing.barrier_analytic import barrier_price
from ..pricing.barrier_tree import BarrierOptionTree
from ..pricing.vanilla import bs_price

__all__ = [
    "boyle_lau_number_of_times",
    "analytic_reference",
    "convergence_table",
    "parity_error",
]

logger = logging.getLogger(__name__)


def boyle_lau_number_of_times(
    initial_price: float,
    barrier: float,
    volatility: float,
    maturity: float,
    consecutive_moves: int,
) -> int:
    """
    Number of times (steps + 1) putting the barrier just inside the layer
    reached by `consecutive_moves` identical CRR moves (Boyle & Lau, 1994):

        steps = floor(m^2 sigma^2 T / ln(B/S0)^2)
    """
    if consecutive_moves < 1:
        raise ValueError("consecutive_moves must be >= 1")
    if barrier <= 0 or barrier == initial_price:
        raise ValueError("barrier must be positive and different from initial_price")
    log_distance = math.log(barrier / initial_price)
    steps = math.floor(consecutive_moves ** 2 * volatility ** 2 * maturity / log_distance ** 2)
    return int(steps) + 1


def analytic_reference(option: BarrierOptionTree, params: ContinuousModelParams) -> float:
    """Continuous-monitoring knock-out price (vanilla when no barrier is set)."""
    lower, upper = option.lower_barrier, option.upper_barrier
    S, r, sigma = params.initial_price, params.risk_free_rate, params.volatility
    if lower is not None and upper is not None:
        raise ValueError("no closed-form reference for double barriers")
    if lower is None and upper is None:
        return bs_price(S, option.strike, option.maturity, r, sigma, option.option_type)
    direction, barrier = ("down", lower) if lower is not None else ("up", upper)
    return barrier_price(
        S, option.strike, option.maturity, r, sigma, barrier,
        option_type=option.option_type, direction=direction, inout="out",
    )


def convergence_table(
    option: BarrierOptionTree,
    params: ContinuousModelParams,
    numbers_of_times: Iterable[int],
    reference: float | None = None,
    strategy: LatticeStrategy | None = None,
) -> pd.DataFrame:
    """
    Knock-out lattice price for each number of times, next to a reference.

    Columns: number_of_times, tree_price, reference, error (tree - reference),
    abs_error. `reference` defaults to the closed form for single barriers.
    """
    if reference is None:
        reference = analytic_reference(option, params)

    rows = []
    for n in numbers_of_times:
        model = BlackScholesTreeModel(params.with_number_of_times(int(n)), strategy)
        tree_price = option.value(model)
        rows.append(
            {
                "number_of_times": int(n),
                "tree_price": tree_price,
                "reference": float(reference),
                "error": tree_price - reference,
                "abs_error": abs(tree_price - reference),
            }
        )
    df = pd.DataFrame(rows, columns=["number_of_times", "tree_price", "reference", "error", "abs_error"])
    logger.debug("Convergence table over %d lattices", len(df))
    return df


def parity_error(option: BarrierOptionTree, model: ApproximatingTreeModel) -> float:
    """Return (IN + OUT - vanilla) on one lattice; zero up to rounding."""
    v_out = option.value(model)
    v_van = option.value_without_barrier(model)
    v_in = option.value_knock_in(model)
    return float(v_in + v_out - v_van)
