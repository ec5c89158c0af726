# barrier_tree/pricing/vanilla.py
from __future__ import annotations

from math import exp, log, sqrt

import numpy as np
from scipy.stats import norm

__all__ = ["normalize_option_type", "bs_price", "bs_digital", "vanilla_payoff"]


def normalize_option_type(option_type: str) -> str:
    opt = str(option_type).strip().lower()
    if opt not in ("call", "put"):
        raise ValueError("option_type must be 'call' or 'put'")
    return opt


def _d1_d2(S: float, K: float, T: float, r: float, sigma: float) -> tuple[float, float]:
    v = sigma * sqrt(T)
    d1 = (log(S / K) + (r + 0.5 * sigma * sigma) * T) / v
    return d1, d1 - v


def bs_price(S: float, K: float, T: float, r: float, sigma: float, option_type: str = "call") -> float:
    """
    Black-Scholes price of a European call/put (no dividends).
    Degenerate inputs (T <= 0, sigma <= 0) fall back to discounted intrinsic value on the forward.
    """
    opt = normalize_option_type(option_type)
    if T <= 0:
        return max(0.0, (S - K) if opt == "call" else (K - S))
    if K <= 0:
        # the option is always exercised
        return S - K * exp(-r * T) if opt == "call" else 0.0
    if sigma <= 0:
        fwd = S * exp(r * T)
        intrinsic = max(0.0, fwd - K) if opt == "call" else max(0.0, K - fwd)
        return exp(-r * T) * intrinsic

    d1, d2 = _d1_d2(S, K, T, r, sigma)
    if opt == "call":
        return float(S * norm.cdf(d1) - K * exp(-r * T) * norm.cdf(d2))
    return float(K * exp(-r * T) * norm.cdf(-d2) - S * norm.cdf(-d1))


def bs_digital(S: float, K: float, T: float, r: float, sigma: float, option_type: str = "call") -> float:
    """Cash-or-nothing price of 1{S_T > K} (call) or 1{S_T < K} (put)."""
    opt = normalize_option_type(option_type)
    if T <= 0 or sigma <= 0:
        fwd = S * exp(r * max(T, 0.0))
        hit = fwd > K if opt == "call" else fwd < K
        return exp(-r * max(T, 0.0)) * float(hit)
    if K <= 0:
        return exp(-r * T) if opt == "call" else 0.0
    _, d2 = _d1_d2(S, K, T, r, sigma)
    return float(exp(-r * T) * norm.cdf(d2 if opt == "call" else -d2))


def vanilla_payoff(ST: np.ndarray | float, K: float, option_type: str = "call") -> np.ndarray | float:
    """
    Terminal payoff max(S-K, 0) / max(K-S, 0).
    Returns a float for scalar input and an array otherwise.
    """
    opt = normalize_option_type(option_type)
    arr = np.asarray(ST, dtype=float)
    out = np.maximum(arr - K, 0.0) if opt == "call" else np.maximum(K - arr, 0.0)
    return float(out) if np.ndim(ST) == 0 else out
