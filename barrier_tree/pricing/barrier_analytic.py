# barrier_tree/pricing/barrier_analytic.py
from __future__ import annotations

from .vanilla import bs_digital, bs_price, normalize_option_type

__all__ = ["barrier_price"]


def _knocked_payoff_value(
    spot: float, K: float, T: float, r: float, sigma: float,
    barrier: float, opt: str, down: bool,
) -> float:
    """
    Black-Scholes value of f(S_T), where f is the vanilla payoff restricted to
    the alive side of the barrier (S_T > B for 'down', S_T < B for 'up'),
    written as a combination of vanillas and digitals struck at K and B.
    """
    B = barrier
    if down:
        if opt == "call":
            if K >= B:
                return bs_price(spot, K, T, r, sigma, "call")
            return bs_price(spot, B, T, r, sigma, "call") + (B - K) * bs_digital(spot, B, T, r, sigma, "call")
        if K <= B:
            return 0.0
        return (bs_price(spot, K, T, r, sigma, "put") - bs_price(spot, B, T, r, sigma, "put")
                - (K - B) * bs_digital(spot, B, T, r, sigma, "put"))
    if opt == "call":
        if K >= B:
            return 0.0
        return (bs_price(spot, K, T, r, sigma, "call") - bs_price(spot, B, T, r, sigma, "call")
                - (B - K) * bs_digital(spot, B, T, r, sigma, "call"))
    if K <= B:
        return bs_price(spot, K, T, r, sigma, "put")
    return bs_price(spot, B, T, r, sigma, "put") + (K - B) * bs_digital(spot, B, T, r, sigma, "put")


def barrier_price(
    S: float,
    K: float,
    T: float,
    r: float,
    sigma: float,
    barrier: float,
    option_type: str = "call",
    direction: str = "down",
    inout: str = "out",
) -> float:
    """
    Continuously monitored single-barrier option under Black-Scholes.

    OUT via the reflection principle (Bjork, Arbitrage Theory in Continuous
    Time, ch. 18):

        V_out(S) = V_f(S) - (B/S)**(2r/sigma^2 - 1) * V_f(B^2/S)

    with f the payoff restricted to the alive side of B. IN by parity
    (vanilla - OUT). Used as a reference for lattice prices.

    Conventions:
      - 'down': alive while S > B;  'up': alive while S < B
      - spot already on the knocked side: OUT = 0, IN = vanilla
    """
    opt = normalize_option_type(option_type)
    side = direction.lower()
    if side not in ("down", "up"):
        raise ValueError("direction must be 'down' or 'up'")
    io = inout.lower()
    if io not in ("out", "in"):
        raise ValueError("inout must be 'out' or 'in'")
    if sigma <= 0:
        raise ValueError("sigma must be positive")
    down = side == "down"

    vanilla = bs_price(S, K, T, r, sigma, opt)
    alive = S > barrier if down else S < barrier

    if not alive:
        v_out = 0.0
    elif T <= 0:
        v_out = vanilla
    else:
        args = (K, T, r, sigma, barrier, opt, down)
        exponent = 2.0 * r / (sigma * sigma) - 1.0
        v_out = (_knocked_payoff_value(S, *args)
                 - (barrier / S) ** exponent * _knocked_payoff_value(barrier * barrier / S, *args))
        v_out = max(v_out, 0.0)

    return float(v_out) if io == "out" else float(vanilla - v_out)
