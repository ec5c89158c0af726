from .barrier_analytic import barrier_price
from .barrier_tree import BarrierOptionTree
from .vanilla import bs_digital, bs_price, normalize_option_type, vanilla_payoff

__all__ = [
    "BarrierOptionTree",
    "barrier_price",
    "bs_digital",
    "bs_price",
    "normalize_option_type",
    "vanilla_payoff",
]
