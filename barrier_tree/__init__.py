import logging

from .errors import InfeasibleCalibrationError, LengthMismatchError
from .models import (
    BinomialLattice,
    BlackScholesTreeModel,
    ContinuousModelParams,
    CoxRossRubinstein,
    TrinomialLattice,
    param_assign,
)
from .pricing import BarrierOptionTree, barrier_price, bs_price
from .validation import boyle_lau_number_of_times, convergence_table

logging.getLogger(__name__).addHandler(logging.NullHandler())

__all__ = [
    "BarrierOptionTree",
    "BinomialLattice",
    "BlackScholesTreeModel",
    "ContinuousModelParams",
    "CoxRossRubinstein",
    "InfeasibleCalibrationError",
    "LengthMismatchError",
    "TrinomialLattice",
    "barrier_price",
    "boyle_lau_number_of_times",
    "bs_price",
    "convergence_table",
    "param_assign",
]
