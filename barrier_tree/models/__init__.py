from .approximating import BlackScholesTreeModel
from .binomial import BinomialLattice
from .lattice import ApproximatingTreeModel, TreeModel
from .params import PARAMETERS, ContinuousModelParams, param_assign, round_half_up
from .strategies import (
    BinomialFactors,
    BinomialStrategy,
    CoxRossRubinstein,
    FixedTrinomial,
    JarrowRudd,
    KamradRitchken,
    LatticeStrategy,
    TrinomialFactors,
    TrinomialStrategy,
)
from .trinomial import TrinomialLattice

__all__ = [
    "ApproximatingTreeModel",
    "BinomialFactors",
    "BinomialLattice",
    "BinomialStrategy",
    "BlackScholesTreeModel",
    "ContinuousModelParams",
    "CoxRossRubinstein",
    "FixedTrinomial",
    "JarrowRudd",
    "KamradRitchken",
    "LatticeStrategy",
    "PARAMETERS",
    "TreeModel",
    "TrinomialFactors",
    "TrinomialLattice",
    "TrinomialStrategy",
    "param_assign",
    "round_half_up",
]
