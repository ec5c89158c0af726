from .convergence import (
    analytic_reference,
    boyle_lau_number_of_times,
    convergence_table,
    parity_error,
)

__all__ = [
    "analytic_reference",
    "boyle_lau_number_of_times",
    "convergence_table",
    "parity_error",
]
