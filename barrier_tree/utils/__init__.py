from .arrays import (
    apply_function,
    array_average,
    array_max,
    array_min,
    array_sum,
    diff_arrays,
    max_arrays,
    mult_arrays,
    ratio_arrays,
    scalar_product,
    sum_arrays,
)

__all__ = [
    "apply_function",
    "array_average",
    "array_max",
    "array_min",
    "array_sum",
    "diff_arrays",
    "max_arrays",
    "mult_arrays",
    "ratio_arrays",
    "scalar_product",
    "sum_arrays",
]
