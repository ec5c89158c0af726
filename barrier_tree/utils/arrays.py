"""
arrays.py

Elementwise helpers on 1-D float arrays. Binary operations insist on equal
lengths instead of relying on numpy broadcasting.
"""
from __future__ import annotations

from typing import Callable, Sequence

import numpy as np

from ..errors import LengthMismatchError

__all__ = [
    "as_array",
    "mult_arrays",
    "sum_arrays",
    "diff_arrays",
    "ratio_arrays",
    "max_arrays",
    "apply_function",
    "array_sum",
    "array_average",
    "array_min",
    "array_max",
    "scalar_product",
]

ArrayLike = Sequence[float] | np.ndarray


def as_array(values: ArrayLike) -> np.ndarray:
    arr = np.asarray(values, dtype=float)
    if arr.ndim != 1:
        raise ValueError(f"expected a 1-D array, got shape {arr.shape}")
    return arr


def _pair(first: ArrayLike, second: ArrayLike) -> tuple[np.ndarray, np.ndarray]:
    a = as_array(first)
    b = as_array(second)
    if a.shape[0] != b.shape[0]:
        raise LengthMismatchError(
            f"the two arrays must have the same length ({a.shape[0]} != {b.shape[0]})"
        )
    return a, b


def mult_arrays(first: ArrayLike, second: ArrayLike) -> np.ndarray:
    a, b = _pair(first, second)
    return a * b


def sum_arrays(first: ArrayLike, second: ArrayLike) -> np.ndarray:
    a, b = _pair(first, second)
    return a + b


def diff_arrays(first: ArrayLike, second: ArrayLike) -> np.ndarray:
    a, b = _pair(first, second)
    return a - b


def ratio_arrays(first: ArrayLike, second: ArrayLike) -> np.ndarray:
    """Elementwise ratio; division by zero follows IEEE (inf / nan)."""
    a, b = _pair(first, second)
    with np.errstate(divide="ignore", invalid="ignore"):
        return a / b


def max_arrays(first: ArrayLike, second: ArrayLike) -> np.ndarray:
    a, b = _pair(first, second)
    return np.maximum(a, b)


def apply_function(values: ArrayLike, fn: Callable[[float], float]) -> np.ndarray:
    """Apply a scalar-to-scalar function to every entry."""
    arr = as_array(values)
    return np.fromiter((fn(x) for x in arr), dtype=float, count=arr.shape[0])


def array_sum(values: ArrayLike) -> float:
    return float(np.sum(as_array(values)))


def array_average(values: ArrayLike) -> float:
    arr = as_array(values)
    if arr.size == 0:
        raise ValueError("average of an empty array")
    return float(arr.mean())


def array_min(values: ArrayLike) -> float:
    return float(np.min(as_array(values)))


def array_max(values: ArrayLike) -> float:
    return float(np.max(as_array(values)))


def scalar_product(first: ArrayLike, second: ArrayLike) -> float:
    return array_sum(mult_arrays(first, second))
