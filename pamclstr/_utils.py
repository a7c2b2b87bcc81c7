"""
Small numeric helpers shared by the clustering tools.
"""

import numpy as np
from typing import Sequence

from ._exceptions import InvalidInputError


def _as_non_empty_array(values: Sequence[float]) -> np.ndarray:
    if values is None:
        raise InvalidInputError("values must not be None")
    array = np.asarray(values, dtype=np.float64)
    if array.size == 0:
        raise InvalidInputError("values must not be empty")
    return array


def index_of_max(values: Sequence[float]) -> int:
    """Index of the largest value; the first occurrence wins on ties."""
    return int(np.argmax(_as_non_empty_array(values)))


def index_of_min(values: Sequence[float]) -> int:
    """Index of the smallest value; the first occurrence wins on ties."""
    return int(np.argmin(_as_non_empty_array(values)))


def median(values: Sequence[float]) -> float:
    """
    Median of ``values``.

    For an even number of values this is the mean of the two middle values.
    """
    ordered = np.sort(_as_non_empty_array(values))
    mid = ordered.size // 2
    if ordered.size % 2 == 0:
        return float((ordered[mid - 1] + ordered[mid]) / 2)
    return float(ordered[mid])
