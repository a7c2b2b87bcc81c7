"""
Swap phase of Partitioning Around Medoids.

The medoid set is improved by first-improvement local search: medoid
positions are visited in order, and for each position every non-medoid
item is tried as a replacement in index order. The first replacement that
strictly lowers the total cost is accepted and the scan restarts from
position 0. A scan without any improving replacement ends the search.
"""

import logging
import math
import numpy as np
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SwapResult:
    """
    Outcome of the swap phase.

    Attributes
    ----------
    medoids : Tuple[int, ...]
        Final ordered medoid indices.
    cost : float
        Total cost of ``medoids``.
    n_iter : int
        Number of scans performed.
    converged : bool
        False if the scan limit was reached while swaps were still improving.
    cost_history : Tuple[float, ...]
        Initial cost followed by the cost after each accepted swap.
    """
    medoids: Tuple[int, ...]
    cost: float
    n_iter: int
    converged: bool
    cost_history: Tuple[float, ...]


def _non_medoids(n_items: int, medoids: Sequence[int]) -> np.ndarray:
    mask = np.ones(n_items, dtype=bool)
    mask[list(medoids)] = False
    return np.flatnonzero(mask)


def total_cost(distances: np.ndarray, medoids: Sequence[int]) -> float:
    """
    Sum over non-medoid items of the distance to their nearest medoid.

    Distances between medoids never enter the sum. The per-item minima are
    added with ``math.fsum`` so the total does not depend on summation order.

    Parameters
    ----------
    distances : np.ndarray
        Square distance matrix.
    medoids : Sequence[int]
        Medoid indices.

    Returns
    -------
    float
        The total cost; 0.0 when every item is a medoid.
    """
    others = _non_medoids(distances.shape[0], medoids)
    if others.size == 0:
        return 0.0
    nearest = distances[np.ix_(list(medoids), others)].min(axis=0)
    return math.fsum(nearest.tolist())


def _first_improving_swap(distances: np.ndarray, medoids: List[int], best_cost: float) -> Optional[Tuple[int, int, float]]:
    candidates = _non_medoids(distances.shape[0], medoids)
    trial = list(medoids)
    for position in range(len(medoids)):
        for candidate in candidates:
            trial[position] = int(candidate)
            cost = total_cost(distances, trial)
            if cost < best_cost:
                return position, int(candidate), cost
        trial[position] = medoids[position]
    return None


def optimize_medoids(distances: np.ndarray, medoids: Sequence[int], max_iter: int = 300) -> SwapResult:
    """
    Run first-improvement swap search from the given medoids.

    Parameters
    ----------
    distances : np.ndarray
        Square distance matrix.
    medoids : Sequence[int]
        Starting medoid indices, pairwise distinct.
    max_iter : int, default=300
        Maximum number of scans. Each scan either accepts one swap or
        finds none and stops the search.

    Returns
    -------
    SwapResult
        Best medoids found, their cost and the search trace.
    """
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")

    current = list(medoids)
    best_cost = total_cost(distances, current)
    cost_history = [best_cost]
    logger.debug("Initial total cost: %s", best_cost)

    converged = False
    n_iter = 0
    while n_iter < max_iter:
        n_iter += 1
        swap = _first_improving_swap(distances, current, best_cost)
        if swap is None:
            converged = True
            break
        position, candidate, best_cost = swap
        logger.debug("Swap medoid %d: item %d -> item %d, total cost %s", position, current[position], candidate, best_cost)
        current[position] = candidate
        cost_history.append(best_cost)

    if converged:
        logger.info("Swap search converged after %d scans with total cost %s", n_iter, best_cost)
    else:
        logger.warning("Swap search stopped at max_iter=%d before converging; total cost %s", max_iter, best_cost)

    return SwapResult(tuple(current), best_cost, n_iter, converged, tuple(cost_history))
