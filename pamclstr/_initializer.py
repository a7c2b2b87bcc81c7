import logging
import numpy as np
from typing import List

logger = logging.getLogger(__name__)


def _first_medoid(distances: np.ndarray) -> int:
    """
    Index of the most central item in the normalized sense of Park & Jun.

    Each row of the distance matrix is divided by its sum, giving
    ``p[i, j] = d[i, j] / sum_j d[i, j]``; the item with the smallest column
    sum of ``p`` is returned. Rows summing to zero (an item identical to all
    others) contribute nothing.
    """
    row_sums = distances.sum(axis=1)
    p = np.divide(distances, row_sums[:, np.newaxis], out=np.zeros_like(distances), where=row_sums[:, np.newaxis] != 0)
    p_sum = p.sum(axis=0)
    return int(np.argmin(p_sum))


def initialize_medoids(distances: np.ndarray, n_clusters: int) -> List[int]:
    """
    Deterministically choose the starting medoids.

    The first medoid is the normalized-central item (see ``_first_medoid``).
    Every further medoid is the non-medoid item with the largest sum of
    distances to the medoids chosen so far. Ties go to the lowest index in
    both steps.

    Parameters
    ----------
    distances : np.ndarray
        Square, symmetric distance matrix.
    n_clusters : int
        Number of medoids to select, ``1 <= n_clusters <= n_items``.

    Returns
    -------
    List[int]
        Ordered medoid indices; position ``c`` becomes cluster label ``c``.
    """
    medoids = [_first_medoid(distances)]

    medoid_distance_sums = distances[:, medoids[0]].copy()
    is_medoid = np.zeros(distances.shape[0], dtype=bool)
    is_medoid[medoids[0]] = True

    while len(medoids) < n_clusters:
        candidates = np.where(is_medoid, -np.inf, medoid_distance_sums)
        new_medoid = int(np.argmax(candidates))
        medoids.append(new_medoid)
        is_medoid[new_medoid] = True
        medoid_distance_sums += distances[:, new_medoid]

    logger.debug("Initial medoids: %s", medoids)
    return medoids
