import logging
import numpy as np
from numba import njit
from scipy.spatial.distance import cdist, pdist, squareform
from typing import Any, Callable, Dict, Optional, Sequence, Union

from ._exceptions import InvalidInputError, NonFiniteDistanceError

logger = logging.getLogger(__name__)

DistanceLike = Union[str, Callable[[Any, Any], float]]

# Metric names accepted by build_distance_matrix, mapped to scipy's pdist/cdist names
_scipy_metrics: Dict[str, str] = {
    'euclidean': 'euclidean',
    'manhattan': 'cityblock',
    'cityblock': 'cityblock',
    'sqeuclidean': 'sqeuclidean',
    'cosine': 'cosine',
    'correlation': 'correlation',
    'chebyshev': 'chebyshev',
    'canberra': 'canberra',
    'braycurtis': 'braycurtis',
    'hamming': 'hamming',
    'jaccard': 'jaccard',
    'minkowski': 'minkowski',
    'seuclidean': 'seuclidean',
    'mahalanobis': 'mahalanobis',
}


@njit
def _compute_dtw(sample1: np.ndarray, sample2: np.ndarray) -> float:
    dtw = np.zeros((sample1.shape[0] + 1, sample2.shape[0] + 1))
    dtw[:, 0] = np.inf
    dtw[0, :] = np.inf
    dtw[0, 0] = 0

    for k in range(sample1.shape[0]):
        for l in range(sample2.shape[0]):
            cost = np.absolute(sample1[k] - sample2[l])
            dtw[k + 1, l + 1] = cost + min(dtw[k + 1, l], dtw[k, l + 1], dtw[k, l])

    return dtw[sample1.shape[0], sample2.shape[0]]


def dtw_distance(series1: Sequence[float], series2: Sequence[float]) -> float:
    """
    Dynamic Time Warping distance between two univariate sequences.

    The sequences may differ in length. The local cost between two points is
    the absolute difference ``|x_i - y_j|``; the warping path itself is found
    by the Numba-compiled dynamic program.

    Parameters
    ----------
    series1 : Sequence[float]
        First sequence.
    series2 : Sequence[float]
        Second sequence.

    Returns
    -------
    float
        Cumulative cost of the optimal alignment.
    """
    return float(_compute_dtw(np.asarray(series1, dtype=np.float64), np.asarray(series2, dtype=np.float64)))


def _as_feature_array(items: Sequence[Any], metric: str) -> np.ndarray:
    try:
        return np.array([np.asarray(item, dtype=np.float64) for item in items], dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Distance '{metric}' needs equal-length numeric vectors: {e}") from e


def _distance_scipy(items: Sequence[Any], metric: str, distance_kwargs: Dict[str, Any]) -> np.ndarray:
    """
    Square distance matrix from scipy's ``pdist`` for the given metric.

    The condensed result (upper triangle only) is expanded with ``squareform``.
    """
    data = _as_feature_array(items, metric)
    try:
        dRow = pdist(data, metric=_scipy_metrics[metric], **distance_kwargs)
    except Exception as e:
        raise ValueError(f"Error computing {metric} distance: {str(e)}. "
                         f"Please check that the required parameters are provided.") from e
    return squareform(dRow, checks=False)


def _distance_callable(items: Sequence[Any], distance_func: Callable[[Any, Any], float]) -> np.ndarray:
    n = len(items)
    distances = np.zeros((n, n), dtype=np.float64)
    for i in range(n - 1):
        for j in range(i + 1, n):
            distances[i, j] = distance_func(items[i], items[j])
            distances[j, i] = distances[i, j]
    return distances


def _distance_precomputed(items: Any) -> np.ndarray:
    try:
        distances = np.array(items, dtype=np.float64)
    except (TypeError, ValueError) as e:
        raise InvalidInputError(f"Precomputed distances must be numeric: {e}") from e
    if distances.ndim != 2 or distances.shape[0] != distances.shape[1]:
        raise InvalidInputError(f"Precomputed distances must be a square matrix, got shape {distances.shape}")
    return distances


def _check_finite(distances: np.ndarray) -> None:
    offending = np.argwhere(~np.isfinite(distances))
    if offending.size:
        i, j = (int(x) for x in offending[0])
        raise NonFiniteDistanceError((i, j), float(distances[i, j]))


def _resolve_callable(distance: DistanceLike) -> Optional[Callable[[Any, Any], float]]:
    if callable(distance):
        return distance
    if distance == 'dtw':
        return dtw_distance
    return None


def build_distance_matrix(items: Sequence[Any], distance: DistanceLike = 'euclidean', check_finite: bool = True,
                          distance_kwargs: Optional[Dict[str, Any]] = None) -> np.ndarray:
    """
    Compute the full symmetric pairwise distance matrix of ``items``.

    Only the upper triangle is evaluated; the lower triangle is mirrored and
    the diagonal is left at zero.

    Parameters
    ----------
    items : Sequence[Any]
        Items to compare, referenced by their position. With
        ``distance='precomputed'`` this is the square distance matrix itself.
    distance : str or Callable, default='euclidean'
        A callable ``f(a, b) -> float``, ``'dtw'``, ``'precomputed'`` or one of the
        scipy metric names: ``euclidean``, ``manhattan``, ``cityblock``,
        ``sqeuclidean``, ``cosine``, ``correlation``, ``chebyshev``,
        ``canberra``, ``braycurtis``, ``hamming``, ``jaccard``, ``minkowski``,
        ``seuclidean``, ``mahalanobis``.
    check_finite : bool, default=True
        If True, raise as soon as the matrix holds NaN or an infinite value.
    distance_kwargs : dict, default=None
        Extra keyword arguments for scipy metrics (e.g. ``{'p': 3}`` for minkowski).

    Returns
    -------
    np.ndarray
        Float matrix of shape (n_items, n_items).

    Raises
    ------
    InvalidInputError
        If ``items`` is None or empty, or cannot be used with the chosen metric.
    NonFiniteDistanceError
        If ``check_finite`` is set and a distance is NaN or infinite.
    ValueError
        If ``distance`` is an unknown metric name.
    """
    if items is None or len(items) == 0:
        raise InvalidInputError("Cannot cluster an empty collection of items")

    distance_func = _resolve_callable(distance)
    if distance_func is not None:
        distances = _distance_callable(items, distance_func)
    elif distance == 'precomputed':
        distances = _distance_precomputed(items)
    elif distance in _scipy_metrics:
        distances = _distance_scipy(items, distance, distance_kwargs or {})
    else:
        raise ValueError(f'Unknown distance: {distance}')

    if check_finite:
        _check_finite(distances)

    logger.debug("Built %dx%d distance matrix", distances.shape[0], distances.shape[1])
    return distances


def pairwise_distances(items_a: Sequence[Any], items_b: Sequence[Any], distance: DistanceLike = 'euclidean',
                       check_finite: bool = True, distance_kwargs: Optional[Dict[str, Any]] = None) -> np.ndarray:
    """
    Rectangular distance table between two item collections.

    Entry ``[i, j]`` is the distance from ``items_a[i]`` to ``items_b[j]``.
    Accepts the same ``distance`` values as :func:`build_distance_matrix`
    except ``'precomputed'``.
    """
    if distance == 'precomputed':
        raise ValueError("Precomputed distances cannot be evaluated against new items")

    distance_func = _resolve_callable(distance)
    if distance_func is not None:
        table = np.array([[distance_func(a, b) for b in items_b] for a in items_a], dtype=np.float64)
        table = table.reshape(len(items_a), len(items_b))
    elif distance in _scipy_metrics:
        data_a = _as_feature_array(items_a, distance)
        data_b = _as_feature_array(items_b, distance)
        try:
            table = cdist(data_a, data_b, metric=_scipy_metrics[distance], **(distance_kwargs or {}))
        except Exception as e:
            raise ValueError(f"Error computing {distance} distance: {str(e)}") from e
    else:
        raise ValueError(f'Unknown distance: {distance}')

    if check_finite:
        _check_finite(table)
    return table
