"""
K-medoid clustering module.

This module partitions an arbitrary collection of items into a fixed number
of clusters with Partitioning Around Medoids (PAM). Only a pairwise distance
is needed, so items may be strings, sequences, records or anything else a
distance can be defined on. Every cluster is represented by one of the input
items, its medoid.

A run builds the distance matrix, selects the starting medoids
deterministically, improves them by first-improvement swap search and finally
labels every item with its nearest medoid. Identical inputs always give
identical medoids and labels.
"""

import logging
import numpy as np
from dataclasses import dataclass
from typing import Any, Dict, List, Optional, Sequence, Tuple

from ._assigner import assign_clusters
from ._distance_matrix import DistanceLike, build_distance_matrix, pairwise_distances
from ._exceptions import InvalidClusterCountError, InvalidInputError
from ._initializer import initialize_medoids
from ._optimizer import optimize_medoids

logger = logging.getLogger(__name__)

DEFAULT_MAX_ITER = 300


@dataclass(frozen=True)
class PamResult:
    """
    Result of one clustering run.

    Attributes
    ----------
    medoid_indices : Tuple[int, ...]
        Ordered medoid indices; position ``c`` is cluster label ``c``.
    labels : Tuple[int, ...]
        Cluster label of every item, aligned with the input order.
    cost : float
        Sum of distances from non-medoid items to their nearest medoid.
    n_iter : int
        Number of swap scans performed.
    converged : bool
        Whether the swap search ended without hitting ``max_iter``.
    cost_history : Tuple[float, ...]
        Initial cost followed by the cost after every accepted swap.
    """
    medoid_indices: Tuple[int, ...]
    labels: Tuple[int, ...]
    cost: float
    n_iter: int
    converged: bool
    cost_history: Tuple[float, ...]


class _PamRun:
    """
    State owned by a single clustering run.

    Holds the distance matrix and the current medoids for the duration of
    :meth:`execute`; nothing is shared between runs.
    """

    def __init__(self, distances: np.ndarray, n_clusters: int):
        self.distances = distances
        self.n_clusters = n_clusters
        self.medoids: List[int] = []

    def execute(self, max_iter: int = DEFAULT_MAX_ITER) -> PamResult:
        self.medoids = initialize_medoids(self.distances, self.n_clusters)
        swap = optimize_medoids(self.distances, self.medoids, max_iter=max_iter)
        self.medoids = list(swap.medoids)
        labels = assign_clusters(self.distances, self.medoids)
        return PamResult(
            medoid_indices=tuple(self.medoids),
            labels=tuple(labels),
            cost=swap.cost,
            n_iter=swap.n_iter,
            converged=swap.converged,
            cost_history=swap.cost_history,
        )


def _validate_inputs(items: Sequence[Any], n_clusters: int, max_iter: int) -> None:
    if items is None or len(items) == 0:
        raise InvalidInputError("Cannot cluster an empty collection of items")
    if isinstance(n_clusters, bool) or not isinstance(n_clusters, (int, np.integer)):
        raise InvalidClusterCountError(f"n_clusters must be an integer, got {n_clusters!r}")
    if not 1 <= n_clusters <= len(items):
        raise InvalidClusterCountError(f"n_clusters must be between 1 and {len(items)}, got {n_clusters}")
    if max_iter < 1:
        raise ValueError(f"max_iter must be at least 1, got {max_iter}")


def _run_pam(items: Sequence[Any], n_clusters: int, distance: DistanceLike, max_iter: int,
             check_finite: bool, distance_kwargs: Optional[Dict[str, Any]]) -> Tuple[np.ndarray, PamResult]:
    _validate_inputs(items, n_clusters, max_iter)
    logger.debug("Clustering %d items into %d clusters", len(items), n_clusters)

    distances = build_distance_matrix(items, distance, check_finite=check_finite, distance_kwargs=distance_kwargs)
    result = _PamRun(distances, int(n_clusters)).execute(max_iter=max_iter)
    return distances, result


@dataclass
class KMedoids:
    """
    K-medoid clustering of arbitrary items using a pairwise distance.

    Parameters
    ----------
    n_clusters : int
        Number of clusters, ``1 <= n_clusters <= n_items``.
    distance : str or Callable, default='euclidean'
        A callable ``f(a, b) -> float`` returning non-negative, symmetric
        distances, ``'dtw'``, ``'precomputed'`` or a scipy metric name.
        See :func:`pamclstr.build_distance_matrix`.
    max_iter : int, default=300
        Maximum number of swap scans.
    check_finite : bool, default=True
        Raise :class:`NonFiniteDistanceError` if any distance is NaN or infinite.
    distance_kwargs : dict, default=None
        Extra parameters for scipy metrics.

    Attributes
    ----------
    medoid_indices_ : List[int]
        Indices of the medoids in the fitted items, in label order.
    medoids_ : List[Any]
        The medoid items themselves.
    labels_ : List[int]
        Cluster label of each fitted item.
    cost_ : float
        Final total cost.
    n_iter_ : int
        Number of swap scans performed.
    converged_ : bool
        False if ``max_iter`` stopped the search.
    cost_history_ : List[float]
        Total cost before the first and after every accepted swap.
    """

    n_clusters: int
    distance: DistanceLike = 'euclidean'
    max_iter: int = DEFAULT_MAX_ITER
    check_finite: bool = True
    distance_kwargs: Optional[Dict[str, Any]] = None

    medoid_indices_: Optional[List[int]] = None
    medoids_: Optional[List[Any]] = None
    labels_: Optional[List[int]] = None
    cost_: Optional[float] = None
    n_iter_: Optional[int] = None
    converged_: Optional[bool] = None
    cost_history_: Optional[List[float]] = None

    def fit(self, items: Sequence[Any]) -> "KMedoids":
        """
        Select medoids for ``items`` and label every item.

        Parameters
        ----------
        items : Sequence[Any]
            Items to cluster, or the square distance matrix when
            ``distance='precomputed'``.

        Returns
        -------
        KMedoids
            The fitted estimator.
        """
        _, result = _run_pam(items, self.n_clusters, self.distance, self.max_iter,
                             self.check_finite, self.distance_kwargs)

        self.medoid_indices_ = list(result.medoid_indices)
        self.medoids_ = [items[i] for i in result.medoid_indices]
        self.labels_ = list(result.labels)
        self.cost_ = result.cost
        self.n_iter_ = result.n_iter
        self.converged_ = result.converged
        self.cost_history_ = list(result.cost_history)
        return self

    def fit_predict(self, items: Sequence[Any]) -> List[int]:
        """Fit the model to ``items`` and return the cluster labels."""
        return self.fit(items).labels_  # type: ignore[return-value]

    def predict(self, items: Sequence[Any]) -> List[int]:
        """
        Assign each of ``items`` to the nearest fitted medoid.

        Parameters
        ----------
        items : Sequence[Any]
            New items, comparable with the fitted ones by ``distance``.

        Returns
        -------
        List[int]
            Cluster label for each item. Equal distances resolve to the
            lowest label.
        """
        if self.medoids_ is None:
            raise RuntimeError("Model is not fitted. Call fit(items) first.")
        if items is None or len(items) == 0:
            raise InvalidInputError("Cannot predict labels for an empty collection of items")
        table = pairwise_distances(items, self.medoids_, self.distance,
                                   check_finite=self.check_finite, distance_kwargs=self.distance_kwargs)
        return assign_clusters(table, range(len(self.medoids_)))


def perform_clustering(items: Sequence[Any], n_clusters: int, distance: DistanceLike = 'euclidean',
                       max_iter: int = DEFAULT_MAX_ITER, check_finite: bool = True,
                       distance_kwargs: Optional[Dict[str, Any]] = None) -> Tuple[np.ndarray, List['Cluster'], List[int]]:
    """
    Cluster items with Partitioning Around Medoids.

    Parameters
    ----------
    ``items`` : Sequence[Any]
        Items to cluster, in a meaningful order: the order decides the
        starting medoids and breaks ties.
    ``n_clusters`` : int
        Number of clusters, ``1 <= n_clusters <= len(items)``.
    ``distance`` : str or Callable, default='euclidean'
        Available distances:

        ``callable``: any ``f(a, b) -> float``

        ``dtw``: Dynamic Time Warping distance

        ``precomputed``: ``items`` is the square distance matrix

        `Scipy distance metrics <https://docs.scipy.org/doc/scipy/reference/generated/scipy.spatial.distance.pdist.html>`_:

        ``euclidean``, ``manhattan``, ``cityblock``, ``sqeuclidean``,
        ``cosine``, ``correlation``, ``chebyshev``, ``canberra``,
        ``braycurtis``, ``hamming``, ``jaccard``, ``minkowski``,
        ``seuclidean``, ``mahalanobis``

    ``max_iter`` : int, default=300
        Maximum number of swap scans.
    ``check_finite`` : bool, default=True
        Raise if any distance is NaN or infinite.
    ``distance_kwargs`` : dict, default=None
        Additional scipy distance parameters.

    Returns
    -------
    Tuple[np.ndarray, List[Cluster], List[int]]
        Tuple of (distances, cluster_list, labels).
    """
    distances, result = _run_pam(items, n_clusters, distance, max_iter, check_finite, distance_kwargs)
    cluster_list = _create_cluster_list(items, result.medoid_indices, result.labels)
    return distances, cluster_list, list(result.labels)


def _create_cluster_list(items: Sequence[Any], medoid_indices: Sequence[int], labels: Sequence[int]) -> List['Cluster']:
    """
    Create Cluster objects from clustering results.

    Parameters
    ----------
    items : Sequence[Any]
        The clustered items.
    medoid_indices : Sequence[int]
        Medoid index of every cluster, in label order.
    labels : Sequence[int]
        Cluster label of every item.

    Returns
    -------
    List['Cluster']
        One Cluster per label, ordered by label.
    """
    label_array = np.asarray(labels, dtype=int)
    cluster_list = []
    for cluster_id, medoid_index in enumerate(medoid_indices):
        indices = np.flatnonzero(label_array == cluster_id)
        members = [items[idx] for idx in indices.tolist()]
        cluster_list.append(Cluster(cluster_id, medoid_index, indices, members, items[medoid_index]))
    return cluster_list


class Cluster:
    """
    Container for clustering results.

    Attributes
    ----------
    cluster_id : int
        Cluster label.
    medoid_index : int
        Index of the medoid in the clustered items.
    indices_of_members : np.ndarray
        Original indices of cluster members, ascending.
    number_of_members : int
        Number of members in cluster.
    list_of_members : List[Any]
        List of all cluster members.
    medoid : Any
        The item representing the cluster.
    """

    def __init__(self, cluster_id: int, medoid_index: int, indices_of_members: np.ndarray, list_of_members: List[Any], medoid: Any):
        self.cluster_id = cluster_id
        self.medoid_index = medoid_index
        self.indices_of_members = indices_of_members
        self.number_of_members = self.indices_of_members.size
        self.list_of_members = list_of_members
        self.medoid = medoid
