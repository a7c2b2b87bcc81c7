"""
Top-level for pamclstr clustering package.

This package provides k-medoid clustering (Partitioning Around Medoids) for
any items with a pairwise distance, including time-series data.
End users should use the main functions: perform_clustering, KMedoids,
read_time_series and cluster_time_series.
"""

from .clusterer import (
    KMedoids,
    perform_clustering,
    Cluster,
    PamResult
)

from ._distance_matrix import (
    build_distance_matrix,
    pairwise_distances,
    dtw_distance
)

from ._initializer import initialize_medoids
from ._optimizer import optimize_medoids, total_cost, SwapResult
from ._assigner import assign_clusters

from ._exceptions import (
    KMedoidError,
    InvalidInputError,
    InvalidClusterCountError,
    NonFiniteDistanceError
)

from ._utils import (
    index_of_max,
    index_of_min,
    median
)

from .timeseries import (
    TimeSeries,
    read_time_series,
    cluster_time_series
)

__all__ = [
    "KMedoids",
    "perform_clustering",
    "Cluster",
    "PamResult",
    "build_distance_matrix",
    "pairwise_distances",
    "dtw_distance",
    "initialize_medoids",
    "optimize_medoids",
    "total_cost",
    "SwapResult",
    "assign_clusters",
    "KMedoidError",
    "InvalidInputError",
    "InvalidClusterCountError",
    "NonFiniteDistanceError",
    "index_of_max",
    "index_of_min",
    "median",
    "TimeSeries",
    "read_time_series",
    "cluster_time_series"
]

__version__ = "0.1.0"
