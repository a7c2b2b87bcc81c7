"""
Time-series input for k-medoid clustering.

Bundles of time series (e.g. simulation runs) are read from spreadsheets and
clustered with Dynamic Time Warping or any other supported distance. The
medoid of each cluster is one of the actual runs, which makes it a natural
representative behavior for the cluster.
"""

import logging
import os
import numpy as np
import pandas as pd
from typing import Any, List, Optional

from ._distance_matrix import DistanceLike
from .clusterer import Cluster, perform_clustering

logger = logging.getLogger(__name__)


class TimeSeries:
    """
    Container for time series data.

    Attributes
    ----------
    label : str
        Name of the series.
    data : np.ndarray
        Series values.
    cluster_id : int or None
        Cluster label assigned by :func:`cluster_time_series`.
    previous_cluster_id : Any
        Cluster label from an earlier clustering, if known.
    """
    def __init__(self, label: str, data: np.ndarray, previous_cluster_id: Optional[Any] = None):
        self.label = label
        self.data = data
        self.cluster_id = None
        self.previous_cluster_id = previous_cluster_id


def read_time_series(file_path: str) -> List[TimeSeries]:
    """
    Import time series data from .xlsx or .csv files.

    Column A holds the label of each series and columns B onwards its
    values, one series per row. Excel files are read from the sheet named
    ``data``.

    +---------+---------+---------+---------+-----+
    | Label   | Time 1  | Time 2  | Time 3  | ... |
    +=========+=========+=========+=========+=====+
    | Run 1   | 10.5    | 12.3    | 15.7    | ... |
    +---------+---------+---------+---------+-----+
    | Run 2   | 11.2    | 13.1    | 16.2    | ... |
    +---------+---------+---------+---------+-----+

    Parameters
    ----------
    ``file_path`` : str
        Path to the .xlsx or .csv file.

    Returns
    -------
    List[TimeSeries]
        List of TimeSeries objects.

    Raises
    ------
    FileNotFoundError
        If the specified file cannot be found.
    ValueError
        If the file doesn't have .xlsx or .csv extension.
    """
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Could not find file: {file_path}")

    file_extension = os.path.splitext(file_path)[1].lower()

    if file_extension not in ['.xlsx', '.csv']:
        raise ValueError("File must have .xlsx or .csv extension")

    if file_extension == '.xlsx':
        df_data = pd.read_excel(file_path, sheet_name='data')
    else:
        df_data = pd.read_csv(file_path)

    all_rows = df_data.values.tolist()
    list_of_ts_objects = [TimeSeries(row[0], np.array(row[1:], dtype=np.float64)) for row in all_rows]
    logger.debug("Read %d time series from %s", len(list_of_ts_objects), file_path)
    return list_of_ts_objects


def cluster_time_series(list_of_ts_objects: List[TimeSeries], n_clusters: int, distance: DistanceLike = 'dtw',
                        **kwargs: Any) -> List[Cluster]:
    """
    Cluster TimeSeries objects and record each object's cluster.

    Parameters
    ----------
    ``list_of_ts_objects`` : List[TimeSeries]
        Series to cluster; their ``cluster_id`` is overwritten.
    ``n_clusters`` : int
        Number of clusters.
    ``distance`` : str or Callable, default='dtw'
        Distance between the ``data`` arrays of two series.
    ``**kwargs``
        Passed on to :func:`pamclstr.perform_clustering`.

    Returns
    -------
    List[Cluster]
        Clusters whose members and medoid are TimeSeries objects.
    """
    data = [each_ts.data for each_ts in list_of_ts_objects]
    _, cluster_list, labels = perform_clustering(data, n_clusters, distance=distance, **kwargs)

    for each_ts, label in zip(list_of_ts_objects, labels):
        each_ts.cluster_id = label

    for cluster in cluster_list:
        cluster.list_of_members = [list_of_ts_objects[idx] for idx in cluster.indices_of_members.tolist()]
        cluster.medoid = list_of_ts_objects[cluster.medoid_index]
    return cluster_list
