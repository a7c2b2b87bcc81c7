from __future__ import annotations

import logging
import math
import random

from pamclstr import KMedoids, TimeSeries, cluster_time_series, perform_clustering


def _generate_sine_series(n: int, length: int, noise: float, phase: float) -> list[list[float]]:
    data: list[list[float]] = []
    for _ in range(n):
        series = [math.sin(2 * math.pi * (i / length) + phase) for i in range(length)]
        series = [x + random.gauss(0.0, noise) for x in series]
        data.append(series)
    return data


def demo_points() -> None:
    points = [(5, 2), (6, 3), (5, 2), (8, 2), (6, 2), (7, 4), (25, 30), (26, 33),
              (24, 28), (30, 29), (32, 32), (5, 20), (20, 5)]

    _, cluster_list, labels = perform_clustering(points, 2, distance='euclidean')

    print("Labels:", labels)
    for cluster in cluster_list:
        print(f"Cluster {cluster.cluster_id}: medoid {cluster.medoid}, {cluster.number_of_members} members")


def demo_time_series() -> None:
    # Two sine-wave clusters with phase shift, compared with DTW
    random.seed(42)
    X = _generate_sine_series(n=10, length=50, noise=0.1, phase=0.0)
    X += _generate_sine_series(n=10, length=50, noise=0.1, phase=1.5)

    model = KMedoids(n_clusters=2, distance='dtw')
    labels = model.fit_predict(X)
    print("Medoid indices:", model.medoid_indices_, "cost:", round(model.cost_, 3))

    counts = {0: 0, 1: 0}
    for lbl in labels:
        counts[lbl] = counts.get(lbl, 0) + 1
    print("Cluster counts:", counts)

    list_of_ts_objects = [TimeSeries(f"Run {i + 1}", series) for i, series in enumerate(X)]
    for cluster in cluster_time_series(list_of_ts_objects, 2):
        print(f"Cluster {cluster.cluster_id} represented by {cluster.medoid.label}")


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    demo_points()
    demo_time_series()
