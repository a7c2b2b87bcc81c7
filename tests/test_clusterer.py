"""
Tests for the k-medoid clustering entry points.
"""

import math
import pytest
import numpy as np

from pamclstr import (
    KMedoids, perform_clustering, Cluster, build_distance_matrix, total_cost,
    InvalidInputError, InvalidClusterCountError, NonFiniteDistanceError, KMedoidError
)


POINTS = [(5, 2), (6, 3), (5, 2), (8, 2), (6, 2), (7, 4), (25, 30), (26, 33),
          (24, 28), (30, 29), (32, 32), (5, 20), (20, 5)]
EXPECTED_LABELS = [0, 0, 0, 0, 0, 0, 1, 1, 1, 1, 1, 0, 0]


def euclidean(a, b):
    return math.sqrt((a[0] - b[0]) ** 2 + (a[1] - b[1]) ** 2)


def mismatch(a, b):
    """Differing characters plus the length difference."""
    return float(sum(x != y for x, y in zip(a, b)) + abs(len(a) - len(b)))


@pytest.fixture
def random_points():
    rng = np.random.RandomState(42)
    return rng.rand(40, 2)


class TestKMedoids:
    """Tests for the KMedoids estimator."""

    def test_two_groups_of_points(self):
        """Test the two well-separated groups with outliers."""
        model = KMedoids(n_clusters=2, distance=euclidean)

        assert model.fit_predict(POINTS) == EXPECTED_LABELS

    def test_scipy_metric_gives_same_labels(self):
        """Test that the scipy euclidean metric reproduces the callable result."""
        assert KMedoids(n_clusters=2).fit_predict(POINTS) == EXPECTED_LABELS

    def test_fitted_attributes(self):
        """Test the attributes set by fit."""
        model = KMedoids(n_clusters=2, distance=euclidean).fit(POINTS)

        assert len(model.medoid_indices_) == 2
        assert model.medoids_ == [POINTS[i] for i in model.medoid_indices_]
        assert model.converged_
        assert model.n_iter_ >= 1
        assert model.cost_ == model.cost_history_[-1]
        distances = build_distance_matrix(POINTS, euclidean)
        assert model.cost_ == total_cost(distances, model.medoid_indices_)

    def test_medoids_label_themselves(self):
        """Test that each medoid carries its own position as label."""
        model = KMedoids(n_clusters=2, distance=euclidean).fit(POINTS)

        for position, index in enumerate(model.medoid_indices_):
            assert model.labels_[index] == position

    def test_deterministic(self, random_points):
        """Test that repeated runs agree exactly."""
        first = KMedoids(n_clusters=4).fit(random_points)
        second = KMedoids(n_clusters=4).fit(random_points)

        assert first.medoid_indices_ == second.medoid_indices_
        assert first.labels_ == second.labels_
        assert first.cost_history_ == second.cost_history_

    def test_labels_are_nearest_medoid(self, random_points):
        """Test that every item is labeled with a nearest medoid."""
        model = KMedoids(n_clusters=5).fit(random_points)
        distances = build_distance_matrix(random_points, 'euclidean')
        medoids = model.medoid_indices_

        assert len(model.labels_) == len(random_points)
        assert all(0 <= label < 5 for label in model.labels_)
        for i, label in enumerate(model.labels_):
            assert distances[i, medoids[label]] == distances[i, medoids].min()

    def test_cost_history_non_increasing(self, random_points):
        """Test monotonicity of the cost across accepted swaps."""
        history = KMedoids(n_clusters=3).fit(random_points).cost_history_

        assert all(later <= earlier for earlier, later in zip(history, history[1:]))

    def test_one_cluster(self, random_points):
        """Test that k = 1 puts everything in cluster 0."""
        assert KMedoids(n_clusters=1).fit_predict(random_points) == [0] * len(random_points)

    def test_every_item_a_medoid(self):
        """Test that k = n makes every item its own medoid."""
        items = [(0, 0), (1, 0), (5, 5), (9, 1)]
        model = KMedoids(n_clusters=4).fit(items)

        assert sorted(model.medoid_indices_) == [0, 1, 2, 3]
        assert model.cost_ == 0.0
        assert model.labels_ == [model.medoid_indices_.index(i) for i in range(4)]

    def test_single_item(self):
        """Test clustering a single item."""
        model = KMedoids(n_clusters=1, distance=mismatch).fit(['solo'])

        assert model.labels_ == [0]
        assert model.medoids_ == ['solo']
        assert model.cost_ == 0.0

    def test_strings(self):
        """Test clustering non-numeric items with a custom distance."""
        words = ['apple', 'apply', 'ample', 'zzzz', 'zzzy']
        labels = KMedoids(n_clusters=2, distance=mismatch).fit_predict(words)

        assert labels[0] == labels[1] == labels[2]
        assert labels[3] == labels[4]
        assert labels[0] != labels[3]

    def test_precomputed(self):
        """Test clustering from a precomputed matrix."""
        distances = build_distance_matrix(POINTS, euclidean)

        assert KMedoids(n_clusters=2, distance='precomputed').fit_predict(distances) == EXPECTED_LABELS

    def test_predict(self):
        """Test assigning new items to the fitted medoids."""
        model = KMedoids(n_clusters=2, distance=euclidean).fit(POINTS)

        assert model.predict([(6, 2), (28, 30)]) == [0, 1]

    def test_predict_before_fit(self):
        """Test that predict needs a fitted model."""
        with pytest.raises(RuntimeError):
            KMedoids(n_clusters=2).predict(POINTS)

    def test_predict_precomputed(self):
        """Test that precomputed models cannot predict new items."""
        distances = build_distance_matrix(POINTS, euclidean)
        model = KMedoids(n_clusters=2, distance='precomputed').fit(distances)

        with pytest.raises(ValueError):
            model.predict(distances)


class TestErrors:
    """Tests for input validation."""

    @pytest.mark.parametrize("items", [[], None])
    def test_empty_input(self, items):
        """Test that empty or missing items are rejected."""
        with pytest.raises(InvalidInputError):
            KMedoids(n_clusters=1).fit(items)

    @pytest.mark.parametrize("n_clusters", [0, -1, 14, 2.5, True])
    def test_invalid_cluster_count(self, n_clusters):
        """Test that k outside [1, n] is rejected."""
        with pytest.raises(InvalidClusterCountError):
            KMedoids(n_clusters=n_clusters).fit(POINTS)

    def test_cluster_count_checked_before_distances(self):
        """Test that an invalid k fails without evaluating any distance."""
        def failing(a, b):
            raise AssertionError("distance should not be evaluated")

        with pytest.raises(InvalidClusterCountError):
            perform_clustering([1, 2, 3], 4, distance=failing)

    def test_non_finite_distance(self):
        """Test that infinite distances abort the run."""
        with pytest.raises(NonFiniteDistanceError):
            perform_clustering([1, 2, 3], 2, distance=lambda a, b: float('inf'))

    def test_error_family(self):
        """Test that all input errors share a base class."""
        assert issubclass(InvalidInputError, KMedoidError)
        assert issubclass(InvalidClusterCountError, KMedoidError)
        assert issubclass(NonFiniteDistanceError, ValueError)

    def test_invalid_max_iter(self):
        """Test that max_iter must be positive."""
        with pytest.raises(ValueError):
            perform_clustering(POINTS, 2, max_iter=0)


class TestPerformClustering:
    """Tests for perform_clustering."""

    def test_returns_matrix_clusters_and_labels(self):
        """Test the returned tuple."""
        distances, cluster_list, labels = perform_clustering(POINTS, 2, distance=euclidean)

        assert distances.shape == (13, 13)
        assert labels == EXPECTED_LABELS
        assert len(cluster_list) == 2
        assert all(isinstance(cluster, Cluster) for cluster in cluster_list)

    def test_cluster_contents(self):
        """Test members and medoids of the returned clusters."""
        _, cluster_list, _ = perform_clustering(POINTS, 2, distance=euclidean)
        near, far = cluster_list

        assert near.cluster_id == 0
        assert near.indices_of_members.tolist() == [0, 1, 2, 3, 4, 5, 11, 12]
        assert near.number_of_members == 8
        assert far.indices_of_members.tolist() == [6, 7, 8, 9, 10]
        assert far.list_of_members == POINTS[6:11]
        assert far.medoid == POINTS[far.medoid_index]
        assert far.medoid_index in far.indices_of_members
