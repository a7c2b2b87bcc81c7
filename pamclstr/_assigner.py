import numpy as np
from typing import List, Sequence


def assign_clusters(distances: np.ndarray, medoids: Sequence[int]) -> List[int]:
    """
    Label every item with the position of its nearest medoid.

    Parameters
    ----------
    distances : np.ndarray
        Distance table whose rows are indexed by item and whose columns
        include the medoids. For a square matrix this is the run's distance
        matrix; a rectangular item-by-medoid table works the same way.
    medoids : Sequence[int]
        Column indices of the medoids, in label order.

    Returns
    -------
    List[int]
        One label in ``[0, len(medoids))`` per row. Equal distances resolve
        to the lowest medoid position.
    """
    medoid_distances = distances[:, list(medoids)]
    # argmin returns the first minimum, i.e. the lowest medoid position
    return [int(label) for label in np.argmin(medoid_distances, axis=1)]
