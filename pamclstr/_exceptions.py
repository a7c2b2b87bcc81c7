"""
Error conditions raised by the k-medoid clustering engine.

Every error is fatal to the run it occurs in and is raised before any
labels are produced.
"""


class KMedoidError(ValueError):
    """Base class for all clustering input errors."""


class InvalidInputError(KMedoidError):
    """The item sequence is missing, empty or malformed."""


class InvalidClusterCountError(KMedoidError):
    """The requested number of clusters is outside ``[1, n_items]``."""


class NonFiniteDistanceError(KMedoidError):
    """
    The distance function produced NaN or an infinite value.

    Attributes
    ----------
    pair : tuple of int
        Indices ``(i, j)`` of the first offending pair.
    value : float
        The offending distance.
    """

    def __init__(self, pair, value):
        self.pair = pair
        self.value = value
        super().__init__(f"Distance between items {pair[0]} and {pair[1]} is not finite: {value}")
