"""Ready-made distance functions and item types for common domains.

These are collaborators of the index, not part of it: a tree only ever calls
whatever distance it was bound to. Importing this package registers the
functions below by name with :mod:`bktreex.core.metrics`.
"""

from bktreex.core.metrics import Metric, register_metric

from .edit import Word, levenshtein
from .hamming import HashCode, bit_hamming, hamming, padded_hamming

register_metric(Metric(name="levenshtein", distance=levenshtein))
register_metric(Metric(name="hamming", distance=hamming))
register_metric(Metric(name="padded_hamming", distance=padded_hamming))
register_metric(Metric(name="bit_hamming", distance=bit_hamming))

__all__ = [
    "HashCode",
    "Word",
    "bit_hamming",
    "hamming",
    "levenshtein",
    "padded_hamming",
]
