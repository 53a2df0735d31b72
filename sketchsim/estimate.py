from typing import Iterable

import numpy as np


def union_bottom(first: Iterable, second: Iterable) -> np.ndarray:
    """Reconstruct the bottom-k sketch of the union of two sets from
    their bottom-k sketches.

    The bottom-k of `A | B` is the `k` smallest distinct values among the
    bottom-k of `A` and the bottom-k of `B`, so the two sorted sketches are
    merged, equal values are kept once, and the result is cut at the
    length of `first`.

    Args:
        first (Iterable): The bottom-k sketch of the first set.
        second (Iterable): The bottom-k sketch of the second set.

    Returns:
        numpy.ndarray: The reconstructed sketch, with `len(first)` values.

    Example:

        .. code-block:: python

            union_bottom([1, 3, 5, 7], [2, 3, 6, 9])
            # array([1, 2, 3, 5])
    """
    first = np.asarray(first, dtype=np.int64)
    second = np.asarray(second, dtype=np.int64)
    k = len(first)
    # Neither sketch can contribute more than k values to the result.
    return np.union1d(first, second[:k])[:k]


def union_partition(first: Iterable, second: Iterable) -> np.ndarray:
    """Reconstruct the k-partition sketch of the union of two sets from
    their complete k-partition sketches.

    The minimum of a partition of `A | B` is the smaller of the minima of
    that partition in `A` and in `B`.

    Raises:
        ValueError: If the sketches are not aligned, i.e. have different
            lengths.
    """
    first = np.asarray(first, dtype=np.int64)
    second = np.asarray(second, dtype=np.int64)
    if len(first) != len(second):
        raise ValueError(
            "Cannot align partition sketches of lengths %d and %d"
            % (len(first), len(second))
        )
    return np.minimum(first, second)


def approximate_jaccard(first: Iterable, second: Iterable, union: Iterable) -> float:
    """Estimate the Jaccard similarity of two sets as the fraction of the
    reconstructed union sketch found in both input sketches.

    Args:
        first (Iterable): The sketch of the first set.
        second (Iterable): The sketch of the second set.
        union (Iterable): The union sketch reconstructed from `first`
            and `second`.

    Returns:
        float: The Jaccard similarity, which is between 0.0 and 1.0.

    Raises:
        ValueError: If `union` is empty.
    """
    union = np.asarray(union, dtype=np.int64)
    if len(union) == 0:
        raise ValueError("Cannot estimate Jaccard from an empty union sketch")
    in_first = np.isin(union, first, assume_unique=True)
    in_second = np.isin(union, second, assume_unique=True)
    return float(np.count_nonzero(in_first & in_second)) / float(len(union))


def estimate_bottom_k(first: Iterable, second: Iterable) -> float:
    """Estimate the Jaccard similarity from two bottom-k sketches."""
    return approximate_jaccard(first, second, union_bottom(first, second))


def estimate_k_partition(first: Iterable, second: Iterable) -> float:
    """Estimate the Jaccard similarity from two complete k-partition sketches."""
    return approximate_jaccard(first, second, union_partition(first, second))


def exact_jaccard(first: Iterable, second: Iterable) -> float:
    """Compute the exact `Jaccard similarity`_ of two sorted sets of
    distinct integers.

    Returns:
        float: `|A & B| / |A | B|`.

    Raises:
        ValueError: If both sets are empty.

    .. _`Jaccard similarity`: https://en.wikipedia.org/wiki/Jaccard_index
    """
    first = np.asarray(first, dtype=np.int64)
    second = np.asarray(second, dtype=np.int64)
    if len(first) == 0 and len(second) == 0:
        raise ValueError("The Jaccard similarity of two empty sets is undefined")
    common = len(np.intersect1d(first, second, assume_unique=True))
    return float(common) / float(len(first) + len(second) - common)
