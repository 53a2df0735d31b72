from __future__ import annotations
import copy
from typing import Iterable, Optional

import numpy as np

from sketchsim.estimate import estimate_bottom_k, estimate_k_partition, union_bottom


def _as_set(values: Iterable) -> np.ndarray:
    return np.asarray(values, dtype=np.int64)


def bottom_k(values: Iterable, k: int) -> np.ndarray:
    """Take the `k` smallest elements of a sorted set.

    Args:
        values (Iterable): The set, as strictly increasing integers.
        k (int): The sketch size.

    Returns:
        numpy.ndarray: The first `k` elements of `values`.

    Raises:
        ValueError: If `k` is not positive or the set has fewer than
            `k` elements.
    """
    values = _as_set(values)
    if k < 1:
        raise ValueError("k must be positive, got %d" % k)
    if len(values) < k:
        raise ValueError(
            "Cannot take a bottom-%d sketch of a set with %d elements" % (k, len(values))
        )
    return values[:k].copy()


def partition_indices(values: Iterable, n: int, k: int) -> np.ndarray:
    """Map every element of `values` to its partition in `[0, k)`.

    The domain `[0, n)` is cut into `k` partitions of width `n // k`.
    The remainder `[k * (n // k), n)` falls into the last partition.
    """
    if k < 1:
        raise ValueError("k must be positive, got %d" % k)
    if k > n:
        raise ValueError("Cannot cut a domain of size %d into %d partitions" % (n, k))
    width = n // k
    return np.minimum(_as_set(values) // width, k - 1)


def k_partition(values: Iterable, n: int, k: int) -> np.ndarray:
    """Take the minimum element of every non-empty partition of a sorted set.

    Since the set is sorted, the minimum of a partition is the first
    element seen with that partition index, so one pass is enough.

    Args:
        values (Iterable): The set, as strictly increasing integers in
            `[0, n)`.
        n (int): The size of the universe.
        k (int): The number of partitions.

    Returns:
        numpy.ndarray: At most `k` elements, one per non-empty partition,
        in partition order.
    """
    values = _as_set(values)
    idx = partition_indices(values, n, k)
    keep = np.ones(len(values), dtype=bool)
    keep[1:] = idx[1:] != idx[:-1]
    return values[keep]


class BottomKSketch(object):
    """BottomKSketch keeps the `k` smallest elements of a set drawn from
    an already randomized universe, and estimates the `Jaccard similarity`_
    of two sets from their sketches alone.

    Args:
        k (int): The sketch size.
        values (Optional[Iterable]): The sorted sketch values. They can be
            specified for faster initialization using the :meth:`digest`
            of another sketch.

    .. _`Jaccard similarity`: https://en.wikipedia.org/wiki/Jaccard_index
    """

    def __init__(self, k: int, values: Optional[Iterable] = None) -> None:
        if k < 1:
            raise ValueError("k must be positive, got %d" % k)
        self.k = k
        if values is None:
            self.values = np.empty(0, dtype=np.int64)
        else:
            self.values = _as_set(values)
        if len(self.values) > k:
            raise ValueError(
                "A bottom-%d sketch cannot hold %d values" % (k, len(self.values))
            )

    @classmethod
    def from_set(cls, values: Iterable, k: int) -> BottomKSketch:
        """Build the sketch of a sorted set with at least `k` elements."""
        return cls(k, values=bottom_k(values, k))

    def _check_compatible(self, other: BottomKSketch, action: str) -> None:
        if not isinstance(other, BottomKSketch):
            raise ValueError("Cannot %s a BottomKSketch with %r" % (action, type(other)))
        if other.k != self.k:
            raise ValueError(
                "Cannot %s bottom-k sketches with different sizes: %d and %d"
                % (action, self.k, other.k)
            )

    def is_full(self) -> bool:
        """
        Returns:
            bool: If the sketch holds exactly `k` values.
        """
        return len(self.values) == self.k

    def jaccard(self, other: BottomKSketch) -> float:
        """Estimate the Jaccard similarity between the sets represented by
        this sketch and the other.

        Args:
            other (BottomKSketch): The other sketch.

        Returns:
            float: The Jaccard similarity, which is between 0.0 and 1.0.

        Raises:
            ValueError: If the two sketches have different sizes or
                either one is not full.
        """
        self._check_compatible(other, "compare")
        if not (self.is_full() and other.is_full()):
            raise ValueError("Cannot estimate Jaccard from undersized bottom-k sketches")
        return estimate_bottom_k(self.values, other.values)

    def digest(self) -> np.ndarray:
        """Export the sketch values.

        Returns:
            numpy.ndarray: A copy of the sorted sketch values.
        """
        return copy.copy(self.values)

    def copy(self) -> BottomKSketch:
        return BottomKSketch(self.k, values=self.digest())

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: BottomKSketch) -> bool:
        return (
            type(self) is type(other)
            and self.k == other.k
            and np.array_equal(self.values, other.values)
        )

    @classmethod
    def union(cls, *sketches: BottomKSketch) -> BottomKSketch:
        """Create the bottom-k sketch of the union of the sets represented
        by the sketches passed as arguments.

        Raises:
            ValueError: If fewer than 2 sketches are passed, or they have
                different sizes or are not full.
        """
        if len(sketches) < 2:
            raise ValueError("Cannot union less than 2 BottomKSketch")
        first = sketches[0]
        for s in sketches[1:]:
            first._check_compatible(s, "union")
        if not all(s.is_full() for s in sketches):
            raise ValueError("Cannot union undersized bottom-k sketches")
        values = first.values
        for s in sketches[1:]:
            values = union_bottom(values, s.values)
        return cls(first.k, values=values)


class KPartitionSketch(object):
    """KPartitionSketch keeps the minimum element of each of `k`
    equal-width partitions of the universe `[0, n)`. Partitions with no
    element are left out, which makes the sketch *incomplete*; only
    complete sketches align index for index and can be combined.

    Args:
        n (int): The size of the universe.
        k (int): The number of partitions.
        values (Optional[Iterable]): The sketch values, one per non-empty
            partition, in partition order.
    """

    def __init__(self, n: int, k: int, values: Optional[Iterable] = None) -> None:
        if k < 1 or k > n:
            raise ValueError("k=%d should be in range [1 : %d]" % (k, n))
        self.n = n
        self.k = k
        if values is None:
            self.values = np.empty(0, dtype=np.int64)
        else:
            self.values = _as_set(values)
        if len(self.values) > k:
            raise ValueError(
                "A %d-partition sketch cannot hold %d values" % (k, len(self.values))
            )

    @classmethod
    def from_set(cls, values: Iterable, n: int, k: int) -> KPartitionSketch:
        """Build the sketch of a sorted set over the universe `[0, n)`."""
        return cls(n, k, values=k_partition(values, n, k))

    def _check_compatible(self, other: KPartitionSketch, action: str) -> None:
        if not isinstance(other, KPartitionSketch):
            raise ValueError("Cannot %s a KPartitionSketch with %r" % (action, type(other)))
        if other.n != self.n or other.k != self.k:
            raise ValueError(
                "Cannot %s partition sketches with different layouts: "
                "(n=%d, k=%d) and (n=%d, k=%d)"
                % (action, self.n, self.k, other.n, other.k)
            )

    def is_complete(self) -> bool:
        """
        Returns:
            bool: If every partition is represented.
        """
        return len(self.values) == self.k

    def partitions(self) -> np.ndarray:
        """
        Returns:
            numpy.ndarray: The partition index of each sketch value.
        """
        return partition_indices(self.values, self.n, self.k)

    def jaccard(self, other: KPartitionSketch) -> float:
        """Estimate the Jaccard similarity between the sets represented by
        this sketch and the other.

        Raises:
            ValueError: If the sketches have different layouts or either
                one is incomplete.
        """
        self._check_compatible(other, "compare")
        if not (self.is_complete() and other.is_complete()):
            raise ValueError("Cannot estimate Jaccard from incomplete partition sketches")
        return estimate_k_partition(self.values, other.values)

    def digest(self) -> np.ndarray:
        return copy.copy(self.values)

    def copy(self) -> KPartitionSketch:
        return KPartitionSketch(self.n, self.k, values=self.digest())

    def __len__(self) -> int:
        return len(self.values)

    def __eq__(self, other: KPartitionSketch) -> bool:
        return (
            type(self) is type(other)
            and self.n == other.n
            and self.k == other.k
            and np.array_equal(self.values, other.values)
        )

    @classmethod
    def union(cls, *sketches: KPartitionSketch) -> KPartitionSketch:
        """Create the partition sketch of the union of the sets represented
        by the sketches passed as arguments.

        Raises:
            ValueError: If fewer than 2 sketches are passed, or they have
                different layouts or are incomplete.
        """
        if len(sketches) < 2:
            raise ValueError("Cannot union less than 2 KPartitionSketch")
        first = sketches[0]
        for s in sketches[1:]:
            first._check_compatible(s, "union")
        if not all(s.is_complete() for s in sketches):
            raise ValueError("Cannot union incomplete partition sketches")
        values = np.minimum.reduce([s.values for s in sketches])
        return cls(first.n, first.k, values=values)
