from typing import Optional, Union

import numpy as np


def make_rng(seed: Optional[Union[int, np.random.SeedSequence]] = None) -> np.random.Generator:
    """Create the random generator used to draw sets."""
    return np.random.default_rng(seed)


def sample_set(n: int, p: float, rng: np.random.Generator) -> np.ndarray:
    """Draw a random subset of `[0, n)` where each integer is included
    independently with probability `p`.

    Args:
        n (int): The size of the universe.
        p (float): The inclusion probability, in `(0, 1]`.
        rng (numpy.random.Generator): The source of randomness.

    Returns:
        numpy.ndarray: The subset as strictly increasing `int64` values.
    """
    if n < 1:
        raise ValueError("n must be positive, got %d" % n)
    if not (0.0 < p <= 1.0):
        raise ValueError("p=%r should be in range (0 : 1]" % p)
    return np.flatnonzero(rng.random(n) < p).astype(np.int64, copy=False)
