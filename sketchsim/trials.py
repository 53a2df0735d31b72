"""Monte Carlo comparison of the bottom-k and k-partition estimators."""

from __future__ import annotations

import logging
import math
from concurrent.futures import ThreadPoolExecutor
from dataclasses import dataclass, field, replace
from functools import reduce
from typing import Iterable, List, NamedTuple, Optional

import numpy as np

from sketchsim.estimate import estimate_bottom_k, estimate_k_partition, exact_jaccard
from sketchsim.progress import make_progress
from sketchsim.sampler import make_rng, sample_set
from sketchsim.sketch import bottom_k, k_partition

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class SimulationConfig:
    """Parameters of one simulation run.

    Args:
        n (int): The size of the universe `[0, n)`.
        p1 (float): The inclusion probability of the first set.
        p2 (float): The inclusion probability of the second set.
        k (int): The sketch size, which is also the number of partitions.
        num_trials (int): The number of accepted trials.
        seed (Optional[int]): The seed of the random generator. A fresh
            seed is drawn from the OS when it is None.
        workers (int): The number of worker threads sharing the trials.
        max_discards (Optional[int]): The number of discarded trials a
            worker tolerates before giving up. Unbounded when None.
    """

    n: int
    p1: float
    p2: float
    k: int
    num_trials: int
    seed: Optional[int] = None
    workers: int = 1
    max_discards: Optional[int] = None

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError("n must be positive, got %d" % self.n)
        for name, p in (("p1", self.p1), ("p2", self.p2)):
            if not (0.0 < p <= 1.0):
                raise ValueError("%s=%r should be in range (0 : 1]" % (name, p))
        if not (1 <= self.k <= self.n):
            raise ValueError("k=%d should be in range [1 : %d]" % (self.k, self.n))
        if self.num_trials < 1:
            raise ValueError("num_trials must be positive, got %d" % self.num_trials)
        if self.workers < 1:
            raise ValueError("workers must be positive, got %d" % self.workers)
        if self.max_discards is not None and self.max_discards < 0:
            raise ValueError("max_discards cannot be negative")
        expected = self.n * min(self.p1, self.p2)
        if expected < self.k:
            raise ValueError(
                "Expected set size %.1f is smaller than the sketch size %d; "
                "increase n or the inclusion probabilities" % (expected, self.k)
            )

    @classmethod
    def default(cls, **overrides) -> SimulationConfig:
        """The reference regime: a 10% set and a 1% set of one million
        integers, sketched with k=1000, over 10000 trials.
        """
        params = dict(n=1_000_000, p1=0.1, p2=0.01, k=1000, num_trials=10_000)
        params.update(overrides)
        return cls(**params)


@dataclass(frozen=True, slots=True)
class Moments:
    """Count, sum and sum of squares of one observed quantity."""

    count: int = 0
    total: float = 0.0
    total_sq: float = 0.0

    def add(self, x: float) -> Moments:
        return Moments(self.count + 1, self.total + x, self.total_sq + x * x)

    def merge(self, other: Moments) -> Moments:
        return Moments(
            self.count + other.count,
            self.total + other.total,
            self.total_sq + other.total_sq,
        )

    def _check_count(self) -> None:
        if self.count == 0:
            raise ValueError("No observations")

    @property
    def mean(self) -> float:
        self._check_count()
        return self.total / self.count

    @property
    def mean_sq(self) -> float:
        self._check_count()
        return self.total_sq / self.count

    @property
    def variance(self) -> float:
        """The population variance, `E[x^2] - E[x]^2`."""
        # Rounding can push a zero variance slightly below zero.
        return max(self.mean_sq - self.mean ** 2, 0.0)

    @property
    def legacy_variance(self) -> float:
        """`(sum^2 - sum of squares) / count^2`, the figure printed by the
        first version of this simulation. It is neither the variance nor its
        negation and is kept only for comparison with old results.
        """
        self._check_count()
        return (self.total ** 2 - self.total_sq) / (self.count ** 2)

    @property
    def std_error(self) -> float:
        """The standard error of :attr:`mean`."""
        return math.sqrt(self.variance / self.count)


class TrialObservation(NamedTuple):
    """The exact Jaccard similarity and both estimates from one trial."""

    exact: float
    bottom_k: float
    k_partition: float


@dataclass(frozen=True, slots=True)
class TrialSummary:
    """Moments of every quantity over the accepted trials, and the number
    of discarded trials. Summaries are immutable; :meth:`add` and
    :meth:`merge` return new ones, so partial summaries computed apart can
    be combined in any grouping.
    """

    exact: Moments = field(default_factory=Moments)
    bottom_k: Moments = field(default_factory=Moments)
    k_partition: Moments = field(default_factory=Moments)
    bottom_k_error: Moments = field(default_factory=Moments)
    k_partition_error: Moments = field(default_factory=Moments)
    discarded: int = 0

    @property
    def accepted(self) -> int:
        return self.exact.count

    def add(self, obs: TrialObservation) -> TrialSummary:
        return TrialSummary(
            exact=self.exact.add(obs.exact),
            bottom_k=self.bottom_k.add(obs.bottom_k),
            k_partition=self.k_partition.add(obs.k_partition),
            bottom_k_error=self.bottom_k_error.add(obs.bottom_k - obs.exact),
            k_partition_error=self.k_partition_error.add(obs.k_partition - obs.exact),
            discarded=self.discarded,
        )

    def discard(self) -> TrialSummary:
        return replace(self, discarded=self.discarded + 1)

    def merge(self, other: TrialSummary) -> TrialSummary:
        return TrialSummary(
            exact=self.exact.merge(other.exact),
            bottom_k=self.bottom_k.merge(other.bottom_k),
            k_partition=self.k_partition.merge(other.k_partition),
            bottom_k_error=self.bottom_k_error.merge(other.bottom_k_error),
            k_partition_error=self.k_partition_error.merge(other.k_partition_error),
            discarded=self.discarded + other.discarded,
        )

    @classmethod
    def fold(cls, observations: Iterable[TrialObservation]) -> TrialSummary:
        return reduce(cls.add, observations, cls())


def run_trial(config: SimulationConfig, rng: np.random.Generator) -> Optional[TrialObservation]:
    """Run one trial.

    Returns:
        Optional[TrialObservation]: The observation, or None when either
        set leaves a partition empty and the trial must be discarded.
    """
    first = sample_set(config.n, config.p1, rng)
    second = sample_set(config.n, config.p2, rng)
    kp1 = k_partition(first, config.n, config.k)
    kp2 = k_partition(second, config.n, config.k)
    if len(kp1) < config.k or len(kp2) < config.k:
        return None
    # Every partition is non-empty, so both sets hold at least k elements.
    bk1 = bottom_k(first, config.k)
    bk2 = bottom_k(second, config.k)
    return TrialObservation(
        exact=exact_jaccard(first, second),
        bottom_k=estimate_bottom_k(bk1, bk2),
        k_partition=estimate_k_partition(kp1, kp2),
    )


def run_trials(
    config: SimulationConfig,
    num_trials: int,
    rng: np.random.Generator,
    progress=None,
) -> TrialSummary:
    """Run trials until `num_trials` of them are accepted.

    Discarded trials are resampled and do not count toward `num_trials`.

    Raises:
        RuntimeError: If more than `config.max_discards` trials are discarded.
    """
    summary = TrialSummary()
    while summary.accepted < num_trials:
        obs = run_trial(config, rng)
        if obs is None:
            summary = summary.discard()
            logger.debug("Discarded trial with an empty partition (%d so far)",
                         summary.discarded)
            if config.max_discards is not None and summary.discarded > config.max_discards:
                raise RuntimeError(
                    "Discarded more than %d trials with empty partitions; "
                    "the sets are too sparse for k=%d" % (config.max_discards, config.k)
                )
            continue
        summary = summary.add(obs)
        if progress is not None:
            progress.update(1)
    return summary


def _split_trials(num_trials: int, workers: int) -> List[int]:
    base, extra = divmod(num_trials, workers)
    shares = [base + (1 if i < extra else 0) for i in range(workers)]
    return [s for s in shares if s > 0]


def simulate(config: SimulationConfig, progress: bool = False) -> TrialSummary:
    """Run the full simulation described by `config`.

    The trials are shared among `config.workers` threads, each with its own
    generator spawned from the configured seed. Partial summaries are merged
    in worker order, so a run is reproducible for a fixed seed and worker
    count.

    Args:
        config (SimulationConfig): The simulation parameters.
        progress (bool): Show a progress bar on an interactive terminal.

    Returns:
        TrialSummary: The summary of exactly `config.num_trials` accepted
        trials.
    """
    logger.info("Running %d trials with n=%d, p1=%g, p2=%g, k=%d",
                config.num_trials, config.n, config.p1, config.p2, config.k)
    shares = _split_trials(config.num_trials, config.workers)
    seeds = np.random.SeedSequence(config.seed).spawn(len(shares))
    rngs = [make_rng(s) for s in seeds]
    with make_progress(desc="Trials", total=config.num_trials, unit="trial",
                       enabled=progress) as bar:
        if len(shares) == 1:
            summary = run_trials(config, shares[0], rngs[0], progress=bar)
        else:
            logger.info("Sharing trials among %d workers: %s", len(shares), shares)
            with ThreadPoolExecutor(max_workers=len(shares)) as executor:
                futures = [
                    executor.submit(run_trials, config, share, rng, bar)
                    for share, rng in zip(shares, rngs)
                ]
                summary = reduce(TrialSummary.merge, [f.result() for f in futures])
    logger.info("Accepted %d trials, discarded %d", summary.accepted, summary.discarded)
    return summary
