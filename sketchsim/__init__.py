import importlib.metadata
from typing import Final

try:
    _version = importlib.metadata.version(__name__)
except importlib.metadata.PackageNotFoundError:
    _version = "0.0.0"  # Fallback for development mode
__version__: Final[str] = _version

from sketchsim.estimate import (
    approximate_jaccard,
    estimate_bottom_k,
    estimate_k_partition,
    exact_jaccard,
    union_bottom,
    union_partition,
)
from sketchsim.sampler import make_rng, sample_set
from sketchsim.sketch import (
    BottomKSketch,
    KPartitionSketch,
    bottom_k,
    k_partition,
    partition_indices,
)
from sketchsim.trials import (
    Moments,
    SimulationConfig,
    TrialObservation,
    TrialSummary,
    run_trial,
    run_trials,
    simulate,
)


__all__ = [
    "BottomKSketch",
    "KPartitionSketch",
    "Moments",
    "SimulationConfig",
    "TrialObservation",
    "TrialSummary",
    "approximate_jaccard",
    "bottom_k",
    "estimate_bottom_k",
    "estimate_k_partition",
    "exact_jaccard",
    "k_partition",
    "make_rng",
    "partition_indices",
    "run_trial",
    "run_trials",
    "sample_set",
    "simulate",
    "union_bottom",
    "union_partition",
]
