"""Text reports of simulation results."""

from __future__ import annotations

import math
from typing import Iterable, List, Sequence, Tuple

from scipy.stats import norm

from sketchsim.trials import Moments, TrialSummary

# Row labels, summary attribute of the quantity, and of its error.
_ROWS = (
    ("Exact Jaccard", "exact", None),
    ("Bottom k", "bottom_k", "bottom_k_error"),
    ("K partition", "k_partition", "k_partition_error"),
)


def confidence_interval(m: Moments, confidence: float = 0.95) -> Tuple[float, float]:
    """Normal approximation of the confidence interval of the mean."""
    if not (0.0 < confidence < 1.0):
        raise ValueError("confidence=%r should be in range (0 : 1)" % confidence)
    z = norm.ppf(0.5 + confidence / 2.0)
    half = z * m.std_error
    return (m.mean - half, m.mean + half)


def format_report(
    summary: TrialSummary,
    confidence: float = 0.95,
    legacy_variance: bool = False,
) -> str:
    """Format the mean, variance, bias and RMSE of the exact Jaccard
    similarity and of both estimators.

    Args:
        summary (TrialSummary): The simulation result.
        confidence (float): The level of the confidence intervals.
        legacy_variance (bool): Also print the variance figure of the first
            version of this simulation.
    """
    if summary.accepted == 0:
        raise ValueError("Cannot report on a summary without accepted trials")
    lines = [
        "Trials: %d accepted, %d discarded" % (summary.accepted, summary.discarded),
    ]
    for label, name, _ in _ROWS:
        m = getattr(summary, name)
        low, high = confidence_interval(m, confidence)
        lines.append("%s mean: %.6f (%g%% CI %.6f - %.6f)"
                     % (label, m.mean, confidence * 100, low, high))
    for label, name, _ in _ROWS:
        lines.append("%s variance: %.6g" % (label, getattr(summary, name).variance))
    if legacy_variance:
        for label, name, _ in _ROWS:
            lines.append("%s legacy variance: %.6g"
                         % (label, getattr(summary, name).legacy_variance))
    for label, _, error in _ROWS:
        if error is None:
            continue
        e = getattr(summary, error)
        lines.append("%s bias: %+.6f, RMSE: %.6f" % (label, e.mean, math.sqrt(e.mean_sq)))
    return "\n".join(lines)


def format_sweep(results: Iterable[Tuple[int, TrialSummary]]) -> str:
    """Format one row per sketch size."""
    header = "%8s %10s %10s %12s %10s %12s %10s" % (
        "k", "exact", "bottom_k", "bk_var", "k_part", "kp_var", "kp/bk_var")
    lines: List[str] = [header]
    for k, s in results:
        bk_var = s.bottom_k.variance
        kp_var = s.k_partition.variance
        ratio = kp_var / bk_var if bk_var > 0 else float("nan")
        lines.append("%8d %10.6f %10.6f %12.4g %10.6f %12.4g %10.3f" % (
            k, s.exact.mean, s.bottom_k.mean, bk_var, s.k_partition.mean, kp_var, ratio))
    return "\n".join(lines)


def plot_sweep(results: Sequence[Tuple[int, TrialSummary]], save: str) -> None:
    """Plot the variance of both estimators against the sketch size."""
    import matplotlib
    matplotlib.use('Agg')
    import matplotlib.pyplot as plt
    ks = [k for k, _ in results]
    fig, ax = plt.subplots(1, 1, figsize=(6, 4))
    ax.plot(ks, [s.bottom_k.variance for _, s in results], marker='+', label="Bottom k")
    ax.plot(ks, [s.k_partition.variance for _, s in results], marker='x', label="K partition")
    ax.plot(ks, [s.exact.variance for _, s in results], linestyle='--', color='black',
            label="Exact")
    ax.set_xlabel("Sketch size k")
    ax.set_ylabel("Variance of Jaccard estimate")
    ax.set_yscale("log")
    ax.set_title("Sketch estimator variance")
    ax.grid()
    ax.legend()
    fig.savefig(save)
    plt.close(fig)
