"""Typer-based CLI for the sketch simulation."""

from __future__ import annotations

import logging
from dataclasses import replace
from pathlib import Path
from typing import List, Optional

import typer

from sketchsim.report import format_report, format_sweep, plot_sweep
from sketchsim.trials import SimulationConfig, simulate

app = typer.Typer(help="Compare bottom-k and k-partition Jaccard estimators")


def _config(
    n: int,
    p1: float,
    p2: float,
    k: int,
    trials: int,
    seed: Optional[int],
    workers: int,
    max_discards: Optional[int],
) -> SimulationConfig:
    try:
        return SimulationConfig(
            n=n, p1=p1, p2=p2, k=k, num_trials=trials, seed=seed,
            workers=workers, max_discards=max_discards,
        )
    except ValueError as e:
        raise typer.BadParameter(str(e))


@app.callback()
def main(
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Log debug messages"),
) -> None:
    """Estimate Jaccard similarity from sketches of random sets."""

    logging.basicConfig(level=logging.DEBUG if verbose else logging.INFO)


@app.command("run")
def run(
    n: int = typer.Option(1_000_000, "--n", envvar="SKETCHSIM_N", help="Universe size"),
    p1: float = typer.Option(0.1, envvar="SKETCHSIM_P1", help="Inclusion probability of set 1"),
    p2: float = typer.Option(0.01, envvar="SKETCHSIM_P2", help="Inclusion probability of set 2"),
    k: int = typer.Option(1000, "--k", envvar="SKETCHSIM_K", help="Sketch size"),
    trials: int = typer.Option(10_000, envvar="SKETCHSIM_TRIALS", help="Accepted trials"),
    seed: Optional[int] = typer.Option(None, envvar="SKETCHSIM_SEED", help="Random seed"),
    workers: int = typer.Option(1, envvar="SKETCHSIM_WORKERS", min=1, help="Worker threads"),
    max_discards: Optional[int] = typer.Option(
        None, help="Give up after this many discarded trials per worker"
    ),
    confidence: float = typer.Option(0.95, help="Confidence level of the intervals"),
    legacy_variance: bool = typer.Option(
        False, "--legacy-variance", help="Also print the legacy variance figure"
    ),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress"),
) -> None:
    """Run the simulation and print the report."""

    config = _config(n, p1, p2, k, trials, seed, workers, max_discards)
    summary = simulate(config, progress=progress)
    typer.echo(format_report(summary, confidence=confidence,
                             legacy_variance=legacy_variance))


@app.command("sweep")
def sweep(
    ks: List[int] = typer.Option(..., "--k", help="Sketch size, repeat for each size"),
    n: int = typer.Option(1_000_000, "--n", envvar="SKETCHSIM_N", help="Universe size"),
    p1: float = typer.Option(0.1, envvar="SKETCHSIM_P1", help="Inclusion probability of set 1"),
    p2: float = typer.Option(0.01, envvar="SKETCHSIM_P2", help="Inclusion probability of set 2"),
    trials: int = typer.Option(1000, envvar="SKETCHSIM_TRIALS", help="Accepted trials per size"),
    seed: Optional[int] = typer.Option(None, envvar="SKETCHSIM_SEED", help="Random seed"),
    workers: int = typer.Option(1, envvar="SKETCHSIM_WORKERS", min=1, help="Worker threads"),
    plot: Optional[Path] = typer.Option(None, "--plot", help="Save a variance plot here"),
    progress: bool = typer.Option(True, "--progress/--no-progress", help="Show progress"),
) -> None:
    """Run one simulation per sketch size and print a comparison table."""

    base = _config(n, p1, p2, min(ks), trials, seed, workers, None)
    configs = []
    for k in sorted(set(ks)):
        try:
            configs.append(replace(base, k=k))
        except ValueError as e:
            raise typer.BadParameter(str(e), param_hint="--k")
    results = [(c.k, simulate(c, progress=progress)) for c in configs]
    typer.echo(format_sweep(results))
    if plot is not None:
        plot_sweep(results, str(plot))
        typer.echo(f"Plot saved to {plot}")
