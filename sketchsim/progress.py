"""Progress bar helpers for long simulations."""

from __future__ import annotations

import sys
from tqdm.auto import tqdm


def make_progress(
    *,
    desc: str,
    total: int | None = None,
    unit: str | None = None,
    enabled: bool = True,
    leave: bool = False,
) -> "tqdm":
    """Return a configured tqdm progress bar if the session supports it."""

    return tqdm(
        total=total,
        desc=desc,
        unit=unit,
        dynamic_ncols=True,
        leave=leave,
        disable=not (enabled and sys.stderr.isatty()),
    )
